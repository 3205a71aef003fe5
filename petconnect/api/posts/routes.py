# petconnect/api/posts/routes.py
import logging
from flask import Blueprint, request, jsonify, current_app
from flask_jwt_extended import jwt_required, get_jwt_identity
from marshmallow import ValidationError

from petconnect.api.posts.schemas import (
    PostCreateSchema, PostUpdateSchema, CommentContentSchema,
    PostResponseSchema, PostDetailResponseSchema
)

posts_bp = Blueprint('posts_bp', __name__)


@posts_bp.route('/', methods=['GET'])
@jwt_required()
def get_feed():
    """Every post, newest first."""
    post_service = current_app.services['posts']
    try:
        posts = post_service.get_feed(get_jwt_identity())
        return jsonify(PostResponseSchema(many=True).dump(posts)), 200
    except Exception as e:
        logging.error(f"feed fetch failed: {e}", exc_info=True)
        return jsonify({"error_code": "FEED_FETCH_FAILED", "message": "Failed to fetch posts"}), 500


@posts_bp.route('/user/<string:user_id>', methods=['GET'])
@jwt_required()
def get_user_posts(user_id: str):
    post_service = current_app.services['posts']
    try:
        posts = post_service.get_posts_by_user_id(user_id, get_jwt_identity())
        return jsonify(PostResponseSchema(many=True).dump(posts)), 200
    except Exception as e:
        logging.error(f"user posts fetch failed (user_id: {user_id}): {e}", exc_info=True)
        return jsonify({"error_code": "POST_FETCH_FAILED", "message": "Failed to fetch posts"}), 500


@posts_bp.route('/<string:post_id>', methods=['GET'])
@jwt_required()
def get_post(post_id: str):
    post_service = current_app.services['posts']
    try:
        post = post_service.get_post_populated(post_id, get_jwt_identity())
        if not post:
            return jsonify({"error_code": "POST_NOT_FOUND", "message": "Post not found"}), 404
        return jsonify(PostDetailResponseSchema().dump(post)), 200
    except Exception as e:
        logging.error(f"post fetch failed (post_id: {post_id}): {e}", exc_info=True)
        return jsonify({"error_code": "POST_FETCH_FAILED", "message": "Failed to fetch post"}), 500


@posts_bp.route('/', methods=['POST'])
@jwt_required()
def create_post():
    post_service = current_app.services['posts']
    user_id = get_jwt_identity()
    try:
        data = PostCreateSchema().load(request.get_json() or {})
        post = post_service.create_post(user_id, data)
        return jsonify(PostResponseSchema().dump(post)), 201
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    except PermissionError as e:
        return jsonify({"error_code": "FORBIDDEN", "message": str(e)}), 403
    except ValueError as e:
        return jsonify({"error_code": "RESOURCE_NOT_FOUND", "message": str(e)}), 404
    except Exception as e:
        logging.error(f"post creation failed (user_id: {user_id}): {e}", exc_info=True)
        return jsonify({"error_code": "POST_CREATION_FAILED", "message": "Failed to create post"}), 500


@posts_bp.route('/<string:post_id>', methods=['PUT'])
@jwt_required()
def update_post(post_id: str):
    post_service = current_app.services['posts']
    try:
        data = PostUpdateSchema().load(request.get_json() or {})
        post = post_service.update_post(post_id, get_jwt_identity(), data)
        return jsonify(PostResponseSchema().dump(post)), 200
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    except PermissionError as e:
        return jsonify({"error_code": "FORBIDDEN", "message": str(e)}), 403
    except ValueError as e:
        return jsonify({"error_code": "POST_NOT_FOUND", "message": str(e)}), 404
    except Exception as e:
        logging.error(f"post update failed (post_id: {post_id}): {e}", exc_info=True)
        return jsonify({"error_code": "POST_UPDATE_FAILED", "message": "Failed to update post"}), 500


@posts_bp.route('/<string:post_id>', methods=['DELETE'])
@jwt_required()
def delete_post(post_id: str):
    post_service = current_app.services['posts']
    try:
        post_service.delete_post(post_id, get_jwt_identity())
        return jsonify({"message": "Post deleted successfully"}), 200
    except PermissionError as e:
        return jsonify({"error_code": "FORBIDDEN", "message": str(e)}), 403
    except ValueError as e:
        return jsonify({"error_code": "POST_NOT_FOUND", "message": str(e)}), 404
    except Exception as e:
        logging.error(f"post deletion failed (post_id: {post_id}): {e}", exc_info=True)
        return jsonify({"error_code": "POST_DELETE_FAILED", "message": "Failed to delete post"}), 500


@posts_bp.route('/<string:post_id>/like', methods=['POST'])
@jwt_required()
def toggle_like(post_id: str):
    """Likes the post, or withdraws the like if the caller already liked it."""
    post_service = current_app.services['posts']
    user_id = get_jwt_identity()
    try:
        post = post_service.toggle_post_like(user_id, post_id)
        return jsonify(PostResponseSchema().dump(post)), 200
    except ValueError as e:
        return jsonify({"error_code": "POST_NOT_FOUND", "message": str(e)}), 404
    except Exception as e:
        logging.error(f"like toggle failed (user_id: {user_id}, post_id: {post_id}): {e}", exc_info=True)
        return jsonify({"error_code": "LIKE_TOGGLE_FAILED", "message": "Failed to update like"}), 500


@posts_bp.route('/<string:post_id>/comments', methods=['POST'])
@jwt_required()
def add_comment(post_id: str):
    post_service = current_app.services['posts']
    try:
        data = CommentContentSchema().load(request.get_json() or {})
        _, post = post_service.add_comment(post_id, get_jwt_identity(), data['content'])
        return jsonify(PostDetailResponseSchema().dump(post)), 201
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    except ValueError as e:
        return jsonify({"error_code": "POST_NOT_FOUND", "message": str(e)}), 404
    except Exception as e:
        logging.error(f"comment creation failed (post_id: {post_id}): {e}", exc_info=True)
        return jsonify({"error_code": "COMMENT_CREATION_FAILED", "message": "Failed to add comment"}), 500


@posts_bp.route('/<string:post_id>/comments/<string:comment_id>', methods=['DELETE'])
@jwt_required()
def delete_comment(post_id: str, comment_id: str):
    post_service = current_app.services['posts']
    try:
        post = post_service.delete_comment(comment_id, get_jwt_identity(), post_id=post_id)
        return jsonify(PostDetailResponseSchema().dump(post)), 200
    except PermissionError as e:
        return jsonify({"error_code": "FORBIDDEN", "message": str(e)}), 403
    except ValueError as e:
        return jsonify({"error_code": "COMMENT_NOT_FOUND", "message": str(e)}), 404
    except Exception as e:
        logging.error(f"comment deletion failed (comment_id: {comment_id}): {e}", exc_info=True)
        return jsonify({"error_code": "COMMENT_DELETE_FAILED", "message": "Failed to delete comment"}), 500
