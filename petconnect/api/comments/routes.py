# petconnect/api/comments/routes.py
import logging
from flask import Blueprint, request, jsonify, current_app
from flask_jwt_extended import jwt_required, get_jwt_identity
from marshmallow import ValidationError

from petconnect.api.comments.schemas import CommentCreateSchema, CommentUpdateSchema, CommentResponseSchema

comments_bp = Blueprint('comments_bp', __name__)


@comments_bp.route('/', methods=['GET'])
@jwt_required()
def list_comments():
    comment_service = current_app.services['comments']
    post_id = request.args.get('post_id')
    try:
        comments = comment_service.list_comments(post_id)
        return jsonify(CommentResponseSchema(many=True).dump(comments)), 200
    except Exception as e:
        logging.error(f"comment list failed (post_id: {post_id}): {e}", exc_info=True)
        return jsonify({"error_code": "COMMENT_LIST_FAILED", "message": "Failed to fetch comments"}), 500


@comments_bp.route('/<string:comment_id>', methods=['GET'])
@jwt_required()
def get_comment(comment_id: str):
    comment_service = current_app.services['comments']
    try:
        comment = comment_service.get_comment(comment_id)
        if not comment:
            return jsonify({"error_code": "COMMENT_NOT_FOUND", "message": "Comment not found"}), 404
        return jsonify(CommentResponseSchema().dump(comment)), 200
    except Exception as e:
        logging.error(f"comment fetch failed (comment_id: {comment_id}): {e}", exc_info=True)
        return jsonify({"error_code": "COMMENT_FETCH_FAILED", "message": "Failed to fetch comment"}), 500


@comments_bp.route('/', methods=['POST'])
@jwt_required()
def create_comment():
    """Same effects as POST /api/posts/<post_id>/comments; answers with the comment only."""
    comment_service = current_app.services['comments']
    try:
        data = CommentCreateSchema().load(request.get_json() or {})
        comment = comment_service.create_comment(data['post_id'], get_jwt_identity(), data['content'])
        return jsonify(CommentResponseSchema().dump(comment)), 201
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    except ValueError as e:
        return jsonify({"error_code": "RESOURCE_NOT_FOUND", "message": str(e)}), 404
    except Exception as e:
        logging.error(f"comment creation failed: {e}", exc_info=True)
        return jsonify({"error_code": "COMMENT_CREATION_FAILED", "message": "Failed to add comment"}), 500


@comments_bp.route('/<string:comment_id>', methods=['PUT'])
@jwt_required()
def update_comment(comment_id: str):
    comment_service = current_app.services['comments']
    try:
        data = CommentUpdateSchema().load(request.get_json() or {})
        comment = comment_service.update_comment(comment_id, get_jwt_identity(), data['content'])
        return jsonify(CommentResponseSchema().dump(comment)), 200
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    except PermissionError as e:
        return jsonify({"error_code": "FORBIDDEN", "message": str(e)}), 403
    except ValueError as e:
        return jsonify({"error_code": "COMMENT_NOT_FOUND", "message": str(e)}), 404
    except Exception as e:
        logging.error(f"comment update failed (comment_id: {comment_id}): {e}", exc_info=True)
        return jsonify({"error_code": "COMMENT_UPDATE_FAILED", "message": "Failed to update comment"}), 500


@comments_bp.route('/<string:comment_id>', methods=['DELETE'])
@jwt_required()
def delete_comment(comment_id: str):
    comment_service = current_app.services['comments']
    try:
        comment_service.delete_comment(comment_id, get_jwt_identity())
        return jsonify({"message": "Comment deleted successfully"}), 200
    except PermissionError as e:
        return jsonify({"error_code": "FORBIDDEN", "message": str(e)}), 403
    except ValueError as e:
        return jsonify({"error_code": "COMMENT_NOT_FOUND", "message": str(e)}), 404
    except Exception as e:
        logging.error(f"comment deletion failed (comment_id: {comment_id}): {e}", exc_info=True)
        return jsonify({"error_code": "COMMENT_DELETE_FAILED", "message": "Failed to delete comment"}), 500
