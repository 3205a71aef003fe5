# petconnect/api/users/routes.py
import re
import logging
from flask import Blueprint, request, jsonify, current_app
from flask_jwt_extended import jwt_required, get_jwt_identity
from marshmallow import ValidationError

from petconnect.api.auth.schemas import USERNAME_PATTERN
from petconnect.api.users.schemas import (
    UserUpdateSchema, SavedPostSchema, UserPublicResponseSchema, UserResponseSchema
)
from petconnect.core.security import DuplicateFieldError

users_bp = Blueprint('users_bp', __name__)

EMAIL_PATTERN = r'^[^\s@]+@[^\s@]+\.[^\s@]+$'


@users_bp.route('/', methods=['GET'])
@jwt_required()
def list_users():
    user_service = current_app.services['users']
    try:
        users = user_service.list_users()
        return jsonify(UserPublicResponseSchema(many=True).dump(users)), 200
    except Exception as e:
        logging.error(f"user list failed: {e}", exc_info=True)
        return jsonify({"error_code": "USER_LIST_FAILED", "message": "Failed to fetch users"}), 500


@users_bp.route('/<string:user_id>', methods=['GET'])
@jwt_required()
def get_user(user_id: str):
    """User with populated pets and saved posts."""
    user_service = current_app.services['users']
    try:
        user = user_service.get_user_populated(user_id)
        if not user:
            return jsonify({"error_code": "USER_NOT_FOUND", "message": "User not found"}), 404
        return jsonify(UserResponseSchema().dump(user)), 200
    except Exception as e:
        logging.error(f"user fetch failed (user_id: {user_id}): {e}", exc_info=True)
        return jsonify({"error_code": "USER_FETCH_FAILED", "message": "Failed to fetch user"}), 500


@users_bp.route('/check/username/<string:username>', methods=['GET'])
def check_username(username: str):
    user_service = current_app.services['users']
    exclude_user_id = request.args.get('exclude_user_id')

    if len(username) < 3:
        return jsonify({"available": False, "message": "Username must be at least 3 characters long"}), 400
    if len(username) > 30:
        return jsonify({"available": False, "message": "Username cannot exceed 30 characters"}), 400
    if not re.match(USERNAME_PATTERN, username):
        return jsonify({"available": False,
                        "message": "Username can only contain letters, numbers, dots, and underscores"}), 400

    try:
        if user_service.is_username_available(username, exclude_user_id):
            return jsonify({"available": True, "message": "Username is available"}), 200
        return jsonify({"available": False, "message": "Username is already taken"}), 200
    except Exception as e:
        logging.error(f"username check failed ({username}): {e}", exc_info=True)
        return jsonify({"error_code": "CHECK_FAILED", "message": "Failed to check username"}), 500


@users_bp.route('/check/email/<string:email>', methods=['GET'])
def check_email(email: str):
    user_service = current_app.services['users']
    exclude_user_id = request.args.get('exclude_user_id')

    if not re.match(EMAIL_PATTERN, email):
        return jsonify({"available": False, "message": "Please provide a valid email address"}), 400

    try:
        if user_service.is_email_available(email, exclude_user_id):
            return jsonify({"available": True, "message": "Email is available"}), 200
        return jsonify({"available": False, "message": "User with this email already exists"}), 200
    except Exception as e:
        logging.error(f"email check failed ({email}): {e}", exc_info=True)
        return jsonify({"error_code": "CHECK_FAILED", "message": "Failed to check email"}), 500


@users_bp.route('/<string:user_id>', methods=['PUT'])
@jwt_required()
def update_user(user_id: str):
    """
    Updates the caller's profile.
    A new username is also written onto every post the user authored.
    """
    user_service = current_app.services['users']
    try:
        data = UserUpdateSchema().load(request.get_json() or {})
        updated_user = user_service.update_user(user_id, get_jwt_identity(), data)
        return jsonify(UserResponseSchema().dump(updated_user)), 200
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    except DuplicateFieldError as e:
        return jsonify({"error_code": "DUPLICATE_FIELD", "message": e.message, "field": e.field}), 400
    except PermissionError as e:
        return jsonify({"error_code": "FORBIDDEN", "message": str(e)}), 403
    except ValueError as e:
        return jsonify({"error_code": "USER_NOT_FOUND", "message": str(e)}), 404
    except Exception as e:
        logging.error(f"user update failed (user_id: {user_id}): {e}", exc_info=True)
        return jsonify({"error_code": "USER_UPDATE_FAILED", "message": "Failed to update user"}), 500


@users_bp.route('/<string:user_id>', methods=['DELETE'])
@jwt_required()
def delete_user(user_id: str):
    user_service = current_app.services['users']
    try:
        user_service.delete_user(user_id, get_jwt_identity())
        return jsonify({"message": "User deleted successfully"}), 200
    except PermissionError as e:
        return jsonify({"error_code": "FORBIDDEN", "message": str(e)}), 403
    except ValueError as e:
        return jsonify({"error_code": "USER_NOT_FOUND", "message": str(e)}), 404
    except Exception as e:
        logging.error(f"user deletion failed (user_id: {user_id}): {e}", exc_info=True)
        return jsonify({"error_code": "USER_DELETE_FAILED", "message": "Failed to delete user"}), 500


@users_bp.route('/<string:user_id>/saved-posts', methods=['POST'])
@jwt_required()
def add_saved_post(user_id: str):
    user_service = current_app.services['users']
    try:
        data = SavedPostSchema().load(request.get_json() or {})
        user = user_service.add_saved_post(user_id, get_jwt_identity(), data['post_id'])
        return jsonify(UserResponseSchema().dump(user)), 200
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    except PermissionError as e:
        return jsonify({"error_code": "FORBIDDEN", "message": str(e)}), 403
    except ValueError as e:
        return jsonify({"error_code": "RESOURCE_NOT_FOUND", "message": str(e)}), 404
    except Exception as e:
        logging.error(f"save post failed (user_id: {user_id}): {e}", exc_info=True)
        return jsonify({"error_code": "SAVE_POST_FAILED", "message": "Failed to save post"}), 500


@users_bp.route('/<string:user_id>/saved-posts/<string:post_id>', methods=['DELETE'])
@jwt_required()
def remove_saved_post(user_id: str, post_id: str):
    user_service = current_app.services['users']
    try:
        user = user_service.remove_saved_post(user_id, get_jwt_identity(), post_id)
        return jsonify(UserResponseSchema().dump(user)), 200
    except PermissionError as e:
        return jsonify({"error_code": "FORBIDDEN", "message": str(e)}), 403
    except ValueError as e:
        return jsonify({"error_code": "USER_NOT_FOUND", "message": str(e)}), 404
    except Exception as e:
        logging.error(f"unsave post failed (user_id: {user_id}): {e}", exc_info=True)
        return jsonify({"error_code": "UNSAVE_POST_FAILED", "message": "Failed to remove saved post"}), 500
