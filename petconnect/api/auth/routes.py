# petconnect/api/auth/routes.py

import logging
from flask import Blueprint, request, jsonify, current_app
from flask_jwt_extended import create_access_token, jwt_required, get_jwt_identity, get_jwt
from marshmallow import ValidationError

from petconnect.api.auth.schemas import SignupSchema, LoginSchema, AuthUserSchema
from petconnect.core.security import DuplicateFieldError

auth_bp = Blueprint('auth_bp', __name__)


@auth_bp.route('/signup', methods=['POST'])
def signup():
    """Creates an account and signs it in."""
    auth_service = current_app.services['auth']
    try:
        data = SignupSchema().load(request.get_json() or {})
        user = auth_service.register_user(data['username'], data['email'], data['password'])
        token = create_access_token(identity=user['user_id'])
        return jsonify({
            "message": "User registered successfully",
            "token": token,
            "user": AuthUserSchema().dump(user)
        }), 201
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    except DuplicateFieldError as e:
        return jsonify({"error_code": "DUPLICATE_FIELD", "message": e.message, "field": e.field}), 400
    except Exception as e:
        logging.error(f"signup failed: {e}", exc_info=True)
        return jsonify({"error_code": "SIGNUP_FAILED", "message": "Server error during registration"}), 500


@auth_bp.route('/login', methods=['POST'])
def login():
    auth_service = current_app.services['auth']
    try:
        data = LoginSchema().load(request.get_json() or {})
        user = auth_service.authenticate(data['identifier'], data['password'])
        if not user:
            return jsonify({"error_code": "INVALID_CREDENTIALS", "message": "Invalid credentials"}), 401

        token = create_access_token(identity=user['user_id'])
        return jsonify({
            "message": "Login successful",
            "token": token,
            "user": AuthUserSchema().dump(user)
        }), 200
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    except Exception as e:
        logging.error(f"login failed: {e}", exc_info=True)
        return jsonify({"error_code": "LOGIN_FAILED", "message": "Server error during login"}), 500


@auth_bp.route('/me', methods=['GET'])
@jwt_required()
def get_me():
    auth_service = current_app.services['auth']
    user = auth_service.get_user(get_jwt_identity())
    if not user:
        return jsonify({"error_code": "USER_NOT_FOUND", "message": "User not found"}), 404
    return jsonify(AuthUserSchema().dump(user)), 200


@auth_bp.route('/verify-token', methods=['POST'])
@jwt_required()
def verify_token():
    """Tells the client whether its stored token still maps to a user."""
    auth_service = current_app.services['auth']
    user = auth_service.get_user(get_jwt_identity())
    if not user:
        return jsonify({"valid": False, "message": "User not found"}), 401
    return jsonify({"valid": True, "user": AuthUserSchema().dump(user)}), 200


@auth_bp.route('/logout', methods=['POST'])
@jwt_required()
def logout():
    """Revokes the presented access token."""
    auth_service = current_app.services['auth']
    claims = get_jwt()
    try:
        auth_service.logout_user(claims['jti'], claims['exp'])
        return jsonify({"message": "Logged out"}), 200
    except Exception as e:
        logging.error(f"logout failed: {e}", exc_info=True)
        return jsonify({"error_code": "LOGOUT_FAILED", "message": "Server error during logout"}), 500
