# petconnect/api/chats/routes.py
import logging
from flask import Blueprint, request, jsonify, current_app
from flask_jwt_extended import jwt_required, get_jwt_identity
from marshmallow import ValidationError

from petconnect.api.chats.schemas import ChatCreateSchema, ChatResponseSchema, ChatDetailResponseSchema
from petconnect.api.messages.schemas import MessageContentSchema, MessageResponseSchema

chats_bp = Blueprint('chats_bp', __name__)


@chats_bp.route('/', methods=['GET'])
@jwt_required()
def list_chats():
    chat_service = current_app.services['chats']
    user_id = get_jwt_identity()
    try:
        chats = chat_service.list_chats(user_id)
        return jsonify(ChatResponseSchema(many=True).dump(chats)), 200
    except Exception as e:
        logging.error(f"chat list failed (user_id: {user_id}): {e}", exc_info=True)
        return jsonify({"error_code": "CHAT_LIST_FAILED", "message": "Failed to fetch chats"}), 500


@chats_bp.route('/<string:chat_id>', methods=['GET'])
@jwt_required()
def get_chat(chat_id: str):
    chat_service = current_app.services['chats']
    try:
        chat = chat_service.get_chat(chat_id, get_jwt_identity())
        return jsonify(ChatDetailResponseSchema().dump(chat)), 200
    except PermissionError as e:
        return jsonify({"error_code": "FORBIDDEN", "message": str(e)}), 403
    except ValueError as e:
        return jsonify({"error_code": "CHAT_NOT_FOUND", "message": str(e)}), 404
    except Exception as e:
        logging.error(f"chat fetch failed (chat_id: {chat_id}): {e}", exc_info=True)
        return jsonify({"error_code": "CHAT_FETCH_FAILED", "message": "Failed to fetch chat"}), 500


@chats_bp.route('/', methods=['POST'])
@jwt_required()
def create_chat():
    """Returns the chat with participant_id, creating it on first contact."""
    chat_service = current_app.services['chats']
    user_id = get_jwt_identity()
    try:
        data = ChatCreateSchema().load(request.get_json() or {})
        if data['participant_id'] == user_id:
            return jsonify({"error_code": "INVALID_PARTICIPANT", "message": "You cannot start a chat with yourself"}), 400
        chat = chat_service.get_or_create_chat(user_id, data['participant_id'])
        return jsonify(ChatResponseSchema().dump(chat)), 201
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    except ValueError as e:
        return jsonify({"error_code": "USER_NOT_FOUND", "message": str(e)}), 404
    except Exception as e:
        logging.error(f"chat creation failed (user_id: {user_id}): {e}", exc_info=True)
        return jsonify({"error_code": "CHAT_CREATION_FAILED", "message": "Failed to create chat"}), 500


@chats_bp.route('/<string:chat_id>/messages', methods=['POST'])
@jwt_required()
def send_chat_message(chat_id: str):
    chat_service = current_app.services['chats']
    try:
        data = MessageContentSchema().load(request.get_json() or {})
        message = chat_service.send_message(chat_id, get_jwt_identity(), data['content'])
        return jsonify(MessageResponseSchema().dump(message)), 201
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    except PermissionError as e:
        return jsonify({"error_code": "FORBIDDEN", "message": str(e)}), 403
    except ValueError as e:
        return jsonify({"error_code": "CHAT_NOT_FOUND", "message": str(e)}), 404
    except Exception as e:
        logging.error(f"chat message failed (chat_id: {chat_id}): {e}", exc_info=True)
        return jsonify({"error_code": "MESSAGE_SEND_FAILED", "message": "Error sending message"}), 500


@chats_bp.route('/<string:chat_id>', methods=['DELETE'])
@jwt_required()
def delete_chat(chat_id: str):
    chat_service = current_app.services['chats']
    try:
        chat_service.delete_chat(chat_id, get_jwt_identity())
        return jsonify({"message": "Chat deleted successfully"}), 200
    except PermissionError as e:
        return jsonify({"error_code": "FORBIDDEN", "message": str(e)}), 403
    except ValueError as e:
        return jsonify({"error_code": "CHAT_NOT_FOUND", "message": str(e)}), 404
    except Exception as e:
        logging.error(f"chat deletion failed (chat_id: {chat_id}): {e}", exc_info=True)
        return jsonify({"error_code": "CHAT_DELETE_FAILED", "message": "Failed to delete chat"}), 500
