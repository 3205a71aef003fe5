# petconnect/api/messages/routes.py
import logging
from flask import Blueprint, request, jsonify, current_app
from flask_jwt_extended import jwt_required, get_jwt_identity
from marshmallow import ValidationError

from petconnect.api.messages.schemas import (
    MessageSendSchema, MarkReadSchema, MessageResponseSchema,
    ConversationSchema, ThreadResponseSchema
)

messages_bp = Blueprint('messages_bp', __name__)


@messages_bp.route('/send', methods=['POST'])
@jwt_required()
def send_message():
    message_service = current_app.services['messages']
    sender_id = get_jwt_identity()
    try:
        data = MessageSendSchema().load(request.get_json() or {})
        if data['receiver_id'] == sender_id:
            return jsonify({"error_code": "INVALID_RECEIVER", "message": "You cannot send a message to yourself"}), 400
        message = message_service.send_message(sender_id, data['receiver_id'], data['content'])
        return jsonify(MessageResponseSchema().dump(message)), 201
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    except ValueError as e:
        return jsonify({"error_code": "RECEIVER_NOT_FOUND", "message": str(e)}), 404
    except Exception as e:
        logging.error(f"message send failed (sender_id: {sender_id}): {e}", exc_info=True)
        return jsonify({"error_code": "MESSAGE_SEND_FAILED", "message": "Error sending message"}), 500


@messages_bp.route('/conversations', methods=['GET'])
@jwt_required()
def get_conversations():
    message_service = current_app.services['messages']
    user_id = get_jwt_identity()
    try:
        conversations = message_service.get_conversations(user_id)
        return jsonify(ConversationSchema(many=True).dump(conversations)), 200
    except Exception as e:
        logging.error(f"conversation list failed (user_id: {user_id}): {e}", exc_info=True)
        return jsonify({"error_code": "CONVERSATION_FETCH_FAILED", "message": "Error fetching messages"}), 500


@messages_bp.route('/thread/<string:other_user_id>', methods=['GET'])
@jwt_required()
def get_thread(other_user_id: str):
    message_service = current_app.services['messages']
    page = request.args.get('page', 1, type=int)
    limit = request.args.get('limit', 50, type=int)
    try:
        thread = message_service.get_thread(get_jwt_identity(), other_user_id, page, limit)
        return jsonify(ThreadResponseSchema().dump(thread)), 200
    except Exception as e:
        logging.error(f"thread fetch failed (other_user_id: {other_user_id}): {e}", exc_info=True)
        return jsonify({"error_code": "THREAD_FETCH_FAILED", "message": "Error fetching conversation thread"}), 500


@messages_bp.route('/mark-read', methods=['PATCH'])
@jwt_required()
def mark_read():
    message_service = current_app.services['messages']
    try:
        data = MarkReadSchema().load(request.get_json() or {})
        updated = message_service.mark_as_read(get_jwt_identity(), data['sender_id'])
        return jsonify({"message": "Messages marked as read", "updated_count": updated}), 200
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    except Exception as e:
        logging.error(f"mark read failed: {e}", exc_info=True)
        return jsonify({"error_code": "MARK_READ_FAILED", "message": "Error marking messages as read"}), 500


@messages_bp.route('/unread/count', methods=['GET'])
@jwt_required()
def unread_count():
    message_service = current_app.services['messages']
    try:
        return jsonify({"unread_count": message_service.count_unread(get_jwt_identity())}), 200
    except Exception as e:
        logging.error(f"unread count failed: {e}", exc_info=True)
        return jsonify({"error_code": "UNREAD_COUNT_FAILED", "message": "Error getting unread message count"}), 500


@messages_bp.route('/<string:message_id>', methods=['DELETE'])
@jwt_required()
def delete_message(message_id: str):
    message_service = current_app.services['messages']
    try:
        message_service.delete_message(message_id, get_jwt_identity())
        return jsonify({"message": "Message deleted"}), 200
    except PermissionError as e:
        return jsonify({"error_code": "FORBIDDEN", "message": str(e)}), 403
    except ValueError as e:
        return jsonify({"error_code": "MESSAGE_NOT_FOUND", "message": str(e)}), 404
    except Exception as e:
        logging.error(f"message delete failed (message_id: {message_id}): {e}", exc_info=True)
        return jsonify({"error_code": "MESSAGE_DELETE_FAILED", "message": "Error deleting message"}), 500
