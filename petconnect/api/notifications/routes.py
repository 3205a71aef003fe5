# petconnect/api/notifications/routes.py
import logging
from flask import Blueprint, request, jsonify, current_app
from flask_jwt_extended import jwt_required, get_jwt_identity

from petconnect.api.notifications.schemas import NotificationResponseSchema

notifications_bp = Blueprint('notifications_bp', __name__)


@notifications_bp.route('/', methods=['GET'])
@jwt_required()
def get_notifications():
    """The caller's notifications, newest first."""
    notification_service = current_app.services['notifications']
    user_id = get_jwt_identity()
    page = request.args.get('page', 1, type=int)
    limit = request.args.get('limit', 20, type=int)
    try:
        notifications = notification_service.get_notifications(user_id, page, limit)
        return jsonify(NotificationResponseSchema(many=True).dump(notifications)), 200
    except Exception as e:
        logging.error(f"notification list failed (user_id: {user_id}): {e}", exc_info=True)
        return jsonify({"error_code": "NOTIFICATION_FETCH_FAILED", "message": "Failed to fetch notifications"}), 500


@notifications_bp.route('/unread-count', methods=['GET'])
@jwt_required()
def get_unread_count():
    notification_service = current_app.services['notifications']
    try:
        return jsonify({"unread_count": notification_service.count_unread(get_jwt_identity())}), 200
    except Exception as e:
        logging.error(f"notification unread count failed: {e}", exc_info=True)
        return jsonify({"error_code": "UNREAD_COUNT_FAILED", "message": "Failed to count notifications"}), 500


@notifications_bp.route('/read-all', methods=['PUT'])
@jwt_required()
def mark_all_read():
    notification_service = current_app.services['notifications']
    try:
        updated = notification_service.mark_all_as_read(get_jwt_identity())
        return jsonify({"message": "All notifications marked as read", "updated_count": updated}), 200
    except Exception as e:
        logging.error(f"mark all notifications read failed: {e}", exc_info=True)
        return jsonify({"error_code": "NOTIFICATION_UPDATE_FAILED", "message": "Failed to update notifications"}), 500


@notifications_bp.route('/<string:notification_id>/read', methods=['PUT'])
@jwt_required()
def mark_read(notification_id: str):
    notification_service = current_app.services['notifications']
    try:
        notification = notification_service.mark_as_read(notification_id, get_jwt_identity())
        return jsonify(NotificationResponseSchema().dump(notification)), 200
    except PermissionError as e:
        return jsonify({"error_code": "FORBIDDEN", "message": str(e)}), 403
    except ValueError as e:
        return jsonify({"error_code": "NOTIFICATION_NOT_FOUND", "message": str(e)}), 404
    except Exception as e:
        logging.error(f"mark notification read failed ({notification_id}): {e}", exc_info=True)
        return jsonify({"error_code": "NOTIFICATION_UPDATE_FAILED", "message": "Failed to update notification"}), 500


@notifications_bp.route('/<string:notification_id>', methods=['DELETE'])
@jwt_required()
def delete_notification(notification_id: str):
    notification_service = current_app.services['notifications']
    try:
        notification_service.delete_notification(notification_id, get_jwt_identity())
        return jsonify({"message": "Notification deleted"}), 200
    except PermissionError as e:
        return jsonify({"error_code": "FORBIDDEN", "message": str(e)}), 403
    except ValueError as e:
        return jsonify({"error_code": "NOTIFICATION_NOT_FOUND", "message": str(e)}), 404
    except Exception as e:
        logging.error(f"notification delete failed ({notification_id}): {e}", exc_info=True)
        return jsonify({"error_code": "NOTIFICATION_DELETE_FAILED", "message": "Failed to delete notification"}), 500
