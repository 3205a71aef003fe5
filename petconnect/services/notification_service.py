# petconnect/services/notification_service.py
import logging
import uuid
from dataclasses import asdict
from firebase_admin import firestore
from typing import Optional, Dict, Any, List

from petconnect.models.notification import Notification, NotificationType
from petconnect.utils.datetime_utils import DateTimeUtils

DEFAULT_PROFILE_PIC = '/default-profile.png'

class NotificationService:
    """
    Creates, lists and removes notifications.
    Likes and comments call into this service as side effects; nothing here is transactional.
    """
    def __init__(self):
        self.db = firestore.client()
        self.notifications_ref = self.db.collection('notifications')
        self.users_ref = self.db.collection('users')
        self.posts_ref = self.db.collection('posts')

    def create_notification(self, recipient_id: str, sender_id: str, n_type: NotificationType,
                            post_id: str, comment_id: Optional[str] = None,
                            content: Optional[str] = None) -> Optional[Dict[str, Any]]:
        """
        Stores a notification for recipient_id.
        - no notification for your own action
        - at most one LIKE notification per (recipient, sender, post)

        :return: the stored document, or None when nothing was created
        """
        if recipient_id == sender_id:
            return None

        if n_type == NotificationType.LIKE and self._find_like_notification(recipient_id, sender_id, post_id):
            logging.info(f"like notification already exists: {sender_id} -> {recipient_id} (post {post_id})")
            return None

        notification = Notification(
            notification_id=str(uuid.uuid4()),
            user_id=recipient_id,
            type=n_type,
            sender_id=sender_id,
            post_id=post_id,
            comment_id=comment_id,
            content=content
        )
        # Enum members are stored by value
        notification_dict = asdict(notification)
        notification_dict['type'] = notification.type.value
        notification_dict = DateTimeUtils.for_firestore(notification_dict)

        self.notifications_ref.document(notification.notification_id).set(notification_dict)
        logging.info(f"{n_type.value} notification created: {sender_id} -> {recipient_id}")
        return notification_dict

    def delete_like_notification(self, recipient_id: str, sender_id: str, post_id: str) -> int:
        """Removes the LIKE notification left by a like that is being withdrawn."""
        deleted = 0
        for doc in self._find_like_notification(recipient_id, sender_id, post_id):
            doc.reference.delete()
            deleted += 1
        return deleted

    def delete_comment_notifications(self, comment_id: str) -> int:
        deleted = 0
        for doc in self.notifications_ref.where('comment_id', '==', comment_id).stream():
            doc.reference.delete()
            deleted += 1
        return deleted

    def _find_like_notification(self, recipient_id: str, sender_id: str, post_id: str) -> list:
        query = (self.notifications_ref
                 .where('user_id', '==', recipient_id)
                 .where('sender_id', '==', sender_id)
                 .where('post_id', '==', post_id)
                 .where('type', '==', NotificationType.LIKE.value))
        return list(query.stream())

    # --- read side ---

    def get_notifications(self, user_id: str, page: int = 1, limit: int = 20) -> List[Dict[str, Any]]:
        """The user's notifications, newest first, formatted with sender and post details."""
        docs = [doc.to_dict() for doc in self.notifications_ref.where('user_id', '==', user_id).stream()]
        docs.sort(key=lambda n: DateTimeUtils.coerce_datetime(n.get('created_at')), reverse=True)

        page = max(page, 1)
        start = (page - 1) * limit
        return [self._format(n) for n in docs[start:start + limit]]

    def count_unread(self, user_id: str) -> int:
        query = self.notifications_ref.where('user_id', '==', user_id).where('read', '==', False)
        return len(list(query.stream()))

    def mark_as_read(self, notification_id: str, user_id: str) -> Dict[str, Any]:
        ref = self.notifications_ref.document(notification_id)
        doc = ref.get()
        if not doc.exists:
            raise ValueError("Notification not found")
        if doc.to_dict().get('user_id') != user_id:
            raise PermissionError("You can only update your own notifications")
        ref.update({'read': True})
        return self._format(ref.get().to_dict())

    def mark_all_as_read(self, user_id: str) -> int:
        query = self.notifications_ref.where('user_id', '==', user_id).where('read', '==', False)
        updated = 0
        for doc in query.stream():
            doc.reference.update({'read': True})
            updated += 1
        return updated

    def delete_notification(self, notification_id: str, user_id: str) -> None:
        ref = self.notifications_ref.document(notification_id)
        doc = ref.get()
        if not doc.exists:
            raise ValueError("Notification not found")
        if doc.to_dict().get('user_id') != user_id:
            raise PermissionError("You can only delete your own notifications")
        ref.delete()

    def _format(self, notification: Dict[str, Any]) -> Dict[str, Any]:
        """Populates sender and post. Dangling references (deleted post/sender) yield None fields."""
        sender_doc = self.users_ref.document(notification.get('sender_id')).get()
        sender = sender_doc.to_dict() if sender_doc.exists else {}
        post_doc = self.posts_ref.document(notification.get('post_id')).get()
        post = post_doc.to_dict() if post_doc.exists else {}

        formatted = dict(notification)
        formatted['sender_username'] = sender.get('username')
        formatted['sender_profile_pic'] = sender.get('profile_pic') or DEFAULT_PROFILE_PIC
        formatted['post_image'] = post.get('media')
        return formatted

