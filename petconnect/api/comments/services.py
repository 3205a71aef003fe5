# petconnect/api/comments/services.py
from typing import Optional, Dict, Any, List
from firebase_admin import firestore

from petconnect.utils.datetime_utils import DateTimeUtils


class CommentService:
    """
    Comment reads and edits. Creation and deletion go through PostService so the
    post's comment list, comments_count and the notifications are kept in step.
    """
    def __init__(self, post_service):
        self.db = firestore.client()
        self.comments_ref = self.db.collection('comments')
        self.post_service = post_service

    def list_comments(self, post_id: Optional[str] = None) -> List[Dict[str, Any]]:
        """Comments, newest first, optionally limited to one post."""
        query = self.comments_ref.where('post_id', '==', post_id) if post_id else self.comments_ref
        comments = [doc.to_dict() for doc in query.stream() if doc.exists]
        comments.sort(key=lambda c: DateTimeUtils.coerce_datetime(c.get('created_at')), reverse=True)
        return [self.post_service.populate_comment(c) for c in comments]

    def get_comment(self, comment_id: str) -> Optional[Dict[str, Any]]:
        doc = self.comments_ref.document(comment_id).get()
        if not doc.exists:
            return None
        return self.post_service.populate_comment(doc.to_dict())

    def create_comment(self, post_id: str, user_id: str, content: str) -> Dict[str, Any]:
        comment, _ = self.post_service.add_comment(post_id, user_id, content)
        return comment

    def update_comment(self, comment_id: str, user_id: str, content: str) -> Dict[str, Any]:
        comment_ref = self.comments_ref.document(comment_id)
        doc = comment_ref.get()
        if not doc.exists:
            raise ValueError("Comment not found")
        if doc.to_dict().get('user_id') != user_id:
            raise PermissionError("You can only edit your own comments")

        comment_ref.update({'content': content.strip(), 'updated_at': DateTimeUtils.now()})
        return self.post_service.populate_comment(comment_ref.get().to_dict())

    def delete_comment(self, comment_id: str, user_id: str) -> None:
        self.post_service.delete_comment(comment_id, user_id)
