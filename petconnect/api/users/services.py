# petconnect/api/users/services.py
import logging
from typing import Optional, Dict, Any, List
from firebase_admin import firestore

from petconnect.core.security import DuplicateFieldError
from petconnect.utils.datetime_utils import DateTimeUtils

USERNAME_TAKEN_MESSAGE = "Username is already taken. Please choose a different username."
EMAIL_TAKEN_MESSAGE = "Email is already registered. Please use a different email."


class UserService:
    """
    User profiles, availability checks and saved posts.
    Renames are pushed into the author copies kept on posts through post_service.
    """
    def __init__(self, post_service):
        self.db = firestore.client()
        self.users_ref = self.db.collection('users')
        self.pets_ref = self.db.collection('pets')
        self.posts_ref = self.db.collection('posts')
        self.post_service = post_service

    def list_users(self) -> List[Dict[str, Any]]:
        return [doc.to_dict() for doc in self.users_ref.stream() if doc.exists]

    def get_user(self, user_id: str) -> Optional[Dict[str, Any]]:
        doc = self.users_ref.document(user_id).get()
        return doc.to_dict() if doc.exists else None

    def get_user_populated(self, user_id: str) -> Optional[Dict[str, Any]]:
        """User with pets and saved_posts replaced by their documents. Dangling ids are dropped."""
        user = self.get_user(user_id)
        if not user:
            return None
        user['pets'] = self._fetch_all(self.pets_ref, user.get('pets', []))
        user['saved_posts'] = self._fetch_all(self.posts_ref, user.get('saved_posts', []))
        return user

    # --- availability ---
    def is_username_available(self, username: str, exclude_user_id: Optional[str] = None) -> bool:
        query = self.users_ref.where('username_lower', '==', username.lower())
        return not any(doc.to_dict().get('user_id') != exclude_user_id for doc in query.stream())

    def is_email_available(self, email: str, exclude_user_id: Optional[str] = None) -> bool:
        query = self.users_ref.where('email', '==', email.strip().lower())
        return not any(doc.to_dict().get('user_id') != exclude_user_id for doc in query.stream())

    # --- writes ---
    def update_user(self, user_id: str, acting_user_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Overwrites the supplied profile fields.
        A username change is copied onto the user's posts afterwards; if that copy fails
        the error is logged and the profile update still stands.
        """
        if user_id != acting_user_id:
            raise PermissionError("You can only update your own profile")

        user_ref = self.users_ref.document(user_id)
        doc = user_ref.get()
        if not doc.exists:
            raise ValueError("User not found")
        current = doc.to_dict()

        update_data = dict(data)
        new_username = update_data.get('username')
        is_username_changing = bool(new_username) and new_username != current.get('username')

        if is_username_changing:
            if not self.is_username_available(new_username, exclude_user_id=user_id):
                raise DuplicateFieldError('username', USERNAME_TAKEN_MESSAGE)
            update_data['username_lower'] = new_username.lower()
        else:
            update_data.pop('username', None)

        if 'email' in update_data:
            update_data['email'] = update_data['email'].strip().lower()
            if not self.is_email_available(update_data['email'], exclude_user_id=user_id):
                raise DuplicateFieldError('email', EMAIL_TAKEN_MESSAGE)

        update_data['updated_at'] = DateTimeUtils.now()
        user_ref.update(update_data)

        if is_username_changing:
            author_fields = {'username': new_username}
            if update_data.get('profile_pic'):
                author_fields['profile_pic'] = update_data['profile_pic']
            try:
                updated = self.post_service.update_author_fields(user_id, author_fields)
                logging.info(f"username sync: {current.get('username')} -> {new_username}, {updated} posts updated")
            except Exception as e:
                logging.error(f"username sync failed for user {user_id}: {e}", exc_info=True)

        return user_ref.get().to_dict()

    def delete_user(self, user_id: str, acting_user_id: str) -> None:
        """Deletes only the user document; posts, pets and messages are left in place."""
        if user_id != acting_user_id:
            raise PermissionError("You can only delete your own account")
        user_ref = self.users_ref.document(user_id)
        if not user_ref.get().exists:
            raise ValueError("User not found")
        user_ref.delete()
        logging.info(f"user deleted: {user_id}")

    def add_saved_post(self, user_id: str, acting_user_id: str, post_id: str) -> Dict[str, Any]:
        if user_id != acting_user_id:
            raise PermissionError("You can only change your own saved posts")
        user_ref = self.users_ref.document(user_id)
        doc = user_ref.get()
        if not doc.exists:
            raise ValueError("User not found")
        if not self.posts_ref.document(post_id).get().exists:
            raise ValueError("Post not found")

        saved = doc.to_dict().get('saved_posts', [])
        if post_id not in saved:
            saved.append(post_id)
            user_ref.update({'saved_posts': saved})
        return user_ref.get().to_dict()

    def remove_saved_post(self, user_id: str, acting_user_id: str, post_id: str) -> Dict[str, Any]:
        if user_id != acting_user_id:
            raise PermissionError("You can only change your own saved posts")
        user_ref = self.users_ref.document(user_id)
        doc = user_ref.get()
        if not doc.exists:
            raise ValueError("User not found")

        saved = [pid for pid in doc.to_dict().get('saved_posts', []) if pid != post_id]
        user_ref.update({'saved_posts': saved})
        return user_ref.get().to_dict()

    @staticmethod
    def _fetch_all(collection_ref, ids: List[str]) -> List[Dict[str, Any]]:
        docs = []
        for doc_id in ids:
            doc = collection_ref.document(doc_id).get()
            if doc.exists:
                docs.append(doc.to_dict())
        return docs
