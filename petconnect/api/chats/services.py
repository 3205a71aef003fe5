# petconnect/api/chats/services.py
from typing import Dict, Any, List
from firebase_admin import firestore

from petconnect.utils.datetime_utils import DateTimeUtils


class ChatService:
    """Chat documents. Sending goes through MessageService so the chat caches stay in step."""

    def __init__(self, message_service):
        self.db = firestore.client()
        self.chats_ref = self.db.collection('chats')
        self.users_ref = self.db.collection('users')
        self.message_service = message_service

    def list_chats(self, user_id: str) -> List[Dict[str, Any]]:
        """The user's chats, most recent activity first."""
        docs = self.chats_ref.where('participants', 'array_contains', user_id).stream()
        chats = [self._for_viewer(doc.to_dict(), user_id) for doc in docs]
        chats.sort(key=lambda c: DateTimeUtils.coerce_datetime(c.get('updated_at')), reverse=True)
        return chats

    def get_chat(self, chat_id: str, user_id: str) -> Dict[str, Any]:
        chat = self._participant_chat(chat_id, user_id)
        chat = self._for_viewer(chat, user_id)
        chat['messages'] = self.message_service.get_chat_messages(chat_id)
        return chat

    def get_or_create_chat(self, user_id: str, participant_id: str) -> Dict[str, Any]:
        if not self.users_ref.document(participant_id).get().exists:
            raise ValueError("User not found")
        chat = self.message_service.get_or_create_chat_doc(user_id, participant_id)
        return self._for_viewer(chat, user_id)

    def send_message(self, chat_id: str, user_id: str, content: str) -> Dict[str, Any]:
        chat = self._participant_chat(chat_id, user_id)
        receiver_id = next(p for p in chat['participants'] if p != user_id)
        return self.message_service.send_message(user_id, receiver_id, content)

    def delete_chat(self, chat_id: str, user_id: str) -> None:
        """Deletes the chat document only; its messages stay."""
        self._participant_chat(chat_id, user_id)
        self.chats_ref.document(chat_id).delete()

    def _participant_chat(self, chat_id: str, user_id: str) -> Dict[str, Any]:
        doc = self.chats_ref.document(chat_id).get()
        if not doc.exists:
            raise ValueError("Chat not found")
        chat = doc.to_dict()
        if user_id not in chat.get('participants', []):
            raise PermissionError("You are not a participant of this chat")
        return chat

    def _for_viewer(self, chat: Dict[str, Any], user_id: str) -> Dict[str, Any]:
        participants = []
        for participant_id in chat.get('participants', []):
            doc = self.users_ref.document(participant_id).get()
            user = doc.to_dict() if doc.exists else {}
            participants.append({
                'user_id': participant_id,
                'username': user.get('username'),
                'profile_pic': user.get('profile_pic')
            })

        viewed = dict(chat)
        viewed['participants'] = participants
        viewed['unread_count'] = (chat.get('unread_count') or {}).get(user_id, 0)
        return viewed
