# petconnect/api/messages/services.py
import math
import uuid
import logging
from dataclasses import asdict
from typing import Optional, Dict, Any, List
from firebase_admin import firestore

from petconnect.models.chat import Chat, chat_id_for
from petconnect.models.message import Message
from petconnect.utils.datetime_utils import DateTimeUtils


class MessageService:
    """
    Direct messages between two users.

    Each send also refreshes the chat document's last_message and bumps the receiver's
    unread_count; mark_read resets it. These caches are updated after the message write
    and can drift from the messages if a step fails.
    """
    def __init__(self):
        self.db = firestore.client()
        self.messages_ref = self.db.collection('messages')
        self.chats_ref = self.db.collection('chats')
        self.users_ref = self.db.collection('users')

    def send_message(self, sender_id: str, receiver_id: str, content: str) -> Dict[str, Any]:
        if not self.users_ref.document(receiver_id).get().exists:
            raise ValueError("Receiver not found")

        chat_id = chat_id_for(sender_id, receiver_id)
        message = Message(
            message_id=str(uuid.uuid4()),
            chat_id=chat_id,
            sender_id=sender_id,
            receiver_id=receiver_id,
            content=content.strip()
        )
        message_data = DateTimeUtils.for_firestore(asdict(message))
        self.messages_ref.document(message.message_id).set(message_data)

        chat_ref = self.chats_ref.document(chat_id)
        chat = self.get_or_create_chat_doc(sender_id, receiver_id)
        unread = dict(chat.get('unread_count') or {})
        unread[receiver_id] = unread.get(receiver_id, 0) + 1
        chat_ref.update({
            'last_message': self._summary(message_data),
            'unread_count': unread,
            'updated_at': message_data['created_at']
        })

        logging.info(f"message sent: {sender_id} -> {receiver_id} ({message.message_id})")
        return message_data

    def get_or_create_chat_doc(self, user_a: str, user_b: str) -> Dict[str, Any]:
        chat_ref = self.chats_ref.document(chat_id_for(user_a, user_b))
        doc = chat_ref.get()
        if doc.exists:
            return doc.to_dict()

        chat = Chat(
            chat_id=chat_id_for(user_a, user_b),
            participants=sorted([user_a, user_b]),
            unread_count={user_a: 0, user_b: 0}
        )
        chat_data = DateTimeUtils.for_firestore(asdict(chat))
        chat_ref.set(chat_data)
        return chat_data

    def get_conversations(self, user_id: str) -> List[Dict[str, Any]]:
        """
        Conversation summaries derived from the messages themselves,
        newest conversation first.
        """
        messages = self._messages_involving(user_id)
        messages.sort(key=lambda m: DateTimeUtils.coerce_datetime(m.get('created_at')), reverse=True)

        conversations: Dict[str, Dict[str, Any]] = {}
        for message in messages:
            other_id = message['receiver_id'] if message['sender_id'] == user_id else message['sender_id']
            conversation = conversations.get(other_id)
            if conversation is None:
                conversation = {
                    'chat_id': message.get('chat_id') or chat_id_for(user_id, other_id),
                    'participant': self._participant(other_id),
                    'last_message': message,
                    'unread_count': 0
                }
                conversations[other_id] = conversation
            if message['receiver_id'] == user_id and not message.get('is_read'):
                conversation['unread_count'] += 1

        return list(conversations.values())

    def get_thread(self, user_id: str, other_user_id: str, page: int = 1, limit: int = 50) -> Dict[str, Any]:
        """A page of the conversation between two users, newest first."""
        page = max(page, 1)
        limit = max(limit, 1)
        messages = [
            m for m in self._messages_involving(user_id)
            if other_user_id in (m['sender_id'], m['receiver_id'])
        ]
        messages.sort(key=lambda m: DateTimeUtils.coerce_datetime(m.get('created_at')), reverse=True)

        total = len(messages)
        start = (page - 1) * limit
        return {
            'messages': messages[start:start + limit],
            'pagination': {
                'current_page': page,
                'total_pages': math.ceil(total / limit),
                'total_messages': total
            }
        }

    def mark_as_read(self, user_id: str, sender_id: str) -> int:
        """Marks everything sender_id sent to user_id as read and resets the chat's counter."""
        query = (self.messages_ref
                 .where('sender_id', '==', sender_id)
                 .where('receiver_id', '==', user_id)
                 .where('is_read', '==', False))
        updated = 0
        for doc in query.stream():
            doc.reference.update({'is_read': True})
            updated += 1

        chat_ref = self.chats_ref.document(chat_id_for(user_id, sender_id))
        chat_doc = chat_ref.get()
        if chat_doc.exists:
            unread = dict(chat_doc.to_dict().get('unread_count') or {})
            unread[user_id] = 0
            chat_ref.update({'unread_count': unread})
        return updated

    def count_unread(self, user_id: str) -> int:
        query = (self.messages_ref
                 .where('receiver_id', '==', user_id)
                 .where('is_read', '==', False)
                 .where('is_deleted', '==', False))
        return len(list(query.stream()))

    def delete_message(self, message_id: str, user_id: str) -> None:
        """Soft delete; only the sender may delete."""
        message_ref = self.messages_ref.document(message_id)
        doc = message_ref.get()
        if not doc.exists:
            raise ValueError("Message not found")
        if doc.to_dict().get('sender_id') != user_id:
            raise PermissionError("You can only delete your own messages")
        message_ref.update({'is_deleted': True})

    def get_chat_messages(self, chat_id: str) -> List[Dict[str, Any]]:
        """Non-deleted messages of a chat, oldest first."""
        query = self.messages_ref.where('chat_id', '==', chat_id).where('is_deleted', '==', False)
        messages = [doc.to_dict() for doc in query.stream()]
        messages.sort(key=lambda m: DateTimeUtils.coerce_datetime(m.get('created_at')))
        return messages

    def _messages_involving(self, user_id: str) -> List[Dict[str, Any]]:
        sent = self.messages_ref.where('sender_id', '==', user_id).where('is_deleted', '==', False).stream()
        received = self.messages_ref.where('receiver_id', '==', user_id).where('is_deleted', '==', False).stream()
        messages = {}
        for doc in list(sent) + list(received):
            data = doc.to_dict()
            messages[data['message_id']] = data
        return list(messages.values())

    def _participant(self, user_id: str) -> Optional[Dict[str, Any]]:
        doc = self.users_ref.document(user_id).get()
        if not doc.exists:
            return None
        user = doc.to_dict()
        return {'user_id': user_id, 'username': user.get('username'), 'profile_pic': user.get('profile_pic')}

    @staticmethod
    def _summary(message: Dict[str, Any]) -> Dict[str, Any]:
        return {
            'message_id': message['message_id'],
            'sender_id': message['sender_id'],
            'receiver_id': message['receiver_id'],
            'content': message['content'],
            'created_at': message['created_at'],
            'is_read': message['is_read']
        }
