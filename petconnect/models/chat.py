# petconnect/models/chat.py
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, List, Dict, Any

from petconnect.utils.datetime_utils import DateTimeUtils

def chat_id_for(user_a: str, user_b: str) -> str:
    """Deterministic id of the chat between two users."""
    return "_".join(sorted([user_a, user_b]))

@dataclass
class Chat:
    """
    Document layout of the Firestore 'chats' collection.
    last_message and unread_count are caches updated wherever messages are sent or read.
    """
    chat_id: str
    participants: List[str]
    last_message: Optional[Dict[str, Any]] = None
    unread_count: Dict[str, int] = field(default_factory=dict)
    created_at: datetime = field(default_factory=DateTimeUtils.now)
    updated_at: datetime = field(default_factory=DateTimeUtils.now)
