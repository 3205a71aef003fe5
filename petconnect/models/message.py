# petconnect/models/message.py
from dataclasses import dataclass, field
from datetime import datetime

from petconnect.utils.datetime_utils import DateTimeUtils

MAX_MESSAGE_LENGTH = 500

@dataclass
class Message:
    """Document layout of the Firestore 'messages' collection."""
    message_id: str
    chat_id: str
    sender_id: str
    receiver_id: str
    content: str
    is_read: bool = False
    is_deleted: bool = False
    created_at: datetime = field(default_factory=DateTimeUtils.now)
