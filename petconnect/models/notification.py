# petconnect/models/notification.py
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional

from petconnect.utils.datetime_utils import DateTimeUtils

class NotificationType(Enum):
    LIKE = "like"
    COMMENT = "comment"

@dataclass
class Notification:
    """
    Document layout of the Firestore 'notifications' collection.
    Created only as a side effect of likes and comments.
    """
    notification_id: str
    user_id: str             # recipient
    type: NotificationType
    sender_id: str
    post_id: str
    comment_id: Optional[str] = None
    content: Optional[str] = None  # comment text for COMMENT notifications
    read: bool = False
    created_at: datetime = field(default_factory=DateTimeUtils.now)
