# petconnect/models/comment.py
from dataclasses import dataclass, field
from datetime import datetime

from petconnect.utils.datetime_utils import DateTimeUtils

@dataclass
class Comment:
    """
    Document layout of the Firestore 'comments' collection.
    Only user_id is stored; the username is resolved from 'users' when read.
    """
    comment_id: str
    post_id: str
    user_id: str
    content: str
    created_at: datetime = field(default_factory=DateTimeUtils.now)
    updated_at: datetime = field(default_factory=DateTimeUtils.now)
