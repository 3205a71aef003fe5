# petconnect/models/user.py
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, List

from petconnect.utils.datetime_utils import DateTimeUtils

@dataclass
class User:
    """
    Document layout of the Firestore 'users' collection.
    username_lower backs the case-insensitive uniqueness checks; email is stored lower-cased.
    """
    user_id: str
    username: str
    username_lower: str
    email: str
    password_hash: str
    profile_pic: Optional[str] = None
    bio: Optional[str] = None
    saved_posts: List[str] = field(default_factory=list)
    pets: List[str] = field(default_factory=list)
    created_at: datetime = field(default_factory=DateTimeUtils.now)
    updated_at: datetime = field(default_factory=DateTimeUtils.now)
