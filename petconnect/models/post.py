# petconnect/models/post.py
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional, List

from petconnect.utils.datetime_utils import DateTimeUtils

class MediaType(Enum):
    IMAGE = "image"
    VIDEO = "video"

@dataclass
class Post:
    """
    Document layout of the Firestore 'posts' collection.

    username/profile_pic are copies of the author's profile and are rewritten when the
    author renames. comments_count mirrors len(comments) and is maintained by hand.
    """
    post_id: str
    user_id: str
    username: str
    caption: str
    profile_pic: Optional[str] = None
    pet_id: Optional[str] = None
    pet_name: Optional[str] = None
    media: Optional[str] = None
    media_type: str = MediaType.IMAGE.value
    tags: List[str] = field(default_factory=list)
    likes: List[str] = field(default_factory=list)
    comments: List[str] = field(default_factory=list)
    comments_count: int = 0
    created_at: datetime = field(default_factory=DateTimeUtils.now)
    updated_at: datetime = field(default_factory=DateTimeUtils.now)


def build_tags(explicit: Optional[List[str]], species: Optional[str] = None, breed: Optional[str] = None) -> List[str]:
    """Lower-cased, de-duplicated tags: explicit ones first, then the pet's species and breed."""
    tags: List[str] = []
    for raw in list(explicit or []) + [species, breed]:
        if not raw:
            continue
        tag = raw.strip().lower()
        if tag and tag not in tags:
            tags.append(tag)
    return tags
