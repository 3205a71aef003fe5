# petconnect/models/pet.py
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, List

from petconnect.utils.datetime_utils import DateTimeUtils

@dataclass
class Pet:
    """Document layout of the Firestore 'pets' collection. Owned by exactly one user."""
    pet_id: str
    user_id: str
    name: str
    species: str
    breed: Optional[str] = None
    age: Optional[int] = None
    image: Optional[str] = None
    posts: List[str] = field(default_factory=list)  # back-references, kept by hand
    created_at: datetime = field(default_factory=DateTimeUtils.now)
