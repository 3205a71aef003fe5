# petconnect/api/auth/services.py
import uuid
import logging
from datetime import datetime, timezone
from typing import Dict, Any, Optional
from dataclasses import asdict
from firebase_admin import firestore
from flask import Flask

from petconnect.core.security import hash_password, verify_password, DuplicateFieldError
from petconnect.models.user import User
from petconnect.utils.datetime_utils import DateTimeUtils

class AuthService:
    """Account creation, credential checks and the revoked-token list."""

    def __init__(self):
        self.db = None
        self.users_ref = None
        self.revoked_tokens_ref = None
        self.app: Optional[Flask] = None

    def init_app(self, app: Flask):
        self.db = firestore.client()
        self.users_ref = self.db.collection('users')
        self.revoked_tokens_ref = self.db.collection('revoked_tokens')
        self.app = app

    def register_user(self, username: str, email: str, password: str) -> Dict[str, Any]:
        """
        Creates a user. Email and username are unique case-insensitively.

        :raises DuplicateFieldError: field is 'email' or 'username'
        """
        email = email.strip().lower()
        if self._first(self.users_ref.where('email', '==', email)):
            raise DuplicateFieldError('email', "Email is already registered")
        if self._first(self.users_ref.where('username_lower', '==', username.lower())):
            raise DuplicateFieldError('username', "Username is already taken")

        user_id = str(uuid.uuid4())
        new_user = User(
            user_id=user_id,
            username=username,
            username_lower=username.lower(),
            email=email,
            password_hash=hash_password(password)
        )
        user_data = DateTimeUtils.for_firestore(asdict(new_user))
        self.users_ref.document(user_id).set(user_data)
        logging.info(f"user registered: {username} ({user_id})")
        return user_data

    def authenticate(self, identifier: str, password: str) -> Optional[Dict[str, Any]]:
        """Returns the user whose email or username matches identifier and whose password checks out."""
        identifier = identifier.strip().lower()
        field = 'email' if '@' in identifier else 'username_lower'
        user_doc = self._first(self.users_ref.where(field, '==', identifier))
        if not user_doc:
            return None

        user_data = user_doc.to_dict()
        if not verify_password(password, user_data.get('password_hash')):
            return None
        return user_data

    def get_user(self, user_id: str) -> Optional[Dict[str, Any]]:
        doc = self.users_ref.document(user_id).get()
        return doc.to_dict() if doc.exists else None

    # --- blocklist ---
    def add_token_to_blocklist(self, jti: str, expires: datetime):
        token_data = DateTimeUtils.for_firestore({
            'revoked_at': DateTimeUtils.now(),
            'expires_at': expires
        })
        self.revoked_tokens_ref.document(jti).set(token_data)

    def is_token_revoked(self, jwt_payload: dict) -> bool:
        doc = self.revoked_tokens_ref.document(jwt_payload['jti']).get()
        return doc.exists

    def logout_user(self, jti: str, exp: int):
        self.add_token_to_blocklist(jti, datetime.fromtimestamp(exp, tz=timezone.utc))
        logging.info(f"token revoked: {jti[:8]}...")

    @staticmethod
    def _first(query):
        return next(iter(query.limit(1).stream()), None)

auth_service = AuthService()
