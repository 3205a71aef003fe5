# petconnect/core/security.py
import bcrypt
from flask import current_app


def hash_password(password: str) -> str:
    rounds = current_app.config.get('BCRYPT_ROUNDS', 12)
    salt = bcrypt.gensalt(rounds=rounds)
    return bcrypt.hashpw(password.encode('utf-8'), salt).decode('utf-8')


def verify_password(password: str, password_hash: str) -> bool:
    """Returns False instead of raising when the stored hash is missing or malformed."""
    if not password or not password_hash:
        return False
    try:
        return bcrypt.checkpw(password.encode('utf-8'), password_hash.encode('utf-8'))
    except ValueError:
        return False


class DuplicateFieldError(Exception):
    """A unique user field (username/email) is already taken."""
    def __init__(self, field: str, message: str):
        super().__init__(message)
        self.field = field
        self.message = message
