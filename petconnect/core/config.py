# petconnect/core/config.py

import os
from datetime import timedelta


def _env_flag(name: str, default: str = 'false') -> bool:
    return os.getenv(name, default).strip().lower() in ('1', 'true', 'yes', 'on')


class Config:
    """Settings shared by every environment. Values come from the environment (.env)."""
    # Signs and verifies every bearer token handed out at signup/login.
    JWT_SECRET_KEY = os.getenv('JWT_SECRET_KEY')
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(days=int(os.getenv('JWT_ACCESS_TOKEN_DAYS', 7)))

    BCRYPT_ROUNDS = int(os.getenv('BCRYPT_ROUNDS', 12))

    FIREBASE_CREDENTIALS_PATH = os.getenv('FIREBASE_CREDENTIALS_PATH')
    FIREBASE_STORAGE_BUCKET = os.getenv('FIREBASE_STORAGE_BUCKET')

    # Pet assistant. Without a key (or with the flag off) canned answers are used.
    ENABLE_AI_FEATURES = _env_flag('ENABLE_AI_FEATURES')
    OPENAI_API_KEY = os.getenv('OPENAI_API_KEY')
    OPENAI_MODEL = os.getenv('OPENAI_MODEL', 'gpt-3.5-turbo')
    OPENAI_MAX_TOKENS = int(os.getenv('OPENAI_MAX_TOKENS', 500))
    OPENAI_TEMPERATURE = float(os.getenv('OPENAI_TEMPERATURE', 0.7))


class DevelopmentConfig(Config):
    DEBUG = True
    FIREBASE_CREDENTIALS_PATH = os.getenv('DEV_FIREBASE_CREDENTIALS_PATH', Config.FIREBASE_CREDENTIALS_PATH)


class TestingConfig(Config):
    """Test settings. Firestore is never initialized; the tests patch the client."""
    TESTING = True
    DEBUG = False
    JWT_SECRET_KEY = 'petconnect-test-secret'
    BCRYPT_ROUNDS = 4
    FIREBASE_CREDENTIALS_PATH = None
    FIREBASE_STORAGE_BUCKET = None
    ENABLE_AI_FEATURES = False
    OPENAI_API_KEY = None


class ProductionConfig(Config):
    DEBUG = False


# create_app picks the class by FLASK_ENV.
config_by_name = dict(
    development=DevelopmentConfig,
    testing=TestingConfig,
    production=ProductionConfig
)
