# petconnect/conftest.py
"""
Shared pytest fixtures.

Firestore is replaced by an in-memory MockFirestore; every test gets a fresh one.
"""

import pytest
from firebase_admin import firestore
from mockfirestore import MockFirestore

from petconnect import create_app

DEFAULT_PASSWORD = 'Secret123'


@pytest.fixture
def db(monkeypatch):
    mock_db = MockFirestore()
    monkeypatch.setattr(firestore, 'client', lambda *args, **kwargs: mock_db)
    yield mock_db
    mock_db.reset()


@pytest.fixture
def app(db):
    app = create_app('testing')
    yield app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def signup(client):
    """
    signup('alice') -> (user dict, auth headers)
    """
    def _signup(username: str, email: str = None, password: str = DEFAULT_PASSWORD):
        response = client.post('/api/auth/signup', json={
            'username': username,
            'email': email or f'{username.lower()}@example.com',
            'password': password,
            'confirm_password': password
        })
        assert response.status_code == 201, response.get_json()
        body = response.get_json()
        return body['user'], {'Authorization': f"Bearer {body['token']}"}
    return _signup
