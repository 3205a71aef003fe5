# petconnect/client/api_client.py

import logging
from typing import Optional, Dict, Any, List

import requests


class ApiError(Exception):
    """
    Non-2xx answer from the API, or a transport failure (status_code 0).
    `field` is set for duplicate username/email errors.
    """
    def __init__(self, status_code: int, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        self.field = field


class PetConnectClient:
    """Thin requests wrapper over the PetConnect REST API."""

    def __init__(self, base_url: str, token: Optional[str] = None, session: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip('/')
        self.token = token
        self.session = session or requests.Session()

    # --- transport ---

    def _request(self, method: str, path: str, json: Optional[Dict[str, Any]] = None,
                 params: Optional[Dict[str, Any]] = None) -> Any:
        headers = {"Authorization": f"Bearer {self.token}"} if self.token else {}
        url = f"{self.base_url}/api{path}"
        try:
            response = self.session.request(method, url, json=json, params=params, headers=headers)
        except requests.RequestException as e:
            logging.error(f"request failed: {method} {url} - {e}")
            raise ApiError(0, str(e)) from e

        try:
            body = response.json()
        except ValueError:
            body = {}

        if not 200 <= response.status_code < 300:
            body = body if isinstance(body, dict) else {}
            message = body.get('message') or body.get('msg') or body.get('error_code') or response.reason
            raise ApiError(response.status_code, message, body.get('field'))
        return body

    # --- auth ---

    def register(self, username: str, email: str, password: str, confirm_password: str) -> Dict[str, Any]:
        data = self._request('POST', '/auth/signup', json={
            'username': username,
            'email': email,
            'password': password,
            'confirm_password': confirm_password
        })
        self.token = data['token']
        return data

    def login(self, identifier: str, password: str) -> Dict[str, Any]:
        data = self._request('POST', '/auth/login', json={'identifier': identifier, 'password': password})
        self.token = data['token']
        return data

    def logout(self) -> None:
        try:
            if self.token:
                self._request('POST', '/auth/logout')
        finally:
            self.token = None

    def get_me(self) -> Dict[str, Any]:
        return self._request('GET', '/auth/me')

    # --- users ---

    def get_user(self, user_id: str) -> Dict[str, Any]:
        return self._request('GET', f'/users/{user_id}')

    def update_user(self, user_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        return self._request('PUT', f'/users/{user_id}', json=data)

    def check_username(self, username: str, exclude_user_id: Optional[str] = None) -> Dict[str, Any]:
        params = {'exclude_user_id': exclude_user_id} if exclude_user_id else None
        return self._request('GET', f'/users/check/username/{username}', params=params)

    def check_email(self, email: str, exclude_user_id: Optional[str] = None) -> Dict[str, Any]:
        params = {'exclude_user_id': exclude_user_id} if exclude_user_id else None
        return self._request('GET', f'/users/check/email/{email}', params=params)

    def save_post(self, user_id: str, post_id: str) -> Dict[str, Any]:
        return self._request('POST', f'/users/{user_id}/saved-posts', json={'post_id': post_id})

    def unsave_post(self, user_id: str, post_id: str) -> Dict[str, Any]:
        return self._request('DELETE', f'/users/{user_id}/saved-posts/{post_id}')

    # --- posts ---

    def get_feed(self) -> List[Dict[str, Any]]:
        return self._request('GET', '/posts/')

    def get_user_posts(self, user_id: str) -> List[Dict[str, Any]]:
        return self._request('GET', f'/posts/user/{user_id}')

    def get_post(self, post_id: str) -> Dict[str, Any]:
        return self._request('GET', f'/posts/{post_id}')

    def create_post(self, data: Dict[str, Any]) -> Dict[str, Any]:
        return self._request('POST', '/posts/', json=data)

    def delete_post(self, post_id: str) -> None:
        self._request('DELETE', f'/posts/{post_id}')

    def like_post(self, post_id: str) -> Dict[str, Any]:
        return self._request('POST', f'/posts/{post_id}/like')

    def add_comment(self, post_id: str, content: str) -> Dict[str, Any]:
        return self._request('POST', f'/posts/{post_id}/comments', json={'content': content})

    def delete_comment(self, post_id: str, comment_id: str) -> Dict[str, Any]:
        return self._request('DELETE', f'/posts/{post_id}/comments/{comment_id}')

    # --- pets ---

    def get_pets(self, user_id: Optional[str] = None) -> List[Dict[str, Any]]:
        params = {'user_id': user_id} if user_id else None
        return self._request('GET', '/pets/', params=params)

    def create_pet(self, data: Dict[str, Any]) -> Dict[str, Any]:
        return self._request('POST', '/pets/', json=data)

    def update_pet(self, pet_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        return self._request('PUT', f'/pets/{pet_id}', json=data)

    def delete_pet(self, pet_id: str) -> None:
        self._request('DELETE', f'/pets/{pet_id}')

    # --- notifications ---

    def get_notifications(self, page: int = 1, limit: int = 20) -> List[Dict[str, Any]]:
        return self._request('GET', '/notifications/', params={'page': page, 'limit': limit})

    def get_notification_unread_count(self) -> int:
        return self._request('GET', '/notifications/unread-count')['unread_count']

    def mark_notification_read(self, notification_id: str) -> Dict[str, Any]:
        return self._request('PUT', f'/notifications/{notification_id}/read')

    def mark_all_notifications_read(self) -> int:
        return self._request('PUT', '/notifications/read-all')['updated_count']

    # --- chats and messages ---

    def get_chats(self) -> List[Dict[str, Any]]:
        return self._request('GET', '/chats/')

    def get_chat(self, chat_id: str) -> Dict[str, Any]:
        return self._request('GET', f'/chats/{chat_id}')

    def send_message(self, receiver_id: str, content: str) -> Dict[str, Any]:
        return self._request('POST', '/messages/send', json={'receiver_id': receiver_id, 'content': content})

    def mark_messages_read(self, sender_id: str) -> int:
        return self._request('PATCH', '/messages/mark-read', json={'sender_id': sender_id})['updated_count']

    def get_message_unread_count(self) -> int:
        return self._request('GET', '/messages/unread/count')['unread_count']

    # --- assistant ---

    def ask_assistant(self, message: str, history: Optional[List[Dict[str, str]]] = None) -> Dict[str, Any]:
        return self._request('POST', '/ai/chat', json={'message': message, 'history': history or []})
