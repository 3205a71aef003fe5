# petconnect/client/store.py
"""
Client-side application state.

One slice per resource, each holding the cached entities plus `is_loading`
and `error`. The fetch/create/update/delete methods follow the same steps:
set the loading flag, call the API, merge the answer into the slice, and on
an ApiError store its message in the slice's `error` and return None.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional, Dict, Any, List, Callable

from petconnect.client.api_client import ApiError, PetConnectClient


@dataclass
class UserState:
    user: Optional[Dict[str, Any]] = None
    token: Optional[str] = None
    is_loading: bool = False
    error: Optional[str] = None


@dataclass
class PostState:
    feed_posts: List[Dict[str, Any]] = field(default_factory=list)
    user_posts: List[Dict[str, Any]] = field(default_factory=list)
    is_loading: bool = False
    error: Optional[str] = None


@dataclass
class PetState:
    pets: List[Dict[str, Any]] = field(default_factory=list)
    is_loading: bool = False
    error: Optional[str] = None


@dataclass
class NotificationState:
    notifications: List[Dict[str, Any]] = field(default_factory=list)
    unread_count: int = 0
    is_loading: bool = False
    error: Optional[str] = None


@dataclass
class ChatState:
    chats: List[Dict[str, Any]] = field(default_factory=list)
    # chat_id -> messages, oldest first
    messages: Dict[str, List[Dict[str, Any]]] = field(default_factory=dict)
    unread_count: int = 0
    is_loading: bool = False
    error: Optional[str] = None


class Store:
    def __init__(self, client: PetConnectClient):
        self.client = client
        self.user = UserState(token=client.token)
        self.posts = PostState()
        self.pets = PetState()
        self.notifications = NotificationState()
        self.chats = ChatState()

    def _run(self, state, call: Callable[[], Any], track_loading: bool = True) -> Any:
        if track_loading:
            state.is_loading = True
        state.error = None
        try:
            return call()
        except ApiError as e:
            logging.warning(f"{type(state).__name__} request failed ({e.status_code}): {e.message}")
            state.error = e.message
            return None
        finally:
            if track_loading:
                state.is_loading = False

    # --- user ---

    def login(self, identifier: str, password: str) -> Optional[Dict[str, Any]]:
        data = self._run(self.user, lambda: self.client.login(identifier, password))
        if data:
            self.user.user = data['user']
            self.user.token = data['token']
        return data

    def register(self, username: str, email: str, password: str, confirm_password: str) -> Optional[Dict[str, Any]]:
        data = self._run(self.user, lambda: self.client.register(username, email, password, confirm_password))
        if data:
            self.user.user = data['user']
            self.user.token = data['token']
        return data

    def logout(self) -> None:
        """Local state is cleared even when the server call fails."""
        self._run(self.user, self.client.logout)
        self.user = UserState()
        self.clear_posts()
        self.pets = PetState()
        self.notifications = NotificationState()
        self.chats = ChatState()

    def save_post(self, post_id: str) -> None:
        if self.user.user is None:
            return
        saved = self.user.user.setdefault('saved_posts', [])
        if post_id not in saved:
            saved.append(post_id)

    def unsave_post(self, post_id: str) -> None:
        if self.user.user is None:
            return
        self.user.user['saved_posts'] = [pid for pid in self.user.user.get('saved_posts', []) if pid != post_id]

    # --- posts ---

    def fetch_feed_posts(self) -> Optional[List[Dict[str, Any]]]:
        posts = self._run(self.posts, self.client.get_feed)
        if posts is not None:
            self.posts.feed_posts = posts
        return posts

    def fetch_user_posts(self, user_id: str) -> Optional[List[Dict[str, Any]]]:
        posts = self._run(self.posts, lambda: self.client.get_user_posts(user_id))
        if posts is not None:
            self.posts.user_posts = posts
        return posts

    def create_post(self, data: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        post = self._run(self.posts, lambda: self.client.create_post(data))
        if post:
            self.posts.feed_posts.insert(0, post)
            self.posts.user_posts.insert(0, post)
        return post

    def like_post(self, post_id: str) -> Optional[Dict[str, Any]]:
        post = self._run(self.posts, lambda: self.client.like_post(post_id), track_loading=False)
        if post:
            self._merge_post(post)
        return post

    def add_comment(self, post_id: str, content: str) -> Optional[Dict[str, Any]]:
        post = self._run(self.posts, lambda: self.client.add_comment(post_id, content), track_loading=False)
        if post:
            self._merge_post(post)
        return post

    def delete_comment(self, post_id: str, comment_id: str) -> Optional[Dict[str, Any]]:
        post = self._run(self.posts, lambda: self.client.delete_comment(post_id, comment_id), track_loading=False)
        if post:
            self._merge_post(post)
        return post

    def delete_post(self, post_id: str) -> bool:
        deleted = self._run(self.posts, lambda: self.client.delete_post(post_id) or True, track_loading=False)
        if deleted:
            self.posts.feed_posts = [p for p in self.posts.feed_posts if p['post_id'] != post_id]
            self.posts.user_posts = [p for p in self.posts.user_posts if p['post_id'] != post_id]
        return bool(deleted)

    def clear_posts(self) -> None:
        self.posts.feed_posts = []
        self.posts.user_posts = []
        self.posts.error = None

    def update_user_profile_data(self, user_id: str, username: Optional[str] = None,
                                 profile_pic: Optional[str] = None) -> int:
        """
        Rewrites the cached author fields of user_id on posts and their populated comments.

        :return: number of cached posts authored by user_id
        """
        changes = {k: v for k, v in (('username', username), ('profile_pic', profile_pic)) if v is not None}
        updated = 0
        for posts in (self.posts.feed_posts, self.posts.user_posts):
            for post in posts:
                if post.get('user_id') == user_id:
                    post.update(changes)
                    updated += 1
                for comment in post.get('comments') or []:
                    if isinstance(comment, dict) and (comment.get('user') or {}).get('user_id') == user_id:
                        comment['user'].update(changes)
        return updated

    def _merge_post(self, updated: Dict[str, Any]) -> None:
        for posts in (self.posts.feed_posts, self.posts.user_posts):
            for i, post in enumerate(posts):
                if post['post_id'] == updated['post_id']:
                    posts[i] = {**post, **updated}

    # --- pets ---

    def fetch_user_pets(self, user_id: str) -> Optional[List[Dict[str, Any]]]:
        pets = self._run(self.pets, lambda: self.client.get_pets(user_id))
        if pets is not None:
            self.pets.pets = pets
        return pets

    def create_pet(self, data: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        pet = self._run(self.pets, lambda: self.client.create_pet(data))
        if pet:
            self.pets.pets.append(pet)
        return pet

    def update_pet(self, pet_id: str, data: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        pet = self._run(self.pets, lambda: self.client.update_pet(pet_id, data))
        if pet:
            self.pets.pets = [pet if p['pet_id'] == pet_id else p for p in self.pets.pets]
        return pet

    def delete_pet(self, pet_id: str) -> bool:
        deleted = self._run(self.pets, lambda: self.client.delete_pet(pet_id) or True)
        if deleted:
            self.pets.pets = [p for p in self.pets.pets if p['pet_id'] != pet_id]
        return bool(deleted)

    # --- notifications ---

    def fetch_notifications(self, page: int = 1, limit: int = 20) -> Optional[List[Dict[str, Any]]]:
        notifications = self._run(self.notifications, lambda: self.client.get_notifications(page, limit))
        if notifications is None:
            self.notifications.notifications = []
            self.notifications.unread_count = 0
        else:
            self.notifications.notifications = notifications
            self.notifications.unread_count = sum(1 for n in notifications if not n.get('read'))
        return notifications

    def fetch_notification_unread_count(self) -> Optional[int]:
        count = self._run(self.notifications, self.client.get_notification_unread_count, track_loading=False)
        self.notifications.unread_count = count or 0
        return count

    def mark_notification_read(self, notification_id: str) -> Optional[Dict[str, Any]]:
        notification = self._run(self.notifications,
                                 lambda: self.client.mark_notification_read(notification_id), track_loading=False)
        if notification:
            for n in self.notifications.notifications:
                if n['notification_id'] == notification_id and not n.get('read'):
                    n['read'] = True
                    self.notifications.unread_count = max(self.notifications.unread_count - 1, 0)
        return notification

    def mark_all_notifications_read(self) -> Optional[int]:
        updated = self._run(self.notifications, self.client.mark_all_notifications_read, track_loading=False)
        if updated is not None:
            for n in self.notifications.notifications:
                n['read'] = True
            self.notifications.unread_count = 0
        return updated

    # --- chats ---

    def fetch_user_chats(self) -> Optional[List[Dict[str, Any]]]:
        chats = self._run(self.chats, self.client.get_chats)
        if chats is not None:
            self.chats.chats = chats
        return chats

    def fetch_chat_messages(self, chat_id: str) -> Optional[List[Dict[str, Any]]]:
        chat = self._run(self.chats, lambda: self.client.get_chat(chat_id))
        if chat is None:
            return None
        self.chats.messages[chat_id] = chat.get('messages', [])
        return self.chats.messages[chat_id]

    def send_message(self, receiver_id: str, content: str) -> Optional[Dict[str, Any]]:
        message = self._run(self.chats, lambda: self.client.send_message(receiver_id, content), track_loading=False)
        if message:
            self.chats.messages.setdefault(message['chat_id'], []).append(message)
            for chat in self.chats.chats:
                if chat['chat_id'] == message['chat_id']:
                    chat['last_message'] = message
        return message

    def mark_messages_read(self, sender_id: str) -> Optional[int]:
        updated = self._run(self.chats, lambda: self.client.mark_messages_read(sender_id), track_loading=False)
        if updated:
            self.chats.unread_count = max(self.chats.unread_count - updated, 0)
        return updated

    def fetch_message_unread_count(self) -> Optional[int]:
        count = self._run(self.chats, self.client.get_message_unread_count, track_loading=False)
        if count is not None:
            self.chats.unread_count = count
        return count
