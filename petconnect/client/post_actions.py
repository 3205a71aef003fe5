# petconnect/client/post_actions.py
"""
Optimistic like/save state for the current session.

A toggle flips the local set right away and sends the request on an executor.
When the request succeeds the local set is reconciled with the server answer;
when it fails the flip is undone. Requests are never de-duplicated, debounced,
cancelled or timed out: two quick clicks on the same post send two requests,
and whichever finishes last decides the state.
"""

import logging
import threading
from collections import Counter
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from typing import Optional, Dict, Any, Iterable, List

from petconnect.client.api_client import PetConnectClient


def _post_ids(items: Iterable[Any]) -> List[str]:
    # saved_posts may come back as ids or as populated post documents
    return [item['post_id'] if isinstance(item, dict) else item for item in items]


class PostActions:
    def __init__(self, client: PetConnectClient, executor: Optional[Executor] = None,
                 initial_saved: Iterable[str] = (), initial_liked: Iterable[str] = ()):
        self.client = client
        self._owns_executor = executor is None
        self.executor = executor or ThreadPoolExecutor(max_workers=4, thread_name_prefix='post-actions')
        self._lock = threading.Lock()
        self.saved_posts = set(initial_saved)
        self.liked_posts = set(initial_liked)
        self._pending_likes = Counter()
        self._pending_saves = Counter()
        self._seeded = False

    def is_liked(self, post_id: str) -> bool:
        with self._lock:
            return post_id in self.liked_posts

    def is_saved(self, post_id: str) -> bool:
        with self._lock:
            return post_id in self.saved_posts

    def seed_from_server(self, posts: List[Dict[str, Any]], user: Dict[str, Any]) -> bool:
        """
        Seeds both sets from the post like arrays and the user's saved list.
        Only the first call has an effect.
        """
        with self._lock:
            if self._seeded:
                return False
            user_id = user['user_id']
            self.liked_posts = {p['post_id'] for p in posts if user_id in (p.get('likes') or [])}
            self.saved_posts = set(_post_ids(user.get('saved_posts') or []))
            self._seeded = True
            return True

    def toggle_like(self, post_id: str, user_id: str) -> Future:
        """
        Flips the like locally and sends the toggle.

        :return: Future resolving to the updated post, or raising the request error
        """
        with self._lock:
            was_liked = post_id in self.liked_posts
            self._flip(self.liked_posts, post_id, not was_liked)
            self._pending_likes[post_id] += 1

        def send():
            try:
                post = self.client.like_post(post_id)
            except Exception as e:
                logging.warning(f"like toggle failed for post {post_id}, reverting: {e}")
                with self._lock:
                    self._done(self._pending_likes, post_id)
                    self._flip(self.liked_posts, post_id, was_liked)
                raise
            with self._lock:
                self._done(self._pending_likes, post_id)
                if post_id not in self._pending_likes:
                    self._flip(self.liked_posts, post_id, user_id in (post.get('likes') or []))
            return post

        return self.executor.submit(send)

    def toggle_save(self, post_id: str, user_id: str) -> Future:
        """
        Flips the save locally and sends save or unsave.

        :return: Future resolving to the updated user, or raising the request error
        """
        with self._lock:
            was_saved = post_id in self.saved_posts
            self._flip(self.saved_posts, post_id, not was_saved)
            self._pending_saves[post_id] += 1

        def send():
            try:
                if was_saved:
                    user = self.client.unsave_post(user_id, post_id)
                else:
                    user = self.client.save_post(user_id, post_id)
            except Exception as e:
                logging.warning(f"save toggle failed for post {post_id}, reverting: {e}")
                with self._lock:
                    self._done(self._pending_saves, post_id)
                    self._flip(self.saved_posts, post_id, was_saved)
                raise
            with self._lock:
                self._done(self._pending_saves, post_id)
                server_saved = set(_post_ids(user.get('saved_posts') or []))
                in_flight = set(self._pending_saves)
                self.saved_posts = (server_saved - in_flight) | (self.saved_posts & in_flight)
            return user

        return self.executor.submit(send)

    def sync_liked_from_posts(self, posts: List[Dict[str, Any]], user_id: str) -> bool:
        """
        Re-derives the liked set for the given posts from their server like arrays.
        Nothing changes when the sorted lists already agree; posts with a like request
        in flight keep their optimistic value.

        :return: True if the local set was rewritten
        """
        with self._lock:
            post_ids = {p['post_id'] for p in posts}
            server_liked = sorted(p['post_id'] for p in posts if user_id in (p.get('likes') or []))
            local_liked = sorted(self.liked_posts & post_ids)
            if server_liked == local_liked:
                return False

            server_set = set(server_liked)
            for post_id in post_ids:
                if self._pending_likes[post_id]:
                    continue
                self._flip(self.liked_posts, post_id, post_id in server_set)
            return True

    def close(self) -> None:
        if self._owns_executor:
            self.executor.shutdown(wait=True)

    @staticmethod
    def _flip(target: set, post_id: str, present: bool) -> None:
        if present:
            target.add(post_id)
        else:
            target.discard(post_id)

    @staticmethod
    def _done(pending: Counter, post_id: str) -> None:
        pending[post_id] -= 1
        if pending[post_id] <= 0:
            del pending[post_id]
