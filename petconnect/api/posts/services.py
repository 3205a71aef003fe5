# petconnect/api/posts/services.py
import logging
import uuid
from firebase_admin import firestore
from dataclasses import asdict
from typing import Optional, Dict, Any, Tuple, List

from petconnect.models.comment import Comment
from petconnect.models.notification import NotificationType
from petconnect.models.post import Post, build_tags
from petconnect.utils.datetime_utils import DateTimeUtils


class PostService:
    """
    Posts, likes and comments.

    Denormalized fields (author username/profile_pic, comments_count, pet.posts) are kept
    in sync by the sequential steps below. Nothing is transactional: a failure halfway
    leaves the earlier writes in place.
    """
    def __init__(self, notification_service):
        self.db = firestore.client()
        self.posts_ref = self.db.collection('posts')
        self.users_ref = self.db.collection('users')
        self.pets_ref = self.db.collection('pets')
        self.comments_ref = self.db.collection('comments')
        self.notification_service = notification_service

    # --- reads ---

    def get_feed(self, current_user_id: Optional[str]) -> List[Dict[str, Any]]:
        """Every post, newest first."""
        posts = [doc.to_dict() for doc in self.posts_ref.stream() if doc.exists]
        return self._newest_first(posts, current_user_id)

    def get_posts_by_user_id(self, author_id: str, current_user_id: Optional[str]) -> List[Dict[str, Any]]:
        posts = [doc.to_dict() for doc in self.posts_ref.where('user_id', '==', author_id).stream()]
        return self._newest_first(posts, current_user_id)

    def get_post(self, post_id: str, current_user_id: Optional[str] = None) -> Optional[Dict[str, Any]]:
        doc = self.posts_ref.document(post_id).get()
        if not doc.exists:
            return None
        post = doc.to_dict()
        post['is_liked'] = current_user_id in post.get('likes', [])
        return post

    def get_post_populated(self, post_id: str, current_user_id: Optional[str] = None) -> Optional[Dict[str, Any]]:
        """Post with comments (author resolved from 'users') and the pet embedded."""
        post = self.get_post(post_id, current_user_id)
        if not post:
            return None

        comments = []
        for comment_id in post.get('comments', []):
            comment_doc = self.comments_ref.document(comment_id).get()
            if comment_doc.exists:
                comments.append(self.populate_comment(comment_doc.to_dict()))
        post['comments'] = comments

        post['pet'] = None
        if post.get('pet_id'):
            pet_doc = self.pets_ref.document(post['pet_id']).get()
            if pet_doc.exists:
                post['pet'] = pet_doc.to_dict()
        return post

    def populate_comment(self, comment: Dict[str, Any]) -> Dict[str, Any]:
        user_doc = self.users_ref.document(comment['user_id']).get()
        user = user_doc.to_dict() if user_doc.exists else {}
        comment['user'] = {
            'user_id': comment['user_id'],
            'username': user.get('username'),
            'profile_pic': user.get('profile_pic')
        }
        return comment

    # --- writes ---

    def create_post(self, user_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Creates a post authored by user_id.
        The author's username/profile_pic are copied onto the post; a pet must belong to the author.
        """
        user_doc = self.users_ref.document(user_id).get()
        if not user_doc.exists:
            raise ValueError("User not found")
        user = user_doc.to_dict()

        pet = None
        pet_id = data.get('pet_id')
        if pet_id:
            pet_doc = self.pets_ref.document(pet_id).get()
            if not pet_doc.exists:
                raise ValueError("Pet not found")
            pet = pet_doc.to_dict()
            if pet.get('user_id') != user_id:
                raise PermissionError("You can only post about your own pets")

        new_post = Post(
            post_id=str(uuid.uuid4()),
            user_id=user_id,
            username=user['username'],
            profile_pic=user.get('profile_pic'),
            pet_id=pet_id,
            pet_name=pet['name'] if pet else None,
            media=data.get('media'),
            media_type=data.get('media_type') or 'image',
            caption=data['caption'],
            tags=build_tags(data.get('tags'), pet.get('species') if pet else None, pet.get('breed') if pet else None)
        )
        post_data = DateTimeUtils.for_firestore(asdict(new_post))
        self.posts_ref.document(new_post.post_id).set(post_data)

        if pet:
            pet_posts = pet.get('posts', [])
            pet_posts.append(new_post.post_id)
            self.pets_ref.document(pet_id).update({'posts': pet_posts})

        logging.info(f"post created: {new_post.post_id} by {user_id}")
        post_data['is_liked'] = False
        return post_data

    def update_post(self, post_id: str, user_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        post_ref = self._authored_post_ref(post_id, user_id)
        update_data = dict(data)
        if 'tags' in update_data:
            pet = self._post_pet(post_ref.get().to_dict())
            update_data['tags'] = build_tags(update_data['tags'], pet.get('species'), pet.get('breed'))
        update_data['updated_at'] = DateTimeUtils.now()
        post_ref.update(update_data)
        return self.get_post(post_id, user_id)

    def delete_post(self, post_id: str, user_id: str) -> None:
        """
        Deletes the post and its comments and unlinks it from its pet.
        Like/comment notifications pointing at the post are left behind.
        """
        post_ref = self._authored_post_ref(post_id, user_id)
        post = post_ref.get().to_dict()

        deleted_comments = 0
        for comment_doc in self.comments_ref.where('post_id', '==', post_id).stream():
            comment_doc.reference.delete()
            deleted_comments += 1

        if post.get('pet_id'):
            pet_ref = self.pets_ref.document(post['pet_id'])
            pet_doc = pet_ref.get()
            if pet_doc.exists:
                pet_posts = [pid for pid in pet_doc.to_dict().get('posts', []) if pid != post_id]
                pet_ref.update({'posts': pet_posts})

        post_ref.delete()
        logging.info(f"post deleted: {post_id} ({deleted_comments} comments removed)")

    def update_author_fields(self, user_id: str, fields: Dict[str, Any]) -> int:
        """Rewrites the author copy (username, profile_pic) on every post of user_id."""
        updated = 0
        for doc in self.posts_ref.where('user_id', '==', user_id).stream():
            doc.reference.update(fields)
            updated += 1
        return updated

    # --- likes ---

    def toggle_post_like(self, user_id: str, post_id: str) -> Dict[str, Any]:
        """
        Adds user_id to the like set (with one LIKE notification for the author)
        or removes it (and deletes that notification).

        :return: the updated post with is_liked
        """
        post_ref = self.posts_ref.document(post_id)
        doc = post_ref.get()
        if not doc.exists:
            raise ValueError("Post not found")
        post = doc.to_dict()

        likes = post.get('likes', [])
        if user_id in likes:
            likes = [uid for uid in likes if uid != user_id]
            post_ref.update({'likes': likes})
            self.notification_service.delete_like_notification(post['user_id'], user_id, post_id)
        else:
            likes.append(user_id)
            post_ref.update({'likes': likes})
            self.notification_service.create_notification(
                recipient_id=post['user_id'],
                sender_id=user_id,
                n_type=NotificationType.LIKE,
                post_id=post_id
            )
        return self.get_post(post_id, user_id)

    # --- comments ---

    def add_comment(self, post_id: str, user_id: str, content: str) -> Tuple[Dict[str, Any], Dict[str, Any]]:
        """
        Creates a comment, appends it to the post, bumps comments_count and notifies the author.

        :return: (populated comment, populated post)
        """
        post_ref = self.posts_ref.document(post_id)
        post_doc = post_ref.get()
        if not post_doc.exists:
            raise ValueError("Post not found")
        post = post_doc.to_dict()

        comment = Comment(
            comment_id=str(uuid.uuid4()),
            post_id=post_id,
            user_id=user_id,
            content=content.strip()
        )
        comment_data = DateTimeUtils.for_firestore(asdict(comment))
        self.comments_ref.document(comment.comment_id).set(comment_data)

        comment_ids = post.get('comments', [])
        comment_ids.append(comment.comment_id)
        post_ref.update({
            'comments': comment_ids,
            'comments_count': post.get('comments_count', 0) + 1
        })

        self.notification_service.create_notification(
            recipient_id=post['user_id'],
            sender_id=user_id,
            n_type=NotificationType.COMMENT,
            post_id=post_id,
            comment_id=comment.comment_id,
            content=comment.content
        )
        return self.populate_comment(comment_data), self.get_post_populated(post_id, user_id)

    def delete_comment(self, comment_id: str, user_id: str, post_id: Optional[str] = None) -> Dict[str, Any]:
        """
        Deletes a comment. Allowed for the comment author and the post author.
        The post's comment list and count are updated and the comment's notification removed.

        :return: the populated post
        """
        comment_ref = self.comments_ref.document(comment_id)
        comment_doc = comment_ref.get()
        if not comment_doc.exists:
            raise ValueError("Comment not found")
        comment = comment_doc.to_dict()
        if post_id and comment['post_id'] != post_id:
            raise ValueError("Comment not found on this post")

        post_ref = self.posts_ref.document(comment['post_id'])
        post_doc = post_ref.get()
        post = post_doc.to_dict() if post_doc.exists else None

        if user_id != comment['user_id'] and (not post or user_id != post.get('user_id')):
            raise PermissionError("You can only delete your own comments or comments on your posts")

        comment_ref.delete()

        if post:
            comment_ids = [cid for cid in post.get('comments', []) if cid != comment_id]
            post_ref.update({
                'comments': comment_ids,
                'comments_count': max(post.get('comments_count', 0) - 1, 0)
            })

        self.notification_service.delete_comment_notifications(comment_id)
        return self.get_post_populated(comment['post_id'], user_id)

    # --- helpers ---

    def _authored_post_ref(self, post_id: str, user_id: str):
        post_ref = self.posts_ref.document(post_id)
        doc = post_ref.get()
        if not doc.exists:
            raise ValueError("Post not found")
        if doc.to_dict().get('user_id') != user_id:
            raise PermissionError("You can only modify your own posts")
        return post_ref

    def _post_pet(self, post: Dict[str, Any]) -> Dict[str, Any]:
        """The pet a post is about, or an empty dict."""
        if not post.get('pet_id'):
            return {}
        pet_doc = self.pets_ref.document(post['pet_id']).get()
        return pet_doc.to_dict() if pet_doc.exists else {}

    @staticmethod
    def _newest_first(posts: List[Dict[str, Any]], current_user_id: Optional[str]) -> List[Dict[str, Any]]:
        posts.sort(key=lambda p: DateTimeUtils.coerce_datetime(p.get('created_at')), reverse=True)
        for post in posts:
            post['is_liked'] = current_user_id in post.get('likes', [])
        return posts
