"""Post service for post lifecycle, listing and authorization rules."""
import os
import logging
from typing import Any, Dict, List, Mapping, Optional

from sqlalchemy import delete, insert
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from postboard.auth import Identity
from postboard.errors import ForbiddenError, NotFoundError, ValidationError
from postboard.extensions import db
from postboard.forms.posts import (
    validate_create_post, validate_image_file, validate_update_post
)
from postboard.forms.validators import MAX_ID
from postboard.models.post import Post, PostLike
from postboard.services.asset_store import AssetRemoveError
from postboard.services.comment_service import CommentService
from postboard.services.user_directory import UserDirectory

logger = logging.getLogger(__name__)


class PostService:
    """
    Orchestrates the post lifecycle.

    Posts go ``nonexistent -> active -> (updated)* -> deleted``. Deleting a
    post is a sequence of independently committed steps: the post row, then
    its image in the asset store, then its comments. Failures in the later
    steps are logged and never bring the post back.
    """

    def __init__(self, asset_store, comments: CommentService, users: UserDirectory,
                 per_page: int = 3, allowed_extensions: Optional[List[str]] = None,
                 max_image_bytes: int = 10 * 1024 * 1024):
        """
        Args:
            asset_store: Gateway exposing ``upload(path)`` and ``remove(storage_id)``
            comments: Comment service used for the cascading delete
            users: Directory used to attach owner profiles
            per_page: Page size of paginated listings
            allowed_extensions: Accepted image file extensions
            max_image_bytes: Size limit of a single image
        """
        self.asset_store = asset_store
        self.comments = comments
        self.users = users
        self.per_page = per_page
        self.allowed_extensions = allowed_extensions or ['jpg', 'jpeg', 'png', 'gif', 'webp']
        self.max_image_bytes = max_image_bytes

    # Serialization helpers

    def serialize(self, post: Post, with_profile: bool = True) -> Dict[str, Any]:
        """Post as a dict, with the owner's public profile attached when asked."""
        profile = self.users.get_public_profile(post.user_id) if with_profile else None
        return post.to_dict(user_profile=profile)

    def serialize_many(self, posts: List[Post], with_profile: bool = True) -> List[Dict[str, Any]]:
        if not with_profile:
            return [post.to_dict() for post in posts]
        profiles = self.users.get_public_profiles(post.user_id for post in posts)
        return [post.to_dict(user_profile=profiles.get(post.user_id)) for post in posts]

    # Lookups

    def _get_or_404(self, post_id: int) -> Post:
        post = Post.get(post_id)
        if post is None:
            raise NotFoundError("post not found")
        return post

    def get_by_id(self, post_id: int) -> Post:
        """
        Get a post.

        Raises:
            NotFoundError: If the post does not exist
        """
        return self._get_or_404(post_id)

    def count(self) -> int:
        return db.session.query(Post).count()

    def list(self, page_number: Optional[Any] = None,
             category: Optional[str] = None) -> List[Dict[str, Any]]:
        """
        List posts, newest first.

        Exactly one mode applies, in this order of precedence:
        a page of ``per_page`` posts without owner profiles when
        ``page_number`` is given; posts of one category when ``category``
        is given; otherwise every post. The last two attach owner profiles.

        Raises:
            ValidationError: If page_number is not a positive integer
        """
        if page_number is not None and page_number != "":
            page = self._parse_page_number(page_number)
            return self.serialize_many(Post.find_page(page, self.per_page), with_profile=False)

        if category:
            return self.serialize_many(Post.find_by_category(category))

        return self.serialize_many(Post.find_recent())

    @staticmethod
    def _parse_page_number(page_number: Any) -> int:
        try:
            page = int(page_number)
        except (TypeError, ValueError):
            raise ValidationError('"pageNumber" must be a positive integer', "pageNumber")
        if not 1 <= page <= MAX_ID:
            raise ValidationError('"pageNumber" must be a positive integer', "pageNumber")
        return page

    # Lifecycle

    def create(self, title: Optional[str], description: Optional[str],
               category: Optional[str], owner_id: int,
               image_path: Optional[str]) -> Post:
        """
        Create a post with its image.

        The image is uploaded before anything is written, so a failed upload
        leaves no post behind. The local temporary file is removed afterwards
        whatever the outcome.

        Raises:
            ValidationError: If no image is provided or a field is invalid
            AssetUploadError: If the asset store rejects the upload
        """
        try:
            if not image_path:
                raise ValidationError("no image provided", "image")

            fields = {
                name: value for name, value in
                (("title", title), ("description", description), ("category", category))
                if value is not None
            }
            data = validate_create_post(fields)
            validate_image_file(image_path, self.allowed_extensions, self.max_image_bytes)

            reference = self.asset_store.upload(image_path)

            post = Post(
                title=data.title,
                description=data.description,
                category=data.category,
                user_id=owner_id,
            )
            post.set_image(reference.url, reference.storage_id)
            try:
                db.session.add(post)
                db.session.commit()
            except SQLAlchemyError as e:
                db.session.rollback()
                logger.error(f"Database error creating post, discarding image {reference.storage_id}: {e}")
                self._remove_asset(reference.storage_id)
                raise

            logger.info(f"Post created successfully - ID: {post.id}, User: {owner_id}")
            return post
        finally:
            self._discard_local_file(image_path)

    def update_by_id(self, post_id: int, fields: Mapping[str, Any], caller: Identity) -> Post:
        """
        Update title, description and category of a post.

        Only the owner may update; admins get no override here.

        Raises:
            ValidationError: If a supplied field is invalid
            NotFoundError: If the post does not exist
            ForbiddenError: If the caller is not the owner
        """
        data = validate_update_post(fields)
        post = self._get_or_404(post_id)

        if not caller.owns(post.user_id):
            raise ForbiddenError("access denied, you are not allowed")

        try:
            for name, value in data.changes().items():
                setattr(post, name, value)
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error(f"Error updating post {post_id}: {e}")
            raise

        logger.info(f"Post updated successfully - ID: {post.id}, User: {caller.id}")
        return post

    def update_image(self, post_id: int, image_path: Optional[str], caller: Identity) -> Post:
        """
        Replace the image of a post.

        The new file is uploaded and saved before the old asset is removed,
        so the post always points at an existing image.

        Raises:
            ValidationError: If no valid image file is provided
            NotFoundError: If the post does not exist
            ForbiddenError: If the caller is not the owner
            AssetUploadError: If the asset store rejects the upload
        """
        try:
            if not image_path:
                raise ValidationError("no image provided", "image")

            post = self._get_or_404(post_id)
            if not caller.owns(post.user_id):
                raise ForbiddenError("access denied, you are not allowed")

            validate_image_file(image_path, self.allowed_extensions, self.max_image_bytes)

            old_storage_id = post.image_storage_id
            reference = self.asset_store.upload(image_path)

            try:
                post.set_image(reference.url, reference.storage_id)
                db.session.commit()
            except SQLAlchemyError as e:
                db.session.rollback()
                logger.error(f"Error saving new image for post {post_id}: {e}")
                self._remove_asset(reference.storage_id)
                raise

            if old_storage_id:
                self._remove_asset(old_storage_id)

            logger.info(f"Post image replaced - ID: {post.id}, User: {caller.id}")
            return post
        finally:
            self._discard_local_file(image_path)

    def toggle_like(self, post_id: int, user_id: int) -> Post:
        """
        Add the user to the post's like-set, or remove them if present.

        Each toggle is a single-row delete or insert, so concurrent toggles
        from different users never overwrite each other.

        Raises:
            NotFoundError: If the post does not exist
        """
        post = self._get_or_404(post_id)
        membership = (PostLike.post_id == post_id) & (PostLike.user_id == user_id)

        try:
            removed = db.session.execute(delete(PostLike).where(membership)).rowcount
            if not removed:
                db.session.execute(insert(PostLike).values(post_id=post_id, user_id=user_id))
            db.session.commit()
        except IntegrityError:
            # Same user toggled concurrently and the row is already there
            db.session.rollback()
            logger.info(f"Concurrent like by user {user_id} on post {post_id}, keeping it")
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error(f"Error toggling like on post {post_id}: {e}")
            raise

        db.session.refresh(post)
        logger.info(f"Like toggled - Post: {post_id}, User: {user_id}, Liked: {not removed}")
        return post

    def delete_by_id(self, post_id: int, caller: Identity) -> int:
        """
        Delete a post, its image and its comments.

        Allowed for the owner and for admins.

        Returns:
            The deleted post's id

        Raises:
            NotFoundError: If the post does not exist
            ForbiddenError: If the caller is neither owner nor admin
        """
        post = self._get_or_404(post_id)
        if not caller.owns_or_admin(post.user_id):
            raise ForbiddenError("access denied, forbidden")

        storage_id = post.image_storage_id

        try:
            db.session.delete(post)
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error(f"Error deleting post {post_id}: {e}")
            raise

        if storage_id:
            self._remove_asset(storage_id)

        try:
            self.comments.delete_all_by_post_id(post_id)
        except SQLAlchemyError as e:
            logger.error(f"Post {post_id} deleted but its comments were not: {e}")

        logger.info(f"Post deleted - ID: {post_id}, User: {caller.id}")
        return post_id

    # Best-effort side effects

    def _remove_asset(self, storage_id: str) -> None:
        try:
            self.asset_store.remove(storage_id)
        except AssetRemoveError as e:
            logger.warning(f"Could not remove asset {storage_id}: {e}")

    @staticmethod
    def _discard_local_file(path: Optional[str]) -> None:
        if not path:
            return
        try:
            os.remove(path)
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.warning(f"Could not remove temporary file {path}: {e}")
