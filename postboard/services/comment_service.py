"""Comment service for comment CRUD and ownership checks."""
import logging
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError

from postboard.auth import Identity
from postboard.errors import ForbiddenError, NotFoundError
from postboard.extensions import db
from postboard.forms.comments import validate_create_comment, validate_update_comment
from postboard.models.base import utcnow
from postboard.models.comment import Comment

logger = logging.getLogger(__name__)


class CommentService:
    """Service for comment operations."""

    def create(self, post_id: Optional[int], text: Optional[str], user_id: int,
               username: str) -> Comment:
        """
        Create a comment.

        The post is not looked up here; callers check it exists.

        Raises:
            ValidationError: If text or post id is missing
        """
        payload = {key: value for key, value in (("postId", post_id), ("text", text))
                   if value is not None}
        data = validate_create_comment(payload)

        try:
            comment = Comment.create(
                post_id=data.post_id,
                text=data.text,
                user_id=user_id,
                username=username,
            )
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error(f"Error creating comment on post {data.post_id}: {e}")
            raise

        logger.info(f"Comment created - ID: {comment.id}, Post: {comment.post_id}, User: {user_id}")
        return comment

    def list_all(self) -> List[Comment]:
        return Comment.query.order_by(Comment.created_at.desc(), Comment.id.desc()).all()

    def list_by_post_id(self, post_id: int) -> List[Comment]:
        return Comment.find_by_post(post_id)

    def get_by_id(self, comment_id: int) -> Comment:
        comment = Comment.get(comment_id)
        if comment is None:
            raise NotFoundError("comment not found")
        return comment

    def delete_by_id(self, comment_id: int, caller: Identity) -> int:
        """
        Delete a comment as its owner or an admin.

        Returns:
            The deleted comment's id

        Raises:
            NotFoundError: If the comment does not exist
            ForbiddenError: If the caller is neither owner nor admin
        """
        comment = self.get_by_id(comment_id)
        if not caller.owns_or_admin(comment.user_id):
            raise ForbiddenError("access denied, not allowed")

        try:
            comment.delete()
        except SQLAlchemyError:
            db.session.rollback()
            raise

        logger.info(f"Comment deleted - ID: {comment_id}, User: {caller.id}")
        return comment_id

    def update_by_id(self, comment_id: int, text: Optional[str], caller: Identity) -> Comment:
        """
        Replace a comment's text as its owner or an admin.

        Raises:
            ValidationError: If the text is missing or empty
            NotFoundError: If the comment does not exist
            ForbiddenError: If the caller is neither owner nor admin
        """
        data = validate_update_comment({"text": text} if text is not None else {})
        comment = self.get_by_id(comment_id)
        if not caller.owns_or_admin(comment.user_id):
            raise ForbiddenError("access denied, only the owner or an admin can edit this comment")

        try:
            comment.text = data.text
            comment.updated_at = utcnow()
            db.session.commit()
        except SQLAlchemyError:
            db.session.rollback()
            raise

        logger.info(f"Comment updated - ID: {comment_id}, User: {caller.id}")
        return comment

    def delete_all_by_post_id(self, post_id: int) -> int:
        """Remove every comment on a post; zero matches is not an error."""
        try:
            deleted = Comment.query.filter(Comment.post_id == post_id).delete(
                synchronize_session=False
            )
            db.session.commit()
        except SQLAlchemyError:
            db.session.rollback()
            raise

        logger.info(f"Deleted {deleted} comments of post {post_id}")
        return deleted
