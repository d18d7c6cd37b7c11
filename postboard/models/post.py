"""Post model with its image reference and like-set."""
from typing import Any, Optional, List
from sqlalchemy import (
    Column, String, Text, Integer, DateTime,
    ForeignKey, Index
)
from sqlalchemy.orm import relationship
from postboard.extensions import db
from postboard.models.base import BaseModel, utcnow


class PostLike(db.Model):
    """Membership row of a post's like-set.

    The composite primary key keeps membership unique, so toggling is a
    single-row insert or delete.
    """

    __tablename__ = "post_likes"

    post_id = Column(Integer, ForeignKey("posts.id", ondelete="CASCADE"), primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)


class Post(BaseModel):
    """Blog post with a single image stored in the asset store."""

    __tablename__ = "posts"

    TITLE_MIN_LENGTH = 2
    TITLE_MAX_LENGTH = 220
    DESCRIPTION_MIN_LENGTH = 10
    CATEGORY_MAX_LENGTH = 100

    # Relationships
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)

    # Post content
    title = Column(String(TITLE_MAX_LENGTH), nullable=False)
    description = Column(Text, nullable=False)
    category = Column(String(CATEGORY_MAX_LENGTH), nullable=False)

    # Image reference: either empty ("", None) or fully populated after upload
    image_url = Column(String(500), default="", nullable=False)
    image_storage_id = Column(String(255), nullable=True)

    user = relationship("User", backref="posts")
    like_rows = relationship(
        "PostLike",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by=PostLike.created_at,
    )

    __table_args__ = (
        Index("idx_posts_category_created", "category", "created_at"),
        Index("idx_posts_user_created", "user_id", "created_at"),
    )

    def __repr__(self) -> str:
        """String representation of post."""
        return f"<Post '{self.title}' by user {self.user_id}>"

    @property
    def likes(self) -> List[int]:
        """User ids in the like-set."""
        return [row.user_id for row in self.like_rows]

    @property
    def image(self) -> dict[str, Optional[str]]:
        return {"url": self.image_url or "", "publicId": self.image_storage_id}

    def set_image(self, url: str, storage_id: str) -> None:
        self.image_url = url
        self.image_storage_id = storage_id

    def to_dict(self, user_profile: Optional[dict[str, Any]] = None) -> dict[str, Any]:
        """Serialize the post.

        Args:
            user_profile: Public profile of the owner; the bare user id is
                used when omitted.
        """
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "category": self.category,
            "user": user_profile if user_profile is not None else self.user_id,
            "image": self.image,
            "likes": self.likes,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }

    @classmethod
    def newest_first(cls):
        """Base query ordered by creation time, newest first."""
        return cls.query.order_by(cls.created_at.desc(), cls.id.desc())

    @classmethod
    def find_page(cls, page_number: int, per_page: int) -> List["Post"]:
        """Get one page of posts, newest first (1-indexed)."""
        return cls.newest_first().offset((page_number - 1) * per_page).limit(per_page).all()

    @classmethod
    def find_by_category(cls, category: str) -> List["Post"]:
        """Find posts whose category matches exactly."""
        return cls.newest_first().filter(cls.category == category).all()

    @classmethod
    def find_recent(cls) -> List["Post"]:
        """All posts, newest first."""
        return cls.newest_first().all()
