"""Comment model."""
from typing import List
from sqlalchemy import Column, String, Text, Integer, ForeignKey
from postboard.models.base import BaseModel


class Comment(BaseModel):
    """Flat text comment on a post.

    ``post_id`` has no database foreign key: post deletion commits first and
    the comments are swept afterwards by the post service.
    """

    __tablename__ = "comments"

    post_id = Column(Integer, nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    text = Column(Text, nullable=False)
    # Snapshot taken at creation; not updated when the user renames
    username = Column(String(100), nullable=False)

    def __repr__(self) -> str:
        """String representation of comment."""
        return f"<Comment {self.id} on Post {self.post_id}>"

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["user"] = data.pop("userId")
        return data

    @classmethod
    def find_by_post(cls, post_id: int) -> List["Comment"]:
        """Comments on a post, newest first."""
        return cls.query.filter_by(post_id=post_id).order_by(
            cls.created_at.desc(), cls.id.desc()
        ).all()
