"""Category model: a flat list of free-text labels managed by admins."""
from sqlalchemy import Column, String, Integer, ForeignKey
from postboard.models.base import BaseModel


class Category(BaseModel):
    """Named tag posts can be filed under.

    Posts store the category title as plain text, so removing a category
    leaves existing posts untouched.
    """

    __tablename__ = "categories"

    title = Column(String(100), nullable=False)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)

    def __repr__(self) -> str:
        """String representation of category."""
        return f"<Category {self.title}>"

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["user"] = data.pop("userId")
        return data

    @classmethod
    def get_all(cls) -> list["Category"]:
        """Get all categories in insertion order."""
        return cls.query.order_by(cls.id).all()
