"""User model for authentication and public profiles."""
from typing import Any, Optional
from flask_login import UserMixin
from sqlalchemy import Column, String, Boolean, Text
from postboard.models.base import BaseModel


class User(BaseModel, UserMixin):
    """Registered user.

    Accounts are created and their passwords hashed by the external
    authentication service; this application only reads them.
    """

    __tablename__ = "users"

    _private_columns = ("password_hash",)

    username = Column(String(100), nullable=False)
    email = Column(String(120), unique=True, nullable=False)
    password_hash = Column(String(255), nullable=False)

    # Profile fields
    bio = Column(Text, nullable=True)
    profile_photo_url = Column(String(255), nullable=True)

    # Account status
    is_admin = Column(Boolean, default=False, nullable=False)
    is_account_verified = Column(Boolean, default=False, nullable=False)

    def __repr__(self) -> str:
        """String representation of user."""
        return f"<User {self.username} ({self.email})>"

    def get_id(self) -> str:
        """Get user ID as string (for Flask-Login)."""
        return str(self.id)

    def to_public_dict(self) -> dict[str, Any]:
        """Profile without credentials."""
        return self.to_dict()

    @classmethod
    def find_by_username(cls, username: str) -> Optional["User"]:
        """Find user by username."""
        return cls.query.filter_by(username=username).first()
