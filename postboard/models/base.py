"""Base model with common fields and functionality."""
import re
from datetime import datetime, timezone
from typing import Any
from sqlalchemy import Column, Integer, DateTime
from postboard.extensions import db


def utcnow() -> datetime:
    """Naive UTC timestamp, as stored in the database."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def camel_case(name: str) -> str:
    """Convert a snake_case column name to its camelCase wire name."""
    return re.sub(r"_([a-z])", lambda match: match.group(1).upper(), name)


class BaseModel(db.Model):
    """Base model class with common fields."""

    __abstract__ = True

    id = Column(Integer, primary_key=True)
    created_at = Column(DateTime, default=utcnow, nullable=False, index=True)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    # Columns that never leave the server
    _private_columns = ()

    def to_dict(self) -> dict[str, Any]:
        """Convert model instance to a camelCase dictionary."""
        result = {}
        for column in self.__table__.columns:
            if column.name in self._private_columns:
                continue
            value = getattr(self, column.name)
            if isinstance(value, datetime):
                value = value.isoformat()
            result[camel_case(column.name)] = value
        return result

    def save(self) -> "BaseModel":
        """Save model instance to database."""
        db.session.add(self)
        db.session.commit()
        return self

    def delete(self) -> bool:
        """Delete model instance from database."""
        db.session.delete(self)
        db.session.commit()
        return True

    @classmethod
    def create(cls, **kwargs) -> "BaseModel":
        """Create new model instance."""
        instance = cls(**kwargs)
        return instance.save()

    @classmethod
    def get(cls, record_id: int):
        """Get an instance by primary key, or None."""
        return db.session.get(cls, record_id)
