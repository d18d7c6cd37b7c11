"""Read-only access to user profiles for the other services."""
import logging
from typing import Any, Dict, Iterable, Optional

from postboard.extensions import db
from postboard.models.user import User

logger = logging.getLogger(__name__)


class UserDirectory:
    """Looks up users by id and projects them to their public profile."""

    def get_public_profile(self, user_id: int) -> Optional[Dict[str, Any]]:
        """Profile of a user without credentials, or None if unknown."""
        user = User.get(user_id)
        if user is None:
            logger.warning(f"Profile requested for unknown user {user_id}")
            return None
        return user.to_public_dict()

    def get_public_profiles(self, user_ids: Iterable[int]) -> Dict[int, Dict[str, Any]]:
        """Profiles for several users in one query, keyed by id."""
        ids = set(user_ids)
        if not ids:
            return {}
        users = db.session.execute(
            db.select(User).where(User.id.in_(ids))
        ).scalars()
        return {user.id: user.to_public_dict() for user in users}

    def get_username(self, user_id: int) -> Optional[str]:
        user = User.get(user_id)
        return user.username if user else None
