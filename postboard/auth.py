"""Caller identity resolved from bearer tokens.

Tokens are issued by the external authentication service, signed with the
shared ``SECRET_KEY``; this module only verifies them and exposes the
caller as an ``Identity``.
"""
import logging
from dataclasses import dataclass
from functools import wraps
from typing import Optional

from flask import Request, current_app, jsonify
from flask_login import current_user, login_required
from itsdangerous import BadSignature, SignatureExpired, URLSafeTimedSerializer

from postboard.errors import ForbiddenError
from postboard.extensions import login_manager
from postboard.models.user import User

logger = logging.getLogger(__name__)

TOKEN_SALT = "postboard-api-token"


@dataclass(frozen=True)
class Identity:
    """Authenticated caller for one request."""
    id: int
    is_admin: bool = False

    @classmethod
    def from_user(cls, user: User) -> "Identity":
        return cls(id=user.id, is_admin=bool(user.is_admin))

    def owns(self, owner_id: int) -> bool:
        return self.id == owner_id

    def owns_or_admin(self, owner_id: int) -> bool:
        return self.is_admin or self.owns(owner_id)


def _serializer() -> URLSafeTimedSerializer:
    return URLSafeTimedSerializer(current_app.config["SECRET_KEY"], salt=TOKEN_SALT)


def generate_token(user_id: int) -> str:
    """Sign a token for a user id (development and tests)."""
    return _serializer().dumps({"id": user_id})


def verify_token(token: str) -> Optional[int]:
    """User id carried by a valid token, or None."""
    try:
        payload = _serializer().loads(
            token, max_age=current_app.config.get("AUTH_TOKEN_MAX_AGE")
        )
    except SignatureExpired:
        logger.info("Rejected expired token")
        return None
    except BadSignature:
        logger.warning("Rejected token with bad signature")
        return None

    if not isinstance(payload, dict) or not isinstance(payload.get("id"), int):
        return None
    return payload["id"]


@login_manager.request_loader
def load_user_from_request(request: Request) -> Optional[User]:
    """Load user from the ``Authorization: Bearer`` header (for Flask-Login)."""
    header = request.headers.get("Authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None

    user_id = verify_token(token.strip())
    if user_id is None:
        return None
    return User.get(user_id)


@login_manager.unauthorized_handler
def unauthorized():
    """JSON 401 instead of a login redirect."""
    return jsonify({"message": "no token provided or token is invalid"}), 401


def current_identity() -> Identity:
    """Identity of the logged-in caller; only valid behind ``login_required``."""
    return Identity.from_user(current_user)


def admin_required(view):
    """Restrict a view to admin identities."""
    @wraps(view)
    @login_required
    def wrapped(*args, **kwargs):
        if not current_identity().is_admin:
            raise ForbiddenError("not allowed, only admin")
        return view(*args, **kwargs)
    return wrapped
