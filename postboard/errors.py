"""Error taxonomy shared by the services and the API error handlers."""
from typing import Optional


class ServiceError(Exception):
    """Base class for errors that map onto an HTTP response."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"message": self.message}


class ValidationError(ServiceError):
    """Malformed or missing input."""

    status_code = 400

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class NotFoundError(ServiceError):
    """Referenced entity does not exist."""

    status_code = 404


class ForbiddenError(ServiceError):
    """Caller is not allowed to perform the operation."""

    status_code = 403
