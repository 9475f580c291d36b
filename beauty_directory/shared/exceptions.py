"""Domain exceptions shared by every store and service.

Services raise these; ``main.py`` registers a handler that maps each one to
its HTTP status and a ``{"message": ...}`` body.
"""

from typing import Optional


class DomainError(Exception):
    """Base class for errors surfaced to the API layer"""

    status_code = 500

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.field = field

    def to_dict(self) -> dict:
        body = {"message": self.message}
        if self.field:
            body["field"] = self.field
        return body


class ValidationError(DomainError):
    """Malformed or missing input"""

    status_code = 400


class UnauthorizedError(DomainError):
    """No verified identity on the request"""

    status_code = 401


class ForbiddenError(DomainError):
    """Verified caller is not entitled to act on the resource"""

    status_code = 403


class NotFoundError(DomainError):
    status_code = 404


class ConflictError(DomainError):
    """Uniqueness violation (username, service name, duplicate review)"""

    status_code = 409
