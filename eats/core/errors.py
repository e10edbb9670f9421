"""
Service error taxonomy.

Services raise these internally; the service boundary converts them into a
failed ``ServiceResult`` so that callers can branch on ``ErrorKind`` instead
of parsing messages.
"""

from enum import Enum


class ErrorKind(str, Enum):
    """Discriminates why a service operation failed."""
    NOT_FOUND = "not_found"
    FORBIDDEN = "forbidden"
    VALIDATION = "validation"
    PERSISTENCE = "persistence"
    INTERNAL = "internal"


class ServiceError(Exception):
    """Base class for expected, user-facing failures."""

    kind: ErrorKind = ErrorKind.INTERNAL

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(ServiceError):
    kind = ErrorKind.NOT_FOUND


class ForbiddenError(ServiceError):
    kind = ErrorKind.FORBIDDEN


class ValidationFailed(ServiceError):
    kind = ErrorKind.VALIDATION
