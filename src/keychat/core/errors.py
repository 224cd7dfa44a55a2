"""
Error hierarchy shared by the gateways and the HTTP layer.

Every error carries a kind, a field map and a tier:
``fail`` for client-correctable problems (answered with 400, or 403 for
authentication) and ``error`` for internal ones (answered with 500).
"""
from enum import Enum
import re

from sqlalchemy.exc import IntegrityError


class ErrorKind(str, Enum):
    FIELD_CONFLICT = "field_conflict"
    NOT_FOUND = "not_found"
    REJECTED = "rejected"
    FORBIDDEN = "forbidden"
    INTERNAL = "internal"


class MessengerError(Exception):
    """
    Base class for every error the API turns into a JSON envelope.
    Attributes:
        kind: discriminant of the error
        fields: field-keyed explanation sent back as ``data``
        message: generic message, only sent for internal errors
    """
    kind: ErrorKind = ErrorKind.INTERNAL
    http_status: int = 500

    def __init__(self, fields: dict | None = None, message: str = "Internal server error"):
        super().__init__(message if fields is None else str(fields))
        self.fields = fields or {}
        self.message = message

    @property
    def status(self) -> str:
        return "error" if self.kind is ErrorKind.INTERNAL else "fail"

    def to_response(self) -> dict:
        if self.status == "error":
            return {"status": self.status, "message": self.message}
        return {"status": self.status, "data": self.fields}


class FieldConflictError(MessengerError):
    kind = ErrorKind.FIELD_CONFLICT
    http_status = 400

    def __init__(self, field: str, explanation: str | None = None):
        super().__init__({field: explanation or f"{field} already exists"})
        self.field = field


class NotFoundError(MessengerError):
    kind = ErrorKind.NOT_FOUND
    http_status = 400


class RejectedError(MessengerError):
    """Request is well formed but not allowed, e.g. messaging oneself"""
    kind = ErrorKind.REJECTED
    http_status = 400


class ForbiddenError(MessengerError):
    kind = ErrorKind.FORBIDDEN
    http_status = 403


class InternalError(MessengerError):
    kind = ErrorKind.INTERNAL
    http_status = 500


# SQLite: "UNIQUE constraint failed: users.username"
_SQLITE_UNIQUE = re.compile(r"UNIQUE constraint failed: \w+\.(\w+)")
# PostgreSQL: "DETAIL:  Key (username)=(bob) already exists."
_POSTGRES_KEY = re.compile(r"Key \((\w+)\)=")
# PostgreSQL without detail: 'unique constraint "ix_users_username"'
_POSTGRES_CONSTRAINT = re.compile(r'unique constraint "(?:ix|uq)_\w+?_(\w+)"')


def conflicting_field(exc: IntegrityError) -> str | None:
    text = str(exc.orig) if exc.orig is not None else str(exc)
    for pattern in (_SQLITE_UNIQUE, _POSTGRES_KEY, _POSTGRES_CONSTRAINT):
        match = pattern.search(text)
        if match:
            return match.group(1)
    return None


def classify_error(exc: Exception) -> MessengerError:
    """
    Map an exception raised while talking to the store onto the hierarchy.
    :param exc: exception caught by a gateway
    :return: FieldConflictError for unique violations, InternalError otherwise
    """
    if isinstance(exc, MessengerError):
        return exc

    if isinstance(exc, IntegrityError):
        field = conflicting_field(exc)
        if field is not None:
            return FieldConflictError(field)
        return FieldConflictError("detail", str(exc.orig))

    return InternalError()
