import pytest
from sqlalchemy.exc import IntegrityError, OperationalError

from keychat.core.errors import (
    ErrorKind,
    FieldConflictError,
    ForbiddenError,
    InternalError,
    NotFoundError,
    RejectedError,
    classify_error,
)


def integrity_error(message: str) -> IntegrityError:
    return IntegrityError("INSERT INTO users ...", {}, Exception(message))


@pytest.mark.parametrize("message,field", [
    ("UNIQUE constraint failed: users.username", "username"),
    ("UNIQUE constraint failed: users.email", "email"),
    (
        "<class 'asyncpg.exceptions.UniqueViolationError'>: duplicate key value violates "
        "unique constraint \"users_email_key\"\nDETAIL:  Key (email)=(a@example.com) already exists.",
        "email",
    ),
    ('duplicate key value violates unique constraint "ix_users_username"', "username"),
])
def test_unique_violations_become_field_conflicts(message, field):
    error = classify_error(integrity_error(message))

    assert isinstance(error, FieldConflictError)
    assert error.field == field
    assert error.to_response() == {"status": "fail", "data": {field: f"{field} already exists"}}


def test_other_integrity_errors_are_fails_with_detail():
    error = classify_error(integrity_error("NOT NULL constraint failed: messages.content"))

    assert error.status == "fail"
    assert "detail" in error.fields


def test_operational_errors_are_internal():
    error = classify_error(OperationalError("SELECT 1", {}, Exception("database is locked")))

    assert isinstance(error, InternalError)
    assert error.http_status == 500
    assert error.to_response() == {"status": "error", "message": "Internal server error"}


def test_unknown_exceptions_are_internal():
    assert isinstance(classify_error(RuntimeError("boom")), InternalError)


def test_classified_errors_pass_through():
    original = NotFoundError({"username": "bob does not exist"})

    assert classify_error(original) is original


@pytest.mark.parametrize("error,kind,http_status,tier", [
    (FieldConflictError("username"), ErrorKind.FIELD_CONFLICT, 400, "fail"),
    (NotFoundError({"userId": "1 does not exist"}), ErrorKind.NOT_FOUND, 400, "fail"),
    (RejectedError({"messages": "no"}), ErrorKind.REJECTED, 400, "fail"),
    (ForbiddenError({"key": "Invalid api key"}), ErrorKind.FORBIDDEN, 403, "fail"),
    (InternalError(), ErrorKind.INTERNAL, 500, "error"),
])
def test_error_tiers(error, kind, http_status, tier):
    assert error.kind is kind
    assert error.http_status == http_status
    assert error.status == tier
