"""notes_shared.errors — Error taxonomy for the Notes Lambdas.

Every error carries the HTTP status it maps to and a message that is safe to
return to the caller. Store failures keep their original cause on
``__cause__`` for logging only.
"""

from __future__ import annotations

from botocore.exceptions import ClientError


class NotesError(Exception):
    """Base class for errors that map to a client-facing response."""

    status_code = 500
    code = "INTERNAL_ERROR"

    def __init__(self, message: str = "") -> None:
        super().__init__(message)
        self.message = message or self.default_message()

    @classmethod
    def default_message(cls) -> str:
        return "Internal server error"


class ValidationError(NotesError):
    status_code = 400
    code = "INVALID_INPUT"

    @classmethod
    def default_message(cls) -> str:
        return "Invalid request"


class AuthenticationError(NotesError):
    status_code = 401
    code = "PERMISSION_DENIED"

    @classmethod
    def default_message(cls) -> str:
        return "Authentication required. Please sign in."


class NotFoundError(NotesError):
    status_code = 404
    code = "NOT_FOUND"

    @classmethod
    def default_message(cls) -> str:
        return "Not found"


class ConflictError(NotesError):
    """Raised when a create-if-absent write finds an existing item."""

    status_code = 409
    code = "CONFLICT"

    @classmethod
    def default_message(cls) -> str:
        return "Already exists"


class InternalError(NotesError):
    status_code = 500
    code = "INTERNAL_ERROR"


def _is_conditional_check_failed(exc: Exception) -> bool:
    """True when a DynamoDB write was rejected by its ConditionExpression."""
    if not isinstance(exc, ClientError):
        return False
    return exc.response.get("Error", {}).get("Code") == "ConditionalCheckFailedException"
