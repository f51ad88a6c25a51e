"""
Error taxonomy for the PrepChef data layer.

Local errors (validation, missing auth) are raised before any network call.
Remote errors are caught once at the service boundary and reclassified into
RemoteOperationError, keeping the backend's original code for logging.
"""

from typing import Any, Literal, Optional

RemoteErrorKind = Literal[
    "table_missing",
    "access_denied",
    "duplicate_key",
    "invalid_token",
    "unknown",
]

# Postgres error codes surfaced by PostgREST
UNDEFINED_TABLE = "42P01"
INSUFFICIENT_PRIVILEGE = "42501"
UNIQUE_VIOLATION = "23505"


class DataServiceError(Exception):
    """Base class for every error raised by the data layer."""


class ValidationError(DataServiceError):
    """A required field is missing or invalid. Raised before any remote call."""


class AuthRequiredError(DataServiceError):
    """A mutating operation was attempted without an active identity."""


class ConnectionUnavailableError(DataServiceError):
    """The pre-flight reachability check failed."""


class RemoteOperationError(DataServiceError):
    """
    A backend call failed.

    Attributes:
        kind: Reclassified category of the failure
        code: Original backend error code (e.g. "23505"), if any
        details: Original backend details string, if any
        hint: Original backend hint string, if any
    """

    def __init__(
        self,
        message: str,
        kind: RemoteErrorKind = "unknown",
        code: Optional[str] = None,
        details: Optional[str] = None,
        hint: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.kind = kind
        self.code = code
        self.details = details
        self.hint = hint


def error_message(exc: BaseException) -> str:
    """Best-effort human readable message for a backend or transport exception."""
    message = getattr(exc, "message", None)
    if isinstance(message, str) and message:
        return message
    return str(exc) or exc.__class__.__name__


def is_rls_error(exc: Any) -> bool:
    """True when the error is a row-level-security / permission refusal."""
    code = getattr(exc, "code", None)
    message = getattr(exc, "message", None) or str(exc)
    return code == INSUFFICIENT_PRIVILEGE or "RLS" in str(message)


def classify_remote_error(exc: BaseException) -> RemoteOperationError:
    """
    Map a backend exception to a RemoteOperationError.

    Args:
        exc: postgrest APIError, auth error, or transport exception

    Returns:
        A RemoteOperationError carrying a readable message and the original code
    """
    if isinstance(exc, RemoteOperationError):
        return exc

    code = getattr(exc, "code", None)
    code = str(code) if code is not None else None
    message = error_message(exc)
    details = getattr(exc, "details", None)
    hint = getattr(exc, "hint", None)

    if code == UNDEFINED_TABLE:
        return RemoteOperationError(
            "Table not found. Please ensure database migrations have been run.",
            kind="table_missing", code=code, details=details, hint=hint,
        )
    if code == INSUFFICIENT_PRIVILEGE or "RLS" in message:
        return RemoteOperationError(
            "Access denied. Please check Row Level Security policies or authentication.",
            kind="access_denied", code=code, details=details, hint=hint,
        )
    if code == UNIQUE_VIOLATION:
        return RemoteOperationError(
            "Duplicate entry detected. This item may already exist.",
            kind="duplicate_key", code=code, details=details, hint=hint,
        )
    if "JWT" in message:
        return RemoteOperationError(
            "Authentication token invalid. Please refresh and try again.",
            kind="invalid_token", code=code, details=details, hint=hint,
        )
    return RemoteOperationError(message, kind="unknown", code=code, details=details, hint=hint)
