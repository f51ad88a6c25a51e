"""
Tests for backend error classification.
"""

import pytest

from prepchef.errors import (
    RemoteOperationError,
    classify_remote_error,
    error_message,
    is_rls_error,
)
from tests.fakes import api_error


class TestClassifyRemoteError:
    """Tests for classify_remote_error."""

    @pytest.mark.parametrize(
        "code, message, kind",
        [
            ("42P01", 'relation "public.recipes" does not exist', "table_missing"),
            ("42501", "permission denied for table recipes", "access_denied"),
            (None, "new row violates RLS policy", "access_denied"),
            ("23505", "duplicate key value violates unique constraint", "duplicate_key"),
            ("PGRST301", "JWT expired", "invalid_token"),
            ("22P02", "invalid input syntax for type uuid", "unknown"),
        ],
    )
    def test_kinds(self, code, message, kind):
        error = classify_remote_error(api_error(code, message))

        assert isinstance(error, RemoteOperationError)
        assert error.kind == kind
        assert error.code == code

    def test_table_missing_message_points_to_migrations(self):
        error = classify_remote_error(api_error("42P01", "relation does not exist"))

        assert str(error) == "Table not found. Please ensure database migrations have been run."

    def test_unknown_keeps_backend_message(self):
        error = classify_remote_error(api_error("22P02", "invalid input syntax for type uuid"))

        assert str(error) == "invalid input syntax for type uuid"

    def test_transport_errors_are_wrapped(self):
        error = classify_remote_error(ConnectionError("Connection reset by peer"))

        assert error.kind == "unknown"
        assert error.code is None
        assert error.message == "Connection reset by peer"

    def test_already_classified_passes_through(self):
        original = RemoteOperationError("boom", kind="duplicate_key")

        assert classify_remote_error(original) is original


class TestHelpers:
    """Tests for error_message and is_rls_error."""

    def test_error_message_prefers_backend_message(self):
        assert error_message(api_error("42501", "permission denied")) == "permission denied"

    def test_error_message_falls_back_to_class_name(self):
        assert error_message(TimeoutError()) == "TimeoutError"

    def test_is_rls_error(self):
        assert is_rls_error(api_error("42501", "permission denied")) is True
        assert is_rls_error(api_error("PGRST", "violates RLS policy")) is True
        assert is_rls_error(api_error("42P01", "relation does not exist")) is False
