"""
Tests unitaires pour ActionResult.
"""

import dataclasses

import pytest

from session_rotation.auth import INVALID_CREDENTIALS, INVALID_TOKEN, ActionError, ActionResult, FieldError


class TestConstructors:
    def test_success(self):
        result = ActionResult.success("jwt-value", "refresh-value")

        assert result.succeeded is True
        assert result.errors == ()
        assert result.jwt == "jwt-value"
        assert result.refresh_token == "refresh-value"

    def test_failure(self):
        result = ActionResult.failure("first", "second")

        assert result.succeeded is False
        assert result.errors == (ActionError("first"), ActionError("second"))
        assert result.jwt is None
        assert result.refresh_token is None

    def test_failure_from_field_errors(self):
        """Descriptions reprises telles quelles, dans l'ordre."""
        errors = [FieldError("A", "Email 'x' is invalid."), FieldError("B", "Passwords must be longer.")]

        result = ActionResult.failure_from_field_errors(errors)

        assert [e.message for e in result.errors] == ["Email 'x' is invalid.", "Passwords must be longer."]

    def test_errors_as_string(self):
        assert ActionResult.failure("a", "b").errors_as_string() == "a; b"


class TestInvariants:
    """Un résultat incohérent ne peut pas être construit."""

    def test_success_without_tokens(self):
        with pytest.raises(ValueError):
            ActionResult(succeeded=True, jwt="jwt-value")

    def test_success_with_errors(self):
        with pytest.raises(ValueError):
            ActionResult(succeeded=True, errors=(ActionError("x"),), jwt="a", refresh_token="b")

    def test_failure_without_errors(self):
        with pytest.raises(ValueError):
            ActionResult.failure()

    def test_failure_with_tokens(self):
        with pytest.raises(ValueError):
            ActionResult(succeeded=False, errors=(ActionError("x"),), jwt="a")

    def test_immutable(self):
        with pytest.raises(dataclasses.FrozenInstanceError):
            INVALID_TOKEN.succeeded = True


class TestSharedResults:
    def test_invalid_token(self):
        assert INVALID_TOKEN.succeeded is False
        assert INVALID_TOKEN.errors_as_string() == "Invalid token"

    def test_invalid_credentials(self):
        assert INVALID_CREDENTIALS.errors_as_string() == "Invalid credentials supplied"
