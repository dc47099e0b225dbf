"""
Tests unitaires pour AccountAuthenticationService et les modèles de requêtes.
"""

from unittest.mock import AsyncMock

import pytest
from pydantic import ValidationError

from session_rotation.auth import (
    INVALID_CREDENTIALS,
    Account,
    AccountAuthenticationService,
    AccountCreate,
    AccountLogin,
    ActionResult,
    IAccountStore,
    IAuthenticationCoordinator,
    RefreshAttempt,
)


def make_create_request(**overrides) -> AccountCreate:
    data = {
        "user_name": "jane",
        "email": "jane@example.com",
        "first_name": "Jane",
        "last_name": "Doe",
        "phone_number": "+33 6 12 34 56 78",
        "password": "Secret1",
        "password_confirm": "Secret1",
    }
    data.update(overrides)
    return AccountCreate(**data)


# ══════════════════════════════════════════════════════════════════════════════
# MODÈLES
# ══════════════════════════════════════════════════════════════════════════════


class TestRequestModels:
    def test_valid_create_request(self):
        request = make_create_request()
        assert request.email == "jane@example.com"

    def test_password_confirmation_mismatch(self):
        with pytest.raises(ValidationError):
            make_create_request(password_confirm="Other1")

    @pytest.mark.parametrize("email", ["jane", "jane@", "jane@example", "@example.com"])
    def test_invalid_email_rejected(self, email):
        with pytest.raises(ValidationError):
            make_create_request(email=email)

    def test_invalid_phone_rejected(self):
        with pytest.raises(ValidationError):
            make_create_request(phone_number="call me")

    def test_login_requires_password(self):
        with pytest.raises(ValidationError):
            AccountLogin(email="jane@example.com", password="")

    @pytest.mark.parametrize("field", ["jwt", "refresh_token"])
    def test_refresh_attempt_requires_both_tokens(self, field):
        data = {"jwt": "a.b.c", "refresh_token": "r"}
        data[field] = ""

        with pytest.raises(ValidationError):
            RefreshAttempt(**data)


# ══════════════════════════════════════════════════════════════════════════════
# SERVICE
# ══════════════════════════════════════════════════════════════════════════════


class TestAccountAuthenticationService:
    """Traduction requêtes → coordinateur."""

    def setup_method(self):
        self.coordinator = AsyncMock(spec=IAuthenticationCoordinator)
        self.accounts = AsyncMock(spec=IAccountStore)
        self.service = AccountAuthenticationService(self.coordinator, self.accounts)
        self.ok = ActionResult.success("jwt-value", "refresh-value")

    @pytest.mark.asyncio
    async def test_create_builds_account(self):
        self.coordinator.create.return_value = self.ok

        result = await self.service.create(make_create_request())

        assert result is self.ok
        account, password = self.coordinator.create.await_args.args
        assert account == Account(
            email="jane@example.com",
            first_name="Jane",
            last_name="Doe",
            user_name="jane",
            phone_number="+33 6 12 34 56 78",
        )
        assert password == "Secret1"

    @pytest.mark.asyncio
    async def test_authenticate_known_account(self):
        account = Account(email="jane@example.com", first_name="Jane")
        self.accounts.find_by_email.return_value = account
        self.coordinator.authenticate.return_value = self.ok

        result = await self.service.authenticate(AccountLogin(email="jane@example.com", password="Secret1"))

        assert result is self.ok
        self.coordinator.authenticate.assert_awaited_once_with(account, "Secret1")

    @pytest.mark.asyncio
    async def test_authenticate_unknown_email(self):
        """Même réponse qu'un mauvais mot de passe."""
        self.accounts.find_by_email.return_value = None

        result = await self.service.authenticate(AccountLogin(email="nobody@example.com", password="Secret1"))

        assert result is INVALID_CREDENTIALS
        self.coordinator.authenticate.assert_not_called()

    @pytest.mark.asyncio
    async def test_refresh_delegates(self):
        self.coordinator.refresh.return_value = self.ok

        result = await self.service.refresh(RefreshAttempt(jwt="a.b.c", refresh_token="r"))

        assert result is self.ok
        self.coordinator.refresh.assert_awaited_once_with("a.b.c", "r")
