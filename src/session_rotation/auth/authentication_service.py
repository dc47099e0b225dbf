"""
Authentication Service

Façade appelée par la couche transport: traduit les requêtes en appels au
coordinateur de rotation.
"""

from typing import Callable, Optional

from ..core.crypto_provider import CryptoProvider
from ..core.interfaces import AuthConfig, ICryptoProvider
from ..logging import StructuredLogger
from .action_result import INVALID_CREDENTIALS, ActionResult
from .interfaces import Account, IAccountStore, IAuthenticationCoordinator
from .jwt_handler import JWTHandler
from .memory_store import InMemoryAccountStore, InMemoryIdentityStore
from .models import AccountCreate, AccountLogin, RefreshAttempt
from .renewal_token_generator import RenewalTokenGenerator
from .rotation_coordinator import TokenRotationCoordinator


class AccountAuthenticationService:
    """
    Service d'authentification des comptes.

    Example:
        service = build_default_service(config)
        result = await service.create(AccountCreate(...))
        result = await service.authenticate(AccountLogin(email=..., password=...))
        result = await service.refresh(RefreshAttempt(jwt=..., refresh_token=...))
    """

    def __init__(self, coordinator: IAuthenticationCoordinator, accounts: IAccountStore):
        self._coordinator = coordinator
        self._accounts = accounts

    async def authenticate(self, login: AccountLogin) -> ActionResult:
        """Email inconnu et mauvais mot de passe donnent la même réponse."""
        account = await self._accounts.find_by_email(login.email)
        if account is None:
            return INVALID_CREDENTIALS
        return await self._coordinator.authenticate(account, login.password)

    async def create(self, data: AccountCreate) -> ActionResult:
        account = Account(
            email=data.email,
            first_name=data.first_name,
            last_name=data.last_name,
            user_name=data.user_name,
            phone_number=data.phone_number,
        )
        return await self._coordinator.create(account, data.password)

    async def refresh(self, attempt: RefreshAttempt) -> ActionResult:
        return await self._coordinator.refresh(attempt.jwt, attempt.refresh_token)


def build_default_service(
    config: AuthConfig,
    logger: Optional[StructuredLogger] = None,
    crypto: Optional[ICryptoProvider] = None,
    output_handler: Optional[Callable[[str], None]] = None,
) -> AccountAuthenticationService:
    """
    Assemble un service complet sur les stores en mémoire.

    Args:
        config: Configuration d'authentification
        logger: Logger partagé (créé si absent)
        crypto: Fournisseur cryptographique (créé si absent)
        output_handler: Destination des logs JSON si logger absent
    """
    crypto = crypto or CryptoProvider()
    logger = logger or StructuredLogger("session_rotation.auth", output_handler=output_handler)

    accounts = InMemoryAccountStore()
    identities = InMemoryIdentityStore(accounts, crypto=crypto)
    coordinator = TokenRotationCoordinator(
        identities,
        accounts,
        JWTHandler(config),
        RenewalTokenGenerator(config, crypto=crypto),
        logger=logger,
        crypto=crypto,
    )
    return AccountAuthenticationService(coordinator, accounts)
