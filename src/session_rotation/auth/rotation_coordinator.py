"""
Rotation Coordinator

Orchestration de la création de compte, de l'authentification et du
renouvellement de la paire JWT / jeton de renouvellement.

Règles:
    - Aucun jeton n'est émis pour une création ou une authentification échouée.
    - Un jeton de renouvellement est utilisable au plus une fois; l'exclusivité
      est garantie par le remplacement atomique du dépôt de comptes.
    - La persistance précède toujours le compte rendu de succès.
    - Les échecs provoqués par l'appelant sont normalisés en ActionResult sans
      préciser quelle vérification a échoué.
"""

from typing import Optional

from ..core.crypto_provider import CryptoProvider
from ..core.interfaces import ICryptoProvider
from ..logging import ContextualLogger, StructuredLogger
from .action_result import INVALID_CREDENTIALS, INVALID_TOKEN, ActionResult
from .interfaces import (
    Account,
    ClaimSet,
    ClaimTypes,
    IAccountStore,
    IAuthenticationCoordinator,
    IIdentityStore,
    IRenewalTokenGenerator,
    ISignedTokenCodec,
    RenewalToken,
    identity_claims,
)
from .jwt_handler import InvalidTokenError

INCOMPLETE_ACCOUNT_MESSAGE = "First name and email are required."


class MissingIdentityClaimError(Exception):
    """
    JWT authentique sans claim email.

    Ne peut arriver que si l'émission est défaillante ailleurs dans le
    système: l'erreur est propagée, jamais convertie en "Invalid token".
    """

    def __init__(self, claim_type: str = ClaimTypes.EMAIL):
        self.claim_type = claim_type
        super().__init__(f"Validated token is missing the '{claim_type}' claim")


class TokenRotationCoordinator(IAuthenticationCoordinator):
    """
    Coordinateur create / authenticate / refresh.

    Example:
        coordinator = TokenRotationCoordinator(identities, accounts, jwt_handler, renewal_generator)
        result = await coordinator.authenticate(account, "Secret1")
        if result.succeeded:
            later = await coordinator.refresh(result.jwt, result.refresh_token)
    """

    def __init__(
        self,
        identity_store: IIdentityStore,
        account_store: IAccountStore,
        jwt_handler: ISignedTokenCodec,
        renewal_generator: IRenewalTokenGenerator,
        logger: Optional[StructuredLogger] = None,
        crypto: Optional[ICryptoProvider] = None,
    ):
        self._identities = identity_store
        self._accounts = account_store
        self._jwt = jwt_handler
        self._renewal = renewal_generator
        self._logger = logger or StructuredLogger("session_rotation.auth")
        self._crypto = crypto or CryptoProvider()

    async def create(self, account: Account, raw_password: str) -> ActionResult:
        """
        Crée le compte puis émet une première paire de jetons.

        Les erreurs de champs du magasin d'identités sont reprises telles
        quelles; dans ce cas aucun jeton n'est généré.
        """
        log = self._logger.with_context()

        # claims construits avant toute écriture: un refus ne laisse rien derrière lui
        try:
            claims = identity_claims(account.first_name, account.email)
        except ValueError:
            log.info("Account creation rejected: incomplete identity", email=account.email)
            return ActionResult.failure(INCOMPLETE_ACCOUNT_MESSAGE)

        errors = await self._identities.create_account(account, raw_password)
        if errors:
            log.info("Account creation rejected", email=account.email, error_count=len(errors))
            return ActionResult.failure_from_field_errors(errors)

        return await self._issue_pair(account, claims, log, "Account created")

    async def authenticate(self, account: Account, raw_password: str) -> ActionResult:
        """
        Vérifie le mot de passe et ajoute une nouvelle paire de jetons.

        Les jetons existants sont conservés (un par appareil).
        """
        log = self._logger.with_context()

        if not await self._identities.verify_password(account, raw_password):
            log.warn("Authentication failed", email=account.email)
            return INVALID_CREDENTIALS

        claims = identity_claims(account.first_name, account.email)
        return await self._issue_pair(account, claims, log, "Account authenticated")

    async def refresh(self, jwt_token: str, refresh_token: str) -> ActionResult:
        """
        Échange un JWT expiré et son jeton de renouvellement contre une
        nouvelle paire.

        Raises:
            MissingIdentityClaimError: JWT authentique sans email (absent, null ou vide)
            ValueError: Compte stocké sans nom affiché, levé avant toute écriture
        """
        log = self._logger.with_context()

        try:
            claims = self._jwt.validate_expired(jwt_token)
        except InvalidTokenError as e:
            log.warn("Refresh rejected: signed token invalid", reason=type(e.__cause__ or e).__name__)
            return INVALID_TOKEN

        email = claims.find_first(ClaimTypes.EMAIL)
        if not email:
            log.critical("Validated token without identity claim")
            raise MissingIdentityClaimError()

        account = await self._accounts.find_by_email_with_renewal_tokens(email)
        stored = self._find_renewal_token(account, refresh_token) if account else None

        if stored is None or self._renewal.is_expired(stored):
            # compte inconnu, jeton inconnu ou expiré: même réponse
            log.warn("Refresh rejected: renewal token not usable", email=email)
            return INVALID_TOKEN

        new_jwt = self._jwt.generate(identity_claims(account.first_name, account.email))
        new_renewal = self._renewal.generate()
        if not await self._accounts.replace_renewal_token(account.email, stored.id, new_renewal):
            log.warn("Refresh rejected: renewal token already consumed", email=email)
            return INVALID_TOKEN

        log.info("Renewal token rotated", email=account.email)
        return ActionResult.success(new_jwt, new_renewal.token)

    async def _issue_pair(self, account: Account, claims: ClaimSet, log: ContextualLogger, event: str) -> ActionResult:
        new_jwt = self._jwt.generate(claims)
        new_renewal = self._renewal.generate()

        account.renewal_tokens.append(new_renewal)
        errors = await self._identities.update_account(account)
        if errors:
            account.renewal_tokens.remove(new_renewal)
            log.warn("Token pair not persisted", email=account.email, error_count=len(errors))
            return ActionResult.failure_from_field_errors(errors)

        log.info(event, email=account.email, active_sessions=len(account.renewal_tokens))
        return ActionResult.success(new_jwt, new_renewal.token)

    def _find_renewal_token(self, account: Account, presented: Optional[str]) -> Optional[RenewalToken]:
        if not presented:
            return None
        for stored in account.renewal_tokens:
            if self._crypto.constant_time_equals(stored.token, presented):
                return stored
        return None
