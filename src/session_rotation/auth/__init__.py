"""
Auth: émission et rotation des jetons de session

- JWT de session HMAC-SHA-256 à courte durée de vie
- Jetons de renouvellement opaques, à usage unique
- Rotation atomique JWT expiré + jeton de renouvellement → nouvelle paire
"""

from .action_result import (
    INVALID_CREDENTIALS,
    INVALID_TOKEN,
    ActionError,
    ActionResult,
)
from .interfaces import (
    IAccountStore,
    IAuthenticationCoordinator,
    IIdentityStore,
    IRenewalTokenGenerator,
    ISignedTokenCodec,
    Account,
    Claim,
    ClaimSet,
    ClaimTypes,
    FieldError,
    RenewalToken,
    identity_claims,
)
from .jwt_handler import JWTHandler, InvalidTokenError
from .renewal_token_generator import RenewalTokenGenerator
from .rotation_coordinator import TokenRotationCoordinator, MissingIdentityClaimError
from .memory_store import InMemoryAccountStore, InMemoryIdentityStore, PasswordPolicy
from .models import AccountCreate, AccountLogin, RefreshAttempt
from .authentication_service import AccountAuthenticationService, build_default_service

__all__ = [
    # Interfaces
    "ISignedTokenCodec",
    "IRenewalTokenGenerator",
    "IIdentityStore",
    "IAccountStore",
    "IAuthenticationCoordinator",
    # Data classes
    "Claim",
    "ClaimSet",
    "ClaimTypes",
    "RenewalToken",
    "Account",
    "FieldError",
    "ActionError",
    "ActionResult",
    "identity_claims",
    "INVALID_TOKEN",
    "INVALID_CREDENTIALS",
    # Requests
    "AccountCreate",
    "AccountLogin",
    "RefreshAttempt",
    # Implementations
    "JWTHandler",
    "RenewalTokenGenerator",
    "TokenRotationCoordinator",
    "InMemoryAccountStore",
    "InMemoryIdentityStore",
    "PasswordPolicy",
    "AccountAuthenticationService",
    "build_default_service",
    # Exceptions
    "InvalidTokenError",
    "MissingIdentityClaimError",
]
