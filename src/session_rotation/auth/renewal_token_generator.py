"""
Renewal Token Generator

Jetons de renouvellement opaques: 32 octets d'un CSPRNG encodés en base64,
expiration en secondes Unix.
"""

import base64
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from ..core.crypto_provider import CryptoProvider
from ..core.interfaces import AuthConfig, ICryptoProvider
from .interfaces import IRenewalTokenGenerator, RenewalToken


class RenewalTokenGenerator(IRenewalTokenGenerator):
    """
    Générateur de jetons de renouvellement.

    Un aléa prévisible rendrait la rotation inutile: les octets viennent
    toujours du fournisseur cryptographique, jamais de ``random``.
    """

    TOKEN_BYTES: int = 32
    DEFAULT_LIFETIME_DAYS: int = 5

    def __init__(
        self,
        config: Optional[AuthConfig] = None,
        crypto: Optional[ICryptoProvider] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """
        Args:
            config: Durée de vie des jetons (défaut: 5 jours)
            crypto: Source d'aléa
            clock: Horloge UTC (injectable pour les tests)
        """
        days = config.renewal_token_lifetime_days if config else self.DEFAULT_LIFETIME_DAYS
        self.lifetime = timedelta(days=days)
        self._crypto = crypto or CryptoProvider()
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    def generate(self) -> RenewalToken:
        raw = self._crypto.random_bytes(self.TOKEN_BYTES)
        return RenewalToken(
            token=base64.b64encode(raw).decode("ascii"),
            expiration=int((self._clock() + self.lifetime).timestamp()),
        )

    def is_expired(self, token: RenewalToken) -> bool:
        return token.is_expired(self.now())

    def now(self) -> int:
        """Instant courant en secondes Unix."""
        return int(self._clock().timestamp())
