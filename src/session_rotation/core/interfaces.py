"""
Core Interfaces

Contrats du module Core: configuration de l'émission des jetons et
primitives cryptographiques.
"""

from abc import ABC, abstractmethod
from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator


# ══════════════════════════════════════════════════════════════════════════════
# TYPES
# ══════════════════════════════════════════════════════════════════════════════


MIN_SIGNING_KEY_BYTES = 16


class AuthConfig(BaseModel):
    """
    Configuration consommée par le codec JWT et le générateur de renouvellement.

    Attributes:
        signing_key: Secret symétrique HMAC-SHA-256 (≥128 bits)
        issuer: Émetteur attendu (claim iss)
        audience: Audience attendue (claim aud), par défaut égale à issuer
        jwt_lifetime_minutes: Durée de vie du JWT de session
        renewal_token_lifetime_days: Durée de vie du jeton de renouvellement
    """

    signing_key: str
    issuer: str
    audience: Optional[str] = None
    jwt_lifetime_minutes: int = Field(default=30, gt=0)
    renewal_token_lifetime_days: int = Field(default=5, gt=0)

    @field_validator("signing_key")
    @classmethod
    def _check_signing_key(cls, value: str) -> str:
        if len(value.encode("utf-8")) < MIN_SIGNING_KEY_BYTES:
            raise ValueError(f"signing_key must be at least {MIN_SIGNING_KEY_BYTES} bytes")
        return value

    @field_validator("issuer")
    @classmethod
    def _check_issuer(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("issuer cannot be empty")
        return value.strip()

    @model_validator(mode="after")
    def _default_audience(self) -> "AuthConfig":
        # Un seul émetteur configuré sert aussi d'audience
        if not self.audience:
            self.audience = self.issuer
        return self


# ══════════════════════════════════════════════════════════════════════════════
# INTERFACES
# ══════════════════════════════════════════════════════════════════════════════


class IConfigLoader(ABC):
    """Charge la configuration d'authentification depuis un fichier."""

    @abstractmethod
    async def load(self, name: str) -> AuthConfig:
        """
        Charge et valide une configuration.

        Raises:
            ConfigIntegrityError: Fichier absent, YAML invalide ou valeurs refusées
        """
        pass


class ICryptoProvider(ABC):
    """Primitives cryptographiques utilisées par l'authentification."""

    @abstractmethod
    def random_bytes(self, length: int) -> bytes:
        """
        Tire des octets depuis un générateur cryptographiquement sûr.

        Args:
            length: Nombre d'octets

        Returns:
            Octets aléatoires
        """
        pass

    @abstractmethod
    def hash_password(self, password: str) -> str:
        """
        Dérive un hash de mot de passe salé.

        Returns:
            Chaîne encodée contenant sel et hash
        """
        pass

    @abstractmethod
    def verify_password(self, password: str, encoded: str) -> bool:
        """Vérifie un mot de passe contre un hash encodé."""
        pass

    @abstractmethod
    def constant_time_equals(self, left: str, right: str) -> bool:
        """Compare deux chaînes en temps constant."""
        pass
