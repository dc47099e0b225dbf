"""
Auth Interfaces

Définit les contrats de l'émission et de la rotation des jetons:
codec JWT, générateur de jetons de renouvellement, coordinateur de rotation
et collaborateurs externes (magasin d'identités, dépôt de comptes).
Toute implémentation DOIT respecter ces interfaces.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from .action_result import ActionResult


# ══════════════════════════════════════════════════════════════════════════════
# CLAIMS
# ══════════════════════════════════════════════════════════════════════════════


class ClaimTypes:
    """Noms des claims portés par le JWT de session."""

    EMAIL = "email"
    NAME = "name"
    EXPIRATION = "exp"
    NOT_BEFORE = "nbf"
    ISSUER = "iss"
    AUDIENCE = "aud"


@dataclass(frozen=True)
class Claim:
    type: str
    value: str


@dataclass(frozen=True)
class ClaimSet:
    """
    Collection ordonnée et immuable de claims (type, valeur).

    Un même type peut apparaître plusieurs fois; dans le payload JWT les
    valeurs répétées sont regroupées en liste.
    """

    claims: Tuple[Claim, ...] = ()

    @classmethod
    def of(cls, *pairs: Tuple[str, str]) -> "ClaimSet":
        return cls(tuple(Claim(t, v) for t, v in pairs))

    def __iter__(self):
        return iter(self.claims)

    def __len__(self) -> int:
        return len(self.claims)

    def find_first(self, claim_type: str) -> Optional[str]:
        """Première valeur du type demandé, None si absent."""
        for claim in self.claims:
            if claim.type == claim_type:
                return claim.value
        return None

    def find_all(self, claim_type: str) -> List[str]:
        return [c.value for c in self.claims if c.type == claim_type]

    def with_claims(self, *claims: Claim) -> "ClaimSet":
        """Retourne un nouvel ensemble, l'original n'est jamais modifié."""
        return ClaimSet(self.claims + tuple(claims))

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {}
        for claim in self.claims:
            if claim.type not in payload:
                payload[claim.type] = claim.value
            elif isinstance(payload[claim.type], list):
                payload[claim.type].append(claim.value)
            else:
                payload[claim.type] = [payload[claim.type], claim.value]
        return payload

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "ClaimSet":
        claims: List[Claim] = []
        for claim_type, value in payload.items():
            values = value if isinstance(value, list) else [value]
            # null JSON: claim absent, jamais la chaîne "None"
            claims.extend(Claim(claim_type, str(v)) for v in values if v is not None)
        return cls(tuple(claims))


def identity_claims(first_name: Optional[str], email: Optional[str]) -> ClaimSet:
    """
    Claims d'identité d'un compte: email et nom affiché.

    Raises:
        ValueError: Si l'un des deux est absent
    """
    if not first_name or not email:
        raise ValueError("first_name and email are required to build claims")
    return ClaimSet.of((ClaimTypes.EMAIL, email), (ClaimTypes.NAME, first_name))


# ══════════════════════════════════════════════════════════════════════════════
# COMPTES & JETONS DE RENOUVELLEMENT
# ══════════════════════════════════════════════════════════════════════════════


@dataclass
class RenewalToken:
    """
    Jeton de renouvellement opaque.

    Attributes:
        token: base64 de 32 octets aléatoires
        expiration: Timestamp Unix (secondes)
        id: Identifiant attribué par le stockage (None avant persistance)
    """

    token: str
    expiration: int
    id: Optional[str] = None

    def is_expired(self, now: int) -> bool:
        """Borne inclusive: expiration == now est déjà expiré."""
        return now >= self.expiration


@dataclass
class Account:
    """
    Compte utilisateur (entité externe, référencée par le coeur).

    La clé d'identification est l'email; first_name sert de nom affiché.
    """

    email: str
    first_name: str
    last_name: str = ""
    user_name: Optional[str] = None
    phone_number: Optional[str] = None
    id: Optional[str] = None
    concurrency_stamp: Optional[str] = None
    renewal_tokens: List[RenewalToken] = field(default_factory=list)


@dataclass(frozen=True)
class FieldError:
    """Erreur de champ remontée par le magasin d'identités."""

    code: str
    description: str


# ══════════════════════════════════════════════════════════════════════════════
# INTERFACES
# ══════════════════════════════════════════════════════════════════════════════


class ISignedTokenCodec(ABC):
    """Génère et valide les JWT de session (HMAC-SHA-256)."""

    ALGORITHM: str = "HS256"

    @abstractmethod
    def generate(self, claims: ClaimSet) -> str:
        """
        Ajoute exp/nbf, iss/aud et signe.

        Returns:
            JWT compact header.payload.signature
        """
        pass

    @abstractmethod
    def validate_expired(self, token: str) -> ClaimSet:
        """
        Valide signature, algorithme, issuer et audience SANS vérifier
        l'expiration (chemin de renouvellement).

        Raises:
            InvalidTokenError: Quelle que soit la cause
        """
        pass


class IRenewalTokenGenerator(ABC):
    """Produit des jetons de renouvellement imprévisibles et datés."""

    @abstractmethod
    def generate(self) -> RenewalToken:
        pass

    @abstractmethod
    def is_expired(self, token: RenewalToken) -> bool:
        """True si maintenant >= expiration."""
        pass


class IIdentityStore(ABC):
    """
    Magasin d'identités externe: mots de passe et persistance des comptes.
    """

    @abstractmethod
    async def verify_password(self, account: Account, raw_password: str) -> bool:
        pass

    @abstractmethod
    async def create_account(self, account: Account, raw_password: str) -> List[FieldError]:
        """
        Crée le compte.

        Returns:
            Erreurs de champs (liste vide = succès)
        """
        pass

    @abstractmethod
    async def update_account(self, account: Account) -> List[FieldError]:
        """
        Persiste une mutation du compte (dont ses jetons de renouvellement).

        Returns:
            Erreurs (ex: conflit de concurrence), liste vide = succès
        """
        pass


class IAccountStore(ABC):
    """Dépôt de comptes externe."""

    @abstractmethod
    async def find_by_email(self, email: str) -> Optional[Account]:
        """Compte sans ses jetons de renouvellement."""
        pass

    @abstractmethod
    async def find_by_email_with_renewal_tokens(self, email: str) -> Optional[Account]:
        pass

    @abstractmethod
    async def replace_renewal_token(self, email: str, old_token_id: str, new_token: RenewalToken) -> bool:
        """
        Retire old_token_id et ajoute new_token de façon atomique.

        Returns:
            False si le jeton n'est plus présent (déjà consommé)
        """
        pass


class IAuthenticationCoordinator(ABC):
    """Orchestration create / authenticate / refresh."""

    @abstractmethod
    async def create(self, account: Account, raw_password: str) -> ActionResult:
        pass

    @abstractmethod
    async def authenticate(self, account: Account, raw_password: str) -> ActionResult:
        pass

    @abstractmethod
    async def refresh(self, jwt_token: str, refresh_token: str) -> ActionResult:
        pass
