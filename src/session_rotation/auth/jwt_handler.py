"""
JWT Handler

Génération et validation des JWT de session signés HMAC-SHA-256.

La validation exposée ici sert le chemin de renouvellement: le jeton
présenté est normalement expiré, seule sa provenance est vérifiée
(signature, algorithme, issuer, audience).
"""

from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, Optional

import jwt

from ..core.interfaces import AuthConfig
from .interfaces import Claim, ClaimSet, ClaimTypes, ISignedTokenCodec, identity_claims


class InvalidTokenError(Exception):
    """
    JWT refusé.

    Message identique quelle que soit la cause (structure, signature,
    algorithme, issuer, audience) pour ne rien révéler à l'appelant.
    La cause PyJWT reste disponible via __cause__.
    """

    def __init__(self, message: str = "Invalid token"):
        super().__init__(message)


class JWTHandler(ISignedTokenCodec):
    """
    Codec JWT symétrique.

    Example:
        handler = JWTHandler(config)
        token = handler.generate(JWTHandler.default_claims("Jane", "jane@example.com"))
        claims = handler.validate_expired(token)
    """

    RESERVED_CLAIMS = (ClaimTypes.EXPIRATION, ClaimTypes.NOT_BEFORE, ClaimTypes.ISSUER, ClaimTypes.AUDIENCE)

    def __init__(self, config: AuthConfig, clock: Optional[Callable[[], datetime]] = None):
        """
        Args:
            config: Secret, issuer/audience et durée de vie
            clock: Horloge UTC (injectable pour les tests)
        """
        self._key = config.signing_key
        self.issuer = config.issuer
        self.audience = config.audience
        self.lifetime = timedelta(minutes=config.jwt_lifetime_minutes)
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    default_claims = staticmethod(identity_claims)

    def generate(self, claims: ClaimSet) -> str:
        """
        Signe les claims avec exp = now + durée de vie et nbf = now.

        Les claims réservés déjà présents sont ignorés; l'ensemble fourni
        n'est pas modifié.
        """
        now = self._clock()
        exp = int((now + self.lifetime).timestamp())
        nbf = int(now.timestamp())

        stamped = ClaimSet(tuple(c for c in claims if c.type not in self.RESERVED_CLAIMS)).with_claims(
            Claim(ClaimTypes.EXPIRATION, str(exp)),
            Claim(ClaimTypes.NOT_BEFORE, str(nbf)),
        )

        payload = stamped.to_payload()
        payload[ClaimTypes.EXPIRATION] = exp
        payload[ClaimTypes.NOT_BEFORE] = nbf
        payload[ClaimTypes.ISSUER] = self.issuer
        payload[ClaimTypes.AUDIENCE] = self.audience

        return jwt.encode(payload, self._key, algorithm=self.ALGORITHM)

    def validate_expired(self, token: str) -> ClaimSet:
        """
        Valide un jeton éventuellement expiré et retourne ses claims.

        Raises:
            InvalidTokenError: Jeton vide, malformé, falsifié, mauvais
                algorithme, issuer ou audience incorrects
        """
        payload = self._decode(token)
        return ClaimSet.from_payload(payload)

    def is_expired(self, token: str) -> bool:
        """
        Jeton authentique mais expiré ?

        Utilisé côté transport pour signaler Token-Expired au client.

        Raises:
            InvalidTokenError: Jeton non émis par ce codec
        """
        payload = self._decode(token)
        return int(self._clock().timestamp()) >= int(payload[ClaimTypes.EXPIRATION])

    def _decode(self, token: str) -> Dict:
        if not token or not isinstance(token, str):
            raise InvalidTokenError()

        try:
            # alg "none" ou autre HMAC refusé avant toute vérification
            header = jwt.get_unverified_header(token)
            if header.get("alg") != self.ALGORITHM:
                raise InvalidTokenError()

            return jwt.decode(
                token,
                self._key,
                algorithms=[self.ALGORITHM],
                issuer=self.issuer,
                audience=self.audience,
                options={
                    "require": ["exp", "nbf", "iss", "aud"],
                    "verify_signature": True,
                    "verify_exp": False,
                    "verify_iss": True,
                    "verify_aud": True,
                },
            )
        except jwt.PyJWTError as e:
            raise InvalidTokenError() from e
