"""
Crypto Provider Implementation

Aléa cryptographique, hachage de mots de passe (scrypt) et comparaisons
en temps constant.
"""

import base64
import hmac
import secrets

from cryptography.exceptions import InvalidKey
from cryptography.hazmat.primitives.kdf.scrypt import Scrypt

from .interfaces import ICryptoProvider


class CryptoProviderError(Exception):
    """Erreur du fournisseur cryptographique."""

    pass


class CryptoProvider(ICryptoProvider):
    """
    Implémentation des opérations cryptographiques.

    Format des hashes: ``scrypt$<n>$<r>$<p>$<sel b64>$<hash b64>``.
    """

    SCHEME: str = "scrypt"
    SALT_BYTES: int = 16
    HASH_BYTES: int = 32

    def __init__(self, scrypt_n: int = 2**14, scrypt_r: int = 8, scrypt_p: int = 1):
        """
        Args:
            scrypt_n: Facteur de coût CPU/mémoire (puissance de 2)
            scrypt_r: Taille de bloc
            scrypt_p: Parallélisme
        """
        self._n = scrypt_n
        self._r = scrypt_r
        self._p = scrypt_p

    def random_bytes(self, length: int) -> bytes:
        """Octets issus du CSPRNG du système."""
        if length <= 0:
            raise ValueError("length must be positive")
        return secrets.token_bytes(length)

    def hash_password(self, password: str) -> str:
        """
        Hache un mot de passe avec scrypt et un sel aléatoire.

        Args:
            password: Mot de passe en clair

        Returns:
            Hash encodé auto-descriptif
        """
        salt = self.random_bytes(self.SALT_BYTES)
        digest = self._kdf(salt, self._n, self._r, self._p).derive(password.encode("utf-8"))
        return "$".join(
            [
                self.SCHEME,
                str(self._n),
                str(self._r),
                str(self._p),
                base64.b64encode(salt).decode("ascii"),
                base64.b64encode(digest).decode("ascii"),
            ]
        )

    def verify_password(self, password: str, encoded: str) -> bool:
        """
        Vérifie un mot de passe contre un hash produit par hash_password.

        Raises:
            CryptoProviderError: Hash stocké illisible
        """
        try:
            scheme, n, r, p, salt_b64, digest_b64 = encoded.split("$")
            if scheme != self.SCHEME:
                raise ValueError(f"unsupported scheme {scheme}")
            salt = base64.b64decode(salt_b64)
            digest = base64.b64decode(digest_b64)
            kdf = self._kdf(salt, int(n), int(r), int(p))
        except ValueError as e:
            raise CryptoProviderError(f"Malformed password hash: {e}") from e

        try:
            kdf.verify(password.encode("utf-8"), digest)
            return True
        except InvalidKey:
            return False

    def constant_time_equals(self, left: str, right: str) -> bool:
        """Compare sur les octets UTF-8 (compare_digest refuse le non-ASCII en str)."""
        return hmac.compare_digest(left.encode("utf-8"), right.encode("utf-8"))

    def _kdf(self, salt: bytes, n: int, r: int, p: int) -> Scrypt:
        return Scrypt(salt=salt, length=self.HASH_BYTES, n=n, r=r, p=p)
