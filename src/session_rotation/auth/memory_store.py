"""
In-Memory Stores

Implémentations de référence du dépôt de comptes et du magasin
d'identités. Stockage en mémoire (tests, développement local); un
stockage durable doit offrir les mêmes garanties d'atomicité.
"""

import asyncio
import copy
import re
import uuid
from dataclasses import dataclass
from typing import Dict, List, Optional

from ..core.crypto_provider import CryptoProvider
from ..core.interfaces import ICryptoProvider
from .interfaces import Account, FieldError, IAccountStore, IIdentityStore, RenewalToken


def normalize_email(email: str) -> str:
    return email.strip().lower()


class InMemoryAccountStore(IAccountStore):
    """
    Dépôt de comptes en mémoire.

    Les lectures retournent des copies détachées, comme des lignes chargées
    depuis une base: muter un compte lu n'a aucun effet tant qu'il n'est pas
    persisté. Toutes les écritures passent par un verrou unique.
    """

    def __init__(self) -> None:
        self._accounts: Dict[str, Account] = {}
        self._lock = asyncio.Lock()

    async def find_by_email(self, email: str) -> Optional[Account]:
        account = await self._load(email)
        if account is not None:
            account.renewal_tokens = []
        return account

    async def find_by_email_with_renewal_tokens(self, email: str) -> Optional[Account]:
        return await self._load(email)

    async def replace_renewal_token(self, email: str, old_token_id: str, new_token: RenewalToken) -> bool:
        """
        Retire old_token_id et ajoute new_token en une seule section critique.

        Returns:
            False si le compte ou le jeton n'existe plus
        """
        async with self._lock:
            stored = self._accounts.get(normalize_email(email))
            if stored is None:
                return False

            index = next((i for i, t in enumerate(stored.renewal_tokens) if t.id == old_token_id), None)
            if index is None:
                return False

            del stored.renewal_tokens[index]
            new_token.id = new_token.id or str(uuid.uuid4())
            stored.renewal_tokens.append(copy.deepcopy(new_token))
            stored.concurrency_stamp = str(uuid.uuid4())
            return True

    async def add(self, account: Account) -> bool:
        """
        Insère un nouveau compte.

        Returns:
            False si l'email est déjà pris
        """
        async with self._lock:
            key = normalize_email(account.email)
            if key in self._accounts:
                return False

            account.id = account.id or str(uuid.uuid4())
            account.concurrency_stamp = str(uuid.uuid4())
            self._assign_token_ids(account.renewal_tokens)
            self._accounts[key] = copy.deepcopy(account)
            return True

    async def save(self, account: Account) -> bool:
        """
        Persiste les attributs du compte et ajoute ses nouveaux jetons.

        Les jetons sans id sont ajoutés; les jetons déjà stockés ne sont
        jamais réintroduits ni supprimés ici (seul replace_renewal_token
        retire un jeton), de sorte qu'une copie périmée ne peut pas
        ressusciter un jeton consommé.

        Returns:
            False si le compte n'existe pas
        """
        async with self._lock:
            stored = self._accounts.get(normalize_email(account.email))
            if stored is None:
                return False

            new_tokens = [t for t in account.renewal_tokens if t.id is None]
            self._assign_token_ids(new_tokens)

            stored.first_name = account.first_name
            stored.last_name = account.last_name
            stored.user_name = account.user_name
            stored.phone_number = account.phone_number
            stored.renewal_tokens.extend(copy.deepcopy(t) for t in new_tokens)
            stored.concurrency_stamp = str(uuid.uuid4())

            account.id = stored.id
            account.concurrency_stamp = stored.concurrency_stamp
            return True

    async def _load(self, email: str) -> Optional[Account]:
        # point de suspension, comme un vrai aller-retour base de données
        await asyncio.sleep(0)
        if not email:
            return None
        stored = self._accounts.get(normalize_email(email))
        return copy.deepcopy(stored) if stored is not None else None

    @staticmethod
    def _assign_token_ids(tokens: List[RenewalToken]) -> None:
        for token in tokens:
            token.id = token.id or str(uuid.uuid4())


@dataclass(frozen=True)
class PasswordPolicy:
    """Règles de mot de passe appliquées à la création de compte."""

    required_length: int = 6
    require_digit: bool = True
    require_lowercase: bool = True
    require_uppercase: bool = True
    require_non_alphanumeric: bool = False

    def validate(self, password: str) -> List[FieldError]:
        """Une erreur par règle violée."""
        errors = []
        if len(password) < self.required_length:
            errors.append(
                FieldError("PasswordTooShort", f"Passwords must be at least {self.required_length} characters.")
            )
        if self.require_non_alphanumeric and password.isalnum():
            errors.append(
                FieldError(
                    "PasswordRequiresNonAlphanumeric",
                    "Passwords must have at least one non alphanumeric character.",
                )
            )
        if self.require_digit and not any(c.isdigit() for c in password):
            errors.append(FieldError("PasswordRequiresDigit", "Passwords must have at least one digit ('0'-'9')."))
        if self.require_lowercase and not any(c.islower() for c in password):
            errors.append(
                FieldError("PasswordRequiresLower", "Passwords must have at least one lowercase ('a'-'z').")
            )
        if self.require_uppercase and not any(c.isupper() for c in password):
            errors.append(
                FieldError("PasswordRequiresUpper", "Passwords must have at least one uppercase ('A'-'Z').")
            )
        return errors


EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


class InMemoryIdentityStore(IIdentityStore):
    """
    Magasin d'identités en mémoire.

    Hash scrypt des mots de passe (jamais stockés en clair), unicité de
    l'email, politique de mot de passe.

    Example:
        accounts = InMemoryAccountStore()
        identities = InMemoryIdentityStore(accounts)
        errors = await identities.create_account(account, "Secret1")
    """

    def __init__(
        self,
        accounts: InMemoryAccountStore,
        crypto: Optional[ICryptoProvider] = None,
        policy: Optional[PasswordPolicy] = None,
    ):
        self._accounts = accounts
        self._crypto = crypto or CryptoProvider()
        self._policy = policy or PasswordPolicy()
        self._password_hashes: Dict[str, str] = {}

    @property
    def policy(self) -> PasswordPolicy:
        return self._policy

    async def verify_password(self, account: Account, raw_password: str) -> bool:
        encoded = self._password_hashes.get(normalize_email(account.email or ""))
        if encoded is None or not raw_password:
            return False
        # scrypt bloquant: exécuté hors de la boucle d'événements
        return await asyncio.to_thread(self._crypto.verify_password, raw_password, encoded)

    async def create_account(self, account: Account, raw_password: str) -> List[FieldError]:
        errors: List[FieldError] = []
        if not account.email or not EMAIL_PATTERN.match(account.email):
            errors.append(FieldError("InvalidEmail", f"Email '{account.email}' is invalid."))
        errors.extend(self._policy.validate(raw_password or ""))
        if errors:
            return errors

        encoded = await asyncio.to_thread(self._crypto.hash_password, raw_password)
        if not await self._accounts.add(account):
            return [FieldError("DuplicateEmail", f"Email '{account.email}' is already taken.")]

        self._password_hashes[normalize_email(account.email)] = encoded
        return []

    async def update_account(self, account: Account) -> List[FieldError]:
        if not await self._accounts.save(account):
            return [FieldError("AccountNotFound", "Account does not exist.")]
        return []
