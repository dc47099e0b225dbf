"""
Action Result

Enveloppe uniforme retournée par chaque opération du coordinateur:
succès avec la paire de jetons, ou échec avec la liste des erreurs.
"""

from dataclasses import dataclass
from typing import Iterable, Optional, Tuple


@dataclass(frozen=True)
class ActionError:
    message: str


@dataclass(frozen=True)
class ActionResult:
    """
    Résultat immuable d'une opération.

    Invariants:
        succeeded=True  → errors vide, jwt et refresh_token présents
        succeeded=False → au moins une erreur, aucun jeton

    Construire uniquement via success(), failure() ou failure_from_field_errors().
    """

    succeeded: bool
    errors: Tuple[ActionError, ...] = ()
    jwt: Optional[str] = None
    refresh_token: Optional[str] = None

    def __post_init__(self):
        if self.succeeded:
            if self.errors:
                raise ValueError("A successful result cannot carry errors")
            if not self.jwt or not self.refresh_token:
                raise ValueError("A successful result requires both tokens")
        else:
            if not self.errors:
                raise ValueError("A failed result requires at least one error")
            if self.jwt is not None or self.refresh_token is not None:
                raise ValueError("A failed result cannot carry tokens")

    @classmethod
    def success(cls, jwt: str, refresh_token: str) -> "ActionResult":
        return cls(succeeded=True, jwt=jwt, refresh_token=refresh_token)

    @classmethod
    def failure(cls, *messages: str) -> "ActionResult":
        return cls(succeeded=False, errors=tuple(ActionError(m) for m in messages))

    @classmethod
    def failure_from_field_errors(cls, errors: Iterable) -> "ActionResult":
        """Une ActionError par erreur de champ, description reprise telle quelle."""
        return cls.failure(*(e.description for e in errors))

    def errors_as_string(self) -> str:
        return "; ".join(e.message for e in self.errors)


INVALID_TOKEN_MESSAGE = "Invalid token"
INVALID_CREDENTIALS_MESSAGE = "Invalid credentials supplied"

# Partagés entre appels: gelés, erreurs en tuple
INVALID_TOKEN = ActionResult.failure(INVALID_TOKEN_MESSAGE)
INVALID_CREDENTIALS = ActionResult.failure(INVALID_CREDENTIALS_MESSAGE)
