"""
Modèles de requêtes

Objets reçus de la couche transport pour la création de compte, la
connexion et le renouvellement.
"""

from pydantic import BaseModel, Field, model_validator

EMAIL_REGEX = r"^\w+([-+.']\w+)*@\w+([-.]\w+)*\.\w+([-.]\w+)*$"
PHONE_REGEX = r"^[+]*[(]{0,1}[0-9]{1,4}[)]{0,1}[-\s./0-9]*$"


class AccountCreate(BaseModel):
    """Demande de création de compte."""

    user_name: str = Field(min_length=1)
    email: str = Field(max_length=128, pattern=EMAIL_REGEX)
    first_name: str = Field(min_length=1, max_length=128)
    last_name: str = Field(min_length=1, max_length=128)
    phone_number: str = Field(min_length=1, pattern=PHONE_REGEX)
    password: str = Field(min_length=1, max_length=256)
    password_confirm: str = Field(min_length=1, max_length=128)

    @model_validator(mode="after")
    def _passwords_match(self) -> "AccountCreate":
        if self.password != self.password_confirm:
            raise ValueError("password_confirm must match password")
        return self


class AccountLogin(BaseModel):
    """Demande de connexion."""

    email: str = Field(max_length=128, pattern=EMAIL_REGEX)
    password: str = Field(min_length=1, max_length=256)


class RefreshAttempt(BaseModel):
    """JWT expiré accompagné de son jeton de renouvellement."""

    jwt: str = Field(min_length=1)
    refresh_token: str = Field(min_length=1)
