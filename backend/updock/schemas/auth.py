"""
Schémas Pydantic pour l'authentification et le profil.
"""

from typing import Optional

from pydantic import BaseModel, field_validator

ADMIN_ROLE = "admin"
USER_ROLE = "user"


class User(BaseModel):
    """Identité de la session courante, avec le rôle porté par le fournisseur d'auth."""

    id: str
    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    username: Optional[str] = None
    role: str = USER_ROLE

    @property
    def is_admin(self) -> bool:
        return self.role == ADMIN_ROLE

    @property
    def display_name(self) -> str:
        """Prénom + nom si le prénom est renseigné, sinon pseudo, sinon email."""
        if self.first_name:
            return f"{self.first_name} {self.last_name or ''}".strip()
        return self.username or self.email

    @property
    def initial(self) -> str:
        source = self.first_name or self.email
        return source[:1].upper()


class AuthSession(BaseModel):
    user: User
    access_token: str


class SignInRequest(BaseModel):
    email: str
    password: str


class SignUpRequest(BaseModel):
    email: str
    password: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    username: Optional[str] = None

    @field_validator("email")
    @classmethod
    def email_format(cls, v: str) -> str:
        v = v.strip().lower()
        if "@" not in v:
            raise ValueError("Adresse email invalide.")
        return v

    @field_validator("password")
    @classmethod
    def password_length(cls, v: str) -> str:
        if len(v) < 6:
            raise ValueError("Le mot de passe doit contenir au moins 6 caractères.")
        return v


class ProfileResponse(BaseModel):
    """Données affichées sur l'écran profil."""

    id: str
    email: str
    display_name: str
    initial: str
    username: Optional[str]
    is_admin: bool

    @classmethod
    def from_user(cls, user: User) -> "ProfileResponse":
        return cls(
            id=user.id,
            email=user.email,
            display_name=user.display_name,
            initial=user.initial,
            username=user.username,
            is_admin=user.is_admin,
        )
