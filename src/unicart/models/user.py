"""Authenticated user model."""

from __future__ import annotations

from enum import StrEnum

from pydantic import field_validator

from unicart.models._base import UnicartBaseModel


class UserRole(StrEnum):
    CUSTOMER = "customer"
    ADMIN = "admin"
    VENDOR = "vendor"


class User(UnicartBaseModel):
    """The signed-in principal, without credentials."""

    id: str
    email: str
    first_name: str | None = None
    last_name: str | None = None
    phone: str | None = None
    role: UserRole = UserRole.CUSTOMER
    email_verified: bool = False
    is_active: bool = True
    created_at: str | None = None
    last_login: str | None = None

    @field_validator("role", mode="before")
    @classmethod
    def _normalize_role(cls, value: object) -> object:
        # The backend sends upper-case Prisma enum names ("ADMIN").
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @property
    def full_name(self) -> str:
        parts = [part for part in (self.first_name, self.last_name) if part]
        return " ".join(parts) if parts else self.email

    @property
    def is_admin(self) -> bool:
        return self.role is UserRole.ADMIN


class AuthSession(UnicartBaseModel):
    """Body of a successful ``/api/auth/login`` or ``/register`` call."""

    user: User
    token: str
