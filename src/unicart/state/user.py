"""User store (in memory only)."""

from __future__ import annotations

from typing import Any

from unicart.exceptions import StoreError
from unicart.models._base import UnicartBaseModel
from unicart.models.user import User
from unicart.state.base import DomainStore


def _user_field_names() -> dict[str, str]:
    # Accept both snake_case names and camelCase aliases.
    names: dict[str, str] = {}
    for name, field in User.model_fields.items():
        names[name] = name
        if field.alias:
            names[field.alias] = name
    return names


class UserState(UnicartBaseModel):
    user: User | None = None


class UserStore(DomainStore[UserState]):
    _field_names = _user_field_names()

    def __init__(self, *, name: str = "unicart_user") -> None:
        super().__init__(name, UserState())

    @property
    def user(self) -> User | None:
        return self.state.user

    def set_user(self, user: User | None) -> None:
        self._store.set({"user": user})

    def update_user(self, **changes: Any) -> User | None:
        """Merge *changes* into the current user.

        While signed out this is a no-op: a partial update never creates a
        user.  Field names may be given in snake_case or camelCase.

        Raises
        ------
        StoreError
            If a change names a field :class:`User` does not have.
        pydantic.ValidationError
            If the merged record is invalid.  The store is left untouched.
        """
        unknown = changes.keys() - self._field_names.keys()
        if unknown:
            raise StoreError(f"store {self.name!r}: user has no field(s) {sorted(unknown)}")
        current = self.user
        if current is None:
            return None
        normalized = {self._field_names[key]: value for key, value in changes.items()}
        merged = User.model_validate({**current.model_dump(), **normalized})
        self._store.set({"user": merged})
        return merged

    def clear_user(self) -> None:
        self._store.set({"user": None})
