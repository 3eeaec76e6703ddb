from __future__ import annotations

import pytest
from pydantic import ValidationError

from unicart.exceptions import StoreError
from unicart.models.user import User, UserRole
from unicart.state.user import UserStore


def _user() -> User:
    return User(id="u1", email="ada@example.com", first_name="Ada", role=UserRole.CUSTOMER)


def test_update_user_while_signed_out_stays_signed_out() -> None:
    store = UserStore()
    seen: list[object] = []
    store.subscribe(seen.append)

    assert store.update_user(first_name="Grace") is None

    assert store.user is None
    assert seen == []


def test_set_user_replaces_whole_record() -> None:
    store = UserStore()
    store.set_user(_user())

    store.set_user(User(id="u2", email="grace@example.com"))

    assert store.user is not None
    assert store.user.id == "u2"
    assert store.user.first_name is None


def test_update_user_merges_fields() -> None:
    store = UserStore()
    store.set_user(_user())

    updated = store.update_user(last_name="Lovelace", phone="555-0100")

    assert updated is store.user
    assert store.user is not None
    assert store.user.full_name == "Ada Lovelace"
    assert store.user.phone == "555-0100"
    assert store.user.email == "ada@example.com"


def test_update_user_validates_merged_record() -> None:
    store = UserStore()
    original = _user()
    store.set_user(original)

    with pytest.raises(ValidationError):
        store.update_user(email_verified="definitely")

    assert store.user == original


def test_clear_user() -> None:
    store = UserStore()
    store.set_user(_user())

    store.clear_user()

    assert store.user is None


def test_role_accepts_backend_enum_names() -> None:
    user = User.model_validate({"id": "u1", "email": "a@example.com", "role": "ADMIN", "emailVerified": True})

    assert user.role is UserRole.ADMIN
    assert user.is_admin
    assert user.email_verified
    assert user.full_name == "a@example.com"


def test_update_user_rejects_unknown_field() -> None:
    store = UserStore()
    original = _user()
    store.set_user(original)
    commits = store.store.commits

    with pytest.raises(StoreError, match="frist_name"):
        store.update_user(frist_name="Grace")

    assert store.user == original
    assert store.store.commits == commits


def test_update_user_rejects_unknown_field_while_signed_out() -> None:
    with pytest.raises(StoreError):
        UserStore().update_user(nickname="ada")


def test_update_user_accepts_camel_case_names() -> None:
    store = UserStore()
    store.set_user(_user())

    store.update_user(lastName="Lovelace")

    assert store.user is not None and store.user.last_name == "Lovelace"
