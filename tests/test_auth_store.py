from __future__ import annotations

import json
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import pytest

from unicart._constants import AUTH_SLOT, GENERIC_ERROR, NETWORK_ERROR, TOKEN_SLOT
from unicart.client import ShopClient
from unicart.config import UnicartConfig
from unicart.exceptions import ApiError, AuthenticationError, TransportError
from unicart.state.auth import AuthStore
from unicart.state.persistence import FileStorage, JsonSlotPersistence, MemoryStorage

_USER = {"id": "u1", "email": "ada@example.com", "firstName": "Ada", "role": "CUSTOMER"}


class _FakeTransport:
    def __init__(self, responses: dict[tuple[str, str], Any]) -> None:
        self._responses = responses
        self.calls: list[tuple[str, str, Mapping[str, Any] | None]] = []

    async def request(
        self,
        method: str,
        endpoint: str,
        payload: Mapping[str, Any] | None = None,
    ) -> dict[str, Any]:
        self.calls.append((method, endpoint, payload))
        result = self._responses[(method, endpoint)]
        if isinstance(result, Exception):
            raise result
        return result


def _make_auth(
    responses: dict[tuple[str, str], Any],
    storage: MemoryStorage | None = None,
) -> tuple[AuthStore, _FakeTransport]:
    transport = _FakeTransport(responses)
    client = ShopClient(UnicartConfig(), transport=transport)
    persistence = JsonSlotPersistence(storage, AUTH_SLOT) if storage is not None else None
    return AuthStore(client, token_storage=storage, persistence=persistence), transport


def _login_ok() -> dict[tuple[str, str], Any]:
    return {("POST", "/api/auth/login"): {"success": True, "user": _USER, "token": "tok-1"}}


@pytest.mark.asyncio
async def test_login_success_sets_user_token_and_slots() -> None:
    storage = MemoryStorage()
    auth, transport = _make_auth(_login_ok(), storage)

    result = await auth.login("ada@example.com", "secret")

    assert result.ok
    assert result.value is not None and result.value.id == "u1"
    assert auth.is_authenticated
    assert auth.user is not None and auth.user.first_name == "Ada"
    assert auth.token == "tok-1"
    assert auth.token_provider() == "tok-1"
    assert transport.calls == [("POST", "/api/auth/login", {"email": "ada@example.com", "password": "secret"})]

    assert storage.get_item(TOKEN_SLOT) == "tok-1"
    stored = json.loads(storage.get_item(AUTH_SLOT) or "")["state"]
    assert set(stored) == {"user", "isAuthenticated"}
    assert stored["isAuthenticated"] is True


@pytest.mark.asyncio
async def test_login_toggles_loading_flag() -> None:
    auth, _ = _make_auth(_login_ok())
    loading: list[bool] = []
    auth.subscribe(lambda state: loading.append(state.is_loading))

    await auth.login("ada@example.com", "secret")

    assert loading == [True, False, False]
    assert auth.state.is_loading is False


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("outcome", "reason"),
    [
        (AuthenticationError("Invalid credentials", status_code=401), "Invalid credentials"),
        (TransportError("connection reset"), NETWORK_ERROR),
        ({"success": False, "error": "Account locked"}, "Account locked"),
        ({"success": True, "user": _USER}, GENERIC_ERROR),
    ],
)
async def test_login_failure_returns_reason_and_stays_signed_out(outcome: Any, reason: str) -> None:
    auth, _ = _make_auth({("POST", "/api/auth/login"): outcome})

    result = await auth.login("ada@example.com", "wrong")

    assert not result.ok
    assert result.reason == reason
    assert result.error is not None
    assert not auth.is_authenticated
    assert auth.user is None
    assert auth.token is None
    assert auth.state.is_loading is False


@pytest.mark.asyncio
async def test_register_sends_names() -> None:
    auth, transport = _make_auth(
        {("POST", "/api/auth/register"): {"success": True, "user": _USER, "token": "tok-2"}},
    )

    result = await auth.register("ada@example.com", "secret", first_name="Ada", last_name="Lovelace")

    assert result.ok
    assert auth.token == "tok-2"
    assert transport.calls[0][2] == {
        "email": "ada@example.com",
        "password": "secret",
        "firstName": "Ada",
        "lastName": "Lovelace",
    }


@pytest.mark.asyncio
async def test_logout_clears_user_and_token_slot() -> None:
    storage = MemoryStorage()
    auth, _ = _make_auth(_login_ok(), storage)
    await auth.login("ada@example.com", "secret")

    auth.logout()

    assert not auth.is_authenticated
    assert auth.user is None
    assert auth.token is None
    assert storage.get_item(TOKEN_SLOT) is None
    assert json.loads(storage.get_item(AUTH_SLOT) or "")["state"] == {"user": None, "isAuthenticated": False}


@pytest.mark.asyncio
async def test_refresh_user_signs_out_on_rejected_token() -> None:
    responses = _login_ok()
    responses[("GET", "/api/auth/me")] = AuthenticationError("Unauthorized", status_code=401)
    auth, _ = _make_auth(responses)
    await auth.login("ada@example.com", "secret")

    result = await auth.refresh_user()

    assert not result.ok
    assert not auth.is_authenticated
    assert auth.token is None


@pytest.mark.asyncio
async def test_refresh_user_keeps_session_on_other_errors() -> None:
    responses = _login_ok()
    responses[("GET", "/api/auth/me")] = ApiError("HTTP 500", status_code=500)
    auth, _ = _make_auth(responses)
    await auth.login("ada@example.com", "secret")

    result = await auth.refresh_user()

    assert result.reason == "HTTP 500"
    assert auth.is_authenticated


@pytest.mark.asyncio
async def test_refresh_user_updates_profile() -> None:
    responses = _login_ok()
    responses[("GET", "/api/auth/me")] = {"success": True, "user": {**_USER, "lastName": "Lovelace"}}
    auth, _ = _make_auth(responses)
    await auth.login("ada@example.com", "secret")

    result = await auth.refresh_user()

    assert result.ok
    assert auth.user is not None and auth.user.full_name == "Ada Lovelace"


@pytest.mark.asyncio
async def test_refresh_user_requires_token() -> None:
    auth, transport = _make_auth({})

    result = await auth.refresh_user()

    assert result.reason == "Not signed in"
    assert transport.calls == []


def test_check_auth_restores_complete_session() -> None:
    storage = MemoryStorage(
        {
            TOKEN_SLOT: "tok-9",
            AUTH_SLOT: json.dumps({"state": {"user": _USER, "isAuthenticated": True}, "version": 1}),
        }
    )
    auth, _ = _make_auth({}, storage)

    assert auth.check_auth() is True
    assert auth.token == "tok-9"
    assert auth.user is not None and auth.user.id == "u1"


def test_check_auth_discards_token_without_user() -> None:
    storage = MemoryStorage({TOKEN_SLOT: "tok-9"})
    auth, _ = _make_auth({}, storage)

    assert auth.check_auth() is False
    assert storage.get_item(TOKEN_SLOT) is None
    assert auth.token is None


def test_check_auth_discards_user_without_token() -> None:
    storage = MemoryStorage(
        {AUTH_SLOT: json.dumps({"state": {"user": _USER, "isAuthenticated": True}, "version": 1})},
    )
    auth, _ = _make_auth({}, storage)

    assert auth.check_auth() is False
    assert not auth.is_authenticated
    assert auth.user is None


def test_check_auth_ignores_undecodable_token_file(tmp_path: Path) -> None:
    (tmp_path / f"{TOKEN_SLOT}.json").write_bytes(b"\xff\xfe")
    storage = FileStorage(tmp_path)
    transport = _FakeTransport({})
    auth = AuthStore(
        ShopClient(UnicartConfig(), transport=transport),
        token_storage=storage,
        persistence=JsonSlotPersistence(storage, AUTH_SLOT),
    )

    assert auth.check_auth() is False
    assert auth.token is None
    assert not auth.is_authenticated


def test_read_token_survives_storage_value_error() -> None:
    class _BrokenStorage(MemoryStorage):
        def get_item(self, key: str) -> str | None:
            raise ValueError(f"invalid slot name {key!r}")

    auth = AuthStore(ShopClient(UnicartConfig(), transport=_FakeTransport({})), token_storage=_BrokenStorage())

    assert auth.check_auth() is False


def test_check_auth_without_anything_stored() -> None:
    auth, _ = _make_auth({}, MemoryStorage())

    assert auth.check_auth() is False
    assert auth.store.commits == 0


@pytest.mark.asyncio
async def test_update_profile_commits_saved_user() -> None:
    storage = MemoryStorage()
    responses = _login_ok()
    responses[("PUT", "/api/auth/me")] = {"success": True, "user": {**_USER, "lastName": "Lovelace", "phone": "555"}}
    auth, transport = _make_auth(responses, storage)
    await auth.login("ada@example.com", "secret")

    result = await auth.update_profile(last_name="Lovelace", phone="555")

    assert result.ok
    assert auth.user is not None and auth.user.full_name == "Ada Lovelace"
    assert transport.calls[-1] == ("PUT", "/api/auth/me", {"lastName": "Lovelace", "phone": "555"})
    assert json.loads(storage.get_item(AUTH_SLOT) or "")["state"]["user"]["phone"] == "555"


@pytest.mark.asyncio
async def test_update_profile_requires_session() -> None:
    auth, transport = _make_auth({})

    result = await auth.update_profile(first_name="Grace")

    assert result.reason == "Not signed in"
    assert transport.calls == []


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("outcome", "reason", "signed_in"),
    [
        (AuthenticationError("Unauthorized", status_code=401), "Unauthorized", False),
        (TransportError("offline"), NETWORK_ERROR, True),
        ({"error": "Failed to update profile"}, "Failed to update profile", True),
    ],
)
async def test_update_profile_failures(outcome: Any, reason: str, signed_in: bool) -> None:
    responses = _login_ok()
    responses[("PUT", "/api/auth/me")] = outcome
    auth, _ = _make_auth(responses)
    await auth.login("ada@example.com", "secret")

    result = await auth.update_profile(first_name="Grace")

    assert result.reason == reason
    assert auth.is_authenticated is signed_in
    if signed_in:
        assert auth.user is not None and auth.user.first_name == "Ada"
