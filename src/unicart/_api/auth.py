"""Authentication endpoints (``/api/auth/*``)."""

from __future__ import annotations

from typing import Any

from unicart._api._common import call
from unicart._transport import Transport
from unicart.models.user import AuthSession, User


async def login(transport: Transport, email: str, password: str) -> AuthSession:
    response = await call(transport, "POST", "/api/auth/login", {"email": email, "password": password})
    return AuthSession.model_validate(response)


async def register(
    transport: Transport,
    email: str,
    password: str,
    *,
    first_name: str | None = None,
    last_name: str | None = None,
) -> AuthSession:
    payload: dict[str, Any] = {"email": email, "password": password}
    if first_name is not None:
        payload["firstName"] = first_name
    if last_name is not None:
        payload["lastName"] = last_name
    response = await call(transport, "POST", "/api/auth/register", payload)
    return AuthSession.model_validate(response)


async def fetch_me(transport: Transport) -> User:
    response = await call(transport, "GET", "/api/auth/me")
    return User.model_validate(response.get("user") or {})


async def update_me(
    transport: Transport,
    *,
    first_name: str | None = None,
    last_name: str | None = None,
    phone: str | None = None,
) -> User:
    """Save profile fields.  The backend ignores empty values, so omitted fields stay as they are."""
    payload = {
        key: value
        for key, value in (("firstName", first_name), ("lastName", last_name), ("phone", phone))
        if value is not None
    }
    response = await call(transport, "PUT", "/api/auth/me", payload)
    return User.model_validate(response.get("user") or {})
