"""Shared helpers for backend endpoint modules.

Every backend route answers ``{"success": true, ...}`` on success and
``{"error": "..."}`` (or ``success: false``) on failure.

It is internal to unicart and may change at any time.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from unicart._transport import Transport
from unicart.exceptions import ApiError


def expect_success(endpoint: str, response: Mapping[str, Any]) -> Mapping[str, Any]:
    """Raise :class:`ApiError` unless *response* reports success."""
    if response.get("success") is True:
        return response
    message = response.get("error") or response.get("message") or f"{endpoint} failed"
    raise ApiError(str(message), endpoint=endpoint)


async def call(
    transport: Transport,
    method: str,
    endpoint: str,
    payload: Mapping[str, Any] | None = None,
) -> Mapping[str, Any]:
    response = await transport.request(method, endpoint, payload)
    return expect_success(endpoint, response)


def list_field(response: Mapping[str, Any], key: str) -> list[Any]:
    value = response.get(key)
    return value if isinstance(value, list) else []
