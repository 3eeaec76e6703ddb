"""Helpers for safe debug logging.

Auth requests carry passwords, auth responses carry bearer tokens, and the
persisted session holds both a user record and a token.  Everything logged
at DEBUG from the transport passes through :func:`redact_for_log` first.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from decimal import Decimal
from typing import Any

from pydantic import BaseModel

_REDACTED = "<redacted>"
_MAX_DEPTH = 20

# Compared after lower-casing and dropping "_" and "-", so "auth_token",
# "authToken" and "X-Auth-Token" all collapse onto "authtoken".
_SENSITIVE_KEYS: frozenset[str] = frozenset(
    {
        "password",
        "newpassword",
        "currentpassword",
        "token",
        "authtoken",
        "xauthtoken",
        "accesstoken",
        "refreshtoken",
        "authorization",
        "cookie",
        "setcookie",
    }
)


def _is_sensitive(key: object) -> bool:
    return str(key).lower().replace("_", "").replace("-", "") in _SENSITIVE_KEYS


def redact_for_log(value: Any, *, max_string: int = 512, _depth: int = 0) -> Any:
    """Return a log-safe copy of *value*.

    Sensitive keys are masked at any depth, long strings are truncated,
    pydantic models are dumped by alias first, and ``Decimal`` values are
    rendered as strings.
    """
    if _depth > _MAX_DEPTH:
        return "<max-depth>"

    if value is None or isinstance(value, (bool, int, float)):
        return value
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, str):
        return value if len(value) <= max_string else f"{value[:max_string]}…<truncated>"
    if isinstance(value, (bytes, bytearray)):
        return f"<bytes:{len(value)}b>"
    if isinstance(value, BaseModel):
        value = value.model_dump(mode="json", by_alias=True)

    if isinstance(value, Mapping):
        return {
            str(key): _REDACTED
            if _is_sensitive(key)
            else redact_for_log(item, max_string=max_string, _depth=_depth + 1)
            for key, item in value.items()
        }
    if isinstance(value, Sequence):
        return [redact_for_log(item, max_string=max_string, _depth=_depth + 1) for item in value]
    return repr(value)
