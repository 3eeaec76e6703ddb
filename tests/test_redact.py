from __future__ import annotations

from decimal import Decimal

from unicart._redact import redact_for_log
from unicart.models.user import AuthSession, User


def test_redact_for_log_redacts_sensitive_keys() -> None:
    payload = {
        "email": "ada@example.com",
        "password": "pw",
        "token": "tok-1",
        "user": {"id": "u1", "authToken": "nested"},
        "headers": [{"Authorization": "Bearer x"}],
    }

    redacted = redact_for_log(payload)
    assert redacted["email"] == "ada@example.com"
    assert redacted["password"] == "<redacted>"
    assert redacted["token"] == "<redacted>"
    assert redacted["user"]["authToken"] == "<redacted>"
    assert redacted["user"]["id"] == "u1"
    assert redacted["headers"][0]["Authorization"] == "<redacted>"


def test_redact_for_log_truncates_long_strings() -> None:
    long_value = "x" * 600
    redacted = redact_for_log({"value": long_value}, max_string=10)
    assert redacted["value"].startswith("x" * 10)
    assert "<truncated>" in redacted["value"]


def test_redact_for_log_passes_scalars_through() -> None:
    assert redact_for_log(None) is None
    assert redact_for_log(3) == 3
    assert redact_for_log(Decimal("9.99")) == "9.99"
    assert redact_for_log(b"abc") == "<bytes:3b>"


def test_redact_for_log_normalizes_header_style_keys() -> None:
    redacted = redact_for_log({"X-Auth-Token": "t", "Set-Cookie": "c", "refresh_token": "r"})

    assert set(redacted.values()) == {"<redacted>"}


def test_redact_for_log_dumps_models_by_alias() -> None:
    session = AuthSession(user=User(id="u1", email="ada@example.com", first_name="Ada"), token="tok-1")

    redacted = redact_for_log(session)

    assert redacted["token"] == "<redacted>"
    assert redacted["user"]["firstName"] == "Ada"
