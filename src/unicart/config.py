"""Client configuration for unicart."""

from __future__ import annotations

import dataclasses
import os
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any

from unicart._constants import (
    API_BASE_URL,
    AUTH_ROUTES,
    FLAT_SHIPPING_RATE,
    FREE_SHIPPING_THRESHOLD,
    HOME_PATH,
    LOGIN_PATH,
    MAX_CART_ITEMS,
    PROTECTED_ROUTES,
    RECENT_SEARCH_LIMIT,
    TAX_RATE,
)
from unicart.exceptions import UnicartConfigError


def _env_bool(key: str, value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    raise UnicartConfigError(f"{key} must be a boolean, got {value!r}")


def _env_int(key: str, value: str) -> int:
    try:
        return int(value)
    except ValueError as exc:
        raise UnicartConfigError(f"{key} must be an integer, got {value!r}") from exc


def _env_decimal(key: str, value: str) -> Decimal:
    try:
        return Decimal(value.strip())
    except InvalidOperation as exc:
        raise UnicartConfigError(f"{key} must be a decimal number, got {value!r}") from exc


def _env_prefixes(value: str) -> tuple[str, ...]:
    return tuple(part.strip() for part in value.split(",") if part.strip())


@dataclasses.dataclass(frozen=True)
class UnicartConfig:
    """Storefront client configuration.

    Parameters
    ----------
    api_base_url : str
        Backend base URL.  A trailing slash is ignored.
    storage_dir : Path or None
        Directory backing the durable storage slots.  ``None`` keeps all
        state in memory.
    tax_rate : Decimal
        Tax applied to the cart subtotal.
    free_shipping_threshold : Decimal
        Subtotal from which shipping is free.
    flat_shipping_rate : Decimal
        Shipping charged below the threshold.
    max_cart_items : int
        Upper bound on the summed quantity of all cart lines.
    recent_search_limit : int
        Number of recent search queries kept.
    protected_routes : tuple of str
        Path prefixes that require an authenticated user.
    auth_routes : tuple of str
        Path prefixes only meant for anonymous users (login, register).
    login_path : str
        Redirect target for anonymous access to a protected route.
    home_path : str
        Redirect target for authenticated access to an auth route.
    enforce_route_guard : bool
        When false the route guard only reports what it would do.
    request_timeout : float
        Total timeout in seconds for one backend request.
    """

    api_base_url: str = API_BASE_URL
    storage_dir: Path | None = None
    tax_rate: Decimal = TAX_RATE
    free_shipping_threshold: Decimal = FREE_SHIPPING_THRESHOLD
    flat_shipping_rate: Decimal = FLAT_SHIPPING_RATE
    max_cart_items: int = MAX_CART_ITEMS
    recent_search_limit: int = RECENT_SEARCH_LIMIT
    protected_routes: tuple[str, ...] = PROTECTED_ROUTES
    auth_routes: tuple[str, ...] = AUTH_ROUTES
    login_path: str = LOGIN_PATH
    home_path: str = HOME_PATH
    enforce_route_guard: bool = False
    request_timeout: float = 15.0

    def __post_init__(self) -> None:
        if self.max_cart_items <= 0:
            raise UnicartConfigError("max_cart_items must be positive")
        if self.recent_search_limit < 0:
            raise UnicartConfigError("recent_search_limit must not be negative")
        if self.tax_rate < 0:
            raise UnicartConfigError("tax_rate must not be negative")

    @classmethod
    def from_env(cls, **overrides: Any) -> UnicartConfig:
        """Create configuration from ``UNICART_*`` environment variables.

        Explicit keyword arguments override environment values.

        Raises
        ------
        UnicartConfigError
            If a numeric or boolean variable cannot be parsed.
        """
        env = os.environ
        config_kwargs: dict[str, Any] = {}

        _ENV_STR_MAP = {
            "UNICART_API_URL": "api_base_url",
            "UNICART_LOGIN_PATH": "login_path",
            "UNICART_HOME_PATH": "home_path",
        }
        for env_key, field_name in _ENV_STR_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val

        storage_env = env.get("UNICART_STORAGE_DIR")
        if storage_env:
            config_kwargs["storage_dir"] = Path(storage_env).expanduser()

        _ENV_DECIMAL_MAP = {
            "UNICART_TAX_RATE": "tax_rate",
            "UNICART_FREE_SHIPPING_THRESHOLD": "free_shipping_threshold",
            "UNICART_FLAT_SHIPPING_RATE": "flat_shipping_rate",
        }
        for env_key, field_name in _ENV_DECIMAL_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = _env_decimal(env_key, val)

        _ENV_INT_MAP = {
            "UNICART_MAX_CART_ITEMS": "max_cart_items",
            "UNICART_RECENT_SEARCH_LIMIT": "recent_search_limit",
        }
        for env_key, field_name in _ENV_INT_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = _env_int(env_key, val)

        protected_env = env.get("UNICART_PROTECTED_ROUTES")
        if protected_env is not None:
            config_kwargs["protected_routes"] = _env_prefixes(protected_env)
        auth_env = env.get("UNICART_AUTH_ROUTES")
        if auth_env is not None:
            config_kwargs["auth_routes"] = _env_prefixes(auth_env)

        config_kwargs["enforce_route_guard"] = _env_bool(
            "UNICART_ENFORCE_ROUTE_GUARD",
            env.get("UNICART_ENFORCE_ROUTE_GUARD"),
            False,
        )

        timeout_env = env.get("UNICART_REQUEST_TIMEOUT")
        if timeout_env is not None:
            try:
                config_kwargs["request_timeout"] = float(timeout_env)
            except ValueError as exc:
                raise UnicartConfigError(f"UNICART_REQUEST_TIMEOUT must be a number, got {timeout_env!r}") from exc

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
