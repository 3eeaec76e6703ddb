"""Route guard.

Classifies a request path against protected and auth-only prefixes.  By
default the guard is advisory: it always lets the request through and only
reports where an enforcing guard would redirect.  Enforcement is switched
on with ``enforce=True`` (``UNICART_ENFORCE_ROUTE_GUARD``).
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from enum import StrEnum
from urllib.parse import urlencode

from pydantic import BaseModel, ConfigDict

from unicart._constants import AUTH_ROUTES, HOME_PATH, LOGIN_PATH, PROTECTED_ROUTES
from unicart.config import UnicartConfig

_logger = logging.getLogger(__name__)


class GuardAction(StrEnum):
    PASS = "pass"
    REDIRECT = "redirect"


class GuardDecision(BaseModel):
    model_config = ConfigDict(frozen=True)

    path: str
    is_protected: bool
    is_auth_route: bool
    action: GuardAction = GuardAction.PASS
    location: str | None = None
    """Redirect target when ``action`` is ``REDIRECT``."""
    advisory_location: str | None = None
    """Where an enforcing guard would redirect; set even when not enforcing."""


def _matches(path: str, prefixes: Iterable[str]) -> bool:
    return any(path.startswith(prefix) for prefix in prefixes)


class RouteGuard:
    def __init__(
        self,
        protected_prefixes: Iterable[str] = PROTECTED_ROUTES,
        auth_prefixes: Iterable[str] = AUTH_ROUTES,
        *,
        login_path: str = LOGIN_PATH,
        home_path: str = HOME_PATH,
        enforce: bool = False,
    ) -> None:
        self.protected_prefixes = tuple(protected_prefixes)
        self.auth_prefixes = tuple(auth_prefixes)
        self.login_path = login_path
        self.home_path = home_path
        self.enforce = enforce

    @classmethod
    def from_config(cls, config: UnicartConfig) -> RouteGuard:
        return cls(
            config.protected_routes,
            config.auth_routes,
            login_path=config.login_path,
            home_path=config.home_path,
            enforce=config.enforce_route_guard,
        )

    def is_protected(self, path: str) -> bool:
        return _matches(path, self.protected_prefixes)

    def is_auth_route(self, path: str) -> bool:
        return _matches(path, self.auth_prefixes)

    def evaluate(self, path: str, authenticated: bool) -> GuardDecision:
        is_protected = self.is_protected(path)
        is_auth_route = self.is_auth_route(path)

        target: str | None = None
        if is_protected and not authenticated:
            target = f"{self.login_path}?{urlencode({'next': path})}"
        elif is_auth_route and authenticated:
            target = self.home_path

        if target is None or not self.enforce:
            if target is not None:
                _logger.debug("Route guard would redirect %s to %s (not enforcing)", path, target)
            return GuardDecision(
                path=path,
                is_protected=is_protected,
                is_auth_route=is_auth_route,
                advisory_location=target,
            )

        _logger.info("Route guard redirecting %s to %s", path, target)
        return GuardDecision(
            path=path,
            is_protected=is_protected,
            is_auth_route=is_auth_route,
            action=GuardAction.REDIRECT,
            location=target,
            advisory_location=target,
        )
