from __future__ import annotations

import pytest

from unicart.config import UnicartConfig
from unicart.guard import GuardAction, RouteGuard


@pytest.mark.parametrize(
    ("path", "protected", "auth_route"),
    [
        ("/account", True, False),
        ("/account/orders", True, False),
        ("/checkout", True, False),
        ("/wishlist", True, False),
        ("/login", False, True),
        ("/register", False, True),
        ("/", False, False),
        ("/products/p1", False, False),
    ],
)
def test_route_membership(path: str, protected: bool, auth_route: bool) -> None:
    guard = RouteGuard()

    assert guard.is_protected(path) is protected
    assert guard.is_auth_route(path) is auth_route


def test_advisory_guard_passes_everything_but_reports_target() -> None:
    guard = RouteGuard()

    anonymous = guard.evaluate("/account", authenticated=False)
    assert anonymous.action is GuardAction.PASS
    assert anonymous.location is None
    assert anonymous.advisory_location == "/login?next=%2Faccount"

    signed_in = guard.evaluate("/login", authenticated=True)
    assert signed_in.action is GuardAction.PASS
    assert signed_in.advisory_location == "/"


def test_enforcing_guard_redirects() -> None:
    guard = RouteGuard(enforce=True)

    decision = guard.evaluate("/checkout", authenticated=False)
    assert decision.action is GuardAction.REDIRECT
    assert decision.location == "/login?next=%2Fcheckout"

    decision = guard.evaluate("/register", authenticated=True)
    assert decision.action is GuardAction.REDIRECT
    assert decision.location == "/"


@pytest.mark.parametrize(
    ("path", "authenticated"),
    [
        ("/account", True),
        ("/login", False),
        ("/products", False),
        ("/products", True),
    ],
)
def test_allowed_requests_have_no_target(path: str, authenticated: bool) -> None:
    decision = RouteGuard(enforce=True).evaluate(path, authenticated)

    assert decision.action is GuardAction.PASS
    assert decision.location is None
    assert decision.advisory_location is None


def test_from_config() -> None:
    config = UnicartConfig(
        protected_routes=("/orders",),
        auth_routes=("/signin",),
        login_path="/signin",
        home_path="/shop",
        enforce_route_guard=True,
    )
    guard = RouteGuard.from_config(config)

    assert guard.evaluate("/orders/9", authenticated=False).location == "/signin?next=%2Forders%2F9"
    assert guard.evaluate("/signin", authenticated=True).location == "/shop"
    assert not guard.is_protected("/account")
