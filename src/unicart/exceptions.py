"""Custom exception hierarchy for unicart."""

from __future__ import annotations


class UnicartError(Exception):
    """Base exception for all unicart errors."""


class UnicartConfigError(UnicartError):
    """Invalid or missing configuration."""


class StoreError(UnicartError):
    """A store rejected a commit or an action."""


class StoreReentrancyError(StoreError):
    """A subscriber tried to commit to the store that is notifying it.

    Commits issued from inside a notification would recurse synchronously
    through every subscriber, so the engine refuses them.  The commit that
    triggered the notification stays applied.
    """

    def __init__(self, store_name: str) -> None:
        self.store_name = store_name
        super().__init__(f"store {store_name!r} received a commit while notifying subscribers")


class InvalidQuantityError(StoreError):
    """A cart quantity was not a positive integer."""

    def __init__(self, quantity: object) -> None:
        self.quantity = quantity
        super().__init__(f"quantity must be a positive integer, got {quantity!r}")


class CartLimitError(StoreError):
    """Adding the requested quantity would exceed the cart capacity."""

    def __init__(self, requested: int, limit: int) -> None:
        self.requested = requested
        self.limit = limit
        super().__init__(f"cart would hold {requested} items, limit is {limit}")


class PersistenceError(UnicartError):
    """The durable storage medium could not be read or written."""

    def __init__(self, message: str, *, slot: str = "") -> None:
        self.slot = slot
        super().__init__(message)


class TransportError(UnicartError):
    """HTTP-level failure (network, invalid JSON)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        endpoint: str = "",
    ) -> None:
        self.status_code = status_code
        self.endpoint = endpoint
        super().__init__(message)


class ApiError(UnicartError):
    """Backend answered with an error status or ``success: false``."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        endpoint: str = "",
    ) -> None:
        self.status_code = status_code
        self.endpoint = endpoint
        super().__init__(message)


class AuthenticationError(ApiError):
    """Login failed, or the bearer token was rejected (HTTP 401)."""
