"""Consumption layer between presentation code and the domain stores.

Each action delegates to its store, logs the outcome, sends a toast, and
returns an :class:`ActionResult`.  Expected faults (rejected quantities,
full cart, invalid records) become failed results; anything else is a bug
and propagates.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from decimal import Decimal
from typing import TypeVar

from pydantic import ValidationError

from unicart._constants import (
    ADDED_TO_CART,
    ADDED_TO_WISHLIST,
    CART_CLEARED,
    CART_UPDATED,
    GENERIC_ERROR,
    LOGIN_SUCCESS,
    PROFILE_UPDATED,
    REGISTER_SUCCESS,
    REMOVED_FROM_CART,
    REMOVED_FROM_WISHLIST,
    WISHLIST_CLEARED,
)
from unicart.exceptions import StoreError
from unicart.models.cart import CartItem
from unicart.models.product import Product, ProductVariant
from unicart.models.result import ActionResult
from unicart.models.user import User
from unicart.state.auth import AuthState, AuthStore
from unicart.state.cart import CartState, CartStore
from unicart.state.engine import Listener, Unsubscribe
from unicart.state.wishlist import WishlistState, WishlistStore
from unicart.toast import LogNotifier, Notifier, ToastLevel, toast

_logger = logging.getLogger(__name__)

T = TypeVar("T")


def _run(
    notifier: Notifier,
    action: str,
    operation: Callable[[], T],
    success_message: Callable[[T], str | None],
) -> ActionResult[T]:
    try:
        value = operation()
    except (StoreError, ValidationError) as exc:
        _logger.warning("%s failed: %s", action, exc)
        toast(notifier, str(exc), ToastLevel.ERROR)
        return ActionResult.failure(str(exc), error=exc)
    _logger.debug("%s succeeded", action)
    message = success_message(value)
    if message:
        toast(notifier, message, ToastLevel.SUCCESS)
    return ActionResult.success(value)


class CartActions:
    """Cart operations for presentation code."""

    def __init__(self, store: CartStore, notifier: Notifier | None = None) -> None:
        self._store = store
        self._notifier = notifier or LogNotifier()

    @property
    def items(self) -> tuple[CartItem, ...]:
        return self._store.items

    def subscribe(self, listener: Listener[CartState]) -> Unsubscribe:
        return self._store.subscribe(listener)

    def add_to_cart(
        self,
        product: Product,
        quantity: int = 1,
        variant: ProductVariant | None = None,
    ) -> ActionResult[CartItem]:
        return _run(
            self._notifier,
            f"Adding {product.id} to cart",
            lambda: self._store.add_item(product, quantity, variant),
            lambda _item: ADDED_TO_CART,
        )

    def remove_from_cart(self, item_id: str) -> ActionResult[bool]:
        """Remove a line; ``value`` is ``False`` when the line did not exist."""
        return _run(
            self._notifier,
            f"Removing {item_id} from cart",
            lambda: self._store.remove_item(item_id),
            lambda removed: REMOVED_FROM_CART if removed else None,
        )

    def update_quantity(self, item_id: str, quantity: int) -> ActionResult[bool]:
        return _run(
            self._notifier,
            f"Setting {item_id} quantity to {quantity}",
            lambda: self._store.update_quantity(item_id, quantity),
            lambda changed: CART_UPDATED if changed else None,
        )

    def clear_cart(self) -> ActionResult[None]:
        return _run(self._notifier, "Clearing cart", self._store.clear, lambda _none: CART_CLEARED)

    def get_item_by_id(self, item_id: str) -> CartItem | None:
        return self._store.get_item_by_id(item_id)

    @property
    def item_count(self) -> int:
        return self._store.get_item_count()

    @property
    def subtotal(self) -> Decimal:
        return self._store.get_subtotal()

    @property
    def shipping(self) -> Decimal:
        return self._store.get_shipping()

    @property
    def tax(self) -> Decimal:
        return self._store.get_tax()

    @property
    def total(self) -> Decimal:
        return self._store.get_total()


class WishlistActions:
    """Wishlist operations for presentation code."""

    def __init__(self, store: WishlistStore, notifier: Notifier | None = None) -> None:
        self._store = store
        self._notifier = notifier or LogNotifier()

    @property
    def items(self) -> tuple[Product, ...]:
        return self._store.items

    @property
    def item_count(self) -> int:
        return self._store.get_item_count()

    def subscribe(self, listener: Listener[WishlistState]) -> Unsubscribe:
        return self._store.subscribe(listener)

    def is_in_wishlist(self, product_id: str) -> bool:
        return self._store.is_in_wishlist(product_id)

    def add_to_wishlist(self, product: Product) -> ActionResult[bool]:
        return _run(
            self._notifier,
            f"Adding {product.id} to wishlist",
            lambda: self._store.add_item(product),
            lambda added: ADDED_TO_WISHLIST if added else None,
        )

    def remove_from_wishlist(self, product_id: str) -> ActionResult[bool]:
        return _run(
            self._notifier,
            f"Removing {product_id} from wishlist",
            lambda: self._store.remove_item(product_id),
            lambda removed: REMOVED_FROM_WISHLIST if removed else None,
        )

    def toggle(self, product: Product) -> ActionResult[bool]:
        """Add or remove *product*; ``value`` is whether it is now wishlisted."""
        if self._store.is_in_wishlist(product.id):
            result = self.remove_from_wishlist(product.id)
            return ActionResult.success(False) if result.ok else result
        return self.add_to_wishlist(product)

    def clear_wishlist(self) -> ActionResult[None]:
        return _run(self._notifier, "Clearing wishlist", self._store.clear_wishlist, lambda _none: WISHLIST_CLEARED)


class AuthActions:
    """Sign-in and profile operations for presentation code.

    The store already turns backend failures into failed results; this
    layer only adds the toasts.
    """

    def __init__(self, store: AuthStore, notifier: Notifier | None = None) -> None:
        self._store = store
        self._notifier = notifier or LogNotifier()

    @property
    def user(self) -> User | None:
        return self._store.user

    @property
    def is_authenticated(self) -> bool:
        return self._store.is_authenticated

    def subscribe(self, listener: Listener[AuthState]) -> Unsubscribe:
        return self._store.subscribe(listener)

    def _announce(self, result: ActionResult[User], success_message: str) -> ActionResult[User]:
        if result.ok:
            toast(self._notifier, success_message, ToastLevel.SUCCESS)
        else:
            toast(self._notifier, result.reason or GENERIC_ERROR, ToastLevel.ERROR)
        return result

    async def login(self, email: str, password: str) -> ActionResult[User]:
        return self._announce(await self._store.login(email, password), LOGIN_SUCCESS)

    async def register(
        self,
        email: str,
        password: str,
        *,
        first_name: str | None = None,
        last_name: str | None = None,
    ) -> ActionResult[User]:
        result = await self._store.register(email, password, first_name=first_name, last_name=last_name)
        return self._announce(result, REGISTER_SUCCESS)

    async def update_profile(
        self,
        *,
        first_name: str | None = None,
        last_name: str | None = None,
        phone: str | None = None,
    ) -> ActionResult[User]:
        result = await self._store.update_profile(first_name=first_name, last_name=last_name, phone=phone)
        return self._announce(result, PROFILE_UPDATED)

    def logout(self) -> None:
        self._store.logout()
