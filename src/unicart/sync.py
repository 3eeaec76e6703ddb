"""Keeps the local cart in step with the server cart.

Every push (add, update, remove) is followed by a refresh, so the local
store always ends up holding the server's view.  Failures come back as
failed :class:`ActionResult`s and leave the local cart untouched.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import Any

from unicart._constants import NETWORK_ERROR
from unicart.client import ShopClient
from unicart.exceptions import InvalidQuantityError, TransportError, UnicartError
from unicart.models.cart import CartItem
from unicart.models.product import Product, ProductVariant
from unicart.models.result import ActionResult
from unicart.state.cart import CartStore

_logger = logging.getLogger(__name__)


class CartSync:
    def __init__(self, store: CartStore, client: ShopClient) -> None:
        self._store = store
        self._client = client

    async def refresh(self) -> ActionResult[tuple[CartItem, ...]]:
        """Replace the local cart with the server cart."""
        try:
            items = await self._client.get_cart()
        except TransportError as exc:
            _logger.warning("Cart refresh failed: %s", exc)
            return ActionResult.failure(NETWORK_ERROR, error=exc)
        except UnicartError as exc:
            _logger.warning("Cart refresh rejected: %s", exc)
            return ActionResult.failure(str(exc), error=exc)
        self._store.replace_items(items)
        return ActionResult.success(self._store.items)

    async def _push(self, action: str, request: Callable[[], Awaitable[Any]]) -> ActionResult[tuple[CartItem, ...]]:
        try:
            await request()
        except TransportError as exc:
            _logger.warning("%s failed: %s", action, exc)
            return ActionResult.failure(NETWORK_ERROR, error=exc)
        except UnicartError as exc:
            _logger.warning("%s rejected: %s", action, exc)
            return ActionResult.failure(str(exc), error=exc)
        return await self.refresh()

    async def push_add(
        self,
        product: Product,
        quantity: int = 1,
        variant: ProductVariant | None = None,
    ) -> ActionResult[tuple[CartItem, ...]]:
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
            error = InvalidQuantityError(quantity)
            return ActionResult.failure(str(error), error=error)
        variant_id = variant.id if variant is not None else None
        return await self._push(
            f"Adding {product.id} to server cart",
            lambda: self._client.add_to_cart(product.id, quantity, variant_id),
        )

    async def push_update(self, item_id: str, quantity: int) -> ActionResult[tuple[CartItem, ...]]:
        """Set a line's quantity on the server; ``quantity <= 0`` removes it."""
        if isinstance(quantity, bool) or not isinstance(quantity, int):
            error = InvalidQuantityError(quantity)
            return ActionResult.failure(str(error), error=error)
        item = self._store.get_item_by_id(item_id)
        if item is None:
            return ActionResult.success(self._store.items)
        if quantity <= 0:
            return await self.push_remove(item_id)
        return await self._push(
            f"Updating {item_id} on server cart",
            lambda: self._client.update_cart_item(item.product_id, quantity),
        )

    async def push_remove(self, item_id: str) -> ActionResult[tuple[CartItem, ...]]:
        item = self._store.get_item_by_id(item_id)
        if item is None:
            return ActionResult.success(self._store.items)
        return await self._push(
            f"Removing {item_id} from server cart",
            lambda: self._client.remove_cart_item(item.product_id),
        )
