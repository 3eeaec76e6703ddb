"""Cart store.

Lines are kept in insertion order and keyed by :func:`unicart.models.item_key`,
so adding the same ``(product, variant)`` twice grows one line instead of
creating a duplicate.

Quantity rules:

* ``add_item`` rejects anything but a positive ``int`` with
  :class:`InvalidQuantityError`; it never clamps.
* ``update_quantity`` sets the quantity absolutely; ``<= 0`` removes the line.
* Unknown line ids are a no-op for ``remove_item`` and ``update_quantity``
  (both return ``False``).
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from decimal import ROUND_HALF_UP, Decimal

from pydantic import Field

from unicart._constants import CART_SLOT, FLAT_SHIPPING_RATE, FREE_SHIPPING_THRESHOLD, MAX_CART_ITEMS, TAX_RATE
from unicart.config import UnicartConfig
from unicart.exceptions import CartLimitError, InvalidQuantityError
from unicart.models._base import UnicartBaseModel
from unicart.models.cart import CartItem, item_key
from unicart.models.product import Product, ProductVariant
from unicart.state.base import DomainStore
from unicart.state.persistence import PersistencePort

_logger = logging.getLogger(__name__)

_CENTS = Decimal("0.01")


def _money(value: Decimal) -> Decimal:
    return value.quantize(_CENTS, rounding=ROUND_HALF_UP)


def _check_quantity(quantity: object) -> int:
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
        raise InvalidQuantityError(quantity)
    return quantity


class CartState(UnicartBaseModel):
    items: tuple[CartItem, ...] = Field(default_factory=tuple)


class CartStore(DomainStore[CartState]):
    """Ordered cart lines plus derived totals."""

    def __init__(
        self,
        *,
        persistence: PersistencePort | None = None,
        tax_rate: Decimal = TAX_RATE,
        free_shipping_threshold: Decimal = FREE_SHIPPING_THRESHOLD,
        flat_shipping_rate: Decimal = FLAT_SHIPPING_RATE,
        max_cart_items: int = MAX_CART_ITEMS,
        name: str = CART_SLOT,
    ) -> None:
        self._tax_rate = tax_rate
        self._free_shipping_threshold = free_shipping_threshold
        self._flat_shipping_rate = flat_shipping_rate
        self._max_cart_items = max_cart_items
        super().__init__(name, CartState(), persistence=persistence)

    @classmethod
    def from_config(cls, config: UnicartConfig, *, persistence: PersistencePort | None = None) -> CartStore:
        return cls(
            persistence=persistence,
            tax_rate=config.tax_rate,
            free_shipping_threshold=config.free_shipping_threshold,
            flat_shipping_rate=config.flat_shipping_rate,
            max_cart_items=config.max_cart_items,
        )

    @property
    def items(self) -> tuple[CartItem, ...]:
        return self.state.items

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    def add_item(
        self,
        product: Product,
        quantity: int = 1,
        variant: ProductVariant | None = None,
    ) -> CartItem:
        """Add *quantity* of *product* (and *variant*), merging with an existing line.

        Raises
        ------
        InvalidQuantityError
            If *quantity* is not a positive integer.
        CartLimitError
            If the cart would exceed ``max_cart_items`` units.
        """
        quantity = _check_quantity(quantity)
        key = item_key(product.id, variant.id if variant is not None else None)
        self._check_limit(self.get_item_count() + quantity)

        items = list(self.items)
        for index, item in enumerate(items):
            if item.id == key:
                line = item.model_copy(update={"quantity": item.quantity + quantity})
                items[index] = line
                break
        else:
            line = CartItem.from_product(product, quantity, variant)
            items.append(line)

        self._store.set({"items": tuple(items)})
        _logger.debug("Cart line %s now has quantity %d", key, line.quantity)
        return line

    def remove_item(self, item_id: str) -> bool:
        items = tuple(item for item in self.items if item.id != item_id)
        if len(items) == len(self.items):
            return False
        self._store.set({"items": items})
        return True

    def update_quantity(self, item_id: str, quantity: int) -> bool:
        """Set the line's quantity exactly; ``quantity <= 0`` removes the line.

        Raises
        ------
        InvalidQuantityError
            If *quantity* is not an integer.
        CartLimitError
            If the new quantity would push the cart over ``max_cart_items``.
        """
        if isinstance(quantity, bool) or not isinstance(quantity, int):
            raise InvalidQuantityError(quantity)
        current = self.get_item_by_id(item_id)
        if current is None:
            return False
        if quantity <= 0:
            return self.remove_item(item_id)

        self._check_limit(self.get_item_count() - current.quantity + quantity)
        items = tuple(
            item.model_copy(update={"quantity": quantity}) if item.id == item_id else item for item in self.items
        )
        self._store.set({"items": items})
        return True

    def clear(self) -> None:
        self._store.set({"items": ()})

    def replace_items(self, items: Iterable[CartItem]) -> None:
        """Replace every line, e.g. with the server's view of the cart.

        Lines sharing an id are merged by summing their quantities.
        """
        merged: dict[str, CartItem] = {}
        for item in items:
            existing = merged.get(item.id)
            if existing is None:
                merged[item.id] = item
            else:
                merged[item.id] = existing.model_copy(update={"quantity": existing.quantity + item.quantity})
        self._store.set({"items": tuple(merged.values())})

    def _check_limit(self, requested: int) -> None:
        if requested > self._max_cart_items:
            raise CartLimitError(requested, self._max_cart_items)

    # ------------------------------------------------------------------
    # Derived queries
    # ------------------------------------------------------------------

    def get_item_by_id(self, item_id: str) -> CartItem | None:
        for item in self.items:
            if item.id == item_id:
                return item
        return None

    def get_item_count(self) -> int:
        return sum(item.quantity for item in self.items)

    def get_subtotal(self) -> Decimal:
        return sum((item.line_total for item in self.items), Decimal("0"))

    def get_shipping(self) -> Decimal:
        if not self.items:
            return Decimal("0.00")
        if self.get_subtotal() >= self._free_shipping_threshold:
            return Decimal("0.00")
        return _money(self._flat_shipping_rate)

    def get_tax(self) -> Decimal:
        return _money(self.get_subtotal() * self._tax_rate)

    def get_total(self) -> Decimal:
        return _money(self.get_subtotal() + self.get_shipping() + self.get_tax())
