"""Wishlist store: a set of product snapshots in insertion order."""

from __future__ import annotations

from pydantic import Field

from unicart._constants import WISHLIST_SLOT
from unicart.models._base import UnicartBaseModel
from unicart.models.product import Product
from unicart.state.base import DomainStore
from unicart.state.persistence import PersistencePort


class WishlistState(UnicartBaseModel):
    items: tuple[Product, ...] = Field(default_factory=tuple)


class WishlistStore(DomainStore[WishlistState]):
    """Products the user saved for later, at most one entry per product id."""

    def __init__(self, *, persistence: PersistencePort | None = None, name: str = WISHLIST_SLOT) -> None:
        super().__init__(name, WishlistState(), persistence=persistence)

    @property
    def items(self) -> tuple[Product, ...]:
        return self.state.items

    def add_item(self, product: Product) -> bool:
        """Add *product*; returns ``False`` if its id is already present."""
        if self.is_in_wishlist(product.id):
            return False
        self._store.set({"items": (*self.items, product)})
        return True

    def remove_item(self, product_id: str) -> bool:
        items = tuple(item for item in self.items if item.id != product_id)
        if len(items) == len(self.items):
            return False
        self._store.set({"items": items})
        return True

    def is_in_wishlist(self, product_id: str) -> bool:
        return any(item.id == product_id for item in self.items)

    def get_item_count(self) -> int:
        return len(self.items)

    def clear_wishlist(self) -> None:
        self._store.set({"items": ()})
