"""Cart line model."""

from __future__ import annotations

from decimal import Decimal

from pydantic import Field

from unicart.models._base import UnicartBaseModel
from unicart.models.product import Product, ProductVariant


def item_key(product_id: str, variant_id: str | None = None) -> str:
    """Deterministic cart line id for a ``(product, variant)`` pair.

    Lines without a variant are keyed by the product id alone.
    """
    if variant_id:
        return f"{product_id}:{variant_id}"
    return product_id


class CartItem(UnicartBaseModel):
    """One cart line.

    ``price`` is the unit price captured when the line was created: the
    variant price when the variant defines one, the product price otherwise.
    """

    id: str
    product_id: str
    variant_id: str | None = None
    product: Product
    variant: ProductVariant | None = None
    quantity: int = Field(gt=0)
    price: Decimal = Field(ge=0)

    @classmethod
    def from_product(
        cls,
        product: Product,
        quantity: int,
        variant: ProductVariant | None = None,
    ) -> CartItem:
        variant_id = variant.id if variant is not None else None
        unit_price = variant.price if variant is not None and variant.price is not None else product.price
        return cls(
            id=item_key(product.id, variant_id),
            product_id=product.id,
            variant_id=variant_id,
            product=product,
            variant=variant,
            quantity=quantity,
            price=unit_price,
        )

    @property
    def line_total(self) -> Decimal:
        return self.price * self.quantity
