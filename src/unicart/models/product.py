"""Catalogue product models."""

from __future__ import annotations

from decimal import Decimal
from typing import Any

from pydantic import Field, field_validator, model_validator

from unicart.models._base import UnicartBaseModel


class ProductImage(UnicartBaseModel):
    """An image attached to a product."""

    id: str = ""
    url: str = ""
    alt: str = ""
    is_primary: bool = False
    display_order: int = 0


class ProductVariant(UnicartBaseModel):
    """A purchasable variant (size, colour, ...) of a product."""

    id: str
    name: str = ""
    sku: str | None = None
    price: Decimal | None = Field(default=None, ge=0)
    """Overrides the product price when set."""
    stock_quantity: int = 0
    attributes: dict[str, str] = Field(default_factory=dict)


class ProductRating(UnicartBaseModel):
    average: float = 0.0
    count: int = 0


class Product(UnicartBaseModel):
    """A product snapshot as returned by ``/api/products``.

    Cart lines and wishlist entries keep the snapshot they were created
    with; prices are never re-fetched from the catalogue.
    """

    id: str
    name: str = ""
    slug: str = ""
    description: str = ""
    short_description: str | None = None
    category_id: str = ""
    brand: str | None = None
    sku: str | None = None
    price: Decimal = Field(default=Decimal("0"), ge=0)
    compare_price: Decimal | None = None
    stock_quantity: int = 0
    low_stock_threshold: int = 0
    is_active: bool = True
    is_featured: bool = False
    images: list[ProductImage] = Field(default_factory=list)
    variants: list[ProductVariant] = Field(default_factory=list)
    rating: ProductRating = Field(default_factory=ProductRating)
    badges: list[str] = Field(default_factory=list)
    created_at: str | None = None
    updated_at: str | None = None

    @field_validator("id", mode="before")
    @classmethod
    def _normalize_id(cls, value: object) -> str:
        product_id = str(value).strip()
        if not product_id:
            raise ValueError("product id must be non-empty")
        return product_id

    @property
    def primary_image(self) -> ProductImage | None:
        for image in self.images:
            if image.is_primary:
                return image
        return self.images[0] if self.images else None

    @property
    def in_stock(self) -> bool:
        return self.stock_quantity > 0

    @property
    def is_low_stock(self) -> bool:
        return 0 < self.stock_quantity <= self.low_stock_threshold


class ProductPage(UnicartBaseModel):
    """One page of ``/api/products`` results."""

    products: list[Product] = Field(default_factory=list)
    page: int = 1
    limit: int = 0
    total: int = 0
    pages: int = 0

    @model_validator(mode="before")
    @classmethod
    def _flatten_pagination(cls, values: Any) -> Any:
        if isinstance(values, dict) and isinstance(values.get("pagination"), dict):
            return {**values["pagination"], "products": values.get("products", [])}
        return values
