"""Order history models (``/api/orders``)."""

from __future__ import annotations

from decimal import Decimal
from enum import StrEnum
from typing import Any

from pydantic import Field, field_validator

from unicart.models._base import UnicartBaseModel


class OrderStatus(StrEnum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"
    REFUNDED = "refunded"


class PaymentStatus(StrEnum):
    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"
    REFUNDED = "refunded"


class OrderItem(UnicartBaseModel):
    """One purchased line, priced as it was at checkout."""

    id: str
    product_id: str
    variant_id: str | None = None
    product_name: str = ""
    product_sku: str | None = None
    variant_name: str | None = None
    quantity: int = Field(default=1, ge=0)
    unit_price: Decimal = Decimal("0")
    total_price: Decimal = Decimal("0")
    image: str | None = None


class Order(UnicartBaseModel):
    """A placed order as the account pages show it."""

    id: str
    order_number: str = ""
    status: OrderStatus = OrderStatus.PENDING
    payment_status: PaymentStatus = PaymentStatus.PENDING
    payment_method: str | None = None
    items: list[OrderItem] = Field(default_factory=list)
    subtotal: Decimal = Decimal("0")
    tax_amount: Decimal = Decimal("0")
    shipping_amount: Decimal = Decimal("0")
    discount_amount: Decimal = Decimal("0")
    total_amount: Decimal = Decimal("0")
    shipping_address: dict[str, Any] = Field(default_factory=dict)
    billing_address: dict[str, Any] | None = None
    tracking_number: str | None = None
    shipped_at: str | None = None
    delivered_at: str | None = None
    created_at: str | None = None
    updated_at: str | None = None

    @field_validator("status", "payment_status", mode="before")
    @classmethod
    def _normalize_status(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @property
    def item_count(self) -> int:
        return sum(item.quantity for item in self.items)

    @property
    def is_open(self) -> bool:
        return self.status not in (OrderStatus.DELIVERED, OrderStatus.CANCELLED, OrderStatus.REFUNDED)
