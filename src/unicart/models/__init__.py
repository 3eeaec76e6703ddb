"""Data models for UniCart payloads and store state."""

from unicart.models._base import UnicartBaseModel
from unicart.models.cart import CartItem, item_key
from unicart.models.order import Order, OrderItem, OrderStatus, PaymentStatus
from unicart.models.product import Product, ProductImage, ProductPage, ProductRating, ProductVariant
from unicart.models.result import ActionResult
from unicart.models.user import AuthSession, User, UserRole

__all__ = [
    "ActionResult",
    "AuthSession",
    "CartItem",
    "Order",
    "OrderItem",
    "OrderStatus",
    "PaymentStatus",
    "Product",
    "ProductImage",
    "ProductPage",
    "ProductRating",
    "ProductVariant",
    "UnicartBaseModel",
    "User",
    "UserRole",
    "item_key",
]
