"""Server cart endpoints (``/api/cart``).

The server addresses cart lines by product id, not by line id.
"""

from __future__ import annotations

from typing import Any
from urllib.parse import quote

from unicart._api._common import call, list_field
from unicart._transport import Transport


def _line_path(product_id: str) -> str:
    return f"/api/cart/{quote(product_id, safe='')}"


async def fetch_cart_lines(transport: Transport) -> list[dict[str, Any]]:
    """Return the raw cart lines; :mod:`unicart.ingestion.cart` turns them into models."""
    response = await call(transport, "GET", "/api/cart")
    cart = response.get("cart")
    return list_field(cart, "items") if isinstance(cart, dict) else []


async def add_line(transport: Transport, product_id: str, quantity: int, variant_id: str | None = None) -> None:
    payload: dict[str, Any] = {"productId": product_id, "quantity": quantity}
    if variant_id is not None:
        payload["variantId"] = variant_id
    await call(transport, "POST", "/api/cart", payload)


async def update_line(transport: Transport, product_id: str, quantity: int) -> None:
    await call(transport, "PUT", _line_path(product_id), {"quantity": quantity})


async def remove_line(transport: Transport, product_id: str) -> None:
    await call(transport, "DELETE", _line_path(product_id))
