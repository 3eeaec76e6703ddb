"""Order history endpoints (``/api/orders``).

Both routes are scoped to the signed-in user; another user's order id
answers 404.
"""

from __future__ import annotations

from urllib.parse import quote

from unicart._api._common import call, list_field
from unicart._transport import Transport
from unicart.models.order import Order


async def fetch_orders(transport: Transport) -> list[Order]:
    """Newest first, as the backend sorts them."""
    response = await call(transport, "GET", "/api/orders")
    return [Order.model_validate(entry) for entry in list_field(response, "orders") if isinstance(entry, dict)]


async def fetch_order(transport: Transport, order_id: str) -> Order:
    response = await call(transport, "GET", f"/api/orders/{quote(order_id, safe='')}")
    return Order.model_validate(response.get("order") or {})
