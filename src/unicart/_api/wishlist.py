"""Server wishlist endpoints (``/api/wishlist``)."""

from __future__ import annotations

from typing import Any
from urllib.parse import quote

from unicart._api._common import call, list_field
from unicart._transport import Transport


async def fetch_wishlist_entries(transport: Transport) -> list[dict[str, Any]]:
    response = await call(transport, "GET", "/api/wishlist")
    return list_field(response, "wishlist")


async def add_entry(transport: Transport, product_id: str) -> None:
    await call(transport, "POST", "/api/wishlist", {"productId": product_id})


async def remove_entry(transport: Transport, product_id: str) -> None:
    await call(transport, "DELETE", f"/api/wishlist/{quote(product_id, safe='')}")
