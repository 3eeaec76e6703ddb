"""Server cart lines → :class:`CartItem` models.

Server lines carry their own row id (``"sample-p1"``, database ids); the
local line id is always re-derived from ``(productId, variantId)`` so a
synced cart merges with lines added locally.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from pydantic import ValidationError

from unicart.ingestion.normalize import safe_int, safe_str
from unicart.models.cart import CartItem, item_key

_logger = logging.getLogger(__name__)


def cart_item_from_server(line: dict[str, Any]) -> CartItem | None:
    """Build a cart line, or ``None`` when the line is unusable."""
    product = line.get("product")
    product_id = safe_str(line.get("productId")) or (safe_str(product.get("id")) if isinstance(product, dict) else None)
    quantity = safe_int(line.get("quantity"))
    if product_id is None or quantity is None or quantity <= 0:
        return None

    variant_id = safe_str(line.get("variantId"))
    product_payload = dict(product) if isinstance(product, dict) else {}
    product_payload.setdefault("id", product_id)

    price = line.get("price")
    if price is None:
        price = product_payload.get("price", 0)

    try:
        return CartItem.model_validate(
            {
                "id": item_key(product_id, variant_id),
                "productId": product_id,
                "variantId": variant_id,
                "product": product_payload,
                "variant": line.get("variant"),
                "quantity": quantity,
                "price": price,
            }
        )
    except ValidationError as exc:
        _logger.warning("Skipping invalid cart line for product %s: %s", product_id, exc)
        return None


def cart_items_from_server(lines: Iterable[dict[str, Any]]) -> list[CartItem]:
    items: list[CartItem] = []
    for line in lines:
        if not isinstance(line, dict):
            continue
        item = cart_item_from_server(line)
        if item is not None:
            items.append(item)
    return items
