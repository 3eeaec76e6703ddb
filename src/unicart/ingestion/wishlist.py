"""Server wishlist entries → :class:`Product` snapshots."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from pydantic import ValidationError

from unicart.models.product import Product

_logger = logging.getLogger(__name__)


def products_from_wishlist(entries: Iterable[dict[str, Any]]) -> list[Product]:
    """Extract each entry's product, skipping duplicates and malformed rows."""
    products: list[Product] = []
    seen: set[str] = set()
    for entry in entries:
        if not isinstance(entry, dict):
            continue
        payload = entry.get("product")
        if not isinstance(payload, dict):
            continue
        payload = {"id": entry.get("productId"), **payload}
        try:
            product = Product.model_validate(payload)
        except ValidationError as exc:
            _logger.warning("Skipping invalid wishlist entry %r: %s", entry.get("id"), exc)
            continue
        if product.id in seen:
            continue
        seen.add(product.id)
        products.append(product)
    return products
