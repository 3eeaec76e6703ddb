"""Catalogue endpoints (``/api/products``)."""

from __future__ import annotations

from urllib.parse import quote, urlencode

from unicart._api._common import call
from unicart._transport import Transport
from unicart.models.product import Product, ProductPage


async def fetch_products(
    transport: Transport,
    *,
    page: int = 1,
    limit: int = 20,
    category: str | None = None,
    search: str | None = None,
    sort: str | None = None,
) -> ProductPage:
    params: dict[str, str | int] = {"page": page, "limit": limit}
    if category:
        params["category"] = category
    if search:
        params["search"] = search
    if sort:
        params["sort"] = sort
    response = await call(transport, "GET", f"/api/products?{urlencode(params)}")
    return ProductPage.model_validate(dict(response))


async def fetch_product(transport: Transport, product_id: str) -> Product:
    response = await call(transport, "GET", f"/api/products/{quote(product_id, safe='')}")
    return Product.model_validate(response.get("product") or {})
