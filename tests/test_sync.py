from __future__ import annotations

from collections.abc import Mapping
from decimal import Decimal
from typing import Any

import pytest

from unicart._constants import NETWORK_ERROR
from unicart.client import ShopClient
from unicart.config import UnicartConfig
from unicart.exceptions import ApiError, InvalidQuantityError, TransportError
from unicart.models.product import Product, ProductVariant
from unicart.state.cart import CartStore
from unicart.sync import CartSync


class _ServerCart:
    """In-memory stand-in for the ``/api/cart`` routes."""

    def __init__(self) -> None:
        self.lines: dict[str, dict[str, Any]] = {}
        self.calls: list[tuple[str, str]] = []
        self.fail_with: Exception | None = None

    async def request(
        self,
        method: str,
        endpoint: str,
        payload: Mapping[str, Any] | None = None,
    ) -> dict[str, Any]:
        self.calls.append((method, endpoint))
        if self.fail_with is not None:
            raise self.fail_with
        if method == "GET":
            return {"success": True, "cart": {"items": list(self.lines.values())}}
        if method == "POST":
            assert payload is not None
            product_id = payload["productId"]
            line = self.lines.setdefault(
                product_id,
                {
                    "productId": product_id,
                    "variantId": payload.get("variantId"),
                    "quantity": 0,
                    "product": {"id": product_id, "price": "5.00"},
                },
            )
            line["quantity"] += payload["quantity"]
            return {"success": True}
        product_id = endpoint.rsplit("/", 1)[-1]
        if method == "PUT":
            assert payload is not None
            self.lines[product_id]["quantity"] = payload["quantity"]
        elif method == "DELETE":
            self.lines.pop(product_id, None)
        return {"success": True}


def _make_sync() -> tuple[CartSync, CartStore, _ServerCart]:
    server = _ServerCart()
    store = CartStore()
    return CartSync(store, ShopClient(UnicartConfig(), transport=server)), store, server


def _product(product_id: str = "p1") -> Product:
    return Product(id=product_id, price=Decimal("5.00"))


@pytest.mark.asyncio
async def test_push_add_then_refresh_mirrors_server_cart() -> None:
    sync, store, server = _make_sync()

    result = await sync.push_add(_product(), 2)

    assert result.ok
    assert [(item.id, item.quantity) for item in store.items] == [("p1", 2)]
    assert server.calls == [("POST", "/api/cart"), ("GET", "/api/cart")]


@pytest.mark.asyncio
async def test_push_add_with_variant_uses_variant_line_id() -> None:
    sync, store, _ = _make_sync()

    await sync.push_add(_product(), 1, ProductVariant(id="red"))

    assert [item.id for item in store.items] == ["p1:red"]


@pytest.mark.asyncio
async def test_push_add_rejects_bad_quantity_without_request() -> None:
    sync, _, server = _make_sync()

    result = await sync.push_add(_product(), 0)

    assert isinstance(result.error, InvalidQuantityError)
    assert server.calls == []


@pytest.mark.asyncio
async def test_push_update_and_remove() -> None:
    sync, store, _ = _make_sync()
    await sync.push_add(_product(), 2)

    await sync.push_update("p1", 5)
    assert store.get_item_by_id("p1").quantity == 5  # type: ignore[union-attr]

    await sync.push_update("p1", 0)
    assert store.items == ()


@pytest.mark.asyncio
async def test_push_for_unknown_line_is_a_no_op() -> None:
    sync, _, server = _make_sync()

    assert (await sync.push_update("missing", 3)).ok
    assert (await sync.push_remove("missing")).ok
    assert server.calls == []


@pytest.mark.asyncio
async def test_failures_leave_local_cart_untouched() -> None:
    sync, store, server = _make_sync()
    await sync.push_add(_product(), 1)
    before = store.items

    server.fail_with = TransportError("offline")
    network = await sync.push_remove("p1")
    assert network.reason == NETWORK_ERROR

    server.fail_with = ApiError("Out of stock", status_code=409)
    rejected = await sync.push_update("p1", 9)
    assert rejected.reason == "Out of stock"

    refreshed = await sync.refresh()
    assert not refreshed.ok
    assert store.items == before


@pytest.mark.asyncio
@pytest.mark.parametrize("quantity", [2.5, "3", True])
async def test_push_update_rejects_non_integer_quantity(quantity: Any) -> None:
    sync, store, server = _make_sync()
    await sync.push_add(_product(), 2)
    calls = list(server.calls)

    result = await sync.push_update("p1", quantity)

    assert isinstance(result.error, InvalidQuantityError)
    assert server.calls == calls
    assert store.get_item_by_id("p1").quantity == 2  # type: ignore[union-attr]
