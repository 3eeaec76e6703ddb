from __future__ import annotations

from decimal import Decimal

import pytest

from unicart.ingestion.cart import cart_item_from_server, cart_items_from_server
from unicart.ingestion.normalize import safe_int, safe_str
from unicart.ingestion.wishlist import products_from_wishlist
from unicart.models.product import Product, ProductPage


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (3, 3),
        ("4", 4),
        ("2.9", 2),
        (None, None),
        ("", None),
        ("abc", None),
        (True, None),
        (float("nan"), None),
        (float("inf"), None),
    ],
)
def test_safe_int(value: object, expected: int | None) -> None:
    assert safe_int(value) == expected


def test_safe_str_strips_and_drops_blank() -> None:
    assert safe_str("  p1 ") == "p1"
    assert safe_str(42) == "42"
    assert safe_str("   ") is None
    assert safe_str(None) is None


def test_server_cart_line_gets_local_line_id() -> None:
    item = cart_item_from_server(
        {
            "id": "sample-p1",
            "productId": "p1",
            "variantId": "blue",
            "quantity": "2",
            "price": "12.50",
            "product": {"id": "p1", "name": "Mug", "price": 10},
            "variant": {"id": "blue", "price": "12.50"},
        }
    )

    assert item is not None
    assert item.id == "p1:blue"
    assert item.quantity == 2
    assert item.price == Decimal("12.50")
    assert item.variant is not None and item.variant.id == "blue"


def test_server_cart_line_falls_back_to_product_price_and_id() -> None:
    item = cart_item_from_server({"quantity": 1, "product": {"id": 7, "price": "3.25"}})

    assert item is not None
    assert item.id == "7"
    assert item.product_id == "7"
    assert item.price == Decimal("3.25")


def test_unusable_cart_lines_are_skipped() -> None:
    items = cart_items_from_server(
        [
            {"productId": "p1", "quantity": 1, "product": {"name": "ok"}},
            {"productId": "p2", "quantity": 0},
            {"quantity": 1},
            {"productId": "p3", "quantity": 1, "price": -5},
            "not-a-line",  # type: ignore[list-item]
        ]
    )

    assert [item.id for item in items] == ["p1"]


def test_wishlist_entries_become_unique_products() -> None:
    products = products_from_wishlist(
        [
            {"id": "w1", "productId": "p1", "product": {"name": "Lamp", "price": "30"}},
            {"id": "w2", "productId": "p1", "product": {"name": "Lamp again"}},
            {"id": "w3", "product": {"id": "p2", "name": "Rug"}},
            {"id": "w4", "productId": "p3"},
            {"id": "w5", "product": {"name": "no id"}},
        ]
    )

    assert [product.id for product in products] == ["p1", "p2"]
    assert products[0].name == "Lamp"


def test_product_parses_backend_payload() -> None:
    product = Product.model_validate(
        {
            "id": 12,
            "name": "Desk",
            "shortDescription": "",
            "categoryId": "3",
            "price": "199.00",
            "comparePrice": None,
            "stockQuantity": 3,
            "lowStockThreshold": 5,
            "images": [
                {"url": "https://example.com/a.png"},
                {"url": "https://example.com/b.png", "isPrimary": True},
            ],
            "rating": {"average": 4.5, "count": 10},
            "unknownField": "ignored",
        }
    )

    assert product.id == "12"
    assert product.short_description is None
    assert product.compare_price is None
    assert product.in_stock and product.is_low_stock
    assert product.primary_image is not None and product.primary_image.url.endswith("b.png")


def test_product_page_flattens_pagination() -> None:
    page = ProductPage.model_validate(
        {
            "success": True,
            "products": [{"id": "p1"}],
            "pagination": {"page": 2, "limit": 1, "total": 9, "pages": 9},
        }
    )

    assert page.page == 2
    assert page.pages == 9
    assert [product.id for product in page.products] == ["p1"]
