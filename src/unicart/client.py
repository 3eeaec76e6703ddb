"""High-level async client for the UniCart backend API."""

from __future__ import annotations

import logging
from typing import Any

import aiohttp

from unicart._api import auth as _auth_api
from unicart._api import cart as _cart_api
from unicart._api import orders as _orders_api
from unicart._api import products as _products_api
from unicart._api import wishlist as _wishlist_api
from unicart._transport import HttpTransport, TokenProvider, Transport
from unicart.config import UnicartConfig
from unicart.exceptions import UnicartError
from unicart.ingestion.cart import cart_items_from_server
from unicart.ingestion.wishlist import products_from_wishlist
from unicart.models.cart import CartItem
from unicart.models.order import Order
from unicart.models.product import Product, ProductPage
from unicart.models.user import AuthSession, User

_logger = logging.getLogger(__name__)


class ShopClient:
    """Async client for the storefront backend.

    Usage::

        async with ShopClient(config, token_provider=auth.token_provider) as client:
            page = await client.get_products()

    A *transport* may be injected (tests, custom stacks); otherwise an
    aiohttp session is opened on enter and closed on exit unless one was
    passed in.
    """

    def __init__(
        self,
        config: UnicartConfig,
        *,
        session: aiohttp.ClientSession | None = None,
        transport: Transport | None = None,
        token_provider: TokenProvider | None = None,
    ) -> None:
        self._config = config
        self._external_session = session is not None
        self._http_session = session
        self._transport = transport
        self._injected_transport = transport is not None
        self._token_provider = token_provider

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> ShopClient:
        if self._injected_transport:
            return self
        if self._http_session is None:
            self._http_session = aiohttp.ClientSession()
        self._transport = HttpTransport(
            self._config.api_base_url,
            self._http_session,
            token_provider=self._call_token_provider,
            timeout=self._config.request_timeout,
        )
        return self

    async def __aexit__(self, *exc: Any) -> None:
        if self._injected_transport:
            return
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None
        self._transport = None

    def set_token_provider(self, token_provider: TokenProvider | None) -> None:
        self._token_provider = token_provider

    def _call_token_provider(self) -> str | None:
        return self._token_provider() if self._token_provider is not None else None

    def _require_transport(self) -> Transport:
        if self._transport is None:
            raise UnicartError("Client not initialized. Use 'async with ShopClient(...) as client:'")
        return self._transport

    # ------------------------------------------------------------------
    # Authentication
    # ------------------------------------------------------------------

    async def login(self, email: str, password: str) -> AuthSession:
        session = await _auth_api.login(self._require_transport(), email, password)
        _logger.info("Logged in as %s", session.user.id)
        return session

    async def register(
        self,
        email: str,
        password: str,
        *,
        first_name: str | None = None,
        last_name: str | None = None,
    ) -> AuthSession:
        return await _auth_api.register(
            self._require_transport(),
            email,
            password,
            first_name=first_name,
            last_name=last_name,
        )

    async def get_me(self) -> User:
        return await _auth_api.fetch_me(self._require_transport())

    async def update_me(
        self,
        *,
        first_name: str | None = None,
        last_name: str | None = None,
        phone: str | None = None,
    ) -> User:
        return await _auth_api.update_me(
            self._require_transport(),
            first_name=first_name,
            last_name=last_name,
            phone=phone,
        )

    # ------------------------------------------------------------------
    # Catalogue
    # ------------------------------------------------------------------

    async def get_products(
        self,
        *,
        page: int = 1,
        limit: int = 20,
        category: str | None = None,
        search: str | None = None,
        sort: str | None = None,
    ) -> ProductPage:
        return await _products_api.fetch_products(
            self._require_transport(),
            page=page,
            limit=limit,
            category=category,
            search=search,
            sort=sort,
        )

    async def get_product(self, product_id: str) -> Product:
        return await _products_api.fetch_product(self._require_transport(), product_id)

    # ------------------------------------------------------------------
    # Cart
    # ------------------------------------------------------------------

    async def get_cart(self) -> list[CartItem]:
        lines = await _cart_api.fetch_cart_lines(self._require_transport())
        return cart_items_from_server(lines)

    async def add_to_cart(self, product_id: str, quantity: int = 1, variant_id: str | None = None) -> None:
        await _cart_api.add_line(self._require_transport(), product_id, quantity, variant_id)

    async def update_cart_item(self, product_id: str, quantity: int) -> None:
        await _cart_api.update_line(self._require_transport(), product_id, quantity)

    async def remove_cart_item(self, product_id: str) -> None:
        await _cart_api.remove_line(self._require_transport(), product_id)

    # ------------------------------------------------------------------
    # Wishlist
    # ------------------------------------------------------------------

    async def get_wishlist(self) -> list[Product]:
        entries = await _wishlist_api.fetch_wishlist_entries(self._require_transport())
        return products_from_wishlist(entries)

    async def add_to_wishlist(self, product_id: str) -> None:
        await _wishlist_api.add_entry(self._require_transport(), product_id)

    async def remove_from_wishlist(self, product_id: str) -> None:
        await _wishlist_api.remove_entry(self._require_transport(), product_id)

    # ------------------------------------------------------------------
    # Orders
    # ------------------------------------------------------------------

    async def get_orders(self) -> list[Order]:
        return await _orders_api.fetch_orders(self._require_transport())

    async def get_order(self, order_id: str) -> Order:
        return await _orders_api.fetch_order(self._require_transport(), order_id)
