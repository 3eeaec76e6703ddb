"""Explicit wiring of every store for one client process.

Build one :class:`StoreContext` at start-up and hand it to presentation
code; there are no module-level store singletons.
"""

from __future__ import annotations

import dataclasses
import logging

from unicart._constants import AUTH_SLOT, CART_SLOT, SEARCH_SLOT, WISHLIST_SLOT
from unicart._transport import Transport
from unicart.client import ShopClient
from unicart.config import UnicartConfig
from unicart.guard import GuardDecision, RouteGuard
from unicart.hooks import AuthActions, CartActions, WishlistActions
from unicart.models.user import User
from unicart.state.auth import AuthStore
from unicart.state.cart import CartStore
from unicart.state.persistence import FileStorage, JsonSlotPersistence, SlotStorage
from unicart.state.search import SearchStore
from unicart.state.user import UserStore
from unicart.state.wishlist import WishlistStore
from unicart.sync import CartSync
from unicart.toast import LogNotifier, Notifier

_logger = logging.getLogger(__name__)


@dataclasses.dataclass
class StoreContext:
    config: UnicartConfig
    client: ShopClient
    cart: CartStore
    wishlist: WishlistStore
    user: UserStore
    auth: AuthStore
    search: SearchStore
    guard: RouteGuard
    notifier: Notifier
    storage: SlotStorage | None = None
    cart_actions: CartActions = dataclasses.field(init=False)
    wishlist_actions: WishlistActions = dataclasses.field(init=False)
    auth_actions: AuthActions = dataclasses.field(init=False)
    cart_sync: CartSync = dataclasses.field(init=False)

    def __post_init__(self) -> None:
        self.cart_actions = CartActions(self.cart, self.notifier)
        self.wishlist_actions = WishlistActions(self.wishlist, self.notifier)
        self.auth_actions = AuthActions(self.auth, self.notifier)
        self.cart_sync = CartSync(self.cart, self.client)
        self._unsubscribe_user = self.auth.subscribe(lambda state: self._mirror_user(state.user))
        self._mirror_user(self.auth.user)

    def _mirror_user(self, user: User | None) -> None:
        if self.user.user != user:
            self.user.set_user(user)

    @classmethod
    def create(
        cls,
        config: UnicartConfig | None = None,
        *,
        storage: SlotStorage | None = None,
        transport: Transport | None = None,
        notifier: Notifier | None = None,
    ) -> StoreContext:
        """Build every store once.

        *storage* defaults to a :class:`FileStorage` under
        ``config.storage_dir`` when that is set; without any storage all
        state stays in memory.  The auth session is restored from storage.
        """
        config = config or UnicartConfig()
        if storage is None and config.storage_dir is not None:
            storage = FileStorage(config.storage_dir)

        def port(slot: str) -> JsonSlotPersistence | None:
            return JsonSlotPersistence(storage, slot) if storage is not None else None

        client = ShopClient(config, transport=transport)
        auth = AuthStore(client, token_storage=storage, persistence=port(AUTH_SLOT))
        context = cls(
            config=config,
            client=client,
            cart=CartStore.from_config(config, persistence=port(CART_SLOT)),
            wishlist=WishlistStore(persistence=port(WISHLIST_SLOT)),
            user=UserStore(),
            auth=auth,
            search=SearchStore(persistence=port(SEARCH_SLOT), recent_limit=config.recent_search_limit),
            guard=RouteGuard.from_config(config),
            notifier=notifier or LogNotifier(),
            storage=storage,
        )
        auth.check_auth()
        _logger.debug("Store context ready (persistent=%s)", storage is not None)
        return context

    def guard_path(self, path: str) -> GuardDecision:
        return self.guard.evaluate(path, self.auth.is_authenticated)

    def close(self) -> None:
        """Detach persistence mirrors; later commits stay in memory."""
        self._unsubscribe_user()
        for store in (self.cart, self.wishlist, self.auth, self.search):
            store.close()
