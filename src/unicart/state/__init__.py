"""State/store layer.

Every piece of client state lives in a :class:`~unicart.state.engine.Store`
owned by one domain store.  Domain stores are the only code allowed to
commit to their store.
"""

from unicart.state.auth import AuthState, AuthStore
from unicart.state.base import DomainStore
from unicart.state.cart import CartState, CartStore
from unicart.state.engine import Store, StoreHandle, create_store
from unicart.state.persistence import (
    FileStorage,
    JsonSlotPersistence,
    MemoryStorage,
    PersistenceBinding,
    PersistencePort,
    SlotStorage,
    bind_persistence,
)
from unicart.state.search import SearchState, SearchStore, search_products
from unicart.state.user import UserState, UserStore
from unicart.state.wishlist import WishlistState, WishlistStore

__all__ = [
    "AuthState",
    "AuthStore",
    "CartState",
    "CartStore",
    "DomainStore",
    "FileStorage",
    "JsonSlotPersistence",
    "MemoryStorage",
    "PersistenceBinding",
    "PersistencePort",
    "SearchState",
    "SearchStore",
    "SlotStorage",
    "Store",
    "StoreHandle",
    "UserState",
    "UserStore",
    "WishlistState",
    "WishlistStore",
    "bind_persistence",
    "create_store",
    "search_products",
]
