"""unicart - client-side state stores for the UniCart storefront."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("unicart")
except PackageNotFoundError:
    __version__ = "0+local"
from unicart.client import ShopClient
from unicart.config import UnicartConfig
from unicart.context import StoreContext
from unicart.exceptions import (
    ApiError,
    AuthenticationError,
    CartLimitError,
    InvalidQuantityError,
    PersistenceError,
    StoreError,
    StoreReentrancyError,
    TransportError,
    UnicartConfigError,
    UnicartError,
)
from unicart.guard import GuardAction, GuardDecision, RouteGuard
from unicart.hooks import AuthActions, CartActions, WishlistActions
from unicart.models import (
    ActionResult,
    AuthSession,
    CartItem,
    Order,
    OrderItem,
    OrderStatus,
    PaymentStatus,
    Product,
    ProductImage,
    ProductPage,
    ProductRating,
    ProductVariant,
    User,
    UserRole,
    item_key,
)
from unicart.state import (
    AuthStore,
    CartStore,
    FileStorage,
    JsonSlotPersistence,
    MemoryStorage,
    SearchStore,
    Store,
    UserStore,
    WishlistStore,
    bind_persistence,
    create_store,
)
from unicart.sync import CartSync
from unicart.toast import LogNotifier, Notifier, RecordingNotifier, Toast, ToastLevel

__all__ = [
    "__version__",
    "ActionResult",
    "ApiError",
    "AuthActions",
    "AuthSession",
    "AuthStore",
    "AuthenticationError",
    "CartActions",
    "CartItem",
    "CartLimitError",
    "CartStore",
    "CartSync",
    "FileStorage",
    "GuardAction",
    "GuardDecision",
    "InvalidQuantityError",
    "JsonSlotPersistence",
    "LogNotifier",
    "MemoryStorage",
    "Notifier",
    "Order",
    "OrderItem",
    "OrderStatus",
    "PaymentStatus",
    "PersistenceError",
    "Product",
    "ProductImage",
    "ProductPage",
    "ProductRating",
    "ProductVariant",
    "RecordingNotifier",
    "RouteGuard",
    "SearchStore",
    "ShopClient",
    "Store",
    "StoreContext",
    "StoreError",
    "StoreReentrancyError",
    "Toast",
    "ToastLevel",
    "TransportError",
    "UnicartConfig",
    "UnicartConfigError",
    "UnicartError",
    "User",
    "UserRole",
    "UserStore",
    "WishlistActions",
    "WishlistStore",
    "bind_persistence",
    "create_store",
    "item_key",
]
