"""Internal constants shared across the library."""

from decimal import Decimal

API_BASE_URL = "https://unicart-cursor5.vercel.app"
USER_AGENT = "unicart-python"

# ------------------------------------------------------------------
# Durable storage slots
# ------------------------------------------------------------------

WISHLIST_SLOT = "unicart_wishlist"
CART_SLOT = "unicart_cart"
AUTH_SLOT = "unicart_auth"
SEARCH_SLOT = "unicart_search"
TOKEN_SLOT = "auth_token"

#: Envelope version written to every slot.  Unversioned payloads are read
#: as version 0.
STORAGE_VERSION = 1

# ------------------------------------------------------------------
# Pricing
# ------------------------------------------------------------------

TAX_RATE = Decimal("0.0725")
FREE_SHIPPING_THRESHOLD = Decimal("100")
FLAT_SHIPPING_RATE = Decimal("9.99")
MAX_CART_ITEMS = 50
RECENT_SEARCH_LIMIT = 5

# ------------------------------------------------------------------
# Routing
# ------------------------------------------------------------------

PROTECTED_ROUTES: tuple[str, ...] = ("/account", "/checkout", "/wishlist")
AUTH_ROUTES: tuple[str, ...] = ("/login", "/register")
LOGIN_PATH = "/login"
HOME_PATH = "/"

# ------------------------------------------------------------------
# Catalogue categories (id, name, slug)
# ------------------------------------------------------------------

CATEGORIES: tuple[tuple[str, str, str], ...] = (
    ("1", "Electronics", "electronics"),
    ("2", "Fashion", "fashion"),
    ("3", "Home & Kitchen", "home-kitchen"),
    ("4", "Beauty", "beauty"),
    ("5", "Sports", "sports"),
    ("6", "Books", "books"),
)

# ------------------------------------------------------------------
# User-facing messages
# ------------------------------------------------------------------

ADDED_TO_CART = "Product added to cart!"
REMOVED_FROM_CART = "Product removed from cart."
CART_UPDATED = "Cart updated successfully."
CART_CLEARED = "Cart cleared."
ADDED_TO_WISHLIST = "Product added to wishlist."
REMOVED_FROM_WISHLIST = "Product removed from wishlist."
WISHLIST_CLEARED = "Wishlist cleared."
LOGIN_SUCCESS = "Login successful"
REGISTER_SUCCESS = "Registration successful"
PROFILE_UPDATED = "Profile updated successfully."
GENERIC_ERROR = "Something went wrong. Please try again."
NETWORK_ERROR = "Network error. Please try again."
