# storefront/config.py
import os

# Public address of the storefront (confirmation links are built from it)
BASE_URL = os.getenv("BASE_URL", "http://localhost:8000")

# Every priced analytics event is reported in this currency
CURRENCY = os.getenv("STORE_CURRENCY", "KRW")

# Checkout
SHIPPING_COST = int(os.getenv("SHIPPING_COST", "3000"))
SHIPPING_TIER = "Standard Shipping"

# view_promotion fallbacks when the banner carries no metadata
DEFAULT_PROMOTION_ID = "home_banner_01"
DEFAULT_PROMOTION_NAME = "Spring Sale"

HOME_RECOMMENDATION_COUNT = 4

# Static catalog file, read once per page load
BASE_DIR = os.path.dirname(os.path.abspath(__file__))
CATALOG_PATH = os.getenv("CATALOG_PATH", os.path.join(BASE_DIR, "products.json"))

# Durable cart slot
CART_STORAGE_PATH = os.getenv("CART_STORAGE_PATH", os.path.join(".storefront", "cart.json"))
CART_STORAGE_KEY = "cart"

# GA4 Measurement Protocol; leaving these unset means no analytics sink
GA4_MEASUREMENT_ID = os.getenv("GA4_MEASUREMENT_ID")
GA4_API_SECRET = os.getenv("GA4_API_SECRET")
GA4_ENDPOINT = "https://www.google-analytics.com/mp/collect"
