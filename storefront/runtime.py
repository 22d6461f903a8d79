# storefront/runtime.py
from .analytics import EventPipeline, sink_from_config
from .cart import CartStore
from .catalog import load_catalog
from .config import CART_STORAGE_PATH
from .pages import Storefront
from .storage import FileStorage

# Shared across page loads: the durable cart slot and the analytics pipeline
CART_STORE = CartStore(FileStorage(CART_STORAGE_PATH))
PIPELINE = EventPipeline(sink_from_config())


def get_storefront() -> Storefront:
    """One page load: the catalog is read fresh, cart and pipeline are shared."""
    return Storefront(load_catalog(), CART_STORE, PIPELINE)
