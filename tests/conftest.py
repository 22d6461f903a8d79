"""Pytest configuration and fixtures"""
import pytest

from storefront.analytics import EventPipeline
from storefront.cart import CartStore
from storefront.catalog import CatalogProvider, Product
from storefront.pages import Storefront
from storefront.storage import MemoryStorage


class RecordingSink:
    """Analytics sink that keeps every event it receives."""

    def __init__(self):
        self.events = []

    def __call__(self, event_name, payload):
        self.events.append((event_name, payload))

    def names(self):
        return [name for name, _ in self.events]

    def last(self, event_name):
        return next(payload for name, payload in reversed(self.events) if name == event_name)


@pytest.fixture
def sample_products():
    return [
        Product(id="p1", name="Laptop", price=1000, category="Electronics",
                options={"Color": ["Silver", "Gray"], "Memory": ["16GB", "32GB"]}),
        Product(id="p2", name="Mug", price=500, category="Kitchen"),
        Product(id="p3", name="T-Shirt", price=200, category="Apparel",
                options={"Size": ["S", "M", "L"]}),
        Product(id="p4", name="Pen", price=100, category="Office"),
        Product(id="p5", name="Lamp", price=700, category="Home"),
    ]


@pytest.fixture
def catalog(sample_products):
    return CatalogProvider(products=sample_products)


@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture
def cart_store(storage):
    return CartStore(storage)


@pytest.fixture
def sink():
    return RecordingSink()


@pytest.fixture
def pipeline(sink):
    return EventPipeline(sink)


@pytest.fixture
def storefront(catalog, cart_store, pipeline):
    return Storefront(catalog, cart_store, pipeline)
