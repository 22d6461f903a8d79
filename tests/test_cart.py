"""
Tests for the cart store
"""

import json

import pytest

from storefront.cart import CartLineItem, CartStore, build_cart_summary, format_price, subtotal, total_quantity
from storefront.storage import MemoryStorage
from storefront.variant import Variant


class TestAddItem:
    """Merging and appending line items."""

    def test_same_key_merges_quantities(self, cart_store):
        """Test repeated adds of one product/variant collapse into one line."""
        for qty in (1, 2, 4):
            cart_store.add_item("p1", "Laptop", 1000, qty, {"Color": "Silver"})

        cart = cart_store.get_cart()
        assert len(cart) == 1
        assert cart[0].quantity == 7

    def test_different_variant_is_distinct(self, cart_store):
        """Test same product with another variant gets its own line."""
        cart_store.add_item("p3", "T-Shirt", 200, 1, {"Size": "S"})
        cart_store.add_item("p3", "T-Shirt", 200, 1, {"Size": "M"})

        cart = cart_store.get_cart()
        assert len(cart) == 2
        assert [line.variant.label for line in cart] == ["S", "M"]

    def test_variant_key_order_does_not_matter(self, cart_store):
        """Test variants with the same choices in another order merge."""
        cart_store.add_item("p1", "Laptop", 1000, 1, {"Color": "Silver", "Memory": "16GB"})
        cart_store.add_item("p1", "Laptop", 1000, 1, {"Memory": "16GB", "Color": "Silver"})

        cart = cart_store.get_cart()
        assert len(cart) == 1
        assert cart[0].quantity == 2

    def test_first_price_wins_on_merge(self, cart_store):
        """Test the price supplied on a later add is discarded."""
        cart_store.add_item("p2", "Mug", 500, 1, {})
        cart_store.add_item("p2", "Mug", 900, 1, {})

        cart = cart_store.get_cart()
        assert cart[0].price == 500
        assert cart[0].quantity == 2

    def test_empty_and_missing_variant_are_equal(self, cart_store):
        cart_store.add_item("p2", "Mug", 500, 1, None)
        cart_store.add_item("p2", "Mug", 500, 1, {})

        assert len(cart_store.get_cart()) == 1

    def test_rejects_non_positive_quantity(self, cart_store):
        with pytest.raises(ValueError):
            cart_store.add_item("p2", "Mug", 500, 0)
        assert cart_store.get_cart() == []

    def test_rejects_fractional_and_bool_quantity(self, cart_store):
        """Test a non-integer quantity never reaches storage and wipes the cart."""
        cart_store.add_item("p2", "Mug", 500, 3)
        cart_store.add_item("p1", "Laptop", 1000, 1)

        for bad in (1.5, True):
            with pytest.raises(ValueError):
                cart_store.add_item("p2", "Mug", 500, bad)

        cart = cart_store.get_cart()
        assert len(cart) == 2
        assert cart[0].quantity == 3

    def test_write_through(self, storage, cart_store):
        """Test the storage holds the new cart as soon as add returns."""
        cart_store.add_item("p2", "Mug", 500, 3, {})

        stored = json.loads(storage.get_item("cart"))
        assert stored == [{"id": "p2", "name": "Mug", "price": 500, "quantity": 3, "variant": {}}]


class TestGetCart:
    """Reading the persisted cart."""

    def test_missing_cart_is_empty(self, cart_store):
        assert cart_store.get_cart() == []

    def test_malformed_json_is_empty(self):
        store = CartStore(MemoryStorage({"cart": "{not json"}))
        assert store.get_cart() == []

    def test_wrong_shape_is_empty(self):
        store = CartStore(MemoryStorage({"cart": json.dumps({"id": "p1"})}))
        assert store.get_cart() == []

    def test_bad_entry_is_empty(self):
        entries = [{"id": "p1", "name": "Laptop", "price": 1000, "quantity": 0, "variant": {}}]
        store = CartStore(MemoryStorage({"cart": json.dumps(entries)}))
        assert store.get_cart() == []

    def test_malformed_cart_is_replaced_on_next_add(self):
        storage = MemoryStorage({"cart": "null-ish garbage"})
        store = CartStore(storage)

        store.add_item("p2", "Mug", 500, 1)

        assert len(json.loads(storage.get_item("cart"))) == 1


class TestSaveCart:
    """Persisting and count notification."""

    def test_save_of_loaded_cart_is_noop(self, storage, cart_store):
        """Test saving what was just read changes nothing."""
        cart_store.add_item("p1", "Laptop", 1000, 2, {"Memory": "32GB", "Color": "Gray"})
        cart_store.add_item("p2", "Mug", 500, 1, {})
        before_raw = storage.get_item("cart")
        before = cart_store.get_cart()

        cart_store.save_cart(cart_store.get_cart())

        assert storage.get_item("cart") == before_raw
        assert cart_store.get_cart() == before

    def test_listeners_receive_total_units(self, cart_store):
        counts = []
        cart_store.subscribe(counts.append)

        cart_store.add_item("p1", "Laptop", 1000, 2)
        cart_store.add_item("p2", "Mug", 500, 3)

        assert counts == [2, 5]

    def test_refresh_count_reports_persisted_units(self, storage):
        CartStore(storage).add_item("p2", "Mug", 500, 4)

        counts = []
        store = CartStore(storage)
        store.subscribe(counts.append)

        assert store.refresh_count() == 4
        assert counts == [4]


class TestClearCart:

    def test_clear_removes_slot(self, storage, cart_store):
        counts = []
        cart_store.subscribe(counts.append)
        cart_store.add_item("p2", "Mug", 500, 1)

        cart_store.clear_cart()

        assert storage.get_item("cart") is None
        assert cart_store.get_cart() == []
        assert counts[-1] == 0


class TestTotals:

    def test_totals(self):
        cart = [
            CartLineItem("a", "A", 1000, 2, Variant()),
            CartLineItem("b", "B", 500, 3, Variant({"Size": "M"})),
        ]
        assert subtotal(cart) == 3500
        assert total_quantity(cart) == 5

    def test_format_price(self):
        assert format_price(1250000) == "1,250,000원"

    def test_cart_summary(self):
        cart = [CartLineItem("b", "B", 500, 3, Variant({"Size": "M", "Color": "Navy"}))]

        summary = build_cart_summary(cart)

        assert summary["totalAmount"] == 1500
        assert summary["totalQuantity"] == 3
        assert summary["items"][0]["variant"] == "M/Navy"
        assert summary["items"][0]["subtotalFormatted"] == "1,500원"
