"""Tests for API endpoints"""
import asyncio

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from storefront.routes import register_api_routes
from storefront.runtime import get_storefront


@pytest.fixture
def client(storefront):
    """Test client wired to the in-memory storefront"""
    app = FastAPI()
    register_api_routes(app)
    app.dependency_overrides[get_storefront] = lambda: storefront
    return TestClient(app)


def test_search_products(client):
    response = client.get("/api/products", params={"query": "mug"})

    assert response.status_code == 200
    assert response.json()["count"] == 1


def test_add_and_get_cart(client):
    response = client.post("/api/cart/add", json={"productId": "p3", "options": {"Size": "M"}, "quantity": 2})
    assert response.json()["success"]

    data = client.get("/api/cart").json()
    assert not data["isEmpty"]
    assert data["cart"]["totalQuantity"] == 2
    assert data["cart"]["items"][0]["variant"] == "M"


def test_add_unknown_product(client):
    response = client.post("/api/cart/add", json={"productId": "missing"})

    assert response.json() == {"success": False, "message": "Product not found"}


def test_add_zero_quantity(client):
    response = client.post("/api/cart/add", json={"productId": "p2", "quantity": 0})

    assert not response.json()["success"]


def test_empty_cart(client):
    assert client.get("/api/cart").json()["isEmpty"]


def test_select_item(client, sink):
    assert client.post("/api/lists/all_products_list/select", params={"productId": "p4"}).json()["success"]
    assert sink.last("select_item")["items"][0]["index"] == 4


def test_promotion_click_without_body(client, sink):
    assert client.post("/api/promotions/click").status_code == 200
    assert sink.last("view_promotion")["promotion_id"] == "home_banner_01"


def test_checkout_flow(client, sink):
    client.post("/api/cart/add", json={"productId": "p2"})
    client.post("/api/checkout/begin")
    client.post("/api/checkout/shipping")
    client.post("/api/checkout/payment", json={"paymentType": "card"})
    result = client.post("/api/checkout/purchase").json()

    assert sink.names()[-4:] == ["begin_checkout", "add_shipping_info", "add_payment_info", "purchase"]
    assert client.get("/api/cart").json()["isEmpty"]

    page = client.get("/pages/page-confirmation", params={"tid": result["transaction_id"]}).json()
    assert page["transaction_id"] == result["transaction_id"]


def test_page_view(client, sink):
    response = client.get("/pages/page-home")

    assert response.status_code == 200
    assert len(response.json()["products"]) == 4
    assert sink.names() == ["view_item_list"]


def test_unknown_page(client):
    assert client.get("/pages/page-nope").status_code == 404


def test_handlers_run_off_the_event_loop(storefront):
    """Test storefront work (and its analytics sink) runs in the threadpool"""
    seen = []

    def loop_checking_sink(event_name, payload):
        try:
            asyncio.get_running_loop()
            seen.append("loop")
        except RuntimeError:
            seen.append("thread")

    storefront.pipeline.register_sink(loop_checking_sink)
    app = FastAPI()
    register_api_routes(app)
    app.dependency_overrides[get_storefront] = lambda: storefront
    client = TestClient(app)

    client.get("/pages/page-home")
    client.post("/api/cart/add", json={"productId": "p2"})

    assert seen == ["thread", "thread"]
