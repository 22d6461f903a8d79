from fastapi import APIRouter, Depends, FastAPI, HTTPException, Query, Request
from pydantic import BaseModel

from .cart import build_cart_summary
from .pages import Storefront
from .runtime import get_storefront


class AddToCartRequest(BaseModel):
    productId: str
    options: dict[str, str] = {}
    quantity: int = 1


class PromotionClick(BaseModel):
    promotion_id: str | None = None
    promotion_name: str | None = None


class PaymentRequest(BaseModel):
    paymentType: str


def register_api_routes(app: FastAPI):

    # plain def handlers: FastAPI runs them in its threadpool, storefront calls block on file and HTTP I/O
    router = APIRouter(prefix="/api", tags=["storefront"])

    # 1) Product search
    @router.get("/products")
    def search_products_endpoint(
        query: str = Query("", description="Search term"),
        storefront: Storefront = Depends(get_storefront),
    ):
        results = [p.to_dict() for p in storefront.catalog.search(query)]
        return {
            "products": results,
            "count": len(results),
            "message": f"{len(results)} products found",
        }

    # 2) Product card clicked in a list
    @router.post("/lists/{list_id}/select")
    def select_item_endpoint(list_id: str, productId: str, storefront: Storefront = Depends(get_storefront)):
        if not storefront.select_product(list_id, productId):
            return {"success": False, "message": "Product is not in this list"}
        return {"success": True}

    # 3) Promotion banner click
    @router.post("/promotions/click")
    def promotion_click_endpoint(
        click: PromotionClick | None = None,
        storefront: Storefront = Depends(get_storefront),
    ):
        storefront.click_promotion(click.model_dump() if click else None)
        return {"success": True}

    # 4) Add to cart
    @router.post("/cart/add")
    def add_to_cart_endpoint(body: AddToCartRequest, storefront: Storefront = Depends(get_storefront)):
        if body.quantity < 1:
            return {"success": False, "message": "Quantity must be at least 1"}
        return storefront.add_to_cart(body.productId, body.options, body.quantity)

    # 5) Cart contents
    @router.get("/cart")
    def get_cart_endpoint(storefront: Storefront = Depends(get_storefront)):
        cart = storefront.cart_store.get_cart()
        summary = build_cart_summary(cart)

        if not cart:
            return {
                "isEmpty": True,
                "message": "Your cart is empty",
                "cart": summary,
            }

        return {
            "isEmpty": False,
            "message": f"{summary['totalQuantity']} items in your cart",
            "cart": summary,
        }

    # 6) Checkout steps
    @router.post("/checkout/begin")
    def begin_checkout_endpoint(storefront: Storefront = Depends(get_storefront)):
        storefront.begin_checkout()
        return {"success": True, "redirect": "checkout.html"}

    @router.post("/checkout/shipping")
    def shipping_endpoint(storefront: Storefront = Depends(get_storefront)):
        storefront.submit_shipping()
        return {"success": True}

    @router.post("/checkout/payment")
    def payment_endpoint(body: PaymentRequest, storefront: Storefront = Depends(get_storefront)):
        storefront.submit_payment(body.paymentType)
        return {"success": True}

    @router.post("/checkout/purchase")
    def purchase_endpoint(storefront: Storefront = Depends(get_storefront)):
        return storefront.confirm_purchase()

    app.include_router(router)

    # Page views, addressed by page identifier
    @app.get("/pages/{page_id}")
    def page_endpoint(page_id: str, request: Request, storefront: Storefront = Depends(get_storefront)):
        view = storefront.dispatch(page_id, dict(request.query_params))
        if view is None:
            raise HTTPException(status_code=404, detail=f"Unknown page {page_id}")
        return view
