from collections.abc import Callable

from fastapi.concurrency import run_in_threadpool
from mcp.server.fastmcp import FastMCP

from .cart import build_cart_summary
from .pages import Storefront
from .runtime import get_storefront


def register_mcp(mcp: FastMCP, storefront_factory: Callable[[], Storefront] = get_storefront):
    """MCP tool registration"""

    # Storefront calls block on file and HTTP I/O, so every tool body runs off the event loop

    def _search_products(query: str) -> dict:
        results = [p.to_dict() for p in storefront_factory().catalog.search(query)]
        return {
            "products": results,
            "count": len(results),
            "message": f"{len(results)} products found",
        }

    def _get_cart() -> dict:
        cart = storefront_factory().cart_store.get_cart()
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

    def _checkout(payment_type: str) -> dict:
        storefront = storefront_factory()
        if not storefront.cart_store.get_cart():
            return {
                "success": False,
                "message": "Cart is empty, nothing to order",
            }

        storefront.begin_checkout()
        storefront.submit_shipping()
        storefront.submit_payment(payment_type)
        return storefront.confirm_purchase()

    @mcp.tool()
    async def search_products(query: str = "") -> dict:
        """Search the product catalog"""
        return await run_in_threadpool(_search_products, query)

    @mcp.tool()
    async def add_to_cart(productId: str, options: dict[str, str] | None = None, quantity: int = 1) -> dict:
        """Add a product to the cart"""
        if quantity < 1:
            return {"success": False, "message": "Quantity must be at least 1"}
        return await run_in_threadpool(lambda: storefront_factory().add_to_cart(productId, options, quantity))

    @mcp.tool()
    async def get_cart() -> dict:
        """Show the cart"""
        return await run_in_threadpool(_get_cart)

    @mcp.tool()
    async def checkout(paymentType: str = "card") -> dict:
        """Place the order: shipping, payment and purchase in one go"""
        return await run_in_threadpool(_checkout, paymentType)
