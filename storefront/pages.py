"""
Page controllers.

A ``Storefront`` holds the collaborators of one page load: the catalog, the
cart store and the event pipeline. Each ``load_*`` method returns the data a
template would render and fires the analytics events that page emits. The
other public methods handle user interaction on that page.
"""
from collections.abc import Callable, Mapping

from . import events
from .analytics import EventName, EventPipeline
from .cart import CartStore, build_cart_summary, format_price
from .catalog import CatalogProvider, Product
from .checkout import checkout_totals, confirmation_url, new_transaction_id
from .config import HOME_RECOMMENDATION_COUNT
from .logging import get_logger
from .variant import select_options

logger = get_logger(__name__)

HOME_LIST = ("home_recommendations", "홈 추천 상품")
ALL_PRODUCTS_LIST = ("all_products_list", "전체 상품 목록")

PAGE_HOME = "page-home"
PAGE_PRODUCTS = "page-products"
PAGE_PRODUCT_DETAIL = "page-product-detail"
PAGE_CART = "page-cart"
PAGE_CHECKOUT = "page-checkout"
PAGE_CONFIRMATION = "page-confirmation"


def product_card(product: Product) -> dict:
    return {
        "id": product.id,
        "name": product.name,
        "image": product.image,
        "price": product.price,
        "priceFormatted": format_price(product.price),
        "href": f"product-detail.html?id={product.id}",
    }


class Storefront:
    def __init__(self, catalog: CatalogProvider, cart_store: CartStore, pipeline: EventPipeline):
        self.catalog = catalog
        self.cart_store = cart_store
        self.pipeline = pipeline
        # list id -> (list name, products in the order they were last rendered)
        self._rendered: dict[str, tuple[str, list[Product]]] = {}

    # =====================================================
    # Product lists
    # =====================================================

    def _render_list(self, products: list[Product], list_id: str, list_name: str) -> dict:
        self._rendered[list_id] = (list_name, list(products))
        self.pipeline.fire_event(EventName.VIEW_ITEM_LIST, events.view_item_list(products, list_id, list_name))
        return {
            "item_list_id": list_id,
            "item_list_name": list_name,
            "products": [product_card(p) for p in products],
        }

    def load_home_page(self) -> dict:
        list_id, list_name = HOME_LIST
        view = self._render_list(self.catalog.products[:HOME_RECOMMENDATION_COUNT], list_id, list_name)
        view["page"] = PAGE_HOME
        return view

    def load_products_page(self) -> dict:
        list_id, list_name = ALL_PRODUCTS_LIST
        view = self._render_list(self.catalog.products, list_id, list_name)
        view["page"] = PAGE_PRODUCTS
        return view

    def _known_list(self, list_id: str) -> tuple[str, list[Product]] | None:
        # a list rendered by an earlier page load of this catalog
        if list_id == HOME_LIST[0]:
            return HOME_LIST[1], self.catalog.products[:HOME_RECOMMENDATION_COUNT]
        if list_id == ALL_PRODUCTS_LIST[0]:
            return ALL_PRODUCTS_LIST[1], list(self.catalog.products)
        return None

    def select_product(self, list_id: str, product_id: str) -> bool:
        """Product card clicked in a rendered list. Returns False if it was not rendered there."""
        rendered = self._rendered.get(list_id) or self._known_list(list_id)
        if rendered is None:
            logger.warning("select_item on unknown list %s", list_id)
            return False

        list_name, products = rendered
        try:
            payload = events.select_item(products, product_id, list_id, list_name)
        except ValueError as e:
            logger.warning("Ignoring product selection: %s", e)
            return False
        self.pipeline.fire_event(EventName.SELECT_ITEM, payload)
        return True

    def click_promotion(self, metadata: Mapping[str, str] | None = None) -> None:
        metadata = metadata or {}
        self.pipeline.fire_event(
            EventName.VIEW_PROMOTION,
            events.view_promotion(metadata.get("promotion_id"), metadata.get("promotion_name")),
        )
        logger.info("Promotion banner click recorded")

    # =====================================================
    # Product detail
    # =====================================================

    def load_product_detail_page(self, product_id: str | None) -> dict:
        product = self.catalog.find(product_id)
        if product is None:
            logger.info("Product %r not found", product_id)
            return {"page": PAGE_PRODUCT_DETAIL, "found": False, "message": "Product not found"}

        self.pipeline.fire_event(EventName.VIEW_ITEM, events.view_item(product))
        return {
            "page": PAGE_PRODUCT_DETAIL,
            "found": True,
            "product": product.to_dict(),
            "priceFormatted": format_price(product.price),
        }

    def add_to_cart(self, product_id: str, options: Mapping[str, str] | None = None, quantity: int = 1) -> dict:
        product = self.catalog.find(product_id)
        if product is None:
            return {"success": False, "message": "Product not found"}

        try:
            variant = select_options(product, options)
        except ValueError as e:
            return {"success": False, "message": str(e)}

        self.cart_store.add_item(product.id, product.name, product.price, quantity, variant)
        logger.info("%s added to cart", product.name)

        self.pipeline.fire_event(EventName.ADD_TO_CART, events.add_to_cart(product, variant, quantity))
        return {
            "success": True,
            "message": f"{product.name} added to cart",
            "cart": build_cart_summary(self.cart_store.get_cart()),
        }

    # =====================================================
    # Cart
    # =====================================================

    def load_cart_page(self) -> dict:
        cart = self.cart_store.get_cart()
        if not cart:
            return {"page": PAGE_CART, "isEmpty": True, "message": "Your cart is empty"}

        lines = []
        for line in cart:
            product = self.catalog.find(line.product_id)
            lines.append({
                "name": line.name,
                "image": product.image if product else None,
                "variant": line.variant.label,
                "quantity": line.quantity,
                "totalFormatted": format_price(line.line_total),
            })

        self.pipeline.fire_event(EventName.VIEW_CART, events.view_cart(cart, self.catalog))
        return {
            "page": PAGE_CART,
            "isEmpty": False,
            "lines": lines,
            "cart": build_cart_summary(cart),
            "checkoutHref": "checkout.html",
        }

    def begin_checkout(self) -> None:
        cart = self.cart_store.get_cart()
        self.pipeline.fire_event(EventName.BEGIN_CHECKOUT, events.begin_checkout(cart, self.catalog))

    # =====================================================
    # Checkout
    # =====================================================

    def load_checkout_page(self) -> dict:
        totals = checkout_totals(self.cart_store.get_cart())
        return {
            "page": PAGE_CHECKOUT,
            "subtotal": totals.subtotal,
            "shipping": totals.shipping,
            "grandTotal": totals.grand_total,
            "subtotalFormatted": format_price(totals.subtotal),
            "shippingFormatted": format_price(totals.shipping),
            "grandTotalFormatted": format_price(totals.grand_total),
        }

    def submit_shipping(self) -> None:
        cart = self.cart_store.get_cart()
        logger.info("Shipping information saved")
        self.pipeline.fire_event(EventName.ADD_SHIPPING_INFO, events.add_shipping_info(cart, self.catalog))

    def submit_payment(self, payment_type: str) -> None:
        cart = self.cart_store.get_cart()
        logger.info("Payment method saved")
        self.pipeline.fire_event(
            EventName.ADD_PAYMENT_INFO, events.add_payment_info(cart, self.catalog, payment_type)
        )

    def confirm_purchase(self) -> dict:
        cart = self.cart_store.get_cart()
        transaction_id = new_transaction_id()

        self.pipeline.fire_event(EventName.PURCHASE, events.purchase(cart, self.catalog, transaction_id))
        self.cart_store.clear_cart()

        return {
            "success": True,
            "transaction_id": transaction_id,
            "redirect": confirmation_url(transaction_id),
        }

    # =====================================================
    # Confirmation
    # =====================================================

    def load_confirmation_page(self, transaction_id: str | None) -> dict:
        return {"page": PAGE_CONFIRMATION, "transaction_id": transaction_id}

    # =====================================================
    # Page dispatch
    # =====================================================

    def dispatch(self, page_id: str, query: Mapping[str, str] | None = None) -> dict | None:
        """Run the view for ``page_id``. Unknown page ids render nothing."""
        query = query or {}
        cart_count = self.cart_store.refresh_count()

        if page_id == PAGE_CONFIRMATION:
            return {**self.load_confirmation_page(query.get("tid")), "cartCount": cart_count}

        views: dict[str, Callable[[], dict]] = {
            PAGE_HOME: self.load_home_page,
            PAGE_PRODUCTS: self.load_products_page,
            PAGE_PRODUCT_DETAIL: lambda: self.load_product_detail_page(query.get("id")),
            PAGE_CART: self.load_cart_page,
            PAGE_CHECKOUT: self.load_checkout_page,
        }
        view = views.get(page_id)
        if view is None:
            logger.info("No controller for page %r", page_id)
            return None

        if not self.catalog.available:
            return {"page": page_id, "catalogAvailable": False, "cartCount": cart_count}
        return {**view(), "cartCount": cart_count}
