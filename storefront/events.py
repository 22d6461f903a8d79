"""
Commerce event payload builders.

Each builder is a pure function of catalog/cart data and UI context and returns
the payload for exactly one event name. Items always take the shape

    {item_id, item_name, price, item_category, item_variant?, index?, quantity?}

and ``item_category`` is left out when the product can no longer be found in
the catalog.
"""
from collections.abc import Mapping, Sequence

from .cart import CartLineItem, subtotal
from .catalog import CatalogProvider, Product
from .checkout import checkout_totals
from .config import CURRENCY, DEFAULT_PROMOTION_ID, DEFAULT_PROMOTION_NAME, SHIPPING_TIER
from .variant import Variant


def product_item(product: Product, index: int | None = None) -> dict:
    item = {
        "item_id": product.id,
        "item_name": product.name,
        "price": product.price,
        "item_category": product.category,
    }
    if index is not None:
        item["index"] = index
    return item


def cart_item(line: CartLineItem, catalog: CatalogProvider) -> dict:
    item = {
        "item_id": line.product_id,
        "item_name": line.name,
        "price": line.price,
    }
    # the cart does not store category, resolve it again
    product = catalog.find(line.product_id)
    if product is not None:
        item["item_category"] = product.category
    item["item_variant"] = line.variant.label
    item["quantity"] = line.quantity
    return item


def cart_items(cart: Sequence[CartLineItem], catalog: CatalogProvider) -> list[dict]:
    return [cart_item(line, catalog) for line in cart]


def view_item_list(products: Sequence[Product], list_id: str, list_name: str) -> dict:
    return {
        "item_list_id": list_id,
        "item_list_name": list_name,
        "items": [product_item(p, index) for index, p in enumerate(products, start=1)],
    }


def select_item(products: Sequence[Product], product_id: str, list_id: str, list_name: str) -> dict:
    """``index`` is the 1-based position of the product in ``products`` as rendered."""
    for index, product in enumerate(products, start=1):
        if product.id == product_id:
            return {
                "item_list_id": list_id,
                "item_list_name": list_name,
                "items": [product_item(product, index)],
            }
    raise ValueError(f"product {product_id!r} is not in list {list_id!r}")


def view_item(product: Product) -> dict:
    return {
        "currency": CURRENCY,
        "value": product.price,
        "items": [product_item(product)],
    }


def add_to_cart(product: Product, variant: Mapping[str, str] | None, quantity: int = 1) -> dict:
    item = product_item(product)
    item["item_variant"] = Variant.from_mapping(variant).label
    item["quantity"] = quantity
    return {
        "currency": CURRENCY,
        "value": product.price,
        "items": [item],
    }


def view_cart(cart: Sequence[CartLineItem], catalog: CatalogProvider) -> dict:
    return {
        "currency": CURRENCY,
        "value": subtotal(cart),
        "items": cart_items(cart, catalog),
    }


def begin_checkout(cart: Sequence[CartLineItem], catalog: CatalogProvider) -> dict:
    return view_cart(cart, catalog)


def view_promotion(promotion_id: str | None = None, promotion_name: str | None = None) -> dict:
    return {
        "promotion_id": promotion_id or DEFAULT_PROMOTION_ID,
        "promotion_name": promotion_name or DEFAULT_PROMOTION_NAME,
    }


def add_shipping_info(
    cart: Sequence[CartLineItem],
    catalog: CatalogProvider,
    shipping_tier: str = SHIPPING_TIER,
) -> dict:
    return {
        "currency": CURRENCY,
        "value": checkout_totals(cart).grand_total,
        "shipping_tier": shipping_tier,
        "items": cart_items(cart, catalog),
    }


def add_payment_info(cart: Sequence[CartLineItem], catalog: CatalogProvider, payment_type: str) -> dict:
    return {
        "currency": CURRENCY,
        "value": checkout_totals(cart).grand_total,
        "payment_type": payment_type,
        "items": cart_items(cart, catalog),
    }


def purchase(cart: Sequence[CartLineItem], catalog: CatalogProvider, transaction_id: str) -> dict:
    totals = checkout_totals(cart)
    return {
        "transaction_id": transaction_id,
        "currency": CURRENCY,
        "value": totals.grand_total,
        "shipping": totals.shipping,
        "items": cart_items(cart, catalog),
    }
