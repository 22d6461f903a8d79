# storefront/checkout.py
import threading
import time
from collections.abc import Iterable
from dataclasses import dataclass
from urllib.parse import urlencode

from .cart import CartLineItem, subtotal
from .config import SHIPPING_COST


@dataclass(frozen=True)
class CheckoutTotals:
    subtotal: int
    shipping: int
    grand_total: int


def checkout_totals(cart: Iterable[CartLineItem], shipping: int = SHIPPING_COST) -> CheckoutTotals:
    amount = subtotal(cart)
    return CheckoutTotals(subtotal=amount, shipping=shipping, grand_total=amount + shipping)


_last_stamp = 0
_stamp_lock = threading.Lock()


def new_transaction_id() -> str:
    """Timestamp id ("T-<epoch ms>"), bumped so no two calls share a value."""
    global _last_stamp
    with _stamp_lock:
        stamp = max(int(time.time() * 1000), _last_stamp + 1)
        _last_stamp = stamp
    return f"T-{stamp}"


def confirmation_url(transaction_id: str) -> str:
    return f"confirmation.html?{urlencode({'tid': transaction_id})}"
