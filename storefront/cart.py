# storefront/cart.py
import json
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field

from .config import CART_STORAGE_KEY
from .logging import get_logger
from .storage import StorageBackend
from .variant import Variant

logger = get_logger(__name__)

CountListener = Callable[[int], None]


@dataclass
class CartLineItem:
    product_id: str
    name: str
    price: int  # unit price at the time of the first add
    quantity: int
    variant: Variant = field(default_factory=Variant)

    @property
    def key(self) -> tuple[str, Variant]:
        return (self.product_id, self.variant)

    @property
    def line_total(self) -> int:
        return self.price * self.quantity

    def to_dict(self) -> dict:
        return {
            "id": self.product_id,
            "name": self.name,
            "price": self.price,
            "quantity": self.quantity,
            "variant": self.variant.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "CartLineItem":
        quantity = data["quantity"]
        if not isinstance(quantity, int) or isinstance(quantity, bool) or quantity < 1:
            raise ValueError(f"invalid quantity {quantity!r}")
        price = data["price"]
        if not isinstance(price, (int, float)) or isinstance(price, bool):
            raise ValueError(f"invalid price {price!r}")
        variant = data.get("variant") or {}
        if not isinstance(variant, dict):
            raise ValueError(f"invalid variant {variant!r}")
        return cls(
            product_id=str(data["id"]),
            name=str(data["name"]),
            price=price,
            quantity=quantity,
            variant=Variant(variant),
        )


def total_quantity(cart: Iterable[CartLineItem]) -> int:
    return sum(item.quantity for item in cart)


def subtotal(cart: Iterable[CartLineItem]) -> int:
    return sum(item.line_total for item in cart)


def format_price(amount: int) -> str:
    return f"{amount:,}원"


class CartStore:
    """
    The persisted cart: one serialized list under one storage key.

    Every mutation is written through before the call returns, then the
    registered count listeners receive the new total unit count.
    """

    def __init__(self, storage: StorageBackend, key: str = CART_STORAGE_KEY):
        self.storage = storage
        self.key = key
        self._listeners: list[CountListener] = []

    def subscribe(self, listener: CountListener) -> None:
        """Register a cart-count display sink."""
        self._listeners.append(listener)

    def _notify(self, count: int) -> None:
        for listener in self._listeners:
            listener(count)

    def get_cart(self) -> list[CartLineItem]:
        raw = self.storage.get_item(self.key)
        if raw is None:
            return []
        try:
            data = json.loads(raw)
            if not isinstance(data, list):
                raise ValueError("cart is not a list")
            return [CartLineItem.from_dict(entry) for entry in data]
        except (ValueError, KeyError, TypeError) as e:
            logger.warning("Discarding malformed cart under %r: %s", self.key, e)
            return []

    def save_cart(self, cart: list[CartLineItem]) -> None:
        payload = json.dumps([item.to_dict() for item in cart], ensure_ascii=False)
        self.storage.set_item(self.key, payload)
        self._notify(total_quantity(cart))

    def add_item(
        self,
        product_id: str,
        name: str,
        price: int,
        quantity: int = 1,
        variant: Mapping[str, str] | None = None,
    ) -> None:
        if not isinstance(quantity, int) or isinstance(quantity, bool) or quantity < 1:
            raise ValueError(f"quantity must be a positive integer, got {quantity!r}")

        variant = Variant.from_mapping(variant)
        cart = self.get_cart()
        existing = next((item for item in cart if item.key == (product_id, variant)), None)

        if existing:
            # price stays at the first-add value
            existing.quantity += quantity
        else:
            cart.append(CartLineItem(product_id, name, price, quantity, variant))
        self.save_cart(cart)

    def clear_cart(self) -> None:
        self.storage.remove_item(self.key)
        self._notify(0)

    def refresh_count(self) -> int:
        """Push the persisted unit count to every listener (page load)."""
        count = total_quantity(self.get_cart())
        self._notify(count)
        return count


def build_cart_summary(cart: list[CartLineItem]) -> dict:
    items = []
    for item in cart:
        items.append({
            "id": item.product_id,
            "name": item.name,
            "variant": item.variant.label,
            "quantity": item.quantity,
            "unitPrice": item.price,
            "unitPriceFormatted": format_price(item.price),
            "subtotal": item.line_total,
            "subtotalFormatted": format_price(item.line_total),
        })

    total_amount = subtotal(cart)
    return {
        "items": items,
        "totalAmount": total_amount,
        "totalAmountFormatted": format_price(total_amount),
        "totalQuantity": total_quantity(cart),
    }
