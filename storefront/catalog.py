# storefront/catalog.py
import json
from dataclasses import dataclass, field

from .config import CATALOG_PATH
from .logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class Product:
    id: str
    name: str
    price: int
    category: str | None = None
    image: str = ""
    description: str = ""
    # option label -> allowed values, in display order
    options: dict[str, list[str]] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict) -> "Product":
        price = data["price"]
        if not isinstance(price, int) or isinstance(price, bool) or price < 0:
            raise ValueError(f"invalid price for product {data.get('id')!r}: {price!r}")
        return cls(
            id=str(data["id"]),
            name=data["name"],
            price=price,
            category=data.get("category"),
            image=data.get("image", ""),
            description=data.get("description", ""),
            options={label: list(values) for label, values in (data.get("options") or {}).items()},
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "price": self.price,
            "category": self.category,
            "image": self.image,
            "description": self.description,
            "options": {label: list(values) for label, values in self.options.items()},
        }


class CatalogProvider:
    """Read-only product list loaded from a static JSON file."""

    def __init__(self, path: str = CATALOG_PATH, products: list[Product] | None = None):
        self.path = path
        self.products: list[Product] = list(products or [])
        self.available = products is not None

    def load(self) -> "CatalogProvider":
        """Read the catalog file. A failed load leaves an empty, unavailable catalog."""
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                raw = json.load(f)
            products = [Product.from_dict(entry) for entry in raw]
        except (OSError, ValueError, KeyError, TypeError) as e:
            logger.error("Failed to load product catalog from %s: %s", self.path, e)
            self.products = []
            self.available = False
            return self

        self.products = products
        self.available = True
        logger.debug("Loaded %d products from %s", len(products), self.path)
        return self

    def find(self, product_id: str | None) -> Product | None:
        if not product_id:
            return None
        return next((p for p in self.products if p.id == product_id), None)

    def search(self, query: str | None) -> list[Product]:
        if not query:
            return list(self.products)
        q = query.lower()
        return [p for p in self.products if q in p.name.lower() or q in p.description.lower()]


def load_catalog(path: str = CATALOG_PATH) -> CatalogProvider:
    return CatalogProvider(path).load()
