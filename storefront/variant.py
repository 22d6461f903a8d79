# storefront/variant.py
import json
from collections.abc import Iterator, Mapping

from .catalog import Product


class Variant(Mapping):
    """
    Chosen option values of a cart line (e.g. {"Size": "M", "Color": "Navy"}).

    Iteration and ``label`` keep the order the options were selected in;
    equality and hashing use the key-sorted JSON form, so two variants with the
    same choices are the same variant whatever order they were built in.
    """

    __slots__ = ("_pairs", "_canonical")

    def __init__(self, choices: Mapping[str, str] | None = None):
        pairs = tuple((str(k), str(v)) for k, v in (choices or {}).items())
        self._pairs = pairs
        self._canonical = json.dumps(dict(pairs), sort_keys=True, ensure_ascii=False)

    @classmethod
    def from_mapping(cls, choices: "Mapping[str, str] | Variant | None") -> "Variant":
        if isinstance(choices, Variant):
            return choices
        return cls(choices)

    def __getitem__(self, key: str) -> str:
        for k, v in self._pairs:
            if k == key:
                return v
        raise KeyError(key)

    def __iter__(self) -> Iterator[str]:
        return (k for k, _ in self._pairs)

    def __len__(self) -> int:
        return len(self._pairs)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Variant):
            return self._canonical == other._canonical
        if isinstance(other, Mapping):
            return self == Variant(other)
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._canonical)

    def __repr__(self) -> str:
        return f"Variant({dict(self._pairs)!r})"

    @property
    def canonical(self) -> str:
        return self._canonical

    @property
    def label(self) -> str:
        """Selected values joined with "/" (reported as ``item_variant``)."""
        return "/".join(v for _, v in self._pairs)

    def to_dict(self) -> dict[str, str]:
        return dict(self._pairs)


def select_options(product: Product, chosen: Mapping[str, str] | None = None) -> Variant:
    """
    Build the variant a detail page submits for ``product``.

    Options left unchosen fall back to their first allowed value, like an
    untouched select box. Values the product does not offer are rejected.
    """
    chosen = chosen or {}
    unknown = set(chosen) - set(product.options)
    if unknown:
        raise ValueError(f"{product.id} has no option(s) {sorted(unknown)}")

    selected = {}
    for label, allowed in product.options.items():
        if not allowed:
            continue
        value = chosen.get(label, allowed[0])
        if value not in allowed:
            raise ValueError(f"{value!r} is not a valid {label} for {product.id}")
        selected[label] = value
    return Variant(selected)
