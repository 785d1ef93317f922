from __future__ import annotations

import json
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any, Iterator, Mapping, Optional

from scancart.constants import DEFAULT_CATALOG
from scancart.utils.validators import require_non_negative_number


@dataclass(frozen=True)
class ProductDescriptor:
    name: str
    price: Decimal


class Catalog:
    """Read-only tag -> product lookup, loaded once at startup."""

    def __init__(self, products: Mapping[str, ProductDescriptor]) -> None:
        self._products: dict[str, ProductDescriptor] = dict(products)

    def get(self, tag: str) -> Optional[ProductDescriptor]:
        return self._products.get(tag)

    def __contains__(self, tag: object) -> bool:
        return tag in self._products

    def __len__(self) -> int:
        return len(self._products)

    def __iter__(self) -> Iterator[str]:
        return iter(self._products)


def _descriptor(tag: str, raw: Mapping[str, Any]) -> ProductDescriptor:
    try:
        name = str(raw["name"]).strip()
        price = Decimal(str(raw["price"]))
    except (KeyError, TypeError, InvalidOperation) as e:
        raise ValueError(f"bad catalog entry for {tag!r}: {e}") from e
    if not name:
        raise ValueError(f"bad catalog entry for {tag!r}: empty name")
    require_non_negative_number(price, name=f"price of {tag}")
    return ProductDescriptor(name=name, price=price)


def load_catalog(path: str | None = None) -> Catalog:
    """
    Build the catalog from a JSON file ``{tag: {"name": ..., "price": ...}}``,
    or from DEFAULT_CATALOG when no path is given.
    """
    if path is None:
        raw: Mapping[str, Any] = DEFAULT_CATALOG
    else:
        with Path(path).open("r", encoding="utf-8") as f:
            raw = json.load(f)
        if not isinstance(raw, dict):
            raise ValueError(f"{path}: catalog must be a JSON object")

    return Catalog({str(tag): _descriptor(str(tag), entry) for tag, entry in raw.items()})
