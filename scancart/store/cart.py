"""
In-memory shared cart.

One CartStore lives for the whole process. Lines are kept in insertion order,
one per tag; every public operation runs under a single lock and hands back an
immutable snapshot.
"""
from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, replace
from decimal import Decimal
from typing import Any, Callable, Dict, Optional, Tuple

from scancart.errors import UnknownTag
from scancart.services.catalog import Catalog

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CartLine:
    tag: str
    name: str
    price: Decimal
    quantity: int

    @property
    def subtotal(self) -> Decimal:
        return self.price * self.quantity

    def to_dict(self) -> Dict[str, Any]:
        return {
            "tag": self.tag,
            "name": self.name,
            "price": float(self.price),
            "quantity": self.quantity,
        }


Snapshot = Tuple[CartLine, ...]


class CartStore:
    def __init__(self, catalog: Catalog, on_change: Optional[Callable[[], None]] = None) -> None:
        self._catalog = catalog
        self._on_change = on_change
        self._lines: Dict[str, CartLine] = {}  # tag -> line, dict keeps insertion order
        self._lock = threading.Lock()

    def _changed(self) -> None:
        # called outside the lock so a listener may read the cart
        if self._on_change is not None:
            self._on_change()

    def add_by_tag(self, tag: str) -> Snapshot:
        product = self._catalog.get(tag)
        if product is None:
            logger.warning("unknown tag scanned: %r", tag)
            raise UnknownTag(tag)

        with self._lock:
            line = self._lines.get(tag)
            if line is None:
                line = CartLine(tag=tag, name=product.name, price=product.price, quantity=1)
            else:
                line = replace(line, quantity=line.quantity + 1)
            self._lines[tag] = line
            snap = tuple(self._lines.values())

        logger.info("added %s (%s), qty=%d", tag, line.name, line.quantity)
        self._changed()
        return snap

    def remove_one_by_tag(self, tag: str) -> Snapshot:
        with self._lock:
            line = self._lines.get(tag)
            if line is None:
                return tuple(self._lines.values())
            if line.quantity > 1:
                self._lines[tag] = replace(line, quantity=line.quantity - 1)
            else:
                del self._lines[tag]
            snap = tuple(self._lines.values())

        logger.info("removed one %s, qty=%d", tag, line.quantity - 1)
        self._changed()
        return snap

    def clear(self) -> Snapshot:
        with self._lock:
            had_lines = bool(self._lines)
            self._lines.clear()

        if had_lines:
            logger.info("cart cleared")
            self._changed()
        return ()

    def snapshot(self) -> Snapshot:
        with self._lock:
            return tuple(self._lines.values())

    def total_quantity(self) -> int:
        return sum(line.quantity for line in self.snapshot())

    def total_amount(self) -> Decimal:
        return sum((line.subtotal for line in self.snapshot()), Decimal("0"))
