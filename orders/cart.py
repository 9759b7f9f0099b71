# orders/cart.py
"""
Session-backed cart.

The cart is a list of ``{"item_id", "quantity", "restaurant_id"}`` dicts
stored under ``session["cart"]``. Order is insertion order; the first line
decides which restaurant an order is placed with. Prices are never stored
here, they are looked up at checkout.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, MutableMapping, Optional

logger = logging.getLogger(__name__)

CART_SESSION_KEY = "cart"


def _coerce_quantity(raw: Any) -> int:
    """Anything that is not a positive integer becomes 1."""
    try:
        qty = int(str(raw).strip())
    except (TypeError, ValueError):
        return 1
    return qty if qty >= 1 else 1


def _coerce_id(raw: Any) -> Optional[int]:
    try:
        value = int(str(raw).strip())
    except (TypeError, ValueError):
        return None
    return value if value > 0 else None


@dataclass(frozen=True)
class CartLine:
    item_id: int
    quantity: int
    restaurant_id: Optional[int] = None

    def as_dict(self) -> Dict[str, Any]:
        return {"item_id": self.item_id, "quantity": self.quantity, "restaurant_id": self.restaurant_id}


class SessionCart:
    """
    Cart operations over a session-like mapping (a Django session, or a plain
    dict in tests). Every mutation marks the session modified so Django
    persists it.
    """

    def __init__(self, session: MutableMapping[str, Any]):
        self.session = session

    @classmethod
    def from_request(cls, request) -> "SessionCart":
        return cls(request.session)

    def _raw(self) -> List[Dict[str, Any]]:
        raw = self.session.get(CART_SESSION_KEY)
        if not isinstance(raw, list):
            return []
        return raw

    def _save(self, lines: List[Dict[str, Any]]) -> None:
        self.session[CART_SESSION_KEY] = lines
        if hasattr(self.session, "modified"):
            self.session.modified = True

    def add(self, item_id, quantity=1, restaurant_id=None) -> CartLine:
        item = _coerce_id(item_id)
        if item is None:
            raise ValueError(f"Invalid menu item id: {item_id!r}")
        qty = _coerce_quantity(quantity)

        lines = [dict(row) for row in self._raw()]
        for row in lines:
            if _coerce_id(row.get("item_id")) == item:
                row["quantity"] = _coerce_quantity(row.get("quantity")) + qty
                self._save(lines)
                return CartLine(item, row["quantity"], _coerce_id(row.get("restaurant_id")))

        line = CartLine(item, qty, _coerce_id(restaurant_id))
        lines.append(line.as_dict())
        self._save(lines)
        return line

    def remove(self, item_id) -> bool:
        item = _coerce_id(item_id)
        lines = self._raw()
        kept = [dict(row) for row in lines if _coerce_id(row.get("item_id")) != item]
        if len(kept) == len(lines):
            return False
        self._save(kept)
        return True

    def list(self) -> List[CartLine]:
        out: List[CartLine] = []
        for row in self._raw():
            item = _coerce_id(row.get("item_id")) if isinstance(row, dict) else None
            if item is None:
                logger.warning("Dropping malformed cart line: %r", row)
                continue
            out.append(CartLine(item, _coerce_quantity(row.get("quantity")), _coerce_id(row.get("restaurant_id"))))
        return out

    def clear(self) -> None:
        self._save([])

    def __len__(self) -> int:
        return len(self.list())

    def __iter__(self):
        return iter(self.list())

    @property
    def is_empty(self) -> bool:
        return len(self) == 0

    @property
    def item_count(self) -> int:
        return sum(line.quantity for line in self.list())

    @property
    def restaurant_id(self) -> Optional[int]:
        lines = self.list()
        return lines[0].restaurant_id if lines else None
