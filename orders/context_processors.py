from __future__ import annotations

from .cart import SessionCart


def cart_summary(request):
    session = getattr(request, "session", None)
    if session is None:
        return {"cart_count": 0}
    return {"cart_count": SessionCart(session).item_count}
