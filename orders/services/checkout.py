# orders/services/checkout.py
"""
Order composition: turns a session cart into a persisted order.

Validation (payment method, empty cart, catalog lookup, minimum amount)
runs before the database transaction. Inside it the user's loyalty profile
is locked, a gift coupon is reserved, discounts are quoted, and the order,
its items, its tracking row and the reward update are written together.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import List, Optional, Sequence, Tuple

from django.conf import settings
from django.db import DatabaseError, transaction

from core.money import ZERO, q2
from coupons.services import compute_discount, consume_gift_coupon
from loyalty.services import apply_order_rewards, get_or_create_profile, lock_profile
from menu.models import MenuItem

from ..cart import CartLine, SessionCart
from ..exceptions import CheckoutPersistenceError, CheckoutValidationError, MenuItemNotFound
from ..models import PAYMENT_COD, Order, OrderItem, OrderTracking
from ..pricing import SOURCE_BONUS, SOURCE_COUPON, SOURCE_GIFT, bonus_line, coupon_line, gift_line, quote

logger = logging.getLogger(__name__)

UNKNOWN_ITEM_NAME = "Unknown"


@dataclass(frozen=True)
class ResolvedLineItem:
    item_id: int
    name: str
    unit_price: Decimal
    quantity: int
    restaurant_id: Optional[int] = None
    in_catalog: bool = True

    @property
    def line_total(self) -> Decimal:
        return q2(self.unit_price * self.quantity)


@dataclass(frozen=True)
class Receipt:
    order_id: int
    items: Tuple[ResolvedLineItem, ...]
    subtotal: Decimal
    coupon_label: Optional[str]
    discount_total: Decimal
    gift_discount: Decimal
    points_earned: int
    final_amount: Decimal
    payment_method: str

    @classmethod
    def from_order(cls, order: Order) -> "Receipt":
        items = tuple(
            ResolvedLineItem(
                item_id=it.menu_item_id or 0,
                name=it.item_name,
                unit_price=q2(it.price_each),
                quantity=it.quantity,
                restaurant_id=order.restaurant_id,
                in_catalog=it.menu_item_id is not None,
            )
            for it in order.items.all()
        )
        return cls(
            order_id=order.pk,
            items=items,
            subtotal=q2(order.subtotal),
            coupon_label=order.coupon_code,
            discount_total=q2(order.discount),
            gift_discount=q2(order.gift_discount),
            points_earned=order.points_earned,
            final_amount=q2(order.total_amount),
            payment_method=order.payment_method,
        )


@dataclass(frozen=True)
class CheckoutResult:
    deferred: bool = False
    receipt: Optional[Receipt] = None

    @property
    def order_id(self) -> Optional[int]:
        return self.receipt.order_id if self.receipt else None


@dataclass(frozen=True)
class CheckoutPreview:
    lines: Tuple[ResolvedLineItem, ...]
    subtotal: Decimal
    is_first_order: bool
    first_order_discount: Decimal
    first_order_label: Optional[str]
    reward_points: int
    bonus_available: bool
    total: Decimal
    minimum_amount: Decimal
    meets_minimum: bool = field(default=True)


# -----------------------------------------------------------------------------
# Settings helpers
# -----------------------------------------------------------------------------

def minimum_order_amount() -> Decimal:
    return q2(getattr(settings, "CHECKOUT_MIN_ORDER_AMOUNT", "100"))


def _method_set(name: str, default: Sequence[str]) -> set:
    return {str(m).strip().upper() for m in (getattr(settings, name, None) or default) if str(m).strip()}


def normalize_payment_method(raw) -> Tuple[str, bool]:
    """Return ``(method, deferred)``; unknown methods are rejected."""
    method = str(raw or "").strip().upper() or PAYMENT_COD
    deferred = _method_set("CHECKOUT_DEFERRED_PAYMENT_METHODS", ["QR"])
    allowed = _method_set("CHECKOUT_PAYMENT_METHODS", ["COD", "CARD", "UPI", "QR"]) | deferred
    if method not in allowed:
        raise CheckoutValidationError(f"Unsupported payment method: {method}")
    return method, method in deferred


# -----------------------------------------------------------------------------
# Line resolution
# -----------------------------------------------------------------------------

def resolve_lines(lines: Sequence[CartLine], strict: Optional[bool] = None) -> List[ResolvedLineItem]:
    """
    Look up the current price of every cart line.

    A vanished menu item prices at 0 under the name "Unknown" unless strict
    catalog mode is on, in which case ``MenuItemNotFound`` is raised.
    """
    if strict is None:
        strict = bool(getattr(settings, "CHECKOUT_STRICT_CATALOG", False))

    catalog = MenuItem.objects.in_bulk([ln.item_id for ln in lines])
    out: List[ResolvedLineItem] = []
    for ln in lines:
        item = catalog.get(ln.item_id)
        if item is None:
            if strict:
                raise MenuItemNotFound(ln.item_id)
            logger.warning("Menu item %s in cart no longer exists; pricing it at 0", ln.item_id)
            out.append(ResolvedLineItem(ln.item_id, UNKNOWN_ITEM_NAME, ZERO, ln.quantity, ln.restaurant_id, in_catalog=False))
            continue
        out.append(
            ResolvedLineItem(
                item_id=item.pk,
                name=item.name,
                unit_price=q2(item.price),
                quantity=ln.quantity,
                restaurant_id=item.restaurant_id,
            )
        )
    return out


def _subtotal(items: Sequence[ResolvedLineItem]) -> Decimal:
    return q2(sum((it.line_total for it in items), ZERO))


def _has_prior_orders(user) -> bool:
    return Order.objects.filter(user=user).exists()


# -----------------------------------------------------------------------------
# Checkout
# -----------------------------------------------------------------------------

def checkout(user, cart: SessionCart, coupon_code=None, payment_method=None) -> CheckoutResult:
    method, deferred = normalize_payment_method(payment_method)
    if deferred:
        # Payment confirmed out of band; nothing is written and the cart stays
        return CheckoutResult(deferred=True)

    lines = cart.list()
    if not lines:
        raise CheckoutValidationError("Cart empty!")

    items = resolve_lines(lines)
    subtotal = _subtotal(items)
    minimum = minimum_order_amount()
    if subtotal < minimum:
        raise CheckoutValidationError(f"Minimum order amount should be ₹{minimum.normalize():f} to place an order.")

    try:
        with transaction.atomic():
            profile = lock_profile(user)
            gift = consume_gift_coupon(user)
            is_first_order = not _has_prior_orders(user)

            q = quote(
                subtotal,
                [
                    coupon_line(subtotal, coupon_code, is_first_order),
                    bonus_line(profile),
                    gift_line(gift),
                ],
            )
            bonus_applied = q.amount_for(SOURCE_BONUS) > ZERO

            order = Order.objects.create(
                user=user,
                restaurant_id=items[0].restaurant_id if items[0].in_catalog else None,
                subtotal=subtotal,
                total_amount=q.final_amount,
                payment_method=method,
                coupon_code=q.label_for(SOURCE_COUPON),
                discount=q2(q.amount_for(SOURCE_COUPON) + q.amount_for(SOURCE_BONUS)),
                gift_discount=q.amount_for(SOURCE_GIFT),
                points_earned=q.earned_points,
            )
            OrderItem.objects.bulk_create(
                [
                    OrderItem(
                        order=order,
                        menu_item_id=it.item_id if it.in_catalog else None,
                        item_name=it.name,
                        quantity=it.quantity,
                        price_each=it.unit_price,
                    )
                    for it in items
                ]
            )
            OrderTracking.objects.create(order=order, status=OrderTracking.STATUS_PLACED)

            apply_order_rewards(
                profile,
                final_amount=q.final_amount,
                bonus_applied=bonus_applied,
                reference=str(order.pk),
            )
    except DatabaseError as exc:
        logger.exception("Checkout failed for user %s", getattr(user, "pk", None))
        raise CheckoutPersistenceError() from exc

    cart.clear()

    receipt = Receipt(
        order_id=order.pk,
        items=tuple(items),
        subtotal=subtotal,
        coupon_label=order.coupon_code,
        discount_total=order.discount,
        gift_discount=order.gift_discount,
        points_earned=order.points_earned,
        final_amount=order.total_amount,
        payment_method=method,
    )
    logger.info(
        "Order %s placed by user %s: subtotal=%s discount=%s gift=%s final=%s points=%s",
        order.pk,
        user.pk,
        subtotal,
        receipt.discount_total,
        receipt.gift_discount,
        receipt.final_amount,
        receipt.points_earned,
    )
    return CheckoutResult(deferred=False, receipt=receipt)


def build_checkout_preview(user, cart: SessionCart) -> CheckoutPreview:
    """
    Read-only numbers for the checkout page: lines at current prices, the
    first-order discount that would be auto-applied, and loyalty status.
    Typed coupon codes, the bonus and gift coupons are settled at checkout.
    """
    items = resolve_lines(cart.list(), strict=False)
    subtotal = _subtotal(items)
    is_first_order = not _has_prior_orders(user)
    auto = compute_discount(subtotal, None, is_first_order)
    profile = get_or_create_profile(user)
    minimum = minimum_order_amount()
    return CheckoutPreview(
        lines=tuple(items),
        subtotal=subtotal,
        is_first_order=is_first_order,
        first_order_discount=auto.discount,
        first_order_label=auto.label,
        reward_points=profile.points,
        bonus_available=profile.bonus_available,
        total=q2(subtotal - auto.discount),
        minimum_amount=minimum,
        meets_minimum=subtotal >= minimum,
    )
