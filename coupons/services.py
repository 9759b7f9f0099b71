from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional, Sequence, Tuple

from django.conf import settings
from django.utils import timezone

from core.money import ZERO, q2

from .models import GiftCoupon

logger = logging.getLogger(__name__)

FIRST_ORDER_CODE = "FIRST10"
FIRST_ORDER_AUTO_LABEL = "FIRST10 (Auto Applied)"
FIRST_ORDER_RATE = Decimal("0.10")


@dataclass(frozen=True)
class CouponRule:
    code: str
    rate: Decimal
    first_order_only: bool = False

    def matches(self, code: str, is_first_order: bool) -> bool:
        if code != self.code:
            return False
        return is_first_order or not self.first_order_only


# Evaluated top to bottom, first match wins
COUPON_RULES: Tuple[CouponRule, ...] = (
    CouponRule(code="SAVE5", rate=Decimal("0.05")),
    CouponRule(code=FIRST_ORDER_CODE, rate=FIRST_ORDER_RATE, first_order_only=True),
)


@dataclass(frozen=True)
class CouponDiscount:
    discount: Decimal
    label: Optional[str] = None

    @property
    def applied(self) -> bool:
        return self.label is not None


def normalize_code(code) -> str:
    if code is None:
        return ""
    return str(code).strip().upper()


def compute_discount(subtotal, coupon_code, is_first_order: bool) -> CouponDiscount:
    """
    Discount for a typed coupon code.

    A code that matches no rule (or FIRST10 on a repeat order) applies nothing,
    except that a first order then gets FIRST10 automatically. The result is
    clamped to the subtotal and rounded half up to 2 dp.
    """
    subtotal = q2(subtotal)
    code = normalize_code(coupon_code)

    rate = None
    label = None
    for rule in COUPON_RULES:
        if rule.matches(code, is_first_order):
            rate, label = rule.rate, rule.code
            break

    if label is None and is_first_order:
        rate, label = FIRST_ORDER_RATE, FIRST_ORDER_AUTO_LABEL

    if label is None:
        return CouponDiscount(discount=ZERO)

    discount = min(subtotal * rate, subtotal)
    return CouponDiscount(discount=q2(max(discount, ZERO)), label=label)


# -----------------------------------------------------------------------------
# Gift coupons
# -----------------------------------------------------------------------------

def unused_gift_coupons(user):
    """Unused coupons, oldest first; this is the consumption order."""
    return GiftCoupon.objects.filter(user=user, is_used=False).order_by("created_at", "id")


def consume_gift_coupon(user) -> Optional[GiftCoupon]:
    """
    Mark the oldest unused gift coupon of ``user`` as used and return it.

    Each attempt is a single conditional UPDATE on ``is_used=False``, so two
    concurrent callers can never both win the same coupon. A caller that loses
    the race moves on to the next candidate. Call inside the checkout
    transaction so a failed checkout releases the coupon again.
    """
    for candidate_id in unused_gift_coupons(user).values_list("id", flat=True):
        now = timezone.now()
        won = GiftCoupon.objects.filter(pk=candidate_id, is_used=False).update(is_used=True, used_at=now)
        if won == 1:
            return GiftCoupon.objects.get(pk=candidate_id)
        logger.warning("Gift coupon %s already consumed by a concurrent checkout; trying next", candidate_id)
    return None


def gift_coupon_rewards() -> Sequence[Tuple[str, Decimal]]:
    raw = getattr(settings, "GIFT_COUPON_REWARDS", None) or [("GIFT50", "50"), ("GIFT100", "100"), ("SAVE5", "0")]
    return [(str(code), q2(amount)) for code, amount in raw]


def scratch_gift_coupon(user, rng: Optional[random.Random] = None) -> GiftCoupon:
    """Draw a random reward and store it as an already scratched, unused coupon."""
    chooser = rng or random
    code, amount = chooser.choice(list(gift_coupon_rewards()))
    coupon = GiftCoupon.objects.create(
        user=user,
        code=code,
        discount_amount=amount,
        is_scratched=True,
    )
    logger.info("User %s scratched gift coupon %s (%s)", user.pk, code, amount)
    return coupon
