# orders/pricing.py
"""
Discount stacking for checkout.

Each contributor yields one ``DiscountLine``; lines are applied in
``PIPELINE_ORDER`` and clamped once against the subtotal.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Iterable, List, Optional, Tuple

from coupons.services import compute_discount
from core.money import ZERO, q2
from loyalty.services import bonus_discount_for, earned_points

SOURCE_COUPON = "coupon"
SOURCE_BONUS = "bonus"
SOURCE_GIFT = "gift"

PIPELINE_ORDER: Tuple[str, ...] = (SOURCE_COUPON, SOURCE_BONUS, SOURCE_GIFT)


@dataclass(frozen=True)
class DiscountLine:
    source: str
    amount: Decimal
    label: Optional[str] = None

    def __post_init__(self):
        amount = q2(self.amount)
        if amount < ZERO:
            raise ValueError(f"Discount amount must be >= 0, got {amount}")
        object.__setattr__(self, "amount", amount)


@dataclass(frozen=True)
class Quote:
    subtotal: Decimal
    lines: Tuple[DiscountLine, ...] = field(default_factory=tuple)
    discount_total: Decimal = ZERO
    final_amount: Decimal = ZERO
    earned_points: int = 0

    def amount_for(self, source: str) -> Decimal:
        return q2(sum((ln.amount for ln in self.lines if ln.source == source), ZERO))

    def label_for(self, source: str) -> Optional[str]:
        for ln in self.lines:
            if ln.source == source and ln.label:
                return ln.label
        return None


def coupon_line(subtotal, coupon_code, is_first_order: bool) -> DiscountLine:
    result = compute_discount(subtotal, coupon_code, is_first_order)
    return DiscountLine(SOURCE_COUPON, result.discount, result.label)


def bonus_line(profile) -> DiscountLine:
    amount = bonus_discount_for(profile)
    return DiscountLine(SOURCE_BONUS, amount, "Loyalty bonus" if amount > ZERO else None)


def gift_line(gift_coupon) -> DiscountLine:
    if gift_coupon is None:
        return DiscountLine(SOURCE_GIFT, ZERO)
    return DiscountLine(SOURCE_GIFT, gift_coupon.discount_amount, gift_coupon.code)


def quote(subtotal, lines: Iterable[DiscountLine]) -> Quote:
    """
    Sum the discount lines and clamp once: ``final = max(0, subtotal - sum)``.
    Points are earned on the final amount.
    """
    subtotal = q2(subtotal)
    rank = {source: i for i, source in enumerate(PIPELINE_ORDER)}
    ordered: List[DiscountLine] = sorted(lines, key=lambda ln: rank.get(ln.source, len(rank)))
    discount_total = q2(sum((ln.amount for ln in ordered), ZERO))
    final = q2(max(ZERO, subtotal - discount_total))
    return Quote(
        subtotal=subtotal,
        lines=tuple(ordered),
        discount_total=discount_total,
        final_amount=final,
        earned_points=earned_points(final),
    )
