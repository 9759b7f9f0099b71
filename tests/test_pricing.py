from decimal import Decimal

import pytest

from coupons.services import FIRST_ORDER_AUTO_LABEL, compute_discount, normalize_code
from loyalty.models import LoyaltyProfile
from loyalty.services import earned_points
from orders.pricing import (
    PIPELINE_ORDER,
    SOURCE_BONUS,
    SOURCE_COUPON,
    SOURCE_GIFT,
    DiscountLine,
    bonus_line,
    coupon_line,
    gift_line,
    quote,
)


def test_save5_is_five_percent():
    result = compute_discount(Decimal("200.00"), "SAVE5", is_first_order=False)
    assert result.discount == Decimal("10.00")
    assert result.label == "SAVE5"
    assert result.applied


def test_code_is_trimmed_and_case_insensitive():
    assert normalize_code("  save5 ") == "SAVE5"
    assert compute_discount(Decimal("100"), " save5", False).discount == Decimal("5.00")


def test_first10_only_on_first_order():
    assert compute_discount(Decimal("300"), "FIRST10", is_first_order=True).discount == Decimal("30.00")

    repeat = compute_discount(Decimal("300"), "FIRST10", is_first_order=False)
    assert repeat.discount == Decimal("0")
    assert repeat.label is None
    assert not repeat.applied


def test_first_order_without_code_gets_auto_first10():
    result = compute_discount(Decimal("150"), None, is_first_order=True)
    assert result.discount == Decimal("15.00")
    assert result.label == FIRST_ORDER_AUTO_LABEL


def test_unknown_code_on_first_order_falls_back_to_auto():
    result = compute_discount(Decimal("150"), "BOGUS", is_first_order=True)
    assert result.label == FIRST_ORDER_AUTO_LABEL


def test_explicit_save5_wins_over_auto_first_order():
    result = compute_discount(Decimal("200"), "SAVE5", is_first_order=True)
    assert result.label == "SAVE5"
    assert result.discount == Decimal("10.00")


def test_unknown_code_on_repeat_order_applies_nothing():
    assert compute_discount(Decimal("200"), "WELCOME", is_first_order=False).discount == Decimal("0")


def test_discount_rounds_half_up():
    # 33.33 * 0.05 = 1.6665
    assert compute_discount(Decimal("33.33"), "SAVE5", False).discount == Decimal("1.67")


def test_discount_never_exceeds_subtotal_and_is_non_negative():
    for subtotal in (Decimal("0"), Decimal("0.01"), Decimal("999.99")):
        for code in ("SAVE5", "FIRST10", None):
            d = compute_discount(subtotal, code, True).discount
            assert Decimal("0") <= d <= subtotal


def test_discount_line_rejects_negative_amount():
    with pytest.raises(ValueError):
        DiscountLine(SOURCE_GIFT, Decimal("-1"))


def test_quote_sums_lines_in_pipeline_order():
    q = quote(
        Decimal("500.00"),
        [
            DiscountLine(SOURCE_GIFT, Decimal("50"), "GIFT50"),
            DiscountLine(SOURCE_COUPON, Decimal("25"), "SAVE5"),
            DiscountLine(SOURCE_BONUS, Decimal("100")),
        ],
    )
    assert tuple(ln.source for ln in q.lines) == PIPELINE_ORDER
    assert q.discount_total == Decimal("175.00")
    assert q.final_amount == Decimal("325.00")
    assert q.earned_points == 325
    assert q.label_for(SOURCE_COUPON) == "SAVE5"
    assert q.amount_for(SOURCE_GIFT) == Decimal("50.00")


def test_quote_clamps_final_amount_at_zero():
    q = quote(
        Decimal("150.00"),
        [
            DiscountLine(SOURCE_COUPON, Decimal("15")),
            DiscountLine(SOURCE_BONUS, Decimal("100")),
            DiscountLine(SOURCE_GIFT, Decimal("100")),
        ],
    )
    assert q.final_amount == Decimal("0.00")
    assert q.earned_points == 0


def test_points_are_floor_of_final_amount():
    assert earned_points(Decimal("135.99")) == 135
    assert earned_points(Decimal("0.50")) == 0
    assert earned_points(Decimal("400.00")) == 400


def test_bonus_line_only_when_available():
    eligible = LoyaltyProfile(points=1200, bonus_eligible=True, bonus_used=False)
    spent = LoyaltyProfile(points=1200, bonus_eligible=True, bonus_used=True)
    fresh = LoyaltyProfile(points=50)

    assert bonus_line(eligible).amount == Decimal("100.00")
    assert bonus_line(spent).amount == Decimal("0.00")
    assert bonus_line(fresh).amount == Decimal("0.00")


def test_coupon_and_gift_lines():
    assert coupon_line(Decimal("150"), None, True).label == FIRST_ORDER_AUTO_LABEL
    assert gift_line(None).amount == Decimal("0.00")
