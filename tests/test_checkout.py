import importlib
from decimal import Decimal

import pytest
from django.db import DatabaseError

from coupons.models import GiftCoupon
from loyalty.models import LoyaltyPointsLedger, LoyaltyProfile
from orders.cart import CART_SESSION_KEY, SessionCart
from orders.exceptions import CheckoutPersistenceError, CheckoutValidationError, MenuItemNotFound
from orders.models import Order, OrderItem, OrderTracking
from orders.services import build_checkout_preview, checkout
from tests.factories import GiftCouponFactory, MenuItemFactory, OrderFactory


def _cart(*items_with_qty):
    cart = SessionCart({})
    for item, qty in items_with_qty:
        cart.add(item.pk, qty, restaurant_id=item.restaurant_id)
    return cart


@pytest.mark.django_db
def test_empty_cart_is_rejected(user):
    with pytest.raises(CheckoutValidationError) as exc:
        checkout(user, SessionCart({}))
    assert exc.value.user_message == "Cart empty!"
    assert not Order.objects.exists()


@pytest.mark.django_db
def test_subtotal_below_minimum_is_rejected_without_writes(user):
    gift = GiftCouponFactory(user=user)
    cart = _cart((MenuItemFactory(price=Decimal("99.99")), 1))

    with pytest.raises(CheckoutValidationError) as exc:
        checkout(user, cart)

    assert exc.value.user_message == "Minimum order amount should be ₹100 to place an order."
    assert exc.value.status_code == 400
    assert not Order.objects.exists()
    assert len(cart) == 1
    gift.refresh_from_db()
    assert not gift.is_used


@pytest.mark.django_db
def test_first_order_gets_auto_first10(user):
    item = MenuItemFactory(price=Decimal("150.00"))
    cart = _cart((item, 1))

    result = checkout(user, cart)

    receipt = result.receipt
    assert not result.deferred
    assert receipt.subtotal == Decimal("150.00")
    assert receipt.discount_total == Decimal("15.00")
    assert receipt.final_amount == Decimal("135.00")
    assert receipt.points_earned == 135
    assert receipt.coupon_label == "FIRST10 (Auto Applied)"
    assert receipt.payment_method == "COD"

    order = Order.objects.get(pk=result.order_id)
    assert order.restaurant_id == item.restaurant_id
    assert order.total_amount == Decimal("135.00")
    assert order.tracking.status == OrderTracking.STATUS_PLACED
    line = order.items.get()
    assert line.menu_item_id == item.pk
    assert line.price_each == Decimal("150.00")

    assert LoyaltyProfile.objects.get(user=user).points == 135
    assert cart.is_empty


@pytest.mark.django_db
def test_order_keeps_captured_price_after_menu_change(user):
    item = MenuItemFactory(price=Decimal("120.00"))
    result = checkout(user, _cart((item, 1)))

    item.price = Decimal("999.00")
    item.save()

    assert OrderItem.objects.get(order_id=result.order_id).price_each == Decimal("120.00")


@pytest.mark.django_db
def test_save5_on_repeat_order(user):
    OrderFactory(user=user)
    cart = _cart((MenuItemFactory(price=Decimal("100.00")), 2))

    receipt = checkout(user, cart, coupon_code="save5", payment_method="card").receipt

    assert receipt.coupon_label == "SAVE5"
    assert receipt.discount_total == Decimal("10.00")
    assert receipt.final_amount == Decimal("190.00")
    assert receipt.payment_method == "CARD"


@pytest.mark.django_db
def test_first10_code_ignored_on_repeat_order(user):
    OrderFactory(user=user)
    cart = _cart((MenuItemFactory(price=Decimal("200.00")), 1))

    receipt = checkout(user, cart, coupon_code="FIRST10").receipt

    assert receipt.coupon_label is None
    assert receipt.discount_total == Decimal("0.00")
    assert receipt.final_amount == Decimal("200.00")


@pytest.mark.django_db
def test_loyalty_bonus_is_spent_and_points_burned(user):
    OrderFactory(user=user)
    LoyaltyProfile.objects.filter(user=user).update(points=1200, bonus_eligible=True)
    cart = _cart((MenuItemFactory(price=Decimal("250.00")), 2))

    receipt = checkout(user, cart).receipt

    assert receipt.discount_total == Decimal("100.00")
    assert receipt.final_amount == Decimal("400.00")
    assert receipt.points_earned == 400
    profile = LoyaltyProfile.objects.get(user=user)
    assert profile.points == 600
    assert profile.bonus_used
    assert LoyaltyPointsLedger.objects.filter(profile=profile, type=LoyaltyPointsLedger.TYPE_BURN, delta=-1000).exists()


@pytest.mark.django_db
def test_gift_coupon_is_applied_and_consumed(user):
    OrderFactory(user=user)
    gift = GiftCouponFactory(user=user, discount_amount=Decimal("50.00"))
    cart = _cart((MenuItemFactory(price=Decimal("200.00")), 1))

    receipt = checkout(user, cart).receipt

    assert receipt.gift_discount == Decimal("50.00")
    assert receipt.final_amount == Decimal("150.00")
    gift.refresh_from_db()
    assert gift.is_used


@pytest.mark.django_db
def test_stacked_discounts_clamp_at_zero(user):
    OrderFactory(user=user)
    LoyaltyProfile.objects.filter(user=user).update(points=1000, bonus_eligible=True)
    GiftCouponFactory(user=user, code="GIFT100", discount_amount=Decimal("100.00"))
    cart = _cart((MenuItemFactory(price=Decimal("150.00")), 1))

    receipt = checkout(user, cart, coupon_code="SAVE5").receipt

    assert receipt.final_amount == Decimal("0.00")
    assert receipt.points_earned == 0
    assert Order.objects.get(pk=receipt.order_id).total_amount == Decimal("0.00")


@pytest.mark.django_db
def test_qr_payment_defers_without_side_effects(user):
    gift = GiftCouponFactory(user=user)
    cart = _cart((MenuItemFactory(price=Decimal("300.00")), 1))
    before = list(cart.session[CART_SESSION_KEY])

    result = checkout(user, cart, payment_method=" qr ")

    assert result.deferred
    assert result.receipt is None
    assert result.order_id is None
    assert not Order.objects.exists()
    assert cart.session[CART_SESSION_KEY] == before
    gift.refresh_from_db()
    assert not gift.is_used


@pytest.mark.django_db
def test_unknown_payment_method_is_rejected(user):
    cart = _cart((MenuItemFactory(price=Decimal("300.00")), 1))
    with pytest.raises(CheckoutValidationError):
        checkout(user, cart, payment_method="BITCOIN")
    assert not Order.objects.exists()


@pytest.mark.django_db
def test_missing_menu_item_prices_at_zero(user, caplog):
    item = MenuItemFactory(price=Decimal("150.00"))
    cart = _cart((item, 1))
    cart.add(987654, 3)

    receipt = checkout(user, cart).receipt

    assert receipt.subtotal == Decimal("150.00")
    unknown = OrderItem.objects.get(order_id=receipt.order_id, menu_item__isnull=True)
    assert unknown.item_name == "Unknown"
    assert unknown.price_each == Decimal("0.00")
    assert unknown.quantity == 3
    assert "no longer exists" in caplog.text


@pytest.mark.django_db
def test_missing_menu_item_fails_in_strict_mode(user, settings):
    settings.CHECKOUT_STRICT_CATALOG = True
    cart = _cart((MenuItemFactory(price=Decimal("150.00")), 1))
    cart.add(987654, 1)

    with pytest.raises(MenuItemNotFound) as exc:
        checkout(user, cart)

    assert exc.value.item_id == 987654
    assert not Order.objects.exists()


@pytest.mark.django_db
def test_minimum_amount_follows_settings(user, settings):
    settings.CHECKOUT_MIN_ORDER_AMOUNT = "250"
    cart = _cart((MenuItemFactory(price=Decimal("200.00")), 1))
    with pytest.raises(CheckoutValidationError) as exc:
        checkout(user, cart)
    assert "₹250" in exc.value.user_message


@pytest.mark.django_db
def test_database_failure_rolls_back_everything(user, monkeypatch):
    gift = GiftCouponFactory(user=user)
    cart = _cart((MenuItemFactory(price=Decimal("300.00")), 1))

    def boom(*args, **kwargs):
        raise DatabaseError("disk full")

    composer = importlib.import_module("orders.services.checkout")
    monkeypatch.setattr(composer, "apply_order_rewards", boom)

    with pytest.raises(CheckoutPersistenceError) as exc:
        checkout(user, cart)

    assert exc.value.user_message == "Checkout failed!"
    assert exc.value.status_code == 500
    assert not Order.objects.exists()
    assert not OrderTracking.objects.exists()
    gift.refresh_from_db()
    assert not gift.is_used
    assert len(cart) == 1
    assert LoyaltyProfile.objects.get(user=user).points == 0


@pytest.mark.django_db
def test_second_checkout_is_not_a_first_order(user):
    item = MenuItemFactory(price=Decimal("200.00"))
    first = checkout(user, _cart((item, 1))).receipt
    second = checkout(user, _cart((item, 1))).receipt

    assert first.discount_total == Decimal("20.00")
    assert second.discount_total == Decimal("0.00")
    assert LoyaltyProfile.objects.get(user=user).points == 180 + 200


@pytest.mark.django_db
def test_preview_is_read_only(user):
    GiftCouponFactory(user=user)
    cart = _cart((MenuItemFactory(price=Decimal("80.00")), 1))

    preview = build_checkout_preview(user, cart)

    assert preview.subtotal == Decimal("80.00")
    assert preview.is_first_order
    assert preview.first_order_discount == Decimal("8.00")
    assert preview.total == Decimal("72.00")
    assert not preview.meets_minimum
    assert not Order.objects.exists()
    assert GiftCoupon.objects.filter(user=user, is_used=False).count() == 1
