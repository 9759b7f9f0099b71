import random
from datetime import timedelta
from decimal import Decimal

import pytest
from django.utils import timezone

from coupons import services as coupon_services
from coupons.models import GiftCoupon
from coupons.services import consume_gift_coupon, gift_coupon_rewards, scratch_gift_coupon
from tests.factories import GiftCouponFactory


@pytest.mark.django_db
def test_consume_takes_oldest_unused_coupon_first(user):
    now = timezone.now()
    newer = GiftCouponFactory(user=user, code="GIFT100", discount_amount=Decimal("100"), created_at=now)
    older = GiftCouponFactory(user=user, code="GIFT50", created_at=now - timedelta(days=1))

    first = consume_gift_coupon(user)
    second = consume_gift_coupon(user)

    assert first.pk == older.pk
    assert second.pk == newer.pk
    assert consume_gift_coupon(user) is None
    assert not GiftCoupon.objects.filter(user=user, is_used=False).exists()
    assert first.used_at is not None


@pytest.mark.django_db
def test_other_users_coupons_are_never_consumed(user):
    GiftCouponFactory()
    assert consume_gift_coupon(user) is None


@pytest.mark.django_db
def test_conditional_update_lets_exactly_one_consumer_win(user):
    coupon = GiftCouponFactory(user=user)

    claims = [
        GiftCoupon.objects.filter(pk=coupon.pk, is_used=False).update(is_used=True)
        for _ in range(2)
    ]
    assert claims == [1, 0]


@pytest.mark.django_db
def test_losing_the_race_moves_on_to_next_coupon(user, monkeypatch, caplog):
    now = timezone.now()
    stale = GiftCouponFactory(user=user, created_at=now - timedelta(days=1))
    spare = GiftCouponFactory(user=user, code="GIFT100", created_at=now)
    # Another checkout claimed ``stale`` after our candidate list was read
    monkeypatch.setattr(
        coupon_services,
        "unused_gift_coupons",
        lambda u: GiftCoupon.objects.filter(user=u).order_by("created_at", "id"),
    )
    GiftCoupon.objects.filter(pk=stale.pk).update(is_used=True)

    won = consume_gift_coupon(user)

    assert won.pk == spare.pk
    assert "already consumed" in caplog.text


@pytest.mark.django_db
def test_losing_the_race_on_the_only_coupon_returns_none(user, monkeypatch):
    coupon = GiftCouponFactory(user=user)
    monkeypatch.setattr(
        coupon_services,
        "unused_gift_coupons",
        lambda u: GiftCoupon.objects.filter(user=u).order_by("created_at", "id"),
    )
    GiftCoupon.objects.filter(pk=coupon.pk).update(is_used=True)

    assert consume_gift_coupon(user) is None


@pytest.mark.django_db
def test_scratch_creates_unused_coupon_from_reward_table(user):
    coupon = scratch_gift_coupon(user, rng=random.Random(3))

    rewards = dict(gift_coupon_rewards())
    assert coupon.code in rewards
    assert coupon.discount_amount == rewards[coupon.code]
    assert coupon.is_scratched
    assert not coupon.is_used


@pytest.mark.django_db
def test_scratch_endpoint_returns_code_and_discount(auth_client, user):
    resp = auth_client.post("/gift-coupons/scratch/")
    assert resp.status_code == 200
    data = resp.json()
    assert set(data) == {"code", "discount"}
    assert GiftCoupon.objects.filter(user=user, code=data["code"]).exists()


@pytest.mark.django_db
def test_gift_coupons_page_lists_users_coupons(auth_client, user):
    GiftCouponFactory(user=user, code="GIFT100", discount_amount=Decimal("100"))
    resp = auth_client.get("/gift-coupons/")
    assert resp.status_code == 200
    assert b"GIFT100" in resp.content
