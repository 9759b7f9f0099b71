from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from decimal import Decimal

from django.conf import settings
from django.db import transaction
from django.db.models import F

from core.money import ZERO, q2

from .models import LoyaltyPointsLedger, LoyaltyProfile

logger = logging.getLogger(__name__)


class LoyaltyAdjustmentError(Exception):
    """Raised when a manual adjustment would be invalid."""


def bonus_amount() -> Decimal:
    return q2(getattr(settings, "LOYALTY_BONUS_AMOUNT", "100"))


def bonus_cost() -> int:
    return int(getattr(settings, "LOYALTY_BONUS_COST", 1000))


def bonus_threshold() -> int:
    return int(getattr(settings, "LOYALTY_BONUS_THRESHOLD", 1000))


def earned_points(final_amount) -> int:
    """One point per whole rupee actually paid."""
    return int(math.floor(q2(final_amount)))


def get_or_create_profile(user) -> LoyaltyProfile:
    profile, _ = LoyaltyProfile.objects.get_or_create(user=user)
    return profile


def lock_profile(user) -> LoyaltyProfile:
    """
    Fetch the user's profile with a row lock. Must run inside a transaction;
    the lock serializes checkouts of the same user until commit.
    """
    LoyaltyProfile.objects.get_or_create(user=user)
    return LoyaltyProfile.objects.select_for_update().get(user=user)


def bonus_discount_for(profile: LoyaltyProfile) -> Decimal:
    if profile.bonus_available:
        return bonus_amount()
    return ZERO


@dataclass(frozen=True)
class RewardOutcome:
    earned: int
    bonus_applied: bool
    points: int
    bonus_eligible: bool
    bonus_used: bool


def apply_order_rewards(profile: LoyaltyProfile, *, final_amount, bonus_applied: bool, reference: str = "") -> RewardOutcome:
    """
    Post-order balance update for a locked profile.

    Earn ``floor(final_amount)`` points; when the bonus was spent also burn
    the bonus cost and mark it used. Both happen in one UPDATE relative to the
    stored balance. Eligibility is then re-checked once against the new balance.
    """
    earned = earned_points(final_amount)
    updates = {"points": F("points") + earned}
    if bonus_applied:
        updates = {"points": F("points") - bonus_cost() + earned, "bonus_used": True}
    LoyaltyProfile.objects.filter(pk=profile.pk).update(**updates)

    LoyaltyPointsLedger.objects.create(
        profile=profile,
        delta=earned,
        type=LoyaltyPointsLedger.TYPE_EARN,
        reason="Order reward",
        reference=reference,
    )
    if bonus_applied:
        LoyaltyPointsLedger.objects.create(
            profile=profile,
            delta=-bonus_cost(),
            type=LoyaltyPointsLedger.TYPE_BURN,
            reason=f"Bonus discount ₹{bonus_amount()}",
            reference=reference,
        )

    profile.refresh_from_db(fields=["points", "bonus_eligible", "bonus_used"])
    if profile.points >= bonus_threshold() and not profile.bonus_eligible:
        LoyaltyProfile.objects.filter(pk=profile.pk).update(bonus_eligible=True)
        profile.bonus_eligible = True
        logger.info("Loyalty bonus unlocked for user %s at %s points", profile.user_id, profile.points)

    return RewardOutcome(
        earned=earned,
        bonus_applied=bonus_applied,
        points=profile.points,
        bonus_eligible=profile.bonus_eligible,
        bonus_used=profile.bonus_used,
    )


@transaction.atomic
def adjust_points(profile: LoyaltyProfile, delta: int, reason: str, by_user=None, reference: str = "") -> LoyaltyProfile:
    """Staff correction of a balance, recorded as an ADJUST ledger row."""
    reason = (reason or "").strip()
    if not reason:
        raise LoyaltyAdjustmentError("reason is required")
    delta = int(delta)
    if delta == 0:
        raise LoyaltyAdjustmentError("delta must be non-zero")

    locked = LoyaltyProfile.objects.select_for_update().get(pk=profile.pk)
    if locked.points + delta < 0:
        raise LoyaltyAdjustmentError("adjustment would make the balance negative")

    LoyaltyProfile.objects.filter(pk=locked.pk).update(points=F("points") + delta)
    LoyaltyPointsLedger.objects.create(
        profile=locked,
        delta=delta,
        type=LoyaltyPointsLedger.TYPE_ADJUST,
        reason=reason,
        reference=reference,
        created_by=by_user if getattr(by_user, "is_authenticated", False) else None,
    )
    locked.refresh_from_db()
    logger.info("Loyalty points for user %s adjusted by %s: %s", locked.user_id, delta, reason)
    return locked
