from __future__ import annotations

from django.conf import settings
from django.db import models


class LoyaltyProfile(models.Model):
    """
    Per-user reward state: the points balance plus the one-time bonus flags.

    ``bonus_eligible`` flips on once the balance reaches the bonus threshold;
    ``bonus_used`` flips on when the bonus discount is spent and never resets.
    """

    user = models.OneToOneField(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="loyalty_profile")
    points = models.IntegerField(default=0)
    bonus_eligible = models.BooleanField(default=False)
    bonus_used = models.BooleanField(default=False)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = "Loyalty Profile"
        verbose_name_plural = "Loyalty Profiles"

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f"{self.user_id}: {self.points} pts"

    @property
    def bonus_available(self) -> bool:
        return bool(self.bonus_eligible and not self.bonus_used)


class LoyaltyPointsLedger(models.Model):
    """
    Points ledger with reasons. Positive = earn, Negative = burn/adjustment.
    """

    TYPE_EARN = "EARN"
    TYPE_BURN = "BURN"
    TYPE_ADJUST = "ADJUST"
    TYPE_CHOICES = (
        (TYPE_EARN, "Earn"),
        (TYPE_BURN, "Burn"),
        (TYPE_ADJUST, "Adjust"),
    )

    profile = models.ForeignKey(LoyaltyProfile, on_delete=models.CASCADE, related_name="ledger")
    delta = models.IntegerField(help_text="Points change (positive or negative)")
    type = models.CharField(max_length=8, choices=TYPE_CHOICES, default=TYPE_EARN)
    reason = models.CharField(max_length=200, blank=True, default="")
    reference = models.CharField(max_length=100, blank=True, default="", help_text="Order ID or external reference")
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="loyalty_adjustments",
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(fields=["profile", "-created_at"], name="loyalty_ledger_profile_idx"),
            models.Index(fields=["type", "-created_at"], name="loyalty_ledger_type_idx"),
        ]

    def __str__(self) -> str:  # pragma: no cover
        return f"{self.profile_id} {self.type} {self.delta}"
