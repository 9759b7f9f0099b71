from __future__ import annotations

from decimal import Decimal

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone


class GiftCoupon(models.Model):
    """
    Scratch-card reward owned by one user. An unused coupon is applied
    automatically at the user's next checkout; once used it stays used.
    """

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="gift_coupons",
    )
    code = models.CharField(max_length=32)
    discount_amount = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=Decimal("0.00"),
        validators=[MinValueValidator(Decimal("0.00"))],
    )
    is_scratched = models.BooleanField(default=False)
    is_used = models.BooleanField(default=False, db_index=True)
    used_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ("-created_at", "-id")
        indexes = [
            models.Index(fields=["user", "is_used", "created_at"], name="giftcoupon_user_unused_idx"),
        ]

    def __str__(self) -> str:
        state = "used" if self.is_used else "unused"
        return f"{self.code} ₹{self.discount_amount} ({state})"
