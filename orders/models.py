from __future__ import annotations

from decimal import Decimal

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone

from core.money import q2

PAYMENT_COD = "COD"
PAYMENT_CARD = "CARD"
PAYMENT_UPI = "UPI"
PAYMENT_QR = "QR"

PAYMENT_METHOD_CHOICES = [
    (PAYMENT_COD, "Cash on Delivery"),
    (PAYMENT_CARD, "Card"),
    (PAYMENT_UPI, "UPI"),
    (PAYMENT_QR, "QR Code"),
]


class Order(models.Model):
    """
    A placed order. Amounts are captured at checkout and never recomputed:
    ``subtotal`` is the sum of the item lines, ``discount`` is coupon plus
    loyalty bonus, ``gift_discount`` is the consumed gift coupon and
    ``total_amount`` is what the customer pays.
    """

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="orders",
    )
    restaurant = models.ForeignKey(
        "menu.Restaurant",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="orders",
    )
    subtotal = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal("0.00"))
    total_amount = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=Decimal("0.00"),
        validators=[MinValueValidator(Decimal("0.00"))],
    )
    payment_method = models.CharField(max_length=8, choices=PAYMENT_METHOD_CHOICES, default=PAYMENT_COD)
    coupon_code = models.CharField(max_length=64, null=True, blank=True)
    discount = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal("0.00"))
    gift_discount = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal("0.00"))
    points_earned = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(default=timezone.now, db_index=True)

    class Meta:
        ordering = ("-created_at", "-id")
        constraints = [
            models.CheckConstraint(condition=models.Q(total_amount__gte=0), name="order_total_non_negative"),
        ]

    def __str__(self) -> str:
        return f"Order #{self.pk}"

    @property
    def status(self) -> str:
        tracking = getattr(self, "tracking", None)
        return tracking.status if tracking else OrderTracking.STATUS_PLACED

    def items_total(self) -> Decimal:
        return q2(sum((it.line_total for it in self.items.all()), Decimal("0.00")))


class OrderItem(models.Model):
    order = models.ForeignKey(Order, on_delete=models.CASCADE, related_name="items")
    menu_item = models.ForeignKey(
        "menu.MenuItem",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="order_items",
    )
    # Snapshot so history survives menu edits
    item_name = models.CharField(max_length=200)
    quantity = models.PositiveIntegerField(default=1, validators=[MinValueValidator(1)])
    price_each = models.DecimalField(max_digits=10, decimal_places=2, validators=[MinValueValidator(Decimal("0.00"))])

    class Meta:
        ordering = ("id",)

    def __str__(self) -> str:
        return f"{self.quantity} x {self.item_name}"

    @property
    def line_total(self) -> Decimal:
        return q2(self.price_each * self.quantity)


class OrderTracking(models.Model):
    STATUS_PLACED = "Placed"
    STATUS_PREPARING = "Preparing"
    STATUS_OUT_FOR_DELIVERY = "Out for Delivery"
    STATUS_DELIVERED = "Delivered"
    STATUS_CANCELLED = "Cancelled"

    STATUS_CHOICES = [
        (STATUS_PLACED, "Placed"),
        (STATUS_PREPARING, "Preparing"),
        (STATUS_OUT_FOR_DELIVERY, "Out for Delivery"),
        (STATUS_DELIVERED, "Delivered"),
        (STATUS_CANCELLED, "Cancelled"),
    ]
    VALID_STATUSES = frozenset(code for code, _ in STATUS_CHOICES)

    order = models.OneToOneField(Order, on_delete=models.CASCADE, related_name="tracking")
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=STATUS_PLACED)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = "Order tracking"
        verbose_name_plural = "Order tracking"

    def __str__(self) -> str:
        return f"Order #{self.order_id}: {self.status}"

    def set_status(self, status: str) -> None:
        if status not in self.VALID_STATUSES:
            raise ValueError(f"Unknown order status: {status!r}")
        self.status = status
        self.save(update_fields=["status", "updated_at"])
