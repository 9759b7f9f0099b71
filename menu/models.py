from __future__ import annotations

from decimal import Decimal

from django.conf import settings
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from django.db.models import Avg
from django.utils import timezone


class Restaurant(models.Model):
    name = models.CharField(max_length=150)
    cuisine = models.CharField(max_length=100, blank=True)
    address = models.CharField(max_length=255, blank=True)
    description = models.TextField(blank=True, max_length=1000)
    image = models.ImageField(upload_to="restaurants/%Y/%m/", null=True, blank=True)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ("name", "id")

    def __str__(self) -> str:
        return self.name

    def average_rating(self) -> Decimal | None:
        """Mean review rating rounded to one decimal, None when unrated."""
        avg = self.reviews.aggregate(avg=Avg("rating"))["avg"]
        if avg is None:
            return None
        return Decimal(str(avg)).quantize(Decimal("0.1"))


class MenuItem(models.Model):
    restaurant = models.ForeignKey(
        Restaurant,
        on_delete=models.CASCADE,
        related_name="menu_items",
    )
    name = models.CharField(max_length=200)
    description = models.TextField(blank=True, max_length=1000)
    price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.00"))],
        help_text="Current unit price; orders capture it at checkout",
    )
    image = models.ImageField(upload_to="menu_items/%Y/%m/", null=True, blank=True)
    is_available = models.BooleanField(default=True)
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ("restaurant_id", "name", "id")
        constraints = [
            models.CheckConstraint(condition=models.Q(price__gte=0), name="menuitem_price_non_negative"),
        ]

    def __str__(self) -> str:
        return f"{self.name} ({self.restaurant})"

    @property
    def image_url(self) -> str:
        return self.image.url if self.image else ""


class Review(models.Model):
    restaurant = models.ForeignKey(
        Restaurant,
        on_delete=models.CASCADE,
        related_name="reviews",
    )
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="reviews",
    )
    rating = models.PositiveSmallIntegerField(
        validators=[MinValueValidator(1), MaxValueValidator(5)],
    )
    comment = models.TextField(blank=True, max_length=2000)
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ("-created_at", "-id")

    def __str__(self) -> str:
        return f"{self.rating}/5 for {self.restaurant} by {self.user}"
