from __future__ import annotations

from django.contrib.auth.models import AbstractUser
from django.core.validators import RegexValidator
from django.db import models


class User(AbstractUser):
    """
    Customer account. ``first_name`` holds the display name entered at signup;
    login accepts either the username or the email address.
    """

    phone_regex = RegexValidator(
        regex=r"^\+?\d{9,15}$",
        message="Phone number must be entered in the format: '+919999999999'. Up to 15 digits allowed.",
    )

    phone_number = models.CharField(
        validators=[phone_regex],
        max_length=17,
        blank=True,
        null=True,
        help_text="Contact number shown on orders",
    )
    address = models.TextField(
        blank=True,
        default="",
        help_text="Default delivery address",
    )

    class Meta:
        swappable = "AUTH_USER_MODEL"
        indexes = [
            models.Index(fields=["email"], name="accounts_user_email_idx"),
        ]

    def clean(self):
        super().clean()
        if self.email:
            self.email = self.email.lower()

    def __str__(self) -> str:
        return self.get_username() or f"User#{self.pk}"

    @property
    def display_name(self) -> str:
        return self.get_full_name() or self.get_username()
