# orders/exceptions.py
from __future__ import annotations


class CheckoutError(Exception):
    """Base checkout failure; ``user_message`` is safe to show to the customer."""

    default_message = "Checkout failed!"
    status_code = 400

    def __init__(self, user_message: str | None = None):
        self.user_message = user_message or self.default_message
        super().__init__(self.user_message)


class CheckoutValidationError(CheckoutError):
    """Rejected input; nothing was written."""


class MenuItemNotFound(CheckoutValidationError):
    def __init__(self, item_id):
        self.item_id = item_id
        super().__init__(f"Menu item {item_id} is no longer available.")


class CheckoutPersistenceError(CheckoutError):
    """A database failure rolled the checkout back."""

    status_code = 500

    def __init__(self):
        super().__init__(self.default_message)
