from .checkout import (  # noqa: F401
    CheckoutPreview,
    CheckoutResult,
    Receipt,
    ResolvedLineItem,
    build_checkout_preview,
    checkout,
    resolve_lines,
)
