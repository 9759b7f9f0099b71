from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

CENT = Decimal("0.01")
ZERO = Decimal("0.00")


def q2(x) -> Decimal:
    """Quantize to 2 dp, half up. Floats go through ``str`` first."""
    if isinstance(x, Decimal):
        d = x
    else:
        try:
            d = Decimal(str(x if x is not None else 0))
        except InvalidOperation:
            d = ZERO
    return d.quantize(CENT, rounding=ROUND_HALF_UP)