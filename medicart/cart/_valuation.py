"""
Valuation: subtotal, tax, delivery fee and total for a set of lines.

Pure and synchronous; recompute from the current snapshot every time.
"""

from __future__ import annotations

from collections.abc import Iterable
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

import structlog

from medicart._types import Amount, ProductId, ZERO
from medicart.cart._types import CartLine, Known, Unknown, ValuationResult

logger = structlog.get_logger()

TAX_RATE = Decimal("0.18")
FREE_DELIVERY_ABOVE = Decimal("500")
DELIVERY_FEE = Decimal("40")

_CENTS = Decimal("0.01")
_UNIT = Decimal("1")


class _Uninterpretable(Exception):
    pass


def _line_amount(line: CartLine) -> Amount | None:
    """Line total, or None for an unpriced line."""
    quantity = line.quantity
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
        raise _Uninterpretable(f"quantity {quantity!r}")
    match line.unit_price:
        case Unknown():
            return None
        case Known(amount):
            if not isinstance(amount, Decimal) or not amount.is_finite() or amount < 0:
                raise _Uninterpretable(f"price {amount!r}")
            return amount * quantity
        case other:
            raise _Uninterpretable(f"price {other!r}")


def valuate(lines: Iterable[CartLine]) -> ValuationResult:
    """
    Value the given lines.

    Unknown prices contribute 0 and are listed in ``unpriced``. A line that
    cannot be interpreted at all degrades the whole result to
    ``ValuationResult.zero()``.

    Example:
        v = valuate([CartLine(1, Known(Decimal("600")))])
        assert v.total == Decimal("708.00")
    """
    subtotal = ZERO
    unpriced: list[ProductId] = []
    try:
        for line in lines:
            amount = _line_amount(line)
            if amount is None:
                unpriced.append(line.product_id)
            else:
                subtotal += amount
    except (_Uninterpretable, InvalidOperation, TypeError, AttributeError) as e:
        logger.warning("valuation_degraded", error=str(e))
        return ValuationResult.zero()

    subtotal = subtotal.quantize(_CENTS, ROUND_HALF_UP)
    tax = (subtotal * TAX_RATE).quantize(_UNIT, ROUND_HALF_UP)
    fee = ZERO if subtotal > FREE_DELIVERY_ABOVE else DELIVERY_FEE
    return ValuationResult(
        subtotal=subtotal,
        tax_amount=tax,
        delivery_fee=fee,
        total=subtotal + tax + fee,
        unpriced=tuple(unpriced),
    )


__all__ = ("TAX_RATE", "FREE_DELIVERY_ABOVE", "DELIVERY_FEE", "valuate")
