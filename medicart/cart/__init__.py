"""
Cart: lines, snapshots and valuation.

    from medicart.cart import CartStore, Known, valuate

    store = CartStore()
    store.add(42, Known(Decimal("300")))
    valuate(store.snapshot().lines).total  # Decimal("394.00")
"""

from __future__ import annotations

from medicart.cart._types import (
    Known,
    Unknown,
    Price,
    price_of,
    CartLine,
    CartStatus,
    Cart,
    ValuationResult,
)
from medicart.cart._valuation import (
    TAX_RATE,
    FREE_DELIVERY_ABOVE,
    DELIVERY_FEE,
    valuate,
)
from medicart.cart._store import CartStore

__all__ = (
    "Known",
    "Unknown",
    "Price",
    "price_of",
    "CartLine",
    "CartStatus",
    "Cart",
    "ValuationResult",
    "TAX_RATE",
    "FREE_DELIVERY_ABOVE",
    "DELIVERY_FEE",
    "valuate",
    "CartStore",
)
