"""
Core types for medicart.

Re-exports from kungfu + checkout-wide aliases.
"""

from __future__ import annotations

from decimal import Decimal
from collections.abc import Awaitable, Callable

# Re-export from kungfu
from kungfu import Result, Ok, Error, LazyCoroResult

# ═══════════════════════════════════════════════════════════════════════════════
# Identifiers
# ═══════════════════════════════════════════════════════════════════════════════

type ProductId = int
"""Catalog medicine id (``medicineId`` on the wire)."""

type AddressId = int

type OrderId = int

type PaymentId = int

# ═══════════════════════════════════════════════════════════════════════════════
# Money
# ═══════════════════════════════════════════════════════════════════════════════

type Amount = Decimal
"""Currency amount in rupees. Always a Decimal, never a float."""

ZERO: Amount = Decimal("0")

# ═══════════════════════════════════════════════════════════════════════════════
# Lazy Computation Aliases
# ═══════════════════════════════════════════════════════════════════════════════

type Call[T, E] = LazyCoroResult[T, E]
"""Lazy external call that may fail with E."""

type Compensator[T] = Callable[[T], Awaitable[None]]
"""Undo action for a completed step, receives the step's value."""

# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

__all__ = (
    # Re-exports from kungfu
    "Result",
    "Ok",
    "Error",
    "LazyCoroResult",
    # Identifiers
    "ProductId",
    "AddressId",
    "OrderId",
    "PaymentId",
    # Money
    "Amount",
    "ZERO",
    # Lazy
    "Call",
    "Compensator",
)
