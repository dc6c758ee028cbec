"""
Cart types: prices, lines, snapshots, valuation.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum, auto

from medicart._types import Amount, ProductId, ZERO

# ═══════════════════════════════════════════════════════════════════════════════
# Price: Known | Unknown
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class Known:
    """Loaded unit price."""

    amount: Amount


@dataclass(frozen=True, slots=True)
class Unknown:
    """Product reference whose price has not been loaded."""


type Price = Known | Unknown


def price_of(value: Decimal | int | str | None) -> Price:
    """Price from a raw catalog value; None means not loaded."""
    if value is None:
        return Unknown()
    return Known(Decimal(str(value)))


# ═══════════════════════════════════════════════════════════════════════════════
# CartLine / Cart
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class CartLine:
    product_id: ProductId
    unit_price: Price
    quantity: int = 1
    name: str = ""

    def __post_init__(self) -> None:
        if not isinstance(self.quantity, int) or self.quantity < 1:
            raise ValueError(f"quantity must be >= 1, got {self.quantity!r}")
        match self.unit_price:
            case Known(amount):
                if not isinstance(amount, Decimal) or not amount.is_finite():
                    raise ValueError(f"price must be a finite Decimal, got {amount!r}")
                if amount < 0:
                    raise ValueError(f"price must be non-negative, got {amount}")
            case Unknown():
                pass
            case other:
                raise ValueError(f"unit_price must be Known or Unknown, got {other!r}")


class CartStatus(Enum):
    UNINITIALIZED = auto()
    SYNCING = auto()
    READY = auto()


@dataclass(frozen=True, slots=True)
class Cart:
    """Immutable snapshot of the cart."""

    lines: tuple[CartLine, ...] = ()
    status: CartStatus = CartStatus.UNINITIALIZED

    @property
    def is_empty(self) -> bool:
        return not self.lines

    @property
    def item_count(self) -> int:
        return sum(line.quantity for line in self.lines)


# ═══════════════════════════════════════════════════════════════════════════════
# ValuationResult
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class ValuationResult:
    subtotal: Amount
    tax_amount: Amount
    delivery_fee: Amount
    total: Amount
    unpriced: tuple[ProductId, ...] = field(default=())
    degraded: bool = False

    @property
    def is_complete(self) -> bool:
        """True when every line had a known price."""
        return not self.unpriced and not self.degraded

    @classmethod
    def zero(cls) -> ValuationResult:
        return cls(ZERO, ZERO, ZERO, ZERO, degraded=True)


__all__ = (
    "Known",
    "Unknown",
    "Price",
    "price_of",
    "CartLine",
    "CartStatus",
    "Cart",
    "ValuationResult",
)
