"""
Payment types: methods, per-method details, validated payloads.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class PaymentMethod(str, Enum):
    """Wire values understood by the payment service."""

    CREDIT_CARD = "CREDIT_CARD"
    DEBIT_CARD = "DEBIT_CARD"
    UPI = "UPI"
    NET_BANKING = "NET_BANKING"

    @property
    def is_card(self) -> bool:
        return self in (PaymentMethod.CREDIT_CARD, PaymentMethod.DEBIT_CARD)


# ═══════════════════════════════════════════════════════════════════════════════
# Details (one shape per method family)
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class CardDetails:
    card_number: str
    expiry_month: str | int
    expiry_year: str | int
    cvv: str
    cardholder_name: str

    def __repr__(self) -> str:
        # Never print the full number or the CVV
        tail = "".join(self.card_number.split())[-4:]
        return f"CardDetails(card_number='****{tail}', cardholder_name={self.cardholder_name!r})"


@dataclass(frozen=True, slots=True)
class UpiDetails:
    upi_id: str


@dataclass(frozen=True, slots=True)
class NetBankingDetails:
    bank_code: str


type PaymentDetails = CardDetails | UpiDetails | NetBankingDetails


# ═══════════════════════════════════════════════════════════════════════════════
# Banks
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class Bank:
    code: str
    name: str


BANKS: tuple[Bank, ...] = (
    Bank("hdfc", "HDFC Bank"),
    Bank("icici", "ICICI Bank"),
    Bank("sbi", "State Bank of India"),
    Bank("axis", "Axis Bank"),
    Bank("boi", "Bank of India"),
    Bank("yes", "YES Bank"),
    Bank("kotak", "Kotak Mahindra Bank"),
    Bank("idbi", "IDBI Bank"),
)


# ═══════════════════════════════════════════════════════════════════════════════
# ValidatedPayment
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class ValidatedPayment:
    """Details that passed validation, in wire form."""

    method: PaymentMethod
    payload: dict[str, Any] = field(repr=False)


__all__ = (
    "PaymentMethod",
    "CardDetails",
    "UpiDetails",
    "NetBankingDetails",
    "PaymentDetails",
    "Bank",
    "BANKS",
    "ValidatedPayment",
)
