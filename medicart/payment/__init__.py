"""
Payment methods, details and client-side validation.

    from medicart.payment import PaymentMethod, UpiDetails, validate_details

    validate_details(PaymentMethod.UPI, UpiDetails("john@okhdfcbank"))
"""

from __future__ import annotations

from medicart.payment._types import (
    PaymentMethod,
    CardDetails,
    UpiDetails,
    NetBankingDetails,
    PaymentDetails,
    Bank,
    BANKS,
    ValidatedPayment,
)
from medicart.payment._validators import (
    Validator,
    MIN_CARD_DIGITS,
    UPI_PATTERN,
    is_expired,
    validate_card,
    validate_upi,
    validate_net_banking,
    VALIDATORS,
    validate_details,
)

__all__ = (
    "PaymentMethod",
    "CardDetails",
    "UpiDetails",
    "NetBankingDetails",
    "PaymentDetails",
    "Bank",
    "BANKS",
    "ValidatedPayment",
    "Validator",
    "MIN_CARD_DIGITS",
    "UPI_PATTERN",
    "is_expired",
    "validate_card",
    "validate_upi",
    "validate_net_banking",
    "VALIDATORS",
    "validate_details",
)
