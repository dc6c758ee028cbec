"""
Validators: one per payment method, looked up in ``VALIDATORS``.

A validator never touches the network. Adding a method means adding an entry
here; the checkout flow only calls ``validate_details``.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from datetime import date

from medicart._types import Result, Ok, Error
from medicart.errors import CheckoutError, Errors
from medicart.payment._types import (
    BANKS,
    CardDetails,
    NetBankingDetails,
    PaymentDetails,
    PaymentMethod,
    UpiDetails,
    ValidatedPayment,
)

type Validator = Callable[
    [PaymentMethod, PaymentDetails, date], Result[ValidatedPayment, CheckoutError]
]

MIN_CARD_DIGITS = 13
UPI_PATTERN = re.compile(r"^[A-Za-z0-9.-]+@[A-Za-z]{3,}$")


# ═══════════════════════════════════════════════════════════════════════════════
# Card
# ═══════════════════════════════════════════════════════════════════════════════


def _as_int(value: str | int) -> int | None:
    text = str(value).strip()
    return int(text) if text.isdigit() else None


def is_expired(month: int, year: int, today: date) -> bool:
    """True when (year, month) is strictly before today's (yy, mm)."""
    return (year, month) < (today.year % 100, today.month)


def validate_card(
    method: PaymentMethod, details: PaymentDetails, today: date
) -> Result[ValidatedPayment, CheckoutError]:
    if not isinstance(details, CardDetails):
        return Error(Errors.validation("Please enter your card details"))

    fields = (
        details.card_number,
        str(details.expiry_month),
        str(details.expiry_year),
        details.cvv,
        details.cardholder_name,
    )
    if any(not f.strip() for f in fields):
        return Error(Errors.validation("Please fill all card details"))

    number = "".join(details.card_number.split())
    if not number.isdigit() or len(number) < MIN_CARD_DIGITS:
        return Error(
            Errors.validation("Invalid card number (minimum 13 digits required)")
        )

    cvv = details.cvv.strip()
    if not cvv.isdigit() or not 3 <= len(cvv) <= 4:
        return Error(Errors.validation("Invalid CVV (3-4 digits required)"))

    month = _as_int(details.expiry_month)
    year = _as_int(details.expiry_year)
    if month is None or not 1 <= month <= 12:
        return Error(Errors.validation("Invalid expiry month"))
    if year is None:
        return Error(Errors.validation("Invalid expiry year"))
    if is_expired(month, year, today):
        return Error(Errors.validation("Card has expired"))

    return Ok(ValidatedPayment(
        method=method,
        payload={
            "cardNumber": number,
            "expiryMonth": str(details.expiry_month).strip(),
            "expiryYear": str(details.expiry_year).strip(),
            "cvv": cvv,
            "cardholderName": details.cardholder_name.strip(),
            "method": method.value,
        },
    ))


# ═══════════════════════════════════════════════════════════════════════════════
# UPI
# ═══════════════════════════════════════════════════════════════════════════════


def validate_upi(
    method: PaymentMethod, details: PaymentDetails, today: date
) -> Result[ValidatedPayment, CheckoutError]:
    if not isinstance(details, UpiDetails):
        return Error(Errors.validation("Please enter UPI ID"))
    upi_id = details.upi_id.strip()
    if not upi_id:
        return Error(Errors.validation("Please enter UPI ID"))
    if UPI_PATTERN.fullmatch(upi_id) is None:
        return Error(
            Errors.validation("Invalid UPI ID format (e.g., yourname@okhdfcbank)")
        )
    return Ok(ValidatedPayment(method=method, payload={"upiId": upi_id}))


# ═══════════════════════════════════════════════════════════════════════════════
# Net banking
# ═══════════════════════════════════════════════════════════════════════════════


def validate_net_banking(
    method: PaymentMethod, details: PaymentDetails, today: date
) -> Result[ValidatedPayment, CheckoutError]:
    if not isinstance(details, NetBankingDetails):
        return Error(Errors.validation("Please select a bank"))
    code = details.bank_code.strip().lower()
    if not any(bank.code == code for bank in BANKS):
        return Error(Errors.validation("Please select a bank"))
    return Ok(ValidatedPayment(method=method, payload={"bankCode": code}))


# ═══════════════════════════════════════════════════════════════════════════════
# Registry
# ═══════════════════════════════════════════════════════════════════════════════

VALIDATORS: dict[PaymentMethod, Validator] = {
    PaymentMethod.CREDIT_CARD: validate_card,
    PaymentMethod.DEBIT_CARD: validate_card,
    PaymentMethod.UPI: validate_upi,
    PaymentMethod.NET_BANKING: validate_net_banking,
}


def validate_details(
    method: PaymentMethod,
    details: PaymentDetails,
    today: date | None = None,
) -> Result[ValidatedPayment, CheckoutError]:
    """
    Validate details for the chosen method.

    Example:
        match validate_details(PaymentMethod.UPI, UpiDetails("john@okhdfcbank")):
            case Ok(v):
                payload = v.payload
            case Error(e):
                show(e.message)
    """
    validator = VALIDATORS.get(method)
    if validator is None:
        return Error(Errors.validation(f"Unsupported payment method: {method}"))
    return validator(method, details, today or date.today())


__all__ = (
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
