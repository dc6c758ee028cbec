"""
Errors: one error value for the whole checkout.

Every fallible operation returns ``Result[T, CheckoutError]``. Only the HTTP
layer raises (``ApiError``); the flow lifts those into ``CheckoutError`` at the
call boundary.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum, auto

from medicart.api import ApiError

GENERIC_FAILURE = "Payment processing failed. Please try again."
LOGIN_REQUIRED = "Please log in to continue."


# ═══════════════════════════════════════════════════════════════════════════════
# Error Codes
# ═══════════════════════════════════════════════════════════════════════════════


class ErrorCode(Enum):
    """What went wrong, grouped by who has to fix it."""

    # Client-local, fixed by the user
    VALIDATION = auto()
    ADDRESS_REQUIRED = auto()
    CART_EMPTY = auto()

    # Session
    UNAUTHORIZED = auto()

    # Collaborators
    ADDRESS_LOAD_FAILED = auto()
    CART_SYNC_FAILED = auto()
    ORDER_FAILED = auto()
    PAYMENT_FAILED = auto()
    RECONCILE_FAILED = auto()

    # Flow misuse
    IN_FLIGHT = auto()
    INVALID_STATE = auto()
    ALREADY_COMPLETED = auto()
    CANCELLED = auto()


# ═══════════════════════════════════════════════════════════════════════════════
# CheckoutError
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class CheckoutError:
    code: ErrorCode
    message: str
    status_code: int | None = None

    def __str__(self) -> str:
        return self.message


class Errors:
    @staticmethod
    def validation(msg: str) -> CheckoutError:
        return CheckoutError(ErrorCode.VALIDATION, msg)

    @staticmethod
    def address_required() -> CheckoutError:
        return CheckoutError(
            ErrorCode.ADDRESS_REQUIRED, "Please select a delivery address"
        )

    @staticmethod
    def cart_empty() -> CheckoutError:
        return CheckoutError(ErrorCode.CART_EMPTY, "Your cart is empty")

    @staticmethod
    def login_required(status_code: int | None = 401) -> CheckoutError:
        return CheckoutError(ErrorCode.UNAUTHORIZED, LOGIN_REQUIRED, status_code)

    @staticmethod
    def collaborator(
        code: ErrorCode, msg: str | None, status_code: int | None = None
    ) -> CheckoutError:
        """Collaborator failure, surfacing its message verbatim when it sent one."""
        text = msg.strip() if msg else ""
        return CheckoutError(code, text or GENERIC_FAILURE, status_code)

    @staticmethod
    def in_flight() -> CheckoutError:
        return CheckoutError(
            ErrorCode.IN_FLIGHT, "Your payment is already being processed"
        )

    @staticmethod
    def invalid_state(msg: str) -> CheckoutError:
        return CheckoutError(ErrorCode.INVALID_STATE, msg)

    @staticmethod
    def already_completed() -> CheckoutError:
        return CheckoutError(
            ErrorCode.ALREADY_COMPLETED, "This order has already been paid"
        )

    @staticmethod
    def cancelled(reason: str) -> CheckoutError:
        return CheckoutError(ErrorCode.CANCELLED, f"Checkout cancelled: {reason}")


# ═══════════════════════════════════════════════════════════════════════════════
# Lifting ApiError
# ═══════════════════════════════════════════════════════════════════════════════


def on_api_error(
    code: ErrorCode, *, login_on_401: bool = False
) -> Callable[[Exception], CheckoutError]:
    """
    ``on_error`` handler for ``L.catching_async``.

    Maps an ``ApiError`` to ``code`` with the collaborator's message; a 401
    becomes ``UNAUTHORIZED`` when ``login_on_401`` is set.
    """

    def handle(e: Exception) -> CheckoutError:
        if isinstance(e, ApiError):
            if login_on_401 and e.unauthorized:
                return Errors.login_required(e.status_code)
            return Errors.collaborator(code, e.message, e.status_code)
        return Errors.collaborator(code, None)

    return handle


__all__ = (
    "GENERIC_FAILURE",
    "LOGIN_REQUIRED",
    "ErrorCode",
    "CheckoutError",
    "Errors",
    "on_api_error",
)
