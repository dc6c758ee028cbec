"""
medicart: checkout orchestration for the MediCart pharmacy storefront.

    from medicart import saga as S      # Ordered calls with compensation
    from medicart import graph as G     # Dependency-resolved computations
    from medicart.checkout import PaymentFlow
"""

from medicart import saga
from medicart import graph
from medicart._types import (
    Result,
    Ok,
    Error,
    LazyCoroResult,
    Amount,
    ZERO,
)
from medicart.errors import CheckoutError, ErrorCode, Errors
from medicart.config import Settings, get_settings
from medicart.log import configure_logging
from medicart.session import Session, SessionStore
from medicart.api import ApiError, MedicartApi
from medicart.cart import (
    Known,
    Unknown,
    CartLine,
    Cart,
    CartStore,
    ValuationResult,
    valuate,
)
from medicart.address import AddressGate
from medicart.payment import (
    PaymentMethod,
    CardDetails,
    UpiDetails,
    NetBankingDetails,
    BANKS,
    validate_details,
)
from medicart.checkout import (
    FlowState,
    CheckoutContext,
    CheckoutReceipt,
    PaymentFlow,
)

__version__ = "0.1.0"

__all__ = (
    "saga",
    "graph",
    "Result",
    "Ok",
    "Error",
    "LazyCoroResult",
    "Amount",
    "ZERO",
    "CheckoutError",
    "ErrorCode",
    "Errors",
    "Settings",
    "get_settings",
    "configure_logging",
    "Session",
    "SessionStore",
    "ApiError",
    "MedicartApi",
    "Known",
    "Unknown",
    "CartLine",
    "Cart",
    "CartStore",
    "ValuationResult",
    "valuate",
    "AddressGate",
    "PaymentMethod",
    "CardDetails",
    "UpiDetails",
    "NetBankingDetails",
    "BANKS",
    "validate_details",
    "FlowState",
    "CheckoutContext",
    "CheckoutReceipt",
    "PaymentFlow",
)
