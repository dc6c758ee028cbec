"""
Checkout: the payment flow and the pieces it is built from.

    from medicart.checkout import PaymentFlow

    flow = PaymentFlow(api, cart, gate)
    await flow.select_method("UPI")
    result = await flow.submit(UpiDetails("john@okhdfcbank"))
"""

from __future__ import annotations

from medicart.checkout._cancel import OperationCancelled, CancelToken
from medicart.checkout._guard import RecordState, SubmissionRecord, SubmissionGuard
from medicart.checkout._state import (
    FlowState,
    TRANSITIONS,
    StateTransitionError,
    is_valid_transition,
)
from medicart.checkout._context import (
    CheckoutContext,
    CartSnapshotNode,
    ValuationNode,
    AddressSelectionNode,
    CheckoutContextNode,
    build_context,
)
from medicart.checkout._flow import CheckoutReceipt, PaymentFlow

__all__ = (
    "OperationCancelled",
    "CancelToken",
    "RecordState",
    "SubmissionRecord",
    "SubmissionGuard",
    "FlowState",
    "TRANSITIONS",
    "StateTransitionError",
    "is_valid_transition",
    "CheckoutContext",
    "CartSnapshotNode",
    "ValuationNode",
    "AddressSelectionNode",
    "CheckoutContextNode",
    "build_context",
    "CheckoutReceipt",
    "PaymentFlow",
)
