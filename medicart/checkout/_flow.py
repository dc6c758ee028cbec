"""
PaymentFlow: method selection through paid order.

    SELECTING_METHOD ─► CAPTURING_DETAILS ─► CREATING_ORDER ─► PROCESSING_PAYMENT ─► SUCCEEDED
                              ▲                   │                   │
                              └───── FAILED ◄─────┴───────────────────┘

Any non-terminal state may exit to ABANDONED. Order creation and payment run
as a two-step saga; the cart is cleared on SUCCEEDED and nowhere else.
"""

from __future__ import annotations

import uuid
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import date, datetime

import structlog
from combinators import lift as L

from medicart import saga as S
from medicart._types import (
    Result,
    Ok,
    Error,
    LazyCoroResult,
    Amount,
    Call,
    OrderId,
    PaymentId,
)
from medicart.address import AddressGate
from medicart.api import MedicartApi, OrderReceipt, PaymentReceipt, PaymentRecord
from medicart.cart import CartStore
from medicart.config import get_settings
from medicart.errors import CheckoutError, ErrorCode, Errors, on_api_error
from medicart.payment import (
    PaymentDetails,
    PaymentMethod,
    ValidatedPayment,
    validate_details,
)
from medicart.checkout._cancel import CancelToken, OperationCancelled
from medicart.checkout._context import CheckoutContext, build_context
from medicart.checkout._guard import SubmissionGuard
from medicart.checkout._state import FlowState, StateTransitionError, is_valid_transition

logger = structlog.get_logger()


@dataclass(frozen=True, slots=True)
class CheckoutReceipt:
    """What the success page shows."""

    payment_id: PaymentId | None
    transaction_id: str | None
    amount: Amount
    order_id: OrderId
    order_number: str | None
    method: PaymentMethod
    timestamp: datetime
    status: str | None


class PaymentFlow:
    """
    One checkout attempt.

    Example:
        flow = PaymentFlow(api, cart, gate)
        await flow.select_method(PaymentMethod.UPI)
        match await flow.submit(UpiDetails("john@okhdfcbank")):
            case Ok(receipt):
                show_success(receipt)
            case Error(e):
                show_error(e.message)
    """

    def __init__(
        self,
        api: MedicartApi,
        cart: CartStore,
        gate: AddressGate,
        *,
        compensation: S.Compensation | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._api = api
        self._cart = cart
        self._gate = gate
        self._compensation = (
            compensation
            if compensation is not None
            else S.Compensation(get_settings().compensation)
        )
        self._clock = clock

        self.attempt_id = uuid.uuid4().hex
        self._token = CancelToken(self.attempt_id)
        self._guard = SubmissionGuard()
        self._log = logger.bind(attempt_id=self.attempt_id)

        self._state = FlowState.SELECTING_METHOD
        self._method: PaymentMethod | None = None
        self._context: CheckoutContext | None = None
        self._order: OrderReceipt | None = None
        self._receipt: CheckoutReceipt | None = None
        self._failure: CheckoutError | None = None
        self._last_error: CheckoutError | None = None
        self._selecting = False

    # ───────────────────────────────────────────────────────────────────────────
    # Reads
    # ───────────────────────────────────────────────────────────────────────────

    @property
    def state(self) -> FlowState:
        return self._state

    @property
    def method(self) -> PaymentMethod | None:
        return self._method

    @property
    def context(self) -> CheckoutContext | None:
        return self._context

    @property
    def order(self) -> OrderReceipt | None:
        """Order created by the last attempt, even if its payment failed."""
        return self._order

    @property
    def receipt(self) -> CheckoutReceipt | None:
        return self._receipt

    @property
    def failure(self) -> CheckoutError | None:
        """Reason for the last FAILED transition."""
        return self._failure

    @property
    def last_error(self) -> CheckoutError | None:
        return self._last_error

    @property
    def can_submit(self) -> bool:
        return (
            self._state in (FlowState.CAPTURING_DETAILS, FlowState.FAILED)
            and not self._guard.is_pending(self.attempt_id)
        )

    # ───────────────────────────────────────────────────────────────────────────
    # Internals
    # ───────────────────────────────────────────────────────────────────────────

    def _transition(self, target: FlowState) -> None:
        if not is_valid_transition(self._state, target):
            raise StateTransitionError(self._state, target)
        self._log.info("state_changed", source=self._state.value, target=target.value)
        self._state = target

    def _refuse_exited(self) -> CheckoutError | None:
        if self._state is FlowState.SUCCEEDED:
            return Errors.already_completed()
        if self._state is FlowState.ABANDONED:
            return Errors.cancelled(self._token.reason or "abandoned")
        if self._state.in_flight or self._guard.is_pending(self.attempt_id):
            return Errors.in_flight()
        return None

    def _fail_validation(self, error: CheckoutError) -> Error[CheckoutError]:
        self._last_error = error
        return Error(error)

    def _call[T](
        self, fn: Callable[[], Awaitable[T]], code: ErrorCode
    ) -> Call[T, CheckoutError]:
        """Lift a gateway call, raced against the flow's token."""
        lift_api = on_api_error(code)

        def on_error(e: Exception) -> CheckoutError:
            if isinstance(e, OperationCancelled):
                return Errors.cancelled(e.reason)
            return lift_api(e)

        return L.catching_async(lambda: self._token.race(fn), on_error=on_error)

    def _place_order(self, context: CheckoutContext) -> Call[OrderReceipt, CheckoutError]:
        return self._call(
            lambda: self._api.place_order(context.selected_address_id),
            ErrorCode.ORDER_FAILED,
        )

    def _process_payment(
        self,
        order: OrderReceipt,
        context: CheckoutContext,
        payment: ValidatedPayment,
    ) -> Call[tuple[OrderReceipt, PaymentReceipt], CheckoutError]:
        call = self._call(
            lambda: self._api.process_payment(
                order.id,
                context.valuation.total,
                payment.method.value,
                payment.payload,
            ),
            ErrorCode.PAYMENT_FAILED,
        )

        async def impl() -> Result[tuple[OrderReceipt, PaymentReceipt], CheckoutError]:
            match await call:
                case Ok(receipt) if receipt.failed:
                    return Error(
                        Errors.collaborator(ErrorCode.PAYMENT_FAILED, receipt.message)
                    )
                case Ok(receipt):
                    return Ok((order, receipt))
                case Error(e):
                    return Error(e)

        return LazyCoroResult(impl)

    async def _cancel_order(self, order: OrderReceipt) -> None:
        self._log.info("order_compensated", order_id=order.id)
        await self._api.cancel_order(order.id)

    def _order_created(self, order: OrderReceipt) -> None:
        self._order = order
        self._log.info("order_created", order_id=order.id, order_number=order.order_number)
        if not self._token.is_cancelled:
            self._transition(FlowState.PROCESSING_PAYMENT)

    # ───────────────────────────────────────────────────────────────────────────
    # Operations
    # ───────────────────────────────────────────────────────────────────────────

    async def select_method(
        self, method: PaymentMethod | str
    ) -> Result[CheckoutContext, CheckoutError]:
        """
        Choose a payment method and enter detail capture.

        Builds the checkout context (cart recovery, valuation, address gate).
        A closed gate keeps the flow in SELECTING_METHOD.
        """
        if (refusal := self._refuse_exited()) is not None:
            return Error(refusal)
        if self._state is not FlowState.SELECTING_METHOD:
            return Error(Errors.invalid_state("Payment method already selected"))
        try:
            chosen = PaymentMethod(method)
        except ValueError:
            return self._fail_validation(
                Errors.validation(f"Unsupported payment method: {method}")
            )

        if self._selecting:
            return Error(Errors.in_flight())

        self._selecting = True
        try:
            built = await self._token.race(
                lambda: build_context(self._cart, self._gate, self._api)
            )
        except OperationCancelled as e:
            return Error(Errors.cancelled(e.reason))
        finally:
            self._selecting = False

        if self._token.is_cancelled:
            return Error(Errors.cancelled(self._token.reason or "abandoned"))
        if self._state is not FlowState.SELECTING_METHOD:
            return Error(Errors.invalid_state("Payment method already selected"))

        match built:
            case Error(e):
                self._last_error = e
                return Error(e)
            case Ok(context):
                pass

        self._method = chosen
        self._context = context
        self._last_error = None
        self._log.info(
            "method_selected",
            method=chosen.value,
            total=str(context.valuation.total),
        )
        self._transition(FlowState.CAPTURING_DETAILS)
        return Ok(context)

    async def submit(
        self, details: PaymentDetails
    ) -> Result[CheckoutReceipt, CheckoutError]:
        """
        Validate details, create the order, process the payment.

        Expected failures come back as ``Error``; nothing raises for them.
        """
        if (refusal := self._refuse_exited()) is not None:
            return Error(refusal)
        if self._state not in (FlowState.CAPTURING_DETAILS, FlowState.FAILED):
            return Error(Errors.invalid_state("Select a payment method first"))

        context = self._context
        method = self._method
        if context is None or method is None:
            return Error(Errors.invalid_state("Select a payment method first"))

        today: date = self._clock().date()
        match validate_details(method, details, today):
            case Error(e):
                if self._state is FlowState.FAILED:
                    self._transition(FlowState.CAPTURING_DETAILS)
                self._log.info("details_rejected", method=method.value, error=e.message)
                return self._fail_validation(e)
            case Ok(payment):
                pass

        match self._guard.begin(self.attempt_id):
            case Error(e):
                return Error(e)
            case Ok(_):
                pass

        if self._state is FlowState.FAILED:
            self._transition(FlowState.CAPTURING_DETAILS)
        self._failure = None
        self._last_error = None
        self._order = None
        self._transition(FlowState.CREATING_ORDER)

        chain = S.step(
            "create_order",
            self._place_order(context),
            compensate=self._cancel_order,
        ).then(
            lambda order: S.step(
                "process_payment",
                self._process_payment(order, context, payment),
            )
        )
        outcome = await S.run_chain(
            chain, self._compensation, before_next=self._order_created
        )

        if self._token.is_cancelled:
            # Late response after abandon: no transition, no cart change
            self._guard.fail(self.attempt_id)
            self._log.info("late_response_ignored", state=self._state.value)
            return Error(Errors.cancelled(self._token.reason or "abandoned"))

        match outcome:
            case Ok(result):
                order, payment = result.value
                return Ok(self._succeed(order, payment, context, method))
            case Error(saga_error):
                error = saga_error.error
                self._guard.fail(self.attempt_id)
                self._failure = error
                self._last_error = error
                self._log.warning(
                    "payment_attempt_failed",
                    step=saga_error.step_failed,
                    code=error.code.name,
                    error=error.message,
                    order_id=self._order.id if self._order else None,
                    compensators_run=saga_error.compensators_run,
                    compensators_failed=saga_error.compensators_failed,
                )
                self._transition(FlowState.FAILED)
                return Error(error)

    def _succeed(
        self,
        order: OrderReceipt,
        payment: PaymentReceipt,
        context: CheckoutContext,
        method: PaymentMethod,
    ) -> CheckoutReceipt:
        receipt = CheckoutReceipt(
            payment_id=payment.payment_id,
            transaction_id=payment.transaction_id,
            amount=context.valuation.total,
            order_id=order.id,
            order_number=order.order_number,
            method=method,
            timestamp=self._clock(),
            status=payment.status,
        )
        self._transition(FlowState.SUCCEEDED)
        self._guard.complete(self.attempt_id)
        self._cart.clear()
        self._receipt = receipt
        self._context = None
        self._log.info(
            "payment_succeeded",
            order_id=order.id,
            payment_id=payment.payment_id,
            transaction_id=payment.transaction_id,
            method=method.value,
            amount=str(receipt.amount),
        )
        return receipt

    def back(self) -> Result[FlowState, CheckoutError]:
        """Return to method selection to choose another method."""
        if (refusal := self._refuse_exited()) is not None:
            return Error(refusal)
        if self._state not in (FlowState.CAPTURING_DETAILS, FlowState.FAILED):
            return Error(Errors.invalid_state("Already selecting a payment method"))
        self._transition(FlowState.SELECTING_METHOD)
        self._method = None
        self._context = None
        self._last_error = None
        return Ok(self._state)

    def abandon(self, reason: str = "abandoned") -> Result[FlowState, CheckoutError]:
        """
        Leave checkout. Any in-flight call is cancelled and its response
        ignored; the cart is left as it is.
        """
        if self._state is FlowState.SUCCEEDED:
            return Error(Errors.already_completed())
        if self._state is FlowState.ABANDONED:
            return Ok(self._state)
        self._token.cancel(reason)
        self._transition(FlowState.ABANDONED)
        self._context = None
        return Ok(self._state)

    async def reconcile(self) -> Result[PaymentRecord, CheckoutError]:
        """Fetch the server's record of the payment that succeeded."""
        receipt = self._receipt
        if self._state is not FlowState.SUCCEEDED or receipt is None:
            return Error(Errors.invalid_state("No completed payment to reconcile"))
        payment_id = receipt.payment_id
        if payment_id is None:
            return Error(Errors.collaborator(
                ErrorCode.RECONCILE_FAILED, "Payment id was not returned"
            ))
        result = await self._call(
            lambda: self._api.get_payment(payment_id), ErrorCode.RECONCILE_FAILED
        )
        match result:
            case Ok(record):
                self._log.info(
                    "payment_reconciled",
                    payment_id=payment_id,
                    status=record.payment_status,
                )
            case Error(e):
                self._log.warning("reconcile_failed", payment_id=payment_id, error=e.message)
        return result


__all__ = ("CheckoutReceipt", "PaymentFlow")
