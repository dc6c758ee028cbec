"""
MedicartApi: the gateway client.

Every request gets the session's bearer token and a best-effort X-User-Id
header from the request hook. Non-2xx responses raise ``ApiError``; callers
lift them into Results with ``combinators.lift``.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any

import httpx
import structlog

from medicart.config import Settings, get_settings
from medicart.session import SessionStore
from medicart.api._models import (
    AddressRecord,
    CartItemRecord,
    OrderReceipt,
    PaymentReceipt,
    PaymentRecord,
)

logger = structlog.get_logger()


# ═══════════════════════════════════════════════════════════════════════════════
# ApiError
# ═══════════════════════════════════════════════════════════════════════════════


class ApiError(Exception):
    """
    Gateway call failed. status_code is None when no response arrived.

    ``message`` is what the collaborator said (the body's ``error`` or
    ``message`` field); empty when it said nothing usable.
    """

    def __init__(
        self, status_code: int | None, message: str, detail: str | None = None
    ) -> None:
        super().__init__(message or detail or f"HTTP {status_code}")
        self.status_code = status_code
        self.message = message
        self.detail = detail

    @property
    def unauthorized(self) -> bool:
        return self.status_code == 401

    @classmethod
    def from_response(cls, response: httpx.Response) -> ApiError:
        message = ""
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict):
            message = str(body.get("error") or body.get("message") or "")
        return cls(response.status_code, message)


def _address_id(value: object) -> int:
    if value is None or value == "":
        raise ApiError(None, "Address ID is required but was not provided")
    try:
        number = int(str(value))
    except ValueError:
        raise ApiError(None, f"Invalid address ID format: {value}") from None
    if number <= 0:
        raise ApiError(None, f"Invalid address ID: {number} (must be > 0)")
    return number


def _wire_amount(amount: Decimal) -> float:
    return float(amount.quantize(Decimal("0.01")))


# ═══════════════════════════════════════════════════════════════════════════════
# Client
# ═══════════════════════════════════════════════════════════════════════════════


class MedicartApi:
    """
    Async client for the cart/orders and payment services behind the gateway.

    Example:
        async with MedicartApi(sessions) as api:
            addresses = await api.list_addresses()
    """

    def __init__(
        self,
        sessions: SessionStore,
        settings: Settings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._sessions = sessions
        self._settings = settings or get_settings()
        options: dict[str, Any] = {}
        if self._settings.request_timeout is not None:
            options["timeout"] = self._settings.request_timeout
        self._client = httpx.AsyncClient(
            base_url=self._settings.api_base_url,
            headers={"Content-Type": "application/json"},
            event_hooks={
                "request": [self._authorize],
                "response": [self._observe],
            },
            transport=transport,
            **options,
        )

    async def __aenter__(self) -> MedicartApi:
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    # ───────────────────────────────────────────────────────────────────────────
    # Hooks
    # ───────────────────────────────────────────────────────────────────────────

    async def _authorize(self, request: httpx.Request) -> None:
        session = self._sessions.current
        authorization = session.authorization
        if authorization is None:
            request.headers.pop("Authorization", None)
        else:
            request.headers["Authorization"] = authorization
        user_id = session.user_id_hint
        if user_id is not None:
            request.headers["X-User-Id"] = user_id

    async def _observe(self, response: httpx.Response) -> None:
        if response.status_code != 401:
            return
        path = response.request.url.path
        public = any(p in path for p in self._settings.public_paths)
        if self._sessions.current.is_authenticated and not public:
            # Logging out is the application shell's call, not ours
            logger.warning("session_expired", path=path)

    async def _send(self, method: str, path: str, json: Any = None) -> Any:
        try:
            response = await self._client.request(method, path, json=json)
        except httpx.HTTPError as e:
            logger.error("request_failed", method=method, path=path, error=str(e))
            raise ApiError(None, "", detail=str(e) or type(e).__name__) from e
        if response.is_error:
            error = ApiError.from_response(response)
            logger.warning(
                "request_rejected",
                method=method,
                path=path,
                status=response.status_code,
                error=str(error),
            )
            raise error
        if not response.content:
            return None
        return response.json()

    # ───────────────────────────────────────────────────────────────────────────
    # Addresses
    # ───────────────────────────────────────────────────────────────────────────

    async def list_addresses(self) -> list[AddressRecord]:
        data = await self._send("GET", "/api/address")
        return [AddressRecord.model_validate(item) for item in data or []]

    # ───────────────────────────────────────────────────────────────────────────
    # Cart
    # ───────────────────────────────────────────────────────────────────────────

    async def get_cart(self) -> list[CartItemRecord]:
        data = await self._send("GET", "/api/cart")
        return [CartItemRecord.model_validate(item) for item in data or []]

    # ───────────────────────────────────────────────────────────────────────────
    # Orders
    # ───────────────────────────────────────────────────────────────────────────

    async def place_order(self, address_id: object) -> OrderReceipt:
        """Create an order for the cart against the given address."""
        number = _address_id(address_id)
        logger.info("placing_order", address_id=number)
        data = await self._send("POST", "/api/orders/place", {"addressId": number})
        return OrderReceipt.model_validate(data)

    async def cancel_order(self, order_id: int) -> None:
        logger.info("cancelling_order", order_id=order_id)
        await self._send("POST", f"/api/orders/{order_id}/cancel")

    # ───────────────────────────────────────────────────────────────────────────
    # Payments
    # ───────────────────────────────────────────────────────────────────────────

    async def process_payment(
        self,
        order_id: int,
        amount: Decimal,
        payment_method: str,
        details: dict[str, Any],
    ) -> PaymentReceipt:
        payload = {
            "orderId": order_id,
            "amount": _wire_amount(amount),
            "paymentMethod": payment_method,
            **details,
        }
        logger.info(
            "processing_payment",
            order_id=order_id,
            amount=str(amount),
            method=payment_method,
        )
        data = await self._send("POST", "/api/payment/process", payload)
        return PaymentReceipt.model_validate(data or {})

    async def get_payment(self, payment_id: int) -> PaymentRecord:
        data = await self._send("GET", f"/api/payment/{payment_id}")
        return PaymentRecord.model_validate(data)


__all__ = ("ApiError", "MedicartApi")
