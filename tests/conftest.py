"""Shared fixtures: a fake gateway behind httpx.MockTransport."""

import asyncio
import base64
import json
from collections.abc import Callable
from datetime import datetime
from typing import Any

import httpx
import pytest

from medicart.address import AddressGate
from medicart.api import MedicartApi
from medicart.cart import CartStore
from medicart.config import Settings
from medicart.saga import Compensation
from medicart.session import SessionStore
from medicart.checkout import PaymentFlow

ORDER_PATH = "/api/orders/place"
PAYMENT_PATH = "/api/payment/process"

NOW = datetime(2026, 10, 18, 12, 0, 0)


def make_token(claims: dict[str, Any]) -> str:
    """Unsigned JWT carrying the given claims."""

    def part(data: dict[str, Any]) -> str:
        raw = json.dumps(data).encode()
        return base64.urlsafe_b64encode(raw).decode().rstrip("=")

    return f"{part({'alg': 'HS256'})}.{part(claims)}.signature"


class FakeGateway:
    """
    Canned responses keyed by (method, path); records every request.

    ``hold(path)`` parks requests to ``path`` until ``release(path)``.
    """

    def __init__(self) -> None:
        self.routes: dict[tuple[str, str], tuple[int, Any]] = {
            ("GET", "/api/address"): (200, [
                {"id": 5, "isDefault": True, "addressLine1": "12 MG Road", "city": "Pune"},
                {"id": 2, "isDefault": False, "addressLine1": "4 Park Street", "city": "Kolkata"},
            ]),
            ("GET", "/api/cart"): (200, [
                {"id": 1, "medicineId": 10, "medicineName": "Paracetamol", "price": 200, "quantity": 3},
            ]),
            ("POST", ORDER_PATH): (200, {"id": 101, "orderNumber": "ORD-101", "status": "PENDING"}),
            ("POST", PAYMENT_PATH): (200, {
                "paymentId": 55,
                "transactionId": "TXN-55",
                "status": "SUCCESS",
                "message": "Payment successful",
            }),
            ("GET", "/api/payment/55"): (200, {
                "id": 55,
                "orderId": 101,
                "amount": 708.0,
                "paymentMethod": "UPI",
                "paymentStatus": "SUCCESS",
                "transactionId": "TXN-55",
            }),
            ("POST", "/api/orders/101/cancel"): (200, {"id": 101, "status": "CANCELLED"}),
        }
        self.requests: list[httpx.Request] = []
        self._holds: dict[str, asyncio.Event] = {}
        self._entered: dict[str, asyncio.Event] = {}

    def respond(self, method: str, path: str, status: int, body: Any = None) -> None:
        self.routes[(method, path)] = (status, body)

    def count(self, method: str, path: str) -> int:
        return sum(
            1 for r in self.requests if r.method == method and r.url.path == path
        )

    def body(self, method: str, path: str) -> dict[str, Any]:
        """JSON body of the last matching request."""
        for request in reversed(self.requests):
            if request.method == method and request.url.path == path:
                return json.loads(request.content)
        raise AssertionError(f"no {method} {path} request")

    def hold(self, path: str) -> asyncio.Event:
        """Park requests to ``path``; returns an event set once one arrives."""
        self._holds[path] = asyncio.Event()
        self._entered[path] = asyncio.Event()
        return self._entered[path]

    def release(self, path: str) -> None:
        self._holds[path].set()

    async def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        if path in self._entered:
            self._entered[path].set()
        if path in self._holds:
            await self._holds[path].wait()
        status, body = self.routes.get(
            (request.method, path), (404, {"error": f"No route for {path}"})
        )
        if body is None:
            return httpx.Response(status)
        return httpx.Response(status, json=body)


@pytest.fixture
def gateway() -> FakeGateway:
    return FakeGateway()


@pytest.fixture
def settings() -> Settings:
    return Settings(api_base_url="http://gateway.test", compensation="skip")


@pytest.fixture
def token() -> str:
    return make_token({"sub": "asha@example.com", "userId": 7, "scope": "ROLE_USER"})


@pytest.fixture
def sessions(token: str) -> SessionStore:
    store = SessionStore()
    store.start(token, user_id=7, role="ROLE_USER")
    return store


@pytest.fixture
def api(gateway: FakeGateway, sessions: SessionStore, settings: Settings) -> MedicartApi:
    return MedicartApi(sessions, settings, transport=httpx.MockTransport(gateway.handle))


@pytest.fixture
def make_flow(api: MedicartApi) -> Callable[..., Any]:
    """Build (flow, store, gate) with addresses loaded, as the summary page does."""

    async def build(
        compensation: Compensation = Compensation.SKIP,
        store: CartStore | None = None,
    ) -> tuple[PaymentFlow, CartStore, AddressGate]:
        cart = store or CartStore()
        gate = AddressGate(api)
        await gate.load_addresses()
        flow = PaymentFlow(api, cart, gate, compensation=compensation, clock=lambda: NOW)
        return flow, cart, gate

    return build
