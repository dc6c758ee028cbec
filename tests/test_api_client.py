"""Gateway client: headers, error bodies, request validation."""

import asyncio
from decimal import Decimal

import httpx
import pytest
from structlog.testing import capture_logs

from medicart.api import AddressRecord, ApiError, MedicartApi
from medicart.session import SessionStore

from conftest import ORDER_PATH, PAYMENT_PATH


class TestHeaders:
    def test_bearer_and_user_id_on_every_request(self, api, gateway, token):
        asyncio.run(api.list_addresses())

        request = gateway.requests[-1]
        assert request.headers["Authorization"] == f"Bearer {token}"
        assert request.headers["X-User-Id"] == "7"
        assert request.headers["Content-Type"] == "application/json"

    def test_anonymous_sends_no_authorization(self, gateway, settings):
        client = MedicartApi(
            SessionStore(), settings, transport=httpx.MockTransport(gateway.handle)
        )

        asyncio.run(client.list_addresses())

        request = gateway.requests[-1]
        assert "Authorization" not in request.headers
        assert "X-User-Id" not in request.headers

    def test_session_changes_are_picked_up(self, api, gateway, sessions):
        sessions.clear()

        asyncio.run(api.get_cart())

        assert "Authorization" not in gateway.requests[-1].headers


class TestErrors:
    def test_error_field_becomes_message(self, api, gateway):
        gateway.respond("POST", ORDER_PATH, 400, {"error": "Insufficient stock"})

        with pytest.raises(ApiError) as info:
            asyncio.run(api.place_order(5))

        assert info.value.status_code == 400
        assert info.value.message == "Insufficient stock"

    def test_message_field_used_when_no_error_field(self, api, gateway):
        gateway.respond("POST", ORDER_PATH, 409, {"message": "Cart changed"})

        with pytest.raises(ApiError) as info:
            asyncio.run(api.place_order(5))

        assert info.value.message == "Cart changed"

    def test_empty_body_gives_empty_message(self, api, gateway):
        gateway.respond("POST", ORDER_PATH, 500)

        with pytest.raises(ApiError) as info:
            asyncio.run(api.place_order(5))

        assert info.value.message == ""

    def test_transport_failure(self, sessions, settings):
        def refuse(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        client = MedicartApi(sessions, settings, transport=httpx.MockTransport(refuse))

        with pytest.raises(ApiError) as info:
            asyncio.run(client.list_addresses())

        assert info.value.status_code is None
        assert info.value.detail == "connection refused"

    def test_401_on_protected_path_is_logged(self, api, gateway):
        gateway.respond("GET", "/api/address", 401, {"error": "Unauthorized"})

        with capture_logs() as logs, pytest.raises(ApiError):
            asyncio.run(api.list_addresses())

        assert any(entry["event"] == "session_expired" for entry in logs)


class TestPlaceOrder:
    @pytest.mark.parametrize(
        ("address_id", "message"),
        [
            (None, "Address ID is required but was not provided"),
            ("", "Address ID is required but was not provided"),
            ("abc", "Invalid address ID format: abc"),
            (0, "Invalid address ID: 0 (must be > 0)"),
            (-3, "Invalid address ID: -3 (must be > 0)"),
        ],
    )
    def test_rejects_bad_address_before_sending(self, api, gateway, address_id, message):
        with pytest.raises(ApiError) as info:
            asyncio.run(api.place_order(address_id))

        assert info.value.message == message
        assert gateway.count("POST", ORDER_PATH) == 0

    def test_sends_numeric_address_id(self, api, gateway):
        order = asyncio.run(api.place_order("5"))

        assert gateway.body("POST", ORDER_PATH) == {"addressId": 5}
        assert order.id == 101
        assert order.order_number == "ORD-101"


class TestProcessPayment:
    def test_payload_merges_details(self, api, gateway):
        receipt = asyncio.run(
            api.process_payment(101, Decimal("708"), "UPI", {"upiId": "john@okhdfcbank"})
        )

        assert gateway.body("POST", PAYMENT_PATH) == {
            "orderId": 101,
            "amount": 708.0,
            "paymentMethod": "UPI",
            "upiId": "john@okhdfcbank",
        }
        assert receipt.payment_id == 55
        assert not receipt.failed

    def test_failed_status(self, api, gateway):
        gateway.respond("POST", PAYMENT_PATH, 200, {"paymentId": 9, "status": "failed"})

        receipt = asyncio.run(api.process_payment(101, Decimal("10"), "UPI", {}))

        assert receipt.failed


class TestAddressRecord:
    def test_display_joins_present_parts(self):
        record = AddressRecord.model_validate({
            "id": 5,
            "addressLine1": "12 MG Road",
            "city": "Pune",
            "pincode": "411001",
            "label": "Home",
        })

        assert record.display == "Home: 12 MG Road, Pune, 411001"

    def test_street_address_preferred_over_line1(self):
        record = AddressRecord.model_validate({
            "id": 2,
            "streetAddress": "4 Park Street",
            "addressLine1": "ignored",
            "state": "WB",
        })

        assert record.display == "4 Park Street, WB"
