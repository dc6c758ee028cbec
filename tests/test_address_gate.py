"""Address selection gate."""

import asyncio
from decimal import Decimal

from kungfu import Error, Ok

from medicart.address import AddressGate
from medicart.cart import Cart, CartLine, CartStatus, Known
from medicart.errors import LOGIN_REQUIRED, ErrorCode

FULL_CART = Cart(
    lines=(CartLine(10, Known(Decimal("200")), 3),),
    status=CartStatus.READY,
)
EMPTY_CART = Cart(status=CartStatus.READY)


class TestLoad:
    def test_default_address_is_preselected(self, api):
        gate = AddressGate(api)

        result = asyncio.run(gate.load_addresses())

        assert isinstance(result, Ok)
        assert [a.id for a in gate.addresses] == [5, 2]
        assert gate.selected_id == 5

    def test_first_address_when_none_is_default(self, api, gateway):
        gateway.respond("GET", "/api/address", 200, [
            {"id": 8, "isDefault": False},
            {"id": 3, "isDefault": False},
        ])
        gate = AddressGate(api)

        asyncio.run(gate.load_addresses())

        assert gate.selected_id == 8

    def test_empty_list_selects_nothing(self, api, gateway):
        gateway.respond("GET", "/api/address", 200, [])
        gate = AddressGate(api)

        asyncio.run(gate.load_addresses())

        assert gate.selected_id is None
        assert not gate.can_proceed(FULL_CART)

    def test_unauthorized_asks_for_login(self, api, gateway):
        gateway.respond("GET", "/api/address", 401, {"error": "Token expired"})
        gate = AddressGate(api)

        result = asyncio.run(gate.load_addresses())

        match result:
            case Error(e):
                assert e.code is ErrorCode.UNAUTHORIZED
                assert e.message == LOGIN_REQUIRED
            case Ok(_):
                raise AssertionError("expected a login error")

    def test_failure_keeps_previous_state(self, api, gateway):
        gate = AddressGate(api)
        asyncio.run(gate.load_addresses())
        gateway.respond("GET", "/api/address", 503, {"error": "Address service down"})

        result = asyncio.run(gate.load_addresses())

        match result:
            case Error(e):
                assert e.code is ErrorCode.ADDRESS_LOAD_FAILED
                assert e.message == "Address service down"
            case Ok(_):
                raise AssertionError("expected a load failure")
        assert gate.selected_id == 5
        assert len(gate.addresses) == 2


class TestSelection:
    def test_select_loaded_address(self, api):
        gate = AddressGate(api)
        asyncio.run(gate.load_addresses())

        result = gate.select_address(2)

        assert isinstance(result, Ok)
        assert result.value == 2
        assert gate.selected_id == 2
        assert gate.selected is not None
        assert gate.selected.city == "Kolkata"

    def test_unknown_id_is_refused(self, api):
        gate = AddressGate(api)
        asyncio.run(gate.load_addresses())

        result = gate.select_address(99)

        assert isinstance(result, Error)
        assert gate.selected_id == 5


class TestCanProceed:
    def test_open_with_address_and_items(self, api):
        gate = AddressGate(api)
        asyncio.run(gate.load_addresses())

        assert gate.can_proceed(FULL_CART)
        assert gate.refusal(FULL_CART) is None

    def test_closed_for_empty_cart(self, api):
        gate = AddressGate(api)
        asyncio.run(gate.load_addresses())

        refusal = gate.refusal(EMPTY_CART)

        assert not gate.can_proceed(EMPTY_CART)
        assert refusal is not None
        assert refusal.code is ErrorCode.CART_EMPTY

    def test_closed_before_addresses_load(self, api):
        gate = AddressGate(api)

        refusal = gate.refusal(FULL_CART)

        assert refusal is not None
        assert refusal.code is ErrorCode.ADDRESS_REQUIRED
        assert refusal.message == "Please select a delivery address"
