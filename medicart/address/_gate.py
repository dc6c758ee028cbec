"""
AddressGate: no payment without a persisted delivery address.
"""

from __future__ import annotations

import structlog
from combinators import lift as L

from medicart._types import Result, Ok, Error, AddressId
from medicart.api import AddressRecord, MedicartApi
from medicart.cart import Cart
from medicart.errors import CheckoutError, ErrorCode, Errors, on_api_error

logger = structlog.get_logger()


def preferred(addresses: tuple[AddressRecord, ...]) -> AddressRecord | None:
    """The default address, else the first, else None."""
    for address in addresses:
        if address.is_default:
            return address
    return addresses[0] if addresses else None


class AddressGate:
    """
    Holds the loaded address list and the current selection.

    Example:
        gate = AddressGate(api)
        await gate.load_addresses()
        if gate.can_proceed(cart.snapshot()):
            ...
    """

    def __init__(self, api: MedicartApi) -> None:
        self._api = api
        self._addresses: tuple[AddressRecord, ...] = ()
        self._selected: AddressId | None = None

    @property
    def addresses(self) -> tuple[AddressRecord, ...]:
        return self._addresses

    @property
    def selected_id(self) -> AddressId | None:
        return self._selected

    @property
    def selected(self) -> AddressRecord | None:
        for address in self._addresses:
            if address.id == self._selected:
                return address
        return None

    async def load_addresses(self) -> Result[tuple[AddressRecord, ...], CheckoutError]:
        """Fetch the user's addresses and pre-select the preferred one."""
        result = await L.catching_async(
            self._api.list_addresses,
            on_error=on_api_error(ErrorCode.ADDRESS_LOAD_FAILED, login_on_401=True),
        )
        match result:
            case Ok(records):
                self._addresses = tuple(records)
                choice = preferred(self._addresses)
                self._selected = choice.id if choice is not None else None
                logger.info(
                    "addresses_loaded",
                    count=len(self._addresses),
                    selected=self._selected,
                )
                return Ok(self._addresses)
            case Error(e):
                logger.warning("addresses_load_failed", code=e.code.name, error=e.message)
                return Error(e)

    def select_address(self, address_id: AddressId) -> Result[AddressId, CheckoutError]:
        if not any(a.id == address_id for a in self._addresses):
            return Error(Errors.address_required())
        self._selected = address_id
        logger.debug("address_selected", address_id=address_id)
        return Ok(address_id)

    def refusal(self, cart: Cart) -> CheckoutError | None:
        """Why the gate is closed, or None when it is open."""
        if not self._addresses or self._selected is None:
            return Errors.address_required()
        if cart.is_empty:
            return Errors.cart_empty()
        return None

    def can_proceed(self, cart: Cart) -> bool:
        return self.refusal(cart) is None


__all__ = ("preferred", "AddressGate")
