"""
Checkout context: the cart, its valuation and the chosen address, built once
when the user leaves the order summary and carried through every payment step.

    cart snapshot ──► valuation ──┐
    address selection ────────────┴──► CheckoutContextNode

Nodes carry Results instead of raising so one failing branch does not hide
the others.
"""

from dataclasses import dataclass
from functools import cache

import structlog

from medicart import graph as G
from medicart._types import Result, Ok, Error, AddressId
from medicart.address import AddressGate
from medicart.api import MedicartApi
from medicart.cart import Cart, CartStore, ValuationResult, valuate
from medicart.errors import CheckoutError, Errors

logger = structlog.get_logger()


@dataclass(frozen=True, slots=True)
class CheckoutContext:
    selected_address_id: AddressId
    cart: Cart
    valuation: ValuationResult


# ═══════════════════════════════════════════════════════════════════════════════
# Nodes
# ═══════════════════════════════════════════════════════════════════════════════


@G.node
class CartSnapshotNode:
    """Cart after recovering from a reload, if one happened."""

    def __init__(self, result: Result[Cart, CheckoutError]) -> None:
        self.result = result

    @classmethod
    async def __compose__(cls, store: CartStore, api: MedicartApi) -> "CartSnapshotNode":
        return cls(await store.ensure_synced(api))


@G.node
class ValuationNode:
    def __init__(self, valuation: ValuationResult | None) -> None:
        self.valuation = valuation

    @classmethod
    def __compose__(cls, snapshot: CartSnapshotNode) -> "ValuationNode":
        match snapshot.result:
            case Ok(cart):
                return cls(valuate(cart.lines))
            case Error(_):
                return cls(None)


@G.node
class AddressSelectionNode:
    def __init__(self, address_id: AddressId | None) -> None:
        self.address_id = address_id

    @classmethod
    def __compose__(cls, gate: AddressGate) -> "AddressSelectionNode":
        return cls(gate.selected_id)


@G.node
class CheckoutContextNode:
    def __init__(self, result: Result[CheckoutContext, CheckoutError]) -> None:
        self.result = result

    @classmethod
    def __compose__(
        cls,
        snapshot: CartSnapshotNode,
        valuation: ValuationNode,
        address: AddressSelectionNode,
        gate: AddressGate,
    ) -> "CheckoutContextNode":
        match snapshot.result:
            case Error(e):
                return cls(Error(e))
            case Ok(cart):
                pass

        refusal = gate.refusal(cart)
        if refusal is not None:
            return cls(Error(refusal))
        if address.address_id is None or valuation.valuation is None:
            return cls(Error(Errors.address_required()))
        if not valuation.valuation.is_complete:
            return cls(Error(Errors.validation(
                "Some items in your cart have no price yet. Please refresh your cart."
            )))

        return cls(Ok(CheckoutContext(
            selected_address_id=address.address_id,
            cart=cart,
            valuation=valuation.valuation,
        )))


# ═══════════════════════════════════════════════════════════════════════════════
# Entry point
# ═══════════════════════════════════════════════════════════════════════════════


@cache
def _context_graph() -> G.Graph[CheckoutContextNode]:
    return G.graph(CheckoutContextNode)


async def build_context(
    store: CartStore, gate: AddressGate, api: MedicartApi
) -> Result[CheckoutContext, CheckoutError]:
    node = await _context_graph()({
        CartStore: store,
        AddressGate: gate,
        MedicartApi: api,
    })
    match node.result:
        case Ok(context):
            logger.debug(
                "context_built",
                address_id=context.selected_address_id,
                total=str(context.valuation.total),
            )
        case Error(e):
            logger.info("context_refused", code=e.code.name, error=e.message)
    return node.result


__all__ = (
    "CheckoutContext",
    "CartSnapshotNode",
    "ValuationNode",
    "AddressSelectionNode",
    "CheckoutContextNode",
    "build_context",
)
