"""
CartStore: the session's cart.

Mutated only by the cart operations below and by the checkout flow's
success transition (``clear``). Readers take immutable ``Cart`` snapshots.
"""

from __future__ import annotations

import asyncio

import structlog
from combinators import lift as L

from medicart._types import Result, Ok, Error, ProductId
from medicart.api import CartItemRecord, MedicartApi
from medicart.errors import CheckoutError, ErrorCode, on_api_error
from medicart.cart._types import Cart, CartLine, CartStatus, Price, price_of

logger = structlog.get_logger()


def _line_from(record: CartItemRecord) -> CartLine:
    return CartLine(
        product_id=record.medicine_id,
        unit_price=price_of(record.price),
        quantity=max(record.quantity, 1),
        name=record.medicine_name or "",
    )


class CartStore:
    """
    Example:
        store = CartStore()
        await store.ensure_synced(api)
        snapshot = store.snapshot()
    """

    def __init__(
        self,
        lines: tuple[CartLine, ...] = (),
        status: CartStatus = CartStatus.UNINITIALIZED,
    ) -> None:
        self._lines: dict[ProductId, CartLine] = {}
        for line in lines:
            self._merge(line)
        self._status = status
        self._synced = False
        self._lock = asyncio.Lock()

    # ───────────────────────────────────────────────────────────────────────────
    # Reads
    # ───────────────────────────────────────────────────────────────────────────

    @property
    def status(self) -> CartStatus:
        return self._status

    @property
    def is_empty(self) -> bool:
        return not self._lines

    @property
    def needs_sync(self) -> bool:
        if self._status is CartStatus.UNINITIALIZED:
            return True
        return self.is_empty and not self._synced

    def snapshot(self) -> Cart:
        return Cart(lines=tuple(self._lines.values()), status=self._status)

    # ───────────────────────────────────────────────────────────────────────────
    # Local mutations
    # ───────────────────────────────────────────────────────────────────────────

    def _merge(self, line: CartLine) -> None:
        existing = self._lines.get(line.product_id)
        if existing is not None:
            line = CartLine(
                product_id=line.product_id,
                unit_price=line.unit_price,
                quantity=existing.quantity + line.quantity,
                name=line.name or existing.name,
            )
        self._lines[line.product_id] = line

    def add(
        self, product_id: ProductId, price: Price, quantity: int = 1, name: str = ""
    ) -> CartLine:
        """Add a product; an existing product's quantity is increased."""
        self._merge(CartLine(product_id, price, quantity, name))
        return self._lines[product_id]

    def increment(self, product_id: ProductId) -> CartLine | None:
        line = self._lines.get(product_id)
        if line is None:
            return None
        self._lines[product_id] = CartLine(
            line.product_id, line.unit_price, line.quantity + 1, line.name
        )
        return self._lines[product_id]

    def decrement(self, product_id: ProductId) -> CartLine | None:
        """Decrease quantity; the line is removed instead of dropping below 1."""
        line = self._lines.get(product_id)
        if line is None:
            return None
        if line.quantity <= 1:
            del self._lines[product_id]
            return None
        self._lines[product_id] = CartLine(
            line.product_id, line.unit_price, line.quantity - 1, line.name
        )
        return self._lines[product_id]

    def remove(self, product_id: ProductId) -> bool:
        return self._lines.pop(product_id, None) is not None

    def clear(self) -> None:
        self._lines.clear()
        self._status = CartStatus.UNINITIALIZED
        self._synced = False
        logger.info("cart_cleared")

    # ───────────────────────────────────────────────────────────────────────────
    # Sync
    # ───────────────────────────────────────────────────────────────────────────

    async def sync(self, api: MedicartApi) -> Result[Cart, CheckoutError]:
        """Replace local lines with the cart service's view."""
        async with self._lock:
            previous = self._status
            self._status = CartStatus.SYNCING
            result = await L.catching_async(
                api.get_cart,
                on_error=on_api_error(ErrorCode.CART_SYNC_FAILED, login_on_401=True),
            )
            match result:
                case Ok(records):
                    try:
                        lines = [_line_from(r) for r in records]
                    except ValueError as e:
                        self._status = previous
                        logger.warning("cart_sync_rejected", error=str(e))
                        return Error(
                            CheckoutError(ErrorCode.CART_SYNC_FAILED, str(e))
                        )
                    self._lines.clear()
                    for line in lines:
                        self._merge(line)
                    self._status = CartStatus.READY
                    self._synced = True
                    logger.debug("cart_synced", lines=len(self._lines))
                    return Ok(self.snapshot())
                case Error(e):
                    self._status = previous
                    logger.warning("cart_sync_failed", error=e.message)
                    return Error(e)

    async def ensure_synced(self, api: MedicartApi) -> Result[Cart, CheckoutError]:
        """Sync only when the cart was never loaded (e.g. after a reload)."""
        if self.needs_sync:
            return await self.sync(api)
        return Ok(self.snapshot())


__all__ = ("CartStore",)
