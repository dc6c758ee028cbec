"""Cart store: local edits and sync."""

import asyncio
from decimal import Decimal

from kungfu import Error, Ok

from medicart.cart import CartStatus, CartStore, Known, Unknown
from medicart.errors import ErrorCode


class TestLocalEdits:
    def test_adding_same_product_merges(self):
        store = CartStore()
        store.add(10, Known(Decimal("20")), 2)
        store.add(10, Known(Decimal("20")), 1)

        lines = store.snapshot().lines
        assert len(lines) == 1
        assert lines[0].quantity == 3

    def test_decrement_removes_last_unit(self):
        store = CartStore()
        store.add(10, Known(Decimal("20")), 2)

        store.decrement(10)
        assert store.snapshot().lines[0].quantity == 1

        store.decrement(10)
        assert store.is_empty

    def test_increment_and_remove(self):
        store = CartStore()
        store.add(10, Known(Decimal("20")))

        store.increment(10)
        assert store.snapshot().item_count == 2

        assert store.remove(10)
        assert not store.remove(10)

    def test_snapshot_is_immutable_copy(self):
        store = CartStore()
        store.add(10, Known(Decimal("20")))
        before = store.snapshot()

        store.add(11, Known(Decimal("5")))

        assert len(before.lines) == 1


class TestSync:
    def test_sync_replaces_lines(self, api):
        store = CartStore()
        store.add(99, Known(Decimal("1")))

        result = asyncio.run(store.sync(api))

        assert isinstance(result, Ok)
        assert [line.product_id for line in store.snapshot().lines] == [10]
        assert store.status is CartStatus.READY
        assert not store.needs_sync

    def test_missing_price_becomes_unknown(self, api, gateway):
        gateway.respond("GET", "/api/cart", 200, [
            {"medicineId": 10, "price": None, "quantity": 1},
        ])
        store = CartStore()

        asyncio.run(store.sync(api))

        assert store.snapshot().lines[0].unit_price == Unknown()

    def test_failure_keeps_lines_and_status(self, api, gateway):
        gateway.respond("GET", "/api/cart", 500, {"error": "Cart service down"})
        store = CartStore(status=CartStatus.READY)
        store.add(99, Known(Decimal("1")))

        result = asyncio.run(store.sync(api))

        match result:
            case Error(e):
                assert e.code is ErrorCode.CART_SYNC_FAILED
                assert e.message == "Cart service down"
            case Ok(_):
                raise AssertionError("expected a sync failure")
        assert store.status is CartStatus.READY
        assert [line.product_id for line in store.snapshot().lines] == [99]

    def test_ensure_synced_skips_loaded_cart(self, api, gateway):
        store = CartStore(status=CartStatus.READY)
        store.add(99, Known(Decimal("1")))

        asyncio.run(store.ensure_synced(api))

        assert gateway.count("GET", "/api/cart") == 0

    def test_ensure_synced_recovers_after_reload(self, api, gateway):
        store = CartStore()

        asyncio.run(store.ensure_synced(api))

        assert gateway.count("GET", "/api/cart") == 1
        assert not store.is_empty

    def test_clear_resets_status(self, api):
        store = CartStore()
        asyncio.run(store.sync(api))

        store.clear()

        assert store.is_empty
        assert store.status is CartStatus.UNINITIALIZED
        assert store.needs_sync
