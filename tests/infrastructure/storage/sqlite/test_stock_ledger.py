"""Tests for the SQLite stock ledger."""

import pytest

from stockroom.core.exceptions import InsufficientStockError, ItemNotFoundError, ValidationError
from stockroom.infrastructure.storage.sqlite import SQLiteStockLedger


@pytest.fixture
def ledger() -> SQLiteStockLedger:
    return SQLiteStockLedger()


class TestStockLedger:
    async def test_increase_returns_new_quantity(self, pool, ledger, make_item, quantity_of):
        item_id = await make_item(quantity=5)
        async with pool.transaction() as tx:
            assert await ledger.increase(tx, item_id, 20) == 25
        assert await quantity_of(item_id) == 25

    async def test_decrease_within_stock(self, pool, ledger, make_item, quantity_of):
        item_id = await make_item(quantity=10)
        async with pool.transaction() as tx:
            assert await ledger.decrease(tx, item_id, 10) == 0
        assert await quantity_of(item_id) == 0

    async def test_decrease_beyond_stock_reports_available(
        self, pool, ledger, make_item, quantity_of
    ):
        item_id = await make_item(quantity=3)
        with pytest.raises(InsufficientStockError) as exc_info:
            async with pool.transaction() as tx:
                await ledger.decrease(tx, item_id, 4)

        assert exc_info.value.available == 3
        assert exc_info.value.requested == 4
        assert "Available: 3, Requested: 4" in exc_info.value.message
        assert await quantity_of(item_id) == 3

    async def test_missing_item(self, pool, ledger):
        with pytest.raises(ItemNotFoundError):
            async with pool.transaction() as tx:
                await ledger.increase(tx, 999, 1)
        with pytest.raises(ItemNotFoundError):
            async with pool.transaction() as tx:
                await ledger.decrease(tx, 999, 1)

    @pytest.mark.parametrize("amount", [0, -1, True, 1.5])
    async def test_amount_must_be_positive_integer(self, pool, ledger, make_item, amount):
        item_id = await make_item(quantity=10)
        with pytest.raises(ValidationError):
            async with pool.transaction() as tx:
                await ledger.increase(tx, item_id, amount)

    async def test_rollback_discards_change(self, pool, ledger, make_item, quantity_of):
        item_id = await make_item(quantity=5)
        with pytest.raises(RuntimeError):
            async with pool.transaction() as tx:
                await ledger.increase(tx, item_id, 5)
                raise RuntimeError("boom")
        assert await quantity_of(item_id) == 5
