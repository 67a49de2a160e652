"""Tests for SQLite stock movement store."""

from datetime import datetime

import pytest

from stockroom.core.entities.filters import MovementFilter
from stockroom.core.entities.inventory import MovementType, StockMovement
from stockroom.core.exceptions import MovementNotFoundError
from stockroom.infrastructure.storage.sqlite import SQLiteMovementStore


@pytest.fixture
def store(pool) -> SQLiteMovementStore:
    return SQLiteMovementStore(pool)


async def _insert(store, **fields) -> StockMovement:
    async with store.transaction() as tx:
        return await store.insert(tx, StockMovement(**fields))


class TestSQLiteMovementStore:
    async def test_details_join_display_names(self, store, seeded, make_item):
        item_id = await make_item(name="Cable")
        movement = await _insert(
            store,
            item_id=item_id,
            movement_type=MovementType.IN,
            quantity=4,
            supplier_id=seeded["supplier_id"],
            location_id=seeded["location_id"],
            created_by=seeded["user_id"],
        )

        details = await store.get_details(movement.id)
        assert details.item_name == "Cable"
        assert details.supplier == "Acme Supply"
        assert details.location == "Main Warehouse"
        assert details.customer is None
        assert details.user_name == "Alice Smith"

    async def test_get_details_missing(self, store):
        assert await store.get_details(12345) is None

    async def test_list_filters(self, store, make_item):
        cable = await make_item(name="Cable")
        pipe = await make_item(name="Pipe")
        await _insert(
            store, item_id=cable, movement_type=MovementType.IN, quantity=1,
            movement_date=datetime(2026, 1, 5), reference_number="PO-1",
        )
        await _insert(
            store, item_id=pipe, movement_type=MovementType.IN, quantity=2,
            movement_date=datetime(2026, 1, 10),
        )
        await _insert(
            store, item_id=cable, movement_type=MovementType.OUT, quantity=1,
            movement_date=datetime(2026, 1, 20), notes="site A",
        )

        everything = await store.list_details(MovementFilter())
        assert [m.quantity for m in everything] == [1, 2, 1]
        assert everything[0].movement_type == MovementType.OUT

        outs = await store.list_details(MovementFilter(movement_type=MovementType.OUT))
        assert len(outs) == 1

        by_item = await store.list_details(MovementFilter(item_id=pipe))
        assert [m.item_name for m in by_item] == ["Pipe"]

        january_first_half = await store.list_details(
            MovementFilter(date_from=datetime(2026, 1, 1), date_to=datetime(2026, 1, 15))
        )
        assert len(january_first_half) == 2

        by_reference = await store.list_details(MovementFilter(search="PO-1"))
        assert len(by_reference) == 1

        by_notes = await store.list_details(MovementFilter(search="site"))
        assert len(by_notes) == 1

        page = await store.list_details(MovementFilter(limit=1, offset=1))
        assert [m.item_name for m in page] == ["Pipe"]

    async def test_update_and_delete_missing_row(self, store):
        with pytest.raises(MovementNotFoundError):
            async with store.transaction() as tx:
                await store.delete(tx, 999)
        with pytest.raises(MovementNotFoundError):
            async with store.transaction() as tx:
                await store.update(
                    tx,
                    StockMovement(id=999, item_id=1, movement_type=MovementType.IN, quantity=1),
                )

    async def test_recent_is_newest_first(self, store, make_item):
        item_id = await make_item()
        first = await _insert(store, item_id=item_id, movement_type=MovementType.IN, quantity=1)
        second = await _insert(store, item_id=item_id, movement_type=MovementType.IN, quantity=2)

        recent = await store.recent(limit=10)
        assert [m.id for m in recent] == [second.id, first.id]
        assert len(await store.recent(limit=1)) == 1
