"""Input validation in MovementEngine. Rejected input never touches the store."""

from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest

from stockroom.core.entities import MovementDetails, MovementType, StockItem, StockMovement
from stockroom.core.entities.reference import ReferenceKind
from stockroom.core.exceptions import (
    DatabaseError,
    MovementNotFoundError,
    ValidationError,
)
from stockroom.core.interfaces import IItemStore, IReferenceResolver, IStockLedger
from stockroom.core.services import MovementEngine
from stockroom.core.services.movement_engine import OPENING_STOCK_NOTE

NOW = datetime(2026, 6, 1, 12, 0, 0)


class FakeTransaction:
    async def __aenter__(self):
        return "tx"

    async def __aexit__(self, *exc):
        return False


@pytest.fixture
def mock_store():
    store = MagicMock()
    store.transaction.return_value = FakeTransaction()
    store.insert = AsyncMock(side_effect=lambda tx, m: m.model_copy(update={"id": 11}))
    store.user_exists = AsyncMock(return_value=True)
    store.get_for_update = AsyncMock()
    store.update = AsyncMock(side_effect=lambda tx, m: m)
    store.delete = AsyncMock()
    store.get_details = AsyncMock(return_value=None)
    return store


@pytest.fixture
def mock_ledger():
    return AsyncMock(spec=IStockLedger)


@pytest.fixture
def mock_resolver():
    resolver = AsyncMock(spec=IReferenceResolver)
    resolver.resolve_many.side_effect = lambda labels: {kind: None for kind in labels}
    resolver.resolve.return_value = None
    return resolver


@pytest.fixture
def engine(mock_store, mock_ledger, mock_resolver):
    return MovementEngine(mock_store, mock_ledger, mock_resolver, clock=lambda: NOW)


class TestPostValidation:
    @pytest.mark.parametrize(
        ("kwargs", "field"),
        [
            ({"item_id": None}, "item_id"),
            ({"item_id": 0}, "item_id"),
            ({"movement_type": "SIDEWAYS"}, "movement_type"),
            ({"movement_type": None}, "movement_type"),
            ({"quantity": 0}, "quantity"),
            ({"quantity": -4}, "quantity"),
            ({"quantity": 2.5}, "quantity"),
            ({"quantity": True}, "quantity"),
            ({"quantity": "ten"}, "quantity"),
            ({"quantity": 2**31}, "quantity"),
            ({"quantity": 2**63}, "quantity"),
            ({"quantity": 1e20}, "quantity"),
            ({"quantity": "99999999999999999999"}, "quantity"),
            ({"created_by": 0}, "created_by"),
            ({"created_by": 2**64}, "created_by"),
            ({"unit_price": -1}, "unit_price"),
            ({"unit_price": "cheap"}, "unit_price"),
            ({"movement_date": "yesterday"}, "movement_date"),
        ],
    )
    async def test_rejected_before_any_write(self, engine, mock_store, mock_ledger, kwargs, field):
        """Bad input raises ValidationError and opens no transaction."""
        args = {"item_id": 1, "movement_type": "IN", "quantity": 5, **kwargs}

        with pytest.raises(ValidationError) as exc_info:
            await engine.post_movement(**args)

        assert exc_info.value.details["field"] == field
        mock_store.transaction.assert_not_called()
        mock_ledger.increase.assert_not_called()
        mock_ledger.decrease.assert_not_called()

    async def test_type_is_case_insensitive(self, engine, mock_ledger):
        result = await engine.post_movement(item_id=1, movement_type=" out ", quantity="3")
        assert result.movement_type == MovementType.OUT
        assert result.quantity == 3
        mock_ledger.decrease.assert_awaited_once_with("tx", 1, 3)

    async def test_defaults_date_to_clock(self, engine):
        result = await engine.post_movement(item_id=1, movement_type="IN", quantity=2)
        assert result.movement_date == NOW
        assert result.total_value is None

    async def test_aware_date_is_normalized_to_utc(self, engine):
        plus_two = timezone(timedelta(hours=2))
        result = await engine.post_movement(
            item_id=1,
            movement_type="IN",
            quantity=2,
            movement_date=datetime(2026, 5, 1, 10, 0, 0, tzinfo=plus_two),
        )
        assert result.movement_date == datetime(2026, 5, 1, 8, 0, 0)

    async def test_z_suffix_is_accepted(self, engine):
        result = await engine.post_movement(
            item_id=1, movement_type="IN", quantity=2, movement_date="2026-05-01T08:00:00Z"
        )
        assert result.movement_date == datetime(2026, 5, 1, 8, 0, 0)

    async def test_total_value_from_price(self, engine):
        result = await engine.post_movement(
            item_id=1, movement_type="IN", quantity=20, unit_price=2.5
        )
        assert result.total_value == 50.0

    async def test_labels_resolved_together(self, engine, mock_resolver):
        await engine.post_movement(
            item_id=1, movement_type="IN", quantity=1, supplier="Acme Supply"
        )
        labels = mock_resolver.resolve_many.await_args[0][0]
        assert labels[ReferenceKind.SUPPLIER] == "Acme Supply"
        assert labels[ReferenceKind.LOCATION] is None

    async def test_enrich_failure_falls_back_to_row(self, engine, mock_store):
        mock_store.get_details.side_effect = DatabaseError("get_details", "boom")
        result = await engine.post_movement(item_id=1, movement_type="IN", quantity=1)
        assert isinstance(result, MovementDetails)

    async def test_unknown_creator_is_rejected_inside_transaction(
        self, engine, mock_store, mock_ledger
    ):
        """A creator id with no user row is a 400, and stock is left alone."""
        mock_store.user_exists.return_value = False

        with pytest.raises(ValidationError) as exc_info:
            await engine.post_movement(item_id=1, movement_type="IN", quantity=1, created_by=999)

        assert exc_info.value.details["field"] == "created_by"
        mock_store.user_exists.assert_awaited_once_with("tx", 999)
        mock_ledger.increase.assert_not_called()
        mock_store.insert.assert_not_called()

    async def test_known_creator_is_recorded(self, engine, mock_store):
        result = await engine.post_movement(
            item_id=1, movement_type="IN", quantity=1, created_by="7"
        )
        mock_store.user_exists.assert_awaited_once_with("tx", 7)
        assert result.created_by == 7
        assert result.id == 11
        assert result.item_name is None


class TestUpdateValidation:
    async def test_empty_patch(self, engine, mock_store):
        with pytest.raises(ValidationError):
            await engine.update_movement(1, {})
        mock_store.transaction.assert_not_called()

    async def test_unknown_field(self, engine, mock_store):
        with pytest.raises(ValidationError) as exc_info:
            await engine.update_movement(1, {"created_by": 4})
        assert exc_info.value.details["field"] == "created_by"
        mock_store.transaction.assert_not_called()

    async def test_date_cannot_be_cleared(self, engine):
        with pytest.raises(ValidationError):
            await engine.update_movement(1, {"movement_date": None})

    async def test_oversized_quantity_edit(self, engine, mock_store):
        with pytest.raises(ValidationError) as exc_info:
            await engine.update_movement(5, {"quantity": 2**63})
        assert exc_info.value.details["field"] == "quantity"
        mock_store.transaction.assert_not_called()

    async def test_missing_movement(self, engine, mock_store):
        mock_store.get_for_update.return_value = None
        with pytest.raises(MovementNotFoundError):
            await engine.update_movement(99, {"quantity": 3})

    async def test_same_item_applies_net_delta(self, engine, mock_store, mock_ledger):
        mock_store.get_for_update.return_value = StockMovement(
            id=5, item_id=1, movement_type=MovementType.IN, quantity=10, unit_price=1.0
        )
        result = await engine.update_movement(5, {"quantity": 4})

        mock_ledger.decrease.assert_awaited_once_with("tx", 1, 6)
        mock_ledger.increase.assert_not_called()
        assert result.total_value == 4.0

    async def test_unchanged_quantity_skips_ledger(self, engine, mock_store, mock_ledger):
        mock_store.get_for_update.return_value = StockMovement(
            id=5, item_id=1, movement_type=MovementType.OUT, quantity=3
        )
        await engine.update_movement(5, {"notes": "recounted"})
        mock_ledger.increase.assert_not_called()
        mock_ledger.decrease.assert_not_called()

    async def test_item_change_reverses_then_applies(self, engine, mock_store, mock_ledger):
        mock_store.get_for_update.return_value = StockMovement(
            id=5, item_id=1, movement_type=MovementType.OUT, quantity=3
        )
        await engine.update_movement(5, {"item_id": 2})

        mock_ledger.increase.assert_awaited_once_with("tx", 1, 3)
        mock_ledger.decrease.assert_awaited_once_with("tx", 2, 3)

    async def test_label_patch_becomes_id(self, engine, mock_store, mock_resolver):
        mock_resolver.resolve.return_value = 7
        mock_store.get_for_update.return_value = StockMovement(
            id=5, item_id=1, movement_type=MovementType.IN, quantity=3
        )
        await engine.update_movement(5, {"location": "Main Warehouse"})

        saved = mock_store.update.await_args[0][1]
        assert saved.location_id == 7


class TestDelete:
    async def test_delete_in_reverses_with_decrease(self, engine, mock_store, mock_ledger):
        mock_store.get_for_update.return_value = StockMovement(
            id=5, item_id=1, movement_type=MovementType.IN, quantity=8
        )
        await engine.delete_movement(5)
        mock_ledger.decrease.assert_awaited_once_with("tx", 1, 8)
        mock_store.delete.assert_awaited_once_with("tx", 5)

    async def test_delete_missing(self, engine, mock_store):
        mock_store.get_for_update.return_value = None
        with pytest.raises(MovementNotFoundError):
            await engine.delete_movement(5)
        mock_store.delete.assert_not_called()


class TestOpenItem:
    @pytest.fixture
    def mock_item_store(self):
        store = AsyncMock(spec=IItemStore)
        store.insert_item.side_effect = lambda tx, item: item.model_copy(
            update={"id": 4, "sku": "GEN-CAB-0004"}
        )
        return store

    async def test_item_and_opening_movement_share_transaction(
        self, engine, mock_store, mock_ledger, mock_item_store
    ):
        item = StockItem(name="Cable", unit_price=2.0, created_by=3)

        created = await engine.open_item(mock_item_store, item, quantity=6)

        assert created.id == 4
        mock_store.transaction.assert_called_once()
        mock_item_store.insert_item.assert_awaited_once()
        assert mock_item_store.insert_item.await_args[0][0] == "tx"
        assert mock_item_store.insert_item.await_args[0][1].quantity == 0
        mock_ledger.increase.assert_awaited_once_with("tx", 4, 6)

        movement = mock_store.insert.await_args[0][1]
        assert movement.item_id == 4
        assert movement.movement_type == MovementType.IN
        assert movement.notes == OPENING_STOCK_NOTE
        assert movement.total_value == 12.0
        assert movement.created_by == 3

    async def test_zero_quantity_inserts_item_only(
        self, engine, mock_store, mock_ledger, mock_item_store
    ):
        await engine.open_item(mock_item_store, StockItem(name="Cable"))
        mock_item_store.insert_item.assert_awaited_once()
        mock_ledger.increase.assert_not_called()
        mock_store.insert.assert_not_called()
        mock_store.user_exists.assert_not_called()

    async def test_unknown_creator_inserts_nothing(self, engine, mock_store, mock_item_store):
        mock_store.user_exists.return_value = False
        with pytest.raises(ValidationError):
            await engine.open_item(mock_item_store, StockItem(name="Cable", created_by=9), 2)
        mock_item_store.insert_item.assert_not_called()

    async def test_oversized_opening_quantity(self, engine, mock_store, mock_item_store):
        with pytest.raises(ValidationError) as exc_info:
            await engine.open_item(mock_item_store, StockItem(name="Cable"), quantity=2**40)
        assert exc_info.value.details["field"] == "quantity"
        mock_store.transaction.assert_not_called()
