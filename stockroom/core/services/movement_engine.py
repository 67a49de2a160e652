"""
Movement Engine.

Posts, edits and deletes stock movements. Every write runs in one store
transaction together with the matching stock ledger change, so an item's
quantity always equals the sum of its movements' signed quantities.
"""

from collections.abc import Callable
from datetime import datetime
from typing import Any

from stockroom.config import get_logger
from stockroom.core.clock import to_naive_utc, utc_now
from stockroom.core.entities.filters import MovementFilter
from stockroom.core.entities.inventory import (
    MovementDetails,
    MovementType,
    StockItem,
    StockMovement,
    compute_total_value,
)
from stockroom.core.entities.reference import ReferenceKind
from stockroom.core.exceptions import MovementNotFoundError, StockroomError, ValidationError
from stockroom.core.interfaces.inventory_store import IItemStore, IMovementStore, IStockLedger
from stockroom.core.interfaces.reference_resolver import IReferenceResolver

logger = get_logger(__name__)

OPENING_STOCK_NOTE = "Opening stock"

# Largest value an INTEGER column holds
SQLITE_MAX_INTEGER = 2**63 - 1

# Largest quantity a single movement may carry
MAX_QUANTITY = 2**31 - 1

# Fields an edit may change; labels are resolved to ids
EDITABLE_FIELDS = frozenset({
    "item_id",
    "movement_type",
    "quantity",
    "unit_price",
    "notes",
    "reference_number",
    "location",
    "supplier",
    "customer",
    "movement_date",
})

_LABEL_FIELDS = {
    "location": ReferenceKind.LOCATION,
    "supplier": ReferenceKind.SUPPLIER,
    "customer": ReferenceKind.CUSTOMER,
}


def _positive_int(field: str, value: Any, maximum: int = SQLITE_MAX_INTEGER) -> int:
    if isinstance(value, bool):
        raise ValidationError(field, "must be a positive integer", value)
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    elif isinstance(value, str) and value.strip().isdigit():
        value = int(value.strip())
    if not isinstance(value, int) or value <= 0:
        raise ValidationError(field, "must be a positive integer", value)
    if value > maximum:
        raise ValidationError(field, f"must not exceed {maximum}", value)
    return value


def _movement_type(value: Any) -> MovementType:
    if isinstance(value, MovementType):
        return value
    if isinstance(value, str):
        try:
            return MovementType(value.strip().upper())
        except ValueError:
            pass
    raise ValidationError("movement_type", "must be IN or OUT", value)


def _unit_price(value: Any) -> float | None:
    if value is None:
        return None
    if isinstance(value, bool):
        raise ValidationError("unit_price", "must be a non-negative number", value)
    try:
        price = float(value)
    except (TypeError, ValueError):
        raise ValidationError("unit_price", "must be a non-negative number", value) from None
    if price < 0:
        raise ValidationError("unit_price", "must be a non-negative number", value)
    return price


def _movement_date(value: Any) -> datetime | None:
    if value is None:
        return None
    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            raise ValidationError("movement_date", "must be an ISO-8601 timestamp", value) from None
    if not isinstance(value, datetime):
        raise ValidationError("movement_date", "must be an ISO-8601 timestamp", value)
    return to_naive_utc(value).replace(microsecond=0)


class MovementEngine:
    """
    Transactional writer for stock movements.

    Edits and deletes reverse the stored movement's effect on its item and
    apply the new one inside the same transaction; if any item would go
    negative the whole change is rejected.
    """

    def __init__(
        self,
        movement_store: IMovementStore,
        ledger: IStockLedger,
        resolver: IReferenceResolver,
        clock: Callable[[], datetime] = utc_now,
    ):
        self._store = movement_store
        self._ledger = ledger
        self._resolver = resolver
        self._clock = clock

    async def post_movement(
        self,
        *,
        item_id: Any,
        movement_type: Any,
        quantity: Any,
        unit_price: Any = None,
        notes: str | None = None,
        reference_number: str | None = None,
        location: str | None = None,
        supplier: str | None = None,
        customer: str | None = None,
        movement_date: Any = None,
        created_by: int | None = None,
    ) -> MovementDetails:
        """
        Validate, post and return the enriched movement.

        Raises:
            ValidationError: bad input, nothing written
            ItemNotFoundError: unknown item, nothing written
            InsufficientStockError: OUT larger than on-hand, nothing written
        """
        if item_id is None:
            raise ValidationError("item_id", "is required")
        item_id = _positive_int("item_id", item_id)
        mtype = _movement_type(movement_type)
        qty = _positive_int("quantity", quantity, MAX_QUANTITY)
        price = _unit_price(unit_price)
        when = _movement_date(movement_date) or self._clock()
        if created_by is not None:
            created_by = _positive_int("created_by", created_by)

        refs = await self._resolver.resolve_many({
            ReferenceKind.LOCATION: location,
            ReferenceKind.SUPPLIER: supplier,
            ReferenceKind.CUSTOMER: customer,
        })

        movement = StockMovement(
            item_id=item_id,
            movement_type=mtype,
            quantity=qty,
            unit_price=price,
            total_value=compute_total_value(qty, price),
            notes=notes,
            reference_number=reference_number,
            location_id=refs[ReferenceKind.LOCATION],
            supplier_id=refs[ReferenceKind.SUPPLIER],
            customer_id=refs[ReferenceKind.CUSTOMER],
            movement_date=when,
            created_by=created_by,
        )

        async with self._store.transaction() as tx:
            await self._check_creator(tx, created_by)
            new_quantity = await self._apply(tx, item_id, movement.signed_quantity)
            movement = await self._store.insert(tx, movement)

        logger.info(
            "movement_posted",
            movement_id=movement.id,
            item_id=item_id,
            type=mtype.value,
            quantity=qty,
            on_hand=new_quantity,
        )
        return await self._enriched(movement)

    async def open_item(
        self,
        item_store: IItemStore,
        item: StockItem,
        quantity: Any = 0,
    ) -> StockItem:
        """
        Create an item and receive its opening stock in one transaction.

        The item row is stored empty and any opening quantity is posted as an
        IN movement, so a failure leaves neither the item nor the movement.

        Raises:
            ValidationError: bad quantity or unknown creator, nothing written
            ConflictError: duplicate SKU or barcode, nothing written
        """
        qty = 0 if quantity in (None, 0) else _positive_int("quantity", quantity, MAX_QUANTITY)
        created_by = item.created_by
        if created_by is not None:
            created_by = _positive_int("created_by", created_by)
        item = item.model_copy(update={"quantity": 0})

        async with self._store.transaction() as tx:
            await self._check_creator(tx, created_by)
            created = await item_store.insert_item(tx, item)
            if qty:
                await self._ledger.increase(tx, created.id, qty)  # type: ignore[arg-type]
                await self._store.insert(
                    tx,
                    StockMovement(
                        item_id=created.id,  # type: ignore[arg-type]
                        movement_type=MovementType.IN,
                        quantity=qty,
                        unit_price=item.unit_price,
                        total_value=compute_total_value(qty, item.unit_price),
                        notes=OPENING_STOCK_NOTE,
                        movement_date=self._clock(),
                        created_by=created_by,
                    ),
                )

        logger.info("item_opened", item_id=created.id, sku=created.sku, opening_quantity=qty)
        return created

    async def update_movement(self, movement_id: int, patch: dict[str, Any]) -> MovementDetails:
        """
        Edit a movement and move the item quantities by the exact difference.

        Raises:
            ValidationError: empty patch, unknown field or bad value
            MovementNotFoundError: no such movement
            InsufficientStockError: the edit would drive an item negative
        """
        if not patch:
            raise ValidationError("patch", "no fields to update")
        unknown = sorted(set(patch) - EDITABLE_FIELDS)
        if unknown:
            raise ValidationError(unknown[0], "field cannot be updated", patch[unknown[0]])

        changes = await self._validated_changes(patch)

        async with self._store.transaction() as tx:
            current = await self._store.get_for_update(tx, movement_id)
            if current is None:
                raise MovementNotFoundError(movement_id)

            updated = current.model_copy(update=changes)
            updated.total_value = compute_total_value(updated.quantity, updated.unit_price)

            if updated.item_id == current.item_id:
                await self._apply(
                    tx, current.item_id, updated.signed_quantity - current.signed_quantity
                )
            else:
                await self._apply(tx, current.item_id, -current.signed_quantity)
                await self._apply(tx, updated.item_id, updated.signed_quantity)

            updated = await self._store.update(tx, updated)

        logger.info(
            "movement_updated",
            movement_id=movement_id,
            fields=sorted(patch),
            item_id=updated.item_id,
        )
        return await self._enriched(updated)

    async def delete_movement(self, movement_id: int) -> None:
        """
        Delete a movement and reverse its effect on the item.

        Deleting an IN requires the item to still hold that quantity.
        """
        async with self._store.transaction() as tx:
            current = await self._store.get_for_update(tx, movement_id)
            if current is None:
                raise MovementNotFoundError(movement_id)

            await self._apply(tx, current.item_id, -current.signed_quantity)
            await self._store.delete(tx, movement_id)

        logger.info(
            "movement_deleted",
            movement_id=movement_id,
            item_id=current.item_id,
            reversed=-current.signed_quantity,
        )

    async def get_movement(self, movement_id: int) -> MovementDetails:
        movement = await self._store.get_details(movement_id)
        if movement is None:
            raise MovementNotFoundError(movement_id)
        return movement

    async def list_movements(self, filters: MovementFilter | None = None) -> list[MovementDetails]:
        return await self._store.list_details(filters or MovementFilter())

    async def recent_movements(self, limit: int = 10) -> list[MovementDetails]:
        return await self._store.recent(limit)

    async def _check_creator(self, tx: Any, created_by: int | None) -> None:
        if created_by is not None and not await self._store.user_exists(tx, created_by):
            raise ValidationError("created_by", "unknown user", created_by)

    async def _apply(self, tx: Any, item_id: int, delta: int) -> int | None:
        """Route a signed quantity change to the ledger."""
        if delta > 0:
            return await self._ledger.increase(tx, item_id, delta)
        if delta < 0:
            return await self._ledger.decrease(tx, item_id, -delta)
        return None

    async def _validated_changes(self, patch: dict[str, Any]) -> dict[str, Any]:
        changes: dict[str, Any] = {}
        for field, value in patch.items():
            if field == "item_id":
                changes["item_id"] = _positive_int("item_id", value)
            elif field == "movement_type":
                changes["movement_type"] = _movement_type(value)
            elif field == "quantity":
                changes["quantity"] = _positive_int("quantity", value, MAX_QUANTITY)
            elif field == "unit_price":
                changes["unit_price"] = _unit_price(value)
            elif field == "movement_date":
                if value is None:
                    raise ValidationError("movement_date", "cannot be cleared")
                changes["movement_date"] = _movement_date(value)
            elif field in _LABEL_FIELDS:
                changes[f"{field}_id"] = await self._resolver.resolve(_LABEL_FIELDS[field], value)
            else:
                changes[field] = value
        return changes

    async def _enriched(self, movement: StockMovement) -> MovementDetails:
        """Read back with display names; fall back to the bare row."""
        try:
            details = await self._store.get_details(movement.id)  # type: ignore[arg-type]
        except StockroomError as e:
            logger.warning("movement_enrich_failed", movement_id=movement.id, error=str(e))
            details = None
        return details or MovementDetails(**movement.model_dump())
