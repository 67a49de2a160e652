"""Create and edit stock items."""

from stockroom.application.dto.requests import CreateItemRequest, UpdateItemRequest
from stockroom.application.dto.responses import ItemResponse
from stockroom.config import get_logger
from stockroom.core.entities.inventory import StockItem
from stockroom.core.entities.reference import CurrentUser, ReferenceKind
from stockroom.core.exceptions import ItemNotFoundError, ValidationError
from stockroom.core.interfaces.inventory_store import IItemStore
from stockroom.core.interfaces.reference_resolver import IReferenceResolver
from stockroom.core.services.movement_engine import MovementEngine

logger = get_logger(__name__)


def item_to_response(item: StockItem) -> ItemResponse:
    """Convert a stock item to its API shape."""
    return ItemResponse(
        id=item.id,  # type: ignore[arg-type]
        name=item.name,
        description=item.description,
        sku=item.sku,
        barcode=item.barcode,
        category=item.category,
        location=item.location,
        unit_price=item.unit_price,
        quantity=item.quantity,
        min_quantity=item.min_quantity,
        max_quantity=item.max_quantity,
        total_value=round(item.total_value, 2),
        is_low_stock=item.is_low_stock,
        is_active=item.is_active,
        created_at=item.created_at,
        updated_at=item.updated_at,
    )


def _check_thresholds(min_quantity: int | None, max_quantity: int | None) -> None:
    if min_quantity is not None and max_quantity is not None and min_quantity > max_quantity:
        raise ValidationError(
            "min_quantity",
            f"must not exceed max_quantity ({max_quantity})",
            min_quantity,
        )


class CreateItemUseCase:
    """
    Create a stock item, resolving category and location by name.

    The item and its opening stock movement are written in one
    transaction by the movement engine, so on-hand stock always matches
    the movement history.
    """

    def __init__(
        self,
        item_store: IItemStore,
        resolver: IReferenceResolver,
        engine: MovementEngine,
    ):
        self._item_store = item_store
        self._resolver = resolver
        self._engine = engine

    async def execute(
        self,
        request: CreateItemRequest,
        current_user: CurrentUser | None = None,
    ) -> StockItem:
        """Execute create item use case."""
        _check_thresholds(request.min_quantity, request.max_quantity)

        refs = await self._resolver.resolve_many({
            ReferenceKind.CATEGORY: request.category,
            ReferenceKind.LOCATION: request.location,
        })

        item = StockItem(
            name=request.name,
            description=request.description,
            sku=request.sku,
            barcode=request.barcode,
            unit_price=request.unit_price,
            quantity=0,
            min_quantity=request.min_quantity,
            max_quantity=request.max_quantity,
            category_id=refs[ReferenceKind.CATEGORY],
            location_id=refs[ReferenceKind.LOCATION],
            category=request.category,
            created_by=current_user.id if current_user else None,
        )
        created = await self._engine.open_item(self._item_store, item, request.quantity)

        logger.info(
            "create_item_complete",
            item_id=created.id,
            sku=created.sku,
            opening_quantity=request.quantity,
        )

        # Read back joined names
        return await self._item_store.get_item(created.id) or created  # type: ignore[arg-type]

    def to_response(self, result: StockItem) -> ItemResponse:
        return item_to_response(result)


class UpdateItemUseCase:
    """Edit descriptive fields and thresholds of an item."""

    def __init__(self, item_store: IItemStore, resolver: IReferenceResolver):
        self._item_store = item_store
        self._resolver = resolver

    async def execute(self, item_id: int, request: UpdateItemRequest) -> StockItem:
        item = await self._item_store.get_item(item_id)
        if item is None:
            raise ItemNotFoundError(item_id)

        changes = request.model_dump(exclude_unset=True)
        if not changes:
            raise ValidationError("body", "no fields to update")

        if "category" in changes:
            changes["category_id"] = await self._resolver.resolve(
                ReferenceKind.CATEGORY, changes.pop("category")
            )
        if "location" in changes:
            changes["location_id"] = await self._resolver.resolve(
                ReferenceKind.LOCATION, changes.pop("location")
            )
        if changes.get("name", item.name) is None:
            raise ValidationError("name", "cannot be cleared")
        if "is_active" in changes and changes["is_active"] is None:
            changes.pop("is_active")
        if "unit_price" in changes and changes["unit_price"] is None:
            changes["unit_price"] = 0.0

        updated = item.model_copy(update=changes)
        _check_thresholds(updated.min_quantity, updated.max_quantity)

        await self._item_store.update_item(updated)
        logger.info("update_item_complete", item_id=item_id, fields=sorted(changes))
        return await self._item_store.get_item(item_id) or updated

    def to_response(self, result: StockItem) -> ItemResponse:
        return item_to_response(result)
