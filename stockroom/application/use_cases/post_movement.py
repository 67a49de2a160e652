"""Post Movement Use Case: receipt or issue against one item."""

from stockroom.application.dto.requests import PostMovementRequest
from stockroom.application.dto.responses import MovementResponse
from stockroom.config import get_logger
from stockroom.core.entities.inventory import MovementDetails
from stockroom.core.entities.reference import CurrentUser
from stockroom.core.services.movement_engine import MovementEngine

logger = get_logger(__name__)


def movement_to_response(movement: MovementDetails) -> MovementResponse:
    """Convert an enriched movement to its API shape."""
    return MovementResponse(
        id=movement.id,  # type: ignore[arg-type]
        item_id=movement.item_id,
        item_name=movement.item_name,
        movement_type=movement.movement_type.value,
        quantity=movement.quantity,
        unit_price=movement.unit_price,
        total_value=movement.total_value,
        notes=movement.notes,
        reference_number=movement.reference_number,
        location=movement.location,
        supplier=movement.supplier,
        customer=movement.customer,
        user_name=movement.user_name,
        movement_date=movement.movement_date,
        created_by=movement.created_by,
        created_at=movement.created_at,
        updated_at=movement.updated_at,
    )


class PostMovementUseCase:
    """Post a stock movement on behalf of the current user."""

    def __init__(self, engine: MovementEngine):
        self._engine = engine

    async def execute(
        self,
        request: PostMovementRequest,
        current_user: CurrentUser | None = None,
    ) -> MovementDetails:
        """Execute post movement use case."""
        logger.info(
            "post_movement_started",
            item_id=request.item_id,
            type=request.movement_type,
            quantity=request.quantity,
        )

        created_by = request.created_by
        if created_by is None and current_user is not None:
            created_by = current_user.id

        return await self._engine.post_movement(
            item_id=request.item_id,
            movement_type=request.movement_type,
            quantity=request.quantity,
            unit_price=request.unit_price,
            notes=request.notes,
            reference_number=request.reference_number,
            location=request.location,
            supplier=request.supplier,
            customer=request.customer,
            movement_date=request.movement_date,
            created_by=created_by,
        )

    def to_response(self, result: MovementDetails) -> MovementResponse:
        """Convert result to API response."""
        return movement_to_response(result)
