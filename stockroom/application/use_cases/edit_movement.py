"""Edit and delete movements, keeping item quantities reconciled."""

from stockroom.application.dto.requests import UpdateMovementRequest
from stockroom.application.dto.responses import DeleteResponse, MovementResponse
from stockroom.application.use_cases.post_movement import movement_to_response
from stockroom.config import get_logger
from stockroom.core.entities.inventory import MovementDetails
from stockroom.core.services.movement_engine import MovementEngine

logger = get_logger(__name__)


class UpdateMovementUseCase:
    """Apply a partial edit to a movement."""

    def __init__(self, engine: MovementEngine):
        self._engine = engine

    async def execute(self, movement_id: int, request: UpdateMovementRequest) -> MovementDetails:
        # Only fields sent by the client are patched; explicit nulls clear them
        patch = request.model_dump(exclude_unset=True)
        logger.info("update_movement_started", movement_id=movement_id, fields=sorted(patch))
        return await self._engine.update_movement(movement_id, patch)

    def to_response(self, result: MovementDetails) -> MovementResponse:
        return movement_to_response(result)


class DeleteMovementUseCase:
    """Delete a movement and reverse its stock effect."""

    def __init__(self, engine: MovementEngine):
        self._engine = engine

    async def execute(self, movement_id: int) -> DeleteResponse:
        logger.info("delete_movement_started", movement_id=movement_id)
        await self._engine.delete_movement(movement_id)
        return DeleteResponse(success=True)
