"""Stock movement endpoints."""

from datetime import datetime

from fastapi import APIRouter, Depends, Query, status

from stockroom.api.dependencies import (
    get_current_user,
    get_delete_movement_use_case,
    get_movement_engine,
    get_post_movement_use_case,
    get_update_movement_use_case,
)
from stockroom.application.dto.requests import PostMovementRequest, UpdateMovementRequest
from stockroom.application.dto.responses import DeleteResponse, ErrorResponse, MovementResponse
from stockroom.application.use_cases import (
    DeleteMovementUseCase,
    PostMovementUseCase,
    UpdateMovementUseCase,
    movement_to_response,
)
from stockroom.core.entities.filters import MovementFilter
from stockroom.core.entities.inventory import MovementType
from stockroom.core.entities.reference import CurrentUser
from stockroom.core.services import MovementEngine

router = APIRouter(prefix="/api/movements", tags=["movements"])


@router.post(
    "",
    response_model=MovementResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
        503: {"model": ErrorResponse},
    },
)
async def post_movement(
    request: PostMovementRequest,
    use_case: PostMovementUseCase = Depends(get_post_movement_use_case),
    current_user: CurrentUser | None = Depends(get_current_user),
) -> MovementResponse:
    """Receive (IN) or issue (OUT) stock for one item."""
    result = await use_case.execute(request, current_user)
    return use_case.to_response(result)


@router.get("", response_model=list[MovementResponse])
async def list_movements(
    search: str | None = Query(default=None, description="Item name, reference or notes"),
    movement_type: MovementType | None = Query(default=None),
    item_id: int | None = Query(default=None),
    date_from: datetime | None = Query(default=None),
    date_to: datetime | None = Query(default=None),
    limit: int = Query(default=100, ge=1, le=1000),
    offset: int = Query(default=0, ge=0),
    engine: MovementEngine = Depends(get_movement_engine),
) -> list[MovementResponse]:
    """List movements, newest first."""
    movements = await engine.list_movements(
        MovementFilter(
            search=search,
            movement_type=movement_type,
            item_id=item_id,
            date_from=date_from,
            date_to=date_to,
            limit=limit,
            offset=offset,
        )
    )
    return [movement_to_response(m) for m in movements]


@router.get("/recent", response_model=list[MovementResponse])
async def recent_movements(
    limit: int = Query(default=10, ge=1, le=100),
    engine: MovementEngine = Depends(get_movement_engine),
) -> list[MovementResponse]:
    """Most recently recorded movements."""
    movements = await engine.recent_movements(limit)
    return [movement_to_response(m) for m in movements]


@router.get(
    "/{movement_id}",
    response_model=MovementResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_movement(
    movement_id: int,
    engine: MovementEngine = Depends(get_movement_engine),
) -> MovementResponse:
    movement = await engine.get_movement(movement_id)
    return movement_to_response(movement)


@router.put(
    "/{movement_id}",
    response_model=MovementResponse,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
)
async def update_movement(
    movement_id: int,
    request: UpdateMovementRequest,
    use_case: UpdateMovementUseCase = Depends(get_update_movement_use_case),
) -> MovementResponse:
    """Edit a movement; item quantities move by the exact difference."""
    result = await use_case.execute(movement_id, request)
    return use_case.to_response(result)


@router.delete(
    "/{movement_id}",
    response_model=DeleteResponse,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def delete_movement(
    movement_id: int,
    use_case: DeleteMovementUseCase = Depends(get_delete_movement_use_case),
) -> DeleteResponse:
    """Delete a movement and reverse its stock effect."""
    return await use_case.execute(movement_id)
