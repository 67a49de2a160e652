"""Stock item endpoints."""

from fastapi import APIRouter, Depends, Query, status

from stockroom.api.dependencies import (
    get_create_item_use_case,
    get_current_user,
    get_item_store,
    get_update_item_use_case,
)
from stockroom.application.dto.requests import CreateItemRequest, UpdateItemRequest
from stockroom.application.dto.responses import DeleteResponse, ErrorResponse, ItemResponse
from stockroom.application.use_cases import CreateItemUseCase, UpdateItemUseCase, item_to_response
from stockroom.core.entities.filters import ItemFilter
from stockroom.core.entities.reference import CurrentUser
from stockroom.core.exceptions import ItemNotFoundError, NotFoundError
from stockroom.infrastructure.storage.sqlite import SQLiteItemStore

router = APIRouter(prefix="/api/items", tags=["items"])


@router.get("", response_model=list[ItemResponse])
async def list_items(
    search: str | None = Query(default=None, description="Name, SKU or barcode"),
    category_id: int | None = Query(default=None),
    location_id: int | None = Query(default=None),
    include_inactive: bool = Query(default=False),
    limit: int = Query(default=100, ge=1, le=1000),
    offset: int = Query(default=0, ge=0),
    store: SQLiteItemStore = Depends(get_item_store),
) -> list[ItemResponse]:
    """List stock items ordered by name."""
    items = await store.list_items(
        ItemFilter(
            search=search,
            category_id=category_id,
            location_id=location_id,
            include_inactive=include_inactive,
            limit=limit,
            offset=offset,
        )
    )
    return [item_to_response(item) for item in items]


@router.post(
    "",
    response_model=ItemResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def create_item(
    request: CreateItemRequest,
    use_case: CreateItemUseCase = Depends(get_create_item_use_case),
    current_user: CurrentUser | None = Depends(get_current_user),
) -> ItemResponse:
    result = await use_case.execute(request, current_user)
    return use_case.to_response(result)


@router.get("/low-stock", response_model=list[ItemResponse])
async def low_stock_items(
    store: SQLiteItemStore = Depends(get_item_store),
) -> list[ItemResponse]:
    """Active items at or under their minimum quantity."""
    items = await store.list_low_stock()
    return [item_to_response(item) for item in items]


@router.get(
    "/barcode/{barcode}",
    response_model=ItemResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_item_by_barcode(
    barcode: str,
    store: SQLiteItemStore = Depends(get_item_store),
) -> ItemResponse:
    item = await store.get_by_barcode(barcode)
    if item is None:
        raise NotFoundError("item", barcode)
    return item_to_response(item)


@router.get(
    "/{item_id}",
    response_model=ItemResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_item(
    item_id: int,
    store: SQLiteItemStore = Depends(get_item_store),
) -> ItemResponse:
    item = await store.get_item(item_id)
    if item is None:
        raise ItemNotFoundError(item_id)
    return item_to_response(item)


@router.put(
    "/{item_id}",
    response_model=ItemResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def update_item(
    item_id: int,
    request: UpdateItemRequest,
    use_case: UpdateItemUseCase = Depends(get_update_item_use_case),
) -> ItemResponse:
    """Edit an item. Quantity is changed only by posting movements."""
    result = await use_case.execute(item_id, request)
    return use_case.to_response(result)


@router.delete(
    "/{item_id}",
    response_model=DeleteResponse,
    responses={404: {"model": ErrorResponse}},
)
async def delete_item(
    item_id: int,
    store: SQLiteItemStore = Depends(get_item_store),
) -> DeleteResponse:
    """Soft delete: the item is deactivated, its movements are kept."""
    if not await store.deactivate_item(item_id):
        raise ItemNotFoundError(item_id)
    return DeleteResponse(success=True)
