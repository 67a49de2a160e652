"""Application use cases."""

from stockroom.application.use_cases.edit_movement import (
    DeleteMovementUseCase,
    UpdateMovementUseCase,
)
from stockroom.application.use_cases.manage_items import (
    CreateItemUseCase,
    UpdateItemUseCase,
    item_to_response,
)
from stockroom.application.use_cases.post_movement import (
    PostMovementUseCase,
    movement_to_response,
)

__all__ = [
    "CreateItemUseCase",
    "DeleteMovementUseCase",
    "PostMovementUseCase",
    "UpdateItemUseCase",
    "UpdateMovementUseCase",
    "item_to_response",
    "movement_to_response",
]
