"""
Domain exceptions for the Stockroom application.

Provides specific exception types for different error scenarios.
"""

from typing import Any


class StockroomError(Exception):
    """Base exception for all Stockroom errors."""

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> dict:
        """Convert to dictionary for API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


# Validation Exceptions
class ValidationError(StockroomError):
    """Input validation failed."""

    def __init__(self, field: str, message: str, value: Any = None):
        super().__init__(
            f"Validation error for '{field}': {message}",
            code="VALIDATION_ERROR",
            details={
                "field": field,
                "message": message,
                "value": str(value)[:100] if value is not None else None,
            },
        )


# Lookup Exceptions
class NotFoundError(StockroomError):
    """Referenced entity does not exist."""

    def __init__(self, entity: str, entity_id: Any):
        super().__init__(
            f"{entity.capitalize()} not found: {entity_id}",
            code=f"{entity.upper()}_NOT_FOUND",
            details={f"{entity}_id": entity_id},
        )


class ItemNotFoundError(NotFoundError):
    """Stock item not found."""

    def __init__(self, item_id: int):
        super().__init__("item", item_id)


class MovementNotFoundError(NotFoundError):
    """Stock movement not found."""

    def __init__(self, movement_id: int):
        super().__init__("movement", movement_id)


class NotificationNotFoundError(NotFoundError):
    """Notification not found or not visible to the user."""

    def __init__(self, notification_id: int):
        super().__init__("notification", notification_id)


# Business rule Exceptions
class InsufficientStockError(StockroomError):
    """Requested quantity exceeds the item's on-hand quantity."""

    def __init__(self, item_id: int, requested: int, available: int):
        super().__init__(
            f"Insufficient stock. Available: {available}, Requested: {requested}",
            code="INSUFFICIENT_STOCK",
            details={
                "item_id": item_id,
                "requested": requested,
                "available": available,
            },
        )
        self.requested = requested
        self.available = available


class ConflictError(StockroomError):
    """Unique constraint violated (duplicate code, barcode, email...)."""

    def __init__(self, entity: str, reason: str):
        super().__init__(
            f"Conflict on {entity}: {reason}",
            code="CONFLICT",
            details={"entity": entity, "reason": reason},
        )


# Storage Exceptions
class StorageError(StockroomError):
    """Base exception for storage operations."""

    pass


class TransientStoreError(StorageError):
    """Store busy, locked or timed out. Safe for the caller to retry."""

    def __init__(self, operation: str, error: str):
        super().__init__(
            f"Store unavailable during {operation}: {error}",
            code="STORE_UNAVAILABLE",
            details={"operation": operation, "error": error},
        )


class DatabaseError(StorageError):
    """Database operation failed."""

    def __init__(self, operation: str, error: str):
        super().__init__(
            f"Database error during {operation}: {error}",
            code="DATABASE_ERROR",
            details={"operation": operation, "error": error},
        )


class ConfigurationError(StockroomError):
    """Configuration error."""

    pass
