"""Translation of sqlite errors into domain exceptions."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import aiosqlite

from stockroom.core.exceptions import ConflictError, DatabaseError, TransientStoreError

_TRANSIENT_MARKERS = ("locked", "busy", "timeout")


@asynccontextmanager
async def translate_errors(operation: str, entity: str = "record") -> AsyncIterator[None]:
    """
    Re-raise sqlite errors raised inside the block as StockroomError subclasses.

    Unique violations become ConflictError, lock/busy errors become
    TransientStoreError, anything else from the driver becomes DatabaseError.
    """
    try:
        yield
    except aiosqlite.IntegrityError as e:
        if "UNIQUE" in str(e):
            raise ConflictError(entity, str(e)) from e
        raise DatabaseError(operation, str(e)) from e
    except aiosqlite.OperationalError as e:
        message = str(e).lower()
        if any(marker in message for marker in _TRANSIENT_MARKERS):
            raise TransientStoreError(operation, str(e)) from e
        raise DatabaseError(operation, str(e)) from e
    except aiosqlite.DatabaseError as e:
        raise DatabaseError(operation, str(e)) from e
