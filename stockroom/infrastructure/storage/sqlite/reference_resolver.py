"""SQLite implementation of name-to-id resolution."""

from stockroom.core.entities.reference import ReferenceKind
from stockroom.core.interfaces.reference_resolver import IReferenceResolver
from stockroom.infrastructure.storage.sqlite.connection import ConnectionPool
from stockroom.infrastructure.storage.sqlite.errors import translate_errors

_TABLES = {
    ReferenceKind.LOCATION: "locations",
    ReferenceKind.SUPPLIER: "suppliers",
    ReferenceKind.CUSTOMER: "customers",
    ReferenceKind.CATEGORY: "categories",
}


class SQLiteReferenceResolver(IReferenceResolver):
    """Exact, case-sensitive name lookup against the reference tables."""

    def __init__(self, pool: ConnectionPool):
        self._pool = pool

    async def resolve(self, kind: ReferenceKind, label: str | None) -> int | None:
        if label is None or not label.strip():
            return None

        table = _TABLES[ReferenceKind(kind)]
        async with translate_errors("resolve_reference", kind.value):
            async with self._pool.acquire() as conn:
                cursor = await conn.execute(
                    f"SELECT id FROM {table} WHERE name = ? ORDER BY id LIMIT 1",
                    (label,),
                )
                row = await cursor.fetchone()
        return row["id"] if row else None
