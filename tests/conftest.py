"""Pytest configuration and fixtures."""

from collections.abc import AsyncGenerator, Awaitable, Callable
from pathlib import Path

import pytest

from stockroom.config import reset_settings
from stockroom.infrastructure.storage.sqlite import ConnectionPool
from stockroom.infrastructure.storage.sqlite.migrations.migrator import run_migrations


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    """Point settings at a throwaway data directory."""
    monkeypatch.setenv("STORAGE_DATA_DIR", str(tmp_path / "data"))
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
async def db_path(tmp_path: Path) -> Path:
    """Fully migrated temporary database."""
    path = tmp_path / "stockroom_test.db"
    results = await run_migrations(path)
    assert all(r.success for r in results)
    return path


@pytest.fixture
async def pool(db_path: Path) -> AsyncGenerator[ConnectionPool, None]:
    pool = ConnectionPool(db_path, pool_size=3, busy_timeout=5000)
    await pool.initialize()
    yield pool
    await pool.close()


@pytest.fixture
async def seeded(pool: ConnectionPool) -> dict[str, int]:
    """Reference rows most tests need; returns their ids."""
    async with pool.transaction() as conn:
        cursor = await conn.execute(
            """
            INSERT INTO users (name, full_name, email, role)
            VALUES ('alice', 'Alice Smith', 'alice@example.com', 'admin')
            """
        )
        user_id = cursor.lastrowid
        cursor = await conn.execute("INSERT INTO categories (name) VALUES ('Electrical')")
        category_id = cursor.lastrowid
        cursor = await conn.execute(
            "INSERT INTO locations (name, code) VALUES ('Main Warehouse', 'MW')"
        )
        location_id = cursor.lastrowid
        cursor = await conn.execute(
            "INSERT INTO suppliers (name, code) VALUES ('Acme Supply', 'ACME')"
        )
        supplier_id = cursor.lastrowid
        cursor = await conn.execute("INSERT INTO customers (name) VALUES ('Bob Builder')")
        customer_id = cursor.lastrowid

    return {
        "user_id": user_id,
        "category_id": category_id,
        "location_id": location_id,
        "supplier_id": supplier_id,
        "customer_id": customer_id,
    }


@pytest.fixture
def make_item(pool: ConnectionPool) -> Callable[..., Awaitable[int]]:
    """Insert a stock item directly and return its id."""

    async def _make_item(
        name: str = "Cable 3x2.5mm",
        quantity: int = 0,
        min_quantity: int | None = None,
        max_quantity: int | None = None,
        unit_price: float = 0.0,
        barcode: str | None = None,
        is_active: bool = True,
    ) -> int:
        async with pool.transaction() as conn:
            cursor = await conn.execute(
                """
                INSERT INTO stock_items (
                    name, quantity, min_quantity, max_quantity,
                    unit_price, barcode, is_active
                ) VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                (name, quantity, min_quantity, max_quantity, unit_price, barcode, int(is_active)),
            )
            return cursor.lastrowid

    return _make_item


@pytest.fixture
def quantity_of(pool: ConnectionPool) -> Callable[[int], Awaitable[int]]:
    """Read an item's on-hand quantity straight from the table."""

    async def _quantity_of(item_id: int) -> int:
        async with pool.acquire() as conn:
            cursor = await conn.execute(
                "SELECT quantity FROM stock_items WHERE id = ?", (item_id,)
            )
            row = await cursor.fetchone()
        return row[0]

    return _quantity_of


@pytest.fixture
def count_movements(pool: ConnectionPool) -> Callable[..., Awaitable[int]]:
    """Count movement rows, optionally for one item."""

    async def _count_movements(item_id: int | None = None) -> int:
        async with pool.acquire() as conn:
            if item_id is None:
                cursor = await conn.execute("SELECT COUNT(*) FROM stock_movements")
            else:
                cursor = await conn.execute(
                    "SELECT COUNT(*) FROM stock_movements WHERE item_id = ?", (item_id,)
                )
            row = await cursor.fetchone()
        return row[0]

    return _count_movements
