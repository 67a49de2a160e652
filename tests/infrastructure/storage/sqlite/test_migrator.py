"""Tests for the schema migrator."""

from pathlib import Path

import aiosqlite
import pytest

from stockroom.core.exceptions import DatabaseError
from stockroom.infrastructure.storage.sqlite.migrations.migrator import (
    load_migrations,
    main,
    migration_status,
    run_migrations,
    verify_database,
)

BOOKKEEPING = """
CREATE TABLE schema_migrations (
    version TEXT PRIMARY KEY,
    name TEXT NOT NULL,
    checksum TEXT,
    applied_at TEXT,
    execution_time_ms INTEGER
);
CREATE TABLE widgets (id INTEGER PRIMARY KEY);
"""


@pytest.fixture
def migrations_dir(tmp_path: Path) -> Path:
    directory = tmp_path / "migrations"
    directory.mkdir()
    (directory / "v001_base.sql").write_text(BOOKKEEPING)
    return directory


async def table_names(db: Path) -> set[str]:
    async with aiosqlite.connect(db) as conn:
        cursor = await conn.execute("SELECT name FROM sqlite_master WHERE type = 'table'")
        return {row[0] for row in await cursor.fetchall()}


class TestLoadMigrations:
    def test_bundled_initial_migration(self):
        migrations = load_migrations()
        assert migrations[0].version == "001"
        assert migrations[0].name == "initial"
        assert len(migrations[0].checksum) == 16

    def test_ignores_badly_named_files(self, migrations_dir: Path):
        (migrations_dir / "notes.sql").write_text("SELECT 1;")
        (migrations_dir / "v2_short.sql").write_text("SELECT 1;")
        assert [m.label for m in load_migrations(migrations_dir)] == ["v001_base"]


class TestRunMigrations:
    async def test_apply_is_idempotent(self, tmp_path: Path):
        db = tmp_path / "fresh.db"
        first = await run_migrations(db)
        assert first and all(r.success for r in first)
        assert {"stock_items", "stock_movements", "schema_migrations"} <= await table_names(db)

        assert await run_migrations(db) == []

    async def test_failed_file_leaves_no_partial_schema(self, tmp_path: Path, migrations_dir: Path):
        (migrations_dir / "v002_broken.sql").write_text(
            "CREATE TABLE gadgets (id INTEGER PRIMARY KEY);\nINSERT INTO missing VALUES (1);\n"
        )
        (migrations_dir / "v003_later.sql").write_text("CREATE TABLE later (id INTEGER);")
        db = tmp_path / "broken.db"

        results = await run_migrations(db, migrations_dir)

        assert [(r.version, r.success) for r in results] == [("001", True), ("002", False)]
        assert "missing" in results[1].error
        tables = await table_names(db)
        assert "gadgets" not in tables
        assert "later" not in tables
        status = await migration_status(db, migrations_dir)
        assert status.pending == ["002", "003"]

    async def test_edited_applied_file_is_refused(self, tmp_path: Path, migrations_dir: Path):
        db = tmp_path / "drift.db"
        await run_migrations(db, migrations_dir)
        (migrations_dir / "v001_base.sql").write_text(BOOKKEEPING + "\n-- edited\n")

        with pytest.raises(DatabaseError, match="changed after it was applied"):
            await run_migrations(db, migrations_dir)


class TestMigrationStatus:
    async def test_pending_then_applied(self, tmp_path: Path):
        db = tmp_path / "status.db"
        before = await migration_status(db)
        assert before.exists is False
        assert before.current_version is None
        assert "001" in before.pending

        await run_migrations(db)
        after = await migration_status(db)
        assert after.current_version == "001"
        assert after.pending == []


class TestVerifyDatabase:
    async def test_fresh_schema_passes(self, db_path: Path):
        checks = {c.name: c for c in await verify_database(db_path)}
        assert set(checks) == {
            "schema_current",
            "sqlite_integrity",
            "foreign_keys",
            "non_negative_stock",
            "ledger_matches_movements",
        }
        assert all(c.passed for c in checks.values())

    async def test_quantity_without_movements_is_reported(self, db_path: Path, make_item):
        item_id = await make_item(name="Cable", quantity=5)

        checks = {c.name: c for c in await verify_database(db_path)}

        drift = checks["ledger_matches_movements"]
        assert drift.passed is False
        assert f"#{item_id}" in drift.detail
        assert "on hand 5, movements 0" in drift.detail

    async def test_posted_movements_reconcile(self, db_path: Path, pool, make_item):
        item_id = await make_item(name="Cable", quantity=3)
        async with pool.transaction() as conn:
            await conn.executemany(
                "INSERT INTO stock_movements (item_id, movement_type, quantity, movement_date)"
                " VALUES (?, ?, ?, '2026-01-01T00:00:00')",
                [(item_id, "IN", 5), (item_id, "OUT", 2)],
            )

        checks = {c.name: c for c in await verify_database(db_path)}
        assert checks["ledger_matches_movements"].passed is True

    async def test_missing_database(self, tmp_path: Path):
        checks = await verify_database(tmp_path / "absent.db")
        assert [(c.name, c.passed) for c in checks] == [("schema_current", False)]


class TestCommandLine:
    def test_up_then_verify(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]):
        db = tmp_path / "cli.db"

        main(["--db-path", str(db)])
        assert "v001_initial: applied" in capsys.readouterr().out

        main(["--db-path", str(db), "verify"])
        out = capsys.readouterr().out
        assert "FAIL" not in out
        assert "ledger_matches_movements" in out

        main(["--db-path", str(db), "status"])
        assert "current:  001" in capsys.readouterr().out

    def test_verify_failure_exits_nonzero(self, tmp_path: Path):
        with pytest.raises(SystemExit) as exc_info:
            main(["--db-path", str(tmp_path / "absent.db"), "verify"])
        assert exc_info.value.code == 1
