"""
Versioned schema migrations for the stockroom database.

Migration files live next to this module and are named ``vNNN_name.sql``.
Each file is applied in its own transaction together with its row in
``schema_migrations``; a file whose checksum no longer matches the applied
one stops the run, since the database no longer reflects the source.

``stockroom-migrate`` applies pending files, ``status`` lists them and
``verify`` checks that on-hand quantities still agree with the movement
history.
"""

import argparse
import asyncio
import hashlib
import re
import time
from dataclasses import dataclass, field
from pathlib import Path

import aiosqlite

from stockroom.config import get_logger, get_settings
from stockroom.core.exceptions import DatabaseError

logger = get_logger(__name__)

MIGRATIONS_DIR = Path(__file__).parent

_FILENAME = re.compile(r"^v(?P<version>\d{3})_(?P<name>\w+)\.sql$")

# Items whose stored quantity differs from the signed sum of their movements
_LEDGER_DRIFT_SQL = """
    SELECT si.id, si.sku, si.quantity, COALESCE(SUM(
        CASE sm.movement_type WHEN 'IN' THEN sm.quantity ELSE -sm.quantity END
    ), 0) AS movement_total
    FROM stock_items si
    LEFT JOIN stock_movements sm ON sm.item_id = si.id
    GROUP BY si.id
    HAVING si.quantity != movement_total
    ORDER BY si.id
"""


@dataclass(frozen=True)
class Migration:
    version: str
    name: str
    sql: str

    @property
    def checksum(self) -> str:
        return hashlib.sha256(self.sql.encode("utf-8")).hexdigest()[:16]

    @property
    def label(self) -> str:
        return f"v{self.version}_{self.name}"


@dataclass
class MigrationResult:
    version: str
    name: str
    success: bool
    execution_time_ms: int
    error: str | None = None


@dataclass
class MigrationStatus:
    exists: bool
    applied: list[str] = field(default_factory=list)
    pending: list[str] = field(default_factory=list)

    @property
    def current_version(self) -> str | None:
        return self.applied[-1] if self.applied else None


@dataclass
class IntegrityCheck:
    name: str
    passed: bool
    detail: str = ""


def load_migrations(directory: Path = MIGRATIONS_DIR) -> list[Migration]:
    """Migration files in version order; other .sql files are ignored."""
    migrations = []
    for path in sorted(directory.glob("*.sql")):
        match = _FILENAME.match(path.name)
        if match is None:
            logger.warning("migration_file_ignored", file=path.name)
            continue
        migrations.append(
            Migration(
                version=match["version"],
                name=match["name"],
                sql=path.read_text(encoding="utf-8"),
            )
        )
    return migrations


async def _applied_checksums(conn: aiosqlite.Connection) -> dict[str, str]:
    cursor = await conn.execute(
        "SELECT name FROM sqlite_master WHERE type = 'table' AND name = 'schema_migrations'"
    )
    if await cursor.fetchone() is None:
        return {}
    cursor = await conn.execute("SELECT version, checksum FROM schema_migrations")
    return {version: checksum for version, checksum in await cursor.fetchall()}


async def _apply(conn: aiosqlite.Connection, migration: Migration) -> MigrationResult:
    started = time.perf_counter()
    try:
        # executescript commits anything pending, so the BEGIN keeps the
        # schema change and its bookkeeping row in one transaction
        await conn.executescript(f"BEGIN;\n{migration.sql}")
        elapsed = int((time.perf_counter() - started) * 1000)
        await conn.execute(
            """
            INSERT INTO schema_migrations (version, name, checksum, execution_time_ms)
            VALUES (?, ?, ?, ?)
            """,
            (migration.version, migration.name, migration.checksum, elapsed),
        )
        await conn.commit()
    except aiosqlite.Error as e:
        await conn.rollback()
        logger.error("migration_failed", migration=migration.label, error=str(e))
        return MigrationResult(
            migration.version,
            migration.name,
            success=False,
            execution_time_ms=int((time.perf_counter() - started) * 1000),
            error=str(e),
        )

    logger.info("migration_applied", migration=migration.label, execution_time_ms=elapsed)
    return MigrationResult(migration.version, migration.name, True, elapsed)


async def run_migrations(
    db_path: Path | None = None,
    directory: Path = MIGRATIONS_DIR,
) -> list[MigrationResult]:
    """
    Apply every pending migration, stopping at the first failure.

    Returns results for the migrations attempted in this run only; an
    up-to-date database yields an empty list.

    Raises:
        DatabaseError: an applied migration file was edited afterwards
    """
    db_path = db_path or get_settings().storage.db_path
    db_path.parent.mkdir(parents=True, exist_ok=True)

    results: list[MigrationResult] = []
    async with aiosqlite.connect(db_path) as conn:
        await conn.execute("PRAGMA journal_mode=WAL")
        await conn.execute("PRAGMA foreign_keys=ON")
        applied = await _applied_checksums(conn)

        for migration in load_migrations(directory):
            checksum = applied.get(migration.version)
            if checksum is not None:
                if checksum != migration.checksum:
                    raise DatabaseError(
                        "migrate",
                        f"{migration.label} changed after it was applied "
                        f"(recorded {checksum}, file {migration.checksum})",
                    )
                continue

            result = await _apply(conn, migration)
            results.append(result)
            if not result.success:
                break

    if results:
        logger.info(
            "migrations_run",
            db_path=str(db_path),
            applied=[r.version for r in results if r.success],
            failed=[r.version for r in results if not r.success],
        )
    return results


async def migration_status(
    db_path: Path | None = None,
    directory: Path = MIGRATIONS_DIR,
) -> MigrationStatus:
    db_path = db_path or get_settings().storage.db_path
    versions = [m.version for m in load_migrations(directory)]
    if not db_path.exists():
        return MigrationStatus(exists=False, pending=versions)

    async with aiosqlite.connect(db_path) as conn:
        applied = await _applied_checksums(conn)
    return MigrationStatus(
        exists=True,
        applied=sorted(applied),
        pending=[v for v in versions if v not in applied],
    )


async def verify_database(db_path: Path | None = None) -> list[IntegrityCheck]:
    """
    Check storage health and the ledger invariants.

    Every item's quantity must be non-negative and equal to the signed sum
    of its movements.
    """
    db_path = db_path or get_settings().storage.db_path
    status = await migration_status(db_path)
    checks = [
        IntegrityCheck(
            "schema_current",
            status.exists and not status.pending,
            f"pending: {', '.join(status.pending)}" if status.pending else "",
        )
    ]
    if not status.exists:
        return checks

    async with aiosqlite.connect(db_path) as conn:
        cursor = await conn.execute("PRAGMA integrity_check")
        result = (await cursor.fetchone())[0]
        checks.append(IntegrityCheck("sqlite_integrity", result == "ok", result))

        cursor = await conn.execute("PRAGMA foreign_key_check")
        orphans = await cursor.fetchall()
        checks.append(
            IntegrityCheck("foreign_keys", not orphans, f"{len(orphans)} orphaned rows")
        )

        if status.pending:
            return checks

        cursor = await conn.execute("SELECT id, sku FROM stock_items WHERE quantity < 0")
        negative = await cursor.fetchall()
        checks.append(
            IntegrityCheck(
                "non_negative_stock",
                not negative,
                ", ".join(f"#{item_id} {sku}" for item_id, sku in negative),
            )
        )

        cursor = await conn.execute(_LEDGER_DRIFT_SQL)
        drift = await cursor.fetchall()
        checks.append(
            IntegrityCheck(
                "ledger_matches_movements",
                not drift,
                ", ".join(
                    f"#{item_id} {sku}: on hand {quantity}, movements {total}"
                    for item_id, sku, quantity, total in drift
                ),
            )
        )

    for check in checks:
        if not check.passed:
            logger.warning("integrity_check_failed", check=check.name, detail=check.detail)
    return checks


def main(argv: list[str] | None = None) -> None:
    """Entry point for ``stockroom-migrate``."""
    parser = argparse.ArgumentParser(
        prog="stockroom-migrate",
        description="Apply and inspect stockroom schema migrations",
    )
    parser.add_argument("--db-path", type=Path, help="database file (default from settings)")
    parser.add_argument(
        "command",
        nargs="?",
        choices=("up", "status", "verify"),
        default="up",
        help="up applies pending migrations (default)",
    )
    args = parser.parse_args(argv)

    if args.command == "status":
        status = asyncio.run(migration_status(args.db_path))
        print(f"database: {'present' if status.exists else 'missing'}")
        print(f"current:  {status.current_version or '-'}")
        print(f"pending:  {', '.join(status.pending) or '-'}")
        return

    if args.command == "verify":
        checks = asyncio.run(verify_database(args.db_path))
        for check in checks:
            line = f"{'ok  ' if check.passed else 'FAIL'} {check.name}"
            if not check.passed and check.detail:
                line += f"  ({check.detail})"
            print(line)
        if not all(check.passed for check in checks):
            raise SystemExit(1)
        return

    results = asyncio.run(run_migrations(args.db_path))
    if not results:
        print("schema is up to date")
    for result in results:
        outcome = "applied" if result.success else f"FAILED: {result.error}"
        print(f"v{result.version}_{result.name}: {outcome} ({result.execution_time_ms}ms)")
    if not all(result.success for result in results):
        raise SystemExit(1)


if __name__ == "__main__":
    main()
