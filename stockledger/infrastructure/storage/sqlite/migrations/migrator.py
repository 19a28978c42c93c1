"""
Schema migrations for the stock ledger database.

Migrations are ``vNNN_name.sql`` files applied in version order. Each one runs
in its own transaction together with its ``schema_migrations`` record, so a
failing script leaves no partial tables behind. An applied migration whose
file has since changed stops the run.

When a database that already exists has pending migrations, a snapshot is
taken with the SQLite backup API first. If any migration in the run fails,
the snapshot is copied back so the ledger is left exactly as it was.
"""

import hashlib
import re
import time
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

import aiosqlite

from stockledger.config import get_logger, get_settings

logger = get_logger(__name__)

MIGRATIONS_DIR = Path(__file__).parent

_FILENAME = re.compile(r"^v(\d{3})_(\w+)\.sql$")

LEDGER_TABLES = (
    "materials",
    "inventory_transactions",
    "products",
    "bom_headers",
    "bom_items",
    "schema_migrations",
)

# Without these the ledger is no longer append-only
LEDGER_TRIGGERS = (
    "inventory_transactions_no_update",
    "inventory_transactions_no_delete",
)

_SCHEMA_MIGRATIONS_DDL = """
CREATE TABLE IF NOT EXISTS schema_migrations (
    version TEXT PRIMARY KEY,
    name TEXT NOT NULL,
    checksum TEXT NOT NULL,
    execution_time_ms INTEGER,
    applied_at TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%fZ', 'now'))
)
"""


@dataclass(frozen=True)
class Migration:
    """One versioned SQL script."""

    version: str
    name: str
    path: Path

    @property
    def sql(self) -> str:
        return self.path.read_text(encoding="utf-8")

    @property
    def checksum(self) -> str:
        return hashlib.sha256(self.sql.encode()).hexdigest()[:16]


@dataclass
class MigrationResult:
    """Outcome of applying one migration."""

    version: str
    name: str
    success: bool
    execution_time_ms: int = 0
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
class SchemaCheck:
    name: str
    passed: bool
    detail: str = ""


def load_migrations(migrations_dir: Path | None = None) -> list[Migration]:
    """Migration scripts in version order; misnamed files are skipped."""
    migrations = []
    for path in sorted((migrations_dir or MIGRATIONS_DIR).glob("*.sql")):
        match = _FILENAME.match(path.name)
        if not match:
            logger.warning("migration_file_skipped", path=str(path))
            continue
        migrations.append(Migration(version=match.group(1), name=match.group(2), path=path))
    return migrations


async def applied_checksums(conn: aiosqlite.Connection) -> dict[str, str]:
    """Applied versions mapped to the checksum recorded when they ran."""
    cursor = await conn.execute(
        "SELECT name FROM sqlite_master WHERE type='table' AND name='schema_migrations'"
    )
    if await cursor.fetchone() is None:
        return {}
    cursor = await conn.execute("SELECT version, checksum FROM schema_migrations ORDER BY version")
    return {row[0]: row[1] for row in await cursor.fetchall()}


async def _apply(conn: aiosqlite.Connection, migration: Migration) -> MigrationResult:
    logger.info("applying_migration", version=migration.version, name=migration.name)
    started = time.perf_counter()
    try:
        # The script's statements and its record commit or roll back together
        await conn.executescript("BEGIN;\n" + migration.sql)
        elapsed = int((time.perf_counter() - started) * 1000)
        await conn.execute(
            "INSERT INTO schema_migrations (version, name, checksum, execution_time_ms) "
            "VALUES (?, ?, ?, ?)",
            (migration.version, migration.name, migration.checksum, elapsed),
        )
        await conn.commit()
    except aiosqlite.Error as e:
        await conn.rollback()
        logger.error("migration_failed", version=migration.version, error=str(e))
        return MigrationResult(
            version=migration.version,
            name=migration.name,
            success=False,
            execution_time_ms=int((time.perf_counter() - started) * 1000),
            error=str(e),
        )

    logger.info("migration_applied", version=migration.version, execution_time_ms=elapsed)
    return MigrationResult(
        version=migration.version,
        name=migration.name,
        success=True,
        execution_time_ms=elapsed,
    )


async def create_backup(db_path: Path) -> Path:
    """Snapshot the database next to itself and return the snapshot path."""
    stamp = datetime.now().strftime("%Y%m%d_%H%M%S_%f")
    backup_path = db_path.with_name(f"{db_path.stem}.backup_{stamp}{db_path.suffix}")
    async with aiosqlite.connect(db_path) as source, aiosqlite.connect(backup_path) as target:
        await source.backup(target)
    logger.info("database_backup_created", backup_path=str(backup_path))
    return backup_path


async def restore_backup(db_path: Path, backup_path: Path) -> None:
    """Copy a snapshot back over the live database."""
    async with aiosqlite.connect(backup_path) as source, aiosqlite.connect(db_path) as target:
        await source.backup(target)
    logger.warning("database_restored_from_backup", backup_path=str(backup_path))


async def _pending(db_path: Path, migrations: list[Migration]) -> list[Migration]:
    if not db_path.exists():
        return migrations
    async with aiosqlite.connect(db_path) as conn:
        applied = await applied_checksums(conn)
    return [m for m in migrations if applied.get(m.version) != m.checksum]


async def run_migrations(
    db_path: Path | None = None,
    create_backup_before: bool = True,
    migrations_dir: Path | None = None,
) -> list[MigrationResult]:
    """
    Apply every pending migration to the database.

    Args:
        db_path: Database file (default from settings)
        create_backup_before: Snapshot an existing database before migrating
        migrations_dir: Directory holding ``vNNN_name.sql`` files

    Returns:
        One result per migration attempted. The run stops at the first
        failure. A migration whose file changed after it was applied is
        reported as a failed result.
    """
    db_path = db_path or get_settings().storage.db_path
    db_path.parent.mkdir(parents=True, exist_ok=True)

    migrations = load_migrations(migrations_dir)
    if not migrations:
        logger.warning("no_migrations_found")
        return []

    backup_path = None
    if create_backup_before and db_path.exists() and await _pending(db_path, migrations):
        backup_path = await create_backup(db_path)

    results: list[MigrationResult] = []
    try:
        async with aiosqlite.connect(db_path) as conn:
            await conn.execute("PRAGMA journal_mode=WAL")
            await conn.execute("PRAGMA foreign_keys=ON")
            await conn.execute(_SCHEMA_MIGRATIONS_DDL)
            await conn.commit()
            applied = await applied_checksums(conn)

            for migration in migrations:
                recorded = applied.get(migration.version)
                if recorded == migration.checksum:
                    continue
                if recorded is not None:
                    logger.error("migration_checksum_changed", version=migration.version)
                    results.append(
                        MigrationResult(
                            version=migration.version,
                            name=migration.name,
                            success=False,
                            error="migration file changed after it was applied",
                        )
                    )
                    break

                result = await _apply(conn, migration)
                results.append(result)
                if not result.success:
                    break

                cursor = await conn.execute("PRAGMA foreign_key_check")
                if await cursor.fetchall():
                    logger.error("migration_broke_foreign_keys", version=migration.version)
                    result.success = False
                    result.error = "foreign key violations after migration"
                    break
    except (aiosqlite.Error, OSError) as e:
        logger.error("database_initialization_failed", error=str(e))
        if backup_path:
            await restore_backup(db_path, backup_path)
        raise

    if backup_path:
        if all(r.success for r in results):
            backup_path.unlink()
        else:
            await restore_backup(db_path, backup_path)

    logger.info("database_migrated", db_path=str(db_path), applied=len(results))
    return results


async def get_migration_status(
    db_path: Path | None = None,
    migrations_dir: Path | None = None,
) -> MigrationStatus:
    """Applied and pending versions; a missing database is reported, not created."""
    db_path = db_path or get_settings().storage.db_path
    if not db_path.exists():
        return MigrationStatus(exists=False)

    async with aiosqlite.connect(db_path) as conn:
        applied = await applied_checksums(conn)
    return MigrationStatus(
        exists=True,
        applied=sorted(applied),
        pending=[m.version for m in load_migrations(migrations_dir) if m.version not in applied],
    )


async def check_schema(db_path: Path | None = None) -> list[SchemaCheck]:
    """
    Structural checks on an existing ledger database.

    Covers SQLite integrity, foreign keys, the ledger tables, the append-only
    triggers and that no material holds negative stock.
    """
    db_path = db_path or get_settings().storage.db_path
    if not db_path.exists():
        return [SchemaCheck("database_exists", False, str(db_path))]

    checks = [SchemaCheck("database_exists", True)]
    async with aiosqlite.connect(db_path) as conn:
        cursor = await conn.execute("PRAGMA integrity_check")
        integrity = (await cursor.fetchone())[0]
        ok = integrity == "ok"
        checks.append(SchemaCheck("integrity", ok, "" if ok else integrity))

        cursor = await conn.execute("PRAGMA foreign_key_check")
        violations = len(await cursor.fetchall())
        detail = f"{violations} violations" if violations else ""
        checks.append(SchemaCheck("foreign_keys", not violations, detail))

        cursor = await conn.execute("SELECT type, name FROM sqlite_master")
        existing = {(row[0], row[1]) for row in await cursor.fetchall()}

        missing_tables = [t for t in LEDGER_TABLES if ("table", t) not in existing]
        checks.append(SchemaCheck("ledger_tables", not missing_tables, ", ".join(missing_tables)))

        missing_triggers = [t for t in LEDGER_TRIGGERS if ("trigger", t) not in existing]
        checks.append(
            SchemaCheck("ledger_triggers", not missing_triggers, ", ".join(missing_triggers))
        )

        if ("table", "materials") in existing:
            cursor = await conn.execute(
                "SELECT code FROM materials WHERE current_stock < 0 ORDER BY code"
            )
            negative = [row[0] for row in await cursor.fetchall()]
            checks.append(SchemaCheck("non_negative_stock", not negative, ", ".join(negative)))

    return checks
