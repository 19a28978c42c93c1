"""Database migrations module."""

from stockledger.infrastructure.storage.sqlite.migrations.migrator import (
    LEDGER_TABLES,
    LEDGER_TRIGGERS,
    Migration,
    MigrationResult,
    MigrationStatus,
    SchemaCheck,
    check_schema,
    create_backup,
    get_migration_status,
    load_migrations,
    restore_backup,
    run_migrations,
)

__all__ = [
    "LEDGER_TABLES",
    "LEDGER_TRIGGERS",
    "Migration",
    "MigrationResult",
    "MigrationStatus",
    "SchemaCheck",
    "check_schema",
    "create_backup",
    "get_migration_status",
    "load_migrations",
    "restore_backup",
    "run_migrations",
]
