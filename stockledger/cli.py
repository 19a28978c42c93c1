"""
Stock Ledger management commands.

Usage:
    python manage.py migrate     Apply pending schema migrations
    python manage.py serve       Start the API server (migrates on startup)
    python manage.py status      Show schema version and pending migrations
    python manage.py verify      Check the schema and replay every ledger

Every command except ``serve`` accepts ``--db-path`` and then works on that
database only; without it the path comes from settings.
"""

import argparse
import asyncio
import sys
from pathlib import Path

from stockledger.config import configure_logging, get_settings
from stockledger.infrastructure.storage.sqlite.migrations import (
    check_schema,
    get_migration_status,
    run_migrations,
)

# Replaying needs these checks to pass first
_REPLAY_PREREQUISITES = ("database_exists", "ledger_tables")


def _db_path(args: argparse.Namespace) -> Path:
    return args.db_path or get_settings().storage.db_path


def cmd_migrate(args: argparse.Namespace) -> None:
    """Apply pending migrations."""
    results = asyncio.run(
        run_migrations(_db_path(args), create_backup_before=not args.no_backup)
    )
    if not results:
        print("Database is up to date.")
    for result in results:
        status = "SUCCESS" if result.success else "FAILED"
        print(f"[{status}] v{result.version}: {result.name} ({result.execution_time_ms}ms)")
        if result.error:
            print(f"         Error: {result.error}")
    if any(not r.success for r in results):
        sys.exit(1)


def cmd_serve(args: argparse.Namespace) -> None:
    """Start uvicorn. Migrations run in the application lifespan."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "stockledger.api.main:app",
        host=args.host or settings.api.host,
        port=args.port or settings.api.port,
        reload=args.reload,
    )


def cmd_status(args: argparse.Namespace) -> None:
    """Show migration status."""
    status = asyncio.run(get_migration_status(_db_path(args)))
    print(f"Database exists: {status.exists}")
    print(f"Current version: {status.current_version or 'N/A'}")
    print(f"Applied migrations: {status.applied}")
    print(f"Pending migrations: {status.pending}")


async def replay_ledgers(db_path: Path) -> list[str]:
    """Codes of materials whose ledger does not replay to their stored stock."""
    from stockledger.core.services import StockLedgerService
    from stockledger.infrastructure.storage.sqlite import close_pool, get_ledger_store, open_pool

    await open_pool(db_path)
    try:
        store = await get_ledger_store()
        service = StockLedgerService(store)
        return [
            material.code
            for material in await store.list_materials()
            if not await service.verify_stock(material.id)
        ]
    finally:
        await close_pool()


def cmd_verify(args: argparse.Namespace) -> None:
    """Verify the schema, then that every ledger replays to its stock."""
    db_path = _db_path(args)
    checks = asyncio.run(check_schema(db_path))
    for check in checks:
        print(f"[{'PASS' if check.passed else 'FAIL'}] {check.name}")
        if check.detail and not check.passed:
            print(f"       {check.detail}")

    failed = not all(c.passed for c in checks)
    passed = {c.name for c in checks if c.passed}
    if not all(name in passed for name in _REPLAY_PREREQUISITES):
        print("[SKIP] ledger_replay")
        sys.exit(1)

    mismatched = asyncio.run(replay_ledgers(db_path))
    if mismatched:
        failed = True
        print(f"[FAIL] ledger_replay ({len(mismatched)} materials)")
        for code in mismatched:
            print(f"       {code}")
    else:
        print("[PASS] ledger_replay")

    if failed:
        sys.exit(1)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Stock Ledger management CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    sub = parser.add_subparsers(dest="command", required=True)

    # migrate
    p_migrate = sub.add_parser("migrate", help="Apply pending schema migrations")
    p_migrate.add_argument("--db-path", type=Path, help="Database path (default from settings)")
    p_migrate.add_argument("--no-backup", action="store_true", help="Skip backup before migrations")
    p_migrate.set_defaults(func=cmd_migrate)

    # serve
    p_serve = sub.add_parser("serve", help="Start the API server")
    p_serve.add_argument("--host", default=None, help="Bind host (default from settings)")
    p_serve.add_argument("--port", type=int, default=None, help="Bind port (default from settings)")
    p_serve.add_argument("--reload", action="store_true", help="Reload on code changes")
    p_serve.set_defaults(func=cmd_serve)

    # status
    p_status = sub.add_parser("status", help="Show migration status")
    p_status.add_argument("--db-path", type=Path, help="Database path (default from settings)")
    p_status.set_defaults(func=cmd_status)

    # verify
    p_verify = sub.add_parser("verify", help="Check schema integrity and ledger replay")
    p_verify.add_argument("--db-path", type=Path, help="Database path (default from settings)")
    p_verify.set_defaults(func=cmd_verify)

    return parser


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)
    configure_logging()
    args.func(args)
