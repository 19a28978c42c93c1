"""Management commands against databases outside the configured data directory."""

import sqlite3
from pathlib import Path

import pytest

from stockledger.cli import main
from stockledger.config import get_settings
from stockledger.infrastructure.storage.sqlite import connection as conn_module

CREATED = "2026-01-01T00:00:00.000000+00:00"


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    path = tmp_path / "elsewhere" / "ledger.db"
    main(["migrate", "--db-path", str(path), "--no-backup"])
    return path


def _seed(db_path: Path, current_stock: float) -> None:
    """One material opened at 10 with a single IN of 5 on its ledger."""
    with sqlite3.connect(db_path) as conn:
        conn.execute(
            "INSERT INTO materials (id, code, name, current_stock, opening_stock, "
            "created_at, updated_at) VALUES ('mat-a', 'RES-01', 'Epoxy', ?, 10, ?, ?)",
            (current_stock, CREATED, CREATED),
        )
        conn.execute(
            "INSERT INTO inventory_transactions (material_id, type, quantity, created_at) "
            "VALUES ('mat-a', 'IN', 5, ?)",
            (CREATED,),
        )
    conn.close()


class TestVerify:
    def test_replays_given_database(self, db_path: Path, capsys):
        _seed(db_path, current_stock=15)

        main(["verify", "--db-path", str(db_path)])

        out = capsys.readouterr().out
        assert "[PASS] ledger_tables" in out
        assert "[PASS] ledger_replay" in out
        assert not get_settings().storage.db_path.exists()
        assert conn_module._pool is None

    def test_reports_mismatched_ledger(self, db_path: Path, capsys):
        _seed(db_path, current_stock=12)

        with pytest.raises(SystemExit) as exc_info:
            main(["verify", "--db-path", str(db_path)])

        assert exc_info.value.code == 1
        out = capsys.readouterr().out
        assert "[FAIL] ledger_replay (1 materials)" in out
        assert "RES-01" in out

    def test_missing_database_is_not_created(self, tmp_path: Path, capsys):
        missing = tmp_path / "nowhere" / "ledger.db"

        with pytest.raises(SystemExit) as exc_info:
            main(["verify", "--db-path", str(missing)])

        assert exc_info.value.code == 1
        out = capsys.readouterr().out
        assert "[FAIL] database_exists" in out
        assert "[SKIP] ledger_replay" in out
        assert not missing.exists()
        assert not get_settings().storage.db_path.exists()

    def test_unmigrated_database_skips_replay(self, tmp_path: Path, capsys):
        bare = tmp_path / "bare.db"
        with sqlite3.connect(bare) as conn:
            conn.execute("CREATE TABLE unrelated (id INTEGER)")
        conn.close()

        with pytest.raises(SystemExit):
            main(["verify", "--db-path", str(bare)])

        out = capsys.readouterr().out
        assert "[FAIL] ledger_tables" in out
        assert "[SKIP] ledger_replay" in out


class TestMigrateAndStatus:
    def test_migrate_is_idempotent(self, db_path: Path, capsys):
        capsys.readouterr()

        main(["migrate", "--db-path", str(db_path)])

        assert "Database is up to date." in capsys.readouterr().out

    def test_status(self, db_path: Path, capsys):
        capsys.readouterr()

        main(["status", "--db-path", str(db_path)])

        out = capsys.readouterr().out
        assert "Database exists: True" in out
        assert "Current version: 001" in out
        assert "Pending migrations: []" in out
