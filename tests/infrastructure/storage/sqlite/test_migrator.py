"""Unit tests for database migrator."""

from pathlib import Path
from unittest.mock import patch

import aiosqlite
import pytest

from buildstock.infrastructure.storage.sqlite.migrations import migrator
from buildstock.infrastructure.storage.sqlite.migrations.migrator import (
    APPEND_ONLY_TRIGGERS,
    REQUIRED_TABLES,
    MigrationInfo,
    create_backup,
    discover_migrations,
    get_applied_migrations,
    get_current_version,
    get_migration_status,
    initialize_database,
    restore_backup,
    verify_schema_integrity,
)


@pytest.fixture
def migrations_dir(tmp_path: Path) -> Path:
    """Scratch migrations directory with one valid migration."""
    directory = tmp_path / "migrations"
    directory.mkdir()
    (directory / "v001_base.sql").write_text(
        """
        CREATE TABLE IF NOT EXISTS schema_migrations (
            version TEXT PRIMARY KEY,
            name TEXT NOT NULL,
            checksum TEXT,
            applied_at TEXT DEFAULT (datetime('now')),
            execution_time_ms INTEGER
        );
        CREATE TABLE items (id INTEGER PRIMARY KEY);
        """
    )
    return directory


class TestMigrationInfo:
    """Tests for MigrationInfo dataclass."""

    def test_from_file_parses_filename(self, tmp_path: Path):
        migration_file = tmp_path / "v001_initial_schema.sql"
        migration_file.write_text("SELECT 1;")

        info = MigrationInfo.from_file(migration_file)

        assert info.version == "001"
        assert info.name == "initial_schema"
        assert len(info.checksum) == 16

    def test_checksum_tracks_content(self, tmp_path: Path):
        first = tmp_path / "v001_a.sql"
        first.write_text("SELECT 1;")
        second = tmp_path / "v002_b.sql"
        second.write_text("SELECT 2;")
        assert MigrationInfo.from_file(first).checksum != MigrationInfo.from_file(second).checksum

    def test_invalid_filename_raises(self, tmp_path: Path):
        invalid_file = tmp_path / "initial.sql"
        invalid_file.write_text("SELECT 1;")
        with pytest.raises(ValueError, match="Invalid migration filename"):
            MigrationInfo.from_file(invalid_file)


class TestDiscovery:
    """Tests for the bundled migrations."""

    def test_bundled_schema_is_discovered(self):
        versions = [m.version for m in discover_migrations()]
        assert versions[0] == "001"
        assert versions == sorted(versions)

    async def test_applied_empty_without_table(self, temp_db_path: Path):
        async with aiosqlite.connect(temp_db_path) as conn:
            assert await get_applied_migrations(conn) == {}
            assert await get_current_version(conn) is None


class TestInitializeDatabase:
    """Tests for initialize_database()."""

    async def test_creates_ledger_schema(self, temp_db_path: Path):
        results = await initialize_database(temp_db_path, create_backup_before=False)

        assert [r.version for r in results] == ["001"]
        assert all(r.success for r in results)

        async with aiosqlite.connect(temp_db_path) as conn:
            cursor = await conn.execute("SELECT name FROM sqlite_master WHERE type='table'")
            tables = {row[0] for row in await cursor.fetchall()}
            cursor = await conn.execute("SELECT name FROM sqlite_master WHERE type='trigger'")
            triggers = {row[0] for row in await cursor.fetchall()}

        assert set(REQUIRED_TABLES) <= tables
        assert set(APPEND_ONLY_TRIGGERS) <= triggers

    async def test_second_run_applies_nothing(self, temp_db_path: Path):
        await initialize_database(temp_db_path, create_backup_before=False)
        assert await initialize_database(temp_db_path) == []
        # Backup removed after a clean run
        assert list(temp_db_path.parent.glob("*.backup_*")) == []

    async def test_stops_on_failed_migration(self, temp_db_path: Path, migrations_dir: Path):
        (migrations_dir / "v002_broken.sql").write_text("CREATE TABLE items (oops")
        (migrations_dir / "v003_later.sql").write_text("CREATE TABLE later (id INTEGER);")

        with patch.object(migrator, "MIGRATIONS_DIR", migrations_dir):
            results = await initialize_database(temp_db_path, create_backup_before=False)
            status = await get_migration_status(temp_db_path)

        assert [(r.version, r.success) for r in results] == [("001", True), ("002", False)]
        assert results[1].error
        assert status["applied_migrations"] == ["001"]
        assert status["pending_migrations"] == ["002", "003"]

    async def test_edited_migration_halts(self, temp_db_path: Path, migrations_dir: Path):
        with patch.object(migrator, "MIGRATIONS_DIR", migrations_dir):
            await initialize_database(temp_db_path, create_backup_before=False)

            (migrations_dir / "v001_base.sql").write_text("-- edited\nSELECT 1;")
            (migrations_dir / "v002_next.sql").write_text("CREATE TABLE next (id INTEGER);")
            results = await initialize_database(temp_db_path, create_backup_before=False)

        assert results == []


class TestStatusAndIntegrity:
    """Tests for get_migration_status() and verify_schema_integrity()."""

    async def test_status_missing_database(self, tmp_path: Path):
        status = await get_migration_status(tmp_path / "absent.db")
        assert status["exists"] is False
        assert "001" in status["pending_migrations"]

    async def test_status_after_migrating(self, temp_db_path: Path):
        await initialize_database(temp_db_path, create_backup_before=False)
        status = await get_migration_status(temp_db_path)
        assert status["exists"] is True
        assert status["pending_migrations"] == []
        assert status["current_version"] == status["applied_migrations"][-1]

    async def test_integrity_passes(self, temp_db_path: Path):
        await initialize_database(temp_db_path, create_backup_before=False)
        checks = await verify_schema_integrity(temp_db_path)
        assert {c["check"] for c in checks} == {
            "foreign_keys",
            "integrity",
            "required_tables",
            "append_only_triggers",
        }
        assert all(c["status"] == "PASS" for c in checks)

    async def test_integrity_reports_missing_trigger(self, temp_db_path: Path):
        await initialize_database(temp_db_path, create_backup_before=False)
        async with aiosqlite.connect(temp_db_path) as conn:
            await conn.execute("DROP TRIGGER trg_transactions_no_delete")
            await conn.commit()

        checks = {c["check"]: c for c in await verify_schema_integrity(temp_db_path)}
        assert checks["append_only_triggers"]["status"] == "FAIL"
        assert checks["append_only_triggers"]["missing"] == ["trg_transactions_no_delete"]


class TestBackup:
    """Tests for create_backup() and restore_backup()."""

    def test_backup_and_restore(self, temp_db_path: Path):
        temp_db_path.write_bytes(b"original")
        backup = create_backup(temp_db_path)
        assert backup.exists()

        temp_db_path.write_bytes(b"changed")
        restore_backup(temp_db_path, backup)
        assert temp_db_path.read_bytes() == b"original"
