"""SQLite database helpers and the migration runner."""

from __future__ import annotations

import logging
import re
import sqlite3
from dataclasses import dataclass
from pathlib import Path

from zenoter.utils.time import utc_iso

logger = logging.getLogger(__name__)

MIGRATIONS_DIR = Path(__file__).resolve().parent / "migrations"

_MIGRATION_NAME = re.compile(r"^(\d+)_([A-Za-z0-9_]+)\.sql$")


@dataclass(frozen=True)
class Migration:
    version: int
    name: str
    sql: str


@dataclass(frozen=True)
class MigrationRecord:
    version: int
    applied_at: str


def connect(db_path_value: Path) -> sqlite3.Connection:
    db_path_value.parent.mkdir(parents=True, exist_ok=True)
    # Transactions are managed explicitly (see apply_migration).
    conn = sqlite3.connect(db_path_value, isolation_level=None)
    try:
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA journal_mode = WAL")
        conn.execute("PRAGMA foreign_keys = ON")
    except sqlite3.Error:
        conn.close()
        raise
    return conn


def load_migrations(migrations_dir: Path = MIGRATIONS_DIR) -> list[Migration]:
    migrations = []
    for path in sorted(migrations_dir.glob("*.sql")):
        match = _MIGRATION_NAME.match(path.name)
        if match is None:
            raise ValueError(f"Invalid migration file name: {path.name}")
        migrations.append(
            Migration(
                version=int(match.group(1)),
                name=match.group(2),
                sql=path.read_text(encoding="utf-8"),
            )
        )
    migrations.sort(key=lambda migration: migration.version)
    for expected, migration in enumerate(migrations, start=1):
        if migration.version != expected:
            raise ValueError(
                f"Migration versions must run 1..N without gaps; "
                f"expected {expected}, found {migration.version} ({migration.name})"
            )
    return migrations


def latest_version(migrations_dir: Path = MIGRATIONS_DIR) -> int:
    """Highest version among the migration files in migrations_dir."""
    migrations = load_migrations(migrations_dir)
    return migrations[-1].version if migrations else 0


def current_version(conn: sqlite3.Connection) -> int:
    row = conn.execute(
        "SELECT name FROM sqlite_master WHERE type = 'table' AND name = 'migrations'"
    ).fetchone()
    if row is None:
        return 0
    row = conn.execute("SELECT MAX(version) FROM migrations").fetchone()
    return row[0] or 0


def applied_migrations(conn: sqlite3.Connection) -> list[MigrationRecord]:
    if current_version(conn) == 0:
        return []
    rows = conn.execute(
        "SELECT version, applied_at FROM migrations ORDER BY version"
    ).fetchall()
    return [MigrationRecord(version=row[0], applied_at=row[1]) for row in rows]


def apply_migration(conn: sqlite3.Connection, migration: Migration) -> None:
    """Run one migration and record it, both inside a single transaction."""
    try:
        conn.executescript(f"BEGIN;\n{migration.sql}")
        conn.execute(
            "INSERT INTO migrations (version, applied_at) VALUES (?, ?)",
            (migration.version, utc_iso()),
        )
        conn.execute("COMMIT")
    except Exception:
        if conn.in_transaction:
            conn.execute("ROLLBACK")
        raise


def run_migrations(
    conn: sqlite3.Connection, migrations: list[Migration]
) -> list[int]:
    """Bring the schema forward; return the versions that were applied."""
    state = current_version(conn)
    latest = migrations[-1].version if migrations else 0
    if state > latest:
        raise ValueError(
            f"Database schema version {state} is newer than supported version {latest}"
        )
    applied = []
    for migration in migrations:
        if migration.version <= state:
            continue
        logger.info("Applying migration %04d_%s", migration.version, migration.name)
        apply_migration(conn, migration)
        applied.append(migration.version)
    return applied
