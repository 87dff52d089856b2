"""Ordered, versioned schema migrations.

Each migration carries a precondition that inspects the live schema and a
forward action. The runner records every version it has considered in
``schema_migrations`` (``applied`` says whether the action actually ran), so a
version is never evaluated twice. Migrations only move forward.
"""
from __future__ import annotations

import logging
import sqlite3
from dataclasses import dataclass
from typing import Callable, List, Set

from .schema import CHILDREN_COLUMNS_SQL, FONTS_TABLE_SQL, MIGRATIONS_TABLE_SQL
from .transaction import transaction

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Migration:
    version: int
    name: str
    precondition: Callable[[sqlite3.Connection], bool]
    apply: Callable[[sqlite3.Connection], None]


def table_columns(conn: sqlite3.Connection, table: str) -> Set[str]:
    """Column names of ``table``; empty when the table does not exist."""
    cursor = conn.execute(f"PRAGMA table_info({table})")
    return {row[1] for row in cursor.fetchall()}


def _children_has_legacy_birth_date(conn: sqlite3.Connection) -> bool:
    columns = table_columns(conn, "children")
    return "birth_date" in columns and "enrollment_year" not in columns


def _rebuild_children(conn: sqlite3.Connection) -> None:
    # birth_date has no usable mapping onto birth_year/birth_month and is dropped
    cursor = conn.cursor()
    cursor.execute("DROP TABLE IF EXISTS children_new")
    cursor.execute(f"CREATE TABLE children_new ({CHILDREN_COLUMNS_SQL})")
    cursor.execute(
        """
        INSERT INTO children_new (id, name, grade, notes, created_at)
        SELECT id, name, grade, notes, COALESCE(created_at, datetime('now'))
        FROM children
        """
    )
    cursor.execute("DROP TABLE children")
    cursor.execute("ALTER TABLE children_new RENAME TO children")


def _children_missing_birth_year(conn: sqlite3.Connection) -> bool:
    columns = table_columns(conn, "children")
    return "enrollment_year" in columns and "birth_year" not in columns


def _add_birth_year_month(conn: sqlite3.Connection) -> None:
    cursor = conn.cursor()
    cursor.execute("ALTER TABLE children ADD COLUMN birth_year INTEGER")
    cursor.execute("ALTER TABLE children ADD COLUMN birth_month INTEGER")


def _reading_records_missing_font(conn: sqlite3.Connection) -> bool:
    columns = table_columns(conn, "reading_records")
    return bool(columns) and "font_id" not in columns


def _add_reading_record_font(conn: sqlite3.Connection) -> None:
    cursor = conn.cursor()
    cursor.execute(FONTS_TABLE_SQL)
    cursor.execute(
        "ALTER TABLE reading_records ADD COLUMN font_id INTEGER REFERENCES fonts (id) ON DELETE SET NULL"
    )


MIGRATIONS: List[Migration] = [
    Migration(1, "children_split_birth_date", _children_has_legacy_birth_date, _rebuild_children),
    Migration(2, "children_add_birth_year_month", _children_missing_birth_year, _add_birth_year_month),
    Migration(3, "reading_records_add_font_id", _reading_records_missing_font, _add_reading_record_font),
]

SCHEMA_VERSION = MIGRATIONS[-1].version


def get_schema_version(conn: sqlite3.Connection) -> int:
    """Read the SQLite schema version from PRAGMA user_version."""
    cursor = conn.cursor()
    cursor.execute("PRAGMA user_version")
    row = cursor.fetchone()
    return int(row[0]) if row else 0


def set_schema_version(conn: sqlite3.Connection, version: int) -> None:
    """Set the SQLite schema version via PRAGMA user_version."""
    conn.execute(f"PRAGMA user_version = {int(version)}")


def recorded_versions(conn: sqlite3.Connection) -> Set[int]:
    cursor = conn.execute("SELECT version FROM schema_migrations")
    return {row[0] for row in cursor.fetchall()}


def run_migrations(conn: sqlite3.Connection, migrations: List[Migration] = MIGRATIONS) -> List[str]:
    """Run every unrecorded migration in version order; return the names whose action ran."""
    conn.executescript(MIGRATIONS_TABLE_SQL)
    done = recorded_versions(conn)
    applied: List[str] = []
    for migration in sorted(migrations, key=lambda m: m.version):
        if migration.version in done:
            continue
        # Table rebuilds must not cascade into dependent rows; the pragma is
        # ignored inside a transaction, so it is toggled around it.
        conn.execute("PRAGMA foreign_keys = OFF")
        try:
            with transaction(conn):
                should_apply = migration.precondition(conn)
                if should_apply:
                    migration.apply(conn)
                conn.execute(
                    "INSERT INTO schema_migrations (version, name, applied) VALUES (?, ?, ?)",
                    (migration.version, migration.name, int(should_apply)),
                )
        finally:
            conn.execute("PRAGMA foreign_keys = ON")
        if should_apply:
            logger.info("Applied migration %s (%s)", migration.version, migration.name)
            applied.append(migration.name)
    if get_schema_version(conn) != SCHEMA_VERSION:
        set_schema_version(conn, SCHEMA_VERSION)
    return applied
