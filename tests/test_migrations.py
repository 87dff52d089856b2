import sqlite3

from db.database import Database
from db.migrations import SCHEMA_VERSION, get_schema_version, run_migrations, table_columns


LEGACY_SCHEMA = """
CREATE TABLE children (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL,
    grade TEXT,
    birth_date TEXT,
    notes TEXT,
    created_at TEXT DEFAULT CURRENT_TIMESTAMP
);
CREATE TABLE word_lists (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL,
    description TEXT,
    created_at TEXT DEFAULT CURRENT_TIMESTAMP
);
CREATE TABLE words (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    word_list_id INTEGER NOT NULL,
    word_text TEXT NOT NULL,
    display_order INTEGER,
    FOREIGN KEY (word_list_id) REFERENCES word_lists (id) ON DELETE CASCADE
);
CREATE TABLE reading_records (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    child_id INTEGER NOT NULL,
    word_id INTEGER NOT NULL,
    test_date TEXT DEFAULT CURRENT_TIMESTAMP,
    could_read INTEGER NOT NULL,
    reading_time_seconds REAL,
    misread_as TEXT,
    notes TEXT,
    FOREIGN KEY (child_id) REFERENCES children (id) ON DELETE CASCADE,
    FOREIGN KEY (word_id) REFERENCES words (id) ON DELETE CASCADE
);
INSERT INTO children (id, name, grade, birth_date, notes) VALUES (1, 'Hana', '2年', '2016-04-01', 'left-handed');
INSERT INTO children (id, name, grade, birth_date) VALUES (2, 'Ren', '3年', NULL);
INSERT INTO word_lists (id, name) VALUES (1, 'Old list');
INSERT INTO words (id, word_list_id, word_text, display_order) VALUES (1, 1, 'あめ', 1);
INSERT INTO reading_records (child_id, word_id, could_read, misread_as) VALUES (1, 1, 0, 'あま');
INSERT INTO reading_records (child_id, word_id, could_read) VALUES (2, 1, 1);
"""

INTERMEDIATE_CHILDREN = """
CREATE TABLE children (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL,
    grade TEXT,
    enrollment_year INTEGER,
    enrollment_month INTEGER,
    notes TEXT,
    created_at TEXT DEFAULT CURRENT_TIMESTAMP
);
INSERT INTO children (name, grade, enrollment_year, enrollment_month) VALUES ('Hana', '2年', 2023, 4);
"""


def _write(path, script):
    conn = sqlite3.connect(path)
    conn.executescript(script)
    conn.commit()
    conn.close()


def test_legacy_store_is_migrated_without_losing_rows(tmp_path):
    path = tmp_path / "legacy.db"
    _write(path, LEGACY_SCHEMA)

    database = Database(path)
    database.init(seed=False)

    with database.connect() as conn:
        children_columns = table_columns(conn, "children")
        assert "birth_date" not in children_columns
        assert {"birth_year", "birth_month", "enrollment_year", "enrollment_month"} <= children_columns
        assert "font_id" in table_columns(conn, "reading_records")
        children = conn.execute("SELECT id, name, grade, notes FROM children ORDER BY id").fetchall()
        assert [tuple(row) for row in children] == [(1, "Hana", "2年", "left-handed"), (2, "Ren", "3年", None)]
        records = conn.execute("SELECT child_id, misread_as, font_id FROM reading_records ORDER BY id").fetchall()
        assert [tuple(row) for row in records] == [(1, "あま", None), (2, None, None)]
        applied = conn.execute("SELECT version, applied FROM schema_migrations ORDER BY version").fetchall()
        assert [tuple(row) for row in applied] == [(1, 1), (2, 0), (3, 1)]
        assert get_schema_version(conn) == SCHEMA_VERSION
        assert conn.execute("PRAGMA foreign_key_check").fetchall() == []


def test_intermediate_children_gain_birth_columns(tmp_path):
    path = tmp_path / "intermediate.db"
    _write(path, INTERMEDIATE_CHILDREN)

    database = Database(path)
    database.init(seed=False)

    with database.connect() as conn:
        row = conn.execute("SELECT * FROM children").fetchone()
        assert row["name"] == "Hana"
        assert row["enrollment_year"] == 2023
        assert row["birth_year"] is None
        assert row["birth_month"] is None


def test_migrations_run_once(tmp_path):
    path = tmp_path / "legacy.db"
    _write(path, LEGACY_SCHEMA)
    database = Database(path)
    database.init(seed=False)

    with database.connect() as conn:
        assert run_migrations(conn) == []
        assert conn.execute("SELECT COUNT(*) FROM schema_migrations").fetchone()[0] == 3
        assert conn.execute("SELECT COUNT(*) FROM reading_records").fetchone()[0] == 2


def test_fresh_store_records_nothing_applied(tmp_path):
    database = Database(tmp_path / "fresh.db")
    database.init(seed=False)

    with database.connect() as conn:
        rows = conn.execute("SELECT applied FROM schema_migrations").fetchall()
        assert [row[0] for row in rows] == [0, 0, 0]
        assert get_schema_version(conn) == SCHEMA_VERSION
        assert conn.execute("SELECT COUNT(*) FROM word_lists").fetchone()[0] == 0
