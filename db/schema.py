# SQL schema for ReadCheck database

# Current shape of the children table; also used when rebuilding a legacy table
CHILDREN_COLUMNS_SQL = """
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL,
    grade TEXT,
    birth_year INTEGER,
    birth_month INTEGER,
    enrollment_year INTEGER,
    enrollment_month INTEGER,
    notes TEXT,
    created_at TEXT NOT NULL DEFAULT (datetime('now'))
"""

FONTS_TABLE_SQL = """
CREATE TABLE IF NOT EXISTS fonts (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL,
    font_family TEXT NOT NULL,
    font_type TEXT NOT NULL CHECK(font_type IN ('system', 'webfont', 'custom')),
    file_path TEXT,
    is_active INTEGER NOT NULL DEFAULT 1,
    created_at TEXT NOT NULL DEFAULT (datetime('now')),
    CHECK((font_type = 'custom') = (file_path IS NOT NULL))
);
"""

SCHEMA_SQL = f"""
-- Children
CREATE TABLE IF NOT EXISTS children ({CHILDREN_COLUMNS_SQL});

-- Word lists (one reading-test session's material)
CREATE TABLE IF NOT EXISTS word_lists (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL,
    description TEXT,
    created_at TEXT NOT NULL DEFAULT (datetime('now'))
);

-- Words, ordered within their list by display_order
CREATE TABLE IF NOT EXISTS words (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    word_list_id INTEGER NOT NULL,
    word_text TEXT NOT NULL,
    display_order INTEGER,
    FOREIGN KEY (word_list_id) REFERENCES word_lists (id) ON DELETE CASCADE
);

-- Fonts used to render words during a test
{FONTS_TABLE_SQL}

-- Reading test outcomes
CREATE TABLE IF NOT EXISTS reading_records (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    child_id INTEGER NOT NULL,
    word_id INTEGER NOT NULL,
    test_date TEXT NOT NULL DEFAULT (datetime('now')),
    could_read INTEGER NOT NULL CHECK(could_read IN (0, 1)),
    reading_time_seconds REAL,
    misread_as TEXT,
    notes TEXT,
    font_id INTEGER,
    FOREIGN KEY (child_id) REFERENCES children (id) ON DELETE CASCADE,
    FOREIGN KEY (word_id) REFERENCES words (id) ON DELETE CASCADE,
    FOREIGN KEY (font_id) REFERENCES fonts (id) ON DELETE SET NULL
);
"""

# Indexes for performance
INDEXES_SQL = """
CREATE INDEX IF NOT EXISTS idx_reading_records_child ON reading_records (child_id);
CREATE INDEX IF NOT EXISTS idx_reading_records_word ON reading_records (word_id);
CREATE INDEX IF NOT EXISTS idx_reading_records_date ON reading_records (test_date);
CREATE INDEX IF NOT EXISTS idx_reading_records_font ON reading_records (font_id);
CREATE INDEX IF NOT EXISTS idx_words_list_order ON words (word_list_id, display_order);
CREATE INDEX IF NOT EXISTS idx_fonts_active ON fonts (is_active, font_type, name);
"""

# Bookkeeping for db.migrations
MIGRATIONS_TABLE_SQL = """
CREATE TABLE IF NOT EXISTS schema_migrations (
    version INTEGER PRIMARY KEY,
    name TEXT NOT NULL,
    applied INTEGER NOT NULL,
    recorded_at TEXT NOT NULL DEFAULT (datetime('now'))
);
"""
