import logging
import sqlite3

from .transaction import transaction

logger = logging.getLogger(__name__)

DEFAULT_WORD_LISTS = [
    {
        "name": "基本単語セット1",
        "description": "ひらがな・カタカナの基本単語",
        "words": [
            "あめ", "かさ", "いぬ", "ねこ", "ほん",
            "つくえ", "えんぴつ", "ノート", "カバン", "くつした",
        ],
    },
]

# (name, font_family, font_type)
DEFAULT_FONTS = [
    ("BIZ UDPゴシック", "'BIZ UDPGothic', sans-serif", "webfont"),
    ("BIZ UDP明朝", "'BIZ UDPMincho', serif", "webfont"),
    ("OpenDyslexic", "'OpenDyslexic', sans-serif", "webfont"),
    ("Lexend", "'Lexend', sans-serif", "webfont"),
    ("UD デジタル 教科書体 NK-R", "'UD デジタル 教科書体 NK-R', sans-serif", "system"),
    ("Arial", "Arial, sans-serif", "system"),
    ("Verdana", "Verdana, sans-serif", "system"),
    ("Comic Sans MS", "'Comic Sans MS', cursive", "system"),
    ("游ゴシック", "'Yu Gothic', 'YuGothic', sans-serif", "system"),
    ("メイリオ", "Meiryo, sans-serif", "system"),
]


def _count(conn: sqlite3.Connection, table: str) -> int:
    return conn.execute(f"SELECT COUNT(*) FROM {table}").fetchone()[0]


def seed_word_lists(conn: sqlite3.Connection) -> int:
    """Insert the default word lists; returns the number of words inserted. Caller owns the transaction."""
    cursor = conn.cursor()
    inserted = 0
    for word_list in DEFAULT_WORD_LISTS:
        cursor.execute(
            "INSERT INTO word_lists (name, description) VALUES (?, ?)",
            (word_list["name"], word_list["description"]),
        )
        word_list_id = cursor.lastrowid
        cursor.executemany(
            "INSERT INTO words (word_list_id, word_text, display_order) VALUES (?, ?, ?)",
            [(word_list_id, word, order) for order, word in enumerate(word_list["words"], 1)],
        )
        inserted += len(word_list["words"])
    return inserted


def seed_fonts(conn: sqlite3.Connection) -> int:
    conn.executemany(
        "INSERT INTO fonts (name, font_family, font_type, file_path) VALUES (?, ?, ?, NULL)",
        DEFAULT_FONTS,
    )
    return len(DEFAULT_FONTS)


def seed_sample_data(conn: sqlite3.Connection) -> None:
    """Seed the sample word list and default fonts into empty tables."""
    if _count(conn, "word_lists") == 0:
        with transaction(conn):
            count = seed_word_lists(conn)
        logger.info("Seeded sample word lists (%s words)", count)
    else:
        logger.info("Word lists already present; skipping sample data")
    if _count(conn, "fonts") == 0:
        with transaction(conn):
            count = seed_fonts(conn)
        logger.info("Registered %s default fonts", count)


def reset_word_lists(conn: sqlite3.Connection) -> int:
    """Replace every word list and word with the default set, atomically.

    Reading records that reference the removed words go with them (cascade).
    Returns the number of words reseeded.
    """
    with transaction(conn):
        conn.execute("DELETE FROM words")
        conn.execute("DELETE FROM word_lists")
        count = seed_word_lists(conn)
    logger.info("Word lists reset; %s words reseeded", count)
    return count
