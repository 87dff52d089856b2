from __future__ import annotations

import sqlite3
from typing import Iterable, List


def next_display_order(conn: sqlite3.Connection, word_list_id: int) -> int:
    cursor = conn.execute(
        "SELECT COALESCE(MAX(display_order), 0) FROM words WHERE word_list_id = ?",
        (word_list_id,),
    )
    return int(cursor.fetchone()[0] or 0) + 1


def clean_words(raw: Iterable[str]) -> List[str]:
    """Trim entries and drop blanks, preserving order and duplicates."""
    cleaned = []
    for word in raw:
        if not isinstance(word, str):
            continue
        word = word.strip()
        if word:
            cleaned.append(word)
    return cleaned


def insert_words(conn: sqlite3.Connection, word_list_id: int, words: Iterable[str]) -> List[int]:
    """Append words to a list with contiguous display_order after the current maximum.

    Does not open a transaction of its own: callers wrap it in
    ``db.transaction.transaction`` so the batch lands all at once or not at all.
    """
    cursor = conn.cursor()
    order = next_display_order(conn, word_list_id)
    ids: List[int] = []
    for word in words:
        cursor.execute(
            "INSERT INTO words (word_list_id, word_text, display_order) VALUES (?, ?, ?)",
            (word_list_id, word, order),
        )
        ids.append(cursor.lastrowid)
        order += 1
    return ids
