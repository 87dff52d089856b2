import sqlite3
from typing import List

from models.reading_record import ReadingStats


def child_reading_stats(conn: sqlite3.Connection, child_id: int) -> ReadingStats:
    """Aggregate a child's reading records; computed on every call."""
    cursor = conn.cursor()
    cursor.execute(
        """
        SELECT
            COUNT(*) AS total_tests,
            COALESCE(SUM(could_read), 0) AS successful_reads,
            AVG(reading_time_seconds) AS avg_time,
            COUNT(CASE WHEN misread_as IS NOT NULL AND TRIM(misread_as) != '' THEN 1 END) AS misread_count,
            COUNT(DISTINCT date(test_date)) AS test_days
        FROM reading_records
        WHERE child_id = ?
        """,
        (child_id,),
    )
    row = cursor.fetchone()
    return ReadingStats(**dict(row))


def child_reading_records(conn: sqlite3.Connection, child_id: int) -> List[dict]:
    cursor = conn.cursor()
    cursor.execute(
        """
        SELECT
            rr.id,
            rr.test_date,
            w.word_text,
            wl.name AS word_list_name,
            rr.could_read,
            rr.reading_time_seconds,
            rr.misread_as,
            rr.notes,
            rr.font_id,
            f.name AS font_name
        FROM reading_records rr
        JOIN words w ON rr.word_id = w.id
        JOIN word_lists wl ON w.word_list_id = wl.id
        LEFT JOIN fonts f ON rr.font_id = f.id
        WHERE rr.child_id = ?
        ORDER BY rr.test_date DESC, rr.id DESC
        """,
        (child_id,),
    )
    records = []
    for row in cursor.fetchall():
        record = dict(row)
        record["could_read"] = bool(record["could_read"])
        records.append(record)
    return records
