import sqlite3
from contextlib import contextmanager


@contextmanager
def transaction(conn: sqlite3.Connection):
    """Run the enclosed statements atomically: commit on success, roll back on any error.

    Connections come from ``Database.connect`` in autocommit mode, so the
    transaction boundaries are issued explicitly. ``BEGIN IMMEDIATE`` takes the
    write lock up front, which keeps read-then-write sequences (such as
    computing the next display_order) consistent between requests.
    """
    conn.execute("BEGIN IMMEDIATE")
    try:
        yield conn
    except BaseException:
        conn.execute("ROLLBACK")
        raise
    conn.execute("COMMIT")
