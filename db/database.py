import logging
import sqlite3
from contextlib import contextmanager
from pathlib import Path

from fastapi import Request

from .migrations import run_migrations
from .schema import SCHEMA_SQL, INDEXES_SQL
from .seed import seed_sample_data

logger = logging.getLogger(__name__)


class Database:
    """Handle on the SQLite store.

    Constructed once at process start, initialized with ``init()``, handed to
    request handlers through ``app.state`` and closed at shutdown.
    """

    def __init__(self, path: Path):
        self.path = Path(path)
        self._closed = False

    def init(self, seed: bool = True) -> None:
        """Migrate legacy shapes, create missing tables/indexes, and optionally seed sample data."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.connect() as conn:
            applied = run_migrations(conn)
            conn.executescript(SCHEMA_SQL)
            conn.executescript(INDEXES_SQL)
            if seed:
                seed_sample_data(conn)
        logger.info("Database ready at %s (migrations applied: %s)", self.path, applied or "none")

    @contextmanager
    def connect(self):
        """Context manager for a SQLite connection with foreign keys on and dict-like rows."""
        if self._closed:
            raise RuntimeError("Database has been closed")
        conn = sqlite3.connect(self.path, isolation_level=None, check_same_thread=False)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA foreign_keys = ON")
        try:
            yield conn
        finally:
            conn.close()

    def close(self) -> None:
        self._closed = True
        logger.info("Database at %s closed", self.path)

    @property
    def closed(self) -> bool:
        return self._closed


def get_db(request: Request):
    """FastAPI dependency that yields a DB connection and closes it afterwards."""
    with request.app.state.db.connect() as conn:
        yield conn
