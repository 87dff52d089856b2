from __future__ import annotations

import logging
import secrets
import time
from pathlib import Path

logger = logging.getLogger(__name__)

FONT_URL_PREFIX = "/fonts/"


def unique_filename(original_name: str) -> str:
    """``<millis>-<9 random digits>-<basename>``; directory parts of the client name are dropped."""
    basename = Path(original_name).name or "upload"
    suffix = secrets.randbelow(10**9)
    return f"{int(time.time() * 1000)}-{suffix}-{basename}"


def save_upload(directory: Path, original_name: str, data: bytes) -> Path:
    """Write an uploaded payload under ``directory`` with a unique name and return its path."""
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / unique_filename(original_name)
    path.write_bytes(data)
    return path


class FontStorage:
    """Stores uploaded font files; public paths look like ``/fonts/<stored name>``."""

    def __init__(self, fonts_dir: Path):
        self.fonts_dir = Path(fonts_dir)

    def path_for(self, public_path: str) -> Path:
        return self.fonts_dir / Path(public_path).name

    def save(self, original_name: str, data: bytes) -> str:
        stored = save_upload(self.fonts_dir, original_name, data)
        logger.info("Stored font file %s", stored)
        return FONT_URL_PREFIX + stored.name

    def remove(self, public_path: str) -> bool:
        """Delete a stored font file. Returns False when it was already gone."""
        path = self.path_for(public_path)
        if not path.exists():
            logger.info("Font file %s already absent", path)
            return False
        path.unlink(missing_ok=True)
        logger.info("Removed font file %s", path)
        return True
