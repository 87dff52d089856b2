from __future__ import annotations

import re
import zipfile
from pathlib import Path
from typing import List

from docx import Document
from docx.opc.exceptions import PackageNotFoundError
from pypdf import PdfReader
from pypdf.errors import PdfReadError

# Extensions accepted for word-list import
DOCUMENT_EXTENSIONS = {".pdf", ".docx"}

_SPLIT_RE = re.compile(r"\s+")
# Hiragana, Katakana, CJK ideographs, ASCII word characters
_WORD_CHAR_RE = re.compile(r"[\u3040-\u309F\u30A0-\u30FF\u4E00-\u9FAFA-Za-z0-9_]")


class DocumentReadError(Exception):
    """The uploaded document could not be decoded."""


def extract_words(text: str) -> List[str]:
    """Split document text into candidate words, keeping source order and duplicates.

    Tokens made only of punctuation or symbols are dropped.
    """
    if not text:
        return []
    words: List[str] = []
    for token in _SPLIT_RE.split(text):
        word = token.strip()
        if word and _WORD_CHAR_RE.search(word):
            words.append(word)
    return words


def _read_pdf(path: Path) -> str:
    reader = PdfReader(str(path))
    return "\n".join(page.extract_text() or "" for page in reader.pages)


def _read_docx(path: Path) -> str:
    document = Document(str(path))
    lines = [paragraph.text for paragraph in document.paragraphs]
    for table in document.tables:
        for row in table.rows:
            lines.extend(cell.text for cell in row.cells)
    return "\n".join(lines)


def read_document_text(path: Path) -> str:
    """Decode the raw text of a PDF or Word (.docx) document."""
    suffix = path.suffix.lower()
    if suffix not in DOCUMENT_EXTENSIONS:
        raise ValueError(f"Unsupported document type: {suffix or 'none'}")
    try:
        if suffix == ".pdf":
            return _read_pdf(path)
        return _read_docx(path)
    except (PdfReadError, PackageNotFoundError, zipfile.BadZipFile, KeyError, ValueError) as exc:
        raise DocumentReadError(f"Could not read {path.name}: {exc}") from exc
