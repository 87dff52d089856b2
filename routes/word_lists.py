import logging
from pathlib import Path
from typing import Optional

from fastapi import APIRouter, Depends, File, HTTPException, Request, UploadFile

from db.database import get_db
from db.transaction import transaction
from models.word_list import Word, WordListCreate, WordListDetail
from utils.extract import DOCUMENT_EXTENSIONS, DocumentReadError, extract_words, read_document_text
from utils.storage import save_upload
from utils.words import insert_words

router = APIRouter()
logger = logging.getLogger(__name__)

IMPORT_PREVIEW_COUNT = 10


def _require_word_list(cursor, word_list_id: int) -> dict:
    cursor.execute(
        "SELECT id, name, description, created_at FROM word_lists WHERE id = ?",
        (word_list_id,),
    )
    row = cursor.fetchone()
    if not row:
        raise HTTPException(status_code=404, detail="Word list not found")
    return dict(row)


def get_words_for_list(cursor, word_list_id: int) -> list[dict]:
    cursor.execute(
        """
        SELECT id, word_list_id, word_text, display_order
        FROM words
        WHERE word_list_id = ?
        ORDER BY display_order, id
        """,
        (word_list_id,),
    )
    return [Word(**dict(row)).model_dump() for row in cursor.fetchall()]


@router.get("")
async def list_word_lists(conn = Depends(get_db)):
    """List word lists, newest first, with their word counts."""
    cursor = conn.cursor()
    cursor.execute(
        """
        SELECT wl.id, wl.name, wl.description, wl.created_at, COUNT(w.id) AS word_count
        FROM word_lists wl
        LEFT JOIN words w ON w.word_list_id = wl.id
        GROUP BY wl.id
        ORDER BY wl.created_at DESC, wl.id DESC
        """
    )
    return [dict(row) for row in cursor.fetchall()]


@router.post("")
async def create_word_list(word_list: WordListCreate, conn = Depends(get_db)):
    if not word_list.name or not word_list.name.strip():
        raise HTTPException(status_code=400, detail="Name is required")
    cursor = conn.cursor()
    cursor.execute(
        "INSERT INTO word_lists (name, description) VALUES (?, ?)",
        (word_list.name, word_list.description),
    )
    return {"success": True, "id": cursor.lastrowid}


@router.get("/{word_list_id}", response_model=WordListDetail)
async def word_list_detail(word_list_id: int, conn = Depends(get_db)):
    cursor = conn.cursor()
    word_list = _require_word_list(cursor, word_list_id)
    word_list["words"] = get_words_for_list(cursor, word_list_id)
    return word_list


@router.put("/{word_list_id}")
async def update_word_list(word_list_id: int, word_list: WordListCreate, conn = Depends(get_db)):
    if not word_list.name or not word_list.name.strip():
        raise HTTPException(status_code=400, detail="Name is required")
    cursor = conn.cursor()
    cursor.execute(
        "UPDATE word_lists SET name = ?, description = ? WHERE id = ?",
        (word_list.name, word_list.description, word_list_id),
    )
    if cursor.rowcount == 0:
        raise HTTPException(status_code=404, detail="Word list not found")
    return {"success": True}


@router.delete("/{word_list_id}")
async def delete_word_list(word_list_id: int, conn = Depends(get_db)):
    """Delete a word list with its words and the reading records on them."""
    cursor = conn.cursor()
    cursor.execute("DELETE FROM word_lists WHERE id = ?", (word_list_id,))
    if cursor.rowcount == 0:
        raise HTTPException(status_code=404, detail="Word list not found")
    logger.info("Deleted word list %s", word_list_id)
    return {"success": True}


@router.post("/{word_list_id}/import")
async def import_words(
    word_list_id: int,
    request: Request,
    document_file: Optional[UploadFile] = File(None, alias="documentFile", description="PDF or Word document"),
    conn = Depends(get_db),
):
    """Extract words from an uploaded document and append them to the list in one batch."""
    cursor = conn.cursor()
    _require_word_list(cursor, word_list_id)
    if not document_file or not document_file.filename:
        raise HTTPException(status_code=400, detail="No file uploaded")
    suffix = Path(document_file.filename).suffix.lower()
    if suffix not in DOCUMENT_EXTENSIONS:
        raise HTTPException(status_code=400, detail="Only PDF and Word documents (.pdf, .docx) can be imported")
    data = await document_file.read()
    uploads_dir = request.app.state.config["storage"]["uploads_dir"]
    upload_path = save_upload(uploads_dir, document_file.filename, data)
    logger.info("Importing words from %s into list %s", document_file.filename, word_list_id)
    try:
        try:
            text = read_document_text(upload_path)
        except DocumentReadError as exc:
            logger.warning("Document import failed: %s", exc)
            raise HTTPException(status_code=400, detail="Could not read the document") from exc
        words = extract_words(text)
        logger.debug("Extracted %s words from %s characters", len(words), len(text))
        if not words:
            raise HTTPException(status_code=400, detail="No words could be extracted")
        with transaction(conn):
            insert_words(conn, word_list_id, words)
    finally:
        upload_path.unlink(missing_ok=True)
    logger.info("Imported %s words into list %s", len(words), word_list_id)
    return {"success": True, "count": len(words), "words": words[:IMPORT_PREVIEW_COUNT]}
