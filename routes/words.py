import logging

from fastapi import APIRouter, Depends, HTTPException

from db.database import get_db
from db.transaction import transaction
from models.word_list import WordBulkCreate, WordCreate
from utils.words import clean_words, insert_words

router = APIRouter()
logger = logging.getLogger(__name__)


def _require_word_list(cursor, word_list_id: int) -> None:
    cursor.execute("SELECT id FROM word_lists WHERE id = ?", (word_list_id,))
    if not cursor.fetchone():
        raise HTTPException(status_code=404, detail="Word list not found")


@router.post("")
async def add_word(word: WordCreate, conn = Depends(get_db)):
    """Append a single word at the end of its list."""
    word_text = word.word_text.strip() if word.word_text else ""
    if not word_text:
        raise HTTPException(status_code=400, detail="Word text is required")
    cursor = conn.cursor()
    _require_word_list(cursor, word.word_list_id)
    with transaction(conn):
        ids = insert_words(conn, word.word_list_id, [word_text])
    return {"success": True, "id": ids[0]}


@router.post("/bulk")
async def add_words_bulk(payload: WordBulkCreate, conn = Depends(get_db)):
    """Append many words at once; either all are stored or none are."""
    words = clean_words(payload.words)
    if not words:
        raise HTTPException(status_code=400, detail="words must be a non-empty list")
    cursor = conn.cursor()
    _require_word_list(cursor, payload.word_list_id)
    with transaction(conn):
        ids = insert_words(conn, payload.word_list_id, words)
    logger.info("Added %s words to list %s", len(ids), payload.word_list_id)
    return {"success": True, "count": len(ids), "ids": ids}


@router.delete("/{word_id}")
async def delete_word(word_id: int, conn = Depends(get_db)):
    cursor = conn.cursor()
    cursor.execute("DELETE FROM words WHERE id = ?", (word_id,))
    if cursor.rowcount == 0:
        raise HTTPException(status_code=404, detail="Word not found")
    return {"success": True}
