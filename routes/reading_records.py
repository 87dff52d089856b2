import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request

from db.database import get_db
from models.reading_record import ReadingRecordCreate

router = APIRouter()
logger = logging.getLogger(__name__)


def fetch_mirror_record(cursor, record_id: int) -> Optional[dict]:
    """The committed record joined with the names the external mirrors show."""
    cursor.execute(
        """
        SELECT
            rr.id,
            rr.test_date,
            c.name AS child_name,
            c.grade AS child_grade,
            w.word_text,
            wl.name AS word_list_name,
            rr.could_read,
            rr.reading_time_seconds,
            rr.misread_as,
            rr.notes,
            f.name AS font_name
        FROM reading_records rr
        JOIN children c ON c.id = rr.child_id
        JOIN words w ON w.id = rr.word_id
        JOIN word_lists wl ON wl.id = w.word_list_id
        LEFT JOIN fonts f ON f.id = rr.font_id
        WHERE rr.id = ?
        """,
        (record_id,),
    )
    row = cursor.fetchone()
    if not row:
        return None
    record = dict(row)
    record["could_read"] = bool(record["could_read"])
    return record


@router.post("/reading-records")
async def create_reading_record(record: ReadingRecordCreate, request: Request, conn = Depends(get_db)):
    """Store one reading outcome, then mirror it to the configured sinks."""
    cursor = conn.cursor()
    cursor.execute("SELECT id FROM children WHERE id = ?", (record.child_id,))
    if not cursor.fetchone():
        raise HTTPException(status_code=404, detail="Child not found")
    cursor.execute("SELECT id FROM words WHERE id = ?", (record.word_id,))
    if not cursor.fetchone():
        raise HTTPException(status_code=404, detail="Word not found")
    if record.font_id is not None:
        cursor.execute("SELECT id FROM fonts WHERE id = ?", (record.font_id,))
        if not cursor.fetchone():
            raise HTTPException(status_code=404, detail="Font not found")
    cursor.execute(
        """
        INSERT INTO reading_records (child_id, word_id, could_read, reading_time_seconds, misread_as, notes, font_id)
        VALUES (?, ?, ?, ?, ?, ?, ?)
        """,
        (
            record.child_id,
            record.word_id,
            int(record.could_read),
            record.reading_time_seconds,
            record.misread_as,
            record.notes,
            record.font_id,
        ),
    )
    record_id = cursor.lastrowid
    logger.info(
        "Recorded reading result %s (child=%s word=%s could_read=%s)",
        record_id,
        record.child_id,
        record.word_id,
        record.could_read,
    )
    mirror_record = fetch_mirror_record(cursor, record_id)
    if mirror_record:
        await request.app.state.notifier.submit(mirror_record)
    return {"success": True, "id": record_id}


@router.get("/test/{child_id}/{word_list_id}")
async def test_session(child_id: int, word_list_id: int, conn = Depends(get_db)):
    """Everything the test screen needs: the child, the list, its words in order, and active fonts."""
    cursor = conn.cursor()
    cursor.execute("SELECT id, name, grade FROM children WHERE id = ?", (child_id,))
    child = cursor.fetchone()
    if not child:
        raise HTTPException(status_code=404, detail="Child not found")
    cursor.execute("SELECT id, name, description FROM word_lists WHERE id = ?", (word_list_id,))
    word_list = cursor.fetchone()
    if not word_list:
        raise HTTPException(status_code=404, detail="Word list not found")
    cursor.execute(
        "SELECT id, word_text, display_order FROM words WHERE word_list_id = ? ORDER BY display_order, id",
        (word_list_id,),
    )
    words = [dict(row) for row in cursor.fetchall()]
    cursor.execute(
        """
        SELECT id, name, font_family, font_type, file_path
        FROM fonts
        WHERE is_active = 1
        ORDER BY font_type, name
        """
    )
    fonts = [dict(row) for row in cursor.fetchall()]
    return {"child": dict(child), "word_list": dict(word_list), "words": words, "fonts": fonts}
