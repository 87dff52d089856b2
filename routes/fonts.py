import logging
import sqlite3
from pathlib import Path
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, Request, UploadFile

from db.database import get_db
from models.font import FONT_EXTENSIONS, Font, FontCreate, FontType, FontUpdate

router = APIRouter()
logger = logging.getLogger(__name__)

FONT_COLUMNS = "id, name, font_family, font_type, file_path, is_active, created_at"


@router.get("", response_model=list[Font])
async def list_fonts(conn = Depends(get_db)):
    """Active fonts, grouped by type then sorted by name."""
    cursor = conn.cursor()
    cursor.execute(f"SELECT {FONT_COLUMNS} FROM fonts WHERE is_active = 1 ORDER BY font_type, name")
    return [dict(row) for row in cursor.fetchall()]


@router.post("")
async def create_font(font: FontCreate, conn = Depends(get_db)):
    """Register a system or web font referenced by family name only."""
    if font.font_type == FontType.CUSTOM:
        raise HTTPException(status_code=400, detail="Custom fonts must be uploaded")
    if not font.name.strip() or not font.font_family.strip():
        raise HTTPException(status_code=400, detail="Font name and family are required")
    cursor = conn.cursor()
    cursor.execute(
        "INSERT INTO fonts (name, font_family, font_type, file_path) VALUES (?, ?, ?, NULL)",
        (font.name.strip(), font.font_family.strip(), font.font_type.value),
    )
    return {"success": True, "id": cursor.lastrowid}


@router.post("/upload")
async def upload_font(
    request: Request,
    font_file: Optional[UploadFile] = File(None, alias="fontFile", description="Font file (.ttf, .otf, .woff, .woff2)"),
    font_name: Optional[str] = Form(None, alias="fontName", description="Display name"),
    conn = Depends(get_db),
):
    """Store an uploaded font file and register it as a custom font."""
    if not font_file or not font_file.filename:
        raise HTTPException(status_code=400, detail="No file uploaded")
    if Path(font_file.filename).suffix.lower() not in FONT_EXTENSIONS:
        raise HTTPException(status_code=400, detail="Only font files (.ttf, .otf, .woff, .woff2) can be uploaded")
    if not font_name or not font_name.strip():
        raise HTTPException(status_code=400, detail="Font name is required")
    font_name = font_name.strip()
    data = await font_file.read()
    storage = request.app.state.font_storage
    font_path = storage.save(font_file.filename, data)
    try:
        cursor = conn.cursor()
        cursor.execute(
            "INSERT INTO fonts (name, font_family, font_type, file_path) VALUES (?, ?, 'custom', ?)",
            (font_name, f"'{font_name}'", font_path),
        )
    except sqlite3.Error:
        storage.remove(font_path)
        raise
    font_id = cursor.lastrowid
    logger.info("Registered custom font %s (%s)", font_id, font_name)
    return {"success": True, "id": font_id, "fontPath": font_path}


@router.patch("/{font_id}")
async def update_font(font_id: int, update: FontUpdate, conn = Depends(get_db)):
    """Show or hide a font in the test screen."""
    cursor = conn.cursor()
    cursor.execute("UPDATE fonts SET is_active = ? WHERE id = ?", (int(update.is_active), font_id))
    if cursor.rowcount == 0:
        raise HTTPException(status_code=404, detail="Font not found")
    return {"success": True}


@router.delete("/{font_id}")
async def delete_font(font_id: int, request: Request, conn = Depends(get_db)):
    """Delete a font; custom fonts also lose their stored file. Records keep a null font."""
    cursor = conn.cursor()
    cursor.execute(f"SELECT {FONT_COLUMNS} FROM fonts WHERE id = ?", (font_id,))
    font = cursor.fetchone()
    if not font:
        raise HTTPException(status_code=404, detail="Font not found")
    cursor.execute("DELETE FROM fonts WHERE id = ?", (font_id,))
    if font["font_type"] == FontType.CUSTOM.value and font["file_path"]:
        request.app.state.font_storage.remove(font["file_path"])
    logger.info("Deleted font %s (%s)", font_id, font["name"])
    return {"success": True}
