import logging

from fastapi import APIRouter, Depends, HTTPException

from db.database import get_db
from models.child import Child, ChildCreate

router = APIRouter()
logger = logging.getLogger(__name__)

CHILD_COLUMNS = "id, name, grade, birth_year, birth_month, enrollment_year, enrollment_month, notes, created_at"


def _require_name(name: str) -> None:
    if not name or not name.strip():
        raise HTTPException(status_code=400, detail="Name is required")


@router.get("", response_model=list[Child])
async def list_children(conn = Depends(get_db)):
    """List all children, newest first."""
    cursor = conn.cursor()
    cursor.execute(f"SELECT {CHILD_COLUMNS} FROM children ORDER BY created_at DESC, id DESC")
    return [dict(row) for row in cursor.fetchall()]


@router.post("")
async def create_child(child: ChildCreate, conn = Depends(get_db)):
    """Create a new child profile."""
    _require_name(child.name)
    cursor = conn.cursor()
    cursor.execute(
        """
        INSERT INTO children (name, grade, birth_year, birth_month, enrollment_year, enrollment_month, notes)
        VALUES (?, ?, ?, ?, ?, ?, ?)
        """,
        (
            child.name,
            child.grade,
            child.birth_year,
            child.birth_month,
            child.enrollment_year,
            child.enrollment_month,
            child.notes,
        ),
    )
    child_id = cursor.lastrowid
    logger.info("Registered child %s (%s)", child_id, child.name)
    return {"success": True, "id": child_id}


@router.get("/{child_id}", response_model=Child)
async def get_child(child_id: int, conn = Depends(get_db)):
    cursor = conn.cursor()
    cursor.execute(f"SELECT {CHILD_COLUMNS} FROM children WHERE id = ?", (child_id,))
    row = cursor.fetchone()
    if not row:
        raise HTTPException(status_code=404, detail="Child not found")
    return dict(row)


@router.put("/{child_id}")
async def update_child(child_id: int, child: ChildCreate, conn = Depends(get_db)):
    _require_name(child.name)
    cursor = conn.cursor()
    cursor.execute(
        """
        UPDATE children
        SET name = ?, grade = ?, birth_year = ?, birth_month = ?,
            enrollment_year = ?, enrollment_month = ?, notes = ?
        WHERE id = ?
        """,
        (
            child.name,
            child.grade,
            child.birth_year,
            child.birth_month,
            child.enrollment_year,
            child.enrollment_month,
            child.notes,
            child_id,
        ),
    )
    if cursor.rowcount == 0:
        raise HTTPException(status_code=404, detail="Child not found")
    return {"success": True}


@router.delete("/{child_id}")
async def delete_child(child_id: int, conn = Depends(get_db)):
    """Delete a child; their reading records go with them."""
    cursor = conn.cursor()
    cursor.execute("DELETE FROM children WHERE id = ?", (child_id,))
    if cursor.rowcount == 0:
        raise HTTPException(status_code=404, detail="Child not found")
    logger.info("Deleted child %s", child_id)
    return {"success": True}
