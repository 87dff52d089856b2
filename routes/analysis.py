from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request

from db.database import get_db
from utils.stats import child_reading_records, child_reading_stats

router = APIRouter()


@router.get("/mirror")
async def mirrored_records(request: Request, child_name: Optional[str] = None):
    """Records as stored in the document mirror; empty when the mirror is off or unreachable."""
    records = await request.app.state.record_mirror.fetch(child_name)
    return {"records": records}


@router.get("/{child_id}")
async def child_analysis(child_id: int, conn = Depends(get_db)):
    """Reading history and aggregate stats for one child."""
    cursor = conn.cursor()
    cursor.execute("SELECT id FROM children WHERE id = ?", (child_id,))
    if not cursor.fetchone():
        raise HTTPException(status_code=404, detail="Child not found")
    records = child_reading_records(conn, child_id)
    stats = child_reading_stats(conn, child_id)
    return {"records": records, "stats": stats.model_dump()}
