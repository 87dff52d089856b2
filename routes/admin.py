import logging

from fastapi import APIRouter, Depends, Request

from db.database import get_db
from db.seed import reset_word_lists
from models.admin import ResetRequest
from utils.auth import require_admin_password

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/reset-word-lists")
async def reset_word_lists_route(payload: ResetRequest, request: Request, conn = Depends(get_db)):
    """Wipe every word list and word, then reseed the defaults in one transaction."""
    require_admin_password(request, payload.password)
    count = reset_word_lists(conn)
    logger.warning("All word lists were reset by an administrator")
    return {"success": True, "count": count}
