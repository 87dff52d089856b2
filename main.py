import argparse
import logging
import sqlite3
from contextlib import asynccontextmanager
from typing import Any, Dict, Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from config import load_config
from db.database import Database
from routes import (
    admin_router,
    analysis_router,
    children_router,
    fonts_router,
    reading_records_router,
    word_lists_router,
    words_router,
)
from utils.auth import hash_password
from utils.sinks import FirestoreNotifier, RecordNotifier, SheetsNotifier, build_notifier
from utils.storage import FontStorage

logger = logging.getLogger(__name__)


def _failure(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "message": message})


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return _failure(exc.status_code, str(exc.detail))


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    if errors:
        first = errors[0]
        location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"{location}: {first.get('msg')}" if location else str(first.get("msg"))
    else:
        message = "Invalid request"
    return _failure(400, message)


async def database_exception_handler(request: Request, exc: sqlite3.Error):
    logger.error("Database error on %s %s", request.method, request.url.path, exc_info=exc)
    return _failure(500, "Database operation failed")


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return _failure(500, "Internal server error")


def create_app(config: Optional[Dict[str, Any]] = None, notifier: Optional[RecordNotifier] = None) -> FastAPI:
    """Build the application. Config is loaded at startup when not given."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        cfg = config or load_config()
        logging.basicConfig(level=cfg["logging"]["level"])
        db = Database(cfg["database"]["path"])
        db.init(seed=cfg["seed"]["sample_data"])
        app.state.config = cfg
        app.state.db = db
        app.state.font_storage = FontStorage(cfg["storage"]["fonts_dir"])
        app.state.notifier = notifier or build_notifier(cfg)
        app.state.record_mirror = FirestoreNotifier(cfg["firebase"])
        logger.info("ReadCheck started")
        yield
        db.close()

    app = FastAPI(
        title="ReadCheck",
        description="Reading-assessment records for dyslexia support",
        lifespan=lifespan,
    )
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(sqlite3.Error, database_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    app.include_router(children_router, prefix="/api/children", tags=["children"])
    app.include_router(word_lists_router, prefix="/api/word-lists", tags=["word-lists"])
    app.include_router(words_router, prefix="/api/words", tags=["words"])
    app.include_router(fonts_router, prefix="/api/fonts", tags=["fonts"])
    app.include_router(reading_records_router, prefix="/api", tags=["reading-records"])
    app.include_router(analysis_router, prefix="/api/analysis", tags=["analysis"])
    app.include_router(admin_router, prefix="/api/admin", tags=["admin"])
    return app


app = create_app()

if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="ReadCheck App")
    parser.add_argument("--init", action="store_true", help="Initialize DB and config")
    parser.add_argument("--dev", action="store_true", help="Run in dev mode with reload")
    parser.add_argument("--sheets-header", action="store_true", help="Write the column header to the Google Sheet")
    parser.add_argument("--hash-password", metavar="PASSWORD", help="Print a hash to use as [admin] password")
    args = parser.parse_args()
    config = load_config()
    logging.basicConfig(level=config["logging"]["level"])
    if args.hash_password:
        print(hash_password(args.hash_password))
        exit(0)
    if args.init:
        Database(config["database"]["path"]).init(seed=config["seed"]["sample_data"])
        print("DB initialized and config copied to ~/.readcheck/")
        exit(0)
    if args.sheets_header:
        ok = SheetsNotifier(config["google_sheets"]).write_header()
        exit(0 if ok else 1)
    uvicorn.run(
        "main:app",
        host=config["server"]["host"],
        port=config["server"]["port"],
        reload=args.dev,
        log_level=config["logging"]["level"].lower(),
    )
