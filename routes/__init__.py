# Routes package __init__.py - re-exports routers for main.py convenience
from .children import router as children_router
from .word_lists import router as word_lists_router
from .words import router as words_router
from .fonts import router as fonts_router
from .reading_records import router as reading_records_router
from .analysis import router as analysis_router
from .admin import router as admin_router

__all__ = [
    'children_router',
    'word_lists_router',
    'words_router',
    'fonts_router',
    'reading_records_router',
    'analysis_router',
    'admin_router',
]
