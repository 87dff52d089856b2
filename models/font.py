from pydantic import BaseModel
from typing import Optional
from enum import Enum

class FontType(str, Enum):
    SYSTEM = "system"
    WEBFONT = "webfont"
    CUSTOM = "custom"

# Allowed extensions for uploaded (custom) fonts
FONT_EXTENSIONS = {".ttf", ".otf", ".woff", ".woff2"}

class FontCreate(BaseModel):
    """A font referenced by name only; custom fonts go through the upload route."""
    name: str
    font_family: str
    font_type: FontType = FontType.SYSTEM

class FontUpdate(BaseModel):
    is_active: bool

class Font(BaseModel):
    id: int
    name: str
    font_family: str
    font_type: FontType
    file_path: Optional[str] = None
    is_active: bool = True
    created_at: str

    class Config:
        from_attributes = True
