from pydantic import BaseModel, validator
from typing import Optional

class ReadingRecordCreate(BaseModel):
    child_id: int
    word_id: int
    could_read: bool
    reading_time_seconds: Optional[float] = None
    misread_as: Optional[str] = None
    notes: Optional[str] = None
    font_id: Optional[int] = None

    @validator('reading_time_seconds')
    def validate_reading_time(cls, v):
        if v is not None and v < 0:
            raise ValueError("Reading time cannot be negative")
        return v

    @validator('misread_as')
    def blank_misread_is_none(cls, v):
        if v is not None and not v.strip():
            return None
        return v

class ReadingStats(BaseModel):
    total_tests: int = 0
    successful_reads: int = 0
    avg_time: Optional[float] = None
    misread_count: int = 0
    test_days: int = 0
