from pydantic import BaseModel, validator
from typing import Optional

class ChildBase(BaseModel):
    name: str
    grade: Optional[str] = None
    birth_year: Optional[int] = None
    birth_month: Optional[int] = None
    enrollment_year: Optional[int] = None
    enrollment_month: Optional[int] = None
    notes: Optional[str] = None

    @validator('birth_month', 'enrollment_month')
    def validate_month(cls, v):
        if v is not None and not 1 <= v <= 12:
            raise ValueError("Month must be between 1 and 12")
        return v

class ChildCreate(ChildBase):
    pass

class Child(ChildBase):
    id: int
    created_at: str  # ISO datetime

    class Config:
        from_attributes = True
