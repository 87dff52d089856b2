from pydantic import BaseModel
from typing import List, Optional

class WordListBase(BaseModel):
    name: str
    description: Optional[str] = None

class WordListCreate(WordListBase):
    pass

class WordList(WordListBase):
    id: int
    created_at: str  # ISO datetime

    class Config:
        from_attributes = True

class WordCreate(BaseModel):
    word_list_id: int
    word_text: str

class WordBulkCreate(BaseModel):
    word_list_id: int
    words: List[str]

class Word(BaseModel):
    id: int
    word_list_id: int
    word_text: str
    display_order: Optional[int] = None

    class Config:
        from_attributes = True

class WordListDetail(WordList):
    words: List[Word] = []
