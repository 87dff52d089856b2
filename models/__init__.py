from .child import Child, ChildCreate
from .word_list import WordList, WordListCreate, WordListDetail, Word, WordCreate, WordBulkCreate
from .font import Font, FontCreate, FontUpdate, FontType, FONT_EXTENSIONS
from .reading_record import ReadingRecordCreate, ReadingStats
from .admin import ResetRequest

__all__ = [
    'Child', 'ChildCreate',
    'WordList', 'WordListCreate', 'WordListDetail', 'Word', 'WordCreate', 'WordBulkCreate',
    'Font', 'FontCreate', 'FontUpdate', 'FontType', 'FONT_EXTENSIONS',
    'ReadingRecordCreate', 'ReadingStats',
    'ResetRequest',
]
