"""
Extract readers.
"""

from .file_reader import FileReader
from .spreadsheet_reader import (
    SPREADSHEET_EXTENSIONS,
    OpenpyxlConverter,
    SpreadsheetConverter,
    is_spreadsheet,
)

__all__ = [
    "FileReader",
    "OpenpyxlConverter",
    "SPREADSHEET_EXTENSIONS",
    "SpreadsheetConverter",
    "is_spreadsheet",
]
