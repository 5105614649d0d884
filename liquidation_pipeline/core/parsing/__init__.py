"""
Extract parsing: delimited text, cell values, file names and logical rows.
"""

from .delimited import DelimitedTable, detect_delimiter, split_table
from .filename import detect_file_category, parse_business_date
from .tabular import ParsedExtract, TabularFieldResolver
from .values import clean_text, parse_bool, parse_date, parse_number

__all__ = [
    "DelimitedTable",
    "ParsedExtract",
    "TabularFieldResolver",
    "clean_text",
    "detect_delimiter",
    "detect_file_category",
    "parse_bool",
    "parse_business_date",
    "parse_date",
    "parse_number",
    "split_table",
]
