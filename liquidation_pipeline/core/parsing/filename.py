"""
File name conventions: "<Category> MM.DD.YY[YY].<ext>".
"""

import re
from datetime import date

from liquidation_pipeline.core.models import FileCategory

# Separators must agree so "02.01-25" is not read as a date
_BUSINESS_DATE = re.compile(r"(\d{1,2})([._-])(\d{1,2})\2(\d{4}|\d{2})(?!\d)")

# Checked in order; the first substring hit wins
CATEGORY_KEYWORDS: tuple[tuple[str, FileCategory], ...] = (
    ("sales", "Sales"),
    ("inbound", "Inbound"),
    ("outbound", "Outbound"),
    ("inventory", "Inventory"),
)


def parse_business_date(file_name: str) -> date | None:
    """
    Business date embedded in a file name.

    The first candidate that forms a real calendar date wins; two-digit
    years are taken as 20YY.

    Returns:
        The date, or None when the name carries no valid date
    """
    for match in _BUSINESS_DATE.finditer(file_name):
        month, _, day, year_text = match.groups()
        year = int(year_text)
        if len(year_text) == 2:
            year += 2000
        try:
            return date(year, int(month), int(day))
        except ValueError:
            continue
    return None


def detect_file_category(file_name: str) -> FileCategory:
    lowered = file_name.lower()
    for keyword, category in CATEGORY_KEYWORDS:
        if keyword in lowered:
            return category
    return "Unknown"
