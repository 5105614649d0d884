"""
Cell value parsing.

Parsers never raise on bad input: anything that does not parse, or parses
to an implausible value, comes back as None.
"""

import math
import re
from datetime import date

MONEY_MIN = -1_000_000.0
MONEY_MAX = 1_000_000.0

MIN_YEAR = 1990
MAX_YEAR = 2100

_CURRENCY_CHARS = re.compile(r"[,$€£]")
_US_DATE = re.compile(
    r"^(\d{1,2})/(\d{1,2})/(\d{4})"
    r"(?:\s+(\d{1,2}):(\d{2})(?::(\d{2}))?\s*([AaPp][Mm])?)?$"
)
_ISO_DATE = re.compile(r"^(\d{4})-(\d{1,2})-(\d{1,2})(?:[T\s].*)?$")

TRUE_VALUES = frozenset({"true", "yes", "y", "1"})


def parse_number(
    value: str | None,
    min_value: float = MONEY_MIN,
    max_value: float = MONEY_MAX,
) -> float | None:
    """
    Parse a numeric cell.

    Thousands separators and currency symbols are stripped and accounting
    negatives such as "(12.50)" are honoured.

    Args:
        value: Raw cell text
        min_value: Smallest plausible value (inclusive)
        max_value: Largest plausible value (inclusive)

    Returns:
        The number, or None for blanks, garbage and out-of-bounds values
    """
    if value is None:
        return None

    text = _CURRENCY_CHARS.sub("", value).strip()
    if not text:
        return None

    negative = False
    if text.startswith("(") and text.endswith(")"):
        negative = True
        text = text[1:-1]

    try:
        number = float(text)
    except ValueError:
        return None

    if not math.isfinite(number):
        return None
    if negative:
        number = -number
    if number < min_value or number > max_value:
        return None
    return number


def _build_date(year: int, month: int, day: int) -> date | None:
    if year < MIN_YEAR or year > MAX_YEAR:
        return None
    try:
        return date(year, month, day)
    except ValueError:
        return None


def parse_date(value: str | None) -> date | None:
    """
    Parse a date cell into a date-only value.

    Accepts MM/DD/YYYY, MM/DD/YYYY hh:mm[:ss] [AM|PM] and ISO YYYY-MM-DD
    (with or without a time part). The time of day is dropped, so no
    timezone can move the value across midnight.
    """
    if value is None:
        return None
    text = value.strip()
    if not text:
        return None

    match = _US_DATE.match(text)
    if match:
        month, day, year = (int(part) for part in match.group(1, 2, 3))
        if match.group(4) is not None and int(match.group(4)) > 23:
            return None
        return _build_date(year, month, day)

    match = _ISO_DATE.match(text)
    if match:
        year, month, day = (int(part) for part in match.group(1, 2, 3))
        return _build_date(year, month, day)

    return None


def parse_bool(value: str | None) -> bool:
    if value is None:
        return False
    return value.strip().lower() in TRUE_VALUES


def clean_text(value: str | None) -> str | None:
    """Trimmed text, or None when blank."""
    if value is None:
        return None
    text = value.strip()
    return text or None
