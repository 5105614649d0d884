"""
Retail fiscal calendar.

Weeks run Saturday (day 1) through Friday (day 7). The fiscal year starts on
the Saturday closest to February 1, so week numbers reach 53 in some years.
All functions are pure and accept either a date or a datetime.
"""

from datetime import date, datetime, timedelta

SATURDAY = 5  # date.weekday()
DAY_NAMES = ("Sat", "Sun", "Mon", "Tue", "Wed", "Thu", "Fri")


def _as_date(value: date | datetime) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value


def week_start(value: date | datetime) -> date:
    """Saturday on or before the given day."""
    day = _as_date(value)
    return day - timedelta(days=(day.weekday() - SATURDAY) % 7)


def week_end(value: date | datetime) -> date:
    """Friday closing the week of the given day."""
    return week_start(value) + timedelta(days=6)


def day_of_week(value: date | datetime) -> int:
    """Fiscal day number: Saturday=1 ... Friday=7."""
    return (_as_date(value).weekday() - SATURDAY) % 7 + 1


def _year_start_for(year: int) -> date:
    """
    Saturday closest to February 1 of the given calendar year.

    Ties go to the earlier Saturday.
    """
    feb_first = date(year, 2, 1)
    before = week_start(feb_first)
    if before == feb_first:
        return feb_first
    after = before + timedelta(days=7)
    if (feb_first - before) <= (after - feb_first):
        return before
    return after


def fiscal_year(value: date | datetime) -> int:
    """Calendar year in which the fiscal year containing the day began."""
    day = _as_date(value)
    year = day.year - 1 if day.month == 1 else day.year
    # A late-January start can precede Feb 1 of the same year, and a
    # Feb 1-3 day can precede its year's start.
    if day >= _year_start_for(year + 1):
        return year + 1
    if day < _year_start_for(year):
        return year - 1
    return year


def fiscal_year_start(value: date | datetime) -> date:
    """First Saturday of the fiscal year containing the given day."""
    return _year_start_for(fiscal_year(value))


def week_number(value: date | datetime) -> int:
    """1-based fiscal week; can be 53."""
    day = _as_date(value)
    return (week_start(day) - fiscal_year_start(day)).days // 7 + 1


def week_label(value: date | datetime) -> str:
    """Display label such as 'WK05 FY2025'."""
    return f"WK{week_number(value):02d} FY{fiscal_year(value)}"


def day_name(fiscal_day: int) -> str:
    """Short name for a fiscal day number, '' when out of range."""
    if 1 <= fiscal_day <= 7:
        return DAY_NAMES[fiscal_day - 1]
    return ""
