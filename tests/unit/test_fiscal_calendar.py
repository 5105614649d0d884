"""
Unit tests for the retail fiscal calendar.

Includes property-based testing with hypothesis over arbitrary dates.
"""

from datetime import date, datetime, timedelta

import pytest
from hypothesis import given
from hypothesis import strategies as st

from liquidation_pipeline.core import fiscal_calendar as fc

dates = st.dates(min_value=date(1995, 1, 1), max_value=date(2095, 12, 31))


class TestWeekBoundaries:
    """Tests for Saturday-to-Friday weeks"""

    def test_saturday_starts_its_own_week(self):
        assert fc.week_start(date(2025, 2, 1)) == date(2025, 2, 1)

    def test_friday_belongs_to_previous_saturday(self):
        assert fc.week_start(date(2025, 2, 7)) == date(2025, 2, 1)
        assert fc.week_end(date(2025, 2, 1)) == date(2025, 2, 7)

    def test_day_of_week_numbers(self):
        """Test Saturday is day 1 and Friday is day 7"""
        assert fc.day_of_week(date(2025, 2, 1)) == 1
        assert fc.day_of_week(date(2025, 2, 2)) == 2
        assert fc.day_of_week(date(2025, 2, 7)) == 7

    def test_accepts_datetime(self):
        assert fc.week_start(datetime(2025, 2, 5, 23, 59)) == date(2025, 2, 1)
        assert fc.day_of_week(datetime(2025, 2, 5, 0, 1)) == 5

    def test_day_name(self):
        assert fc.day_name(1) == "Sat"
        assert fc.day_name(7) == "Fri"
        assert fc.day_name(0) == ""
        assert fc.day_name(8) == ""


class TestFiscalYear:
    """Tests for fiscal year boundaries and week numbers"""

    def test_year_starting_on_february_first(self):
        """Test Feb 1 2025 is a Saturday and opens FY2025"""
        assert fc.fiscal_year_start(date(2025, 2, 1)) == date(2025, 2, 1)
        assert fc.fiscal_year(date(2025, 2, 1)) == 2025
        assert fc.week_number(date(2025, 2, 1)) == 1

    def test_following_week_is_week_two(self):
        assert fc.week_number(date(2025, 2, 8)) == 2
        assert fc.week_number(date(2025, 2, 14)) == 2

    def test_day_before_year_start_closes_previous_year(self):
        """Test Jan 31 2025 is in the last week of FY2024"""
        assert fc.fiscal_year(date(2025, 1, 31)) == 2024
        assert fc.fiscal_year_start(date(2025, 1, 31)) == date(2024, 2, 3)
        assert fc.week_number(date(2025, 1, 31)) == 52

    def test_year_starting_in_late_january(self):
        """Test FY2026 starts Sat Jan 31 2026, the Saturday closest to Feb 1"""
        assert fc.fiscal_year_start(date(2026, 1, 31)) == date(2026, 1, 31)
        assert fc.fiscal_year(date(2026, 1, 31)) == 2026
        assert fc.week_number(date(2026, 1, 31)) == 1
        assert fc.fiscal_year(date(2026, 1, 30)) == 2025

    def test_early_february_before_year_start(self):
        """Test Feb 1-2 2024 fall before the FY2024 start on Feb 3"""
        assert fc.fiscal_year(date(2024, 2, 2)) == 2023
        assert fc.fiscal_year(date(2024, 2, 3)) == 2024

    def test_fifty_three_week_year(self):
        """Test FY2022 runs Jan 29 2022 to Feb 3 2023 with 53 weeks"""
        assert fc.fiscal_year_start(date(2022, 6, 1)) == date(2022, 1, 29)
        assert fc.week_number(date(2023, 1, 28)) == 53
        assert fc.week_number(date(2023, 2, 3)) == 53
        assert fc.week_number(date(2023, 2, 4)) == 1

    def test_week_label(self):
        assert fc.week_label(date(2025, 2, 8)) == "WK02 FY2025"
        assert fc.week_label(date(2025, 1, 31)) == "WK52 FY2024"

    @pytest.mark.parametrize("year", range(2015, 2035))
    def test_year_start_is_saturday_near_february_first(self, year):
        start = fc._year_start_for(year)
        assert start.weekday() == fc.SATURDAY
        assert abs((start - date(year, 2, 1)).days) <= 3


class TestFiscalCalendarProperties:
    """Property-based tests with hypothesis"""

    @given(dates)
    def test_week_start_is_saturday_within_six_days(self, day):
        start = fc.week_start(day)
        assert start.weekday() == fc.SATURDAY
        assert 0 <= (day - start).days <= 6

    @given(dates)
    def test_day_of_week_locates_day_in_week(self, day):
        fiscal_day = fc.day_of_week(day)
        assert 1 <= fiscal_day <= 7
        assert fc.week_start(day) + timedelta(days=fiscal_day - 1) == day

    @given(dates)
    def test_week_number_in_range(self, day):
        assert 1 <= fc.week_number(day) <= 53

    @given(dates)
    def test_day_lies_inside_its_fiscal_year(self, day):
        year = fc.fiscal_year(day)
        assert fc._year_start_for(year) <= day < fc._year_start_for(year + 1)

    @given(dates)
    def test_whole_week_shares_number(self, day):
        start = fc.week_start(day)
        assert fc.week_number(start) == fc.week_number(fc.week_end(day))

    @given(dates)
    def test_next_week_in_same_year_increments_number(self, day):
        following = day + timedelta(days=7)
        if fc.fiscal_year(following) == fc.fiscal_year(day):
            assert fc.week_number(following) == fc.week_number(day) + 1
        else:
            assert fc.week_number(following) == 1

    @given(st.integers(min_value=1996, max_value=2094))
    def test_year_starts_on_week_one_saturday(self, year):
        start = fc._year_start_for(year)
        assert fc.week_number(start) == 1
        assert fc.day_of_week(start) == 1
        assert fc.fiscal_year(start) == year
