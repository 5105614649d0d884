"""
Unit tests for row-level validators.

Includes property-based testing with hypothesis for validators.
"""

import re

import pytest
from hypothesis import given
from hypothesis import strategies as st

from liquidation_pipeline.core.validators import (
    RegexValidator,
    RequiredFieldValidator,
    ValidationError,
)


class TestRequiredFieldValidator:
    """Tests for RequiredFieldValidator"""

    def test_valid_value_passes(self):
        """Test that non-empty value passes validation"""
        validator = RequiredFieldValidator("unit_id")
        validator.validate("100234567", {"unit_id": "100234567"})

    def test_absent_field_fails(self):
        """Test that an absent field fails validation"""
        validator = RequiredFieldValidator("unit_id")

        with pytest.raises(ValidationError) as exc_info:
            validator.validate(None, {})

        assert exc_info.value.rule_name == "required_field"
        assert exc_info.value.field_name == "unit_id"
        assert "missing" in exc_info.value.message

    @pytest.mark.parametrize("value", ["", "   ", "\t"])
    def test_blank_value_fails(self, value):
        """Test that empty or whitespace-only values fail validation"""
        validator = RequiredFieldValidator("unit_id")

        with pytest.raises(ValidationError) as exc_info:
            validator.validate(value, {"unit_id": value})

        assert "empty" in str(exc_info.value)

    def test_skip_reason(self):
        assert RequiredFieldValidator("unit_id").skip_reason == "missing_identifier"
        assert RequiredFieldValidator("unit_id").rule_type == "required_field"

    @given(st.text(min_size=1).filter(lambda s: s.strip() != ""))
    def test_any_non_blank_text_passes(self, value):
        """Property: any string with a non-whitespace character passes"""
        RequiredFieldValidator("unit_id").validate(value, {"unit_id": value})


class TestRegexValidator:
    """Tests for RegexValidator"""

    def test_full_match_required(self):
        """Test that a partial match is not enough"""
        validator = RegexValidator("unit_id", {"pattern": r"\d+"})

        validator.validate("12345", {})
        with pytest.raises(ValidationError):
            validator.validate("12345X", {})

    def test_surrounding_whitespace_ignored(self):
        validator = RegexValidator("unit_id", {"pattern": r"\d+"})
        validator.validate(" 12345 ", {})

    def test_absent_value_is_not_checked(self):
        """Test that absence is left to the required-field rule"""
        RegexValidator("unit_id", {"pattern": r"\d+"}).validate(None, {})

    def test_compiled_pattern(self):
        validator = RegexValidator("upc", {"pattern": re.compile(r"[0-9]{12}")})
        validator.validate("012345678905", {})

    def test_skip_reason_parameter(self):
        validator = RegexValidator("unit_id", {"pattern": r"\d+", "skip_reason": "malformed_identifier"})

        assert validator.skip_reason == "malformed_identifier"
        assert RegexValidator("upc", {"pattern": r"\d+"}).skip_reason == "malformed_value"

    def test_missing_pattern_rejected(self):
        with pytest.raises(ValueError):
            RegexValidator("unit_id", {})

    def test_invalid_pattern_rejected(self):
        with pytest.raises(ValueError) as exc_info:
            RegexValidator("unit_id", {"pattern": "[unclosed"})
        assert "Invalid regex" in str(exc_info.value)

    @given(st.from_regex(r"[0-9]{1,12}", fullmatch=True))
    def test_digit_strings_pass_numeric_pattern(self, value):
        RegexValidator("unit_id", {"pattern": r"^\d+$"}).validate(value, {})
