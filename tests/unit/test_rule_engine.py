"""
Unit tests for the rule engine and identifier rules.
"""

import pytest

from liquidation_pipeline.core.rules import RuleEngine, identifier_rules


class TestRuleEngine:
    """Tests for RuleEngine"""

    def test_check_passes_when_all_rules_pass(self):
        engine = RuleEngine([
            {"rule_type": "required_field", "field_name": "unit_id"},
            {"rule_type": "regex", "field_name": "upc", "parameters": {"pattern": r"\d+"}},
        ])

        assert engine.check({"unit_id": "1001", "upc": "0123"}) is None

    def test_first_failing_rule_reports_reason(self):
        """Test rules are evaluated in order and the first failure wins"""
        engine = RuleEngine([
            {"rule_type": "required_field", "field_name": "unit_id"},
            {"rule_type": "regex", "field_name": "unit_id", "parameters": {"pattern": r"\d+", "skip_reason": "bad_id"}},
        ])

        assert engine.check({}) == "missing_identifier"
        assert engine.check({"unit_id": "X1"}) == "bad_id"

    def test_disabled_rules_are_skipped(self):
        engine = RuleEngine([
            {"rule_type": "required_field", "field_name": "unit_id", "enabled": False},
        ])

        assert engine.check({}) is None
        assert engine.get_rule_summary()["total_rules"] == 0

    def test_unknown_rule_type(self):
        with pytest.raises(ValueError) as exc_info:
            RuleEngine([{"rule_type": "range", "field_name": "sale_price"}])
        assert "Unknown rule type" in str(exc_info.value)

    def test_invalid_rule_parameters(self):
        with pytest.raises(ValueError) as exc_info:
            RuleEngine([{"rule_type": "regex", "field_name": "unit_id"}])
        assert "unit_id" in str(exc_info.value)

    def test_rule_summary(self):
        engine = identifier_rules(strict=True)

        assert engine.get_rule_summary() == {
            "total_rules": 2,
            "rules_by_type": {"required_field": 1, "regex": 1},
        }


class TestIdentifierRules:
    """Tests for the unit identifier rules"""

    @pytest.mark.parametrize("row", [{}, {"unit_id": ""}, {"unit_id": "   "}])
    def test_missing_identifier(self, row):
        assert identifier_rules().check(row) == "missing_identifier"
        assert identifier_rules(strict=True).check(row) == "missing_identifier"

    def test_lenient_accepts_any_identifier(self):
        assert identifier_rules().check({"unit_id": "ABC-1"}) is None

    def test_strict_requires_digits(self):
        engine = identifier_rules(strict=True)

        assert engine.check({"unit_id": "100234567"}) is None
        assert engine.check({"unit_id": "ABC-1"}) == "malformed_identifier"
        assert engine.check({"unit_id": "12 34"}) == "malformed_identifier"
