"""
Rule engine for row-level checks on resolved extract rows.

A row either passes every rule or is skipped with the reason of the first
rule it fails. Rules are ordered: presence is checked before format.
"""

from typing import Any

from liquidation_pipeline.core.schema import IDENTIFIER_FIELD
from liquidation_pipeline.core.validators import (
    BaseValidator,
    RegexValidator,
    RequiredFieldValidator,
    ValidationError,
)

STRICT_IDENTIFIER_PATTERN = r"^\d+$"


class RuleEngine:
    """
    Applies validators to rows in order and reports the first failure.
    """

    VALIDATOR_REGISTRY = {
        "required_field": RequiredFieldValidator,
        "regex": RegexValidator,
    }

    def __init__(self, rules: list[dict[str, Any]]):
        """
        Args:
            rules: List of rule configurations, each containing:
                   - rule_type: str (required_field, regex)
                   - field_name: str
                   - parameters: Dict[str, Any] (optional)
                   - enabled: bool (default True)
        """
        self.rules = rules
        self.validators: list[BaseValidator] = []
        self._build_validators()

    def _build_validators(self) -> None:
        for rule in self.rules:
            if not rule.get("enabled", True):
                continue

            rule_type = rule["rule_type"]
            validator_class = self.VALIDATOR_REGISTRY.get(rule_type)
            if not validator_class:
                raise ValueError(f"Unknown rule type: {rule_type}")

            try:
                validator = validator_class(rule["field_name"], rule.get("parameters", {}))
            except ValueError as e:
                raise ValueError(f"Failed to create validator for field '{rule['field_name']}': {e}")
            self.validators.append(validator)

    def check(self, row: dict[str, str]) -> str | None:
        """
        Check one resolved row.

        Args:
            row: Logical field -> cell text for the fields the file carries

        Returns:
            None if the row passes, else the skip reason of the first
            failing rule
        """
        for validator in self.validators:
            try:
                validator.validate(row.get(validator.field_name), row)
            except ValidationError:
                return validator.skip_reason
        return None

    def get_rule_summary(self) -> dict[str, Any]:
        counts: dict[str, int] = {}
        for validator in self.validators:
            counts[validator.rule_type] = counts.get(validator.rule_type, 0) + 1
        return {"total_rules": len(self.validators), "rules_by_type": counts}


def identifier_rules(strict: bool = False) -> RuleEngine:
    """
    Rules applied to the unit identifier.

    Args:
        strict: Also require a purely numeric identifier

    Returns:
        RuleEngine whose skip reasons are 'missing_identifier' and, in
        strict mode, 'malformed_identifier'
    """
    rules: list[dict[str, Any]] = [
        {"rule_type": "required_field", "field_name": IDENTIFIER_FIELD},
    ]
    if strict:
        rules.append({
            "rule_type": "regex",
            "field_name": IDENTIFIER_FIELD,
            "parameters": {
                "pattern": STRICT_IDENTIFIER_PATTERN,
                "skip_reason": "malformed_identifier",
            },
        })
    return RuleEngine(rules)
