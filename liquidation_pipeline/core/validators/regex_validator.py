"""
Pattern rule: the trimmed cell must match a regular expression in full.
"""

import re
from re import Pattern
from typing import Any

from .base_validator import BaseValidator, ValidationError


class RegexValidator(BaseValidator):
    """
    Parameters:
    - pattern: Regular expression text or a compiled Pattern
    - skip_reason: Overrides the reason counted on a mismatch
    """

    skip_reason = "malformed_value"

    def __init__(self, field_name: str, parameters: dict[str, Any] | None = None):
        super().__init__(field_name, parameters)

        pattern = self.parameters.get("pattern")
        if not pattern:
            raise ValueError("RegexValidator requires 'pattern' parameter")

        try:
            if isinstance(pattern, str):
                self.pattern: Pattern = re.compile(pattern)
            elif isinstance(pattern, Pattern):
                self.pattern = pattern
            else:
                raise ValueError(f"Pattern must be string or compiled Pattern, got {type(pattern)}")
        except re.error as e:
            raise ValueError(f"Invalid regex pattern: {e}")

        if "skip_reason" in self.parameters:
            self.skip_reason = self.parameters["skip_reason"]

    def validate(self, value: str | None, row: dict[str, str]) -> None:
        """
        Raises:
            ValidationError: If value doesn't match the pattern
        """
        # Absence is the required-field rule's concern
        if value is None:
            return

        if not self.pattern.fullmatch(value.strip()):
            raise ValidationError(
                rule_name="regex",
                field_name=self.field_name,
                message=f"Value '{value}' does not match pattern '{self.pattern.pattern}'",
            )

    @property
    def rule_type(self) -> str:
        return "regex"
