"""
Row rule interface.

A validator that fails marks its row as skipped and names the reason;
it never aborts a run.
"""

from abc import ABC, abstractmethod
from typing import Any


class ValidationError(Exception):
    """Raised when a row-level rule fails."""

    def __init__(self, rule_name: str, field_name: str, message: str):
        self.rule_name = rule_name
        self.field_name = field_name
        self.message = message
        super().__init__(f"[{rule_name}] {field_name}: {message}")


class BaseValidator(ABC):
    """
    Checks one logical field of a resolved row.

    skip_reason is the key counted in RunResult.skip_reasons on failure.
    """

    skip_reason: str = "invalid_row"

    def __init__(self, field_name: str, parameters: dict[str, Any] | None = None):
        """
        Args:
            field_name: Logical field the rule reads
            parameters: Settings for the concrete rule, such as a regex pattern
        """
        self.field_name = field_name
        self.parameters = parameters or {}

    @abstractmethod
    def validate(self, value: str | None, row: dict[str, str]) -> None:
        """
        Args:
            value: Cell text, None when the file has no such column
            row: Every resolved field of the row

        Raises:
            ValidationError: When the row breaks the rule
        """

    @property
    @abstractmethod
    def rule_type(self) -> str:
        """Short rule name, e.g. "regex"."""

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(field={self.field_name}, params={self.parameters})"
