"""
Presence rule: the field must exist and hold non-blank text.
"""

from .base_validator import BaseValidator, ValidationError


class RequiredFieldValidator(BaseValidator):
    """
    Fails if the field is absent from the file, or the cell is empty or
    whitespace only.
    """

    skip_reason = "missing_identifier"

    def validate(self, value: str | None, row: dict[str, str]) -> None:
        if value is None:
            raise ValidationError(
                rule_name="required_field",
                field_name=self.field_name,
                message="Field is missing from row",
            )

        if value.strip() == "":
            raise ValidationError(
                rule_name="required_field",
                field_name=self.field_name,
                message="Field value is empty",
            )

    @property
    def rule_type(self) -> str:
        return "required_field"
