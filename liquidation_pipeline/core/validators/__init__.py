"""
Row-level validation rules used to accept or skip extract rows.
"""

from .base_validator import BaseValidator, ValidationError
from .regex_validator import RegexValidator
from .required_field_validator import RequiredFieldValidator

__all__ = [
    "BaseValidator",
    "ValidationError",
    "RequiredFieldValidator",
    "RegexValidator",
]
