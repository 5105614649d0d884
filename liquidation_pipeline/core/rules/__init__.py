"""
Row-level rule engine.
"""

from .rule_engine import STRICT_IDENTIFIER_PATTERN, RuleEngine, identifier_rules

__all__ = [
    "RuleEngine",
    "STRICT_IDENTIFIER_PATTERN",
    "identifier_rules",
]
