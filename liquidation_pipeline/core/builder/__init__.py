"""
Unit record building and derived secondary-store records.
"""

from .derived import to_fee_metric, to_sales_metric
from .unit_builder import UnitRecordBuilder, effective_retail

__all__ = [
    "UnitRecordBuilder",
    "effective_retail",
    "to_fee_metric",
    "to_sales_metric",
]
