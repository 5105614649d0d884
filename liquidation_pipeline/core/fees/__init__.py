"""
Check-in fee lookup.
"""

from .defaults import DEFAULT_CHECKIN_FEES
from .lookup import FeeLookupTable, fee_key

__all__ = [
    "DEFAULT_CHECKIN_FEES",
    "FeeLookupTable",
    "fee_key",
]
