"""
Closed vocabularies shared by the models and the pipeline.
"""

from typing import Literal, get_args

LifecycleStage = Literal["Received", "CheckedIn", "Tested", "Listed", "Sold"]

FileCategory = Literal["Sales", "Inbound", "Outbound", "Inventory", "Unknown"]

RunStage = Literal["reading", "parsing", "uploading", "complete", "error", "cancelled"]

RunStatus = Literal["complete", "cancelled", "error"]

LIFECYCLE_STAGES: tuple[str, ...] = get_args(LifecycleStage)
FILE_CATEGORIES: tuple[str, ...] = get_args(FileCategory)

# Categories whose extracts carry sale / fee columns worth a secondary store
SALES_CATEGORIES = frozenset({"Sales"})
FEE_CATEGORIES = frozenset({"Sales", "Outbound"})


def carries_sales(category: str) -> bool:
    return category in SALES_CATEGORIES


def carries_fees(category: str) -> bool:
    return category in FEE_CATEGORIES
