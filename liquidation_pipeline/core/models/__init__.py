"""
Core data models for the liquidation ingestion pipeline.

All models use Pydantic for runtime validation; records built by a run are
frozen.
"""

from .fee_metric import FeeMetricRecord
from .file_run import FileRun
from .lifecycle_event import LifecycleEvent
from .run_result import RunResult
from .sales_metric import SalesMetricRecord
from .unit_record import (
    CALCULATED_FEE_FIELDS,
    INVOICED_FEE_FIELDS,
    MILESTONE_FIELDS,
    UnitRecord,
)
from .vocabulary import (
    FILE_CATEGORIES,
    LIFECYCLE_STAGES,
    FileCategory,
    LifecycleStage,
    RunStage,
    RunStatus,
    carries_fees,
    carries_sales,
)

__all__ = [
    "UnitRecord",
    "LifecycleEvent",
    "SalesMetricRecord",
    "FeeMetricRecord",
    "FileRun",
    "RunResult",
    "CALCULATED_FEE_FIELDS",
    "INVOICED_FEE_FIELDS",
    "MILESTONE_FIELDS",
    "FILE_CATEGORIES",
    "LIFECYCLE_STAGES",
    "FileCategory",
    "LifecycleStage",
    "RunStage",
    "RunStatus",
    "carries_fees",
    "carries_sales",
]
