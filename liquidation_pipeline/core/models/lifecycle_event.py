"""
LifecycleEvent model: one dated milestone of one unit, as seen by one run.
"""

from datetime import date
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from .vocabulary import LifecycleStage


class LifecycleEvent(BaseModel):
    """
    Append-only event log entry.

    Events accumulate across runs: a unit received again in a later file
    produces an additional "Received" event rather than replacing the
    earlier one.

    Attributes:
        unit_id: Unit the milestone belongs to
        stage: Lifecycle stage the milestone marks
        event_date: The milestone's own date
        file_business_date: Business date declared by the source file
        fiscal_week / fiscal_day_of_week: Fiscal position of event_date
        file_run_id: Run that observed the event
    """

    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "example": {
                "unit_id": "100234567",
                "stage": "Tested",
                "event_date": "2025-01-29",
                "file_business_date": "2025-02-01",
                "fiscal_week": 52,
                "fiscal_day_of_week": 5,
            }
        },
    )

    unit_id: str = Field(..., min_length=1)
    stage: LifecycleStage
    event_date: date
    file_business_date: date
    fiscal_week: int = Field(..., ge=1, le=53)
    fiscal_day_of_week: int = Field(..., ge=1, le=7)
    file_run_id: UUID | None = None
