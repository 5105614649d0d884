"""
Lifecycle stage derivation.

A unit's stage is recomputed from its milestone dates on every run; no
previous state is consulted.
"""

from collections.abc import Mapping
from datetime import date
from uuid import UUID

from liquidation_pipeline.core import fiscal_calendar
from liquidation_pipeline.core.models import LIFECYCLE_STAGES, LifecycleEvent, LifecycleStage, UnitRecord

# Highest priority first
STAGE_PRIORITY: tuple[LifecycleStage, ...] = ("Sold", "Listed", "Tested", "CheckedIn", "Received")


def derive_stage(dates: Mapping[str, date | None]) -> LifecycleStage | None:
    """
    Highest-priority stage that has a date.

    Args:
        dates: Lifecycle stage -> milestone date (None or missing when absent)

    Returns:
        The stage, or None when no milestone date is present
    """
    for stage in STAGE_PRIORITY:
        if dates.get(stage) is not None:
            return stage
    return None


def current_stage(unit: UnitRecord) -> LifecycleStage | None:
    return derive_stage(unit.milestone_dates())


def expand_events(
    unit: UnitRecord,
    file_business_date: date,
    file_run_id: UUID | None = None,
) -> list[LifecycleEvent]:
    """
    One event per milestone the unit carries, in lifecycle order.

    Each event's fiscal week and day come from its own date, not the
    file's business date.
    """
    events = []
    dates = unit.milestone_dates()
    for stage in LIFECYCLE_STAGES:
        event_date = dates.get(stage)
        if event_date is None:
            continue
        events.append(
            LifecycleEvent(
                unit_id=unit.unit_id,
                stage=stage,
                event_date=event_date,
                file_business_date=file_business_date,
                fiscal_week=fiscal_calendar.week_number(event_date),
                fiscal_day_of_week=fiscal_calendar.day_of_week(event_date),
                file_run_id=file_run_id,
            )
        )
    return events
