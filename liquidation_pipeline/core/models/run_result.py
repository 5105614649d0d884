"""
RunResult model: outcome of one orchestrator run.
"""

from datetime import date
from uuid import UUID

from pydantic import BaseModel, Field

from .vocabulary import FileCategory, RunStatus


class RunResult(BaseModel):
    """
    End-of-run report returned by the orchestrator.

    Per-row skips and secondary-store failures are kept here for logs and
    diagnostics; summary() is the single message shown to the end user.
    """

    status: RunStatus
    file_name: str
    file_category: FileCategory = "Unknown"
    business_date: date | None = None
    file_run_id: UUID | None = None

    total_rows: int = 0
    records_built: int = 0
    skipped_rows: int = 0
    skip_reasons: dict[str, int] = Field(default_factory=dict)

    batches_total: int = 0
    batches_completed: int = 0
    units_upserted: int = 0
    events_inserted: int = 0
    sales_upserted: int = 0
    fees_upserted: int = 0
    secondary_failures: list[str] = Field(default_factory=list)

    error: str | None = None
    duration_seconds: float = 0.0

    @property
    def succeeded(self) -> bool:
        return self.status == "complete"

    def summary(self) -> str:
        if self.status == "complete":
            return f"Upload complete: {self.records_built} rows processed from {self.file_name}"
        if self.status == "cancelled":
            return (
                f"Upload cancelled: {self.batches_completed} of {self.batches_total} "
                f"batches committed from {self.file_name}"
            )
        return f"Upload failed: {self.error or 'unknown error'}"
