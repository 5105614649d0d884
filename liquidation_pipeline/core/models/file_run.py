"""
FileRun model: bookkeeping row for one ingestion invocation.
"""

from datetime import date, datetime, timezone
from uuid import UUID, uuid4

from pydantic import BaseModel, Field

from .vocabulary import FileCategory


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class FileRun(BaseModel):
    """
    Created when uploading starts, updated exactly once when every batch
    has committed.

    Attributes:
        id: Run identifier, referenced by every row the run writes
        file_name: Original file name
        file_category: Category detected from the file name
        business_date: Date parsed from the file name, else the run date
        row_count: Number of records built from the file
        processed: True only after all batches completed
        created_at: When the run row was created
    """

    id: UUID = Field(default_factory=uuid4)
    file_name: str = Field(..., min_length=1)
    file_category: FileCategory = "Unknown"
    business_date: date
    row_count: int = Field(0, ge=0)
    processed: bool = False
    created_at: datetime = Field(default_factory=_utcnow)
