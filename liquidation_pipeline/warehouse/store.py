"""
Store contract for derived ingestion tables, plus an in-memory store.

Rows cross the contract as plain dicts keyed by column name. Upserts
replace the whole row for a key (last write wins); appends never touch
existing rows.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterable, Mapping
from typing import Any
from uuid import UUID

from liquidation_pipeline.core.models import FileRun

UNITS_CANONICAL = "units_canonical"
LIFECYCLE_EVENTS = "lifecycle_events"
SALES_METRICS = "sales_metrics"
FEE_METRICS = "fee_metrics"
FILE_RUNS = "file_runs"
CHECKIN_FEE_LOOKUP = "checkin_fee_lookup"

UNIT_KEY = "unit_id"


class UnitStore(ABC):
    """
    Persistence seam the orchestrator writes through.

    Each call is atomic on its own: a failed call leaves no partial rows
    from that call behind.
    """

    @abstractmethod
    def create_file_run(self, run: FileRun) -> None:
        """Persist a new file run row."""

    @abstractmethod
    def mark_file_run_processed(self, run_id: UUID, row_count: int | None = None) -> None:
        """Flag a file run as fully processed."""

    @abstractmethod
    def upsert_by_key(self, table: str, key: str, rows: list[dict[str, Any]]) -> int:
        """
        Insert rows, replacing any existing row with the same key value.

        Returns:
            Number of rows written
        """

    @abstractmethod
    def append_only(self, table: str, rows: list[dict[str, Any]]) -> int:
        """
        Insert rows without any conflict handling.

        Returns:
            Number of rows written
        """

    @abstractmethod
    def read_rows(self, table: str) -> list[dict[str, Any]]:
        """All rows of a table, in no particular order."""

    def close(self) -> None:
        """Release resources held by the store."""


class InMemoryUnitStore(UnitStore):
    """
    Dict-backed store for tests and dry runs.
    """

    def __init__(self, seed: Mapping[str, Iterable[dict[str, Any]]] | None = None):
        self.keyed: dict[str, dict[Any, dict[str, Any]]] = {}
        self.appended: dict[str, list[dict[str, Any]]] = {}
        self.file_runs: dict[UUID, FileRun] = {}
        for table, rows in (seed or {}).items():
            self.appended.setdefault(table, []).extend(dict(row) for row in rows)

    def create_file_run(self, run: FileRun) -> None:
        if run.id in self.file_runs:
            raise ValueError(f"File run {run.id} already exists")
        self.file_runs[run.id] = run.model_copy()

    def mark_file_run_processed(self, run_id: UUID, row_count: int | None = None) -> None:
        run = self.file_runs.get(run_id)
        if run is None:
            raise KeyError(f"Unknown file run {run_id}")
        update: dict[str, Any] = {"processed": True}
        if row_count is not None:
            update["row_count"] = row_count
        self.file_runs[run_id] = run.model_copy(update=update)

    def upsert_by_key(self, table: str, key: str, rows: list[dict[str, Any]]) -> int:
        staged = {}
        for row in rows:
            if row.get(key) is None:
                raise ValueError(f"Row for '{table}' has no '{key}' value")
            staged[row[key]] = dict(row)
        self.keyed.setdefault(table, {}).update(staged)
        return len(rows)

    def append_only(self, table: str, rows: list[dict[str, Any]]) -> int:
        self.appended.setdefault(table, []).extend(dict(row) for row in rows)
        return len(rows)

    def read_rows(self, table: str) -> list[dict[str, Any]]:
        if table == FILE_RUNS:
            return [run.model_dump() for run in self.file_runs.values()]
        rows = list(self.keyed.get(table, {}).values())
        rows.extend(self.appended.get(table, []))
        return [dict(row) for row in rows]

    def count(self, table: str) -> int:
        return len(self.read_rows(table))

    def get(self, table: str, key_value: Any) -> dict[str, Any] | None:
        row = self.keyed.get(table, {}).get(key_value)
        return dict(row) if row is not None else None
