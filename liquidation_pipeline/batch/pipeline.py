"""
Batch upsert orchestration.

Coordinates the flow: read -> parse -> build -> upload in batches -> mark
the file run processed. This is the only component with side effects.
"""

import time
from collections.abc import Callable
from datetime import date
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from liquidation_pipeline.batch.progress import (
    CancellationToken,
    ProgressCallback,
    ProgressSink,
    ProgressTracker,
    as_sink,
)
from liquidation_pipeline.batch.readers import FileReader, OpenpyxlConverter, SpreadsheetConverter, is_spreadsheet
from liquidation_pipeline.core.builder import UnitRecordBuilder, to_fee_metric, to_sales_metric
from liquidation_pipeline.core.errors import (
    CanonicalWriteError,
    FileTooLargeError,
    IngestionError,
    NoUsableRowsError,
    StoreError,
    TooManyRowsError,
    UnsupportedFileError,
)
from liquidation_pipeline.core.fees import FeeLookupTable
from liquidation_pipeline.core.lifecycle import expand_events
from liquidation_pipeline.core.models import FileRun, RunResult, UnitRecord, carries_fees, carries_sales
from liquidation_pipeline.core.parsing import ParsedExtract, TabularFieldResolver
from liquidation_pipeline.core.schema import IDENTIFIER_FIELD
from liquidation_pipeline.core.settings import IngestSettings
from liquidation_pipeline.observability.logger import get_logger, log_operation
from liquidation_pipeline.observability.metrics import MetricsCollector
from liquidation_pipeline.warehouse.store import (
    FEE_METRICS,
    LIFECYCLE_EVENTS,
    SALES_METRICS,
    UNIT_KEY,
    UNITS_CANONICAL,
    UnitStore,
)

logger = get_logger(__name__)

# Legacy binary formats the converter cannot open
UNSUPPORTED_EXTENSIONS = (".xls", ".xlsb", ".numbers")


class RunOptions(BaseModel):
    """
    Per-run options.

    Attributes:
        progress: ProgressSink, or a callable (stage, percent, eta_seconds)
        cancellation: Token checked before the first batch and after each one
        batch_size: Records per batch; settings default when None
        strict: Require numeric identifiers; settings default when None
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    progress: Any = None
    cancellation: CancellationToken | None = None
    batch_size: int | None = Field(None, ge=1)
    strict: bool | None = None


class BatchUpsertOrchestrator:
    """
    Runs one extract through the pipeline against a UnitStore.

    Flow:
    1. Reading: size ceiling, spreadsheet conversion, chunked decoding
    2. Parsing: split, row ceiling, header resolution, record building
    3. Uploading: per batch, canonical upsert (fatal on failure), then
       lifecycle events, sales and fee metrics (best effort)
    4. Complete: mark the file run processed

    run() reports every failure through the returned RunResult.
    """

    def __init__(
        self,
        store: UnitStore,
        fee_lookup: FeeLookupTable | None = None,
        settings: IngestSettings | None = None,
        converter: SpreadsheetConverter | None = None,
        metrics: MetricsCollector | None = None,
        clock: Callable[[], float] = time.monotonic,
        today: Callable[[], date] = date.today,
    ):
        self.store = store
        self.settings = settings or IngestSettings()
        self.fee_lookup = fee_lookup or FeeLookupTable()
        self.converter = converter or OpenpyxlConverter()
        self.metrics = metrics or MetricsCollector()
        self.clock = clock
        self.today = today

        self.catalog = self.settings.field_catalog()
        self.reader = FileReader(self.settings.encodings, self.settings.read_chunk_size)
        self.builder = UnitRecordBuilder(self.fee_lookup, self.catalog)

    def run(
        self,
        file_bytes: bytes,
        file_name: str,
        options: RunOptions | None = None,
    ) -> RunResult:
        """
        Ingest one extract.

        Args:
            file_bytes: Raw file contents
            file_name: Original file name (category and business date)
            options: Progress sink, cancellation token, batch size, strictness

        Returns:
            RunResult with status complete, cancelled or error
        """
        options = options or RunOptions()
        tracker = ProgressTracker(as_sink(options.progress), clock=self.clock)
        token = options.cancellation or CancellationToken()
        batch_size = options.batch_size or self.settings.batch_size
        strict = self.settings.strict_identifiers if options.strict is None else options.strict

        started = self.clock()
        result = RunResult(status="error", file_name=file_name)
        logger.info(f"Starting ingestion of {file_name}", extra={"file_name": file_name, "strict": strict})

        try:
            with log_operation("reading", logger=logger, file_name=file_name):
                text = self._read(file_bytes, file_name, tracker)

            with log_operation("parsing", logger=logger, file_name=file_name):
                extract, units = self._parse(text, file_name, strict, tracker, result)

            with log_operation("uploading", logger=logger, file_name=file_name):
                cancelled = self._upload(extract, units, batch_size, token, tracker, result)

            result.status = "cancelled" if cancelled else "complete"
        except IngestionError as e:
            result.status = "error"
            result.error = e.message
            logger.error(
                f"Ingestion of {file_name} failed: {e.message}",
                extra={"file_name": file_name, "error_type": type(e).__name__},
            )

        tracker.finish(result.status)
        result.duration_seconds = round(self.clock() - started, 3)
        self.metrics.record_run(result.file_category, result.status, result.duration_seconds)
        logger.info(
            result.summary(),
            extra={
                "file_name": file_name,
                "status": result.status,
                "file_run_id": str(result.file_run_id) if result.file_run_id else None,
                "skip_reasons": result.skip_reasons,
                "secondary_failures": len(result.secondary_failures),
            },
        )
        return result

    # =======================
    # STAGES
    # =======================

    def _read(self, file_bytes: bytes, file_name: str, tracker: ProgressTracker) -> str:
        tracker.report("reading", 0.0)

        if len(file_bytes) > self.settings.max_file_bytes:
            raise FileTooLargeError(len(file_bytes), self.settings.max_file_bytes, file_name=file_name)

        lowered = file_name.lower()
        if lowered.endswith(UNSUPPORTED_EXTENSIONS):
            raise UnsupportedFileError(
                "Legacy spreadsheet formats are not supported; save the file as .xlsx or .csv",
                file_name=file_name,
            )
        if is_spreadsheet(file_name):
            file_bytes = self.converter.convert(file_bytes, file_name)

        text, encoding = self.reader.decode(
            file_bytes,
            on_chunk=lambda fraction: tracker.report("reading", fraction),
            file_name=file_name,
        )
        logger.debug(f"Decoded {len(file_bytes)} bytes as {encoding}")
        return text

    def _parse(
        self,
        text: str,
        file_name: str,
        strict: bool,
        tracker: ProgressTracker,
        result: RunResult,
    ) -> tuple[ParsedExtract, list[UnitRecord]]:
        tracker.report("parsing", 0.0)
        resolver = TabularFieldResolver(self.catalog, strict=strict, delimiter=self.settings.delimiter)

        table = resolver.split(text)
        if table.row_count > self.settings.max_rows:
            raise TooManyRowsError(table.row_count, self.settings.max_rows, file_name=file_name)

        extract = resolver.resolve(table, file_name)
        result.file_category = extract.file_category
        result.business_date = extract.business_date
        result.total_rows = extract.total_rows
        result.skipped_rows = extract.skipped_rows
        result.skip_reasons = dict(extract.skip_reasons)
        tracker.report("parsing", 0.5)

        if not table.headers:
            raise NoUsableRowsError("The file is empty", file_name=file_name)
        if IDENTIFIER_FIELD not in extract.matched_headers:
            expected = ", ".join(self.catalog.candidates(IDENTIFIER_FIELD))
            raise NoUsableRowsError(
                f"No unit identifier column found (expected one of: {expected})",
                file_name=file_name,
            )

        units = [self.builder.build(row) for row in extract.rows]
        result.records_built = len(units)
        self.metrics.record_rows(extract.file_category, len(units), extract.skip_reasons)

        if not units:
            raise NoUsableRowsError(
                f"No usable rows found in {file_name}: every row is missing a valid unit identifier",
                file_name=file_name,
            )

        tracker.report("parsing", 1.0)
        return extract, units

    def _upload(
        self,
        extract: ParsedExtract,
        units: list[UnitRecord],
        batch_size: int,
        token: CancellationToken,
        tracker: ProgressTracker,
        result: RunResult,
    ) -> bool:
        """
        Write all batches.

        Returns:
            True if the run was cancelled before every batch was written
        """
        business_date = extract.business_date or self.today()
        result.business_date = business_date
        file_run = FileRun(
            file_name=extract.file_name,
            file_category=extract.file_category,
            business_date=business_date,
            row_count=len(units),
        )
        try:
            self.store.create_file_run(file_run)
        except Exception as e:
            raise StoreError(f"Could not record the file run: {e}", file_name=extract.file_name) from e
        result.file_run_id = file_run.id

        batches = [units[i:i + batch_size] for i in range(0, len(units), batch_size)]
        result.batches_total = len(batches)
        tracker.start_uploading()

        # Checked before the first batch and after every batch, the last included
        if self._cancel_requested(token, result, file_run):
            return True
        for index, batch in enumerate(batches):
            self._write_batch(batch, index, len(batches), file_run, result)
            result.batches_completed += 1
            tracker.batch_done(result.batches_completed, len(batches))
            time.sleep(0)
            if self._cancel_requested(token, result, file_run):
                return True

        try:
            self.store.mark_file_run_processed(file_run.id, row_count=len(units))
        except Exception as e:
            raise StoreError(
                f"All batches were written but the file run could not be marked processed: {e}",
                file_name=extract.file_name,
            ) from e
        return False

    @staticmethod
    def _cancel_requested(token: CancellationToken, result: RunResult, file_run: FileRun) -> bool:
        if not token.cancelled:
            return False
        logger.warning(
            f"Run cancelled after {result.batches_completed} of {result.batches_total} batches",
            extra={"file_name": file_run.file_name, "file_run_id": str(file_run.id)},
        )
        return True

    def _write_batch(
        self,
        batch: list[UnitRecord],
        index: int,
        total: int,
        file_run: FileRun,
        result: RunResult,
    ) -> None:
        category = file_run.file_category
        unit_rows = [{**unit.model_dump(), "file_run_id": file_run.id} for unit in batch]

        write_started = self.clock()
        try:
            written = self.store.upsert_by_key(UNITS_CANONICAL, UNIT_KEY, unit_rows)
        except Exception as e:
            self.metrics.record_store_write(UNITS_CANONICAL, len(unit_rows), self.clock() - write_started, success=False)
            self.metrics.record_batch(category, len(batch), success=False)
            raise CanonicalWriteError(
                f"Batch {index + 1} of {total} could not be saved: {e}",
                batch_index=index,
                file_name=file_run.file_name,
            ) from e
        self.metrics.record_store_write(UNITS_CANONICAL, written, self.clock() - write_started)
        result.units_upserted += written

        events = [
            event.model_dump()
            for unit in batch
            for event in expand_events(unit, file_run.business_date, file_run.id)
        ]
        result.events_inserted += self._write_secondary(
            LIFECYCLE_EVENTS, events, index, result,
            lambda: self.store.append_only(LIFECYCLE_EVENTS, events),
        )

        if carries_sales(category):
            sales = [m.model_dump() for m in (to_sales_metric(u, file_run.id) for u in batch) if m is not None]
            result.sales_upserted += self._write_secondary(
                SALES_METRICS, sales, index, result,
                lambda: self.store.upsert_by_key(SALES_METRICS, UNIT_KEY, sales),
            )

        if carries_fees(category):
            fees = [m.model_dump() for m in (to_fee_metric(u, file_run.id) for u in batch) if m is not None]
            result.fees_upserted += self._write_secondary(
                FEE_METRICS, fees, index, result,
                lambda: self.store.upsert_by_key(FEE_METRICS, UNIT_KEY, fees),
            )

        self.metrics.record_batch(category, len(batch))

    def _write_secondary(
        self,
        table: str,
        rows: list[dict],
        index: int,
        result: RunResult,
        write: Callable[[], int],
    ) -> int:
        """
        Best-effort write: failures are logged and counted, never raised.
        """
        if not rows:
            return 0

        write_started = self.clock()
        try:
            written = write()
        except Exception as e:
            duration = self.clock() - write_started
            self.metrics.record_store_write(table, len(rows), duration, success=False)
            self.metrics.record_secondary_failure(table)
            result.secondary_failures.append(f"{table} batch {index + 1}: {e}")
            logger.warning(
                f"Write to {table} failed for batch {index + 1}; continuing",
                extra={"table": table, "batch_index": index, "rows": len(rows), "error": str(e)},
            )
            return 0

        self.metrics.record_store_write(table, written, self.clock() - write_started)
        return written


def run_file(
    store: UnitStore,
    file_bytes: bytes,
    file_name: str,
    progress: ProgressSink | ProgressCallback | None = None,
    **orchestrator_kwargs,
) -> RunResult:
    """Convenience wrapper: one orchestrator, one run."""
    orchestrator = BatchUpsertOrchestrator(store, **orchestrator_kwargs)
    return orchestrator.run(file_bytes, file_name, RunOptions(progress=progress))
