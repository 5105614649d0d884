"""
Error taxonomy for ingestion runs.

Row-level problems are not exceptions: offending rows are skipped and
counted. Everything here aborts a run; the orchestrator turns it into a
RunResult with status "error".
"""


class IngestionError(Exception):
    """Base class for run-fatal ingestion failures."""

    def __init__(self, message: str, file_name: str | None = None):
        self.message = message
        self.file_name = file_name
        super().__init__(message)


class FileTooLargeError(IngestionError):
    """Input exceeds the configured byte ceiling."""

    def __init__(self, size_bytes: int, max_bytes: int, file_name: str | None = None):
        self.size_bytes = size_bytes
        self.max_bytes = max_bytes
        super().__init__(
            f"File is {size_bytes} bytes, above the {max_bytes} byte limit",
            file_name=file_name,
        )


class TooManyRowsError(IngestionError):
    """Input exceeds the configured row ceiling."""

    def __init__(self, row_count: int, max_rows: int, file_name: str | None = None):
        self.row_count = row_count
        self.max_rows = max_rows
        super().__init__(
            f"File has {row_count} data rows, above the {max_rows} row limit",
            file_name=file_name,
        )


class FileDecodeError(IngestionError):
    """Input bytes could not be decoded with any configured encoding."""


class UnsupportedFileError(IngestionError):
    """Input format cannot be turned into delimited text."""


class NoUsableRowsError(IngestionError):
    """Parsing produced zero records; nothing is written."""


class CanonicalWriteError(IngestionError):
    """A canonical upsert failed; batches already committed stay committed."""

    def __init__(self, message: str, batch_index: int, file_name: str | None = None):
        self.batch_index = batch_index
        super().__init__(message, file_name=file_name)


class StoreError(IngestionError):
    """File-run bookkeeping against the store failed."""
