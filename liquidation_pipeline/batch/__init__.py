"""
Batch ingestion: orchestration, progress and readers.
"""

from .pipeline import BatchUpsertOrchestrator, RunOptions, run_file
from .progress import (
    CallbackProgressSink,
    CancellationToken,
    LoggingProgressSink,
    NullProgressSink,
    ProgressSink,
    ProgressTracker,
)
from .readers import FileReader, OpenpyxlConverter, SpreadsheetConverter

__all__ = [
    "BatchUpsertOrchestrator",
    "RunOptions",
    "run_file",
    "CallbackProgressSink",
    "CancellationToken",
    "LoggingProgressSink",
    "NullProgressSink",
    "ProgressSink",
    "ProgressTracker",
    "FileReader",
    "OpenpyxlConverter",
    "SpreadsheetConverter",
]
