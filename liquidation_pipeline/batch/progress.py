"""
Progress reporting and cooperative cancellation for ingestion runs.
"""

import threading
import time
from abc import ABC, abstractmethod
from collections.abc import Callable

from liquidation_pipeline.core.models import RunStage
from liquidation_pipeline.observability.logger import get_logger

logger = get_logger(__name__)

ProgressCallback = Callable[[str, float, float | None], None]

# Overall percentage band covered by each stage
STAGE_BANDS: dict[str, tuple[float, float]] = {
    "reading": (0.0, 25.0),
    "parsing": (25.0, 30.0),
    "uploading": (30.0, 95.0),
    "complete": (100.0, 100.0),
}

MIN_BATCHES_FOR_ETA = 2


class ProgressSink(ABC):
    """
    Receives progress updates from a run.
    """

    @abstractmethod
    def on_progress(self, stage: RunStage, percent: float, eta_seconds: float | None) -> None:
        """
        Args:
            stage: Current run stage
            percent: Overall completion, 0..100, never decreasing within a run
            eta_seconds: Estimated seconds left, once enough batches are done
        """


class NullProgressSink(ProgressSink):
    def on_progress(self, stage: RunStage, percent: float, eta_seconds: float | None) -> None:
        pass


class CallbackProgressSink(ProgressSink):
    """Adapts a plain (stage, percent, eta_seconds) callable."""

    def __init__(self, callback: ProgressCallback):
        self.callback = callback

    def on_progress(self, stage: RunStage, percent: float, eta_seconds: float | None) -> None:
        self.callback(stage, percent, eta_seconds)


class LoggingProgressSink(ProgressSink):
    """Logs each whole-percent step at INFO."""

    def __init__(self, file_name: str | None = None):
        self.file_name = file_name
        self._last_logged = -1

    def on_progress(self, stage: RunStage, percent: float, eta_seconds: float | None) -> None:
        step = int(percent)
        if step == self._last_logged and stage not in ("complete", "error", "cancelled"):
            return
        self._last_logged = step
        logger.info(
            f"{stage}: {percent:.1f}%",
            extra={"stage": stage, "percent": round(percent, 1), "eta_seconds": eta_seconds, "file_name": self.file_name},
        )


def as_sink(progress: ProgressSink | ProgressCallback | None) -> ProgressSink:
    if progress is None:
        return NullProgressSink()
    if isinstance(progress, ProgressSink):
        return progress
    if callable(progress):
        return CallbackProgressSink(progress)
    raise TypeError(f"Unsupported progress sink: {type(progress).__name__}")


class CancellationToken:
    """
    Thread-safe cancellation flag checked by the run at batch boundaries.

    Cancelling never interrupts a write in flight; committed batches stay
    committed.
    """

    def __init__(self):
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()


class ProgressTracker:
    """
    Blends per-stage progress into one non-decreasing percentage and
    estimates time left while uploading.
    """

    def __init__(self, sink: ProgressSink, clock: Callable[[], float] = time.monotonic):
        self.sink = sink
        self.clock = clock
        self.percent = 0.0
        self.stage: RunStage = "reading"
        self._upload_started: float | None = None

    def report(self, stage: RunStage, fraction: float = 0.0, eta_seconds: float | None = None) -> float:
        """
        Report progress within a stage.

        Args:
            stage: Current stage
            fraction: Completed share of that stage, clamped to 0..1
            eta_seconds: Estimated seconds left

        Returns:
            The overall percentage reported
        """
        fraction = min(max(fraction, 0.0), 1.0)
        if stage in STAGE_BANDS:
            start, end = STAGE_BANDS[stage]
            self.percent = max(self.percent, start + (end - start) * fraction)
        self.stage = stage
        self.sink.on_progress(stage, self.percent, eta_seconds)
        return self.percent

    def start_uploading(self) -> None:
        self._upload_started = self.clock()
        self.report("uploading", 0.0)

    def batch_done(self, done: int, total: int) -> float | None:
        """
        Report a finished upload batch.

        Returns:
            The ETA in seconds, or None until enough batches are done
        """
        fraction = done / total if total else 1.0
        eta = None
        if self._upload_started is not None and done >= MIN_BATCHES_FOR_ETA and fraction > 0:
            elapsed = self.clock() - self._upload_started
            eta = max(elapsed / fraction - elapsed, 0.0)
        self.report("uploading", fraction, eta)
        return eta

    def finish(self, stage: RunStage) -> None:
        """Report a terminal stage (complete, error or cancelled)."""
        self.report(stage, 1.0 if stage == "complete" else 0.0)
