"""
Unit tests for progress reporting and cancellation.
"""

import threading

import pytest

from liquidation_pipeline.batch.progress import (
    CallbackProgressSink,
    CancellationToken,
    LoggingProgressSink,
    NullProgressSink,
    ProgressTracker,
    as_sink,
)


class FakeClock:
    def __init__(self, now: float = 0.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


class RecordingSink(CallbackProgressSink):
    def __init__(self):
        self.updates = []
        super().__init__(lambda stage, percent, eta: self.updates.append((stage, percent, eta)))


class TestAsSink:
    def test_none_is_null_sink(self):
        assert isinstance(as_sink(None), NullProgressSink)

    def test_sink_passes_through(self):
        sink = LoggingProgressSink("a.csv")
        assert as_sink(sink) is sink

    def test_callable_is_wrapped(self):
        calls = []
        sink = as_sink(lambda *args: calls.append(args))
        sink.on_progress("reading", 10.0, None)

        assert calls == [("reading", 10.0, None)]

    def test_other_values_rejected(self):
        with pytest.raises(TypeError):
            as_sink(42)


class TestProgressTracker:
    """Tests for overall progress and ETA"""

    def test_stage_bands(self):
        sink = RecordingSink()
        tracker = ProgressTracker(sink)

        assert tracker.report("reading", 0.5) == 12.5
        assert tracker.report("parsing", 1.0) == 30.0
        assert tracker.report("uploading", 0.5) == 62.5

    def test_fraction_is_clamped(self):
        tracker = ProgressTracker(NullProgressSink())

        assert tracker.report("reading", 3.0) == 25.0

    def test_percent_never_decreases(self):
        """Test a later report with a smaller share keeps the earlier percent"""
        tracker = ProgressTracker(NullProgressSink())
        tracker.report("uploading", 0.5)

        assert tracker.report("reading", 1.0) == 62.5
        assert tracker.report("uploading", 0.1) == 62.5

    def test_eta_after_two_batches(self):
        clock = FakeClock()
        sink = RecordingSink()
        tracker = ProgressTracker(sink, clock=clock)
        tracker.start_uploading()

        clock.now = 10.0
        assert tracker.batch_done(1, 4) is None

        clock.now = 20.0
        assert tracker.batch_done(2, 4) == pytest.approx(20.0)
        assert sink.updates[-1] == ("uploading", pytest.approx(62.5), pytest.approx(20.0))

    def test_finish_complete_reaches_hundred(self):
        sink = RecordingSink()
        tracker = ProgressTracker(sink)
        tracker.report("uploading", 0.5)
        tracker.finish("complete")

        assert sink.updates[-1] == ("complete", 100.0, None)

    def test_finish_error_keeps_percent(self):
        sink = RecordingSink()
        tracker = ProgressTracker(sink)
        tracker.report("reading", 1.0)
        tracker.finish("error")

        assert sink.updates[-1] == ("error", 25.0, None)
        assert tracker.stage == "error"


class TestLoggingProgressSink:
    def test_repeated_whole_percent_logged_once(self, monkeypatch):
        sink = LoggingProgressSink("a.csv")
        messages = []
        monkeypatch.setattr(
            "liquidation_pipeline.batch.progress.logger.info",
            lambda message, **kwargs: messages.append(message),
        )

        sink.on_progress("reading", 10.1, None)
        sink.on_progress("reading", 10.7, None)
        sink.on_progress("reading", 11.0, None)

        assert messages == ["reading: 10.1%", "reading: 11.0%"]


class TestCancellationToken:
    def test_cancel(self):
        token = CancellationToken()
        assert not token.cancelled

        token.cancel()
        assert token.cancelled

    def test_cancel_from_another_thread(self):
        token = CancellationToken()
        thread = threading.Thread(target=token.cancel)
        thread.start()
        thread.join()

        assert token.cancelled
