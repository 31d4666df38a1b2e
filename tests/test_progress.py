"""Tests for the progress estimator and scrollback buffer."""

import random

import pytest

from analytics_installer.wizard.classifier import EventKind, LogEvent
from analytics_installer.wizard.progress import (
    BUILD_PHASE,
    LOG_CAPACITY,
    START_PHASE,
    LogBuffer,
    ProgressEstimator,
)


STARTED = LogEvent(EventKind.SERVICE_STARTED, line="Container x Started")


class TestLogBuffer:
    """Test FIFO eviction."""

    def test_keeps_last_hundred(self):
        """150 appends leave the last 100, oldest first."""
        buffer = LogBuffer()
        for i in range(150):
            buffer.append(f"line {i}")

        assert len(buffer) == LOG_CAPACITY
        assert list(buffer) == [f"line {i}" for i in range(50, 150)]

    def test_never_exceeds_capacity(self):
        buffer = LogBuffer(capacity=3)
        for i in range(10):
            buffer.append(str(i))
            assert len(buffer) <= 3
        assert buffer[-1] == "9"

    def test_tail(self):
        buffer = LogBuffer()
        for i in range(5):
            buffer.append(str(i))
        assert buffer.tail(2) == ["3", "4"]
        assert buffer.tail(0) == []


class TestProgressEstimator:
    """Test event application."""

    def test_start_events_set_current_service(self):
        estimator = ProgressEstimator()
        estimator.apply(LogEvent(EventKind.IMAGE_PULL_STARTED, service="qdrant"))
        assert estimator.progress.current_service == "qdrant"
        assert estimator.logs[-1] == "⬇️  Pulling image for qdrant..."

        estimator.apply(LogEvent(EventKind.CONTAINER_CREATE_STARTED, service="northwind-db"))
        assert estimator.progress.current_service == "northwind-db"
        assert estimator.logs[-1] == "🔨 Creating container northwind-db..."

        estimator.apply(LogEvent(EventKind.SERVICE_START_STARTED, service="analytics-ui"))
        assert estimator.progress.current_service == "analytics-ui"
        assert estimator.logs[-1] == "▶️  Starting service analytics-ui..."
        assert estimator.progress.completed_services == 0
        assert estimator.progress.percent == 0

    def test_start_event_without_service_is_silent(self):
        estimator = ProgressEstimator()
        estimator.apply(LogEvent(EventKind.SERVICE_START_STARTED))
        assert len(estimator.logs) == 0
        assert estimator.progress.current_service == ""

    def test_other_lines(self):
        estimator = ProgressEstimator()
        estimator.apply(LogEvent(EventKind.IMAGE_PULLED))
        estimator.apply(LogEvent(EventKind.CONTAINER_CREATED))
        estimator.apply(LogEvent(EventKind.SERVICE_RUNNING))
        estimator.apply(LogEvent(EventKind.FAILURE, line="Error: boom"))
        estimator.apply(LogEvent(EventKind.INFORMATIONAL, line="hello"))

        assert list(estimator.logs) == [
            "✓ Image pulled",
            "✓ Container created",
            "🟢 Service is running",
            "❌ Error: boom",
            "ℹ️  hello",
        ]

    def test_service_started_during_start_phase(self):
        """Progress is exactly 50 + min(completed, total)/total * 50."""
        estimator = ProgressEstimator()
        estimator.begin_phase(*START_PHASE)
        for n in range(1, 7):
            estimator.apply(STARTED)
            expected = 50 + (min(n, 4) / 4) * 50
            assert estimator.progress.percent == expected
        assert estimator.logs[-1] == "✅ Service started (6/4)"

    def test_service_started_during_build_phase(self):
        estimator = ProgressEstimator()
        estimator.begin_phase(*BUILD_PHASE)
        estimator.apply(STARTED)
        assert estimator.progress.percent == 12.5

    def test_pin_after_build_without_started_events(self):
        estimator = ProgressEstimator()
        estimator.begin_phase(*BUILD_PHASE)
        estimator.feed_line("#1 building analytics-service")
        estimator.pin(50.0)
        assert estimator.progress.percent == 50.0

    def test_begin_phase_resets_count(self):
        estimator = ProgressEstimator()
        estimator.begin_phase(*BUILD_PHASE)
        estimator.apply(STARTED)
        estimator.apply(STARTED)
        estimator.pin(50.0)
        estimator.begin_phase(*START_PHASE)
        assert estimator.progress.completed_services == 0
        assert estimator.progress.percent == 50.0
        estimator.apply(STARTED)
        assert estimator.progress.percent == 62.5

    def test_pin_never_lowers(self):
        estimator = ProgressEstimator()
        estimator.pin(100.0)
        estimator.pin(50.0)
        assert estimator.progress.percent == 100.0

    def test_failure_does_not_abort(self):
        estimator = ProgressEstimator()
        estimator.begin_phase(*START_PHASE)
        estimator.feed_line("Error response from daemon")
        estimator.feed_line("Container qdrant Started")
        assert estimator.progress.percent == 62.5

    def test_blank_line_is_ignored(self):
        estimator = ProgressEstimator()
        assert estimator.feed_line("   ") is None
        assert len(estimator.logs) == 0

    @pytest.mark.parametrize("seed", range(5))
    def test_progress_is_non_decreasing(self, seed):
        """Random event streams across both phases never move progress backwards."""
        rng = random.Random(seed)
        kinds = list(EventKind)
        estimator = ProgressEstimator()
        estimator.begin_phase(*BUILD_PHASE)
        previous = estimator.progress.percent

        for i in range(300):
            if i == 150:
                estimator.pin(50.0)
                estimator.begin_phase(*START_PHASE)
            kind = rng.choice(kinds)
            estimator.apply(LogEvent(kind, service=rng.choice([None, "qdrant"]), line="x"))
            assert estimator.progress.percent >= previous
            assert 0 <= estimator.progress.percent <= 100
            assert len(estimator.logs) <= LOG_CAPACITY
            previous = estimator.progress.percent
