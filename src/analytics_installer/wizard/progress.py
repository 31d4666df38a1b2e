"""
Progress Estimator

Turns the classified event stream into a numeric install progress and a
bounded, human-readable scrollback. Everything here is in-memory; no I/O.
"""

from collections import deque
from dataclasses import dataclass
from typing import Deque, Iterator, List, Optional

from analytics_installer.wizard.classifier import EventKind, LogEvent, classify_line


LOG_CAPACITY = 100
TOTAL_SERVICES = 4

BUILD_PHASE = (0.0, 50.0)
START_PHASE = (50.0, 50.0)


class LogBuffer:
    """Append-only scrollback that drops the oldest line past its capacity."""

    def __init__(self, capacity: int = LOG_CAPACITY):
        self.capacity = capacity
        self._lines: Deque[str] = deque(maxlen=capacity)

    def append(self, message: str):
        self._lines.append(message)

    def tail(self, count: int) -> List[str]:
        """Return the newest `count` lines, oldest first."""
        if count <= 0:
            return []
        return list(self._lines)[-count:]

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._lines))

    def __len__(self) -> int:
        return len(self._lines)

    def __getitem__(self, index: int) -> str:
        return self._lines[index]


@dataclass
class InstallProgress:
    """Progress of the build-then-start install."""
    percent: float = 0.0
    current_service: str = ""
    completed_services: int = 0
    total_services: int = TOTAL_SERVICES
    phase_base: float = BUILD_PHASE[0]
    phase_span: float = BUILD_PHASE[1]

    def phase_percent(self) -> float:
        """Percentage implied by the current phase and completed count."""
        done = min(self.completed_services, self.total_services)
        return self.phase_base + (done / self.total_services) * self.phase_span


class ProgressEstimator:
    """Accumulates classified events into InstallProgress and a LogBuffer."""

    def __init__(self, logs: Optional[LogBuffer] = None, progress: Optional[InstallProgress] = None):
        self.logs = logs if logs is not None else LogBuffer()
        self.progress = progress if progress is not None else InstallProgress()

    def log(self, message: str):
        """Append a preformatted line to the scrollback."""
        self.logs.append(message)

    def begin_phase(self, base: float, span: float):
        """Start a new phase; the completed count restarts for it."""
        self.progress.phase_base = base
        self.progress.phase_span = span
        self.progress.completed_services = 0
        self._raise_to(self.progress.phase_percent())

    def pin(self, percent: float):
        """Set the percentage to an exact value (never lowers it)."""
        self._raise_to(min(max(percent, 0.0), 100.0))

    def feed_line(self, line: str) -> Optional[LogEvent]:
        """Classify a raw line and apply the resulting event."""
        event = classify_line(line)
        if event is not None:
            self.apply(event)
        return event

    def apply(self, event: LogEvent):
        """Apply one classified event."""
        kind = event.kind
        progress = self.progress

        if kind == EventKind.IMAGE_PULL_STARTED:
            if event.service:
                progress.current_service = event.service
                self.log(f"⬇️  Pulling image for {event.service}...")
        elif kind == EventKind.IMAGE_PULLED:
            self.log("✓ Image pulled")
        elif kind == EventKind.CONTAINER_CREATE_STARTED:
            if event.service:
                progress.current_service = event.service
                self.log(f"🔨 Creating container {event.service}...")
        elif kind == EventKind.CONTAINER_CREATED:
            self.log("✓ Container created")
        elif kind == EventKind.SERVICE_START_STARTED:
            if event.service:
                progress.current_service = event.service
                self.log(f"▶️  Starting service {event.service}...")
        elif kind == EventKind.SERVICE_STARTED:
            progress.completed_services += 1
            self._raise_to(progress.phase_percent())
            self.log(
                f"✅ Service started ({progress.completed_services}/{progress.total_services})"
            )
        elif kind == EventKind.SERVICE_RUNNING:
            self.log("🟢 Service is running")
        elif kind == EventKind.FAILURE:
            self.log(f"❌ {event.line}")
        elif kind == EventKind.INFORMATIONAL:
            self.log(f"ℹ️  {event.line}")

    def _raise_to(self, percent: float):
        if percent > self.progress.percent:
            self.progress.percent = percent
