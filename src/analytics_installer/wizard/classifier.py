"""
Log Classifier

Best-effort classification of free-text docker compose output lines into
semantic events. Matching is case-insensitive substring matching in a fixed
priority order; wording the classifier does not know falls through to an
informational event.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple


# analytics-service, qdrant, northwind-db, analytics-ui
KNOWN_SERVICES: Tuple[str, ...] = (
    "analytics-service",
    "qdrant",
    "northwind-db",
    "analytics-ui",
)


class EventKind(str, Enum):
    IMAGE_PULL_STARTED = "image_pull_started"
    IMAGE_PULLED = "image_pulled"
    CONTAINER_CREATE_STARTED = "container_create_started"
    CONTAINER_CREATED = "container_created"
    SERVICE_START_STARTED = "service_start_started"
    SERVICE_STARTED = "service_started"
    SERVICE_RUNNING = "service_running"
    FAILURE = "failure"
    INFORMATIONAL = "informational"


@dataclass(frozen=True)
class LogEvent:
    """A classified meaning extracted from one output line."""
    kind: EventKind
    service: Optional[str] = None
    line: str = ""


# Priority order matters: "pulling" must win over "pulled", "starting" over "started".
_KEYWORD_RULES: Tuple[Tuple[str, EventKind], ...] = (
    ("pulling", EventKind.IMAGE_PULL_STARTED),
    ("pulled", EventKind.IMAGE_PULLED),
    ("creating", EventKind.CONTAINER_CREATE_STARTED),
    ("created", EventKind.CONTAINER_CREATED),
    ("starting", EventKind.SERVICE_START_STARTED),
    ("started", EventKind.SERVICE_STARTED),
    ("running", EventKind.SERVICE_RUNNING),
)

_SERVICE_KINDS = (
    EventKind.IMAGE_PULL_STARTED,
    EventKind.CONTAINER_CREATE_STARTED,
    EventKind.SERVICE_START_STARTED,
)


def extract_service_name(line: str) -> Optional[str]:
    """Return the first known service mentioned in the line, if any."""
    lower = line.lower()
    for service in KNOWN_SERVICES:
        if service in lower:
            return service
    return None


def classify_line(line: str) -> Optional[LogEvent]:
    """Classify one line of subprocess output.

    Args:
        line: Raw output line (stdout or stderr)

    Returns:
        The semantic event, or None for blank lines
    """
    lower = line.lower()

    for keyword, kind in _KEYWORD_RULES:
        if keyword in lower:
            service = extract_service_name(line) if kind in _SERVICE_KINDS else None
            return LogEvent(kind=kind, service=service, line=line)

    if "error" in lower or "failed" in lower:
        return LogEvent(kind=EventKind.FAILURE, line=line)

    if line.strip():
        return LogEvent(kind=EventKind.INFORMATIONAL, line=line)

    return None
