"""Structured probe events and their logging sink.

Architectural role:
    Every network attempt, outcome, and swallowed failure in `rpc` and `core` is
    reported as a `ProbeEvent`. Control-flow code never logs directly, so tests
    can assert on emitted events instead of captured console output.

Severity mapping (`LoggingEventSink`):
    - Names ending in `_body` -> DEBUG (raw payloads can be large or sensitive).
    - Names ending in `_failed`, `_rejected`, or `_mismatch` -> WARNING.
    - Everything else -> INFO.

Determinism:
    Formatting is deterministic; field order follows insertion order.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Protocol


logger = logging.getLogger(__name__)

_WARNING_SUFFIXES = ("_failed", "_rejected", "_mismatch")


@dataclass(frozen=True)
class ProbeEvent:
    """One observable step of the probing flow.

    Attributes:
        name: Stable event identifier, for example `direct_api_attempt`.
        fields: Flat key/value context (URL, status code, error text, ...).
    """

    name: str
    fields: dict[str, Any] = field(default_factory=dict)


class EventSink(Protocol):
    """Minimal interface consumed by protocol modules."""

    def emit(self, event: ProbeEvent) -> None:
        """Record one probe event."""
        ...


class LoggingEventSink:
    """Forward probe events to a stdlib logger."""

    def __init__(self, target: logging.Logger | None = None) -> None:
        self._logger = target or logger

    def emit(self, event: ProbeEvent) -> None:
        self._logger.log(_level_for(event.name), format_event(event))


def _level_for(name: str) -> int:
    if name.endswith("_body"):
        return logging.DEBUG
    if name.endswith(_WARNING_SUFFIXES):
        return logging.WARNING
    return logging.INFO


def format_event(event: ProbeEvent) -> str:
    """Render an event as `name key=value ...` for log output."""
    if not event.fields:
        return event.name
    parts = " ".join(f"{key}={value!r}" for key, value in event.fields.items())
    return f"{event.name} {parts}"


_DEFAULT_SINK = LoggingEventSink()


def default_sink() -> EventSink:
    """Return the process-wide logging sink."""
    return _DEFAULT_SINK
