"""Probe event emission.

Scope:
    Keeps diagnostic output out of protocol control flow. Protocol modules emit
    `ProbeEvent` records to an `EventSink`; the default sink forwards them to
    stdlib `logging`.
"""

from gateway_probe.observability.events import (
    EventSink,
    LoggingEventSink,
    ProbeEvent,
    default_sink,
)

__all__ = ["EventSink", "LoggingEventSink", "ProbeEvent", "default_sink"]
