"""Start/stop span events for timing bc_utils operations.

Events are published on a process-wide ``EventBus``. An event name is a tuple
of strings such as ``("bc_utils", "cli", "render", "stop")``; handlers are
called as ``handler(event_name, measurements, metadata, config)``::

    def on_stop(event, measurements, metadata, config):
        print(event, measurements["duration"])

    telemetry.attach_handler("timing", ("bc_utils", "cli", "render", "stop"), on_stop)

    with telemetry.span(("bc_utils", "cli", "render"), {"target": 100}):
        ...
"""

from __future__ import annotations

import threading
import time
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any

from bc_utils.core.events import EventBus
from bc_utils.logging import get_logger

EventName = tuple[str, ...]
TelemetryHandler = Callable[[EventName, dict[str, Any], dict[str, Any], dict[str, Any]], None]

logger = get_logger("telemetry")


@dataclass(slots=True)
class TelemetryEvent:
    name: EventName
    measurements: dict[str, Any]
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass(slots=True)
class _Attachment:
    handler_id: str
    event_name: EventName
    callback: Callable[[TelemetryEvent], None]


_bus = EventBus()
_attachments: dict[str, _Attachment] = {}
_lock = threading.RLock()


def attach_handler(
    handler_id: str,
    event_name: EventName,
    handler: TelemetryHandler,
    config: dict[str, Any] | None = None,
) -> None:
    """
    Call ``handler`` whenever ``event_name`` is executed.

    Raises:
        ValueError: If ``handler_id`` is already attached
    """
    event_name = tuple(event_name)
    handler_config = dict(config or {})

    def callback(event: TelemetryEvent) -> None:
        try:
            handler(event.name, event.measurements, event.metadata, handler_config)
        except Exception:
            logger.opt(exception=True).error("Telemetry handler {} failed, detaching it", handler_id)
            _detach(handler_id, callback)

    with _lock:
        if handler_id in _attachments:
            raise ValueError(f"telemetry handler already attached: {handler_id}")
        _attachments[handler_id] = _Attachment(handler_id, event_name, callback)
        _bus.subscribe(event_name, callback)
    logger.debug("Attached telemetry handler {} to {}", handler_id, event_name)


def detach_handler(handler_id: str) -> bool:
    """Remove a handler; False if it was not attached."""
    return _detach(handler_id)


def _detach(handler_id: str, callback: Callable[[TelemetryEvent], None] | None = None) -> bool:
    # with a callback, only that attachment is removed, not a newer one under the same id
    with _lock:
        attachment = _attachments.get(handler_id)
        if attachment is None or (callback is not None and attachment.callback is not callback):
            return False
        del _attachments[handler_id]
        _bus.unsubscribe(attachment.event_name, attachment.callback)
    logger.debug("Detached telemetry handler {}", handler_id)
    return True


def list_handlers() -> list[str]:
    with _lock:
        return sorted(_attachments)


def execute(event_name: EventName, measurements: dict[str, Any], metadata: dict[str, Any] | None = None) -> None:
    event = TelemetryEvent(tuple(event_name), dict(measurements), dict(metadata or {}))
    _bus.emit(event.name, event)


def start_event(name: EventName, metadata: dict[str, Any] | None = None) -> int:
    """Publish ``name + ("start",)`` and return the monotonic start marker."""
    start_time = time.monotonic_ns()
    execute(tuple(name) + ("start",), {"system_time": time.time_ns()}, metadata)
    return start_time


def stop_event(name: EventName, metadata: dict[str, Any] | None, start_time: int) -> None:
    """Publish ``name + ("stop",)`` with the nanoseconds elapsed since ``start_time``."""
    execute(tuple(name) + ("stop",), {"duration": time.monotonic_ns() - start_time}, metadata)


@contextmanager
def span(name: EventName, metadata: dict[str, Any] | None = None) -> Iterator[dict[str, Any]]:
    """
    Wrap a block in start and stop events.

    The yielded dict is the stop event's metadata, so the block can add results
    to it. If the block raises, an ``exception`` event is published instead of
    ``stop`` and the error propagates.
    """
    span_metadata = dict(metadata or {})
    start_time = start_event(name, span_metadata)
    try:
        yield span_metadata
    except Exception as exc:
        execute(
            tuple(name) + ("exception",),
            {"duration": time.monotonic_ns() - start_time},
            {**span_metadata, "kind": type(exc).__name__, "reason": exc},
        )
        raise
    stop_event(name, span_metadata, start_time)
