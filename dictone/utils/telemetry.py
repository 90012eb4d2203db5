"""Structured telemetry for instrumenting editor passes.

Every text mutation handled by the editor service opens a trace, times the
reconcile and cluster stages, and records a few counters (annotations
dropped, clusters found). Listeners receive each event as it happens; the
bundled :class:`TelemetryLogger` forwards them to the project logger.
"""

from __future__ import annotations

import logging
import threading
import time
from contextlib import contextmanager
from copy import deepcopy
from typing import Any, Callable, Dict, Iterable, Iterator, Optional, Tuple

from .observability import get_logger

TelemetryListener = Callable[[str, Dict[str, Any]], None]


class StructuredTelemetry:
    """Collector for stage timings, counters and per-trace metadata."""

    def __init__(
        self,
        time_fn: Optional[Callable[[], float]] = None,
        *,
        max_events: int = 128,
        listeners: Optional[Iterable[TelemetryListener]] = None,
    ) -> None:
        self._time_fn = time_fn or time.perf_counter
        self._max_events = max(1, int(max_events))
        self._lock = threading.RLock()
        self._trace_id = 0
        self._listeners: list[TelemetryListener] = list(listeners or [])
        self._clear()

    def _clear(self) -> None:
        self._trace_name: Optional[str] = None
        self._timings: Dict[str, Dict[str, float]] = {}
        self._counters: Dict[str, float] = {}
        self._events: list[Dict[str, Any]] = []
        self._metadata: Dict[str, Any] = {}

    def _emit(self, event_type: str, payload: Dict[str, Any]) -> None:
        with self._lock:
            listeners: Tuple[TelemetryListener, ...] = tuple(self._listeners)
        for listener in listeners:
            listener(event_type, dict(payload))

    def now(self) -> float:
        return float(self._time_fn())

    def start_trace(self, name: str) -> int:
        """Discard the previous trace and start collecting a new one."""

        with self._lock:
            self._trace_id += 1
            self._clear()
            self._trace_name = name
            self._metadata["started_at"] = self.now()
            trace_id = self._trace_id

        self._emit("trace_started", {"trace_id": trace_id, "name": name})
        return trace_id

    def record_timing(
        self,
        name: str,
        duration: float,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> None:
        duration = max(0.0, float(duration))
        details = dict(metadata or {})
        with self._lock:
            bucket = self._timings.setdefault(
                name, {"count": 0, "total": 0.0, "min": duration, "max": duration}
            )
            bucket["count"] += 1
            bucket["total"] += duration
            bucket["min"] = min(bucket["min"], duration)
            bucket["max"] = max(bucket["max"], duration)
            bucket["avg"] = bucket["total"] / bucket["count"]

            event: Dict[str, Any] = {"name": name, "duration": duration}
            if details:
                event["metadata"] = details
            self._events.append(event)
            del self._events[: -self._max_events]

        self._emit("timing", {"name": name, "duration": duration, "metadata": details})

    @contextmanager
    def timer(
        self,
        name: str,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> Iterator[Dict[str, Any]]:
        """Time the enclosed block; the yielded dict is stored as metadata."""

        payload: Dict[str, Any] = dict(metadata or {})
        start = self.now()
        self._emit("timer_started", {"name": name, "metadata": dict(payload)})
        try:
            yield payload
        finally:
            self.record_timing(name, self.now() - start, payload)

    def increment(self, name: str, amount: float = 1.0) -> None:
        value = float(amount)
        with self._lock:
            current = self._counters.get(name, 0.0) + value
            self._counters[name] = current

        self._emit("counter", {"name": name, "delta": value, "value": current})

    def annotate(self, key: str, value: Any) -> None:
        with self._lock:
            self._metadata[key] = value

        self._emit("metadata", {"key": key, "value": value})

    def snapshot(self) -> Dict[str, Any]:
        """Return a deep copy of the current trace."""

        with self._lock:
            return deepcopy(
                {
                    "trace_id": self._trace_id,
                    "name": self._trace_name,
                    "timings": self._timings,
                    "counters": self._counters,
                    "events": self._events,
                    "metadata": self._metadata,
                }
            )

    def add_listener(self, listener: TelemetryListener) -> None:
        with self._lock:
            self._listeners.append(listener)

    def remove_listener(self, listener: TelemetryListener) -> None:
        with self._lock:
            self._listeners = [entry for entry in self._listeners if entry is not listener]


class TelemetryLogger:
    """Listener that writes telemetry events to the project logger."""

    def __init__(
        self,
        *,
        logger: Optional[logging.LoggerAdapter] = None,
        level: int = logging.DEBUG,
        level_map: Optional[Dict[str, int]] = None,
    ) -> None:
        self._logger = logger or get_logger(__name__).bind(component="telemetry")
        self._default_level = level
        self._level_map = dict(level_map or {})

    def __call__(self, event_type: str, payload: Dict[str, Any]) -> None:
        level = self._level_map.get(event_type, self._default_level)
        if not self._logger.isEnabledFor(level):
            return

        context = {"telemetry.event": event_type}
        context.update({str(key): value for key, value in payload.items()})
        name = payload.get("name") or payload.get("key") or payload.get("trace_id") or "event"
        self._logger.log(level, f"Telemetry {event_type}: {name}", context=context)


__all__ = ["StructuredTelemetry", "TelemetryLogger", "TelemetryListener"]
