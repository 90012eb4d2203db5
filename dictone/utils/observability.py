"""Structured logging, metrics and tracing helpers used across the project.

Metrics are backed by :mod:`prometheus_client` and spans by
:mod:`opentelemetry`. Without a configured tracer provider the OpenTelemetry
API hands out non-recording spans, so instrumented code paths cost almost
nothing in tests and in the local Gradio demo.
"""

from __future__ import annotations

import json
import logging
import time
from contextlib import contextmanager
from typing import Any, Dict, Iterable, Iterator, Optional

from opentelemetry import trace
from prometheus_client import REGISTRY, Counter, Histogram


_TRACER_NAME = "dictone"


class StructuredLoggerAdapter(logging.LoggerAdapter):
    """Adapter that renders structured context inline with messages."""

    def bind(self, **context: Any) -> "StructuredLoggerAdapter":
        merged = dict(self.extra)
        merged.update(context)
        return StructuredLoggerAdapter(self.logger, merged)

    def process(self, msg: str, kwargs: Dict[str, Any]):
        event_context: Dict[str, Any] = dict(self.extra)
        provided = kwargs.pop("context", None)
        if isinstance(provided, dict):
            event_context.update(provided)
        if event_context:
            try:
                payload = json.dumps(event_context, sort_keys=True, default=str)
            except TypeError:
                payload = json.dumps({str(k): str(v) for k, v in event_context.items()})
            msg = f"{msg} | {payload}"
        return msg, kwargs


def get_logger(name: str, **context: Any) -> StructuredLoggerAdapter:
    """Return a project logger with optional bound context."""

    return StructuredLoggerAdapter(logging.getLogger(name), context)


class _MetricWrapper:
    """Base wrapper providing ``labels`` passthrough for metrics."""

    def __init__(self, impl: Any) -> None:
        self._impl = impl

    def labels(self, **labels: Any):
        return self.__class__(self._impl.labels(**labels))


class CounterHandle(_MetricWrapper):
    """Thin wrapper around a Prometheus counter."""

    def inc(self, amount: float = 1.0) -> None:
        self._impl.inc(amount)


class HistogramHandle(_MetricWrapper):
    """Thin wrapper around a Prometheus histogram."""

    def observe(self, value: float) -> None:
        self._impl.observe(value)

    @contextmanager
    def time(self) -> Iterator[None]:
        start = time.perf_counter()
        try:
            yield
        finally:
            self.observe(time.perf_counter() - start)


def _registered_collector(name: str) -> Any:
    # prometheus_client registers counters under both "<name>" and "<name>_total".
    collectors = REGISTRY._names_to_collectors  # type: ignore[attr-defined]
    return collectors.get(name) or collectors.get(f"{name}_total")


def create_counter(
    name: str,
    documentation: str,
    label_names: Optional[Iterable[str]] = None,
) -> CounterHandle:
    """Create (or reuse) a process-wide counter."""

    try:
        impl = Counter(name, documentation, labelnames=tuple(label_names or ()))
    except ValueError:
        # Already registered by an earlier service instance.
        impl = _registered_collector(name)
    return CounterHandle(impl)


def create_histogram(
    name: str,
    documentation: str,
    label_names: Optional[Iterable[str]] = None,
) -> HistogramHandle:
    """Create (or reuse) a process-wide histogram."""

    try:
        impl = Histogram(name, documentation, labelnames=tuple(label_names or ()))
    except ValueError:
        impl = _registered_collector(name)
    return HistogramHandle(impl)


@contextmanager
def start_span(name: str, attributes: Optional[Dict[str, Any]] = None):
    """Start an OpenTelemetry span for ``name`` with optional attributes."""

    tracer = trace.get_tracer(_TRACER_NAME)
    with tracer.start_as_current_span(name) as span:
        if attributes:
            add_span_attributes(span, attributes)
        yield span


def add_span_attributes(span: Any, attributes: Dict[str, Any]) -> None:
    """Attach ``attributes`` to ``span``; non-string keys are skipped."""

    if span is None:
        return
    for key, value in attributes.items():
        if not isinstance(key, str):
            continue
        span.set_attribute(key, value)


def record_exception(span: Any, error: BaseException) -> None:
    """Record ``error`` on an active span and flag it as failed."""

    if span is None:
        return
    span.record_exception(error)
    span.set_attribute("error", True)


__all__ = [
    "StructuredLoggerAdapter",
    "get_logger",
    "CounterHandle",
    "HistogramHandle",
    "create_counter",
    "create_histogram",
    "start_span",
    "add_span_attributes",
    "record_exception",
]
