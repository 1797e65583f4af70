"""Metrics hook protocol and no-op default implementation.

richmark emits counters, timings and gauges from the renderer, the
serializer, the edit session and the image pipeline.  A
:class:`NoopMetricsHook` is used unless :attr:`EditorConfig.metrics` is
set to an object satisfying :class:`MetricsHook`.

Emitted metric names:

* ``richmark.render_total``            -- counter
* ``richmark.serialize_total``         -- counter
* ``richmark.external_update_total``   -- counter (tag ``applied``)
* ``richmark.upload_success_total``    -- counter
* ``richmark.upload_failure_total``    -- counter (tag ``reason``)
* ``richmark.upload_duration_ms``      -- timing
* ``richmark.uploads_in_flight``       -- gauge
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class MetricsHook(Protocol):
    """Protocol that any metrics backend must satisfy.

    All methods accept an optional *tags* dict of string keys and values,
    translated by the backend into its own tagging mechanism.
    """

    def increment(
        self,
        name: str,
        value: int = 1,
        tags: dict[str, str] | None = None,
    ) -> None:
        """Increment a counter metric."""
        ...

    def timing(
        self,
        name: str,
        ms: float,
        tags: dict[str, str] | None = None,
    ) -> None:
        """Record a duration in milliseconds."""
        ...

    def gauge(
        self,
        name: str,
        value: float,
        tags: dict[str, str] | None = None,
    ) -> None:
        """Set a gauge metric to an absolute value."""
        ...


class NoopMetricsHook:
    """Metrics implementation that silently discards all data points."""

    __slots__ = ()

    def increment(
        self,
        name: str,
        value: int = 1,
        tags: dict[str, str] | None = None,
    ) -> None:
        pass

    def timing(
        self,
        name: str,
        ms: float,
        tags: dict[str, str] | None = None,
    ) -> None:
        pass

    def gauge(
        self,
        name: str,
        value: float,
        tags: dict[str, str] | None = None,
    ) -> None:
        pass


def resolve_metrics(hook: Any | None) -> MetricsHook:
    """Return *hook*, or a shared :class:`NoopMetricsHook` when it is ``None``."""
    return hook if hook is not None else _NOOP


_NOOP = NoopMetricsHook()
