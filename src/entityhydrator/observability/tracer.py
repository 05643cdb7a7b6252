"""
Pluggable span creation for the hydration pipeline.

The hydrator, the fetcher and the in-memory store never import OpenTelemetry
themselves. Each takes a ``Tracer`` and opens spans through it, so a test can
pass a recording tracer and production code can pass a real one.

Example:
    >>> from entityhydrator import EntityHydrator
    >>> from entityhydrator.observability import MockTracer
    >>>
    >>> tracer = MockTracer()
    >>> hydrator = EntityHydrator(loader, tracer=tracer)
    >>> await hydrator.hydrate(ctx, product, ["variants"])
    >>> tracer.span_names
    ['entityhydrator.hydrate', 'entityhydrator.fetch']
"""

from __future__ import annotations

import contextlib
from collections.abc import Generator
from contextlib import AbstractContextManager
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from opentelemetry.trace import Span

from entityhydrator.observability.tracing import get_tracer, should_trace


@runtime_checkable
class Tracer(Protocol):
    """
    Something that can open a span around a block of hydration work.

    ``enabled`` tells callers whether attributes will be looked at; when it
    is False they pass ``None`` instead of building an attribute dict.
    """

    def span(
        self,
        name: str,
        attributes: dict[str, Any] | None = None,
    ) -> AbstractContextManager[Span | None]:
        """
        Open a span named ``name`` for the duration of a ``with`` block.

        The context manager yields the backend span, or None for tracers
        without one.
        """
        ...

    @property
    def enabled(self) -> bool:
        """Whether spans from this tracer are recorded anywhere."""
        ...


class NullTracer:
    """
    Tracer that records nothing.

    Returned by ``create_tracer`` when tracing is switched off in
    ``HydratorConfig`` or OpenTelemetry is not installed.
    """

    @contextlib.contextmanager
    def span(
        self,
        name: str,
        attributes: dict[str, Any] | None = None,
    ) -> Generator[None, None, None]:
        yield None

    @property
    def enabled(self) -> bool:
        return False


class OpenTelemetryTracer:
    """
    Tracer backed by an OpenTelemetry ``Tracer`` from the global provider.

    Args:
        tracer_name: Instrumentation scope, usually the calling module's name

    Raises:
        ImportError: If opentelemetry-api is missing
    """

    def __init__(self, tracer_name: str) -> None:
        tracer = get_tracer(tracer_name)
        if tracer is None:
            raise ImportError(
                "Tracing requires opentelemetry-api: pip install entity-hydrator[telemetry]"
            )
        self._tracer = tracer

    def span(
        self,
        name: str,
        attributes: dict[str, Any] | None = None,
    ) -> AbstractContextManager[Span | None]:
        """Start a span and make it current for nested hydration spans."""
        return self._tracer.start_as_current_span(name, attributes=attributes or {})

    @property
    def enabled(self) -> bool:
        return True


class MockTracer:
    """
    In-memory tracer for tests.

    Every span is appended to ``spans`` as a (name, attributes) pair in the
    order it was opened, so nested spans appear parent first.

    Attributes:
        spans: Recorded (name, attributes) pairs
    """

    def __init__(self) -> None:
        self.spans: list[tuple[str, dict[str, Any] | None]] = []

    @contextlib.contextmanager
    def span(
        self,
        name: str,
        attributes: dict[str, Any] | None = None,
    ) -> Generator[None, None, None]:
        self.spans.append((name, attributes))
        yield None

    @property
    def enabled(self) -> bool:
        # Callers only build attribute dicts for enabled tracers
        return True

    @property
    def span_names(self) -> list[str]:
        return [name for name, _ in self.spans]

    def clear(self) -> None:
        self.spans.clear()


def create_tracer(
    name: str,
    enable_tracing: bool = True,
) -> Tracer:
    """
    Pick a tracer for a hydration component.

    Args:
        name: Instrumentation scope passed to OpenTelemetry
        enable_tracing: The component's tracing switch

    Returns:
        An OpenTelemetryTracer when the switch is on and OpenTelemetry is
        importable, a NullTracer otherwise
    """
    if should_trace(enable_tracing):
        return OpenTelemetryTracer(name)
    return NullTracer()


__all__ = [
    "Tracer",
    "NullTracer",
    "OpenTelemetryTracer",
    "MockTracer",
    "create_tracer",
]
