"""
Observability utilities for entityhydrator.

Provides the tracer abstraction and the standard span attributes. All
utilities work whether or not OpenTelemetry is installed.

Example:
    >>> from entityhydrator.observability import create_tracer
    >>>
    >>> class MyLoader:
    ...     def __init__(self, enable_tracing: bool = True):
    ...         self._tracer = create_tracer(__name__, enable_tracing)
    ...         self._enable_tracing = self._tracer.enabled
"""

from entityhydrator.observability.attributes import (
    ATTR_APPLY_PRICES,
    ATTR_BATCH_SIZE,
    ATTR_ENTITY_ID,
    ATTR_ENTITY_TYPE,
    ATTR_ERROR_TYPE,
    ATTR_FETCH_PATH_COUNT,
    ATTR_LANGUAGE_CODE,
    ATTR_RELATION_COUNT,
)
from entityhydrator.observability.tracer import (
    MockTracer,
    NullTracer,
    OpenTelemetryTracer,
    Tracer,
    create_tracer,
)
from entityhydrator.observability.tracing import (
    OTEL_AVAILABLE,
    get_tracer,
    should_trace,
)

__all__ = [
    # Tracing utilities
    "OTEL_AVAILABLE",
    "get_tracer",
    "should_trace",
    # Tracer (composition-based API)
    "Tracer",
    "NullTracer",
    "OpenTelemetryTracer",
    "MockTracer",
    "create_tracer",
    # Attributes
    "ATTR_ENTITY_TYPE",
    "ATTR_ENTITY_ID",
    "ATTR_BATCH_SIZE",
    "ATTR_RELATION_COUNT",
    "ATTR_FETCH_PATH_COUNT",
    "ATTR_APPLY_PRICES",
    "ATTR_LANGUAGE_CODE",
    "ATTR_ERROR_TYPE",
]
