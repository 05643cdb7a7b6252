"""Unit tests for the tracer implementations."""

import pytest

from entityhydrator.observability import (
    OTEL_AVAILABLE,
    MockTracer,
    NullTracer,
    OpenTelemetryTracer,
    Tracer,
    create_tracer,
)


class TestNullTracer:
    def test_span_yields_none(self) -> None:
        tracer = NullTracer()
        with tracer.span("anything", {"key": "value"}) as span:
            assert span is None
        assert tracer.enabled is False

    def test_satisfies_protocol(self) -> None:
        assert isinstance(NullTracer(), Tracer)


class TestMockTracer:
    def test_records_spans(self) -> None:
        tracer = MockTracer()
        with tracer.span("outer", {"a": 1}):
            with tracer.span("inner"):
                pass

        assert tracer.spans == [("outer", {"a": 1}), ("inner", None)]
        assert tracer.span_names == ["outer", "inner"]
        assert tracer.enabled is True

    def test_clear(self) -> None:
        tracer = MockTracer()
        with tracer.span("operation"):
            pass
        tracer.clear()
        assert tracer.spans == []


class TestCreateTracer:
    def test_disabled_gives_null_tracer(self) -> None:
        assert isinstance(create_tracer(__name__, enable_tracing=False), NullTracer)

    @pytest.mark.skipif(not OTEL_AVAILABLE, reason="OpenTelemetry not installed")
    def test_enabled_gives_opentelemetry_tracer(self) -> None:
        tracer = create_tracer(__name__, enable_tracing=True)

        assert isinstance(tracer, OpenTelemetryTracer)
        assert tracer.enabled is True
        with tracer.span("entityhydrator.test", {"entity.type": "Product"}) as span:
            assert span is not None
