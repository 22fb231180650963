"""Tests for telemetry helpers."""

from opentelemetry import trace

from awsmcp.utils.telemetry import ATTR_SERVICE, get_tracer


class TestGetTracer:
    def test_returns_tracer(self) -> None:
        assert isinstance(get_tracer(__name__), trace.Tracer)

    def test_default_name(self) -> None:
        assert get_tracer() is not None

    def test_span_usable_without_sdk(self) -> None:
        with get_tracer(__name__).start_as_current_span("awsmcp.test") as span:
            span.set_attribute(ATTR_SERVICE, "s3")
