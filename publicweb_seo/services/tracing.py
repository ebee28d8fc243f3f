"""OpenTelemetry span helper.

Only the OpenTelemetry API is used here; without an SDK/exporter configured by
the hosting process every span is a no-op.
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator

from opentelemetry import trace
from opentelemetry.trace import Span, Status, StatusCode

TRACER_NAME = "publicweb-seo"

tracer = trace.get_tracer(TRACER_NAME)


@asynccontextmanager
async def with_span(name: str) -> AsyncIterator[Span]:
    """Run the enclosed block inside a span named *name*.

    The span ends OK when the block completes.  Any exception is recorded on
    the span, the span is marked ERROR, and the exception is re-raised as is.
    """
    with tracer.start_as_current_span(
        name, record_exception=False, set_status_on_exception=False
    ) as span:
        try:
            yield span
        except Exception as exc:
            span.record_exception(exc)
            span.set_status(Status(StatusCode.ERROR, str(exc)))
            raise
        span.set_status(Status(StatusCode.OK))
