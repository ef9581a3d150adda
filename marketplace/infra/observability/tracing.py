"""
OpenTelemetry Distributed Tracing

Spans are created through the module-level ``tracer``. Until
``setup_tracing`` installs an SDK provider, the API's no-op provider is
used and spans cost nothing.
"""

import logging

from opentelemetry import trace
from opentelemetry.instrumentation.django import DjangoInstrumentor
from opentelemetry.instrumentation.requests import RequestsInstrumentor
from opentelemetry.sdk.resources import SERVICE_NAME, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter


logger = logging.getLogger(__name__)

tracer = trace.get_tracer("marketplace")

_initialized = False


def setup_tracing(service_name: str = "livemart-marketplace", enable: bool = True) -> None:
    """
    Initialize OpenTelemetry tracing.

    Args:
        service_name: Name of the service for tracing
        enable: Enable/disable tracing

    Example:
        setup_tracing(service_name="livemart-marketplace")
    """
    global _initialized

    if _initialized:
        logger.warning("Tracing already initialized. Skipping.")
        return

    if not enable:
        logger.info("Tracing disabled via configuration")
        return

    resource = Resource(attributes={SERVICE_NAME: service_name})
    tracer_provider = TracerProvider(resource=resource)
    tracer_provider.add_span_processor(BatchSpanProcessor(ConsoleSpanExporter()))
    trace.set_tracer_provider(tracer_provider)

    # Auto-instrument incoming HTTP requests and outgoing calls to collaborators
    DjangoInstrumentor().instrument()
    RequestsInstrumentor().instrument()

    _initialized = True
    logger.info(f"OpenTelemetry tracing initialized for service: {service_name}")
