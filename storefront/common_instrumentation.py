"""Tracing setup: OTLP export plus FastAPI and SQLAlchemy auto-instrumentation"""
from typing import Optional
from opentelemetry import trace
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.resources import Resource, SERVICE_NAME
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.sqlalchemy import SQLAlchemyInstrumentor
import logging

logger = logging.getLogger(__name__)

# Probe endpoints would otherwise flood the collector
EXCLUDED_URLS = "health,ready"


def setup_opentelemetry(
    service_name: str,
    otlp_endpoint: str,
    environment: str = "development",
    enabled: bool = True
) -> Optional[TracerProvider]:
    """
    Install a global tracer provider exporting spans over OTLP/gRPC

    The service-layer spans (order_service.*, cart_service.*, ...) are no-ops
    until this runs.
    """
    if not enabled:
        logger.info("Tracing disabled")
        return None

    provider = TracerProvider(resource=Resource(attributes={
        SERVICE_NAME: service_name,
        "deployment.environment": environment,
    }))
    exporter = OTLPSpanExporter(
        endpoint=otlp_endpoint,
        insecure=otlp_endpoint.startswith("http://")
    )
    provider.add_span_processor(BatchSpanProcessor(exporter))
    trace.set_tracer_provider(provider)

    logger.info(f"Tracing {service_name} ({environment}) to {otlp_endpoint}")
    return provider


def shutdown_opentelemetry(provider: Optional[TracerProvider]):
    """Flush pending spans"""
    if provider is not None:
        provider.shutdown()


def instrument_fastapi(app):
    FastAPIInstrumentor.instrument_app(app, excluded_urls=EXCLUDED_URLS)
    logger.info("FastAPI routes traced")


def instrument_sqlalchemy(engine):
    SQLAlchemyInstrumentor().instrument(engine=engine)
    logger.info("Database queries traced")
