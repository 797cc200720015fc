"""
Event processor - accepts events over HTTP, publishes them to a message bus,
enriches inbound events and forwards them downstream.

Features:
- Structured logging with correlation IDs
- Prometheus metrics
- Readiness checks
- In-memory or Redis Streams message bus
"""
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.responses import JSONResponse
from prometheus_client import make_asgi_app
from . import SERVICE_NAME, __version__
from .adapters import BusAdapter, create_bus
from .api.router import router
from .config import Settings, get_settings
from .health import HealthChecker
from .logging import setup_logging, get_logger
from .metrics import Metrics
from .middleware import (
    CorrelationIdMiddleware,
    ErrorHandlerMiddleware,
    MetricsMiddleware,
    ValidationMiddleware,
)
from .services import ConsumerPipeline, EventGateway, Publisher

logger = get_logger()


def create_app(settings: Settings | None = None, bus: BusAdapter | None = None) -> FastAPI:
    """
    Build the application and wire the bus, pipeline and entry point.

    Args:
        settings: Configuration (defaults to environment settings)
        bus: Bus adapter (defaults to the one selected by BUS_ADAPTER)
    """
    settings = settings or get_settings()
    bus = bus or create_bus(settings)
    metrics = Metrics(service_name=SERVICE_NAME, version=__version__)

    publisher = Publisher(bus, metrics=metrics)
    pipeline = ConsumerPipeline(
        publisher,
        downstream_channel=settings.PROCESSED_CHANNEL,
        metrics=metrics,
        history_size=settings.OBSERVED_HISTORY,
    )
    pipeline.register(
        bus,
        inbound_channel=settings.INPUT_CHANNEL,
        received_channel=settings.OUTPUT_CHANNEL,
    )
    gateway = EventGateway(
        publisher,
        primary_channel=settings.OUTPUT_CHANNEL,
        secondary_channel=settings.INPUT_CHANNEL,
    )
    health_checker = HealthChecker(bus)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(
            "service_starting",
            version=__version__,
            env=settings.ENV,
            bus_adapter=type(bus).__name__,
        )
        await bus.start()
        try:
            yield
        finally:
            logger.info("service_stopping")
            await bus.stop()
            metrics.mark_down()

    app = FastAPI(
        title="Event Processor",
        lifespan=lifespan,
        version=__version__,
        description="Event publishing, enrichment and forwarding over a message bus",
    )
    app.state.settings = settings
    app.state.bus = bus
    app.state.metrics = metrics
    app.state.pipeline = pipeline
    app.state.gateway = gateway

    # Last added runs first: correlation ID, metrics, error handling, validation
    app.add_middleware(ValidationMiddleware, max_size=settings.MAX_EVENT_SIZE)
    app.add_middleware(ErrorHandlerMiddleware)
    app.add_middleware(MetricsMiddleware, metrics=metrics)
    app.add_middleware(CorrelationIdMiddleware)

    app.include_router(router)
    app.mount("/metrics", make_asgi_app(registry=metrics.registry))

    @app.get("/health/ready")
    async def health_ready():
        """
        Readiness check.

        Returns:
            200: Service is ready to handle traffic
            503: Service is not ready
        """
        logger.debug("health_check_readiness")
        result = await health_checker.readiness()
        status_code = 200 if result["status"] == "ready" else 503
        return JSONResponse(result, status_code=status_code)

    return app


_settings = get_settings()
setup_logging(json_output=_settings.LOG_JSON, service_name=SERVICE_NAME, level=_settings.LOG_LEVEL)

app = create_app(_settings)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "event_processor.main:app",
        host="0.0.0.0",
        port=_settings.SERVICE_PORT,
    )
