"""FastAPI application factory"""

from fastapi import FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from crediario.api.middleware import RequestIDMiddleware, MetricsMiddleware
from crediario.api.v1 import accounts, customers, operations, schedule
from crediario.infrastructure.observability.logging import setup_logging
from crediario.config import settings

# Setup structured logging
setup_logging(settings.log_level)


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="Crediário",
        description="Installment credit ledger for store owners",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # Health check endpoint
    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name}

    # Prometheus metrics endpoint
    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    # Register API routers
    app.include_router(schedule.router, prefix="/v1", tags=["schedule"])
    app.include_router(customers.router, prefix="/v1", tags=["customers"])
    app.include_router(operations.router, prefix="/v1", tags=["operations"])
    app.include_router(accounts.router, prefix="/v1", tags=["accounts"])

    return app


app = create_app()
