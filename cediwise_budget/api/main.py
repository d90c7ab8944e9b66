"""FastAPI application factory"""

from fastapi import FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from cediwise_budget.api.middleware import RequestIDMiddleware, MetricsMiddleware
from cediwise_budget.api.v1 import allocation, cycle
from cediwise_budget.infrastructure.observability.logging import setup_logging
from cediwise_budget.config import settings

# Setup structured logging
setup_logging(settings.log_level)


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="CediWise Budget Engine",
        description="Budget allocation, cycle review and reallocation service",
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
    app.include_router(allocation.router, prefix="/v1", tags=["allocation"])
    app.include_router(cycle.router, prefix="/v1", tags=["cycles"])

    return app


app = create_app()
