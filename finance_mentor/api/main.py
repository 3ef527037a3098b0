"""FastAPI application factory"""

import uvicorn
from fastapi import FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from finance_mentor.api.middleware import RequestIDMiddleware, MetricsMiddleware
from finance_mentor.api.v1 import assistant, insights, planning, transactions
from finance_mentor.infrastructure.database.session import init_db
from finance_mentor.infrastructure.observability.logging import setup_logging
from finance_mentor.config import settings

# Setup structured logging
setup_logging(settings.log_level, settings.service_name)


def create_app(create_tables: bool = True) -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="Finance Mentor",
        description="Personal finance import, forecasting and advice service",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    if create_tables:
        init_db()

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
    app.include_router(transactions.router, prefix="/v1", tags=["transactions"])
    app.include_router(insights.router, prefix="/v1", tags=["insights"])
    app.include_router(assistant.router, prefix="/v1", tags=["assistant"])
    app.include_router(planning.router, prefix="/v1", tags=["planning"])

    return app


app = create_app()


def run():
    """Serve the app with uvicorn on the configured host and port"""
    uvicorn.run("finance_mentor.api.main:app", host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    run()
