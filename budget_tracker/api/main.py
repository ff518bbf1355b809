"""FastAPI application factory"""

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from budget_tracker.api.middleware import RequestIDMiddleware, MetricsMiddleware
from budget_tracker.api.v1 import bills, paychecks, payments, overview
from budget_tracker.infrastructure.database import session
from budget_tracker.infrastructure.database.models import Base
from budget_tracker.infrastructure.observability.logging import setup_logging
from budget_tracker.config import settings

# Setup structured logging
setup_logging(settings.log_level)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create the tables on startup when running against a local SQLite file"""
    if settings.record_store_backend == "sql" and settings.database_url.startswith("sqlite"):
        Base.metadata.create_all(bind=session.engine)
        logging.info("SQLite tables ready", extra={"database_url": settings.database_url})
    yield


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="Budget Tracker",
        description="Bills, paychecks and installment payments with a monthly overview",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # Health check endpoint
    @app.get("/health")
    def health_check():
        return {
            "status": "ok",
            "service": settings.service_name,
            "record_store": settings.record_store_backend,
            "atomic_payments": settings.atomic_payments,
        }

    # Prometheus metrics endpoint
    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    # Register API routers
    app.include_router(bills.router, prefix="/v1", tags=["bills"])
    app.include_router(payments.router, prefix="/v1", tags=["payments"])
    app.include_router(paychecks.router, prefix="/v1", tags=["paychecks"])
    app.include_router(overview.router, prefix="/v1", tags=["overview"])

    return app


app = create_app()
