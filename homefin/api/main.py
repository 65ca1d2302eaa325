"""FastAPI application factory"""

from contextlib import asynccontextmanager
from fastapi import FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from homefin.api.middleware import RequestIDMiddleware, MetricsMiddleware
from homefin.api.v1 import analysis, budgets, expenses, income, remittance, rent, reports
from homefin.infrastructure.database.models import Base
from homefin.infrastructure.database.session import engine
from homefin.infrastructure.observability.logging import setup_logging
from homefin.config import settings

# Setup structured logging
setup_logging(settings.log_level)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Create tables on first start; no migrations yet
    Base.metadata.create_all(bind=engine)
    yield


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="Homefin Gateway",
        description="Family finance tracking: expenses, budgets, rent, remittances and insights",
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
        return {"status": "ok", "service": settings.service_name}

    # Prometheus metrics endpoint
    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    # Register API routers
    app.include_router(expenses.router, prefix="/v1", tags=["expenses"])
    app.include_router(income.router, prefix="/v1", tags=["income"])
    app.include_router(budgets.router, prefix="/v1", tags=["budgets"])
    app.include_router(analysis.router, prefix="/v1", tags=["analysis"])
    app.include_router(rent.router, prefix="/v1", tags=["rent"])
    app.include_router(remittance.router, prefix="/v1", tags=["remittance"])
    app.include_router(reports.router, prefix="/v1", tags=["reports"])

    return app


app = create_app()
