"""FastAPI application factory"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from adanfo_gateway.api.middleware import RequestIDMiddleware, MetricsMiddleware
from adanfo_gateway.api.v1 import borrowers, lenders, loans
from adanfo_gateway.infrastructure.database.models import Base
from adanfo_gateway.infrastructure.database.session import engine
from adanfo_gateway.infrastructure.observability.logging import setup_logging
from adanfo_gateway.config import settings

# Setup structured logging
setup_logging(settings.log_level)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create missing tables on startup"""
    Base.metadata.create_all(bind=engine)
    yield


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="Adanfo Lending Gateway",
        description="Student loan eligibility, pricing, lending pool and credit scoring service",
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
    app.include_router(borrowers.router, prefix="/v1", tags=["borrowers"])
    app.include_router(loans.router, prefix="/v1", tags=["loans"])
    app.include_router(lenders.router, prefix="/v1", tags=["lenders"])

    return app


app = create_app()
