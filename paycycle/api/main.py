"""FastAPI application factory"""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from paycycle.api.dependencies import get_request_id
from paycycle.api.middleware import RequestIDMiddleware, MetricsMiddleware
from paycycle.api.v1 import amortization, cycles, periods, summary
from paycycle.domain.exceptions import DomainException
from paycycle.infrastructure.observability.logging import log_rejected_input, setup_logging
from paycycle.infrastructure.observability.metrics import record_domain_error
from paycycle.config import settings

# Setup structured logging
setup_logging(settings.log_level)


async def domain_exception_handler(request: Request, exc: DomainException) -> JSONResponse:
    """Inputs the engine rejects are client errors"""
    record_domain_error(exc)
    log_rejected_input(get_request_id(request), exc)
    return JSONResponse(status_code=422, content={"detail": str(exc)})


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="Paycycle",
        description="Billing cycle, due date, amortization and financial period calculations",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    app.add_exception_handler(DomainException, domain_exception_handler)

    # Health check endpoint
    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name}

    # Prometheus metrics endpoint
    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    # Register API routers
    app.include_router(cycles.router, prefix="/v1", tags=["cycles"])
    app.include_router(amortization.router, prefix="/v1", tags=["amortization"])
    app.include_router(periods.router, prefix="/v1", tags=["periods"])
    app.include_router(summary.router, prefix="/v1", tags=["summary"])

    return app


app = create_app()
