"""FastAPI application factory"""

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from starlette.responses import Response

from cashpilot_insights.api.middleware import MetricsMiddleware, RequestIDMiddleware
from cashpilot_insights.api.v1 import assessment
from cashpilot_insights.config import settings
from cashpilot_insights.infrastructure.observability.logging import setup_logging


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    # Setup structured logging
    setup_logging(settings.log_level)

    app = FastAPI(
        title="CashPilot Insights",
        description="Financial health scoring, trends, risk and data-source strategy",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        # Rejected input may be NaN or Infinity, which JSON cannot carry
        errors = [
            {key: value for key, value in error.items() if key not in ("input", "ctx")}
            for error in exc.errors()
        ]
        return JSONResponse(status_code=422, content=jsonable_encoder({"detail": errors}))

    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name}

    # Prometheus metrics endpoint
    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    app.include_router(assessment.router, prefix="/v1", tags=["assessment"])

    return app


app = create_app()
