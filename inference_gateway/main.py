"""
Inference Gateway - Main Application
Forwards record uploads to the apnea and diabetes model servers
"""

import time
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
import structlog

from inference_gateway.config import Settings, get_settings
from inference_gateway.logging_config import setup_logging
from inference_gateway.models.prediction import ErrorResponse, ServiceInfo
from inference_gateway.routes import health, predict
from inference_gateway.utils.uploads import ensure_upload_dir
from inference_gateway.utils.upstream_client import UpstreamClient

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan events"""
    settings: Settings = app.state.settings
    logger.info(
        "Inference Gateway started",
        url=f"http://{settings.host}:{settings.port}",
        health_check=f"http://{settings.host}:{settings.port}/health",
    )
    settings.log_config()

    yield

    logger.info("Inference Gateway shutting down")


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the gateway application from ``settings`` (environment when omitted)"""
    settings = settings or get_settings()
    setup_logging(settings.log_level, settings.log_format)

    app = FastAPI(
        title="Inference Gateway",
        description="Forwards ECG record uploads to the apnea and diabetes model servers",
        version=settings.service_version,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.upstream_client = UpstreamClient(
        timeout=settings.upstream_timeout_seconds,
        headers=settings.upstream_headers,
    )

    # Uploads are written here, so it must exist before the first request
    ensure_upload_dir(settings.upload_dir)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        """Log all incoming requests"""
        start = time.perf_counter()
        logger.info(
            "Request received",
            method=request.method,
            url=str(request.url),
            client_ip=request.client.host if request.client else "unknown",
        )

        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
            return response
        finally:
            logger.info(
                "Request completed",
                method=request.method,
                url=str(request.url),
                status_code=status_code,
                duration_ms=int((time.perf_counter() - start) * 1000),
            )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        """Framework HTTP errors in the gateway's error envelope"""
        return JSONResponse(
            status_code=exc.status_code,
            content=ErrorResponse(error=str(exc.detail)).content(),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """Malformed query or form data"""
        return JSONResponse(
            status_code=400,
            content=ErrorResponse(
                error="Invalid request",
                details=jsonable_encoder(exc.errors()),
            ).content(),
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Global exception handler"""
        logger.error(
            "Unhandled exception",
            error=str(exc),
            method=request.method,
            url=str(request.url),
            exc_info=True,
        )
        return JSONResponse(
            status_code=500,
            content={
                "success": False,
                "error": "Internal server error",
                "message": str(exc),
            },
        )

    app.include_router(health.router, tags=["Health"])
    app.include_router(predict.router, prefix="/api", tags=["Prediction"])

    @app.get("/", response_model=ServiceInfo)
    async def root():
        """Root endpoint"""
        return ServiceInfo(
            service=settings.service_name,
            version=settings.service_version,
        )

    return app


app = create_app()


def run():
    """Console entry point"""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "inference_gateway.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
        log_config=None,
    )


if __name__ == "__main__":
    run()
