"""
FastAPI server for BloodChain

This module implements the REST API server. The app factory builds one
repository per process (or accepts one from the caller), exposes it to the
handlers through dependency injection and maps BloodChain errors, request
validation failures and unexpected exceptions to JSON error bodies.
"""

import uvicorn
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from bloodchain import __version__
from bloodchain.api.v1.endpoints import router as v1_router
from bloodchain.config.settings import Settings, get_settings
from bloodchain.core.errors import BloodChainError, InternalError
from bloodchain.security.secure_logging import configure_logging, sanitize_for_log
from bloodchain.storage.repository import BloodChainRepository

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    # Startup
    logger.info("Starting BloodChain API server...")
    yield
    # Shutdown
    logger.info("Shutting down BloodChain API server...")
    app.state.repository.clear()


def _validation_details(exc: RequestValidationError) -> list[dict]:
    return [
        {
            "loc": [str(part) for part in error.get("loc", ())],
            "msg": error.get("msg", ""),
            "type": error.get("type", ""),
        }
        for error in exc.errors()
    ]


def create_app(repository: BloodChainRepository | None = None, settings: Settings | None = None) -> FastAPI:
    """Create and configure FastAPI application"""

    settings = settings or get_settings()
    if repository is None:
        repository = BloodChainRepository(
            log_capacity=settings.LOG_CAPACITY,
            average_daily_consumption=settings.AVERAGE_DAILY_CONSUMPTION,
            default_limit=settings.DEFAULT_LOG_LIMIT,
        )

    fast_app = FastAPI(
        title="BloodChain API",
        description="REST API for blood donation tracking, donor rewards and NFT donation certificates",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    fast_app.state.repository = repository
    fast_app.state.settings = settings

    fast_app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials="*" not in settings.CORS_ORIGINS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @fast_app.middleware("http")
    async def security_headers_middleware(request: Request, call_next):
        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        response.headers["Cache-Control"] = "no-store"
        return response

    # Payload size limit middleware
    @fast_app.middleware("http")
    async def limit_upload_size(request: Request, call_next):
        if request.method in ("POST", "PUT"):
            content_length = request.headers.get("content-length")
            if content_length and content_length.isdigit() and int(content_length) > settings.MAX_UPLOAD_SIZE:
                return JSONResponse(
                    status_code=413,
                    content={"error": f"Request body too large. Limit is {settings.MAX_UPLOAD_SIZE} bytes"},
                )
        return await call_next(request)

    fast_app.include_router(v1_router)

    @fast_app.get("/")
    async def root():
        """Root endpoint with API information"""
        return {
            "name": "BloodChain API",
            "version": __version__,
            "docs_url": "/docs",
            "health_check": f"{settings.API_PREFIX}/health",
        }

    @fast_app.exception_handler(BloodChainError)
    async def bloodchain_error_handler(request: Request, exc: BloodChainError):
        """Domain errors carry their own status code"""
        if exc.status_code >= 500:
            logger.error(f"{request.method} {sanitize_for_log(request.url.path)} failed: {exc.message}")
        else:
            logger.info(f"{request.method} {sanitize_for_log(request.url.path)} rejected: {exc.message}")
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @fast_app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        logger.info(f"{request.method} {sanitize_for_log(request.url.path)} rejected: invalid request data")
        return JSONResponse(
            status_code=400,
            content={"error": "Invalid request data", "details": _validation_details(exc)},
        )

    @fast_app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(_request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    @fast_app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Global exception handler"""
        logger.exception(f"Unhandled exception on {request.method} {sanitize_for_log(request.url.path)}")
        error = InternalError(
            "Internal server error",
            details=str(exc) if settings.is_debug else None,
        )
        return JSONResponse(status_code=error.status_code, content=error.to_dict())

    return fast_app


configure_logging(get_settings().LOG_LEVEL, Settings.LOG_FORMAT)

# Create app instance
app = create_app()


def run_server(host: str | None = None, port: int | None = None, log_level: str | None = None):
    """Run the server with uvicorn"""
    settings = get_settings()
    api_config = settings.get_api_config()

    uvicorn.run(
        "bloodchain.api.server:app",
        host=host or api_config["host"],
        port=port or api_config["port"],
        log_level=(log_level or settings.LOG_LEVEL).lower(),
        server_header=False,
        timeout_keep_alive=5,
    )


if __name__ == "__main__":
    run_server()
