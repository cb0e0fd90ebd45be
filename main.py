import logging
import time
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from shortlinks_app.api.v1 import redirect, urls
from shortlinks_app.config import settings
from shortlinks_app.dependencies import get_registry
from shortlinks_app.errors import ErrorKind, ShortenerError
from shortlinks_app.logging_config import setup_logging
from shortlinks_app.middleware import LoggingMiddleware
from shortlinks_app.schemas.url import ErrorResponse
from shortlinks_app.services.analytics import AnalyticsRecorder
from shortlinks_app.services.clock import SystemClock
from shortlinks_app.services.short_code_strategies import RandomShortCodeStrategy
from shortlinks_app.services.url_service import URLService
from shortlinks_app.storage.strategies import InMemoryRegistryStore, RegistryStore
from shortlinks_app.workers.expiry_worker import ExpiryWorker

logger = logging.getLogger("shortlinks_app.main")

ERROR_STATUS = {
    ErrorKind.INVALID_REQUEST: 400,
    ErrorKind.INVALID_URL: 400,
    ErrorKind.INVALID_VALIDITY: 400,
    ErrorKind.INVALID_SHORTCODE: 400,
    ErrorKind.SHORTCODE_TAKEN: 409,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.EXPIRED: 410,
    ErrorKind.INTERNAL: 500,
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Own the registry for the lifetime of the process.

    Created at startup, cleared at shutdown. The expiry worker, when enabled,
    runs alongside the server.
    """
    setup_logging(settings.log_level, settings.log_file, settings.log_json)
    app.state.started_at = time.monotonic()

    clock = SystemClock()
    registry = InMemoryRegistryStore()
    app.state.registry = registry
    app.state.url_service = URLService(
        registry=registry,
        short_code_strategy=RandomShortCodeStrategy(
            length=settings.short_code_length,
            max_retries=settings.max_retries,
        ),
        analytics=AnalyticsRecorder(registry, clock=clock),
        clock=clock,
        base_url=settings.base_url,
        default_validity_minutes=settings.default_validity_minutes,
    )

    worker = None
    if settings.sweep_enabled:
        worker = ExpiryWorker(app.state.url_service, interval=settings.sweep_interval_seconds)
        worker.start()

    logger.info("%s %s started (%s)", settings.app_name, settings.app_version, settings.environment)
    try:
        yield
    finally:
        if worker is not None:
            await worker.shutdown()
        registry.clear()
        logger.info("Server shut down completed")


# Create FastAPI app
app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="A URL shortener with click analytics built with FastAPI",
    debug=settings.debug,
    lifespan=lifespan,
    # Kept under /api so every single-segment path stays a shortcode
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", "X-Requested-With"],
)
app.add_middleware(LoggingMiddleware)


def error_response(status_code: int, message: str, kind: ErrorKind) -> JSONResponse:
    body = ErrorResponse(message=message, kind=kind.value)
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))


@app.exception_handler(ShortenerError)
async def shortener_error_handler(request: Request, exc: ShortenerError):
    """Map core error kinds to HTTP status codes"""
    status_code = ERROR_STATUS.get(exc.kind, 500)
    if status_code >= 500:
        logger.error("Request failed: %s", exc.message)
    return error_response(status_code, exc.message, exc.kind)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Unreadable bodies are a 400, not FastAPI's 422 detail list"""
    if any(error.get("type") == "json_invalid" for error in exc.errors()):
        message = "Invalid JSON in request body"
    else:
        message = "Invalid request body"
    logger.info("Rejected request to %s: %s", request.url.path, message)
    return error_response(400, message, ErrorKind.INVALID_REQUEST)


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    """Unknown routes and wrong methods answer with the same error body"""
    if exc.status_code == 404:
        return error_response(404, "Route not found", ErrorKind.NOT_FOUND)
    kind = ErrorKind.INVALID_REQUEST if exc.status_code < 500 else ErrorKind.INTERNAL
    return error_response(exc.status_code, str(exc.detail), kind)


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return error_response(500, "Internal server error", ErrorKind.INTERNAL)


@app.get("/")
def read_root():
    """Root endpoint with API information"""
    return {
        "message": f"Welcome to {settings.app_name}",
        "version": settings.app_version,
        "docs": app.docs_url,
        "redoc": app.redoc_url,
    }


@app.get("/api/health")
def health_check(request: Request, registry: RegistryStore = Depends(get_registry)):
    """Health check endpoint"""
    return {
        "status": "healthy",
        "environment": settings.environment,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "uptime": round(time.monotonic() - request.app.state.started_at, 3),
        "urls": registry.count(),
    }


######## Include routers
app.include_router(urls.router, prefix="/api")
app.include_router(redirect.router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host=settings.host, port=settings.port, reload=settings.debug)
