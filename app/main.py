"""
Main FastAPI application
"""

from contextlib import asynccontextmanager
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.encoders import jsonable_encoder
import logging
import time
from prometheus_client import make_asgi_app, Counter, Histogram
import uuid

from app.config import settings
from app.core.database import init_db, close_db
from app.core.exceptions import LandingAPIException
from app.core.logging import setup_logging
from app.api.api import api_router
from app.api.endpoints import health
from app.schemas.response import ServiceStatus
from app.services.dispatch_service import AdDispatcher
from app.services.geolocation_service import GeoLocator

# Setup logging
setup_logging()
logger = logging.getLogger(__name__)

# Prometheus metrics - use try/except to avoid duplicate registration
try:
    REQUEST_COUNT = Counter(
        "app_requests_total",
        "Total requests",
        ["method", "endpoint", "status"]
    )
    REQUEST_DURATION = Histogram(
        "app_request_duration_seconds",
        "Request duration",
        ["method", "endpoint"]
    )
except ValueError:
    # Metrics already registered, get them from registry
    from prometheus_client import REGISTRY
    REQUEST_COUNT = REGISTRY._names_to_collectors["app_requests_total"]
    REQUEST_DURATION = REGISTRY._names_to_collectors["app_request_duration_seconds"]

# Seconds to wait for in-flight ad platform sends on shutdown
DISPATCH_DRAIN_TIMEOUT = 10.0


def check_secrets():
    """
    Warn about secrets left at their development defaults; refuse them in production
    """
    insecure = settings.insecure_defaults()
    for name in insecure:
        logger.warning(f"{name} is using its insecure built-in default")
    if insecure and settings.is_production:
        raise RuntimeError(f"Refusing to start in production with default {', '.join(insecure)}")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager
    """
    # Startup
    logger.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION}")
    check_secrets()

    await init_db()
    logger.info("Database connection established")

    app.state.geo_locator = GeoLocator()
    app.state.ad_dispatcher = AdDispatcher()

    yield

    # Shutdown
    logger.info("Shutting down application")

    await app.state.ad_dispatcher.close(timeout=DISPATCH_DRAIN_TIMEOUT)
    await app.state.geo_locator.close()
    logger.info("Outbound HTTP clients closed")

    await close_db()


# Create FastAPI application
app = FastAPI(
    title=settings.APP_NAME,
    description="Landing page analytics and ad platform conversion forwarding",
    version=settings.APP_VERSION,
    docs_url="/docs" if settings.DEBUG else None,
    redoc_url="/redoc" if settings.DEBUG else None,
    openapi_url="/openapi.json" if settings.DEBUG else None,
    lifespan=lifespan
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=False,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
)


# Request tracking middleware
@app.middleware("http")
async def track_requests(request: Request, call_next):
    """
    Track request metrics and add request ID
    """
    request_id = str(uuid.uuid4())
    request.state.request_id = request_id

    start_time = time.time()
    response = await call_next(request)
    duration = time.time() - start_time

    REQUEST_COUNT.labels(
        method=request.method,
        endpoint=request.url.path,
        status=response.status_code
    ).inc()

    REQUEST_DURATION.labels(
        method=request.method,
        endpoint=request.url.path
    ).observe(duration)

    response.headers["X-Request-ID"] = request_id
    response.headers["X-Process-Time"] = str(duration)

    return response


# Exception handlers
@app.exception_handler(LandingAPIException)
async def landing_exception_handler(request: Request, exc: LandingAPIException):
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "success": False,
            "error": {
                "code": exc.code,
                "message": exc.message,
                "details": exc.details
            }
        }
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "success": False,
            "error": {
                "code": "VALIDATION_ERROR",
                "message": "Invalid request",
                "details": {"errors": jsonable_encoder(exc.errors())}
            }
        }
    )


@app.exception_handler(404)
async def not_found_handler(request: Request, exc):
    return JSONResponse(
        status_code=404,
        content={
            "success": False,
            "error": {
                "code": "NOT_FOUND",
                "message": "The requested resource was not found"
            }
        }
    )


@app.exception_handler(Exception)
async def internal_error_handler(request: Request, exc: Exception):
    logger.error(f"Internal server error on {request.method} {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "error": {
                "code": "INTERNAL_ERROR",
                "message": "Internal server error"
            }
        }
    )


@app.get("/", response_model=ServiceStatus)
async def root():
    """Root endpoint"""
    return {"status": "ok", "service": settings.APP_NAME}


# Include routers
app.include_router(api_router, prefix="/api")

app.include_router(
    health.router,
    prefix="/health",
    tags=["Health"]
)


def mount_metrics(target: FastAPI):
    """Expose the Prometheus registry at /metrics"""
    target.mount("/metrics", make_asgi_app())


# Mount Prometheus metrics endpoint
if settings.PROMETHEUS_ENABLED:
    mount_metrics(app)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        log_level=settings.LOG_LEVEL.lower()
    )
