"""
FastAPI application entry point.
Main application setup and configuration.
"""

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.exceptions import RequestValidationError
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException
from contextlib import asynccontextmanager
from pathlib import Path
from sqlalchemy.exc import SQLAlchemyError
from pydantic import ValidationError as PydanticValidationError
import logging

from plot_catalog.config import settings
from plot_catalog.database import create_tables, test_database_connection, close_db_connection
from plot_catalog.routers import (
    admin_geocode_router,
    admin_listings_router,
    admin_plots_router,
    auth_router,
    geocode_router,
    listings_router,
    plots_router,
)
from plot_catalog.utils.exceptions import APIException
from plot_catalog.services.error_handler import ErrorHandlerService
from plot_catalog.middleware import RequestContextMiddleware

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.
    Handles startup and shutdown events.
    """
    logger.info(f"Starting {settings.app_name} v{settings.app_version}")
    logger.info(f"Environment: {settings.environment}")

    if await test_database_connection():
        await create_tables()
    else:
        logger.error("Failed to connect to database on startup")

    yield

    logger.info("Shutting down application")
    await close_db_connection()


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="""
    Land plot catalog with user submissions and admin moderation.

    ## Features

    * **Catalog**: Public list of plots for sale or rent
    * **Submissions**: Signed-in users propose plots with photos
    * **Moderation**: Admins approve submissions into the catalog or reject them
    * **Import**: Bulk load plots from CSV or Excel files with Spanish or English headers
    * **Geocoding**: Address to coordinates lookup

    ## Authentication

    Use `/api/v1/auth/login` to obtain a JWT token, then send it as
    `Authorization: Bearer <token>`. Admin endpoints also require the account's
    email to be on the `ADMIN_EMAILS` allow-list.
    """,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_tags=[
        {"name": "Authentication", "description": "Sign-up, sign-in and current user"},
        {"name": "Catalog", "description": "Public plot catalog"},
        {"name": "Submissions", "description": "User-submitted listings"},
        {"name": "Geocoding", "description": "Address lookup"},
        {"name": "Admin", "description": "Catalog management and moderation"},
        {"name": "Health", "description": "System health endpoints"},
    ],
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["*"],
    expose_headers=["X-Request-ID"],
)

app.add_middleware(
    RequestContextMiddleware,
    max_request_size=settings.max_request_size,
    enable_request_logging=not settings.is_testing,  # Quiet in tests
)

# Include API routers
app.include_router(plots_router, prefix=settings.api_v1_prefix)
app.include_router(auth_router, prefix=settings.api_v1_prefix)
app.include_router(listings_router, prefix=settings.api_v1_prefix)
app.include_router(geocode_router, prefix=settings.api_v1_prefix)
app.include_router(admin_plots_router, prefix=settings.api_v1_prefix)
app.include_router(admin_listings_router, prefix=settings.api_v1_prefix)
app.include_router(admin_geocode_router, prefix=settings.api_v1_prefix)

# Stored photos are public
Path(settings.storage_dir).mkdir(parents=True, exist_ok=True)
app.mount(
    settings.storage_mount_path,
    StaticFiles(directory=settings.storage_dir),
    name="storage"
)


# Global exception handlers using ErrorHandlerService
@app.exception_handler(APIException)
async def api_exception_handler(request: Request, exc: APIException):
    """Handle custom API exceptions with structured error responses."""
    return ErrorHandlerService.handle_api_exception(exc, request)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handle request validation errors; malformed JSON becomes a 400."""
    return ErrorHandlerService.handle_validation_error(exc, request)


@app.exception_handler(PydanticValidationError)
async def pydantic_validation_exception_handler(request: Request, exc: PydanticValidationError):
    return ErrorHandlerService.handle_validation_error(exc, request)


@app.exception_handler(SQLAlchemyError)
async def database_exception_handler(request: Request, exc: SQLAlchemyError):
    """Data store errors carry the upstream message."""
    return ErrorHandlerService.handle_database_error(exc, request)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Handle routing and framework HTTP errors with structured error responses."""
    return ErrorHandlerService.handle_http_exception(exc, request)


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Handle unexpected exceptions with secure error responses."""
    return ErrorHandlerService.handle_unexpected_error(exc, request)


@app.get("/", tags=["Health"])
async def root():
    """Basic API information."""
    return {
        "message": f"Welcome to {settings.app_name}",
        "version": settings.app_version,
        "environment": settings.environment,
        "status": "healthy",
        "documentation": {
            "swagger_ui": "/docs",
            "redoc": "/redoc",
            "openapi_json": "/openapi.json"
        },
        "api_prefix": settings.api_v1_prefix
    }


@app.get("/health", tags=["Health"])
async def health_check():
    """
    Health check endpoint with database connectivity test.
    Used by Docker health checks and load balancers.
    """
    if not await test_database_connection():
        raise HTTPException(status_code=503, detail="Database connection failed")

    return {
        "status": "healthy",
        "service": settings.app_name,
        "version": settings.app_version,
        "environment": settings.environment,
        "database": "connected"
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "plot_catalog.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug
    )
