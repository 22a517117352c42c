"""
FastAPI application entry point.
Main application setup and configuration.
"""

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.exceptions import RequestValidationError
from fastapi.staticfiles import StaticFiles
from contextlib import asynccontextmanager
from sqlalchemy.exc import SQLAlchemyError
from pydantic import ValidationError as PydanticValidationError
import logging

from propzing import __version__
from propzing.config import settings
from propzing.database import test_database_connection, create_tables, close_db_connection
from propzing.routers import (
    properties_router,
    developers_router,
    uploads_router,
    analytics_router,
    auth_router,
)
from propzing.utils.exceptions import APIException
from propzing.services.error_handler import ErrorHandlerService
from propzing.middleware.validation import ValidationMiddleware

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.
    Checks the database on startup and releases the pool on shutdown.
    """
    logger.info(f"Starting {settings.app_name} v{settings.app_version}")
    logger.info(f"Environment: {settings.environment}")

    db_connected = await test_database_connection()
    if not db_connected:
        logger.error("Failed to connect to database on startup")
    elif settings.auto_create_tables:
        await create_tables()

    if not settings.storage_configured:
        if settings.is_development:
            logger.warning("Object storage is not configured; uploads are saved locally")
        else:
            logger.warning("Object storage is not configured; uploads will be refused")

    yield

    logger.info("Shutting down application")
    await close_db_connection()


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="""
    Back-office API for entering and managing off-plan real-estate projects.

    ## Features

    * **Property entry**: 9-step wizard submission and structured bulk entry
    * **Payload preview**: see exactly what will be stored, with validation issues
    * **Dashboard**: property search, details, updates with a changelog, and deletion
    * **Developers**: partner developer management
    * **Uploads**: presigned URLs for Cloudflare R2 and direct uploads
    * **Analytics**: visitor, property engagement and live activity reports

    ## Authentication

    Dashboard routes need a bearer token from `/api/v1/auth/2fa/verify`.
    Upload routes need the `X-Upload-Secret` header.
    """,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_tags=[
        {"name": "Properties", "description": "Property entry, search and management"},
        {"name": "Developers", "description": "Partner developer management"},
        {"name": "Uploads", "description": "Listing media uploads"},
        {"name": "Analytics", "description": "Dashboard analytics"},
        {"name": "Authentication", "description": "Dashboard two-factor authentication"},
        {"name": "Health", "description": "Service health endpoints"},
    ],
    lifespan=lifespan,
)

app.add_middleware(
    ValidationMiddleware,
    max_request_size=settings.max_file_size + 10 * 1024 * 1024,
    enable_request_logging=settings.debug,
    api_prefix=f"{settings.api_v1_prefix}/",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["*"],
    expose_headers=["X-Request-ID", "Content-Disposition"],
)

app.include_router(properties_router, prefix=settings.api_v1_prefix)
app.include_router(developers_router, prefix=settings.api_v1_prefix)
app.include_router(uploads_router, prefix=settings.api_v1_prefix)
app.include_router(analytics_router, prefix=settings.api_v1_prefix)
app.include_router(auth_router, prefix=settings.api_v1_prefix)

# Local upload fallback is only used in development
if settings.is_development:
    app.mount(
        settings.local_upload_base_url,
        StaticFiles(directory=settings.upload_dir, check_dir=False),
        name="uploads",
    )


@app.exception_handler(APIException)
async def api_exception_handler(request: Request, exc: APIException):
    return ErrorHandlerService.handle_api_exception(exc, request)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return ErrorHandlerService.handle_validation_error(exc, request)


@app.exception_handler(PydanticValidationError)
async def pydantic_validation_exception_handler(request: Request, exc: PydanticValidationError):
    return ErrorHandlerService.handle_validation_error(exc, request)


@app.exception_handler(SQLAlchemyError)
async def database_exception_handler(request: Request, exc: SQLAlchemyError):
    return ErrorHandlerService.handle_database_error(exc, request)


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    return ErrorHandlerService.handle_http_exception(exc, request)


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    return ErrorHandlerService.handle_unexpected_error(exc, request)


@app.get("/", tags=["Health"])
async def root():
    """Basic service information."""
    return {
        "message": f"Welcome to {settings.app_name}",
        "version": __version__,
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
    db_healthy = await test_database_connection()
    if not db_healthy:
        raise HTTPException(status_code=503, detail="Database connection failed")

    return {
        "status": "healthy",
        "service": settings.app_name,
        "version": __version__,
        "environment": settings.environment,
        "database": "connected",
        "storage": "configured" if settings.storage_configured else "not configured"
    }


@app.get("/health/db", tags=["Health"])
async def database_health_check():
    db_healthy = await test_database_connection()
    if not db_healthy:
        raise HTTPException(status_code=503, detail="Database connection failed")

    return {
        "status": "healthy",
        "database": "connected",
        "database_url": settings.database_url.split("@")[1] if "@" in settings.database_url else "hidden"
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "propzing.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug
    )
