"""
Online Auction FastAPI Application

Main entry point for the auction API: authentication with audited login
provenance and the current-user endpoints.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

# Common library imports
from common.database import MongoDB
from common.utils import APIException, error_response, success_response

# App-specific imports
from auction_app.config import settings
from auction_app.routers import auth_router, user_router
from auction_app.dependencies import init_all_services, shutdown_services

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


# =============================================================================
# Database Instance
# =============================================================================
main_db = MongoDB()


# =============================================================================
# Application Lifespan
# =============================================================================
@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan context manager.

    Refuses to start without a signing secret, then connects the database
    and builds the services.
    """
    # Startup
    logger.info("Starting Online Auction API...")
    settings.validate_required()

    await main_db.connect(
        uri=settings.MONGODB_URI,
        database_name=settings.MONGODB_DATABASE,
    )
    await main_db.ensure_indexes()

    init_all_services(db=main_db.db, app_settings=settings)
    logger.info(f"Allowed origins: {settings.get_cors_origins()}")
    logger.info("Online Auction API started successfully!")

    yield

    # Shutdown
    logger.info("Shutting down Online Auction API...")
    shutdown_services()
    await main_db.disconnect()
    logger.info("Online Auction API shut down complete.")


# =============================================================================
# FastAPI Application
# =============================================================================
app = FastAPI(
    title="Online Auction API",
    description="Online auction system - authentication and users",
    version="1.0.0",
    lifespan=lifespan,
    docs_url="/docs" if settings.is_development() else None,
    redoc_url="/redoc" if settings.is_development() else None,
)

# =============================================================================
# CORS Middleware
# =============================================================================
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_cors_origins(),
    allow_credentials=settings.CORS_ALLOW_CREDENTIALS,
    allow_methods=["GET", "POST", "PUT", "DELETE", "PATCH"],
    allow_headers=["*"],
)


# =============================================================================
# Error Handlers
# =============================================================================
@app.exception_handler(APIException)
async def api_exception_handler(request: Request, exc: APIException):
    """Render API errors as a short client-safe message."""
    return JSONResponse(
        status_code=exc.status_code,
        content=error_response(exc.message, code=exc.code),
        headers=exc.headers,
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Malformed bodies get the same answer as missing fields."""
    logger.debug(f"Request validation failed on {request.url.path}: {exc.errors()}")
    return JSONResponse(
        status_code=400,
        content=error_response("All fields are required", code="VALIDATION_ERROR"),
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    """Last resort: log the detail, return nothing internal."""
    logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc!r}")
    return JSONResponse(
        status_code=500,
        content=error_response("Server error", code="SERVER_ERROR"),
    )


# =============================================================================
# Include Routers
# =============================================================================
app.include_router(auth_router, tags=["Authentication"])
app.include_router(user_router, tags=["User"])


# =============================================================================
# Default and Health Check Endpoints
# =============================================================================
@app.get("/", tags=["Health"])
async def root():
    """Welcome message."""
    return {"msg": "Welcome to Online Auction System API"}


@app.get("/health", tags=["Health"])
async def health():
    """
    Health check endpoint.

    Returns the status of the API and database connection.
    """
    return success_response({
        "status": "ok",
        "version": "1.0.0",
        "database": main_db.is_connected,
    })


# =============================================================================
# Run with Uvicorn
# =============================================================================
if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "api:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.is_development(),
    )
