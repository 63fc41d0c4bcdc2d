"""
FastAPI application entry point.
Application factory with middleware, exception handlers, routes and static mounts.
"""
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from fastapi import FastAPI, Request, status, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from fastapi.staticfiles import StaticFiles
import logging
import uvicorn

from sphere_gallery.config import Settings, settings as default_settings
from sphere_gallery.routes import images
from sphere_gallery.schemas import HealthResponse
from sphere_gallery.services.storage_service import ImageStore

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )


def add_cors_headers(response: JSONResponse) -> JSONResponse:
    """
    Add CORS headers to error responses.
    Error responses produced by exception handlers bypass the CORS middleware.

    Args:
        response: The JSONResponse to add headers to

    Returns:
        JSONResponse with CORS headers added
    """
    response.headers["Access-Control-Allow-Origin"] = "*"
    response.headers["Access-Control-Allow-Methods"] = "GET, POST, OPTIONS"
    response.headers["Access-Control-Allow-Headers"] = "*"

    return response


async def http_exception_handler(request: Request, exc: HTTPException):
    """Handle HTTP exceptions (400, 404, 500, etc.) with CORS headers."""
    logger.error(
        f"HTTPException on {request.method} {request.url.path}:\n"
        f"  Status: {exc.status_code}\n"
        f"  Detail: {exc.detail}"
    )

    # Handle both string and dict detail formats
    if isinstance(exc.detail, dict):
        content = exc.detail
    else:
        content = {"error": exc.detail, "detail": str(exc.detail)}

    response = JSONResponse(
        status_code=exc.status_code,
        content=content
    )

    return add_cors_headers(response)


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handle request validation errors."""
    logger.error(
        f"Validation error on {request.method} {request.url.path}:\n"
        f"  Errors: {exc.errors()}"
    )
    response = JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "error": "Validation error",
            "detail": str(exc.errors())
        }
    )
    return add_cors_headers(response)


async def general_exception_handler(request: Request, exc: Exception):
    """Handle general exceptions."""
    logger.error(
        f"Unhandled exception on {request.method} {request.url.path}:\n"
        f"  Error: {str(exc)}\n"
        f"  Error type: {type(exc).__name__}",
        exc_info=True
    )
    response = JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": "Internal server error",
            "detail": "An unexpected error occurred"
        }
    )
    return add_cors_headers(response)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the gallery API application.

    Args:
        settings: Settings to use (defaults to the environment-driven instance)

    Returns:
        FastAPI: Configured application
    """
    settings = settings or default_settings
    store = ImageStore(settings.IMAGES_DIR, url_prefix=settings.IMAGES_URL_PREFIX)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Uploads and the static mount both need the directory to exist
        store.ensure_directory()
        logger.info(f"Serving images from {store.directory.resolve()} at {store.url_prefix}/")
        yield

    app = FastAPI(
        title=settings.API_TITLE,
        description=settings.API_DESCRIPTION,
        version=settings.API_VERSION,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.image_store = store

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=False,  # Must be False when using wildcard origin
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        """Log every request with its response status."""
        method = request.method
        path = request.url.path
        logger.debug(f"Incoming {method} request to {path}")

        response = await call_next(request)
        logger.info(f"Response status: {response.status_code} for {method} {path}")
        return response

    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    app.include_router(images.router, prefix="/api", tags=["images"])
    app.include_router(images.manifest_router, tags=["images"])

    @app.get("/health", response_model=HealthResponse)
    async def health_check():
        """Liveness check."""
        return HealthResponse(ok=True)

    # check_dir=False: the directory is created by the lifespan hook
    app.mount(
        settings.IMAGES_URL_PREFIX,
        StaticFiles(directory=settings.IMAGES_DIR, check_dir=False),
        name="images",
    )

    # Application root must be mounted last so it doesn't shadow the routes above
    if Path(settings.STATIC_DIR).is_dir():
        app.mount("/", StaticFiles(directory=settings.STATIC_DIR, html=True), name="root")
    else:
        logger.info(f"Static root {settings.STATIC_DIR} not found, serving API info at /")

        @app.get("/")
        async def root():
            """Root endpoint - API info."""
            return {
                "message": settings.API_TITLE,
                "status": "healthy",
                "version": settings.API_VERSION
            }

    return app


app = create_app()


def run() -> None:
    """Console entry point: serve the application with uvicorn."""
    configure_logging(default_settings.LOG_LEVEL)
    logger.info(f"Server listening on http://localhost:{default_settings.PORT}")
    uvicorn.run(app, host=default_settings.HOST, port=default_settings.PORT)


if __name__ == "__main__":
    run()
