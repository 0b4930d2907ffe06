"""
Application factory - builds FastAPI app with all middleware and routes.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from pdfrender import __version__
from pdfrender.config import Settings, get_settings
from pdfrender.modules.health.router import router as health_router
from pdfrender.modules.render.pool import EnginePool
from pdfrender.modules.render.router import router as render_router
from pdfrender.shared.errors import PdfServiceError, ValidationError
from pdfrender.shared.ids import generate_request_id
from pdfrender.shared.logging import (
    clear_request_context,
    get_logger,
    get_request_context,
    set_request_context,
    setup_logging,
)
from pdfrender.shared.types import RequestContext

logger = get_logger(__name__)

AVAILABLE_ENDPOINTS = ["GET /", "GET /health", "POST /generate"]


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan - startup and shutdown."""
    settings: Settings = app.state.settings

    setup_logging(settings.log_level)
    logger.info("Starting PDF service...")
    logger.info(f"CORS origins: {', '.join(settings.cors_origins)}")
    logger.info(
        f"Browser pooling enabled ({settings.engine_idle_timeout_seconds:.0f}s idle timeout)"
    )

    yield

    # The browser outlives requests; it must not outlive the process.
    logger.info("Shutting down PDF service...")
    await app.state.engine_pool.close()
    logger.info("PDF service stopped")


def _error_response(status_code: int, error: dict[str, Any]) -> JSONResponse:
    ctx = get_request_context()
    return JSONResponse(
        status_code=status_code,
        content={
            "error": error,
            "request_id": ctx.request_id if ctx else None,
        },
    )


def build_app(settings: Settings | None = None, engine_pool: EnginePool | None = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        settings: Optional settings override (useful for testing)
        engine_pool: Optional pool override, e.g. one with a fake launcher

    Returns:
        Configured FastAPI application
    """
    if settings is None:
        settings = get_settings()

    app = FastAPI(
        title="PDF Service",
        description="HTML to PDF rendering on a pooled headless Chromium",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.engine_pool = engine_pool or EnginePool(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=False,
        allow_methods=["GET", "POST"],
        allow_headers=["Content-Type", "Authorization"],
    )

    @app.middleware("http")
    async def request_context_middleware(request: Request, call_next: Any) -> Response:
        """Attach request context for logging and tracing."""
        ctx = RequestContext(
            request_id=request.headers.get("X-Request-ID", generate_request_id()),
            client=request.client.host if request.client else None,
        )
        set_request_context(ctx)

        try:
            logger.info(f"{request.method} {request.url.path}")
            response = await call_next(request)
            response.headers["X-Request-ID"] = ctx.request_id
            return response
        finally:
            clear_request_context()

    @app.exception_handler(PdfServiceError)
    async def service_error_handler(request: Request, exc: PdfServiceError) -> JSONResponse:
        """Handle PdfServiceError with consistent JSON response."""
        if exc.http_status >= 500:
            logger.error(f"{exc.code}: {exc.message}")
        return _error_response(exc.http_status, exc.to_dict())

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        """Malformed bodies get the same shape as other validation errors."""
        error = ValidationError(
            "Invalid request body",
            details={"errors": jsonable_errors(exc)},
        )
        return _error_response(error.http_status, error.to_dict())

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        if exc.status_code == 404:
            return _error_response(404, {
                "code": "not_found",
                "message": f"Endpoint {request.method} {request.url.path} not found",
                "details": {"available_endpoints": AVAILABLE_ENDPOINTS},
            })
        return _error_response(exc.status_code, {
            "code": "http_error",
            "message": str(exc.detail),
            "details": {},
        })

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        """Last resort: anything unexpected still gets the JSON error shape."""
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        return _error_response(500, {
            "code": "internal_error",
            "message": "Internal server error",
            "details": {},
        })

    app.include_router(health_router)
    app.include_router(render_router)

    @app.get("/")
    async def root() -> dict[str, Any]:
        """Service description."""
        return {
            "service": "PDF Generation Microservice",
            "version": __version__,
            "endpoints": {
                "health": {
                    "method": "GET",
                    "path": "/health",
                    "description": "Health check endpoint",
                },
                "generate": {
                    "method": "POST",
                    "path": "/generate",
                    "description": "Generate PDF from HTML",
                    "body": {
                        "html": "HTML content (required)",
                        "filename": f"Filename for PDF (optional, default: {settings.default_filename})",
                        "pdfFooterDisplay": 'Footer display mode: "all" or "firstPage" (optional, default: "all")',
                    },
                },
            },
        }

    return app


def jsonable_errors(exc: RequestValidationError) -> list[dict[str, Any]]:
    """Reduce pydantic error entries to JSON-safe location/message pairs."""
    return [
        {"loc": [str(part) for part in err.get("loc", ())], "msg": str(err.get("msg", ""))}
        for err in exc.errors()
    ]
