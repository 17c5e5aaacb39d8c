"""FastAPI MCP Server for Onboardly."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from . import __version__
from .api import applications_router, evaluations_router, job_postings_router, tools_router
from .config import settings
from .db import close_db, get_db
from .engine.handlers.base import HandlerContext
from .engine.tools import build_registry
from .mcp.connections import ConnectionManager
from .mcp.dispatcher import Dispatcher
from .mcp_transport import router as mcp_router
from .middleware import SecurityHeadersMiddleware
from .models import HealthResponse
from .services.applications import ApplicationService, EvaluationService, JobPostingService
from .services.email import EmailService
from .services.linkedin import LinkedinProfileService
from .services.resume_parser import ResumeParserService
from .services.storage import StorageService

logger = logging.getLogger(__name__)

# ============ SENTRY INITIALIZATION ============

_SENSITIVE_HEADERS = ("authorization", "x-api-key", "cookie")


def _filter_sentry_event(event: dict) -> dict:
    """Remove sensitive data from Sentry events."""
    if "request" in event and "headers" in event["request"]:
        headers = event["request"]["headers"]
        for key in _SENSITIVE_HEADERS:
            if key in headers:
                headers[key] = "[REDACTED]"
    return event


# Initialize Sentry if DSN is configured
if settings.sentry_dsn:
    try:
        import sentry_sdk
        from sentry_sdk.integrations.fastapi import FastApiIntegration
        from sentry_sdk.integrations.starlette import StarletteIntegration

        sentry_sdk.init(
            dsn=settings.sentry_dsn,
            environment=settings.environment,
            traces_sample_rate=0.1 if settings.environment == "production" else 1.0,
            integrations=[
                FastApiIntegration(),
                StarletteIntegration(),
            ],
            before_send=lambda event, hint: _filter_sentry_event(event),
        )
        logger.info("Sentry error tracking initialized")
    except ImportError:
        logger.warning("Sentry DSN configured but sentry-sdk not installed")
else:
    logger.debug("Sentry DSN not configured - error tracking disabled")


# ============ APPLICATION FACTORY ============


def build_context() -> HandlerContext:
    """Create the production services backed by Prisma, SMTP, Gemini and MinIO."""
    return HandlerContext(
        applications=ApplicationService(),
        job_postings=JobPostingService(),
        evaluations=EvaluationService(),
        resume_parser=ResumeParserService(),
        linkedin=LinkedinProfileService(),
        email=EmailService(),
        storage=StorageService(),
    )


def _install_state(app: FastAPI, context: HandlerContext) -> None:
    connections = ConnectionManager()
    registry = build_registry(context)

    app.state.context = context
    app.state.connections = connections
    app.state.registry = registry
    app.state.dispatcher = Dispatcher(registry, connections)


def create_app(context: HandlerContext | None = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        context: Services to serve; when omitted the production services are
            built at startup and the database connection is managed by the
            lifespan

    Returns:
        Configured FastAPI app
    """
    manage_db = context is None

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan handler for startup/shutdown."""
        # Startup
        logger.info(f"Starting Onboardly MCP Server v{__version__}")

        # Validate CORS configuration in production
        if not settings.debug and settings.cors_allowed_origins == "*":
            logger.warning(
                "SECURITY WARNING: CORS is configured to allow all origins ('*'). "
                "Set CORS_ALLOWED_ORIGINS to specific domains in production."
            )

        if manage_db:
            await get_db()  # Initialize database connection
            _install_state(app, build_context())

        yield
        # Shutdown
        app.state.connections.close_all()
        if manage_db:
            await close_db()
        logger.info("Onboardly MCP Server stopped")

    app = FastAPI(
        title="Onboardly MCP Server",
        description="MCP server exposing hiring workflow tools to AI agents over SSE",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.manage_db = manage_db

    # Injected services are available without running the lifespan
    if context is not None:
        _install_state(app, context)

    # Security headers middleware
    app.add_middleware(SecurityHeadersMiddleware)

    # CORS middleware - use configured origins
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials="*" not in settings.cors_origins_list,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", "X-Request-Id"],
    )

    # Mount MCP SSE transport and REST routers
    app.include_router(mcp_router, prefix=settings.api_prefix)
    app.include_router(job_postings_router, prefix=settings.api_prefix)
    app.include_router(applications_router, prefix=settings.api_prefix)
    app.include_router(evaluations_router, prefix=settings.api_prefix)
    app.include_router(tools_router, prefix=settings.api_prefix)

    _register_exception_handlers(app)
    _register_health_routes(app)
    return app


# ============ EXCEPTION HANDLERS ============


def _register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        """Handle HTTP exceptions with consistent response format."""
        return JSONResponse(
            status_code=exc.status_code,
            content={"success": False, "error": exc.detail},
            headers=exc.headers,
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        """Handle unexpected exceptions with sanitized error messages."""
        logger.error(f"Unhandled exception on {request.url.path}: {exc}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content={
                "success": False,
                "error": "An internal server error occurred. Please try again.",
            },
        )


# ============ HEALTH ENDPOINTS ============


def _register_health_routes(app: FastAPI) -> None:
    @app.get("/health", response_model=HealthResponse, tags=["Health"])
    async def health_check(request: Request) -> HealthResponse:
        """Health check endpoint (lightweight liveness check)."""
        return HealthResponse(
            status="healthy",
            version=__version__,
            connections=len(request.app.state.connections),
        )

    @app.get("/ready", tags=["Health"])
    async def readiness_check(request: Request):
        """Readiness check - verifies the database is reachable."""
        checks: dict[str, bool] = {}

        if request.app.state.manage_db:
            try:
                db = await get_db()
                await db.query_raw("SELECT 1")
                checks["database"] = True
            except Exception as e:
                logger.warning(f"Readiness database probe failed: {e}")
                checks["database"] = False

        all_ok = all(checks.values())
        return JSONResponse(
            content={
                "status": "ready" if all_ok else "not_ready",
                "version": __version__,
                "checks": checks,
            },
            status_code=200 if all_ok else 503,
        )

    @app.get("/", tags=["Health"])
    async def root(request: Request):
        """Root endpoint with API info."""
        return {
            "name": settings.server_name,
            "version": __version__,
            "status": "running",
            "activeConnections": len(request.app.state.connections),
            "sse": f"{settings.api_prefix}/sse",
            "docs": "/docs",
            "health": "/health",
        }


app = create_app()


# ============ MAIN ============


def main():
    """Run the server with uvicorn."""
    import uvicorn

    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    uvicorn.run(
        "onboardly_mcp.server:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )


if __name__ == "__main__":
    main()
