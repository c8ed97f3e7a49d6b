"""
Data Dictionary Revisions - FastAPI Application

Main entry point for the API server.
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.trustedhost import TrustedHostMiddleware
from fastapi.responses import HTMLResponse
from starlette.middleware.base import BaseHTTPMiddleware

from config import settings
from database import init_db


# =============================================================================
# SECURITY HEADERS MIDDLEWARE
# =============================================================================
class RequestSizeLimitMiddleware(BaseHTTPMiddleware):
    """Limit request body size."""

    async def dispatch(self, request: Request, call_next):
        content_length = request.headers.get("content-length")
        if content_length and content_length.isdigit():
            if int(content_length) > settings.MAX_REQUEST_SIZE:
                return Response(
                    content='{"detail": "Request body too large"}',
                    status_code=413,
                    media_type="application/json"
                )
        return await call_next(request)


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Add security headers to all responses."""

    async def dispatch(self, request: Request, call_next):
        response: Response = await call_next(request)

        response.headers["X-Frame-Options"] = "DENY"
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"

        # Inline script/style only, for the revision page
        if not settings.DEBUG:
            response.headers["Content-Security-Policy"] = (
                "default-src 'self'; "
                "script-src 'self' 'unsafe-inline'; "
                "style-src 'self' 'unsafe-inline'; "
                "frame-ancestors 'none'; "
                "form-action 'self';"
            )

        return response


# Configure logging
logging.basicConfig(
    level=logging.INFO if settings.DEBUG else logging.WARNING,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown."""
    logger.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION}")

    init_db()
    logger.info("Database initialized")

    yield

    logger.info("Shutdown complete")


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Compare revisions of a project's data dictionary",
    lifespan=lifespan,
    docs_url="/docs" if settings.DEBUG else None,
    redoc_url="/redoc" if settings.DEBUG else None,
    openapi_url="/openapi.json" if settings.DEBUG else None,
)

# =============================================================================
# MIDDLEWARE (order matters - last added = first executed)
# =============================================================================

app.add_middleware(RequestSizeLimitMiddleware)
app.add_middleware(SecurityHeadersMiddleware)

if settings.ALLOWED_HOSTS != '*':
    app.add_middleware(
        TrustedHostMiddleware,
        allowed_hosts=settings.ALLOWED_HOSTS.split(",")
    )

cors_origins = settings.CORS_ORIGINS.split(",") if settings.CORS_ORIGINS != "*" else ["*"]
if settings.CORS_ORIGINS == "*" and not settings.DEBUG:
    logger.warning("CORS_ORIGINS='*' allows any origin; set explicit origins in production")

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=False,
    allow_methods=["GET", "POST"],
    allow_headers=["Content-Type", "X-Requested-With"],
)

# Import and include routers
from api.routes import projects, comparison, system

app.include_router(projects.router, prefix="/api/projects", tags=["Projects"])
app.include_router(comparison.router, prefix="/api/compare", tags=["Comparison"])
app.include_router(system.router, prefix="/api/system", tags=["System"])
app.include_router(projects.page_router, tags=["Pages"])


@app.get("/", response_class=HTMLResponse)
async def root():
    """Root endpoint - return simple status page."""
    docs_link = '<p>See <a href="/docs">/docs</a> for full API documentation.</p>' if settings.DEBUG else ''
    return f"""
    <!DOCTYPE html>
    <html>
    <head>
        <title>{settings.APP_NAME}</title>
        <style>
            body {{ font-family: system-ui, sans-serif; max-width: 800px; margin: 50px auto; padding: 20px; }}
            .version {{ color: #666; }}
            code {{ background: #e0e0e0; padding: 2px 6px; border-radius: 4px; }}
        </style>
    </head>
    <body>
        <h1>{settings.APP_NAME}</h1>
        <p class="version">Version {settings.APP_VERSION}</p>
        <p>Open <code>/projects/&lt;project id&gt;</code> to compare data dictionary revisions.</p>
        {docs_link}
    </body>
    </html>
    """


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "app": settings.APP_NAME,
        "version": settings.APP_VERSION
    }
