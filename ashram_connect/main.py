"""
Ashram Connect - Main Application Entry Point
Multi-tenant donation and marketplace platform for ashrams
"""

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from contextlib import asynccontextmanager
import logging
import structlog

from ashram_connect.core.config import get_settings
from ashram_connect.core.tenant import SLUG_PATH_PARAM, TenantScopeError
from ashram_connect.api import (
    admin, ashrams, auth, contact, donate, donations,
    events, feed, needs, users, vendors
)

settings = get_settings()

logging.basicConfig(format="%(message)s", level=settings.LOG_LEVEL)

# Configure structured logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.format_exc_info,
        structlog.processors.JSONRenderer()
    ],
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)

logger = structlog.get_logger(__name__)

# Routers that live only at the platform level
GLOBAL_ROUTERS = [
    (auth.router, "/auth", ["auth"]),
    (ashrams.router, "/ashrams", ["ashrams"]),
    (users.router, "/users", ["users"]),
]

# Routers served both platform-wide and under /tenant/{ashram_slug}
SCOPED_ROUTERS = [
    (needs.router, "/needs", ["needs"]),
    (donate.router, "/donate", ["donate"]),
    (donations.router, "/donations", ["donations"]),
    (events.router, "/events", ["events"]),
    (feed.router, "/feed", ["feed"]),
    (vendors.router, "/vendors", ["vendors"]),
    (contact.router, "/contact", ["contact"]),
    (admin.router, "/admin", ["admin"]),
]

TENANT_PREFIX = f"{settings.API_V1_PREFIX}{settings.TENANT_PATH_PREFIX}/{{{SLUG_PATH_PARAM}}}"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager"""
    # Startup
    logger.info("Initializing Ashram Connect backend", environment=settings.ENVIRONMENT)
    # Tables are created by Alembic migrations, not auto-generated
    logger.info("Database managed by Alembic migrations")

    yield

    # Shutdown
    logger.info("Shutting down Ashram Connect backend")


# Create FastAPI application
app = FastAPI(
    title="Ashram Connect API",
    description="Multi-tenant donations, needs and vendor marketplace for ashrams",
    version="1.0.0",
    lifespan=lifespan,
)

# Configure middleware stack
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["*"],
)

# Include routers
for router, path, tags in GLOBAL_ROUTERS:
    app.include_router(router, prefix=f"{settings.API_V1_PREFIX}{path}", tags=tags)

for router, path, tags in SCOPED_ROUTERS:
    app.include_router(router, prefix=f"{settings.API_V1_PREFIX}{path}", tags=tags)
    app.include_router(router, prefix=f"{TENANT_PREFIX}{path}", tags=tags + ["tenant"])


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """JSON body for every HTTP error, unknown paths included"""
    if exc.status_code == status.HTTP_404_NOT_FOUND:
        logger.info("Not found", path=request.url.path)
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(TenantScopeError)
async def tenant_scope_exception_handler(request: Request, exc: TenantScopeError):
    logger.warning("Tenant scope missing", path=request.url.path, error=str(exc))
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content={"detail": "Ashram not found"},
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error", path=request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "healthy", "service": "ashram-connect-api"}


@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "message": "Ashram Connect API",
        "version": "1.0.0",
        "docs": "/docs",
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "ashram_connect.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.ENVIRONMENT == "development",
        log_level="info",
    )
