"""
FastAPI Application Entry Point.
Initializes the FastAPI app with middleware, CORS, error handlers and routes.
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from sqlalchemy import text

from devfolio.api.v1 import auth, chat, projects, threads, users
from devfolio.config import settings
from devfolio.core.database import AsyncSessionLocal, engine
from devfolio.core.exceptions import register_exception_handlers
from devfolio.core.logging_config import configure_logging
from devfolio.core.rate_limit import limiter, rate_limit_exceeded_handler

configure_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.
    Handles startup and shutdown events.
    """
    logger.info(f"Starting Devfolio API ({settings.environment})")
    yield
    await engine.dispose()


# Initialize FastAPI application
app = FastAPI(
    title="Devfolio API",
    description="Portfolio sharing backend with projects, reviews, discussions, social graph and direct messages",
    version="1.0.0",
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
    lifespan=lifespan,
)

# Add rate limiter state and error handler
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)

register_exception_handlers(app)

# CORS Middleware
cors_origins = settings.get_allowed_origins_list()
logger.info(f"CORS allowed origins: {cors_origins}")

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Health Check Endpoints
@app.get("/health", tags=["Health"])
async def health_check():
    """Basic health check endpoint."""
    return JSONResponse(
        status_code=200,
        content={
            "status": "healthy",
            "environment": settings.environment,
        }
    )


@app.get("/health/ready", tags=["Health"])
async def readiness_check():
    """
    Readiness check endpoint.
    Verifies database connectivity.
    """
    checks = {"database": False}

    try:
        async with AsyncSessionLocal() as session:
            await session.execute(text("SELECT 1"))
            checks["database"] = True
    except Exception:
        logger.exception("Readiness check: database unreachable")

    all_healthy = all(checks.values())
    return JSONResponse(
        status_code=200 if all_healthy else 503,
        content={
            "status": "ready" if all_healthy else "not ready",
            "checks": checks,
        }
    )


# Root endpoint
@app.get("/", tags=["Root"])
async def root():
    """Root endpoint with API information."""
    return {
        "message": "Devfolio API",
        "version": app.version,
        "docs": "/docs" if settings.debug else "Documentation disabled in production",
    }


# Include API routers
app.include_router(
    auth.router,
    prefix="/api/auth",
    tags=["Authentication"]
)

app.include_router(
    users.router,
    prefix="/api/users",
    tags=["Users"]
)

app.include_router(
    projects.router,
    prefix="/api/projects",
    tags=["Projects"]
)

app.include_router(
    threads.router,
    prefix="/api/threads",
    tags=["Threads"]
)

app.include_router(
    chat.router,
    prefix="/api/chat",
    tags=["Chat"]
)
