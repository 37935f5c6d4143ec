"""Main FastAPI Application

Production-ready application implementing the FastAPI ASGI app used in
this project. This module wires middleware, exception handlers, rate
limiting and the API routers from `presentation`.

Run locally for development with:

    uvicorn main:app --reload

Keep application logic in `application`, `domain` and
`infrastructure` to preserve a clean architecture.
"""
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from loguru import logger
from slowapi import Limiter
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address

from core.config import settings
from core.database import init_db, close_db, health_check as database_health_check
from core.logging_config import configure_logging
from presentation.api.v1.endpoints import (
    auth_router,
    users_router,
    jobs_router,
    applications_router,
    notifications_router,
    profiles_router,
    cv_router,
    enhance_router,
    matching_router,
)
from presentation.api.v1.responses import register_exception_handlers


configure_logging()

# Rate limiter applied to every route through the middleware
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[f"{settings.RATE_LIMIT_PER_MINUTE}/minute"],
    enabled=settings.RATE_LIMIT_ENABLED,
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    # Startup
    logger.info(f"🚀 Starting {settings.APP_NAME} ({settings.ENVIRONMENT})...")

    await init_db()
    logger.info("✅ Database initialized")

    yield

    # Shutdown
    logger.info("👋 Shutting down gracefully...")
    await close_db()
    logger.info("✅ Database connections closed")


app = FastAPI(
    title=settings.APP_NAME,
    description="Job board for the ServiceNow ecosystem: postings, applications, CV parsing, enhancement and matching",
    version=settings.APP_VERSION,
    lifespan=lifespan,
    docs_url="/docs" if settings.DEBUG else None,
    redoc_url="/redoc" if settings.DEBUG else None,
)


# CORS Middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Rate limiting
app.state.limiter = limiter
app.add_middleware(SlowAPIMiddleware)

register_exception_handlers(app)


# Include API routes
app.include_router(auth_router, prefix="/api/v1/auth", tags=["Authentication"])
app.include_router(users_router, prefix="/api/v1/users", tags=["Users"])
app.include_router(jobs_router, prefix="/api/v1/jobs", tags=["Jobs"])
app.include_router(applications_router, prefix="/api/v1/applications", tags=["Applications"])
app.include_router(notifications_router, prefix="/api/v1/notifications", tags=["Notifications"])
app.include_router(profiles_router, prefix="/api/v1/profiles", tags=["Profiles"])
app.include_router(cv_router, prefix="/api/v1/cv", tags=["CV Parser"])
app.include_router(enhance_router, prefix="/api/v1/enhance", tags=["Job Enhancer"])
app.include_router(matching_router, prefix="/api/v1/matching", tags=["Matching"])

# Uploaded pictures, CVs and logos
app.mount("/files", StaticFiles(directory=settings.UPLOAD_DIR, check_dir=False), name="files")


@app.get("/health", tags=["Health"])
async def health():
    """Health check endpoint"""
    database_ok = await database_health_check()
    return {
        "status": "healthy" if database_ok else "degraded",
        "version": settings.APP_VERSION,
        "database": database_ok,
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
        log_level=settings.LOG_LEVEL.lower()
    )
