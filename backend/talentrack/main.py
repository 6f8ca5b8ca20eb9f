"""
TalenTrack - Main FastAPI application
"""
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
import structlog

from talentrack.core.config import settings
from talentrack.core.database import init_db
from talentrack.core.logging_config import configure_logging
from talentrack.core.middleware import (
    CorrelationIDMiddleware,
    LoggingMiddleware,
    ExceptionHandlerMiddleware,
    error_body,
)
from talentrack.core.exceptions import TalenTrackException
from talentrack.auth.router import router as auth_router
from talentrack.audit.router import router as audit_router
from talentrack.jobs.router import router as jobs_router
from talentrack.candidates.router import router as candidates_router
from talentrack.applications.router import router as applications_router
from talentrack.interviews.router import router as interviews_router
from talentrack.offers.router import router as offers_router

# Configure logging
configure_logging()
logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize on startup, log on shutdown"""
    logger.info("application_starting", version=settings.APP_VERSION)
    try:
        init_db()
    except SQLAlchemyError as e:
        logger.error("database_init_failed", error=str(e))
    yield
    logger.info("application_shutting_down")


# Create FastAPI app
app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Applicant tracking: jobs, pipelines, candidates, interviews and offers",
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    lifespan=lifespan,
)

# Add middleware (the last one added runs first)
app.add_middleware(ExceptionHandlerMiddleware)
app.add_middleware(LoggingMiddleware)
app.add_middleware(CorrelationIDMiddleware)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=settings.CORS_ALLOW_CREDENTIALS,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Global exception handler
@app.exception_handler(TalenTrackException)
async def talentrack_exception_handler(request: Request, exc: TalenTrackException):
    """Handle TalenTrack exceptions"""
    if exc.status_code >= 500:
        logger.error("request_error", path=request.url.path, error=exc.message)
    return JSONResponse(status_code=exc.status_code, content=error_body(exc))


# Health check
@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "service": settings.APP_NAME,
        "version": settings.APP_VERSION,
    }


# Root endpoint
@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "message": f"Welcome to {settings.APP_NAME}",
        "version": settings.APP_VERSION,
        "docs": "/api/docs",
    }


# Include routers
app.include_router(auth_router)
app.include_router(jobs_router)
app.include_router(candidates_router)
app.include_router(applications_router)
app.include_router(interviews_router)
app.include_router(offers_router)
app.include_router(audit_router)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "talentrack.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
    )
