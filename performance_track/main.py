"""FastAPI application entry point."""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from performance_track.config import settings
from performance_track.database import database
from performance_track.exceptions import ServiceError
from performance_track.routers import audit_logs, auth, goals, notifications

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan - startup and shutdown events."""
    # Startup
    await database.connect()
    yield
    # Shutdown
    await database.disconnect()


app = FastAPI(
    title="Performance Track API",
    description="Goal setting, approval and completion review for employee performance management",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(ServiceError)
async def service_error_handler(request: Request, exc: ServiceError):
    """Render service errors as ``{"error": kind, "detail": message}``."""
    logger.warning("%s on %s %s: %s", exc.kind, request.method, request.url.path, exc.message)
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.kind, "detail": exc.message},
    )


@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception):
    """Hide unexpected failures behind a generic internal error."""
    logger.exception("Unexpected error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content={"error": "INTERNAL", "detail": "An unexpected error occurred"},
    )


# Include routers
app.include_router(auth.router)
app.include_router(goals.router)
app.include_router(notifications.router)
app.include_router(audit_logs.router)


@app.get("/")
async def root():
    """Root endpoint - health check."""
    return {"status": "ok", "message": "Performance Track API"}


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy"}
