import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager

from jobmanager.core.config import settings
from jobmanager.core.database import init_db
from jobmanager.core.logging_config import setup_logging
from jobmanager.core.queue import get_notification_queue
from jobmanager.api.endpoints import health, job_applications, jobs, jobs_v2
from jobmanager.workers import NotificationWorker

setup_logging(settings.LOG_LEVEL, json_logs=settings.JSON_LOGS)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for startup and shutdown events.

    Starts the notification worker as a background task on the same event
    loop and cancels it on shutdown.
    """
    # Startup
    logger.info("Starting up Job Manager API...")
    init_db()

    worker = None
    if settings.NOTIFICATION_WORKER_ENABLED:
        worker = NotificationWorker(get_notification_queue())
        worker.start()
    app.state.notification_worker = worker

    yield

    # Shutdown
    logger.info("Shutting down Job Manager API...")
    if worker is not None:
        await worker.stop()


# Create FastAPI application
app = FastAPI(
    title=settings.PROJECT_NAME,
    version="1.0.0",
    description="Job postings, applications and résumé intake",
    lifespan=lifespan
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.BACKEND_CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(health.router)
app.include_router(jobs.router, prefix=settings.API_PREFIX)
app.include_router(job_applications.router, prefix=settings.API_PREFIX)
app.include_router(jobs_v2.router, prefix=settings.API_PREFIX)


@app.get("/")
async def root():
    """Root endpoint - API health check"""
    return {
        "message": settings.PROJECT_NAME,
        "version": "1.0.0",
        "status": "healthy"
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,  # Enable auto-reload during development
        log_level="info"
    )
