"""
Health check endpoints.

Provides detailed health status for the database, storage, queue and document store.
"""

import logging
from typing import Any, Callable, Dict
from fastapi import APIRouter, Depends, status
from datetime import datetime, timezone

from jobmanager.core.deps import get_document_repository, get_sql_repository
from jobmanager.core.queue import NotificationQueue, get_notification_queue
from jobmanager.core.storage import StorageBackend, get_storage
from jobmanager.repositories import DocumentJobRepository, SqlJobRepository

router = APIRouter(tags=["Health"])
logger = logging.getLogger(__name__)


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


def _check(name: str, probe: Callable[[], None]) -> Dict[str, str]:
    try:
        probe()
        return {"status": "healthy", "message": f"{name} reachable"}
    except Exception as e:
        logger.error(f"{name} health check failed: {e}")
        return {"status": "unhealthy", "message": f"{name} error: {str(e)}"}


@router.get("/health", status_code=status.HTTP_200_OK)
async def health_check() -> Dict[str, str]:
    """
    Basic health check endpoint.

    Returns 200 OK if the service is running.
    Use this for simple uptime monitoring and load balancer health checks.
    """
    return {
        "status": "healthy",
        "timestamp": _timestamp()
    }


@router.get("/health/detailed", status_code=status.HTTP_200_OK)
def detailed_health_check(
    sql_repo: SqlJobRepository = Depends(get_sql_repository),
    document_repo: DocumentJobRepository = Depends(get_document_repository),
    storage: StorageBackend = Depends(get_storage),
    queue: NotificationQueue = Depends(get_notification_queue)
) -> Dict[str, Any]:
    """
    Detailed health check with dependency status.

    Always answers 200; the top-level status is "unhealthy" when any check fails.
    """
    checks = {
        "database": _check("Database", sql_repo.ping),
        "document_store": _check("Document store", document_repo.ping),
        "storage": _check("Storage", storage.ping),
        "queue": _check("Queue", queue.ping),
    }

    healthy = all(check["status"] == "healthy" for check in checks.values())
    return {
        "status": "healthy" if healthy else "unhealthy",
        "timestamp": _timestamp(),
        "checks": checks
    }
