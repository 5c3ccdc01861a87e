import logging
from fastapi import APIRouter, HTTPException, Depends, Response

from jobmanager.core.config import settings
from jobmanager.core.deps import get_sql_repository
from jobmanager.core.queue import NotificationQueue, get_notification_queue
from jobmanager.repositories import SqlJobRepository
from jobmanager.schemas.job import JobCreateRequest, JobResponse
from jobmanager.schemas.job_application import JobApplicationCreateRequest
from jobmanager.services import job_applications
from jobmanager.services.job_applications import JobNotFoundError
from jobmanager.api.utils import raise_http_error

router = APIRouter(prefix="/jobs", tags=["Jobs"])
logger = logging.getLogger(__name__)


@router.post("", status_code=201, response_model=JobResponse)
def create_job(
    request: JobCreateRequest,
    response: Response,
    repo: SqlJobRepository = Depends(get_sql_repository)
):
    """
    Create a new job posting.

    Returns the created job; the Location header points at GET /jobs/{id}.
    """
    job = repo.create_job(request)
    logger.info(f"Created job {job.id}: {job.title}")

    response.headers["Location"] = f"{settings.API_PREFIX}/jobs/{job.id}"
    return job


@router.get("/{job_id}", response_model=JobResponse)
def get_job(job_id: int, repo: SqlJobRepository = Depends(get_sql_repository)):
    """
    Retrieve a job by ID, including its applications.
    """
    job = repo.get_job(job_id)

    if not job:
        raise HTTPException(status_code=404, detail="Job not found")

    return job


@router.get("", response_model=list[JobResponse])
def list_jobs(repo: SqlJobRepository = Depends(get_sql_repository)):
    """List all jobs."""
    return repo.list_jobs()


@router.post("/{job_id}/job-applications", status_code=204)
def create_job_application(
    job_id: int,
    request: JobApplicationCreateRequest,
    repo: SqlJobRepository = Depends(get_sql_repository),
    queue: NotificationQueue = Depends(get_notification_queue)
):
    """
    Apply to a job.

    The application is stored, then an ApplicationSubmittedEvent is published
    to the notification queue. A failed publish does not fail the request.

    Raises:
        HTTPException 404: If the job doesn't exist
    """
    try:
        application = job_applications.submit_application(repo, queue, job_id, request)
    except JobNotFoundError as e:
        raise_http_error(e)

    return Response(
        status_code=204,
        headers={"Location": f"{settings.API_PREFIX}/job-applications/{application.id}"}
    )
