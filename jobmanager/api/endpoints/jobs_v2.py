"""
v2 API: the same job/application workflow against the document store.

Ids are strings and applications are embedded in their job document.
"""

import logging
from typing import Optional
from fastapi import APIRouter, UploadFile, File, HTTPException, Depends, Response

from jobmanager.core.config import settings
from jobmanager.core.deps import get_document_repository
from jobmanager.core.queue import NotificationQueue, get_notification_queue
from jobmanager.core.security import create_download_token
from jobmanager.core.storage import StorageBackend, get_storage
from jobmanager.repositories import DocumentJobRepository
from jobmanager.schemas.job import JobCreateRequest, JobDocumentResponse
from jobmanager.schemas.job_application import (
    DownloadTokenRequest,
    DownloadTokenResponse,
    JobApplicationCreateRequest,
)
from jobmanager.services import job_applications
from jobmanager.services.job_applications import JobApplicationError
from jobmanager.api.utils import cv_response, raise_http_error, require_credentials

router = APIRouter(prefix="/v2/jobs", tags=["Jobs v2"])
logger = logging.getLogger(__name__)


@router.post("", status_code=201, response_model=JobDocumentResponse)
def create_job(
    request: JobCreateRequest,
    response: Response,
    repo: DocumentJobRepository = Depends(get_document_repository)
):
    job = repo.create_job(request)
    logger.info(f"Created job document {job.id}: {job.title}")

    response.headers["Location"] = f"{settings.API_PREFIX}{router.prefix}/{job.id}"
    return job


@router.get("", response_model=list[JobDocumentResponse])
def list_jobs(repo: DocumentJobRepository = Depends(get_document_repository)):
    return repo.list_jobs()


@router.get("/{job_id}", response_model=JobDocumentResponse)
def get_job(job_id: str, repo: DocumentJobRepository = Depends(get_document_repository)):
    job = repo.get_job(job_id)

    if not job:
        raise HTTPException(status_code=404, detail="Job not found")

    return job


@router.post("/{job_id}/job-applications", status_code=204)
def create_job_application(
    job_id: str,
    request: JobApplicationCreateRequest,
    repo: DocumentJobRepository = Depends(get_document_repository),
    queue: NotificationQueue = Depends(get_notification_queue)
):
    """
    Append an application to the job document and publish its event.

    Raises:
        HTTPException 404: If the job doesn't exist
    """
    try:
        application = job_applications.submit_application(repo, queue, job_id, request)
    except JobApplicationError as e:
        raise_http_error(e)

    return Response(
        status_code=204,
        headers={"Location": f"{settings.API_PREFIX}{router.prefix}/{job_id}/job-applications/{application.id}"}
    )


@router.put("/{job_id}/job-applications/{application_id}/upload-cv", status_code=204)
def upload_cv(
    job_id: str,
    application_id: str,
    file: UploadFile = File(...),
    repo: DocumentJobRepository = Depends(get_document_repository),
    storage: StorageBackend = Depends(get_storage)
):
    """
    Upload the résumé (PDF or DOCX) of an embedded application.

    Raises:
        HTTPException 400: Empty file or unsupported extension
        HTTPException 404: Unknown job or application
    """
    content = file.file.read()

    try:
        job_applications.upload_cv(repo, storage, application_id, file.filename, content, job_id=job_id)
    except JobApplicationError as e:
        raise_http_error(e)

    return Response(status_code=204)


@router.post("/{job_id}/job-applications/{application_id}/cv-token", response_model=DownloadTokenResponse)
def issue_cv_token(
    job_id: str,
    application_id: str,
    request: DownloadTokenRequest,
    repo: DocumentJobRepository = Depends(get_document_repository)
):
    try:
        job_applications.authorize_download(repo, application_id, request.email, job_id=job_id)
    except JobApplicationError as e:
        raise_http_error(e)

    return DownloadTokenResponse(
        token=create_download_token(application_id),
        expires_in=settings.DOWNLOAD_TOKEN_EXPIRE_MINUTES * 60
    )


@router.get("/{job_id}/job-applications/{application_id}/cv")
def download_cv(
    job_id: str,
    application_id: str,
    email: Optional[str] = None,
    token: Optional[str] = None,
    repo: DocumentJobRepository = Depends(get_document_repository),
    storage: StorageBackend = Depends(get_storage)
):
    require_credentials(email, token)

    try:
        stored = job_applications.fetch_cv(repo, storage, application_id, email=email, token=token, job_id=job_id)
    except JobApplicationError as e:
        raise_http_error(e)

    return cv_response(stored)
