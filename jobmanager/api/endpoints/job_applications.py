"""
API endpoints for résumé upload and download on relational applications.
"""

import logging
from typing import Optional
from fastapi import APIRouter, UploadFile, File, Depends, Response

from jobmanager.core.config import settings
from jobmanager.core.deps import get_sql_repository
from jobmanager.core.security import create_download_token
from jobmanager.core.storage import StorageBackend, get_storage
from jobmanager.repositories import SqlJobRepository
from jobmanager.schemas.job_application import DownloadTokenRequest, DownloadTokenResponse
from jobmanager.services import job_applications
from jobmanager.services.job_applications import JobApplicationError
from jobmanager.api.utils import cv_response, raise_http_error, require_credentials

router = APIRouter(prefix="/job-applications", tags=["Job Applications"])
logger = logging.getLogger(__name__)


@router.put("/{application_id}/upload-cv", status_code=204)
def upload_cv(
    application_id: int,
    file: UploadFile = File(...),
    repo: SqlJobRepository = Depends(get_sql_repository),
    storage: StorageBackend = Depends(get_storage)
):
    """
    Upload the candidate's résumé (PDF or DOCX).

    Stored under job-applications/{application_id}-{filename}; the key is
    attached to the application.

    Raises:
        HTTPException 400: Empty file or unsupported extension
        HTTPException 404: If the application doesn't exist
    """
    content = file.file.read()

    try:
        job_applications.upload_cv(repo, storage, application_id, file.filename, content)
    except JobApplicationError as e:
        raise_http_error(e)

    return Response(status_code=204)


@router.post("/{application_id}/cv-token", response_model=DownloadTokenResponse)
def issue_cv_token(
    application_id: int,
    request: DownloadTokenRequest,
    repo: SqlJobRepository = Depends(get_sql_repository)
):
    """
    Exchange the candidate email for a short-lived résumé download token.

    Raises:
        HTTPException 404: Unknown application or email mismatch
    """
    try:
        job_applications.authorize_download(repo, application_id, request.email)
    except JobApplicationError as e:
        raise_http_error(e)

    return DownloadTokenResponse(
        token=create_download_token(str(application_id)),
        expires_in=settings.DOWNLOAD_TOKEN_EXPIRE_MINUTES * 60
    )


@router.get("/{application_id}/cv")
def download_cv(
    application_id: int,
    email: Optional[str] = None,
    token: Optional[str] = None,
    repo: SqlJobRepository = Depends(get_sql_repository),
    storage: StorageBackend = Depends(get_storage)
):
    """
    Download the résumé with the content type and disposition it was stored with.

    Access requires the candidate email of this application or a download
    token issued for it.

    Raises:
        HTTPException 400: Neither email nor token given
        HTTPException 403: Invalid or expired token
        HTTPException 404: Unknown application, email mismatch or no résumé yet
    """
    require_credentials(email, token)

    try:
        stored = job_applications.fetch_cv(repo, storage, application_id, email=email, token=token)
    except JobApplicationError as e:
        raise_http_error(e)

    logger.info(f"Serving résumé {stored.key} for application {application_id}")
    return cv_response(stored)
