"""
Application intake workflow shared by the v1 and v2 APIs.

Covers submitting an application, attaching a résumé and streaming it back.
Every function works against a JobRepository, so the caller decides which
store is used.
"""

import logging
import os
from typing import Optional

from email_validator import EmailNotValidError, validate_email

from jobmanager.core.logging_config import log_context
from jobmanager.core.queue import NotificationQueue
from jobmanager.core.security import verify_download_token
from jobmanager.core.storage import StorageBackend, StoredFile
from jobmanager.repositories.base import JobRepository
from jobmanager.schemas.job_application import JobApplicationCreateRequest
from jobmanager.services.notifications import publish_application_submitted

logger = logging.getLogger(__name__)

ALLOWED_CV_EXTENSIONS = {".pdf", ".docx"}
CV_KEY_PREFIX = "job-applications"


class JobApplicationError(Exception):
    """Base class for workflow errors"""


class JobNotFoundError(JobApplicationError):
    pass


class ApplicationNotFoundError(JobApplicationError):
    pass


class CVNotFoundError(JobApplicationError):
    """The application has no résumé attached"""


class InvalidCVError(JobApplicationError):
    """Rejected upload (empty file or extension not allowed)"""


class DownloadAccessError(JobApplicationError):
    """Invalid or expired download token"""


def normalize_email(email: str) -> str:
    """
    Normalized form of an address, the same one EmailStr stores (domain lowercased).

    Unparseable input is returned unchanged, so it simply fails to match.
    """
    try:
        return validate_email(email, check_deliverability=False).normalized
    except EmailNotValidError:
        return email


def build_cv_key(application_id, filename: str) -> str:
    """Deterministic storage key: job-applications/{application_id}-{filename}"""
    # Drop any directory part the client sent along with the name
    base_name = os.path.basename(filename.replace("\\", "/"))
    return f"{CV_KEY_PREFIX}/{application_id}-{base_name}"


def validate_cv_upload(filename: Optional[str], content: bytes) -> None:
    if not content:
        raise InvalidCVError("Uploaded file is empty")

    extension = os.path.splitext(filename or "")[1].lower()
    if extension not in ALLOWED_CV_EXTENSIONS:
        allowed = ", ".join(sorted(ALLOWED_CV_EXTENSIONS))
        raise InvalidCVError(f"Only {allowed} files are accepted. Received: {filename}")


def submit_application(
    repo: JobRepository,
    queue: NotificationQueue,
    job_id,
    application_data: JobApplicationCreateRequest
):
    """
    Persist an application and announce it on the notification queue.

    Raises:
        JobNotFoundError: If the job does not exist (nothing persisted or published)
    """
    application = repo.add_application(job_id, application_data)
    if application is None:
        raise JobNotFoundError(f"Job {job_id} not found")

    logger.info(
        f"Created application {application.id} for job {job_id}",
        extra=log_context(job_id=job_id, application_id=application.id)
    )

    publish_application_submitted(queue, application)
    return application


def upload_cv(
    repo: JobRepository,
    storage: StorageBackend,
    application_id,
    filename: Optional[str],
    content: bytes,
    job_id=None
):
    """
    Store a résumé and attach its key to the application.

    The previous résumé is deleted when the new key differs from it.

    Raises:
        InvalidCVError: Empty file or disallowed extension (application untouched)
        ApplicationNotFoundError: Unknown application (nothing stored)
    """
    validate_cv_upload(filename, content)

    application = repo.get_application(application_id, job_id)
    if application is None:
        raise ApplicationNotFoundError(f"Job application {application_id} not found")

    key = build_cv_key(application.id, filename)
    storage.upload_file(key, content, key.rsplit("/", 1)[-1])
    logger.info(
        f"Stored résumé for application {application.id} at {key}",
        extra=log_context(job_id=job_id, application_id=application.id)
    )

    updated = repo.attach_cv(application.id, key, job_id)
    if updated is None:
        # Application disappeared between lookup and update
        storage.delete_file(key)
        raise ApplicationNotFoundError(f"Job application {application_id} not found")

    previous_key = application.cv_url
    if previous_key and previous_key != key:
        if storage.delete_file(previous_key):
            logger.info(f"Deleted previous résumé {previous_key} of application {application.id}")

    return updated


def _get_accessible_application(repo: JobRepository, application_id, email, token, job_id):
    application = repo.get_application(application_id, job_id)

    if token is not None:
        if not verify_download_token(token, application_id):
            raise DownloadAccessError("Invalid or expired download token")
        if application is None:
            raise ApplicationNotFoundError(f"Job application {application_id} not found")
        return application

    # Unknown id and wrong email look the same to the caller
    if application is None or normalize_email(application.candidate_email) != normalize_email(email):
        raise ApplicationNotFoundError(f"Job application {application_id} not found")
    return application


def authorize_download(repo: JobRepository, application_id, email: str, job_id=None):
    """
    Check that email belongs to the application, before issuing a download token.

    Raises:
        ApplicationNotFoundError: Unknown application or email mismatch
    """
    return _get_accessible_application(repo, application_id, email, None, job_id)


def fetch_cv(
    repo: JobRepository,
    storage: StorageBackend,
    application_id,
    email: Optional[str] = None,
    token: Optional[str] = None,
    job_id=None
) -> StoredFile:
    """
    Load the résumé of an application the caller has access to.

    Access is granted by the candidate email (compared in normalized form) or a download token.

    Raises:
        DownloadAccessError: Token given but invalid/expired or for another application
        ApplicationNotFoundError: Unknown application or email mismatch
        CVNotFoundError: No résumé attached yet
    """
    if email is None and token is None:
        raise ValueError("email or token is required")

    application = _get_accessible_application(repo, application_id, email, token, job_id)

    if not application.cv_url:
        raise CVNotFoundError(f"Job application {application_id} has no résumé")

    return storage.download_file(application.cv_url)
