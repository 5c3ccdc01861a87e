"""
Repository interface shared by the relational (v1) and document (v2) paths.

Endpoints and services only talk to a JobRepository, so the same workflow
runs against either backend.
"""

from typing import List

from jobmanager.schemas.job import JobCreateRequest
from jobmanager.schemas.job_application import JobApplicationCreateRequest


class JobRepository:
    """Abstract base class for job/application persistence"""

    def create_job(self, job_data: JobCreateRequest):
        """Persist a new job and return it with its assigned id"""
        raise NotImplementedError

    def get_job(self, job_id):
        """Return the job or None"""
        raise NotImplementedError

    def list_jobs(self) -> List:
        raise NotImplementedError

    def add_application(self, job_id, application_data: JobApplicationCreateRequest):
        """Persist an application for job_id, or return None if the job does not exist"""
        raise NotImplementedError

    def get_application(self, application_id, job_id=None):
        """Return the application or None; job_id narrows the lookup when given"""
        raise NotImplementedError

    def attach_cv(self, application_id, cv_key: str, job_id=None):
        """Set the résumé reference and return the updated application, or None"""
        raise NotImplementedError

    def ping(self) -> None:
        """Raise if the backing store is unreachable"""
        raise NotImplementedError
