"""
Document JobRepository: one document per job with applications embedded.

Writes are read-modify-write of the whole job document; concurrent
applications to the same job can overwrite each other (last write wins).
"""

import uuid
from datetime import datetime, timezone
from typing import List, Optional

from jobmanager.core.documents import DocumentStore
from jobmanager.repositories.base import JobRepository
from jobmanager.schemas.job import JobCreateRequest, JobDocumentResponse
from jobmanager.schemas.job_application import JobApplicationCreateRequest, JobApplicationDocumentResponse


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _to_job(item: dict) -> JobDocumentResponse:
    return JobDocumentResponse(
        id=item["id"],
        title=item["title"],
        description=item.get("description"),
        location=item.get("location"),
        created_at=item.get("created_at"),
        applications=[_to_application(item["id"], a) for a in item.get("applications", [])]
    )


def _to_application(job_id: str, item: dict) -> JobApplicationDocumentResponse:
    return JobApplicationDocumentResponse(job_id=job_id, **item)


class DocumentJobRepository(JobRepository):

    def __init__(self, store: DocumentStore):
        self.store = store

    def create_job(self, job_data: JobCreateRequest) -> JobDocumentResponse:
        item = {
            "id": uuid.uuid4().hex,
            "title": job_data.title,
            "description": job_data.description,
            "location": job_data.location,
            "created_at": _now(),
            "applications": [],
        }
        self.store.put(item)
        return _to_job(item)

    def get_job(self, job_id) -> Optional[JobDocumentResponse]:
        item = self.store.get(str(job_id))
        return _to_job(item) if item else None

    def list_jobs(self) -> List[JobDocumentResponse]:
        return [_to_job(item) for item in self.store.scan()]

    def add_application(self, job_id, application_data: JobApplicationCreateRequest) -> Optional[JobApplicationDocumentResponse]:
        item = self.store.get(str(job_id))
        if not item:
            return None

        application = {
            "id": uuid.uuid4().hex,
            "candidate_name": application_data.candidate_name,
            "candidate_email": application_data.candidate_email,
            "cv_url": None,
            "created_at": _now(),
        }
        item.setdefault("applications", []).append(application)
        self.store.put(item)

        return _to_application(item["id"], application)

    def _find(self, application_id, job_id=None):
        """Return (job item, embedded application) or (None, None)"""
        if job_id is not None:
            candidates = [self.store.get(str(job_id))]
        else:
            candidates = self.store.scan()

        for item in candidates:
            if not item:
                continue
            for application in item.get("applications", []):
                if application["id"] == str(application_id):
                    return item, application
        return None, None

    def get_application(self, application_id, job_id=None) -> Optional[JobApplicationDocumentResponse]:
        item, application = self._find(application_id, job_id)
        return _to_application(item["id"], application) if application else None

    def attach_cv(self, application_id, cv_key: str, job_id=None) -> Optional[JobApplicationDocumentResponse]:
        item, application = self._find(application_id, job_id)
        if not application:
            return None

        application["cv_url"] = cv_key
        self.store.put(item)

        return _to_application(item["id"], application)

    def ping(self) -> None:
        self.store.ping()
