"""
Relational JobRepository backed by SQLAlchemy.

Jobs and applications live in separate tables; applications reference
their job by numeric id.
"""

from typing import List, Optional
from sqlalchemy import text
from sqlalchemy.orm import Session

from jobmanager.models.job import Job
from jobmanager.models.job_application import JobApplication
from jobmanager.repositories.base import JobRepository
from jobmanager.schemas.job import JobCreateRequest, JobResponse
from jobmanager.schemas.job_application import JobApplicationCreateRequest, JobApplicationResponse


def _as_int(value) -> Optional[int]:
    # Path ids arrive as strings from the shared services; non-numeric ids cannot exist here
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


class SqlJobRepository(JobRepository):

    def __init__(self, db: Session):
        self.db = db

    def create_job(self, job_data: JobCreateRequest) -> JobResponse:
        db_job = Job(
            title=job_data.title,
            description=job_data.description,
            location=job_data.location
        )

        self.db.add(db_job)
        self.db.commit()
        self.db.refresh(db_job)

        return JobResponse.model_validate(db_job)

    def _get_job(self, job_id) -> Optional[Job]:
        job_id = _as_int(job_id)
        if job_id is None:
            return None
        return self.db.query(Job).filter(Job.id == job_id).first()

    def get_job(self, job_id) -> Optional[JobResponse]:
        job = self._get_job(job_id)
        return JobResponse.model_validate(job) if job else None

    def list_jobs(self) -> List[JobResponse]:
        jobs = self.db.query(Job).order_by(Job.id).all()
        return [JobResponse.model_validate(job) for job in jobs]

    def add_application(self, job_id, application_data: JobApplicationCreateRequest) -> Optional[JobApplicationResponse]:
        job = self._get_job(job_id)
        if not job:
            return None

        application = JobApplication(
            job_id=job.id,
            candidate_name=application_data.candidate_name,
            candidate_email=application_data.candidate_email
        )

        self.db.add(application)
        self.db.commit()
        self.db.refresh(application)

        return JobApplicationResponse.model_validate(application)

    def _get_application(self, application_id, job_id=None) -> Optional[JobApplication]:
        application_id = _as_int(application_id)
        if application_id is None:
            return None

        query = self.db.query(JobApplication).filter(JobApplication.id == application_id)
        if job_id is not None:
            query = query.filter(JobApplication.job_id == _as_int(job_id))
        return query.first()

    def get_application(self, application_id, job_id=None) -> Optional[JobApplicationResponse]:
        application = self._get_application(application_id, job_id)
        return JobApplicationResponse.model_validate(application) if application else None

    def attach_cv(self, application_id, cv_key: str, job_id=None) -> Optional[JobApplicationResponse]:
        application = self._get_application(application_id, job_id)
        if not application:
            return None

        application.cv_url = cv_key
        self.db.commit()
        self.db.refresh(application)

        return JobApplicationResponse.model_validate(application)

    def ping(self) -> None:
        self.db.execute(text("SELECT 1"))
