"""
Job application database model.

An application moves through two implicit stages: created without a résumé,
then résumé attached (cv_url set) once an upload succeeds.
"""

from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, func
from sqlalchemy.orm import relationship
from jobmanager.core.database import Base


class JobApplication(Base):
    """A candidate's application to one job posting."""
    __tablename__ = "job_applications"

    id = Column(Integer, primary_key=True, index=True)
    job_id = Column(Integer, ForeignKey("jobs.id", ondelete="CASCADE"), nullable=False, index=True)

    candidate_name = Column(String, nullable=False)
    candidate_email = Column(String, nullable=False, index=True)

    # Storage key of the uploaded résumé, null until upload completes
    cv_url = Column(String, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    job = relationship("Job", back_populates="applications")

    def __repr__(self):
        return f"<JobApplication(id={self.id}, job_id={self.job_id}, email='{self.candidate_email}')>"
