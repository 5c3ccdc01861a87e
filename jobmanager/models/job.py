from sqlalchemy import Column, Integer, String, Text, DateTime, func
from sqlalchemy.orm import relationship
from jobmanager.core.database import Base


class Job(Base):
    """
    Job posting that candidates apply to.
    Owns its applications (deleting a job removes them).
    """
    __tablename__ = "jobs"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(200), nullable=False, index=True)
    description = Column(Text, nullable=True)
    location = Column(String, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    applications = relationship(
        "JobApplication",
        back_populates="job",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="JobApplication.id"
    )

    def __repr__(self):
        return f"<Job(id={self.id}, title='{self.title}')>"
