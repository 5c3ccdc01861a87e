from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional
from datetime import datetime

from jobmanager.schemas.job_application import JobApplicationResponse, JobApplicationDocumentResponse


class JobCreateRequest(BaseModel):
    """Schema for creating a new job"""
    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    location: Optional[str] = None


class JobResponse(BaseModel):
    """Relational job with its applications"""
    model_config = ConfigDict(from_attributes=True)  # Allows conversion from SQLAlchemy models

    id: int
    title: str
    description: Optional[str] = None
    location: Optional[str] = None
    created_at: Optional[datetime] = None
    applications: List[JobApplicationResponse] = []


class JobDocumentResponse(BaseModel):
    """Document-store job (v2) with embedded applications"""
    id: str
    title: str
    description: Optional[str] = None
    location: Optional[str] = None
    created_at: Optional[datetime] = None
    applications: List[JobApplicationDocumentResponse] = []
