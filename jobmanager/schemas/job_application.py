"""
Pydantic schemas for job application requests/responses.
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, EmailStr, Field


class JobApplicationCreateRequest(BaseModel):
    """Body of POST /jobs/{id}/job-applications"""
    candidate_name: str = Field(..., min_length=1, max_length=200)
    candidate_email: EmailStr


class JobApplicationResponse(BaseModel):
    """Relational application"""
    model_config = ConfigDict(from_attributes=True)

    id: int
    job_id: int
    candidate_name: str
    candidate_email: str
    cv_url: Optional[str] = Field(None, description="Storage key of the résumé, null until uploaded")
    created_at: Optional[datetime] = None


class JobApplicationDocumentResponse(BaseModel):
    """Application embedded in a v2 job document"""
    id: str
    job_id: str
    candidate_name: str
    candidate_email: str
    cv_url: Optional[str] = None
    created_at: Optional[datetime] = None


class DownloadTokenRequest(BaseModel):
    email: str


class DownloadTokenResponse(BaseModel):
    token: str
    token_type: str = "cv_download"
    expires_in: int = Field(..., description="Token lifetime in seconds")
