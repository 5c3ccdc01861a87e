"""
Events published to the notification queue.

Consumers must tolerate redelivery (the queue is at-least-once) and can
deduplicate on event_id.
"""

import uuid
from datetime import datetime, timezone
from typing import Literal
from pydantic import BaseModel, Field


class ApplicationSubmittedEvent(BaseModel):
    """A candidate applied to a job"""
    event_type: Literal["job_application.submitted"] = "job_application.submitted"
    schema_version: int = 1
    event_id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    job_id: str
    application_id: str
    candidate_name: str
    candidate_email: str
    occurred_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    def summary(self) -> str:
        return f"New application for job {self.job_id} by {self.candidate_name} ({self.candidate_email})"
