"""
Database models package.
"""

from jobmanager.models.job import Job
from jobmanager.models.job_application import JobApplication

__all__ = ["Job", "JobApplication"]
