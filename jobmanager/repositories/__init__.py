"""
Job repositories.

SqlJobRepository backs the v1 API, DocumentJobRepository backs the v2 API.
"""

from jobmanager.repositories.base import JobRepository
from jobmanager.repositories.document import DocumentJobRepository
from jobmanager.repositories.sql import SqlJobRepository

__all__ = ["JobRepository", "SqlJobRepository", "DocumentJobRepository"]
