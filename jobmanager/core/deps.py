"""
FastAPI dependencies that hand out repositories and backend clients.

Backend clients are process-wide singletons (see get_storage,
get_notification_queue, get_document_store); tests replace them through
app.dependency_overrides.
"""

from fastapi import Depends
from sqlalchemy.orm import Session

from jobmanager.core.database import get_db
from jobmanager.core.documents import DocumentStore, get_document_store
from jobmanager.repositories import DocumentJobRepository, SqlJobRepository


def get_sql_repository(db: Session = Depends(get_db)) -> SqlJobRepository:
    """Repository for the relational (v1) API"""
    return SqlJobRepository(db)


def get_document_repository(store: DocumentStore = Depends(get_document_store)) -> DocumentJobRepository:
    """Repository for the document-store (v2) API"""
    return DocumentJobRepository(store)
