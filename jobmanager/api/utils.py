"""
Helpers shared by the v1 and v2 routers.
"""

import io
from typing import NoReturn

from fastapi import HTTPException
from fastapi.responses import StreamingResponse

from jobmanager.core.storage import StoredFile
from jobmanager.services.job_applications import (
    ApplicationNotFoundError,
    CVNotFoundError,
    DownloadAccessError,
    InvalidCVError,
    JobApplicationError,
    JobNotFoundError,
)

ERROR_STATUS = {
    JobNotFoundError: 404,
    ApplicationNotFoundError: 404,
    CVNotFoundError: 404,
    InvalidCVError: 400,
    DownloadAccessError: 403,
}


def raise_http_error(error: JobApplicationError) -> NoReturn:
    """Translate a workflow error into the matching HTTPException"""
    raise HTTPException(status_code=ERROR_STATUS.get(type(error), 500), detail=str(error)) from error


def require_credentials(email, token) -> None:
    if email is None and token is None:
        raise HTTPException(status_code=400, detail="Either email or token query parameter is required")


def cv_response(stored: StoredFile) -> StreamingResponse:
    return StreamingResponse(
        io.BytesIO(stored.content),
        media_type=stored.content_type,
        headers={"Content-Disposition": stored.content_disposition}
    )
