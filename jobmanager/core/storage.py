"""
File storage abstraction layer supporting both local filesystem and AWS S3.

Résumés are written under a caller-chosen key (job-applications/{id}-{filename})
and read back together with the content type and disposition they were stored with.
"""

import logging
import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional
from urllib.parse import quote
import boto3
from botocore.exceptions import ClientError
from jobmanager.core.config import settings

logger = logging.getLogger(__name__)

CONTENT_TYPES = {
    'pdf': 'application/pdf',
    'docx': 'application/vnd.openxmlformats-officedocument.wordprocessingml.document',
    'doc': 'application/msword',
    'txt': 'text/plain'
}


def get_content_type(filename: str) -> str:
    """Determine content type based on file extension"""
    extension = filename.lower().rsplit('.', 1)[-1]
    return CONTENT_TYPES.get(extension, 'application/octet-stream')


def attachment_disposition(filename: str) -> str:
    """
    Content-Disposition value for a stored résumé.

    Header values must be Latin-1, so non-ASCII names get an ASCII fallback
    plus an RFC 5987 filename* parameter carrying the real name.
    """
    name = filename.replace('"', '').replace('\\', '')
    fallback = "".join(ch if 32 <= ord(ch) < 127 else "_" for ch in name)
    if fallback == name:
        return f'attachment; filename="{name}"'
    return f"attachment; filename=\"{fallback}\"; filename*=UTF-8''{quote(name, safe='')}"


@dataclass
class StoredFile:
    """A stored object read back from a storage backend"""
    key: str
    content: bytes
    content_type: str
    content_disposition: str


class StorageBackend:
    """Abstract base class for storage backends"""

    def upload_file(self, key: str, content: bytes, filename: str) -> str:
        """Store content under key and return the key"""
        raise NotImplementedError

    def download_file(self, key: str) -> StoredFile:
        """Read a stored object back with its metadata"""
        raise NotImplementedError

    def delete_file(self, key: str) -> bool:
        """Delete object from storage"""
        raise NotImplementedError

    def file_exists(self, key: str) -> bool:
        """Check if object exists"""
        raise NotImplementedError

    def ping(self) -> None:
        """Raise if the backend is unreachable"""
        raise NotImplementedError


class LocalStorage(StorageBackend):
    """Local filesystem storage backend"""

    def __init__(self, base_dir: str = "uploads"):
        self.base_dir = os.path.abspath(base_dir)
        os.makedirs(self.base_dir, exist_ok=True)

    def _path(self, key: str) -> str:
        path = os.path.abspath(os.path.join(self.base_dir, key))
        if not path.startswith(self.base_dir + os.sep):
            raise ValueError(f"Storage key escapes the storage directory: {key}")
        return path

    def upload_file(self, key: str, content: bytes, filename: str) -> str:
        """Write content to {base_dir}/{key}"""
        file_path = self._path(key)
        os.makedirs(os.path.dirname(file_path), exist_ok=True)

        with open(file_path, "wb") as buffer:
            buffer.write(content)

        return key

    def download_file(self, key: str) -> StoredFile:
        """Read file from local filesystem"""
        with open(self._path(key), "rb") as f:
            content = f.read()

        filename = os.path.basename(key)
        return StoredFile(
            key=key,
            content=content,
            content_type=get_content_type(filename),
            content_disposition=attachment_disposition(filename)
        )

    def delete_file(self, key: str) -> bool:
        """Delete file from local filesystem"""
        file_path = self._path(key)
        if os.path.exists(file_path):
            os.remove(file_path)
            return True
        return False

    def file_exists(self, key: str) -> bool:
        """Check if file exists on local filesystem"""
        return os.path.exists(self._path(key))

    def ping(self) -> None:
        if not os.access(self.base_dir, os.W_OK):
            raise OSError(f"Storage directory is not writable: {self.base_dir}")


class S3Storage(StorageBackend):
    """AWS S3 storage backend"""

    def __init__(self, bucket_name: Optional[str] = None, client=None):
        self.bucket_name = bucket_name or settings.S3_BUCKET_NAME

        # Without explicit keys boto3 falls back to IAM roles (EC2/ECS)
        self.s3_client = client or boto3.client('s3', **settings.boto3_client_kwargs())

    def upload_file(self, key: str, content: bytes, filename: str) -> str:
        """Upload content to S3 under key"""
        self.s3_client.put_object(
            Bucket=self.bucket_name,
            Key=key,
            Body=content,
            ContentType=get_content_type(filename),
            ContentDisposition=attachment_disposition(filename),
            ServerSideEncryption='AES256'  # Enable encryption at rest
        )
        return key

    def download_file(self, key: str) -> StoredFile:
        """Download object from S3 into memory"""
        response = self.s3_client.get_object(Bucket=self.bucket_name, Key=key)
        filename = os.path.basename(key)

        return StoredFile(
            key=key,
            content=response['Body'].read(),
            content_type=response.get('ContentType') or get_content_type(filename),
            content_disposition=response.get('ContentDisposition') or attachment_disposition(filename)
        )

    def delete_file(self, key: str) -> bool:
        """Delete object from S3"""
        try:
            self.s3_client.delete_object(Bucket=self.bucket_name, Key=key)
            return True
        except ClientError as e:
            logger.error(f"Error deleting s3://{self.bucket_name}/{key}: {e}")
            return False

    def file_exists(self, key: str) -> bool:
        """Check if object exists in S3"""
        try:
            self.s3_client.head_object(Bucket=self.bucket_name, Key=key)
            return True
        except ClientError:
            return False

    def ping(self) -> None:
        # Validates credentials and bucket access
        self.s3_client.list_objects_v2(Bucket=self.bucket_name, MaxKeys=1)


@lru_cache
def get_storage() -> StorageBackend:
    """Get the process-wide storage backend based on the USE_S3 setting"""
    if settings.USE_S3:
        if not settings.S3_BUCKET_NAME:
            raise ValueError("S3_BUCKET_NAME must be set when USE_S3=True")
        return S3Storage()
    return LocalStorage(settings.LOCAL_STORAGE_DIR)
