from pydantic_settings import BaseSettings
from typing import List, Optional, Union
from pydantic import field_validator
import json


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    # API Settings
    API_PREFIX: str = "/api"
    PROJECT_NAME: str = "Job Manager API"

    # Database Settings
    POSTGRES_USER: str = "user"
    POSTGRES_PASSWORD: str = "password"
    POSTGRES_SERVER: str = "localhost"
    POSTGRES_PORT: str = "5432"
    POSTGRES_DB: str = "jobmanager"

    # Full connection string, takes precedence over the POSTGRES_* parts
    SQLALCHEMY_DATABASE_URI: Optional[str] = None

    # Create tables on startup instead of running Alembic (local development only)
    AUTO_CREATE_TABLES: bool = False

    @property
    def DATABASE_URL(self) -> str:
        if self.SQLALCHEMY_DATABASE_URI:
            return self.SQLALCHEMY_DATABASE_URI
        return f"postgresql://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}@{self.POSTGRES_SERVER}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"

    # AWS Settings
    # Leave the keys empty to use IAM roles / instance profile credentials
    AWS_REGION: str = "sa-east-1"
    AWS_ACCESS_KEY_ID: str = ""
    AWS_SECRET_ACCESS_KEY: str = ""
    AWS_ENDPOINT_URL: Optional[str] = None  # e.g. http://localhost:4566 for LocalStack

    # File storage (résumés)
    USE_S3: bool = False
    S3_BUCKET_NAME: str = ""
    LOCAL_STORAGE_DIR: str = "uploads"

    # Notification queue
    USE_SQS: bool = False
    SQS_QUEUE_URL: str = ""
    SQS_QUEUE_NAME: str = "job-application-notifications"

    # Document store (v2 API)
    USE_DYNAMODB: bool = False
    DYNAMODB_JOBS_TABLE: str = "jobs"

    # Notification worker
    NOTIFICATION_WORKER_ENABLED: bool = True
    NOTIFICATION_WAIT_SECONDS: int = 20
    NOTIFICATION_MAX_MESSAGES: int = 10
    NOTIFICATION_ERROR_DELAY_SECONDS: float = 5.0

    # Résumé download tokens
    SECRET_KEY: str = "change-me-in-production"
    ALGORITHM: str = "HS256"
    DOWNLOAD_TOKEN_EXPIRE_MINUTES: int = 15

    # Logging
    LOG_LEVEL: str = "INFO"
    JSON_LOGS: bool = False

    # CORS Settings - can be set as JSON string in .env
    BACKEND_CORS_ORIGINS: Union[List[str], str] = ["http://localhost:3000", "http://localhost:8000"]

    @field_validator("BACKEND_CORS_ORIGINS", mode="before")
    @classmethod
    def parse_cors_origins(cls, v: Union[List[str], str]) -> List[str]:
        """Parse CORS origins from JSON string or list"""
        if isinstance(v, str):
            try:
                return json.loads(v)
            except json.JSONDecodeError:
                # If not valid JSON, split by comma
                return [origin.strip() for origin in v.split(",")]
        return v

    def boto3_client_kwargs(self) -> dict:
        """Keyword arguments shared by every boto3 client/resource we create"""
        kwargs = {"region_name": self.AWS_REGION}
        if self.AWS_ACCESS_KEY_ID and self.AWS_SECRET_ACCESS_KEY:
            kwargs["aws_access_key_id"] = self.AWS_ACCESS_KEY_ID
            kwargs["aws_secret_access_key"] = self.AWS_SECRET_ACCESS_KEY
        if self.AWS_ENDPOINT_URL:
            kwargs["endpoint_url"] = self.AWS_ENDPOINT_URL
        return kwargs

    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()
