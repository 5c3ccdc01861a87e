"""
Logging setup shared by the API process and the notification worker.

Log lines about an application carry its identifiers as record attributes,
passed with ``extra=log_context(...)``. The JSON formatter emits them as
top-level keys so a job, application, event or queue message can be traced
across the API and the worker. The plain formatter appends them to the line.
"""

import logging
import sys
from typing import Any, Dict
from datetime import datetime, timezone
from pythonjsonlogger import jsonlogger

CONTEXT_FIELDS = ("job_id", "application_id", "event_id", "message_id")


def log_context(**ids: Any) -> Dict[str, str]:
    """
    Build the ``extra`` mapping for a log call.

    None values are left out so callers can pass ids that are not known yet.
    """
    unknown = set(ids) - set(CONTEXT_FIELDS)
    if unknown:
        raise ValueError(f"Unknown log context fields: {', '.join(sorted(unknown))}")
    return {name: str(value) for name, value in ids.items() if value is not None}


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """JSON lines with timestamp, level, logger and any context ids."""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)

        log_record['timestamp'] = datetime.fromtimestamp(record.created, timezone.utc).isoformat()
        log_record['level'] = record.levelname
        log_record['logger'] = record.name

        if record.levelno >= logging.WARNING:
            log_record['location'] = f"{record.module}:{record.lineno}"


class ContextFormatter(logging.Formatter):
    """Plain text lines followed by the context ids, e.g. ``[application_id=7]``"""

    def formatMessage(self, record: logging.LogRecord) -> str:
        line = super().formatMessage(record)
        context = " ".join(
            f"{name}={getattr(record, name)}" for name in CONTEXT_FIELDS if hasattr(record, name)
        )
        return f"{line} [{context}]" if context else line


def setup_logging(log_level: str = "INFO", json_logs: bool = True) -> None:
    """
    Configure the root logger.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_logs: JSON lines for production, plain text for development
    """
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stdout)

    if json_logs:
        formatter = CustomJsonFormatter('%(timestamp)s %(level)s %(logger)s %(message)s')
    else:
        formatter = ContextFormatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )

    console_handler.setFormatter(formatter)

    root_logger.setLevel(getattr(logging, log_level.upper()))
    root_logger.addHandler(console_handler)

    # The AWS SDK logs every request at INFO/DEBUG
    for name in ("urllib3", "boto3", "botocore", "s3transfer"):
        logging.getLogger(name).setLevel(logging.WARNING)
