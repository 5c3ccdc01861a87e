"""
Publishing of application events to the notification queue.

Publishing happens after the application is committed and is best effort:
a failure is logged and the request still succeeds, so an application can
exist without its notification.
"""

import logging
from typing import Optional

from jobmanager.core.logging_config import log_context
from jobmanager.core.queue import NotificationQueue
from jobmanager.schemas.events import ApplicationSubmittedEvent

logger = logging.getLogger(__name__)


def build_application_event(application) -> ApplicationSubmittedEvent:
    return ApplicationSubmittedEvent(
        job_id=str(application.job_id),
        application_id=str(application.id),
        candidate_name=application.candidate_name,
        candidate_email=application.candidate_email
    )


def publish_application_submitted(queue: NotificationQueue, application) -> Optional[str]:
    """
    Publish an ApplicationSubmittedEvent for a persisted application.

    Returns:
        Queue message id, or None if publishing failed
    """
    event = build_application_event(application)
    context = log_context(event_id=event.event_id, job_id=event.job_id, application_id=event.application_id)

    try:
        message_id = queue.send(event.model_dump_json())
    except Exception as e:
        logger.error(
            f"Failed to publish event {event.event_id} for application {event.application_id}: {e}",
            exc_info=True,
            extra=context
        )
        return None

    logger.info(
        f"Published event {event.event_id} as message {message_id}: {event.summary()}",
        extra={**context, **log_context(message_id=message_id)}
    )
    return message_id
