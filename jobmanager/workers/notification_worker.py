"""
Background consumer for the notification queue.

Long-polls the queue, logs every message and deletes it once logged. There is
no retry or poison-message handling: a message that is never deleted
reappears after the queue's visibility timeout.
"""

import asyncio
import logging
import threading
from typing import Optional

from pydantic import ValidationError

from jobmanager.core.config import settings
from jobmanager.core.logging_config import log_context
from jobmanager.core.queue import NotificationQueue, QueueMessage
from jobmanager.schemas.events import ApplicationSubmittedEvent

logger = logging.getLogger(__name__)


def parse_event(message: QueueMessage) -> Optional[ApplicationSubmittedEvent]:
    try:
        return ApplicationSubmittedEvent.model_validate_json(message.body)
    except ValidationError:
        return None


def describe_message(message: QueueMessage) -> str:
    """Event summary for structured events, raw body for anything else"""
    event = parse_event(message)
    if event is None:
        return message.body
    return f"{event.summary()} [event {event.event_id}, application {event.application_id}]"


class NotificationWorker:
    """
    Single-task long-poll loop over a NotificationQueue.

    Each blocking queue call runs on its own daemon thread. Cancelling the
    task returns immediately, and neither the event loop nor the interpreter
    waits for a long poll still in flight when the process exits.
    """

    def __init__(
        self,
        queue: NotificationQueue,
        wait_seconds: int = settings.NOTIFICATION_WAIT_SECONDS,
        max_messages: int = settings.NOTIFICATION_MAX_MESSAGES,
        error_delay_seconds: float = settings.NOTIFICATION_ERROR_DELAY_SECONDS
    ):
        self.queue = queue
        self.wait_seconds = wait_seconds
        self.max_messages = max_messages
        self.error_delay_seconds = error_delay_seconds
        self.processed_count = 0
        self._task: Optional[asyncio.Task] = None

    async def _call(self, func, *args):
        loop = asyncio.get_running_loop()
        future = loop.create_future()

        def settle(result, error):
            # Already cancelled by stop()
            if future.done():
                return
            if error is not None:
                future.set_exception(error)
            else:
                future.set_result(result)

        def call_in_thread():
            try:
                result, error = func(*args), None
            except Exception as e:
                result, error = None, e
            try:
                loop.call_soon_threadsafe(settle, result, error)
            except RuntimeError:
                # Loop closed while the call was blocked; nobody awaits the result
                pass

        threading.Thread(target=call_in_thread, name="notification-worker", daemon=True).start()
        return await future

    async def poll_once(self) -> int:
        """Receive one batch, log and delete each message. Returns the batch size."""
        messages = await self._call(self.queue.receive, self.max_messages, self.wait_seconds)

        for message in messages:
            event = parse_event(message)
            if event is None:
                context = log_context(message_id=message.message_id)
            else:
                context = log_context(
                    message_id=message.message_id,
                    event_id=event.event_id,
                    job_id=event.job_id,
                    application_id=event.application_id
                )
            logger.info(f"Message {message.message_id}: {describe_message(message)}", extra=context)

            await self._call(self.queue.delete, message.receipt_handle)
            self.processed_count += 1

        return len(messages)

    async def run(self) -> None:
        logger.info("Notification worker started")
        try:
            while True:
                try:
                    await self.poll_once()
                except Exception as e:
                    logger.error(f"Notification poll failed: {e}", exc_info=True)
                    await asyncio.sleep(self.error_delay_seconds)
        finally:
            logger.info(f"Notification worker stopped after {self.processed_count} messages")

    def start(self) -> asyncio.Task:
        if self._task is None or self._task.done():
            self._task = asyncio.create_task(self.run(), name="notification-worker")
        return self._task

    async def stop(self) -> None:
        if self._task is not None:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
