"""
Notification queue abstraction supporting AWS SQS and an in-process queue.

Both backends give at-least-once delivery: a received message stays hidden for
the visibility timeout and comes back unless it is deleted with its receipt handle.
"""

import logging
import threading
import time
import uuid
from collections import OrderedDict
from dataclasses import dataclass
from functools import lru_cache
from typing import Dict, List, Optional
import boto3
from jobmanager.core.config import settings

logger = logging.getLogger(__name__)


@dataclass
class QueueMessage:
    message_id: str
    receipt_handle: str
    body: str


class NotificationQueue:
    """Abstract base class for queue backends"""

    def send(self, body: str) -> str:
        """Publish a message and return its id"""
        raise NotImplementedError

    def receive(self, max_messages: int = 10, wait_seconds: int = 20) -> List[QueueMessage]:
        """Long-poll for up to max_messages, blocking at most wait_seconds"""
        raise NotImplementedError

    def delete(self, receipt_handle: str) -> None:
        """Acknowledge a received message"""
        raise NotImplementedError

    def ping(self) -> None:
        """Raise if the backend is unreachable"""
        raise NotImplementedError


class InMemoryQueue(NotificationQueue):
    """Process-local queue for development and tests"""

    def __init__(self, visibility_timeout: float = 30.0):
        self.visibility_timeout = visibility_timeout
        self._messages: "OrderedDict[str, str]" = OrderedDict()
        self._invisible_until: Dict[str, float] = {}
        self._receipts: Dict[str, str] = {}
        self._condition = threading.Condition()

    def send(self, body: str) -> str:
        message_id = str(uuid.uuid4())
        with self._condition:
            self._messages[message_id] = body
            self._condition.notify_all()
        return message_id

    def _visible(self, now: float) -> List[str]:
        return [
            message_id for message_id in self._messages
            if self._invisible_until.get(message_id, 0.0) <= now
        ]

    def _next_visible_at(self) -> Optional[float]:
        hidden = [self._invisible_until[m] for m in self._messages if m in self._invisible_until]
        return min(hidden) if hidden else None

    def receive(self, max_messages: int = 10, wait_seconds: int = 20) -> List[QueueMessage]:
        deadline = time.monotonic() + wait_seconds
        with self._condition:
            while True:
                now = time.monotonic()
                visible = self._visible(now)
                if visible or now >= deadline:
                    break
                timeout = deadline - now
                next_visible = self._next_visible_at()
                if next_visible is not None:
                    timeout = min(timeout, max(next_visible - now, 0.0))
                self._condition.wait(timeout)

            received = []
            for message_id in visible[:max_messages]:
                receipt_handle = str(uuid.uuid4())
                self._invisible_until[message_id] = now + self.visibility_timeout
                self._receipts[receipt_handle] = message_id
                received.append(QueueMessage(message_id, receipt_handle, self._messages[message_id]))
            return received

    def delete(self, receipt_handle: str) -> None:
        with self._condition:
            message_id = self._receipts.pop(receipt_handle, None)
            if message_id is None:
                return
            self._messages.pop(message_id, None)
            self._invisible_until.pop(message_id, None)

    def ping(self) -> None:
        return None

    def __len__(self) -> int:
        with self._condition:
            return len(self._messages)

    def peek(self) -> List[str]:
        """Bodies of every undeleted message, visible or not"""
        with self._condition:
            return list(self._messages.values())


class SQSQueue(NotificationQueue):
    """AWS SQS queue backend"""

    def __init__(self, queue_url: Optional[str] = None, queue_name: Optional[str] = None, client=None):
        self.sqs_client = client or boto3.client('sqs', **settings.boto3_client_kwargs())
        self._queue_url = queue_url or settings.SQS_QUEUE_URL
        self.queue_name = queue_name or settings.SQS_QUEUE_NAME

    @property
    def queue_url(self) -> str:
        # Resolved lazily by name when no URL is configured
        if not self._queue_url:
            response = self.sqs_client.get_queue_url(QueueName=self.queue_name)
            self._queue_url = response['QueueUrl']
            logger.info(f"Resolved SQS queue {self.queue_name} to {self._queue_url}")
        return self._queue_url

    def send(self, body: str) -> str:
        response = self.sqs_client.send_message(QueueUrl=self.queue_url, MessageBody=body)
        return response['MessageId']

    def receive(self, max_messages: int = 10, wait_seconds: int = 20) -> List[QueueMessage]:
        response = self.sqs_client.receive_message(
            QueueUrl=self.queue_url,
            MaxNumberOfMessages=max_messages,
            WaitTimeSeconds=wait_seconds,
            MessageAttributeNames=['All']
        )
        return [
            QueueMessage(m['MessageId'], m['ReceiptHandle'], m['Body'])
            for m in response.get('Messages', [])
        ]

    def delete(self, receipt_handle: str) -> None:
        self.sqs_client.delete_message(QueueUrl=self.queue_url, ReceiptHandle=receipt_handle)

    def ping(self) -> None:
        self.sqs_client.get_queue_attributes(
            QueueUrl=self.queue_url,
            AttributeNames=['ApproximateNumberOfMessages']
        )


@lru_cache
def get_notification_queue() -> NotificationQueue:
    """Get the process-wide queue backend based on the USE_SQS setting"""
    if settings.USE_SQS:
        if not (settings.SQS_QUEUE_URL or settings.SQS_QUEUE_NAME):
            raise ValueError("SQS_QUEUE_URL or SQS_QUEUE_NAME must be set when USE_SQS=True")
        return SQSQueue()
    return InMemoryQueue()
