"""
Run the notification worker as its own process:

    python -m jobmanager.workers
"""

import asyncio

from jobmanager.core.config import settings
from jobmanager.core.logging_config import setup_logging
from jobmanager.core.queue import get_notification_queue
from jobmanager.workers.notification_worker import NotificationWorker


def main() -> None:
    setup_logging(settings.LOG_LEVEL, json_logs=settings.JSON_LOGS)
    worker = NotificationWorker(get_notification_queue())
    try:
        asyncio.run(worker.run())
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    main()
