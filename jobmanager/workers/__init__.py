"""
Background workers.

- notification_worker: drains the notification queue
"""

from jobmanager.workers.notification_worker import NotificationWorker

__all__ = ["NotificationWorker"]
