"""Notifier port — abstract interface for user-visible notification dispatch."""

from abc import ABC, abstractmethod


class NotifierPort(ABC):
    """Enqueues a notification for a user. Delivery is best-effort."""

    @abstractmethod
    def send(
        self,
        user_id: str,
        title: str,
        message: str,
        metadata: dict | None = None,
    ) -> dict:
        """Send a notification.

        Returns:
            dict with keys: notification_id, status ("sent" or "failed"), error (optional)
        """
        ...
