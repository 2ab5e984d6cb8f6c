"""Log-only notifier — the default adapter until a real transport is wired in."""

from uuid import uuid4

import structlog

from notifications.channel.notifier_port import NotifierPort

logger = structlog.get_logger(__name__)


class LogNotifier(NotifierPort):
    def send(
        self,
        user_id: str,
        title: str,
        message: str,
        metadata: dict | None = None,
    ) -> dict:
        notification_id = f"ntf-{uuid4().hex[:12]}"
        logger.info(
            "Notification enqueued",
            notification_id=notification_id,
            user_id=user_id,
            title=title,
            metadata=metadata or {},
        )
        return {"notification_id": notification_id, "status": "sent"}
