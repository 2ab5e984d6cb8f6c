"""Best-effort notification dispatch.

Renders a template and hands it to the configured notifier. Dispatch never
fails the calling operation: adapter errors and failed deliveries are logged
and swallowed.
"""

import structlog

from notifications.channel import get_notifier
from notifications.templates import get_template

logger = structlog.get_logger(__name__)


def notify_user(user_id: str, notification_type: str, context: dict) -> str | None:
    """Render ``notification_type`` with ``context`` and send it to ``user_id``.

    Returns:
        The notification id, or None when dispatch failed.
    """
    template_cls = get_template(notification_type)
    rendered = template_cls.render(context)
    metadata = {
        **rendered.get("metadata", {}),
        "notification_type": notification_type,
        "category": template_cls.category,
    }

    try:
        result = get_notifier().send(
            user_id=str(user_id),
            title=rendered["title"],
            message=rendered["message"],
            metadata=metadata,
        )
    except Exception as exc:
        logger.warning(
            "Notification dispatch failed",
            user_id=str(user_id),
            notification_type=notification_type,
            error=str(exc),
        )
        return None

    if result.get("status") != "sent":
        logger.warning(
            "Notification not delivered",
            user_id=str(user_id),
            notification_type=notification_type,
            error=result.get("error"),
        )
        return None

    logger.info(
        "Notification sent",
        user_id=str(user_id),
        notification_type=notification_type,
        notification_id=result.get("notification_id"),
    )
    return result.get("notification_id")
