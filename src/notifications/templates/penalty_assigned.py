"""Penalty template — sent to a user when an administrator sanctions them."""

from notifications.types import NotificationCategory, NotificationType


class PenaltyAssignedTemplate:
    notification_type = NotificationType.PENALTY_ASSIGNED.value
    category = NotificationCategory.PENALTY.value

    @staticmethod
    def render(context: dict) -> dict:
        penalty_type = context.get("penalty_type", "warning")
        reason = context.get("reason", "")
        return {
            "title": "Penalty Assigned",
            "message": f"You have received a {penalty_type} penalty: {reason}",
            "metadata": {
                "penalty_id": context.get("penalty_id"),
                "penalty_type": penalty_type,
                "reason": reason,
                "expires_at": context.get("expires_at"),
            },
        }
