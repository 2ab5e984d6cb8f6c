"""Cancellation outcome templates — sent when a stall answers a cancellation request."""

from notifications.types import NotificationCategory, NotificationType


class CancellationApprovedTemplate:
    notification_type = NotificationType.CANCELLATION_APPROVED.value
    category = NotificationCategory.ORDER.value

    @staticmethod
    def render(context: dict) -> dict:
        return {
            "title": "Order Cancellation Approved",
            "message": "Your order cancellation request has been approved.",
            "metadata": {
                "order_id": context.get("order_id"),
                "human_code": context.get("human_code"),
                "cancellation_status": "approved",
                "reason": context.get("reason"),
            },
        }


class CancellationDeclinedTemplate:
    notification_type = NotificationType.CANCELLATION_DECLINED.value
    category = NotificationCategory.ORDER.value

    @staticmethod
    def render(context: dict) -> dict:
        reason = context.get("reason")
        return {
            "title": "Order Cancellation Declined",
            "message": f"Your order cancellation request has been declined. Reason: {reason}",
            "metadata": {
                "order_id": context.get("order_id"),
                "human_code": context.get("human_code"),
                "cancellation_status": "declined",
                "reason": reason,
            },
        }
