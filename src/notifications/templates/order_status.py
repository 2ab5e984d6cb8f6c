"""Order status template — sent when a stall moves an order along."""

from notifications.types import NotificationCategory, NotificationType


class OrderStatusChangedTemplate:
    notification_type = NotificationType.ORDER_STATUS_CHANGED.value
    category = NotificationCategory.ORDER.value

    @staticmethod
    def render(context: dict) -> dict:
        status = context.get("status", "updated")
        stall_name = context.get("stall_name") or "the stall"
        return {
            "title": f"Order {status.capitalize()}",
            "message": f"Your order from {stall_name} is now {status}.",
            "metadata": {
                "order_id": context.get("order_id"),
                "human_code": context.get("human_code"),
                "status": status,
            },
        }
