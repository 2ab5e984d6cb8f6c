"""Customer alerts for order status changes.

Sends "Order <Status>" notifications after each lifecycle transition commits.
Cancellations forced by an approved cancellation request are announced by the
arbitration flow instead, so they are skipped here.
"""

import structlog
from protean.utils.mixins import handle

from notifications.dispatch import notify_user
from notifications.types import NotificationType
from ordering.domain import ordering
from ordering.order.events import (
    OrderCancelled,
    OrderCompleted,
    OrderPreparationStarted,
    OrderReadyForPickup,
)
from ordering.order.order import Order, OrderStatus

logger = structlog.get_logger(__name__)


def _alert(event, status: OrderStatus) -> None:
    notify_user(
        user_id=str(event.customer_id),
        notification_type=NotificationType.ORDER_STATUS_CHANGED.value,
        context={
            "order_id": str(event.order_id),
            "human_code": event.human_code,
            "stall_name": event.stall_name,
            "status": status.value,
        },
    )


@ordering.event_handler(part_of=Order)
class OrderStatusAlertsHandler:
    @handle(OrderPreparationStarted)
    def on_preparation_started(self, event: OrderPreparationStarted) -> None:
        _alert(event, OrderStatus.PREPARING)

    @handle(OrderReadyForPickup)
    def on_ready_for_pickup(self, event: OrderReadyForPickup) -> None:
        _alert(event, OrderStatus.READY)

    @handle(OrderCompleted)
    def on_order_completed(self, event: OrderCompleted) -> None:
        _alert(event, OrderStatus.COMPLETED)

    @handle(OrderCancelled)
    def on_order_cancelled(self, event: OrderCancelled) -> None:
        if event.cancellation_request_id:
            logger.debug(
                "Cancellation announced by request outcome",
                order_id=str(event.order_id),
                request_id=str(event.cancellation_request_id),
            )
            return
        _alert(event, OrderStatus.CANCELLED)
