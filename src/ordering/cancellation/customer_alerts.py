"""Tell the customer how the stall answered their cancellation request."""

from protean.utils.mixins import handle

from notifications.dispatch import notify_user
from notifications.types import NotificationType
from ordering.cancellation.events import CancellationRequestApproved, CancellationRequestDeclined
from ordering.cancellation.request import CancellationRequest
from ordering.domain import ordering


@ordering.event_handler(part_of=CancellationRequest)
class CancellationOutcomeAlertsHandler:
    @handle(CancellationRequestApproved)
    def on_request_approved(self, event: CancellationRequestApproved) -> None:
        notify_user(
            user_id=str(event.customer_id),
            notification_type=NotificationType.CANCELLATION_APPROVED.value,
            context={
                "order_id": str(event.order_id),
                "human_code": event.human_code,
                "reason": event.response_reason,
            },
        )

    @handle(CancellationRequestDeclined)
    def on_request_declined(self, event: CancellationRequestDeclined) -> None:
        notify_user(
            user_id=str(event.customer_id),
            notification_type=NotificationType.CANCELLATION_DECLINED.value,
            context={
                "order_id": str(event.order_id),
                "human_code": event.human_code,
                "reason": event.response_reason,
            },
        )
