"""Template registry — maps NotificationType to template classes.

Each template knows its client category and how to render the title,
message and metadata from a context dict.
"""

from notifications.templates.cancellation_outcome import (
    CancellationApprovedTemplate,
    CancellationDeclinedTemplate,
)
from notifications.templates.order_status import OrderStatusChangedTemplate
from notifications.templates.penalty_assigned import PenaltyAssignedTemplate
from notifications.types import NotificationType

TEMPLATE_REGISTRY: dict[str, type] = {
    NotificationType.ORDER_STATUS_CHANGED.value: OrderStatusChangedTemplate,
    NotificationType.CANCELLATION_APPROVED.value: CancellationApprovedTemplate,
    NotificationType.CANCELLATION_DECLINED.value: CancellationDeclinedTemplate,
    NotificationType.PENALTY_ASSIGNED.value: PenaltyAssignedTemplate,
}


def get_template(notification_type: str):
    """Look up a template class by notification type string."""
    template_cls = TEMPLATE_REGISTRY.get(notification_type)
    if template_cls is None:
        raise ValueError(f"No template registered for notification type: {notification_type}")
    return template_cls
