"""Notify users when a penalty is issued against them."""

from protean.utils.mixins import handle

from notifications.dispatch import notify_user
from notifications.types import NotificationType
from penalties.domain import penalties
from penalties.penalty.events import PenaltyIssued
from penalties.penalty.penalty import Penalty


@penalties.event_handler(part_of=Penalty)
class PenaltyAlertsHandler:
    @handle(PenaltyIssued)
    def on_penalty_issued(self, event: PenaltyIssued) -> None:
        notify_user(
            user_id=str(event.target_user_id),
            notification_type=NotificationType.PENALTY_ASSIGNED.value,
            context={
                "penalty_id": str(event.penalty_id),
                "penalty_type": event.penalty_type,
                "reason": event.reason,
                "expires_at": event.expires_at.isoformat() if event.expires_at else None,
            },
        )
