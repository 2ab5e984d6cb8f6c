"""Cancellation arbitration — the stall's response to a request.

Approval and the forced order cancellation are written in one unit of work.
Every precondition is checked before anything is mutated, so a failed
approval leaves both the request and the order untouched and sends nothing.
If the order moved past preparing while the request waited, approval fails
closed with RaceConditionConflict; the request stays pending and can still be
declined.
"""

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from ordering.cancellation.request import CancellationRequest
from ordering.domain import ordering
from ordering.errors import RaceConditionConflict
from ordering.order.order import ActorRole, Order, actor_role
from ordering.stall.stall import assert_stall_owner

logger = structlog.get_logger(__name__)


@ordering.command(part_of="CancellationRequest")
class ApproveCancellationRequest:
    request_id = Identifier(required=True)
    responder_id = Identifier(required=True)
    responder_role = String(max_length=20, default=ActorRole.STALL_OWNER.value)
    response_reason = String(max_length=500)


@ordering.command(part_of="CancellationRequest")
class DeclineCancellationRequest:
    request_id = Identifier(required=True)
    responder_id = Identifier(required=True)
    responder_role = String(max_length=20, default=ActorRole.STALL_OWNER.value)
    response_reason = String(max_length=500)


def _authorize_responder(request, responder_id, role_value) -> ActorRole:
    role = actor_role(role_value or ActorRole.STALL_OWNER.value)
    if role == ActorRole.STALL_OWNER:
        assert_stall_owner(request.stall_id, responder_id)
    elif role != ActorRole.ADMIN:
        raise ValidationError({"responder_role": ["Only the stall owner or an administrator can respond"]})
    return role


@ordering.command_handler(part_of=CancellationRequest)
class CancellationArbitrationHandler:
    @handle(ApproveCancellationRequest)
    def approve_request(self, command):
        request_repo = current_domain.repository_for(CancellationRequest)
        order_repo = current_domain.repository_for(Order)

        request = request_repo.get(command.request_id)
        role = _authorize_responder(request, command.responder_id, command.responder_role)

        order = order_repo.get(request.order_id)
        if request.is_pending and not order.is_cancellable:
            logger.warning(
                "Cancellation approval lost the race",
                request_id=str(request.id),
                order_id=str(order.id),
                order_status=order.status,
            )
            raise RaceConditionConflict(
                {"status": [f"Order {order.human_code} is already {order.status}; it can no longer be cancelled"]}
            )

        request.approve(
            responder_id=command.responder_id,
            responder_role=role.value,
            response_reason=command.response_reason,
        )
        order.cancel(
            reason=request.reason_label,
            cancelled_by=command.responder_id,
            role=ActorRole.SYSTEM,
            cancellation_request_id=str(request.id),
        )

        request_repo.add(request)
        order_repo.add(order)

        logger.info(
            "Cancellation request approved",
            request_id=str(request.id),
            order_id=str(order.id),
            responded_by=str(command.responder_id),
        )

    @handle(DeclineCancellationRequest)
    def decline_request(self, command):
        repo = current_domain.repository_for(CancellationRequest)
        request = repo.get(command.request_id)
        role = _authorize_responder(request, command.responder_id, command.responder_role)

        request.decline(
            responder_id=command.responder_id,
            responder_role=role.value,
            response_reason=command.response_reason,
        )
        repo.add(request)

        logger.info(
            "Cancellation request declined",
            request_id=str(request.id),
            order_id=str(request.order_id),
            responded_by=str(command.responder_id),
        )
