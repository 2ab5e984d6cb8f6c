"""Cancellation request submission — command and handler."""

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from ordering.cancellation.request import CancellationRequest, RequestStatus
from ordering.domain import ordering
from ordering.order.order import Order

logger = structlog.get_logger(__name__)


@ordering.command(part_of="CancellationRequest")
class SubmitCancellationRequest:
    order_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    reason_category = String(required=True, max_length=30)
    explanation = Text(required=True)
    customer_name = String(max_length=255)
    customer_email = String(max_length=255)
    student_id = String(max_length=50)


def pending_request_for(order_id):
    """The open request for ``order_id``, or None."""
    repo = current_domain.repository_for(CancellationRequest)
    results = repo._dao.query.filter(order_id=str(order_id), status=RequestStatus.PENDING.value).all()
    return results.first if results.items else None


@ordering.command_handler(part_of=CancellationRequest)
class SubmitCancellationRequestHandler:
    @handle(SubmitCancellationRequest)
    def submit_request(self, command):
        order = current_domain.repository_for(Order).get(command.order_id)

        if str(order.customer_id) != str(command.customer_id):
            raise ValidationError({"customer_id": ["Only the customer who placed the order can ask to cancel it"]})

        if not order.is_cancellable:
            raise ValidationError(
                {"status": [f"Order {order.human_code} is {order.status} and can no longer be cancelled"]}
            )

        if pending_request_for(order.id) is not None:
            raise ValidationError({"order_id": ["A cancellation request for this order is already pending"]})

        request = CancellationRequest.submit(
            order=order,
            reason_category_value=command.reason_category,
            explanation=command.explanation,
            customer_name=command.customer_name,
            customer_email=command.customer_email,
            student_id=command.student_id,
        )
        current_domain.repository_for(CancellationRequest).add(request)

        logger.info(
            "Cancellation requested",
            request_id=str(request.id),
            order_id=str(order.id),
            reason_category=request.reason_category,
        )
        return str(request.id)
