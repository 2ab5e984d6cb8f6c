"""CancellationRequest aggregate (CQRS) — a customer asking a stall to cancel.

A request is created while its order is pending or preparing and receives
exactly one response. Approval and decline both require the request to still
be pending; any later response fails with AlreadyResolved.

State Machine:
    PENDING → APPROVED
    PENDING → DECLINED
"""

from datetime import UTC, datetime
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, Identifier, String, Text

from ordering.cancellation.events import (
    CancellationRequestApproved,
    CancellationRequestDeclined,
    CancellationRequested,
)
from ordering.domain import ordering
from ordering.errors import AlreadyResolved

DEFAULT_APPROVAL_REASON = "Request approved by stall owner"


class RequestStatus(Enum):
    PENDING = "pending"
    APPROVED = "approved"
    DECLINED = "declined"


class ReasonCategory(Enum):
    WRONG_ORDER = "wrong_order"
    FINANCIAL = "financial"
    EMERGENCY = "emergency"
    QUALITY_CONCERN = "quality_concern"
    TIMING = "timing"
    DUPLICATE = "duplicate"
    OTHER = "other"


REASON_LABELS = {
    ReasonCategory.WRONG_ORDER: "Ordered wrong item",
    ReasonCategory.FINANCIAL: "Changed mind / Financial reasons",
    ReasonCategory.EMERGENCY: "Emergency situation",
    ReasonCategory.QUALITY_CONCERN: "Quality or safety concern",
    ReasonCategory.TIMING: "Can't wait for pickup time",
    ReasonCategory.DUPLICATE: "Duplicate order",
    ReasonCategory.OTHER: "Other reason",
}


def reason_category(value) -> ReasonCategory:
    try:
        return ReasonCategory(value)
    except ValueError as exc:
        raise ValidationError({"reason_category": [f"Unknown cancellation reason: {value}"]}) from exc


@ordering.aggregate
class CancellationRequest:
    order_id = Identifier(required=True)
    human_code = String(required=True, max_length=64)
    stall_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    customer_name = String(max_length=255)
    customer_email = String(max_length=255)
    student_id = String(max_length=50)
    reason_category = String(required=True, choices=ReasonCategory)
    reason_label = String(required=True, max_length=100)
    explanation = Text(required=True)
    order_total = Float(default=0.0)
    payment_method = String(max_length=10)
    status = String(choices=RequestStatus, default=RequestStatus.PENDING.value)
    requested_at = DateTime()
    responded_at = DateTime()
    responded_by = Identifier()
    responder_role = String(max_length=20)
    response_reason = String(max_length=500)

    @classmethod
    def submit(
        cls,
        order,
        reason_category_value,
        explanation,
        customer_name=None,
        customer_email=None,
        student_id=None,
    ):
        """Open a pending request against ``order``.

        The caller has already checked the order's status and that no other
        request is pending for it.
        """
        category = reason_category(reason_category_value)
        if not explanation or not str(explanation).strip():
            raise ValidationError({"explanation": ["Please explain why you want to cancel"]})

        display = order.customer_display
        now = datetime.now(UTC)
        request = cls(
            order_id=str(order.id),
            human_code=order.human_code,
            stall_id=str(order.stall_id),
            customer_id=str(order.customer_id),
            customer_name=customer_name or (display.name if display else None),
            customer_email=customer_email or (display.email if display else None),
            student_id=student_id or (display.student_id if display else None),
            reason_category=category.value,
            reason_label=REASON_LABELS[category],
            explanation=str(explanation).strip(),
            order_total=order.subtotal,
            payment_method=order.payment_method,
            status=RequestStatus.PENDING.value,
            requested_at=now,
        )
        request.raise_(
            CancellationRequested(
                request_id=str(request.id),
                order_id=request.order_id,
                human_code=request.human_code,
                stall_id=request.stall_id,
                customer_id=request.customer_id,
                reason_category=request.reason_category,
                reason_label=request.reason_label,
                order_total=request.order_total,
                requested_at=now,
            )
        )
        return request

    @property
    def is_pending(self):
        return self.status == RequestStatus.PENDING.value

    def _assert_pending(self):
        if not self.is_pending:
            raise AlreadyResolved({"status": [f"Cancellation request was already {self.status}"]})

    def approve(self, responder_id, responder_role, response_reason=None):
        self._assert_pending()

        now = datetime.now(UTC)
        self.status = RequestStatus.APPROVED.value
        self.responded_at = now
        self.responded_by = responder_id
        self.responder_role = responder_role
        self.response_reason = (response_reason or "").strip() or DEFAULT_APPROVAL_REASON

        self.raise_(
            CancellationRequestApproved(
                request_id=str(self.id),
                order_id=str(self.order_id),
                human_code=self.human_code,
                stall_id=str(self.stall_id),
                customer_id=str(self.customer_id),
                responded_by=str(responder_id),
                response_reason=self.response_reason,
                responded_at=now,
            )
        )

    def decline(self, responder_id, responder_role, response_reason):
        self._assert_pending()
        if not response_reason or not str(response_reason).strip():
            raise ValidationError({"response_reason": ["A reason is required to decline a cancellation request"]})

        now = datetime.now(UTC)
        self.status = RequestStatus.DECLINED.value
        self.responded_at = now
        self.responded_by = responder_id
        self.responder_role = responder_role
        self.response_reason = str(response_reason).strip()

        self.raise_(
            CancellationRequestDeclined(
                request_id=str(self.id),
                order_id=str(self.order_id),
                human_code=self.human_code,
                stall_id=str(self.stall_id),
                customer_id=str(self.customer_id),
                responded_by=str(responder_id),
                response_reason=self.response_reason,
                responded_at=now,
            )
        )
