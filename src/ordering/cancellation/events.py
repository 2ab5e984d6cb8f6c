"""Domain events for the CancellationRequest aggregate."""

from protean.fields import DateTime, Float, Identifier, String

from ordering.domain import ordering


@ordering.event(part_of="CancellationRequest")
class CancellationRequested:
    __version__ = 1

    request_id = Identifier(required=True)
    order_id = Identifier(required=True)
    human_code = String(required=True)
    stall_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    reason_category = String(required=True)
    reason_label = String(required=True)
    order_total = Float()
    requested_at = DateTime(required=True)


@ordering.event(part_of="CancellationRequest")
class CancellationRequestApproved:
    """The stall (or an admin) accepted the request; the order is cancelled with it."""

    __version__ = 1

    request_id = Identifier(required=True)
    order_id = Identifier(required=True)
    human_code = String(required=True)
    stall_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    responded_by = Identifier(required=True)
    response_reason = String()
    responded_at = DateTime(required=True)


@ordering.event(part_of="CancellationRequest")
class CancellationRequestDeclined:
    __version__ = 1

    request_id = Identifier(required=True)
    order_id = Identifier(required=True)
    human_code = String(required=True)
    stall_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    responded_by = Identifier(required=True)
    response_reason = String(required=True)
    responded_at = DateTime(required=True)
