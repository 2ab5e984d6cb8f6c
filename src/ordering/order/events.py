"""Domain events for the Order aggregate.

All events are versioned, immutable facts. They are persisted to the event
store and used for:
- Rebuilding aggregate state via @apply (event sourcing)
- Updating the stall queue and customer history projections
- Customer notifications

Every event carries ``customer_id``, ``stall_id`` and ``human_code`` so that
consumers never need to load the order to address the customer or the stall.
"""

from protean.fields import Boolean, DateTime, Float, Identifier, String, Text

from ordering.domain import ordering


@ordering.event(part_of="Order")
class OrderPlaced:
    """A stall order was formed from the customer's cart at checkout."""

    __version__ = 1

    order_id = Identifier(required=True)
    human_code = String(required=True)
    main_order_id = String(required=True)
    stall_id = Identifier(required=True)
    stall_name = String()
    customer_id = Identifier(required=True)
    customer_display = Text()  # JSON: {name, email, student_id}
    items = Text(required=True)  # JSON: list of line dicts
    subtotal = Float(required=True)
    checkout_total = Float(required=True)
    payment_method = String(required=True)
    cash_tendered = Float()
    change_due = Float()
    cash_settlement_code = String()
    special_instructions = Text()
    scheduled_ready_by = DateTime()
    estimated_time = String()
    group_member_emails = Text()  # JSON: list of emails
    is_multi_stall_sibling = Boolean(default=False)
    created_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderPreparationStarted:
    """The stall owner accepted the order and began preparing it."""

    __version__ = 1

    order_id = Identifier(required=True)
    human_code = String(required=True)
    stall_id = Identifier(required=True)
    stall_name = String()
    customer_id = Identifier(required=True)
    started_by = Identifier(required=True)
    started_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderReadyForPickup:
    """The order is ready at the stall counter."""

    __version__ = 1

    order_id = Identifier(required=True)
    human_code = String(required=True)
    stall_id = Identifier(required=True)
    stall_name = String()
    customer_id = Identifier(required=True)
    marked_by = Identifier(required=True)
    ready_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderCompleted:
    """The customer picked the order up. The order becomes review eligible."""

    __version__ = 1

    order_id = Identifier(required=True)
    human_code = String(required=True)
    stall_id = Identifier(required=True)
    stall_name = String()
    customer_id = Identifier(required=True)
    completed_by = Identifier(required=True)
    completed_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderCancelled:
    """The order was cancelled by the stall owner or an approved cancellation request."""

    __version__ = 1

    order_id = Identifier(required=True)
    human_code = String(required=True)
    stall_id = Identifier(required=True)
    stall_name = String()
    customer_id = Identifier(required=True)
    reason = String(required=True)
    cancelled_by = Identifier(required=True)
    cancelled_via = String(required=True)  # ActorRole value
    cancellation_request_id = Identifier()  # Set when an approved request forced the cancellation
    cancelled_at = DateTime(required=True)
