"""Order aggregate (Event Sourced) — one stall's share of a checkout.

Every state change is captured as a domain event and the current state is
rebuilt by replaying events via @apply. Orders are never deleted, only
terminalized, so the event stream is the complete audit trail.

State Machine (5 states):
    PENDING → PREPARING → READY → COMPLETED
    PENDING/PREPARING → CANCELLED

Only stall owners move an order forward. Cancellation is open to the stall
owner and to the system acting on an approved cancellation request.
"""

import json
from datetime import UTC, datetime
from enum import Enum
from uuid import uuid4

from protean import apply
from protean.exceptions import ValidationError
from protean.fields import (
    Boolean,
    DateTime,
    Float,
    HasMany,
    Identifier,
    Integer,
    String,
    Text,
    ValueObject,
)

from ordering.domain import ordering
from ordering.errors import IllegalTransition
from ordering.order.events import (
    OrderCancelled,
    OrderCompleted,
    OrderPlaced,
    OrderPreparationStarted,
    OrderReadyForPickup,
)


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class OrderStatus(Enum):
    PENDING = "pending"
    PREPARING = "preparing"
    READY = "ready"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class PaymentMethod(Enum):
    CASH = "cash"
    GCASH = "gcash"
    MAYA = "maya"


class ActorRole(Enum):
    CUSTOMER = "customer"
    STALL_OWNER = "stall_owner"
    ADMIN = "admin"
    SYSTEM = "system"


# State machine transition map
_VALID_TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.PREPARING, OrderStatus.CANCELLED},
    OrderStatus.PREPARING: {OrderStatus.READY, OrderStatus.CANCELLED},
    OrderStatus.READY: {OrderStatus.COMPLETED},
    OrderStatus.COMPLETED: set(),  # Terminal
    OrderStatus.CANCELLED: set(),  # Terminal
}

# Who may perform each transition
_TRANSITION_ACTORS = {
    (OrderStatus.PENDING, OrderStatus.PREPARING): {ActorRole.STALL_OWNER},
    (OrderStatus.PENDING, OrderStatus.CANCELLED): {ActorRole.STALL_OWNER, ActorRole.SYSTEM},
    (OrderStatus.PREPARING, OrderStatus.READY): {ActorRole.STALL_OWNER},
    (OrderStatus.PREPARING, OrderStatus.CANCELLED): {ActorRole.STALL_OWNER, ActorRole.SYSTEM},
    (OrderStatus.READY, OrderStatus.COMPLETED): {ActorRole.STALL_OWNER},
}

# States in which the customer may ask for a cancellation
CANCELLABLE_STATES = {OrderStatus.PENDING, OrderStatus.PREPARING}

DEFAULT_ESTIMATED_TIME = "15-40 mins"


def actor_role(value) -> ActorRole:
    """Coerce a role string into ActorRole, rejecting unknown roles."""
    if isinstance(value, ActorRole):
        return value
    try:
        return ActorRole(value)
    except ValueError as exc:
        raise ValidationError({"actor_role": [f"Unknown actor role: {value}"]}) from exc


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@ordering.value_object(part_of="Order")
class CustomerDisplay:
    """How the customer is shown to stall staff, captured at checkout."""

    name = String(max_length=255)
    email = String(max_length=255)
    student_id = String(max_length=50)


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@ordering.entity(part_of="Order")
class OrderLine:
    """A line item frozen at checkout. Prices never follow later menu changes."""

    menu_item_id = Identifier(required=True)
    name = String(required=True, max_length=255)
    quantity = Integer(required=True, min_value=1)
    unit_price = Float(required=True, min_value=0.0)
    add_ons = Text()  # JSON: [{name, price}]
    note = String(max_length=500)
    line_total = Float(required=True, min_value=0.0)

    def add_on_list(self):
        return json.loads(self.add_ons) if self.add_ons else []


# ---------------------------------------------------------------------------
# Aggregate Root (Event Sourced)
# ---------------------------------------------------------------------------
@ordering.aggregate(is_event_sourced=True)
class Order:
    human_code = String(required=True, max_length=64)
    main_order_id = String(required=True, max_length=64)
    stall_id = Identifier(required=True)
    stall_name = String(max_length=255)
    customer_id = Identifier(required=True)
    customer_display = ValueObject(CustomerDisplay)
    items = HasMany(OrderLine)
    subtotal = Float(default=0.0)
    checkout_total = Float(default=0.0)
    payment_method = String(choices=PaymentMethod, default=PaymentMethod.CASH.value)
    cash_tendered = Float()
    change_due = Float()
    cash_settlement_code = String(max_length=64)
    status = String(choices=OrderStatus, default=OrderStatus.PENDING.value)
    special_instructions = Text()
    scheduled_ready_by = DateTime()
    estimated_time = String(max_length=50)
    group_member_emails = Text()  # JSON: list of emails
    is_multi_stall_sibling = Boolean(default=False)
    created_at = DateTime()
    status_updated_at = DateTime()
    cancelled_at = DateTime()
    cancelled_by = Identifier()
    cancellation_reason = String(max_length=500)

    # -------------------------------------------------------------------
    # Factory method
    # -------------------------------------------------------------------
    @classmethod
    def place(
        cls,
        human_code,
        main_order_id,
        stall_id,
        customer_id,
        items_data,
        subtotal,
        checkout_total,
        payment_method,
        customer_display=None,
        stall_name=None,
        cash_tendered=None,
        change_due=None,
        cash_settlement_code=None,
        special_instructions=None,
        scheduled_ready_by=None,
        estimated_time=None,
        group_member_emails=None,
        is_multi_stall_sibling=False,
    ):
        """Place a new stall order with status PENDING.

        Args:
            items_data: List of dicts with menu_item_id, name, quantity,
                        unit_price, add_ons (list), note, line_total.
            customer_display: Dict with name, email, student_id.
            group_member_emails: List of email strings.
        """
        now = datetime.now(UTC)

        # Pre-generate line IDs for deterministic replay
        items_with_ids = [{**item, "id": str(uuid4())} for item in items_data]

        order = cls._create_new()
        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                human_code=human_code,
                main_order_id=main_order_id,
                stall_id=str(stall_id),
                stall_name=stall_name,
                customer_id=str(customer_id),
                customer_display=json.dumps(customer_display or {}),
                items=json.dumps(items_with_ids),
                subtotal=subtotal,
                checkout_total=checkout_total,
                payment_method=payment_method,
                cash_tendered=cash_tendered,
                change_due=change_due,
                cash_settlement_code=cash_settlement_code,
                special_instructions=special_instructions,
                scheduled_ready_by=scheduled_ready_by,
                estimated_time=estimated_time or DEFAULT_ESTIMATED_TIME,
                group_member_emails=json.dumps(group_member_emails) if group_member_emails else None,
                is_multi_stall_sibling=is_multi_stall_sibling,
                created_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # State transition helper
    # -------------------------------------------------------------------
    def _assert_can_transition(self, target_status, role):
        """Validate the transition against the state machine and the actor's role."""
        current = OrderStatus(self.status)
        if target_status not in _VALID_TRANSITIONS.get(current, set()):
            raise IllegalTransition({"status": [f"Cannot transition from {current.value} to {target_status.value}"]})

        allowed = _TRANSITION_ACTORS[(current, target_status)]
        if role not in allowed:
            raise IllegalTransition(
                {
                    "actor_role": [
                        f"A {role.value} cannot move an order from {current.value} to {target_status.value}"
                    ]
                }
            )

    def can_transition_to(self, target_status):
        return target_status in _VALID_TRANSITIONS.get(OrderStatus(self.status), set())

    @property
    def is_cancellable(self):
        return OrderStatus(self.status) in CANCELLABLE_STATES

    @property
    def is_review_eligible(self):
        return OrderStatus(self.status) == OrderStatus.COMPLETED

    @property
    def collects_cash(self):
        """True when this order's stall is the one receiving the tendered cash."""
        return self.payment_method == PaymentMethod.CASH.value and self.cash_tendered is not None

    # -------------------------------------------------------------------
    # Order lifecycle transitions
    # -------------------------------------------------------------------
    def start_preparing(self, actor_id, role=ActorRole.STALL_OWNER):
        self._assert_can_transition(OrderStatus.PREPARING, actor_role(role))
        self.raise_(
            OrderPreparationStarted(
                order_id=str(self.id),
                human_code=self.human_code,
                stall_id=str(self.stall_id),
                stall_name=self.stall_name,
                customer_id=str(self.customer_id),
                started_by=str(actor_id),
                started_at=datetime.now(UTC),
            )
        )

    def mark_ready(self, actor_id, role=ActorRole.STALL_OWNER):
        self._assert_can_transition(OrderStatus.READY, actor_role(role))
        self.raise_(
            OrderReadyForPickup(
                order_id=str(self.id),
                human_code=self.human_code,
                stall_id=str(self.stall_id),
                stall_name=self.stall_name,
                customer_id=str(self.customer_id),
                marked_by=str(actor_id),
                ready_at=datetime.now(UTC),
            )
        )

    def complete(self, actor_id, role=ActorRole.STALL_OWNER):
        """Hand the order over at the counter."""
        self._assert_can_transition(OrderStatus.COMPLETED, actor_role(role))
        self.raise_(
            OrderCompleted(
                order_id=str(self.id),
                human_code=self.human_code,
                stall_id=str(self.stall_id),
                stall_name=self.stall_name,
                customer_id=str(self.customer_id),
                completed_by=str(actor_id),
                completed_at=datetime.now(UTC),
            )
        )

    def cancel(self, reason, cancelled_by, role=ActorRole.STALL_OWNER, cancellation_request_id=None):
        """Cancel the order.

        ``role`` is SYSTEM when the cancellation is forced by an approved
        cancellation request; ``cancelled_by`` is then the responder.
        """
        if not reason or not str(reason).strip():
            raise ValidationError({"reason": ["A cancellation reason is required"]})

        role = actor_role(role)
        self._assert_can_transition(OrderStatus.CANCELLED, role)
        self.raise_(
            OrderCancelled(
                order_id=str(self.id),
                human_code=self.human_code,
                stall_id=str(self.stall_id),
                stall_name=self.stall_name,
                customer_id=str(self.customer_id),
                reason=reason,
                cancelled_by=str(cancelled_by),
                cancelled_via=role.value,
                cancellation_request_id=cancellation_request_id,
                cancelled_at=datetime.now(UTC),
            )
        )

    # -------------------------------------------------------------------
    # @apply methods — rebuild state during event replay
    # -------------------------------------------------------------------
    @apply
    def _on_order_placed(self, event: OrderPlaced):
        self.id = event.order_id
        self.human_code = event.human_code
        self.main_order_id = event.main_order_id
        self.stall_id = event.stall_id
        self.stall_name = event.stall_name
        self.customer_id = event.customer_id
        self.status = OrderStatus.PENDING.value
        self.created_at = event.created_at
        self.status_updated_at = event.created_at

        display = json.loads(event.customer_display) if event.customer_display else {}
        if display:
            self.customer_display = CustomerDisplay(**display)

        # Reconstruct lines from JSON (includes IDs for deterministic replay)
        items_data = json.loads(event.items) if isinstance(event.items, str) else []
        self.items = [
            OrderLine(
                id=item["id"],
                menu_item_id=item["menu_item_id"],
                name=item["name"],
                quantity=item["quantity"],
                unit_price=item["unit_price"],
                add_ons=json.dumps(item.get("add_ons") or []),
                note=item.get("note"),
                line_total=item["line_total"],
            )
            for item in items_data
        ]

        self.subtotal = event.subtotal
        self.checkout_total = event.checkout_total
        self.payment_method = event.payment_method
        self.cash_tendered = event.cash_tendered
        self.change_due = event.change_due
        self.cash_settlement_code = event.cash_settlement_code
        self.special_instructions = event.special_instructions
        self.scheduled_ready_by = event.scheduled_ready_by
        self.estimated_time = event.estimated_time
        self.group_member_emails = event.group_member_emails
        self.is_multi_stall_sibling = bool(event.is_multi_stall_sibling)

    @apply
    def _on_preparation_started(self, event: OrderPreparationStarted):
        self.status = OrderStatus.PREPARING.value
        self.status_updated_at = event.started_at

    @apply
    def _on_ready_for_pickup(self, event: OrderReadyForPickup):
        self.status = OrderStatus.READY.value
        self.status_updated_at = event.ready_at

    @apply
    def _on_order_completed(self, event: OrderCompleted):
        self.status = OrderStatus.COMPLETED.value
        self.status_updated_at = event.completed_at

    @apply
    def _on_order_cancelled(self, event: OrderCancelled):
        self.status = OrderStatus.CANCELLED.value
        self.status_updated_at = event.cancelled_at
        self.cancelled_at = event.cancelled_at
        self.cancelled_by = event.cancelled_by
        self.cancellation_reason = event.reason
