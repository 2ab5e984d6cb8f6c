"""Order lifecycle — stall-side status commands and handler.

Each handler reloads the order inside its own unit of work and validates the
transition against the stored status. ``expected_status`` lets a client say
which status it saw; if another actor moved the order first, the command
fails with RaceConditionConflict instead of silently applying on top.
"""

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from ordering.domain import ordering
from ordering.errors import RaceConditionConflict
from ordering.order.order import ActorRole, Order, actor_role
from ordering.stall.stall import assert_stall_owner

logger = structlog.get_logger(__name__)


@ordering.command(part_of="Order")
class StartPreparing:
    order_id = Identifier(required=True)
    actor_id = Identifier(required=True)
    actor_role = String(max_length=20, default=ActorRole.STALL_OWNER.value)
    expected_status = String(max_length=20)


@ordering.command(part_of="Order")
class MarkReady:
    order_id = Identifier(required=True)
    actor_id = Identifier(required=True)
    actor_role = String(max_length=20, default=ActorRole.STALL_OWNER.value)
    expected_status = String(max_length=20)


@ordering.command(part_of="Order")
class CompleteOrder:
    order_id = Identifier(required=True)
    actor_id = Identifier(required=True)
    actor_role = String(max_length=20, default=ActorRole.STALL_OWNER.value)
    expected_status = String(max_length=20)


@ordering.command(part_of="Order")
class CancelOrder:
    order_id = Identifier(required=True)
    reason = String(required=True, max_length=500)
    actor_id = Identifier(required=True)
    actor_role = String(max_length=20, default=ActorRole.STALL_OWNER.value)
    expected_status = String(max_length=20)


@ordering.command_handler(part_of=Order)
class OrderLifecycleHandler:
    def _load(self, command):
        """Fetch the order, check the caller owns its stall and that their view of it still holds."""
        role = actor_role(command.actor_role or ActorRole.STALL_OWNER.value)
        # System cancellations only come from an approved cancellation request
        if role != ActorRole.STALL_OWNER:
            raise ValidationError({"actor_role": [f"A {role.value} cannot change an order's status directly"]})

        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)

        if command.expected_status and order.status != command.expected_status:
            raise RaceConditionConflict(
                {
                    "status": [
                        f"Order {order.human_code} is {order.status}, expected {command.expected_status}"
                    ]
                }
            )

        assert_stall_owner(order.stall_id, command.actor_id)
        return repo, order, role

    @handle(StartPreparing)
    def start_preparing(self, command):
        repo, order, role = self._load(command)
        order.start_preparing(actor_id=command.actor_id, role=role)
        repo.add(order)
        logger.info("Order preparing", order_id=str(order.id), human_code=order.human_code)

    @handle(MarkReady)
    def mark_ready(self, command):
        repo, order, role = self._load(command)
        order.mark_ready(actor_id=command.actor_id, role=role)
        repo.add(order)
        logger.info("Order ready for pickup", order_id=str(order.id), human_code=order.human_code)

    @handle(CompleteOrder)
    def complete_order(self, command):
        repo, order, role = self._load(command)
        order.complete(actor_id=command.actor_id, role=role)
        repo.add(order)
        logger.info("Order completed", order_id=str(order.id), human_code=order.human_code)

    @handle(CancelOrder)
    def cancel_order(self, command):
        repo, order, role = self._load(command)
        order.cancel(reason=command.reason, cancelled_by=command.actor_id, role=role)
        repo.add(order)
        logger.info(
            "Order cancelled",
            order_id=str(order.id),
            human_code=order.human_code,
            cancelled_via=role.value,
        )
