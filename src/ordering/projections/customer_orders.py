"""Customer orders — the order history and pickup codes a customer sees."""

import structlog
from protean.core.projector import on
from protean.exceptions import ObjectNotFoundError
from protean.fields import Boolean, DateTime, Float, Identifier, String
from protean.utils.globals import current_domain

from ordering.domain import ordering
from ordering.order.events import (
    OrderCancelled,
    OrderCompleted,
    OrderPlaced,
    OrderPreparationStarted,
    OrderReadyForPickup,
)
from ordering.order.order import Order, OrderStatus
from ordering.projections.status_progress import moves_forward

logger = structlog.get_logger(__name__)


@ordering.projection
class CustomerOrder:
    order_id = Identifier(identifier=True, required=True)
    customer_id = Identifier(required=True)
    main_order_id = String(required=True)
    human_code = String(required=True)
    stall_id = Identifier()
    stall_name = String()
    status = String(required=True)
    subtotal = Float()
    checkout_total = Float()
    payment_method = String()
    change_due = Float()
    estimated_time = String()
    review_eligible = Boolean(default=False)
    cancellation_reason = String()
    created_at = DateTime()
    status_updated_at = DateTime()


@ordering.projector(projector_for=CustomerOrder, aggregates=[Order])
class CustomerOrderProjector:
    @on(OrderPlaced)
    def on_order_placed(self, event):
        repo = current_domain.repository_for(CustomerOrder)
        try:
            repo.get(event.order_id)
            return
        except ObjectNotFoundError:
            pass

        repo.add(
            CustomerOrder(
                order_id=event.order_id,
                customer_id=event.customer_id,
                main_order_id=event.main_order_id,
                human_code=event.human_code,
                stall_id=event.stall_id,
                stall_name=event.stall_name,
                status=OrderStatus.PENDING.value,
                subtotal=event.subtotal,
                checkout_total=event.checkout_total,
                payment_method=event.payment_method,
                change_due=event.change_due,
                estimated_time=event.estimated_time,
                created_at=event.created_at,
                status_updated_at=event.created_at,
            )
        )

    def _advance(self, order_id, status, at, **changes):
        repo = current_domain.repository_for(CustomerOrder)
        try:
            view = repo.get(order_id)
        except ObjectNotFoundError:
            logger.warning("Status update for unknown customer order", order_id=str(order_id), status=status)
            return

        if not moves_forward(view.status, status):
            return

        view.status = status
        view.status_updated_at = at
        for name, value in changes.items():
            setattr(view, name, value)
        repo.add(view)

    @on(OrderPreparationStarted)
    def on_preparation_started(self, event):
        self._advance(event.order_id, OrderStatus.PREPARING.value, event.started_at)

    @on(OrderReadyForPickup)
    def on_ready_for_pickup(self, event):
        self._advance(event.order_id, OrderStatus.READY.value, event.ready_at)

    @on(OrderCompleted)
    def on_order_completed(self, event):
        self._advance(event.order_id, OrderStatus.COMPLETED.value, event.completed_at, review_eligible=True)

    @on(OrderCancelled)
    def on_order_cancelled(self, event):
        self._advance(
            event.order_id,
            OrderStatus.CANCELLED.value,
            event.cancelled_at,
            cancellation_reason=event.reason,
        )
