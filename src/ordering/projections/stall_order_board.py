"""Stall order board — the live queue a stall owner works from.

One document per order, keyed by order id. Sibling orders show who collects
the cash: ``collects_cash`` is False on every order except the one carrying
the tendered amount, and ``cash_settlement_code`` names that order.
"""

import json

import structlog
from protean.core.projector import on
from protean.exceptions import ObjectNotFoundError
from protean.fields import Boolean, DateTime, Float, Identifier, Integer, String, Text
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
class StallOrderBoard:
    order_id = Identifier(identifier=True, required=True)
    stall_id = Identifier(required=True)
    human_code = String(required=True)
    main_order_id = String()
    customer_id = Identifier(required=True)
    customer_name = String()
    student_id = String()
    status = String(required=True)
    items = Text()  # JSON: [{name, quantity, add_ons, note}]
    item_count = Integer(default=0)
    subtotal = Float()
    payment_method = String()
    collects_cash = Boolean(default=False)
    cash_tendered = Float()
    change_due = Float()
    cash_settlement_code = String()
    special_instructions = Text()
    scheduled_ready_by = DateTime()
    is_multi_stall_sibling = Boolean(default=False)
    cancellation_reason = String()
    created_at = DateTime()
    status_updated_at = DateTime()


@ordering.projector(projector_for=StallOrderBoard, aggregates=[Order])
class StallOrderBoardProjector:
    @on(OrderPlaced)
    def on_order_placed(self, event):
        repo = current_domain.repository_for(StallOrderBoard)
        try:
            repo.get(event.order_id)
            return  # Already projected
        except ObjectNotFoundError:
            pass

        items = json.loads(event.items) if isinstance(event.items, str) else []
        display = json.loads(event.customer_display) if event.customer_display else {}
        repo.add(
            StallOrderBoard(
                order_id=event.order_id,
                stall_id=event.stall_id,
                human_code=event.human_code,
                main_order_id=event.main_order_id,
                customer_id=event.customer_id,
                customer_name=display.get("name"),
                student_id=display.get("student_id"),
                status=OrderStatus.PENDING.value,
                items=json.dumps(
                    [
                        {
                            "name": i["name"],
                            "quantity": i["quantity"],
                            "add_ons": i.get("add_ons") or [],
                            "note": i.get("note"),
                        }
                        for i in items
                    ]
                ),
                item_count=sum(i["quantity"] for i in items),
                subtotal=event.subtotal,
                payment_method=event.payment_method,
                collects_cash=event.cash_tendered is not None,
                cash_tendered=event.cash_tendered,
                change_due=event.change_due,
                cash_settlement_code=event.cash_settlement_code,
                special_instructions=event.special_instructions,
                scheduled_ready_by=event.scheduled_ready_by,
                is_multi_stall_sibling=bool(event.is_multi_stall_sibling),
                created_at=event.created_at,
                status_updated_at=event.created_at,
            )
        )

    def _advance(self, order_id, status, at, **changes):
        repo = current_domain.repository_for(StallOrderBoard)
        try:
            entry = repo.get(order_id)
        except ObjectNotFoundError:
            logger.warning("Status update for unknown board entry", order_id=str(order_id), status=status)
            return

        if not moves_forward(entry.status, status):
            return

        entry.status = status
        entry.status_updated_at = at
        for name, value in changes.items():
            setattr(entry, name, value)
        repo.add(entry)

    @on(OrderPreparationStarted)
    def on_preparation_started(self, event):
        self._advance(event.order_id, OrderStatus.PREPARING.value, event.started_at)

    @on(OrderReadyForPickup)
    def on_ready_for_pickup(self, event):
        self._advance(event.order_id, OrderStatus.READY.value, event.ready_at)

    @on(OrderCompleted)
    def on_order_completed(self, event):
        self._advance(event.order_id, OrderStatus.COMPLETED.value, event.completed_at)

    @on(OrderCancelled)
    def on_order_cancelled(self, event):
        self._advance(
            event.order_id,
            OrderStatus.CANCELLED.value,
            event.cancelled_at,
            cancellation_reason=event.reason,
        )
