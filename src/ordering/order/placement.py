"""Stall order placement — command and handler.

Checkout issues one PlaceStallOrder per stall partition, so each order is its
own atomic write.
"""

import json

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Float, Identifier, String, Text
from protean.utils.globals import current_domain

from ordering.domain import ordering
from ordering.order.order import Order, PaymentMethod


@ordering.command(part_of="Order")
class PlaceStallOrder:
    human_code = String(required=True, max_length=64)
    main_order_id = String(required=True, max_length=64)
    stall_id = Identifier(required=True)
    stall_name = String(max_length=255)
    customer_id = Identifier(required=True)
    customer_display = Text()  # JSON: {name, email, student_id}
    items = Text(required=True)  # JSON: list of line dicts
    subtotal = Float(required=True, min_value=0.0)
    checkout_total = Float(required=True, min_value=0.0)
    payment_method = String(required=True, max_length=10)
    cash_tendered = Float()
    change_due = Float()
    cash_settlement_code = String(max_length=64)
    special_instructions = Text()
    scheduled_ready_by = DateTime()
    estimated_time = String(max_length=50)
    group_member_emails = Text()  # JSON: list of emails
    is_multi_stall_sibling = Boolean(default=False)


def _load_json(raw, field, default):
    if raw is None or raw == "":
        return default
    if not isinstance(raw, str):
        return raw
    try:
        return json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ValidationError({field: ["Malformed JSON"]}) from exc


@ordering.command_handler(part_of=Order)
class PlaceStallOrderHandler:
    @handle(PlaceStallOrder)
    def place_stall_order(self, command):
        items_data = _load_json(command.items, "items", [])
        if not items_data:
            raise ValidationError({"items": ["An order needs at least one line"]})

        if command.payment_method not in {m.value for m in PaymentMethod}:
            raise ValidationError({"payment_method": [f"Unknown payment method: {command.payment_method}"]})

        order = Order.place(
            human_code=command.human_code,
            main_order_id=command.main_order_id,
            stall_id=command.stall_id,
            stall_name=command.stall_name,
            customer_id=command.customer_id,
            customer_display=_load_json(command.customer_display, "customer_display", {}),
            items_data=items_data,
            subtotal=command.subtotal,
            checkout_total=command.checkout_total,
            payment_method=command.payment_method,
            cash_tendered=command.cash_tendered,
            change_due=command.change_due,
            cash_settlement_code=command.cash_settlement_code,
            special_instructions=command.special_instructions,
            scheduled_ready_by=command.scheduled_ready_by,
            estimated_time=command.estimated_time,
            group_member_emails=_load_json(command.group_member_emails, "group_member_emails", None),
            is_multi_stall_sibling=command.is_multi_stall_sibling,
        )
        current_domain.repository_for(Order).add(order)
        return str(order.id)
