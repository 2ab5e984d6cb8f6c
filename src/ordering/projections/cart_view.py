"""Cart view — line count and running total for the cart badge."""

import json

from protean.core.projector import on
from protean.exceptions import ObjectNotFoundError
from protean.fields import DateTime, Float, Identifier, Integer, Text
from protean.utils.globals import current_domain

from ordering.cart.cart import ShoppingCart
from ordering.cart.events import (
    CartLineAdded,
    CartLineQuantityUpdated,
    CartLineRemoved,
    CartLinesConsumed,
)
from ordering.domain import ordering


@ordering.projection
class CartView:
    cart_id = Identifier(identifier=True, required=True)
    lines = Text()  # JSON: {line_id: {stall_id, quantity, unit_price}}
    line_count = Integer(default=0)
    item_count = Integer(default=0)
    base_total = Float(default=0.0)  # Before add-ons
    updated_at = DateTime()


def _refresh(view, lines):
    view.lines = json.dumps(lines)
    view.line_count = len(lines)
    view.item_count = sum(line["quantity"] for line in lines.values())
    view.base_total = round(sum(line["quantity"] * line["unit_price"] for line in lines.values()), 2)


@ordering.projector(projector_for=CartView, aggregates=[ShoppingCart])
class CartViewProjector:
    def _load(self, cart_id):
        repo = current_domain.repository_for(CartView)
        try:
            view = repo.get(cart_id)
        except ObjectNotFoundError:
            view = CartView(cart_id=cart_id, lines="{}")
        return repo, view, json.loads(view.lines) if view.lines else {}

    @on(CartLineAdded)
    def on_line_added(self, event):
        repo, view, lines = self._load(event.cart_id)
        # The event carries the line's resulting quantity, so replays converge
        lines[str(event.line_id)] = {
            "stall_id": str(event.stall_id),
            "quantity": event.quantity,
            "unit_price": event.unit_price,
        }
        _refresh(view, lines)
        repo.add(view)

    @on(CartLineQuantityUpdated)
    def on_quantity_updated(self, event):
        repo, view, lines = self._load(event.cart_id)
        if str(event.line_id) in lines:
            lines[str(event.line_id)]["quantity"] = event.new_quantity
        _refresh(view, lines)
        repo.add(view)

    @on(CartLineRemoved)
    def on_line_removed(self, event):
        repo, view, lines = self._load(event.cart_id)
        lines.pop(str(event.line_id), None)
        _refresh(view, lines)
        repo.add(view)

    @on(CartLinesConsumed)
    def on_lines_consumed(self, event):
        repo, view, lines = self._load(event.cart_id)
        for line_id in json.loads(event.line_ids or "[]"):
            lines.pop(str(line_id), None)
        view.updated_at = event.consumed_at
        _refresh(view, lines)
        repo.add(view)
