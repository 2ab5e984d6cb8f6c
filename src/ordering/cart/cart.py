"""Shopping Cart aggregate (CQRS) — the customer's pending line items.

One cart per customer. Lines may come from any number of stalls; there is no
cross-stall invariant. At checkout the cart is split into one order per stall
and the consumed lines are removed. Lines added while a checkout is running
are not consumed.
"""

import json
from datetime import UTC, datetime
from decimal import Decimal

from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, HasMany, Identifier, Integer, String, Text

from ordering.cart.events import (
    CartLineAdded,
    CartLineQuantityUpdated,
    CartLineRemoved,
    CartLinesConsumed,
)
from ordering.domain import ordering
from ordering.shared.money import line_total, parse_add_ons, to_money


@ordering.entity(part_of="ShoppingCart")
class CartLine:
    """A menu item selection, tagged with the stall that sells it.

    The unit price is the price at the time the item was added; checkout
    freezes it into the order.
    """

    stall_id = Identifier(required=True)
    stall_name = String(max_length=255)
    menu_item_id = Identifier(required=True)
    name = String(required=True, max_length=255)
    unit_price = Float(required=True, min_value=0.0)
    quantity = Integer(required=True, min_value=1)
    add_ons = Text()  # JSON: [{name, price}]
    note = String(max_length=500)
    added_at = DateTime()

    def add_on_list(self):
        return json.loads(self.add_ons) if self.add_ons else []

    def total(self) -> Decimal:
        return line_total(self.unit_price, self.add_on_list(), self.quantity)


@ordering.aggregate
class ShoppingCart:
    customer_id = Identifier(required=True)
    lines = HasMany(CartLine)
    created_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(cls, customer_id):
        now = datetime.now(UTC)
        return cls(
            customer_id=customer_id,
            created_at=now,
            updated_at=now,
        )

    # -------------------------------------------------------------------
    # Line management
    # -------------------------------------------------------------------
    def _find_line(self, line_id):
        line = next((ln for ln in self.lines if str(ln.id) == str(line_id)), None)
        if line is None:
            raise ValidationError({"line_id": ["Line not found in cart"]})
        return line

    def add_line(
        self,
        stall_id,
        menu_item_id,
        name,
        unit_price,
        quantity,
        add_ons=None,
        note=None,
        stall_name=None,
    ):
        """Add a menu item to the cart.

        The same item at the same price with identical add-ons and note merges
        into the existing line instead of creating a duplicate.
        """
        if quantity is None or quantity < 1:
            raise ValidationError({"quantity": ["Quantity must be at least 1"]})

        add_on_list = parse_add_ons(add_ons)
        add_ons_json = json.dumps(add_on_list)

        existing = next(
            (
                ln
                for ln in self.lines
                if str(ln.stall_id) == str(stall_id)
                and str(ln.menu_item_id) == str(menu_item_id)
                and to_money(ln.unit_price) == to_money(unit_price)
                and (ln.add_ons or "[]") == add_ons_json
                and (ln.note or None) == (note or None)
            ),
            None,
        )

        now = datetime.now(UTC)

        if existing:
            existing.quantity += quantity
            line_id = str(existing.id)
            new_quantity = existing.quantity
        else:
            line = CartLine(
                stall_id=stall_id,
                stall_name=stall_name,
                menu_item_id=menu_item_id,
                name=name,
                unit_price=unit_price,
                quantity=quantity,
                add_ons=add_ons_json,
                note=note,
                added_at=now,
            )
            self.add_lines(line)
            line_id = str(line.id)
            new_quantity = quantity

        self.updated_at = now

        self.raise_(
            CartLineAdded(
                cart_id=str(self.id),
                line_id=line_id,
                stall_id=str(stall_id),
                menu_item_id=str(menu_item_id),
                quantity=new_quantity,
                unit_price=unit_price,
            )
        )
        return line_id

    def update_line_quantity(self, line_id, new_quantity):
        """Change a line's quantity. Zero removes the line."""
        if new_quantity is None or new_quantity < 0:
            raise ValidationError({"quantity": ["Quantity cannot be negative"]})

        if new_quantity == 0:
            self.remove_line(line_id)
            return

        line = self._find_line(line_id)
        previous_quantity = line.quantity
        line.quantity = new_quantity
        self.updated_at = datetime.now(UTC)

        self.raise_(
            CartLineQuantityUpdated(
                cart_id=str(self.id),
                line_id=str(line_id),
                previous_quantity=previous_quantity,
                new_quantity=new_quantity,
            )
        )

    def remove_line(self, line_id):
        line = self._find_line(line_id)
        self.remove_lines(line)
        self.updated_at = datetime.now(UTC)

        self.raise_(
            CartLineRemoved(
                cart_id=str(self.id),
                line_id=str(line_id),
            )
        )

    def consume_lines(self, line_ids):
        """Remove the lines that a successful checkout turned into orders.

        Ids no longer present (already consumed by an earlier retry) are
        skipped, so re-running the clear after a failure is safe.
        """
        wanted = {str(line_id) for line_id in line_ids}
        consumed = [ln for ln in self.lines if str(ln.id) in wanted]
        for line in consumed:
            self.remove_lines(line)

        now = datetime.now(UTC)
        self.updated_at = now

        self.raise_(
            CartLinesConsumed(
                cart_id=str(self.id),
                line_ids=json.dumps([str(ln.id) for ln in consumed]),
                consumed_at=now,
            )
        )
        return len(consumed)

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    @property
    def is_empty(self):
        return not self.lines

    def lines_by_stall(self):
        """Group lines by stall.

        Returns a list of ``(stall_id, [lines])`` in order of each stall's
        first appearance, keeping line order inside every group.
        """
        groups: dict[str, list] = {}
        for line in self.lines:
            groups.setdefault(str(line.stall_id), []).append(line)
        return list(groups.items())

    def grand_total(self) -> Decimal:
        return sum((ln.total() for ln in self.lines), Decimal("0.00"))
