"""Cart management — commands and handler.

Handles cart creation (one cart per customer) and the post-checkout removal
of consumed lines.
"""

import json

from protean import handle
from protean.fields import Identifier, Text
from protean.utils.globals import current_domain

from ordering.cart.cart import ShoppingCart
from ordering.domain import ordering


@ordering.command(part_of="ShoppingCart")
class CreateCart:
    """Open the customer's cart, or return the one they already have."""

    customer_id = Identifier(required=True)


@ordering.command(part_of="ShoppingCart")
class ConsumeCartLines:
    """Remove lines that checkout has turned into orders."""

    cart_id = Identifier(required=True)
    line_ids = Text(required=True)  # JSON: list of line IDs


@ordering.command_handler(part_of=ShoppingCart)
class ManageCartHandler:
    @handle(CreateCart)
    def create_cart(self, command):
        repo = current_domain.repository_for(ShoppingCart)
        existing = repo._dao.query.filter(customer_id=str(command.customer_id)).all()
        if existing.items:
            return str(existing.items[0].id)

        cart = ShoppingCart.create(customer_id=command.customer_id)
        repo.add(cart)
        return str(cart.id)

    @handle(ConsumeCartLines)
    def consume_cart_lines(self, command):
        repo = current_domain.repository_for(ShoppingCart)
        cart = repo.get(command.cart_id)
        line_ids = json.loads(command.line_ids) if isinstance(command.line_ids, str) else command.line_ids
        consumed = cart.consume_lines(line_ids)
        repo.add(cart)
        return consumed
