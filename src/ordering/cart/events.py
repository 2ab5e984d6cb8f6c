"""Domain events for the ShoppingCart aggregate."""

from protean.fields import DateTime, Float, Identifier, Integer, Text

from ordering.domain import ordering


@ordering.event(part_of="ShoppingCart")
class CartLineAdded:
    """A menu item was added to the cart (or merged into an existing line)."""

    __version__ = 1

    cart_id = Identifier(required=True)
    line_id = Identifier(required=True)
    stall_id = Identifier(required=True)
    menu_item_id = Identifier(required=True)
    quantity = Integer(required=True)
    unit_price = Float(required=True)


@ordering.event(part_of="ShoppingCart")
class CartLineQuantityUpdated:
    """The quantity of a cart line changed."""

    __version__ = 1

    cart_id = Identifier(required=True)
    line_id = Identifier(required=True)
    previous_quantity = Integer(required=True)
    new_quantity = Integer(required=True)


@ordering.event(part_of="ShoppingCart")
class CartLineRemoved:
    """A line was removed explicitly or by reducing its quantity to zero."""

    __version__ = 1

    cart_id = Identifier(required=True)
    line_id = Identifier(required=True)


@ordering.event(part_of="ShoppingCart")
class CartLinesConsumed:
    """Lines were turned into orders by a successful checkout."""

    __version__ = 1

    cart_id = Identifier(required=True)
    line_ids = Text(required=True)  # JSON: list of line IDs
    consumed_at = DateTime(required=True)
