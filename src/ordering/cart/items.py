"""Cart line management — commands and handler."""

from protean import handle
from protean.fields import Float, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from ordering.cart.cart import ShoppingCart
from ordering.domain import ordering


@ordering.command(part_of="ShoppingCart")
class AddToCart:
    cart_id = Identifier(required=True)
    stall_id = Identifier(required=True)
    stall_name = String(max_length=255)
    menu_item_id = Identifier(required=True)
    name = String(required=True, max_length=255)
    unit_price = Float(required=True, min_value=0.0)
    quantity = Integer(required=True, min_value=1)
    add_ons = Text()  # JSON: [{name, price}]
    note = String(max_length=500)


@ordering.command(part_of="ShoppingCart")
class UpdateCartQuantity:
    """Set a line's quantity; zero removes the line."""

    cart_id = Identifier(required=True)
    line_id = Identifier(required=True)
    new_quantity = Integer(required=True, min_value=0)


@ordering.command(part_of="ShoppingCart")
class RemoveFromCart:
    cart_id = Identifier(required=True)
    line_id = Identifier(required=True)


@ordering.command_handler(part_of=ShoppingCart)
class ManageCartLinesHandler:
    @handle(AddToCart)
    def add_to_cart(self, command):
        repo = current_domain.repository_for(ShoppingCart)
        cart = repo.get(command.cart_id)
        line_id = cart.add_line(
            stall_id=command.stall_id,
            stall_name=command.stall_name,
            menu_item_id=command.menu_item_id,
            name=command.name,
            unit_price=command.unit_price,
            quantity=command.quantity,
            add_ons=command.add_ons,
            note=command.note,
        )
        repo.add(cart)
        return line_id

    @handle(UpdateCartQuantity)
    def update_cart_quantity(self, command):
        repo = current_domain.repository_for(ShoppingCart)
        cart = repo.get(command.cart_id)
        cart.update_line_quantity(
            line_id=command.line_id,
            new_quantity=command.new_quantity,
        )
        repo.add(cart)

    @handle(RemoveFromCart)
    def remove_from_cart(self, command):
        repo = current_domain.repository_for(ShoppingCart)
        cart = repo.get(command.cart_id)
        cart.remove_line(line_id=command.line_id)
        repo.add(cart)
