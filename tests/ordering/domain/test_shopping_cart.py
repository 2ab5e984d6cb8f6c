"""Tests for the ShoppingCart aggregate — lines, merging, stall grouping and totals."""

from decimal import Decimal

import pytest
from ordering.cart.cart import ShoppingCart
from ordering.cart.events import CartLineAdded, CartLineQuantityUpdated, CartLineRemoved, CartLinesConsumed
from protean.exceptions import ValidationError


def _cart():
    cart = ShoppingCart.create(customer_id="stu-001")
    cart._events.clear()
    return cart


def _add(cart, stall_id="stall-a", menu_item_id="item-1", name="Adobo", unit_price=50.0, quantity=1, **kwargs):
    return cart.add_line(
        stall_id=stall_id,
        menu_item_id=menu_item_id,
        name=name,
        unit_price=unit_price,
        quantity=quantity,
        **kwargs,
    )


class TestAddLine:
    def test_new_line_is_added(self):
        cart = _cart()
        line_id = _add(cart, quantity=2)

        assert len(cart.lines) == 1
        assert str(cart.lines[0].id) == line_id
        assert cart.lines[0].quantity == 2

    def test_raises_line_added_event(self):
        cart = _cart()
        _add(cart, quantity=2)

        assert len(cart._events) == 1
        event = cart._events[0]
        assert isinstance(event, CartLineAdded)
        assert event.quantity == 2
        assert event.stall_id == "stall-a"

    def test_same_item_with_same_add_ons_merges(self):
        cart = _cart()
        first = _add(cart, quantity=1, add_ons=[{"name": "Egg", "price": 10}])
        second = _add(cart, quantity=2, add_ons=[{"name": "Egg", "price": 10}])

        assert first == second
        assert len(cart.lines) == 1
        assert cart.lines[0].quantity == 3

    def test_different_add_ons_make_a_separate_line(self):
        cart = _cart()
        _add(cart, add_ons=[{"name": "Egg", "price": 10}])
        _add(cart, add_ons=[{"name": "Rice", "price": 15}])

        assert len(cart.lines) == 2

    def test_different_note_makes_a_separate_line(self):
        cart = _cart()
        _add(cart, note="No onions")
        _add(cart)

        assert len(cart.lines) == 2

    def test_price_change_makes_a_separate_line(self):
        cart = _cart()
        _add(cart, unit_price=50.0, quantity=1)
        _add(cart, unit_price=55.0, quantity=2)

        assert len(cart.lines) == 2
        assert cart.grand_total() == Decimal("160.00")

    def test_zero_quantity_rejected(self):
        cart = _cart()
        with pytest.raises(ValidationError) as exc:
            _add(cart, quantity=0)
        assert "quantity" in exc.value.messages

    def test_malformed_add_ons_rejected(self):
        cart = _cart()
        with pytest.raises(ValidationError) as exc:
            _add(cart, add_ons="not json")
        assert "add_ons" in exc.value.messages

    def test_negative_add_on_price_rejected(self):
        cart = _cart()
        with pytest.raises(ValidationError):
            _add(cart, add_ons=[{"name": "Egg", "price": -5}])


class TestUpdateQuantity:
    def test_quantity_changes(self):
        cart = _cart()
        line_id = _add(cart)
        cart._events.clear()

        cart.update_line_quantity(line_id, 4)

        assert cart.lines[0].quantity == 4
        assert isinstance(cart._events[0], CartLineQuantityUpdated)
        assert cart._events[0].previous_quantity == 1

    def test_zero_removes_the_line(self):
        cart = _cart()
        line_id = _add(cart)
        cart._events.clear()

        cart.update_line_quantity(line_id, 0)

        assert cart.is_empty
        assert isinstance(cart._events[0], CartLineRemoved)

    def test_negative_quantity_rejected(self):
        cart = _cart()
        line_id = _add(cart)
        with pytest.raises(ValidationError):
            cart.update_line_quantity(line_id, -1)

    def test_unknown_line_rejected(self):
        cart = _cart()
        with pytest.raises(ValidationError) as exc:
            cart.update_line_quantity("missing", 2)
        assert "line_id" in exc.value.messages


class TestRemoveAndConsume:
    def test_remove_line(self):
        cart = _cart()
        line_id = _add(cart)
        cart.remove_line(line_id)
        assert cart.is_empty

    def test_consume_removes_only_listed_lines(self):
        cart = _cart()
        consumed = _add(cart, menu_item_id="item-1")
        survivor = _add(cart, menu_item_id="item-2")
        cart._events.clear()

        count = cart.consume_lines([consumed])

        assert count == 1
        assert [str(ln.id) for ln in cart.lines] == [survivor]
        assert isinstance(cart._events[0], CartLinesConsumed)

    def test_consume_skips_lines_already_gone(self):
        cart = _cart()
        line_id = _add(cart)
        cart.consume_lines([line_id])

        assert cart.consume_lines([line_id]) == 0


class TestGroupingAndTotals:
    def test_lines_grouped_by_stall_in_first_appearance_order(self):
        cart = _cart()
        _add(cart, stall_id="stall-b", menu_item_id="coffee", name="Coffee")
        _add(cart, stall_id="stall-a", menu_item_id="adobo", name="Adobo")
        _add(cart, stall_id="stall-b", menu_item_id="tea", name="Tea")

        groups = cart.lines_by_stall()

        assert [stall_id for stall_id, _ in groups] == ["stall-b", "stall-a"]
        assert [ln.name for ln in groups[0][1]] == ["Coffee", "Tea"]

    def test_grand_total_includes_add_ons(self):
        cart = _cart()
        _add(cart, unit_price=50.0, quantity=2, add_ons=[{"name": "Egg", "price": 10}])
        _add(cart, stall_id="stall-b", menu_item_id="tea", unit_price=30.0, quantity=1)

        assert cart.grand_total() == Decimal("150.00")

    def test_grand_total_is_exact_for_fractional_prices(self):
        cart = _cart()
        _add(cart, menu_item_id="a", unit_price=0.1, quantity=1)
        _add(cart, menu_item_id="b", unit_price=0.2, quantity=1)

        assert cart.grand_total() == Decimal("0.30")
