"""Application tests for checkout — splitting a cart into stall orders."""

from decimal import Decimal

import pytest
from ordering.cart.cart import ShoppingCart
from ordering.cart.management import ConsumeCartLines
from ordering.domain import ordering
from ordering.errors import PersistenceFailure
from ordering.order.order import Order, OrderStatus
from ordering.order.placement import PlaceStallOrder
from protean import current_domain
from protean.exceptions import ValidationError


class FlakyDomain:
    """Delegates to the ordering domain, failing chosen commands."""

    def __init__(self, fail_on, after=0, error=None):
        self.fail_on = fail_on
        self.after = after
        self.error = error or ConnectionError("document store unavailable")
        self.seen = 0

    def repository_for(self, cls):
        return ordering.repository_for(cls)

    def process(self, command, asynchronous=False):
        if isinstance(command, self.fail_on):
            self.seen += 1
            if self.seen > self.after:
                raise self.error
        return ordering.process(command, asynchronous=asynchronous)


def _orders(result):
    repo = current_domain.repository_for(Order)
    return [repo.get(order_id) for order_id in result.order_ids]


def _cart(cart_id):
    return current_domain.repository_for(ShoppingCart).get(cart_id)


@pytest.fixture()
def two_stall_cart(stalls, cart_id, add_line):
    """stall-kusina: adobo x2 @50; stall-brew: coffee x1 @30."""
    add_line(cart_id, "stall-kusina", "Chicken Adobo", 50.0, 2)
    add_line(cart_id, "stall-brew", "Iced Coffee", 30.0, 1)
    return cart_id


class TestPartitioning:
    def test_single_stall_yields_one_order(self, stalls, cart_id, add_line, checkout):
        add_line(cart_id, "stall-kusina", "Chicken Adobo", 65.0, 1)
        add_line(cart_id, "stall-kusina", "Pancit", 45.0, 1)

        result = checkout(cart_id, cash_tendered=200)

        assert len(result.order_ids) == 1
        assert result.human_codes == [result.main_order_id]
        order = _orders(result)[0]
        assert len(order.items) == 2
        assert not order.is_multi_stall_sibling

    def test_one_order_per_stall_sharing_main_id(self, two_stall_cart, checkout):
        result = checkout(two_stall_cart, cash_tendered=150)

        orders = _orders(result)
        assert len(orders) == 2
        assert {o.main_order_id for o in orders} == {result.main_order_id}
        assert [str(o.stall_id) for o in orders] == ["stall-kusina", "stall-brew"]
        assert result.human_codes == [f"{result.main_order_id}-1", f"{result.main_order_id}-2"]
        assert all(o.is_multi_stall_sibling for o in orders)

    def test_each_order_holds_only_its_stall_lines(self, two_stall_cart, checkout):
        kusina, brew = _orders(checkout(two_stall_cart, cash_tendered=150))
        assert [i.name for i in kusina.items] == ["Chicken Adobo"]
        assert [i.name for i in brew.items] == ["Iced Coffee"]

    def test_orders_start_pending(self, two_stall_cart, checkout):
        for order in _orders(checkout(two_stall_cart, cash_tendered=150)):
            assert order.status == OrderStatus.PENDING.value
            assert order.customer_display.name == "Juan Dela Cruz"

    def test_cart_is_emptied(self, two_stall_cart, checkout):
        result = checkout(two_stall_cart, cash_tendered=150)
        assert result.cart_cleared
        assert _cart(two_stall_cart).is_empty


class TestAmounts:
    def test_two_stall_cash_scenario(self, two_stall_cart, checkout):
        kusina, brew = _orders(checkout(two_stall_cart, cash_tendered=150))

        assert kusina.subtotal == 100.0
        assert brew.subtotal == 30.0
        assert kusina.cash_tendered == 150.0
        assert kusina.change_due == 20.0
        assert brew.cash_tendered is None
        assert brew.change_due is None
        assert kusina.checkout_total == brew.checkout_total == 130.0
        assert brew.cash_settlement_code == kusina.human_code
        assert kusina.collects_cash and not brew.collects_cash

    def test_subtotal_includes_add_ons(self, stalls, cart_id, add_line, checkout):
        add_line(cart_id, "stall-kusina", "Silog", 50.0, 2, add_ons=[{"name": "Egg", "price": 12.5}])

        order = _orders(checkout(cart_id, cash_tendered=125))[0]

        assert order.subtotal == 125.0
        assert order.change_due == 0.0
        assert order.items[0].line_total == 125.0

    def test_subtotal_is_exact_sum_of_lines(self, stalls, cart_id, add_line, checkout):
        add_line(cart_id, "stall-kusina", "Candy", 0.1, 1)
        add_line(cart_id, "stall-kusina", "Gum", 0.2, 1)

        order = _orders(checkout(cart_id, cash_tendered=1))[0]

        assert Decimal(str(order.subtotal)) == Decimal("0.30")
        assert order.change_due == 0.7

    def test_exact_cash_gives_zero_change(self, two_stall_cart, checkout):
        kusina, _ = _orders(checkout(two_stall_cart, cash_tendered=130))
        assert kusina.change_due == 0.0


class TestRejections:
    def test_insufficient_cash(self, two_stall_cart, checkout):
        with pytest.raises(ValidationError) as exc:
            checkout(two_stall_cart, cash_tendered=129.99)

        assert "cash_tendered" in exc.value.messages
        assert len(_cart(two_stall_cart).lines) == 2

    @pytest.mark.parametrize("tendered", [129.995, 150.005])
    def test_fractions_of_a_centavo_are_rejected(self, two_stall_cart, checkout, tendered):
        with pytest.raises(ValidationError) as exc:
            checkout(two_stall_cart, cash_tendered=tendered)

        assert "cash_tendered" in exc.value.messages
        assert len(_cart(two_stall_cart).lines) == 2

    def test_cash_required(self, two_stall_cart, checkout):
        with pytest.raises(ValidationError):
            checkout(two_stall_cart, cash_tendered=None)

    def test_empty_cart(self, cart_id, checkout):
        with pytest.raises(ValidationError) as exc:
            checkout(cart_id, cash_tendered=100)
        assert "cart" in exc.value.messages

    @pytest.mark.parametrize("method", ["gcash", "maya"])
    def test_e_wallets_not_available(self, two_stall_cart, checkout, method):
        with pytest.raises(ValidationError) as exc:
            checkout(two_stall_cart, cash_tendered=150, payment_method=method)
        assert "payment_method" in exc.value.messages

    def test_unknown_payment_method(self, two_stall_cart, checkout):
        with pytest.raises(ValidationError):
            checkout(two_stall_cart, cash_tendered=150, payment_method="bitcoin")

    def test_malformed_group_members(self, two_stall_cart, checkout):
        with pytest.raises(ValidationError):
            checkout(two_stall_cart, cash_tendered=150, group_member_emails="everyone")


class TestPartialFailure:
    def test_order_write_failure_keeps_cart(self, two_stall_cart, checkout, monkeypatch):
        monkeypatch.setattr(
            "ordering.checkout.formation.current_domain",
            FlakyDomain(fail_on=PlaceStallOrder, after=1),
        )

        with pytest.raises(PersistenceFailure) as exc:
            checkout(two_stall_cart, cash_tendered=150)

        assert len(exc.value.persisted_order_ids) == 1
        assert len(_cart(two_stall_cart).lines) == 2

    def test_rejected_order_is_not_reported_as_store_failure(self, two_stall_cart, checkout, monkeypatch):
        monkeypatch.setattr(
            "ordering.checkout.formation.current_domain",
            FlakyDomain(
                fail_on=PlaceStallOrder,
                after=1,
                error=ValidationError({"items": ["Order items must be a JSON list"]}),
            ),
        )

        with pytest.raises(ValidationError) as exc:
            checkout(two_stall_cart, cash_tendered=150)

        assert "items" in exc.value.messages
        assert len(_cart(two_stall_cart).lines) == 2

    def test_cart_clear_failure_keeps_orders(self, two_stall_cart, checkout, monkeypatch):
        monkeypatch.setattr(
            "ordering.checkout.formation.current_domain",
            FlakyDomain(fail_on=ConsumeCartLines),
        )

        result = checkout(two_stall_cart, cash_tendered=150)

        assert not result.cart_cleared
        assert len(_orders(result)) == 2
        assert len(_cart(two_stall_cart).lines) == 2


class TestExtras:
    def test_instructions_and_group_members_are_kept(self, stalls, cart_id, add_line, checkout):
        add_line(cart_id, "stall-kusina", "Chicken Adobo", 65.0, 1)

        order = _orders(
            checkout(
                cart_id,
                cash_tendered=100,
                special_instructions="Pick up at 12:30",
                group_member_emails=["ana@campus.edu", "ben@campus.edu"],
            )
        )[0]

        assert order.special_instructions == "Pick up at 12:30"
        assert "ana@campus.edu" in order.group_member_emails
        assert order.estimated_time == "15-40 mins"
