"""Shared BDD fixtures and step definitions for the Ordering domain."""

import pytest
from ordering.cancellation.arbitration import ApproveCancellationRequest, DeclineCancellationRequest
from ordering.cancellation.request import CancellationRequest
from ordering.cancellation.submission import SubmitCancellationRequest
from ordering.cart.cart import ShoppingCart
from ordering.errors import AlreadyResolved, IllegalTransition
from ordering.order.lifecycle import CancelOrder, CompleteOrder, MarkReady, StartPreparing
from ordering.order.order import Order
from protean import current_domain
from protean.exceptions import ValidationError
from pytest_bdd import given, parsers, then, when

CUSTOMER = "stu-2021-0042"


@pytest.fixture()
def world():
    """Mutable scenario state shared between steps."""
    return {"error": None}


def _attempt(world, command):
    try:
        return current_domain.process(command, asynchronous=False)
    except (ValidationError, IllegalTransition, AlreadyResolved) as exc:
        world["error"] = exc
        return None


def _order(world):
    return current_domain.repository_for(Order).get(world["order_id"])


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse('the stalls "{first}" and "{second}" are registered'))
def _(stalls, cart_id, world):
    world["cart_id"] = cart_id


@given(parsers.cfparse('the cart holds {quantity:d} "{name}" at {price:f} from "{stall_id}"'))
def _(world, add_line, quantity, name, price, stall_id):
    add_line(world["cart_id"], stall_id, name, price, quantity)


@given(parsers.cfparse('a pending order from "{stall_id}"'))
def _(world, add_line, checkout, stall_id):
    add_line(world["cart_id"], stall_id, "Chicken Adobo", 65.0, 1)
    world["order_id"] = checkout(world["cart_id"], cash_tendered=100).order_ids[0]


@given(parsers.cfparse('the order was made ready by "{owner}"'))
def _(world, owner):
    current_domain.process(StartPreparing(order_id=world["order_id"], actor_id=owner), asynchronous=False)
    current_domain.process(MarkReady(order_id=world["order_id"], actor_id=owner), asynchronous=False)


@given(parsers.cfparse('the customer asked to cancel because "{category}"'))
def _(world, category):
    world["request_id"] = current_domain.process(
        SubmitCancellationRequest(
            order_id=world["order_id"],
            customer_id=CUSTOMER,
            reason_category=category,
            explanation="Please cancel my order",
        ),
        asynchronous=False,
    )


@given(parsers.cfparse('"{owner}" approved the request'))
def _(world, owner):
    current_domain.process(
        ApproveCancellationRequest(request_id=world["request_id"], responder_id=owner),
        asynchronous=False,
    )


# ---------------------------------------------------------------------------
# When steps
# ---------------------------------------------------------------------------
@when(parsers.cfparse("the customer checks out paying {cash:f} in cash"))
def _(world, checkout, cash):
    try:
        world["result"] = checkout(world["cart_id"], cash_tendered=cash)
    except ValidationError as exc:
        world["error"] = exc


@when(parsers.cfparse('"{owner}" starts preparing the order'))
def _(world, owner):
    _attempt(world, StartPreparing(order_id=world["order_id"], actor_id=owner))


@when(parsers.cfparse('"{owner}" marks the order ready'))
def _(world, owner):
    _attempt(world, MarkReady(order_id=world["order_id"], actor_id=owner))


@when(parsers.cfparse('"{owner}" completes the order'))
def _(world, owner):
    _attempt(world, CompleteOrder(order_id=world["order_id"], actor_id=owner))


@when(parsers.cfparse('"{owner}" cancels the order because "{reason}"'))
def _(world, owner, reason):
    _attempt(world, CancelOrder(order_id=world["order_id"], actor_id=owner, reason=reason))


@when(parsers.cfparse('the customer asks to cancel because "{category}"'))
def _(world, category):
    world["request_id"] = _attempt(
        world,
        SubmitCancellationRequest(
            order_id=world["order_id"],
            customer_id=CUSTOMER,
            reason_category=category,
            explanation="Please cancel my order",
        ),
    )


@when(parsers.cfparse('"{owner}" approves the request'))
def _(world, owner):
    _attempt(world, ApproveCancellationRequest(request_id=world["request_id"], responder_id=owner))


@when(parsers.re(r'"(?P<owner>[^"]+)" declines the request saying "(?P<reason>[^"]*)"'))
def _(world, owner, reason):
    _attempt(
        world,
        DeclineCancellationRequest(request_id=world["request_id"], responder_id=owner, response_reason=reason),
    )


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
def _orders(world):
    repo = current_domain.repository_for(Order)
    return {str(o.stall_id): o for o in (repo.get(i) for i in world["result"].order_ids)}


@then(parsers.cfparse("{count:d} orders are placed under one main order id"))
def _(world, count):
    orders = _orders(world)
    assert len(orders) == count
    assert {o.main_order_id for o in orders.values()} == {world["result"].main_order_id}


@then(parsers.cfparse('the "{stall_id}" order has subtotal {subtotal:f}'))
def _(world, stall_id, subtotal):
    assert _orders(world)[stall_id].subtotal == pytest.approx(subtotal)


@then(parsers.cfparse('the "{stall_id}" order collects {cash:f} and gives {change:f} change'))
def _(world, stall_id, cash, change):
    order = _orders(world)[stall_id]
    assert order.cash_tendered == pytest.approx(cash)
    assert order.change_due == pytest.approx(change)


@then(parsers.cfparse('the "{stall_id}" order collects no cash'))
def _(world, stall_id):
    order = _orders(world)[stall_id]
    assert order.cash_tendered is None
    assert order.change_due is None
    assert order.cash_settlement_code == world["result"].human_codes[0]


@then("the cart is empty")
def _(world):
    assert current_domain.repository_for(ShoppingCart).get(world["cart_id"]).is_empty


@then(parsers.cfparse("the cart still holds {count:d} lines"))
def _(world, count):
    assert len(current_domain.repository_for(ShoppingCart).get(world["cart_id"]).lines) == count


@then("checkout is rejected with a validation error")
def _(world):
    assert isinstance(world["error"], ValidationError)


@then("the action is rejected with a validation error")
def _(world):
    assert isinstance(world["error"], ValidationError)


@then("the action is rejected as an illegal transition")
def _(world):
    assert isinstance(world["error"], IllegalTransition)


@then("the action is rejected as already resolved")
def _(world):
    assert isinstance(world["error"], AlreadyResolved)


@then(parsers.cfparse('the order status is "{status}"'))
def _(world, status):
    assert _order(world).status == status


@then(parsers.cfparse('the request status is "{status}"'))
def _(world, status):
    assert current_domain.repository_for(CancellationRequest).get(world["request_id"]).status == status


@then(parsers.cfparse('the customer was told "{titles}"'))
def _(notifier, titles):
    assert [n["title"] for n in notifier.sent_to(CUSTOMER)] == titles.split(", ")
