import json

import pytest
from protean.integrations.pytest import DomainFixture


@pytest.fixture(scope="session")
def ordering_bed():
    from ordering.domain import ordering

    bed = DomainFixture(ordering)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(ordering_bed):
    with ordering_bed.domain_context():
        yield

        from protean import current_domain

        for _, provider in current_domain.providers.items():
            provider._data_reset()
        current_domain.event_store.store._data_reset()


# ---------------------------------------------------------------------------
# Shared builders
#
# Stall "stall-kusina" is owned by "owner-kusina", "stall-brew" by
# "owner-brew". The customer is "stu-2021-0042".
# ---------------------------------------------------------------------------
_STALL_NAMES = {"stall-kusina": "Kusina ni Aling Nena", "stall-brew": "Brew Corner"}


@pytest.fixture()
def stalls():
    """Register both stalls."""
    from ordering.stall.registration import RegisterStall
    from protean import current_domain

    for stall_id, name in _STALL_NAMES.items():
        owner_id = stall_id.replace("stall-", "owner-")
        current_domain.process(
            RegisterStall(stall_id=stall_id, name=name, owner_id=owner_id),
            asynchronous=False,
        )
    return {stall_id: stall_id.replace("stall-", "owner-") for stall_id in _STALL_NAMES}


@pytest.fixture()
def cart_id():
    from ordering.cart.management import CreateCart
    from protean import current_domain

    return current_domain.process(CreateCart(customer_id="stu-2021-0042"), asynchronous=False)


@pytest.fixture()
def add_line():
    """Add a line to a cart through the AddToCart command; returns the line id."""
    from ordering.cart.items import AddToCart
    from protean import current_domain

    def _add(cart_id, stall_id, name, unit_price, quantity, add_ons=None, note=None):
        return current_domain.process(
            AddToCart(
                cart_id=cart_id,
                stall_id=stall_id,
                stall_name=_STALL_NAMES.get(stall_id),
                menu_item_id=f"item-{name.lower().replace(' ', '-')}",
                name=name,
                unit_price=unit_price,
                quantity=quantity,
                add_ons=json.dumps(add_ons or []),
                note=note,
            ),
            asynchronous=False,
        )

    return _add


@pytest.fixture()
def checkout():
    """Run checkout for a cart with a standard customer display."""
    from ordering.checkout.formation import OrderFormationService

    def _checkout(cart_id, cash_tendered=None, payment_method="cash", **kwargs):
        return OrderFormationService().checkout(
            cart_id=cart_id,
            payment_method=payment_method,
            cash_tendered=cash_tendered,
            customer_display={"name": "Juan Dela Cruz", "email": "juan@campus.edu", "student_id": "2021-0042"},
            **kwargs,
        )

    return _checkout


@pytest.fixture()
def load_order():
    from ordering.order.order import Order
    from protean import current_domain

    def _load(order_id):
        return current_domain.repository_for(Order).get(order_id)

    return _load


@pytest.fixture()
def placed_order(stalls, cart_id, add_line, checkout):
    """Id of a single pending order from stall-kusina."""
    add_line(cart_id, "stall-kusina", "Chicken Adobo", 65.0, 1)
    result = checkout(cart_id, cash_tendered=100)
    return result.order_ids[0]


@pytest.fixture()
def process():
    from protean import current_domain

    def _process(command):
        return current_domain.process(command, asynchronous=False)

    return _process
