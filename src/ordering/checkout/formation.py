"""Order formation — turns a multi-stall cart into one order per stall.

Checkout validates payment once against the combined total, splits the cart
by stall, and places each partition through its own PlaceStallOrder command.
Only when every order is stored are the consumed cart lines removed.

Cash allocation: the first stall's order carries the tendered cash and the
change for the whole checkout. Sibling orders carry neither, and every order
records ``cash_settlement_code`` (the first order's pickup code) so each stall
knows which counter collects the money.
"""

import json
from dataclasses import dataclass, field
from decimal import Decimal

import structlog
from protean.exceptions import ValidationError
from protean.utils.globals import current_domain

from ordering.cart.cart import ShoppingCart
from ordering.cart.management import ConsumeCartLines
from ordering.errors import PersistenceFailure
from ordering.order.codes import generate_main_order_id, human_code_for
from ordering.order.order import PaymentMethod
from ordering.order.placement import PlaceStallOrder
from ordering.shared.money import as_float, to_exact_money

logger = structlog.get_logger(__name__)

# Recognised by the storefront but not yet accepted at checkout
UNAVAILABLE_PAYMENT_METHODS = {PaymentMethod.GCASH, PaymentMethod.MAYA}


@dataclass
class CheckoutResult:
    main_order_id: str
    order_ids: list[str] = field(default_factory=list)
    human_codes: list[str] = field(default_factory=list)
    cart_cleared: bool = True


def _payment_method(value) -> PaymentMethod:
    try:
        method = PaymentMethod(value)
    except ValueError as exc:
        raise ValidationError({"payment_method": [f"Unknown payment method: {value}"]}) from exc
    if method in UNAVAILABLE_PAYMENT_METHODS:
        raise ValidationError({"payment_method": [f"{method.value} payments are not available yet"]})
    return method


def _group_member_emails(emails) -> list[str] | None:
    if not emails:
        return None
    if not isinstance(emails, list | tuple) or not all(isinstance(e, str) and e.strip() for e in emails):
        raise ValidationError({"group_member_emails": ["Group members must be a list of emails"]})
    return [e.strip() for e in emails]


def _order_lines(lines) -> tuple[list[dict], Decimal]:
    """Freeze cart lines into order line dicts and total them."""
    items = []
    subtotal = Decimal("0.00")
    for line in lines:
        total = line.total()
        subtotal += total
        items.append(
            {
                "menu_item_id": str(line.menu_item_id),
                "name": line.name,
                "quantity": line.quantity,
                "unit_price": line.unit_price,
                "add_ons": line.add_on_list(),
                "note": line.note,
                "line_total": as_float(total),
            }
        )
    return items, subtotal


class OrderFormationService:
    """Checkout for a customer's cart."""

    def checkout(
        self,
        cart_id,
        payment_method,
        customer_display=None,
        cash_tendered=None,
        special_instructions=None,
        scheduled_ready_by=None,
        group_member_emails=None,
    ) -> CheckoutResult:
        cart = current_domain.repository_for(ShoppingCart).get(cart_id)
        if cart.is_empty:
            raise ValidationError({"cart": ["Cart is empty"]})

        method = _payment_method(payment_method)
        emails = _group_member_emails(group_member_emails)

        combined_total = cart.grand_total()
        tendered = None
        change = None
        if method == PaymentMethod.CASH:
            if cash_tendered is None:
                raise ValidationError({"cash_tendered": ["Cash amount is required for cash payments"]})
            tendered = to_exact_money(cash_tendered, "cash_tendered")
            if tendered < combined_total:
                raise ValidationError(
                    {"cash_tendered": [f"Cash tendered {tendered} is less than the total {combined_total}"]}
                )
            change = tendered - combined_total

        partitions = cart.lines_by_stall()
        main_order_id = generate_main_order_id()
        stall_count = len(partitions)
        settlement_code = human_code_for(main_order_id, 1, stall_count)
        consumed_line_ids = [str(line.id) for _, lines in partitions for line in lines]

        result = CheckoutResult(main_order_id=main_order_id)

        for index, (stall_id, lines) in enumerate(partitions, start=1):
            items, subtotal = _order_lines(lines)
            human_code = human_code_for(main_order_id, index, stall_count)
            first = index == 1

            command = PlaceStallOrder(
                human_code=human_code,
                main_order_id=main_order_id,
                stall_id=stall_id,
                stall_name=lines[0].stall_name,
                customer_id=str(cart.customer_id),
                customer_display=json.dumps(customer_display or {}),
                items=json.dumps(items),
                subtotal=as_float(subtotal),
                checkout_total=as_float(combined_total),
                payment_method=method.value,
                cash_tendered=as_float(tendered) if first and tendered is not None else None,
                change_due=as_float(change) if first and change is not None else None,
                cash_settlement_code=settlement_code if method == PaymentMethod.CASH else None,
                special_instructions=special_instructions,
                scheduled_ready_by=scheduled_ready_by,
                group_member_emails=json.dumps(emails) if emails else None,
                is_multi_stall_sibling=stall_count > 1,
            )

            try:
                order_id = current_domain.process(command, asynchronous=False)
            except ValidationError:
                logger.error(
                    "Stall order rejected",
                    main_order_id=main_order_id,
                    human_code=human_code,
                    persisted_order_ids=result.order_ids,
                )
                raise
            except Exception as exc:
                logger.error(
                    "Stall order could not be stored",
                    main_order_id=main_order_id,
                    human_code=human_code,
                    persisted_order_ids=result.order_ids,
                    error=str(exc),
                )
                raise PersistenceFailure(
                    {"order": [f"Could not store order {human_code}: {exc}"]},
                    persisted_order_ids=result.order_ids,
                ) from exc

            result.order_ids.append(order_id)
            result.human_codes.append(human_code)

        try:
            current_domain.process(
                ConsumeCartLines(cart_id=str(cart.id), line_ids=json.dumps(consumed_line_ids)),
                asynchronous=False,
            )
        except Exception as exc:
            # The orders stand; the caller retries the clear, never the orders
            logger.error(
                "Cart could not be cleared after checkout",
                cart_id=str(cart.id),
                main_order_id=main_order_id,
                error=str(exc),
            )
            result.cart_cleared = False

        logger.info(
            "Checkout complete",
            cart_id=str(cart.id),
            main_order_id=main_order_id,
            order_count=len(result.order_ids),
            total=str(combined_total),
        )
        return result
