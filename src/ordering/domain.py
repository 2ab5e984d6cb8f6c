"""Ordering bounded context — carts, stall orders and cancellation requests.

Handles the shopping cart (CQRS), checkout that splits a cart into one order
per stall, the order lifecycle (event-sourced), and the customer/stall-owner
cancellation request workflow.
"""

from protean.domain import Domain

from shared.logging import configure_logging, get_logger

configure_logging()

logger = get_logger(__name__)

ordering = Domain(name="ordering")
