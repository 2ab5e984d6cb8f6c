"""Pickup code generation.

The main order id doubles as the customer-facing pickup code: the year, the
last six digits of the epoch milliseconds, and a short random suffix so that
two checkouts in the same millisecond still get different codes. Sibling
orders from a multi-stall checkout append their 1-based stall index.
"""

import os
from datetime import UTC, datetime
from uuid import uuid4

DEFAULT_PREFIX = "UBF"


def code_prefix() -> str:
    return os.getenv("ORDER_CODE_PREFIX", DEFAULT_PREFIX)


def generate_main_order_id(now: datetime | None = None, prefix: str | None = None) -> str:
    now = now or datetime.now(UTC)
    prefix = prefix or code_prefix()
    millis = str(int(now.timestamp() * 1000))[-6:]
    suffix = uuid4().hex[:4].upper()
    return f"{prefix}-{now.year}-{millis}-{suffix}"


def human_code_for(main_order_id: str, stall_index: int, stall_count: int) -> str:
    """Pickup code for the stall at ``stall_index`` (1-based)."""
    if stall_count == 1:
        return main_order_id
    return f"{main_order_id}-{stall_index}"
