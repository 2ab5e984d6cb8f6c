"""Penalties bounded context — the administrator's sanction ledger.

Append-only: penalties are issued and read, never edited or withdrawn.
"""

from protean.domain import Domain

from shared.logging import configure_logging, get_logger

configure_logging()

logger = get_logger(__name__)

penalties = Domain(name="penalties")
