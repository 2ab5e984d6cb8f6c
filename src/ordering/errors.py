"""Ordering-specific failures beyond Protean's ValidationError.

All of them subclass InvalidOperationError and carry a ``{field: [message]}``
mapping, the same shape Protean uses for its own errors.
"""

from protean.exceptions import InvalidOperationError


class IllegalTransition(InvalidOperationError):
    """The requested status change is not in the order state machine."""


class RaceConditionConflict(InvalidOperationError):
    """The order moved on concurrently; the precondition no longer holds."""


class AlreadyResolved(InvalidOperationError):
    """The cancellation request already received its one response."""


class PersistenceFailure(InvalidOperationError):
    """A write to the store failed. Retryable; no local compensation exists."""

    def __init__(self, messages, persisted_order_ids=None, **kwargs):
        super().__init__(messages, **kwargs)
        self.persisted_order_ids = list(persisted_order_ids or [])
