"""Penalty ledger queries and the live account standing derived from them."""

from dataclasses import dataclass
from datetime import UTC, datetime
from enum import Enum

from protean.utils.globals import current_domain

from penalties.penalty.penalty import Penalty, PenaltyType


class Standing(Enum):
    GOOD = "good"
    WARNED = "warned"
    SUSPENDED = "suspended"
    BANNED = "banned"


@dataclass
class AccountStanding:
    user_id: str
    standing: Standing
    suspended_until: datetime | None = None
    warning_count: int = 0
    penalty_count: int = 0

    @property
    def can_order(self) -> bool:
        return self.standing not in (Standing.SUSPENDED, Standing.BANNED)


def _newest_first(penalties: list[Penalty]) -> list[Penalty]:
    return sorted(penalties, key=lambda p: p.issued_at, reverse=True)


def penalties_for_user(user_id) -> list[Penalty]:
    results = current_domain.repository_for(Penalty)._dao.query.filter(target_user_id=str(user_id)).all()
    return _newest_first(results.items)


def active_penalties() -> list[Penalty]:
    """Penalties flagged active at issuance, expired suspensions included."""
    results = current_domain.repository_for(Penalty)._dao.query.filter(is_active=True).all()
    return _newest_first(results.items)


def account_standing(user_id, as_of: datetime | None = None) -> AccountStanding:
    """Compute the user's standing at ``as_of`` from the ledger.

    Suspension state comes from ``expires_at``, not from ``is_active``.
    """
    as_of = as_of or datetime.now(UTC)
    history = penalties_for_user(user_id)
    in_force = [p for p in history if p.is_in_force(as_of)]
    warnings = sum(1 for p in history if p.penalty_type == PenaltyType.WARNING.value)

    standing = Standing.WARNED if warnings else Standing.GOOD
    suspended_until = None
    if any(p.penalty_type == PenaltyType.BAN.value for p in in_force):
        standing = Standing.BANNED
    else:
        suspensions = [p.expires_at for p in in_force if p.penalty_type == PenaltyType.SUSPENSION.value]
        if suspensions:
            standing = Standing.SUSPENDED
            suspended_until = max(suspensions)

    return AccountStanding(
        user_id=str(user_id),
        standing=standing,
        suspended_until=suspended_until,
        warning_count=warnings,
        penalty_count=len(history),
    )
