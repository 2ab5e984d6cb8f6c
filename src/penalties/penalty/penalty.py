"""Penalty aggregate (CQRS) — a sanction an administrator records against a user.

Penalties are immutable once issued. ``is_active`` is set at issuance and is
informational only: nothing flips it when a suspension runs out, so anything
that needs the live state compares ``expires_at`` with the current time (see
``is_in_force``).
"""

from datetime import UTC, datetime, timedelta
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Identifier, Integer, String, Text

from penalties.domain import penalties
from penalties.penalty.events import PenaltyIssued

ADMIN_ROLE = "admin"


class PenaltyType(Enum):
    WARNING = "warning"
    SUSPENSION = "suspension"
    BAN = "ban"


@penalties.aggregate
class Penalty:
    target_user_id = Identifier(required=True)
    target_name = String(max_length=255)
    target_email = String(max_length=255)
    target_student_id = String(max_length=50)
    penalty_type = String(required=True, choices=PenaltyType)
    reason = String(required=True, max_length=255)
    description = Text()
    related_order_id = Identifier()
    issued_by = Identifier(required=True)
    issued_at = DateTime(required=True)
    duration_days = Integer(min_value=1)
    expires_at = DateTime()
    is_active = Boolean(default=True)

    @classmethod
    def issue(
        cls,
        target_user_id,
        penalty_type,
        reason,
        issued_by,
        issuer_role,
        description=None,
        related_order_id=None,
        duration_days=None,
        target_name=None,
        target_email=None,
        target_student_id=None,
    ):
        if issuer_role != ADMIN_ROLE:
            raise ValidationError({"issuer_role": ["Only administrators can issue penalties"]})

        try:
            kind = PenaltyType(penalty_type)
        except ValueError as exc:
            raise ValidationError({"penalty_type": [f"Unknown penalty type: {penalty_type}"]}) from exc

        if not reason or not str(reason).strip():
            raise ValidationError({"reason": ["A reason is required"]})

        now = datetime.now(UTC)
        expires_at = None
        if kind == PenaltyType.SUSPENSION:
            if duration_days is None or duration_days < 1:
                raise ValidationError({"duration_days": ["A suspension needs a duration of at least one day"]})
            expires_at = now + timedelta(days=duration_days)
        else:
            # Warnings and bans don't expire
            duration_days = None

        penalty = cls(
            target_user_id=target_user_id,
            target_name=target_name,
            target_email=target_email,
            target_student_id=target_student_id,
            penalty_type=kind.value,
            reason=str(reason).strip(),
            description=description,
            related_order_id=related_order_id,
            issued_by=issued_by,
            issued_at=now,
            duration_days=duration_days,
            expires_at=expires_at,
            is_active=True,
        )
        penalty.raise_(
            PenaltyIssued(
                penalty_id=str(penalty.id),
                target_user_id=str(target_user_id),
                penalty_type=kind.value,
                reason=penalty.reason,
                description=description,
                related_order_id=related_order_id,
                issued_by=str(issued_by),
                issued_at=now,
                duration_days=duration_days,
                expires_at=expires_at,
            )
        )
        return penalty

    def is_in_force(self, as_of: datetime | None = None) -> bool:
        """Whether the sanction restricts the user at ``as_of``.

        Warnings never restrict. Bans always do. Suspensions do until they expire.
        """
        kind = PenaltyType(self.penalty_type)
        if kind == PenaltyType.WARNING:
            return False
        if kind == PenaltyType.BAN:
            return True
        as_of = as_of or datetime.now(UTC)
        return self.expires_at is not None and _aware(self.expires_at) > _aware(as_of)


def _aware(moment: datetime) -> datetime:
    return moment if moment.tzinfo else moment.replace(tzinfo=UTC)
