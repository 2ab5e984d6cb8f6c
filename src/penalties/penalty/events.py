"""Domain events for the Penalty aggregate."""

from protean.fields import DateTime, Identifier, Integer, String, Text

from penalties.domain import penalties


@penalties.event(part_of="Penalty")
class PenaltyIssued:
    __version__ = 1

    penalty_id = Identifier(required=True)
    target_user_id = Identifier(required=True)
    penalty_type = String(required=True)
    reason = String(required=True)
    description = Text()
    related_order_id = Identifier()
    issued_by = Identifier(required=True)
    issued_at = DateTime(required=True)
    duration_days = Integer()
    expires_at = DateTime()
