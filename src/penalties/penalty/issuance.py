"""Penalty issuance — command and handler."""

import structlog
from protean import handle
from protean.fields import Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from penalties.domain import penalties
from penalties.penalty.penalty import Penalty

logger = structlog.get_logger(__name__)


@penalties.command(part_of="Penalty")
class IssuePenalty:
    target_user_id = Identifier(required=True)
    penalty_type = String(required=True, max_length=20)
    reason = String(required=True, max_length=255)
    description = Text()
    issued_by = Identifier(required=True)
    issuer_role = String(required=True, max_length=20)
    related_order_id = Identifier()
    duration_days = Integer()
    target_name = String(max_length=255)
    target_email = String(max_length=255)
    target_student_id = String(max_length=50)


@penalties.command_handler(part_of=Penalty)
class IssuePenaltyHandler:
    @handle(IssuePenalty)
    def issue_penalty(self, command):
        penalty = Penalty.issue(
            target_user_id=command.target_user_id,
            penalty_type=command.penalty_type,
            reason=command.reason,
            description=command.description,
            issued_by=command.issued_by,
            issuer_role=command.issuer_role,
            related_order_id=command.related_order_id,
            duration_days=command.duration_days,
            target_name=command.target_name,
            target_email=command.target_email,
            target_student_id=command.target_student_id,
        )
        current_domain.repository_for(Penalty).add(penalty)

        logger.info(
            "Penalty issued",
            penalty_id=str(penalty.id),
            target_user_id=str(penalty.target_user_id),
            penalty_type=penalty.penalty_type,
            issued_by=str(penalty.issued_by),
        )
        return str(penalty.id)
