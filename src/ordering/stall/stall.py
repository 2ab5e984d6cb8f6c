"""Stall aggregate (CQRS) — who owns which stall.

Only what the ordering context needs to authorize stall-owner actions:
the stall's name and its owner. Menu and stall administration live elsewhere.
"""

from datetime import UTC, datetime

from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import DateTime, Identifier, String
from protean.utils.globals import current_domain

from ordering.domain import ordering


@ordering.aggregate
class Stall:
    name = String(required=True, max_length=255)
    owner_id = Identifier(required=True)
    registered_at = DateTime()

    @classmethod
    def register(cls, name, owner_id, stall_id=None):
        fields = {"name": name, "owner_id": owner_id, "registered_at": datetime.now(UTC)}
        if stall_id:
            fields["id"] = stall_id
        return cls(**fields)

    def is_owned_by(self, user_id):
        return str(self.owner_id) == str(user_id)


def assert_stall_owner(stall_id, user_id):
    """Raise ValidationError unless ``user_id`` owns ``stall_id``."""
    try:
        stall = current_domain.repository_for(Stall).get(str(stall_id))
    except ObjectNotFoundError as exc:
        raise ValidationError({"stall_id": [f"Stall {stall_id} is not registered"]}) from exc

    if not stall.is_owned_by(user_id):
        raise ValidationError({"actor_id": ["Only the stall's owner can act on its orders"]})
    return stall
