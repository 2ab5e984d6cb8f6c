"""Stall registration — command and handler."""

from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from ordering.domain import ordering
from ordering.stall.stall import Stall


@ordering.command(part_of="Stall")
class RegisterStall:
    stall_id = Identifier()  # Optional: keep the id used by the menu catalogue
    name = String(required=True, max_length=255)
    owner_id = Identifier(required=True)


@ordering.command_handler(part_of=Stall)
class RegisterStallHandler:
    @handle(RegisterStall)
    def register_stall(self, command):
        stall = Stall.register(
            name=command.name,
            owner_id=command.owner_id,
            stall_id=command.stall_id,
        )
        current_domain.repository_for(Stall).add(stall)
        return str(stall.id)
