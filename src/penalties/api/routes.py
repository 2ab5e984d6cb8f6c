"""FastAPI routes for the Penalties domain."""

from datetime import datetime

from fastapi import APIRouter
from protean.utils.globals import current_domain

from penalties.api.schemas import IssuePenaltyRequest, PenaltyIdResponse, StandingResponse
from penalties.penalty.issuance import IssuePenalty
from penalties.penalty.penalty import PenaltyType
from penalties.penalty.standing import account_standing, active_penalties, penalties_for_user

DEFAULT_SUSPENSION_DAYS = 7

penalty_router = APIRouter(prefix="/penalties", tags=["penalties"])


@penalty_router.post("", status_code=201, response_model=PenaltyIdResponse)
async def issue_penalty(body: IssuePenaltyRequest) -> PenaltyIdResponse:
    data = body.model_dump()
    if data["penalty_type"] == PenaltyType.SUSPENSION.value and data["duration_days"] is None:
        data["duration_days"] = DEFAULT_SUSPENSION_DAYS
    penalty_id = current_domain.process(IssuePenalty(**data), asynchronous=False)
    return PenaltyIdResponse(penalty_id=penalty_id)


@penalty_router.get("")
async def list_penalties(user_id: str | None = None) -> list[dict]:
    found = penalties_for_user(user_id) if user_id else active_penalties()
    return [penalty.to_dict() for penalty in found]


@penalty_router.get("/standing/{user_id}", response_model=StandingResponse)
async def get_account_standing(user_id: str, as_of: datetime | None = None) -> StandingResponse:
    standing = account_standing(user_id, as_of=as_of)
    return StandingResponse(
        user_id=standing.user_id,
        standing=standing.standing.value,
        can_order=standing.can_order,
        suspended_until=standing.suspended_until,
        warning_count=standing.warning_count,
        penalty_count=standing.penalty_count,
    )
