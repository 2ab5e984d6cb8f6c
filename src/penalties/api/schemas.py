"""Pydantic request/response schemas for the Penalties API."""

from datetime import datetime

from pydantic import BaseModel, Field


class IssuePenaltyRequest(BaseModel):
    target_user_id: str
    penalty_type: str = "warning"
    reason: str
    description: str | None = None
    issued_by: str
    issuer_role: str
    related_order_id: str | None = None
    duration_days: int | None = Field(default=None, ge=1)
    target_name: str | None = None
    target_email: str | None = None
    target_student_id: str | None = None

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "target_user_id": "stu-2021-0042",
                    "penalty_type": "suspension",
                    "reason": "Repeated unclaimed orders",
                    "description": "Three orders left at the counter this week",
                    "issued_by": "admin-01",
                    "issuer_role": "admin",
                    "duration_days": 7,
                }
            ]
        }
    }


class PenaltyIdResponse(BaseModel):
    penalty_id: str


class StandingResponse(BaseModel):
    user_id: str
    standing: str
    can_order: bool
    suspended_until: datetime | None = None
    warning_count: int
    penalty_count: int
