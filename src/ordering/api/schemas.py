"""Pydantic request/response schemas for the Ordering API.

These are external contracts (anti-corruption layer) — separate from
internal Protean commands.
"""

from datetime import datetime

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Shared sub-models
# ---------------------------------------------------------------------------
class AddOnSchema(BaseModel):
    name: str
    price: float = Field(ge=0)


class CustomerDisplaySchema(BaseModel):
    name: str | None = None
    email: str | None = None
    student_id: str | None = None


# ---------------------------------------------------------------------------
# Cart Request Schemas
# ---------------------------------------------------------------------------
class CreateCartRequest(BaseModel):
    customer_id: str

    model_config = {"json_schema_extra": {"examples": [{"customer_id": "stu-2021-0042"}]}}


class AddToCartRequest(BaseModel):
    stall_id: str
    stall_name: str | None = None
    menu_item_id: str
    name: str
    unit_price: float = Field(ge=0)
    quantity: int = Field(ge=1, default=1)
    add_ons: list[AddOnSchema] = Field(default_factory=list)
    note: str | None = None

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "stall_id": "stall-kusina",
                    "stall_name": "Kusina ni Aling Nena",
                    "menu_item_id": "item-adobo",
                    "name": "Chicken Adobo",
                    "unit_price": 65.0,
                    "quantity": 2,
                    "add_ons": [{"name": "Extra rice", "price": 15.0}],
                    "note": "Less sauce",
                }
            ]
        }
    }


class UpdateCartQuantityRequest(BaseModel):
    """Zero removes the line."""

    new_quantity: int = Field(ge=0)


class CheckoutRequest(BaseModel):
    payment_method: str = "cash"
    cash_tendered: float | None = Field(default=None, ge=0)
    customer: CustomerDisplaySchema = Field(default_factory=CustomerDisplaySchema)
    special_instructions: str | None = None
    scheduled_ready_by: datetime | None = None
    group_member_emails: list[str] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Order Request Schemas
# ---------------------------------------------------------------------------
class OrderActionRequest(BaseModel):
    actor_id: str
    actor_role: str = "stall_owner"
    expected_status: str | None = None


class CancelOrderRequest(OrderActionRequest):
    reason: str


class RegisterStallRequest(BaseModel):
    stall_id: str | None = None
    name: str
    owner_id: str


# ---------------------------------------------------------------------------
# Cancellation Request Schemas
# ---------------------------------------------------------------------------
class SubmitCancellationRequestBody(BaseModel):
    customer_id: str
    reason_category: str
    explanation: str
    customer_name: str | None = None
    customer_email: str | None = None
    student_id: str | None = None


class RespondToCancellationBody(BaseModel):
    responder_id: str
    responder_role: str = "stall_owner"
    response_reason: str | None = None


# ---------------------------------------------------------------------------
# Response Schemas
# ---------------------------------------------------------------------------
class CartIdResponse(BaseModel):
    cart_id: str


class LineIdResponse(BaseModel):
    line_id: str


class StallIdResponse(BaseModel):
    stall_id: str


class RequestIdResponse(BaseModel):
    request_id: str


class CheckoutResponse(BaseModel):
    main_order_id: str
    order_ids: list[str]
    human_codes: list[str]
    cart_cleared: bool


class StatusResponse(BaseModel):
    status: str = "ok"
