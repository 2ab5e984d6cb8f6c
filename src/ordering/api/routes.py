"""FastAPI routes for the Ordering domain — carts, checkout, orders, cancellations."""

import json

from fastapi import APIRouter
from protean.utils.globals import current_domain

from ordering.api.schemas import (
    AddToCartRequest,
    CancelOrderRequest,
    CartIdResponse,
    CheckoutRequest,
    CheckoutResponse,
    CreateCartRequest,
    LineIdResponse,
    OrderActionRequest,
    RegisterStallRequest,
    RequestIdResponse,
    RespondToCancellationBody,
    StallIdResponse,
    StatusResponse,
    SubmitCancellationRequestBody,
    UpdateCartQuantityRequest,
)
from ordering.cancellation.arbitration import ApproveCancellationRequest, DeclineCancellationRequest
from ordering.cancellation.request import CancellationRequest
from ordering.cancellation.submission import SubmitCancellationRequest
from ordering.cart.cart import ShoppingCart
from ordering.cart.items import AddToCart, RemoveFromCart, UpdateCartQuantity
from ordering.cart.management import CreateCart
from ordering.checkout.formation import OrderFormationService
from ordering.order.lifecycle import CancelOrder, CompleteOrder, MarkReady, StartPreparing
from ordering.order.order import Order
from ordering.projections.customer_orders import CustomerOrder
from ordering.projections.stall_order_board import StallOrderBoard
from ordering.stall.registration import RegisterStall

# ---------------------------------------------------------------------------
# Cart Router
# ---------------------------------------------------------------------------
cart_router = APIRouter(prefix="/carts", tags=["carts"])


@cart_router.post("", status_code=201, response_model=CartIdResponse)
async def create_cart(body: CreateCartRequest) -> CartIdResponse:
    command = CreateCart(customer_id=body.customer_id)
    result = current_domain.process(command, asynchronous=False)
    return CartIdResponse(cart_id=result)


@cart_router.get("/{cart_id}")
async def get_cart(cart_id: str) -> dict:
    cart = current_domain.repository_for(ShoppingCart).get(cart_id)
    return {
        "cart_id": str(cart.id),
        "customer_id": str(cart.customer_id),
        "lines": [
            {
                "line_id": str(line.id),
                "stall_id": str(line.stall_id),
                "stall_name": line.stall_name,
                "menu_item_id": str(line.menu_item_id),
                "name": line.name,
                "unit_price": line.unit_price,
                "quantity": line.quantity,
                "add_ons": line.add_on_list(),
                "note": line.note,
                "line_total": float(line.total()),
            }
            for line in cart.lines
        ],
        "grand_total": float(cart.grand_total()),
    }


@cart_router.post("/{cart_id}/lines", status_code=201, response_model=LineIdResponse)
async def add_cart_line(cart_id: str, body: AddToCartRequest) -> LineIdResponse:
    command = AddToCart(
        cart_id=cart_id,
        stall_id=body.stall_id,
        stall_name=body.stall_name,
        menu_item_id=body.menu_item_id,
        name=body.name,
        unit_price=body.unit_price,
        quantity=body.quantity,
        add_ons=json.dumps([a.model_dump() for a in body.add_ons]),
        note=body.note,
    )
    line_id = current_domain.process(command, asynchronous=False)
    return LineIdResponse(line_id=line_id)


@cart_router.put("/{cart_id}/lines/{line_id}", response_model=StatusResponse)
async def update_cart_line_quantity(cart_id: str, line_id: str, body: UpdateCartQuantityRequest) -> StatusResponse:
    command = UpdateCartQuantity(
        cart_id=cart_id,
        line_id=line_id,
        new_quantity=body.new_quantity,
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@cart_router.delete("/{cart_id}/lines/{line_id}", response_model=StatusResponse)
async def remove_cart_line(cart_id: str, line_id: str) -> StatusResponse:
    command = RemoveFromCart(cart_id=cart_id, line_id=line_id)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@cart_router.post("/{cart_id}/checkout", status_code=201, response_model=CheckoutResponse)
async def checkout_cart(cart_id: str, body: CheckoutRequest) -> CheckoutResponse:
    """Split the cart into one order per stall and clear the consumed lines."""
    result = OrderFormationService().checkout(
        cart_id=cart_id,
        payment_method=body.payment_method,
        customer_display=body.customer.model_dump(),
        cash_tendered=body.cash_tendered,
        special_instructions=body.special_instructions,
        scheduled_ready_by=body.scheduled_ready_by,
        group_member_emails=body.group_member_emails,
    )
    return CheckoutResponse(
        main_order_id=result.main_order_id,
        order_ids=result.order_ids,
        human_codes=result.human_codes,
        cart_cleared=result.cart_cleared,
    )


# ---------------------------------------------------------------------------
# Order Router
# ---------------------------------------------------------------------------
order_router = APIRouter(prefix="/orders", tags=["orders"])


@order_router.get("")
async def list_customer_orders(customer_id: str) -> list[dict]:
    repo = current_domain.repository_for(CustomerOrder)
    results = repo._dao.query.filter(customer_id=customer_id).all()
    return [view.to_dict() for view in results.items]


@order_router.get("/{order_id}")
async def get_order(order_id: str) -> dict:
    order = current_domain.repository_for(Order).get(order_id)
    return order.to_dict()


@order_router.put("/{order_id}/preparing", response_model=StatusResponse)
async def start_preparing(order_id: str, body: OrderActionRequest) -> StatusResponse:
    command = StartPreparing(order_id=order_id, **body.model_dump())
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@order_router.put("/{order_id}/ready", response_model=StatusResponse)
async def mark_ready(order_id: str, body: OrderActionRequest) -> StatusResponse:
    command = MarkReady(order_id=order_id, **body.model_dump())
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@order_router.put("/{order_id}/complete", response_model=StatusResponse)
async def complete_order(order_id: str, body: OrderActionRequest) -> StatusResponse:
    command = CompleteOrder(order_id=order_id, **body.model_dump())
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@order_router.put("/{order_id}/cancel", response_model=StatusResponse)
async def cancel_order(order_id: str, body: CancelOrderRequest) -> StatusResponse:
    command = CancelOrder(order_id=order_id, **body.model_dump())
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@order_router.post("/{order_id}/cancellation-requests", status_code=201, response_model=RequestIdResponse)
async def submit_cancellation_request(order_id: str, body: SubmitCancellationRequestBody) -> RequestIdResponse:
    command = SubmitCancellationRequest(order_id=order_id, **body.model_dump())
    request_id = current_domain.process(command, asynchronous=False)
    return RequestIdResponse(request_id=request_id)


# ---------------------------------------------------------------------------
# Cancellation Request Router
# ---------------------------------------------------------------------------
cancellation_router = APIRouter(prefix="/cancellation-requests", tags=["cancellations"])


@cancellation_router.get("/{request_id}")
async def get_cancellation_request(request_id: str) -> dict:
    return current_domain.repository_for(CancellationRequest).get(request_id).to_dict()


@cancellation_router.put("/{request_id}/approve", response_model=StatusResponse)
async def approve_cancellation_request(request_id: str, body: RespondToCancellationBody) -> StatusResponse:
    command = ApproveCancellationRequest(request_id=request_id, **body.model_dump())
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@cancellation_router.put("/{request_id}/decline", response_model=StatusResponse)
async def decline_cancellation_request(request_id: str, body: RespondToCancellationBody) -> StatusResponse:
    command = DeclineCancellationRequest(request_id=request_id, **body.model_dump())
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


# ---------------------------------------------------------------------------
# Stall Router
# ---------------------------------------------------------------------------
stall_router = APIRouter(prefix="/stalls", tags=["stalls"])


@stall_router.post("", status_code=201, response_model=StallIdResponse)
async def register_stall(body: RegisterStallRequest) -> StallIdResponse:
    command = RegisterStall(**body.model_dump())
    stall_id = current_domain.process(command, asynchronous=False)
    return StallIdResponse(stall_id=stall_id)


@stall_router.get("/{stall_id}/orders")
async def stall_order_board(stall_id: str, status: str | None = None) -> list[dict]:
    repo = current_domain.repository_for(StallOrderBoard)
    filters = {"stall_id": stall_id}
    if status:
        filters["status"] = status
    results = repo._dao.query.filter(**filters).all()
    return [entry.to_dict() for entry in results.items]


@stall_router.get("/{stall_id}/cancellation-requests")
async def stall_cancellation_requests(stall_id: str, status: str | None = None) -> list[dict]:
    repo = current_domain.repository_for(CancellationRequest)
    filters = {"stall_id": stall_id}
    if status:
        filters["status"] = status
    results = repo._dao.query.filter(**filters).all()
    return [request.to_dict() for request in results.items]
