"""
Order Endpoints

Order creation at the gateway and status polling.
"""

from fastapi import APIRouter, Depends

from payrelay.config import Settings
from payrelay.errors import OrderNotFound
from payrelay.logging import get_logger
from payrelay.models import CreateOrderRequest, CreateOrderResponse, OrderStatusResponse
from payrelay.orders import OrderCreationService, OrderLedger
from payrelay.routers.deps import get_ledger, get_order_service, get_settings
from payrelay.services.money import to_float, to_minor_units

logger = get_logger(__name__)

router = APIRouter(tags=["orders"])


@router.post("/api/create-order", response_model=CreateOrderResponse)
async def create_order(
    request: CreateOrderRequest,
    order_service: OrderCreationService = Depends(get_order_service),
    settings: Settings = Depends(get_settings),
):
    """
    Create a Razorpay order and register it locally as pending.

    The response carries everything Razorpay Checkout needs on the client:
    the gateway order id, the amount in minor units and the public key id.
    """
    record = await order_service.create_order(
        amount=request.amount,
        currency=request.currency,
        receipt=request.receipt,
        notes=request.notes,
    )
    return CreateOrderResponse(
        our_order_id=record.local_order_id,
        razorpay_order_id=record.gateway_order_id,
        amount=to_float(record.amount),
        amount_minor=to_minor_units(record.amount),
        currency=record.currency,
        key_id=settings.key_id,
    )


@router.get("/api/orders/{our_order_id}", response_model=OrderStatusResponse)
async def get_order_status(our_order_id: str, ledger: OrderLedger = Depends(get_ledger)):
    """Status polling for clients waiting on a webhook."""
    record = ledger.get_by_local_id(our_order_id)
    if record is None:
        raise OrderNotFound(f"order {our_order_id} not found")

    data = record.to_dict()
    return OrderStatusResponse(
        our_order_id=data["our_order_id"],
        razorpay_order_id=data["razorpay_order_id"],
        amount=data["amount"],
        currency=data["currency"],
        status=data["status"],
        payment_id=data["payment_id"],
        created_at=data["created_at"],
        updated_at=data["updated_at"],
    )
