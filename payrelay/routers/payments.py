"""
Payment Verification Endpoint

Razorpay Checkout hands the client ``razorpay_order_id``,
``razorpay_payment_id`` and ``razorpay_signature`` after a successful payment;
the client posts them here.
"""

from typing import Optional

from fastapi import APIRouter, Depends

from payrelay.logging import get_logger, sanitize_id_for_logging
from payrelay.models import VerifyPaymentRequest, VerifyPaymentResponse
from payrelay.orders import ReconciliationEngine
from payrelay.routers.deps import get_reconciliation_engine

logger = get_logger(__name__)

router = APIRouter(tags=["payments"])


@router.post("/api/verify-payment", response_model=VerifyPaymentResponse)
async def verify_payment(
    request: Optional[VerifyPaymentRequest] = None,
    engine: ReconciliationEngine = Depends(get_reconciliation_engine),
):
    """
    Verify the checkout signature and mark the order paid.

    Errors (rendered by the RelayError handler):
    - 400 missing_fields
    - 400 invalid_signature
    - 404 order_not_found
    """
    request = request or VerifyPaymentRequest()
    result = engine.reconcile_callback(
        request.razorpay_order_id,
        request.razorpay_payment_id,
        request.razorpay_signature,
    )
    logger.info(
        "Payment verified for order %s (%s)",
        sanitize_id_for_logging(result.local_order_id),
        result.outcome,
    )
    return VerifyPaymentResponse(our_order_id=result.local_order_id, status=result.status.value)
