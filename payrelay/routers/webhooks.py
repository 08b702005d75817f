"""
Webhooks Router

Razorpay payment webhook. The signature is verified over the raw body before
the event is looked at.

Only configuration and signature problems are rejected. Everything after a
valid signature is acknowledged with 200, even when the event cannot be
applied, because Razorpay retries every non-2xx response.
"""

from typing import Any, Optional

from fastapi import APIRouter, Depends, Header, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from payrelay.errors import MissingSignature, ServerMisconfigured, SignatureInvalid
from payrelay.logging import get_logger, sanitize_id_for_logging, sanitize_string_for_logging
from payrelay.orders import ReconciliationEngine
from payrelay.payments.events import WebhookEnvelope
from payrelay.routers.deps import get_reconciliation_engine

logger = get_logger(__name__)

router = APIRouter(tags=["webhooks"])


def _parse_body(raw_body: bytes) -> tuple[Optional[str], Any]:
    """Best-effort (event, payload) extraction; the engine rejects bad shapes."""
    try:
        envelope = WebhookEnvelope.model_validate_json(raw_body)
    except ValidationError:
        return None, None
    return envelope.event, envelope.payload


# ==================== RAZORPAY WEBHOOK ====================

@router.post("/api/webhook/razorpay")
@router.post("/webhook/razorpay")
async def razorpay_webhook(
    request: Request,
    x_razorpay_signature: Optional[str] = Header(None, alias="X-Razorpay-Signature"),
    x_razorpay_event_id: Optional[str] = Header(None, alias="X-Razorpay-Event-Id"),
    engine: ReconciliationEngine = Depends(get_reconciliation_engine),
):
    """
    Handle Razorpay webhook.

    Razorpay sends POST with JSON:
    - event: payment.captured, payment.failed, order.paid, refund.created...
    - payload: {"payment": {"entity": {...}}, "order": {"entity": {...}}}
    - header X-Razorpay-Signature: hex HMAC-SHA256(webhook_secret, raw body)

    Responses:
    - 200 {"ok": true} for every correctly signed delivery
    - 400 missing_signature / invalid_signature
    - 500 server_misconfiguration
    """
    raw_body = await request.body()
    event_name, payload = _parse_body(raw_body)

    logger.info(
        "Razorpay webhook received: event=%s, event_id=%s, length=%s",
        sanitize_string_for_logging(event_name),
        sanitize_id_for_logging(x_razorpay_event_id),
        len(raw_body),
    )

    try:
        result = engine.reconcile_webhook_event(event_name, payload, raw_body, x_razorpay_signature)
    except (ServerMisconfigured, MissingSignature, SignatureInvalid) as e:
        return JSONResponse(e.to_dict(), status_code=e.status_code)
    except Exception as e:
        # Signature already passed; acknowledge so Razorpay does not retry
        logger.error("Razorpay webhook processing error: %s", e, exc_info=True)
        return JSONResponse({"ok": True})

    logger.info(
        "Razorpay webhook processed: event=%s, order=%s, outcome=%s",
        sanitize_string_for_logging(event_name),
        sanitize_id_for_logging(result.local_order_id),
        result.outcome,
    )
    return JSONResponse({"ok": True})
