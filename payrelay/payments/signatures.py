"""
Razorpay signature verification.

Both signal paths share one primitive, a hex HMAC-SHA256 compared in constant
time:

- checkout callback: HMAC(key_secret, "{order_id}|{payment_id}")
- webhook: HMAC(webhook_secret, raw request body)

The webhook digest must be computed over the body bytes exactly as received.
Re-serializing parsed JSON changes spacing and key order and breaks the digest.
"""
import hashlib
import hmac
from typing import Optional, Union

from payrelay.errors import (
    MissingFields,
    MissingSignature,
    ServerMisconfigured,
    SignatureInvalid,
)
from payrelay.logging import get_logger, sanitize_id_for_logging

logger = get_logger(__name__)

BytesLike = Union[str, bytes]


def _to_bytes(value: BytesLike) -> bytes:
    return value.encode("utf-8") if isinstance(value, str) else value


def compute_signature(secret: BytesLike, message: BytesLike) -> str:
    """Return the hex HMAC-SHA256 of ``message`` keyed with ``secret``."""
    return hmac.new(_to_bytes(secret), _to_bytes(message), hashlib.sha256).hexdigest()


def signatures_match(expected: str, received: str) -> bool:
    """Constant-time comparison of two hex digests, byte for byte."""
    return hmac.compare_digest(_to_bytes(expected), _to_bytes(received))


def callback_message(gateway_order_id: str, payment_id: str) -> str:
    """Canonical payload signed by Razorpay Checkout."""
    return f"{gateway_order_id}|{payment_id}"


def verify_callback_signature(
    gateway_order_id: Optional[str],
    payment_id: Optional[str],
    signature: Optional[str],
    secret: str,
) -> None:
    """
    Verify a checkout callback signature.

    Raises:
        MissingFields: If order id, payment id or signature is empty
        ServerMisconfigured: If the key secret is not configured
        SignatureInvalid: If the digest does not match
    """
    if not gateway_order_id or not payment_id or not signature:
        raise MissingFields("razorpay_order_id, razorpay_payment_id and razorpay_signature are required")

    if not secret:
        logger.error("Callback received but RAZORPAY_KEY_SECRET is not configured")
        raise ServerMisconfigured("RAZORPAY_KEY_SECRET not configured")

    expected = compute_signature(secret, callback_message(gateway_order_id, payment_id))
    if not signatures_match(expected, signature):
        logger.warning(
            "Invalid payment signature for order %s",
            sanitize_id_for_logging(gateway_order_id),
        )
        raise SignatureInvalid()


def verify_webhook_signature(
    raw_body: bytes,
    signature: Optional[str],
    secret: Optional[str],
) -> None:
    """
    Verify a webhook signature over the raw request body.

    Raises:
        ServerMisconfigured: If the webhook secret is not configured
        MissingSignature: If the signature header is absent
        SignatureInvalid: If the digest does not match
    """
    if not secret:
        logger.error("Webhook received but RAZORPAY_WEBHOOK_SECRET is not configured")
        raise ServerMisconfigured("RAZORPAY_WEBHOOK_SECRET not configured")

    if not signature:
        logger.warning("Webhook rejected: missing X-Razorpay-Signature header")
        raise MissingSignature()

    expected = compute_signature(secret, raw_body)
    if not signatures_match(expected, signature):
        logger.warning("Webhook rejected: signature mismatch (body length %s)", len(raw_body))
        raise SignatureInvalid()
