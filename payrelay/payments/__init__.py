"""Payment signatures, events and constants."""
from .constants import (
    ALLOWED_TRANSITIONS,
    EVENT_TARGET_STATUS,
    INFORMATIONAL_EVENTS,
    Currency,
    OrderStatus,
    WebhookEvent,
    normalize_currency,
)
from .signatures import (
    compute_signature,
    verify_callback_signature,
    verify_webhook_signature,
)

__all__ = [
    "ALLOWED_TRANSITIONS",
    "EVENT_TARGET_STATUS",
    "INFORMATIONAL_EVENTS",
    "Currency",
    "OrderStatus",
    "WebhookEvent",
    "normalize_currency",
    "compute_signature",
    "verify_callback_signature",
    "verify_webhook_signature",
]
