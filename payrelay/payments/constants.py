"""Payment constants, enums, and event mappings."""
from enum import Enum
from typing import Dict, FrozenSet, Optional, Set


class OrderStatus(str, Enum):
    """
    Order status lifecycle.

    Flow:
        pending -> paid
                -> failed -> paid

    - pending: Created at the gateway, awaiting payment
    - paid: Payment captured/authorized (terminal)
    - failed: Last payment attempt failed; a later successful attempt on the
      same gateway order can still move it to paid
    """
    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"


class Currency(str, Enum):
    """Currencies accepted for order creation."""
    INR = "INR"
    USD = "USD"
    EUR = "EUR"
    GBP = "GBP"
    SGD = "SGD"
    AED = "AED"


class WebhookEvent(str, Enum):
    """Razorpay webhook events the relay understands."""
    PAYMENT_AUTHORIZED = "payment.authorized"
    PAYMENT_CAPTURED = "payment.captured"
    PAYMENT_FAILED = "payment.failed"
    PAYMENT_PENDING = "payment.pending"
    ORDER_PAID = "order.paid"
    REFUND_CREATED = "refund.created"


# Webhook event -> target order status
EVENT_TARGET_STATUS: Dict[str, OrderStatus] = {
    WebhookEvent.PAYMENT_CAPTURED.value: OrderStatus.PAID,
    WebhookEvent.PAYMENT_AUTHORIZED.value: OrderStatus.PAID,
    WebhookEvent.ORDER_PAID.value: OrderStatus.PAID,
    WebhookEvent.PAYMENT_FAILED.value: OrderStatus.FAILED,
    WebhookEvent.PAYMENT_PENDING.value: OrderStatus.PENDING,
}

# Events that are logged but never touch the ledger
INFORMATIONAL_EVENTS: Set[str] = {
    WebhookEvent.REFUND_CREATED.value,
}

# Status transition rules: current -> statuses it may move to.
# Anything not listed is either a duplicate (same status) or a regression.
ALLOWED_TRANSITIONS: Dict[OrderStatus, FrozenSet[OrderStatus]] = {
    OrderStatus.PENDING: frozenset({OrderStatus.PAID, OrderStatus.FAILED}),
    OrderStatus.FAILED: frozenset({OrderStatus.PAID}),
    OrderStatus.PAID: frozenset(),
}

DEFAULT_CURRENCY = Currency.INR.value


def sources_for(target: OrderStatus) -> FrozenSet[OrderStatus]:
    """Statuses from which ``target`` may be applied."""
    return frozenset(
        current for current, allowed in ALLOWED_TRANSITIONS.items() if target in allowed
    )


def normalize_currency(currency: Optional[str]) -> Optional[str]:
    """
    Normalize a currency code to its canonical form.

    Returns:
        Upper-case code if supported, otherwise None

    Example:
        normalize_currency(" inr ") -> "INR"
    """
    if not currency:
        return DEFAULT_CURRENCY
    normalized = currency.strip().upper()
    if normalized in Currency.__members__:
        return normalized
    return None
