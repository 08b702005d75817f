"""
Order Reconciliation Engine

Applies verified payment signals to the order ledger. Two paths feed it:

- the checkout callback posted by the client after Razorpay Checkout
- the webhook pushed by Razorpay

Both verify their signature before anything else and then go through the same
idempotent transition. Duplicate signals are no-ops and a paid order never
moves back to failed or pending.
"""
from dataclasses import dataclass
from typing import Any, Optional

from payrelay.config import Settings
from payrelay.errors import LedgerIntegrityError, MalformedPayload, OrderNotFound
from payrelay.logging import get_logger, sanitize_id_for_logging, sanitize_string_for_logging
from payrelay.orders.ledger import OrderLedger
from payrelay.orders.models import OrderRecord
from payrelay.payments.constants import (
    EVENT_TARGET_STATUS,
    INFORMATIONAL_EVENTS,
    OrderStatus,
    sources_for,
)
from payrelay.payments.events import extract_gateway_order_id, parse_entities
from payrelay.payments.signatures import verify_callback_signature, verify_webhook_signature

logger = get_logger(__name__)

# Outcomes
APPLIED = "applied"
DUPLICATE = "duplicate"
IGNORED = "ignored"
INFORMATIONAL = "informational"
UNMAPPED = "unmapped"
UNRESOLVED = "unresolved"
MALFORMED = "malformed"


@dataclass(frozen=True)
class ReconciliationResult:
    """What a signal did to the ledger."""
    outcome: str
    local_order_id: Optional[str] = None
    gateway_order_id: Optional[str] = None
    previous_status: Optional[OrderStatus] = None
    status: Optional[OrderStatus] = None

    @property
    def applied(self) -> bool:
        return self.outcome == APPLIED


class ReconciliationEngine:
    """Verifies payment signals and applies them to the ledger."""

    def __init__(self, ledger: OrderLedger, settings: Settings):
        self.ledger = ledger
        self.settings = settings

    def reconcile_callback(
        self,
        gateway_order_id: Optional[str],
        payment_id: Optional[str],
        claimed_signature: Optional[str],
    ) -> ReconciliationResult:
        """
        Handle the client's post-checkout callback.

        Raises:
            MissingFields: If any of the three inputs is empty
            SignatureInvalid: If the signature does not match
            OrderNotFound: If no local order maps to the gateway order id
        """
        verify_callback_signature(
            gateway_order_id, payment_id, claimed_signature, self.settings.key_secret
        )

        record = self.ledger.get_by_gateway_id(gateway_order_id)
        if record is None:
            logger.warning(
                "Verify called for unknown order %s", sanitize_id_for_logging(gateway_order_id)
            )
            raise OrderNotFound(f"no local order for {gateway_order_id}")

        return self._transition(record, OrderStatus.PAID, payment_id=payment_id, source="callback")

    def reconcile_webhook_event(
        self,
        event_name: Optional[str],
        payload: Any,
        raw_body: bytes,
        signature_header: Optional[str],
    ) -> ReconciliationResult:
        """
        Handle a Razorpay webhook event.

        The signature is checked before the event or payload is looked at.
        After that nothing raises: unknown events, malformed payloads and
        orders that cannot be resolved are logged and reported in the result.

        Raises:
            ServerMisconfigured: If the webhook secret is not configured
            MissingSignature: If the signature header is absent
            SignatureInvalid: If the signature does not match
        """
        verify_webhook_signature(raw_body, signature_header, self.settings.webhook_secret)

        try:
            return self._apply_webhook_event(event_name, payload)
        except MalformedPayload as e:
            logger.warning(
                "Webhook %s: malformed payload: %s",
                sanitize_string_for_logging(event_name),
                sanitize_string_for_logging(e.message, max_length=200),
            )
            return ReconciliationResult(outcome=MALFORMED)
        except LedgerIntegrityError:
            logger.exception("Webhook %s: ledger integrity fault", sanitize_string_for_logging(event_name))
            return ReconciliationResult(outcome=UNRESOLVED)

    def _apply_webhook_event(self, event_name: Optional[str], payload: Any) -> ReconciliationResult:
        if not event_name or not isinstance(event_name, str):
            raise MalformedPayload("event name missing")

        target = EVENT_TARGET_STATUS.get(event_name)
        informational = event_name in INFORMATIONAL_EVENTS
        if target is None and not informational:
            logger.info("Webhook: unhandled event %s", sanitize_string_for_logging(event_name))
            return ReconciliationResult(outcome=UNMAPPED)

        entities = parse_entities(payload)
        gateway_order_id = extract_gateway_order_id(entities)
        if not gateway_order_id:
            logger.warning("Webhook %s: no order id in payload", sanitize_string_for_logging(event_name))
            return ReconciliationResult(outcome=UNRESOLVED)

        record = self.ledger.get_by_gateway_id(gateway_order_id)
        if record is None:
            logger.warning(
                "Webhook %s: no local order for %s",
                sanitize_string_for_logging(event_name),
                sanitize_id_for_logging(gateway_order_id),
            )
            return ReconciliationResult(outcome=UNRESOLVED, gateway_order_id=gateway_order_id)

        if informational:
            refund_id = entities.refund.id if entities.refund else None
            logger.info(
                "Webhook %s for order %s (refund %s)",
                sanitize_string_for_logging(event_name),
                sanitize_id_for_logging(record.local_order_id),
                sanitize_id_for_logging(refund_id),
            )
            return ReconciliationResult(
                outcome=INFORMATIONAL,
                local_order_id=record.local_order_id,
                gateway_order_id=gateway_order_id,
                previous_status=record.status,
                status=record.status,
            )

        payment_id = None
        if target == OrderStatus.PAID and entities.payment is not None:
            payment_id = entities.payment.id
        return self._transition(record, target, payment_id=payment_id, source=event_name)

    def _transition(
        self,
        record: OrderRecord,
        target: OrderStatus,
        payment_id: Optional[str],
        source: str,
    ) -> ReconciliationResult:
        """Apply ``target`` if the current status allows it, atomically."""
        sources = sources_for(target)
        previous = self.ledger.set_status(
            record.local_order_id, target, only_from=sources, payment_id=payment_id
        )
        local_id = sanitize_id_for_logging(record.local_order_id)

        if previous in sources:
            outcome, status = APPLIED, target
            logger.info("Order %s: %s -> %s (%s)", local_id, previous.value, target.value, source)
        elif previous == target:
            outcome, status = DUPLICATE, previous
            logger.info("Order %s already %s, duplicate %s ignored", local_id, previous.value, source)
        else:
            outcome, status = IGNORED, previous
            logger.warning(
                "Order %s is %s, not regressing to %s (%s)",
                local_id,
                previous.value,
                target.value,
                source,
            )

        return ReconciliationResult(
            outcome=outcome,
            local_order_id=record.local_order_id,
            gateway_order_id=record.gateway_order_id,
            previous_status=previous,
            status=status,
        )
