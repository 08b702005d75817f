"""
Razorpay webhook payload models and order-reference extraction.

Webhook bodies look like::

    {
        "event": "payment.captured",
        "payload": {
            "payment": {"entity": {"id": "pay_...", "order_id": "order_..."}},
            "order": {"entity": {"id": "order_..."}}
        }
    }

Each entity kind knows where its gateway order reference lives. Extraction
tries the payment entity first and falls back to the order entity.
"""
from typing import Any, Callable, Dict, Optional, Tuple

from pydantic import BaseModel, ConfigDict, ValidationError

from payrelay.errors import MalformedPayload


class PaymentEntity(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: Optional[str] = None
    order_id: Optional[str] = None
    status: Optional[str] = None
    amount: Optional[int] = None
    currency: Optional[str] = None
    error_code: Optional[str] = None
    error_description: Optional[str] = None


class OrderEntity(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    status: Optional[str] = None
    amount: Optional[int] = None
    amount_paid: Optional[int] = None
    currency: Optional[str] = None


class RefundEntity(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: Optional[str] = None
    payment_id: Optional[str] = None
    amount: Optional[int] = None
    status: Optional[str] = None


class WebhookEntities(BaseModel):
    """Entities carried in a webhook ``payload`` object."""
    payment: Optional[PaymentEntity] = None
    order: Optional[OrderEntity] = None
    refund: Optional[RefundEntity] = None


class WebhookEnvelope(BaseModel):
    """Top-level webhook body."""
    model_config = ConfigDict(extra="ignore")

    event: Optional[str] = None
    # Shape is checked by parse_entities so the event name survives a bad payload
    payload: Any = None


# Entity kind -> how to read the gateway order id from it
ORDER_REFERENCE: Dict[str, Callable[[Any], Optional[str]]] = {
    "payment": lambda entity: entity.order_id,
    "order": lambda entity: entity.id,
}

# Lookup order: payment entity's order reference, then the order entity itself
ORDER_REFERENCE_PRIORITY: Tuple[str, ...] = ("payment", "order")


def parse_entities(payload: Any) -> WebhookEntities:
    """
    Unwrap ``{"<kind>": {"entity": {...}}}`` into typed entities.

    Raises:
        MalformedPayload: If the payload or a known entity has the wrong shape
    """
    if not isinstance(payload, dict):
        raise MalformedPayload("payload must be an object")

    unwrapped: Dict[str, Any] = {}
    for kind in WebhookEntities.model_fields:
        wrapper = payload.get(kind)
        if wrapper is None:
            continue
        if not isinstance(wrapper, dict) or not isinstance(wrapper.get("entity"), dict):
            raise MalformedPayload(f"payload.{kind}.entity must be an object")
        unwrapped[kind] = wrapper["entity"]

    try:
        return WebhookEntities.model_validate(unwrapped)
    except ValidationError as e:
        raise MalformedPayload(str(e)) from e


def extract_gateway_order_id(entities: WebhookEntities) -> Optional[str]:
    """Return the gateway order id referenced by the entities, if any."""
    for kind in ORDER_REFERENCE_PRIORITY:
        entity = getattr(entities, kind)
        if entity is None:
            continue
        reference = ORDER_REFERENCE[kind](entity)
        if reference:
            return reference
    return None
