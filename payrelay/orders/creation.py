"""
Order Creation Service

Creates the order at Razorpay first and registers it locally only after the
gateway confirms. A failed or slow gateway call leaves the ledger untouched.
"""
import uuid
from decimal import Decimal
from typing import Dict, Optional

from payrelay.config import Settings
from payrelay.errors import InvalidAmount
from payrelay.logging import get_logger, sanitize_id_for_logging
from payrelay.orders.ledger import OrderLedger
from payrelay.orders.models import OrderRecord
from payrelay.payments.constants import OrderStatus, normalize_currency
from payrelay.services.money import MONEY_PRECISION, Number, to_decimal, to_minor_units
from payrelay.services.razorpay import RazorpayClient

logger = get_logger(__name__)


def new_local_order_id() -> str:
    """Mint a local order id."""
    return uuid.uuid4().hex


class OrderCreationService:
    """Creates gateway orders and registers them in the ledger."""

    def __init__(self, ledger: OrderLedger, gateway: RazorpayClient, settings: Settings):
        self.ledger = ledger
        self.gateway = gateway
        self.settings = settings

    @staticmethod
    def _validate_amount(amount: Number) -> Decimal:
        value = to_decimal(amount)
        if value <= 0:
            raise InvalidAmount("amount must be positive")
        if value != value.quantize(MONEY_PRECISION):
            raise InvalidAmount("amount must have at most two decimal places")
        return value

    async def create_order(
        self,
        amount: Number,
        currency: Optional[str] = None,
        receipt: Optional[str] = None,
        notes: Optional[Dict[str, str]] = None,
    ) -> OrderRecord:
        """
        Create a gateway order and register it as pending.

        Raises:
            InvalidAmount: If amount or currency is not acceptable
            ServerMisconfigured: If gateway credentials are missing
            GatewayError: If Razorpay rejects the order or is unreachable
            DuplicateKey: If the ids collide with an existing order
        """
        value = self._validate_amount(amount)
        code = normalize_currency(currency or self.settings.default_currency)
        if code is None:
            raise InvalidAmount(f"unsupported currency {currency!r}")

        local_order_id = new_local_order_id()
        gateway_order = await self.gateway.create_order(
            amount_minor=to_minor_units(value),
            currency=code,
            receipt=receipt or local_order_id[:40],
            notes={**(notes or {}), "our_order_id": local_order_id},
        )

        record = OrderRecord(
            local_order_id=local_order_id,
            gateway_order_id=gateway_order["id"],
            amount=value,
            currency=code,
            status=OrderStatus.PENDING,
            receipt=receipt,
            notes=dict(notes or {}),
        )
        self.ledger.put(local_order_id, record)

        logger.info(
            "Order %s created for gateway order %s: %s %s",
            sanitize_id_for_logging(local_order_id),
            sanitize_id_for_logging(record.gateway_order_id),
            record.amount,
            code,
        )
        return record.copy()
