"""Order record model with Decimal amounts."""
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Dict, Optional

from payrelay.payments.constants import OrderStatus
from payrelay.services.money import round_money, to_float


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class OrderRecord:
    """A locally tracked gateway order."""
    local_order_id: str
    gateway_order_id: str
    amount: Decimal
    currency: str
    status: OrderStatus = OrderStatus.PENDING
    created_at: datetime = field(default_factory=utcnow)
    updated_at: Optional[datetime] = None
    payment_id: Optional[str] = None
    receipt: Optional[str] = None
    notes: Dict[str, str] = field(default_factory=dict)

    def __post_init__(self):
        self.amount = round_money(self.amount)
        self.status = OrderStatus(self.status)
        if self.updated_at is None:
            self.updated_at = self.created_at

    def copy(self) -> "OrderRecord":
        """Detached copy, safe to hand out of the ledger."""
        return replace(self, notes=dict(self.notes))

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-friendly dictionary."""
        return {
            "our_order_id": self.local_order_id,
            "razorpay_order_id": self.gateway_order_id,
            "amount": to_float(self.amount),
            "currency": self.currency,
            "status": self.status.value,
            "payment_id": self.payment_id,
            "receipt": self.receipt,
            "notes": dict(self.notes),
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
