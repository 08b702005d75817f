"""Order ledger, creation and reconciliation."""
from .creation import OrderCreationService
from .ledger import OrderLedger
from .models import OrderRecord
from .reconciliation import ReconciliationEngine, ReconciliationResult

__all__ = [
    "OrderCreationService",
    "OrderLedger",
    "OrderRecord",
    "ReconciliationEngine",
    "ReconciliationResult",
]
