"""
Order Ledger

In-memory store of order records, the single source of truth for order status.
Holds a primary map (local order id -> record) and a secondary index
(gateway order id -> local order id) kept consistent under one lock.

The store is volatile: records live as long as the process. It is created by
the application factory and injected into handlers, so tests and a future
persistent backend can substitute their own instance.
"""
import threading
from typing import Dict, Iterable, List, Optional

from payrelay.errors import DuplicateKey, LedgerIntegrityError, OrderNotFound
from payrelay.logging import get_logger, sanitize_id_for_logging
from payrelay.orders.models import OrderRecord, utcnow
from payrelay.payments.constants import OrderStatus

logger = get_logger(__name__)


class OrderLedger:
    """Thread-safe in-memory order store with a gateway-id index."""

    def __init__(self):
        self._orders: Dict[str, OrderRecord] = {}
        self._by_gateway_id: Dict[str, str] = {}
        self._lock = threading.RLock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._orders)

    def __contains__(self, local_order_id: object) -> bool:
        with self._lock:
            return local_order_id in self._orders

    def put(self, local_order_id: str, record: OrderRecord) -> None:
        """
        Insert a new order.

        Raises:
            DuplicateKey: If the local id or the gateway id is already registered
        """
        if record.local_order_id != local_order_id:
            raise ValueError(
                f"record id {record.local_order_id!r} does not match key {local_order_id!r}"
            )

        with self._lock:
            if local_order_id in self._orders:
                logger.error("Ledger: local order %s already exists", sanitize_id_for_logging(local_order_id))
                raise DuplicateKey(f"local order {local_order_id} already exists")
            if record.gateway_order_id in self._by_gateway_id:
                logger.error(
                    "Ledger: gateway order %s already mapped to %s",
                    sanitize_id_for_logging(record.gateway_order_id),
                    sanitize_id_for_logging(self._by_gateway_id[record.gateway_order_id]),
                )
                raise DuplicateKey(f"gateway order {record.gateway_order_id} already registered")

            self._orders[local_order_id] = record.copy()
            self._by_gateway_id[record.gateway_order_id] = local_order_id

        logger.info(
            "Ledger: registered order %s -> %s",
            sanitize_id_for_logging(local_order_id),
            sanitize_id_for_logging(record.gateway_order_id),
        )

    def get_by_local_id(self, local_order_id: str) -> Optional[OrderRecord]:
        """Return a copy of the order, or None."""
        with self._lock:
            record = self._orders.get(local_order_id)
            return record.copy() if record else None

    def get_by_gateway_id(self, gateway_order_id: str) -> Optional[OrderRecord]:
        """
        Return a copy of the order mapped to a gateway order id, or None.

        Raises:
            LedgerIntegrityError: If the index points at a missing record or
                at a record with a different gateway id
        """
        with self._lock:
            local_order_id = self._by_gateway_id.get(gateway_order_id)
            if local_order_id is None:
                return None
            record = self._orders.get(local_order_id)
            if record is None or record.gateway_order_id != gateway_order_id:
                logger.error(
                    "Ledger integrity fault: index %s -> %s has no matching record",
                    sanitize_id_for_logging(gateway_order_id),
                    sanitize_id_for_logging(local_order_id),
                )
                raise LedgerIntegrityError(f"index entry for {gateway_order_id} is inconsistent")
            return record.copy()

    def set_status(
        self,
        local_order_id: str,
        new_status: OrderStatus,
        *,
        only_from: Optional[Iterable[OrderStatus]] = None,
        payment_id: Optional[str] = None,
    ) -> OrderStatus:
        """
        Update an order's status in place.

        Args:
            local_order_id: Order to update
            new_status: Target status
            only_from: If given, apply only when the current status is one of
                these; the check and the write happen under the same lock
            payment_id: Gateway payment id to record with the change

        Returns:
            The status before the call. Callers compare it with ``only_from``
            to tell an applied change from a skipped one.

        Raises:
            OrderNotFound: If the order does not exist
        """
        new_status = OrderStatus(new_status)
        allowed = None if only_from is None else frozenset(OrderStatus(s) for s in only_from)

        with self._lock:
            record = self._orders.get(local_order_id)
            if record is None:
                raise OrderNotFound(f"order {local_order_id} not found")

            previous = record.status
            if allowed is not None and previous not in allowed:
                return previous

            record.status = new_status
            if payment_id:
                record.payment_id = payment_id
            record.updated_at = utcnow()
            return previous

    def list_orders(self) -> List[OrderRecord]:
        """Snapshot of all orders, oldest first."""
        with self._lock:
            records = [record.copy() for record in self._orders.values()]
        return sorted(records, key=lambda r: r.created_at)
