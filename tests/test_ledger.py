"""Tests for the in-memory order ledger"""
import threading
from decimal import Decimal

import pytest

from payrelay.errors import DuplicateKey, LedgerIntegrityError, OrderNotFound
from payrelay.orders import OrderLedger, OrderRecord
from payrelay.payments.constants import OrderStatus


def _record(local_id: str = "local-1", gateway_id: str = "order_1", amount: str = "100.00") -> OrderRecord:
    return OrderRecord(
        local_order_id=local_id,
        gateway_order_id=gateway_id,
        amount=Decimal(amount),
        currency="INR",
    )


class TestPut:
    def test_new_order_is_pending(self, ledger):
        ledger.put("local-1", _record())
        assert ledger.get_by_local_id("local-1").status == OrderStatus.PENDING

    def test_duplicate_local_id(self, ledger):
        ledger.put("local-1", _record())
        with pytest.raises(DuplicateKey):
            ledger.put("local-1", _record(gateway_id="order_2"))
        assert len(ledger) == 1
        assert ledger.get_by_gateway_id("order_2") is None

    def test_duplicate_gateway_id(self, ledger):
        ledger.put("local-1", _record())
        with pytest.raises(DuplicateKey):
            ledger.put("local-2", _record(local_id="local-2"))
        assert "local-2" not in ledger
        assert ledger.get_by_gateway_id("order_1").local_order_id == "local-1"

    def test_key_must_match_record(self, ledger):
        with pytest.raises(ValueError):
            ledger.put("other", _record())
        assert len(ledger) == 0


class TestLookups:
    def test_get_by_local_id_missing(self, ledger):
        assert ledger.get_by_local_id("nope") is None

    def test_get_by_gateway_id_missing(self, ledger):
        assert ledger.get_by_gateway_id("order_never") is None

    def test_get_by_gateway_id_returns_all_fields(self, ledger):
        original = _record(amount="100.5")
        ledger.put("local-1", original)

        found = ledger.get_by_gateway_id("order_1")

        assert found.local_order_id == "local-1"
        assert found.gateway_order_id == "order_1"
        assert found.amount == Decimal("100.50")
        assert found.currency == "INR"
        assert found.status == OrderStatus.PENDING
        assert found.created_at == original.created_at

    def test_returned_records_are_copies(self, ledger):
        ledger.put("local-1", _record())
        found = ledger.get_by_local_id("local-1")
        found.status = OrderStatus.PAID
        assert ledger.get_by_local_id("local-1").status == OrderStatus.PENDING

    def test_inserted_record_is_detached(self, ledger):
        record = _record()
        ledger.put("local-1", record)
        record.status = OrderStatus.FAILED
        assert ledger.get_by_local_id("local-1").status == OrderStatus.PENDING

    def test_index_inconsistency_is_a_fault(self, ledger):
        ledger.put("local-1", _record())
        # Simulate corruption of the primary map
        del ledger._orders["local-1"]
        with pytest.raises(LedgerIntegrityError):
            ledger.get_by_gateway_id("order_1")

    def test_list_orders(self, ledger):
        ledger.put("local-1", _record())
        ledger.put("local-2", _record(local_id="local-2", gateway_id="order_2"))
        assert [r.local_order_id for r in ledger.list_orders()] == ["local-1", "local-2"]


class TestSetStatus:
    def test_returns_previous_status(self, ledger):
        ledger.put("local-1", _record())
        assert ledger.set_status("local-1", OrderStatus.PAID) == OrderStatus.PENDING
        assert ledger.set_status("local-1", OrderStatus.PAID) == OrderStatus.PAID
        assert ledger.get_by_local_id("local-1").status == OrderStatus.PAID

    def test_missing_order(self, ledger):
        with pytest.raises(OrderNotFound):
            ledger.set_status("nope", OrderStatus.PAID)

    def test_only_from_skips_when_not_allowed(self, ledger):
        ledger.put("local-1", _record())
        ledger.set_status("local-1", OrderStatus.PAID)

        previous = ledger.set_status("local-1", OrderStatus.FAILED, only_from={OrderStatus.PENDING})

        assert previous == OrderStatus.PAID
        assert ledger.get_by_local_id("local-1").status == OrderStatus.PAID

    def test_records_payment_id(self, ledger):
        ledger.put("local-1", _record())
        before = ledger.get_by_local_id("local-1").updated_at
        ledger.set_status("local-1", OrderStatus.PAID, payment_id="pay_1")
        found = ledger.get_by_local_id("local-1")
        assert found.payment_id == "pay_1"
        assert found.updated_at >= before

    def test_accepts_plain_strings(self, ledger):
        ledger.put("local-1", _record())
        ledger.set_status("local-1", "failed")
        assert ledger.get_by_local_id("local-1").status == OrderStatus.FAILED

    def test_concurrent_conditional_updates_apply_once(self, ledger):
        ledger.put("local-1", _record())
        results = []
        barrier = threading.Barrier(16)

        def worker():
            barrier.wait()
            results.append(
                ledger.set_status("local-1", OrderStatus.PAID, only_from={OrderStatus.PENDING})
            )

        threads = [threading.Thread(target=worker) for _ in range(16)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert results.count(OrderStatus.PENDING) == 1
        assert results.count(OrderStatus.PAID) == 15
