"""Pytest configuration and fixtures"""
import hashlib
import hmac
import json
import os
from decimal import Decimal
from typing import Any, Callable, Dict, List

import httpx
import pytest

# Set test environment variables
os.environ.setdefault("RAZORPAY_KEY_ID", "rzp_test_key")
os.environ.setdefault("RAZORPAY_KEY_SECRET", "test_key_secret")
os.environ.setdefault("RAZORPAY_WEBHOOK_SECRET", "test_webhook_secret")

from payrelay.config import Settings  # noqa: E402
from payrelay.orders import OrderLedger, OrderRecord, ReconciliationEngine  # noqa: E402
from payrelay.services import RazorpayClient  # noqa: E402

KEY_SECRET = "test_key_secret"
WEBHOOK_SECRET = "test_webhook_secret"


@pytest.fixture
def settings() -> Settings:
    """Settings with test credentials"""
    return Settings(
        key_id="rzp_test_key",
        key_secret=KEY_SECRET,
        webhook_secret=WEBHOOK_SECRET,
        api_url="https://api.razorpay.test/v1",
    )


@pytest.fixture
def ledger() -> OrderLedger:
    """Fresh empty ledger"""
    return OrderLedger()


@pytest.fixture
def engine(ledger, settings) -> ReconciliationEngine:
    return ReconciliationEngine(ledger, settings)


@pytest.fixture
def pending_order(ledger) -> OrderRecord:
    """Order 'local-abc' registered for gateway order 'order_abc'"""
    record = OrderRecord(
        local_order_id="local-abc",
        gateway_order_id="order_abc",
        amount=Decimal("100.00"),
        currency="INR",
    )
    ledger.put(record.local_order_id, record)
    return record


@pytest.fixture
def sign_callback() -> Callable[[str, str], str]:
    """Build a checkout callback signature the way Razorpay does"""
    def _sign(order_id: str, payment_id: str, secret: str = KEY_SECRET) -> str:
        message = f"{order_id}|{payment_id}".encode("utf-8")
        return hmac.new(secret.encode("utf-8"), message, hashlib.sha256).hexdigest()
    return _sign


@pytest.fixture
def webhook_body() -> Callable[..., bytes]:
    """Serialize a Razorpay-shaped webhook body"""
    def _body(event: str, payment: Dict[str, Any] | None = None, order: Dict[str, Any] | None = None,
              refund: Dict[str, Any] | None = None) -> bytes:
        payload: Dict[str, Any] = {}
        if payment is not None:
            payload["payment"] = {"entity": payment}
        if order is not None:
            payload["order"] = {"entity": order}
        if refund is not None:
            payload["refund"] = {"entity": refund}
        body = {
            "entity": "event",
            "account_id": "acc_test",
            "event": event,
            "contains": list(payload.keys()),
            "payload": payload,
            "created_at": 1700000000,
        }
        return json.dumps(body).encode("utf-8")
    return _body


@pytest.fixture
def sign_webhook() -> Callable[[bytes], str]:
    def _sign(raw_body: bytes, secret: str = WEBHOOK_SECRET) -> str:
        return hmac.new(secret.encode("utf-8"), raw_body, hashlib.sha256).hexdigest()
    return _sign


@pytest.fixture
def gateway_requests() -> List[httpx.Request]:
    """Requests seen by the mocked Razorpay API"""
    return []


@pytest.fixture
def gateway(settings, gateway_requests) -> RazorpayClient:
    """RazorpayClient backed by httpx.MockTransport"""
    counter = {"n": 0}

    def handler(request: httpx.Request) -> httpx.Response:
        gateway_requests.append(request)
        body = json.loads(request.content)
        counter["n"] += 1
        return httpx.Response(
            200,
            json={
                "id": f"order_test{counter['n']}",
                "entity": "order",
                "amount": body["amount"],
                "amount_paid": 0,
                "currency": body["currency"],
                "receipt": body.get("receipt"),
                "status": "created",
            },
        )

    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return RazorpayClient(settings, http_client=client)
