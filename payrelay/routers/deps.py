"""
Shared Dependencies for Routers

The ledger, engine and gateway client are created once per application by
``create_app`` and kept on ``app.state``; handlers receive them through these
dependencies instead of importing module-level singletons.
"""

from fastapi import Request

from payrelay.config import Settings
from payrelay.orders import OrderCreationService, OrderLedger, ReconciliationEngine


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_ledger(request: Request) -> OrderLedger:
    return request.app.state.ledger


def get_reconciliation_engine(request: Request) -> ReconciliationEngine:
    return request.app.state.engine


def get_order_service(request: Request) -> OrderCreationService:
    return request.app.state.order_service
