"""
FastAPI Routers Package

All routers are included by payrelay.app.create_app.
"""

from payrelay.routers.orders import router as orders_router
from payrelay.routers.payments import router as payments_router
from payrelay.routers.webhooks import router as webhooks_router

__all__ = [
    "orders_router",
    "payments_router",
    "webhooks_router",
]
