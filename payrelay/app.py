"""
payrelay - FastAPI application factory

Wires the order ledger, reconciliation engine, order creation service and
Razorpay client into one app. Every collaborator can be passed in, which is how
the tests run the app against a fresh ledger and a mocked gateway.
"""
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from payrelay import __version__
from payrelay.config import Settings, is_gateway_configured
from payrelay.errors import DuplicateKey, RelayError
from payrelay.logging import get_logger
from payrelay.orders import OrderCreationService, OrderLedger, ReconciliationEngine
from payrelay.routers import orders_router, payments_router, webhooks_router
from payrelay.services import RazorpayClient

logger = get_logger(__name__)


async def relay_error_handler(request: Request, exc: RelayError) -> JSONResponse:
    """Render RelayError as {"ok": false, "error": <code>}."""
    if isinstance(exc, DuplicateKey):
        logger.error("Ledger anomaly on %s: %s", request.url.path, exc.message)
    elif exc.status_code >= 500:
        logger.error("%s on %s: %s", exc.code, request.url.path, exc.message)
    else:
        logger.info("%s on %s", exc.code, request.url.path)
    return JSONResponse(exc.to_dict(), status_code=exc.status_code)


def create_app(
    settings: Optional[Settings] = None,
    ledger: Optional[OrderLedger] = None,
    gateway: Optional[RazorpayClient] = None,
) -> FastAPI:
    """Build the relay application."""
    settings = settings or Settings.from_env()
    ledger = ledger if ledger is not None else OrderLedger()
    gateway = gateway or RazorpayClient(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan handler"""
        if not is_gateway_configured(settings):
            logger.warning("Razorpay key id/secret not configured; order creation will fail")
        if not settings.webhook_secret:
            logger.warning("RAZORPAY_WEBHOOK_SECRET not configured; webhooks will be rejected")
        yield
        await gateway.aclose()

    app = FastAPI(
        title="payrelay",
        description="Razorpay payment-order relay",
        version=__version__,
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.ledger = ledger
    app.state.gateway = gateway
    app.state.engine = ReconciliationEngine(ledger, settings)
    app.state.order_service = OrderCreationService(ledger, gateway, settings)

    # Checkout runs in the browser on another origin
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_credentials="*" not in settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(RelayError, relay_error_handler)

    app.include_router(orders_router)
    app.include_router(payments_router)
    app.include_router(webhooks_router)

    @app.get("/api/health")
    async def health_check():
        """Health check endpoint"""
        return {
            "status": "ok",
            "service": "payrelay",
            "gateway_configured": is_gateway_configured(settings),
            "webhook_configured": bool(settings.webhook_secret),
            "orders": len(ledger),
        }

    return app
