"""Relay configuration and validation."""
import os
from dataclasses import dataclass, field
from typing import Tuple

from payrelay.errors import ServerMisconfigured
from payrelay.logging import get_logger
from payrelay.payments.constants import DEFAULT_CURRENCY

logger = get_logger(__name__)

DEFAULT_API_URL = "https://api.razorpay.com/v1"

# Setting -> environment variables, first one set wins
SETTINGS_ENV: dict[str, Tuple[str, ...]] = {
    "key_id": ("RAZORPAY_KEY_ID", "RZP_KEY_ID"),
    "key_secret": ("RAZORPAY_KEY_SECRET", "RZP_KEY_SECRET"),
    "webhook_secret": ("RAZORPAY_WEBHOOK_SECRET", "RZP_WEBHOOK_SECRET"),
}


def _env(*names: str) -> str:
    for name in names:
        value = os.environ.get(name)
        if value:
            return value
    return ""


@dataclass(frozen=True)
class Settings:
    """Runtime settings for the relay."""
    key_id: str = ""
    key_secret: str = ""
    webhook_secret: str = ""
    api_url: str = DEFAULT_API_URL
    default_currency: str = DEFAULT_CURRENCY
    cors_origins: Tuple[str, ...] = field(default_factory=lambda: ("*",))

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from environment variables."""
        origins = os.environ.get("CORS_ORIGINS", "*")
        return cls(
            key_id=_env(*SETTINGS_ENV["key_id"]),
            key_secret=_env(*SETTINGS_ENV["key_secret"]),
            webhook_secret=_env(*SETTINGS_ENV["webhook_secret"]),
            api_url=os.environ.get("RAZORPAY_API_URL", DEFAULT_API_URL).rstrip("/"),
            default_currency=os.environ.get("DEFAULT_CURRENCY", DEFAULT_CURRENCY).upper(),
            cors_origins=tuple(o.strip() for o in origins.split(",") if o.strip()) or ("*",),
        )


def validate_gateway_config(settings: Settings) -> Tuple[str, str]:
    """
    Validate the credentials needed to call the gateway.

    Returns:
        (key_id, key_secret)

    Raises:
        ServerMisconfigured: If either credential is missing
    """
    missing = [
        SETTINGS_ENV[name][0]
        for name in ("key_id", "key_secret")
        if not getattr(settings, name)
    ]
    if missing:
        logger.error("Razorpay gateway not configured. Missing: %s", missing)
        raise ServerMisconfigured(f"Configure: {', '.join(missing)}")
    return settings.key_id, settings.key_secret


def is_gateway_configured(settings: Settings) -> bool:
    """Check gateway credentials without raising."""
    return bool(settings.key_id and settings.key_secret)
