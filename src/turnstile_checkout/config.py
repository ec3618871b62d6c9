"""Environment-driven configuration for the checkout service."""

import os
from typing import Literal, Mapping, Optional

from pydantic import BaseModel, Field, field_validator

# Fixed order: every intent charges this amount in this currency.
PAYMENT_AMOUNT = 1000
PAYMENT_CURRENCY = "jpy"

STRIPE_API_VERSION = "2023-08-16"
STRIPE_APP_NAME = "turnstile-checkout"

TURNSTILE_VERIFY_URL = "https://challenges.cloudflare.com/turnstile/v0/siteverify"

_VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
_TRUTHY = {"1", "true", "yes", "on"}


class CheckoutSettings(BaseModel):
    """Runtime configuration.

    The four keys may be empty: the page still renders, and the intent
    route fails at the provider call instead.
    """

    turnstile_site_key: str = ""
    stripe_publishable_key: str = ""
    stripe_secret_key: str = ""
    turnstile_secret_key: str = ""

    block_on_verification_failure: bool = Field(
        False,
        description="Reject the payment with 401 when the challenge fails",
    )
    provider_mode: Literal["live", "simulator"] = "live"
    return_url: str = "http://localhost:8787"
    client_ip_header: str = "CF-Connecting-IP"
    payment_intent_rate_limit: str = "30/minute"
    turnstile_timeout: float = Field(10.0, gt=0)
    log_level: str = "INFO"

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        upper = v.upper()
        if upper not in _VALID_LOG_LEVELS:
            raise ValueError(f"log_level must be one of {_VALID_LOG_LEVELS}, got '{v}'")
        return upper

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "CheckoutSettings":
        """Build settings from environment variables.

        Args:
            environ: Mapping to read from. Defaults to ``os.environ``.

        Returns:
            Populated CheckoutSettings.
        """
        env = os.environ if environ is None else environ
        return cls(
            turnstile_site_key=env.get("TURNSTILE_SITE_KEY", ""),
            stripe_publishable_key=env.get("STRIPE_PUBLISHABLE_KEY", ""),
            stripe_secret_key=env.get("STRIPE_SECRET_KEY", ""),
            turnstile_secret_key=env.get("TURNSTILE_SECRET_KEY", ""),
            block_on_verification_failure=env.get("BLOCK_ON_VERIFICATION_FAILURE", "").lower() in _TRUTHY,
            provider_mode=env.get("CHECKOUT_PROVIDER_MODE", "live").lower(),
            return_url=env.get("CHECKOUT_RETURN_URL", "http://localhost:8787"),
            client_ip_header=env.get("CLIENT_IP_HEADER", "CF-Connecting-IP"),
            payment_intent_rate_limit=env.get("PAYMENT_INTENT_RATE_LIMIT", "30/minute"),
            turnstile_timeout=env.get("TURNSTILE_TIMEOUT_SECONDS", "10.0"),
            log_level=env.get("LOG_LEVEL", "INFO"),
        )
