import logging
from typing import Dict, Any, Optional
import stripe
from ..config import STRIPE_API_VERSION, STRIPE_APP_NAME
from ..errors import PaymentProviderError
from .base import PaymentIntentConnector, PaymentIntentRequest, PaymentIntentResult

logger = logging.getLogger(__name__)


def _classify_error(e: stripe.StripeError) -> str:
    if isinstance(e, stripe.CardError):
        return "card_error"
    if isinstance(e, stripe.RateLimitError):
        return "rate_limit"
    if isinstance(e, stripe.InvalidRequestError):
        return "invalid_request"
    if isinstance(e, stripe.AuthenticationError):
        return "authentication_error"
    if isinstance(e, stripe.APIConnectionError):
        return "connection_error"
    return "api_error"


class StripeConnector(PaymentIntentConnector):
    """
    Stripe connector creating PaymentIntents for the Payment Element flow.
    The intent is left unconfirmed; the browser confirms it with Stripe.js
    using the returned client_secret.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        api_version: str = STRIPE_API_VERSION,
        app_name: str = STRIPE_APP_NAME,
    ):
        self._api_key = api_key or ""
        self.api_version = api_version
        if not self._api_key:
            # connector will still exist but will error on operations if not configured
            logger.warning("STRIPE_SECRET_KEY is not configured; payment intents cannot be created")
        stripe.set_app_info(app_name)

    def create_payment_intent(self, request: PaymentIntentRequest) -> PaymentIntentResult:
        if not self._api_key:
            raise PaymentProviderError("authentication_error", "Payments provider is not configured")
        try:
            pi = stripe.PaymentIntent.create(
                api_key=self._api_key,
                stripe_version=self.api_version,
                amount=request.amount,
                currency=request.currency,
                metadata=request.metadata,
                payment_method_options={
                    "card": {"request_three_d_secure": request.request_three_d_secure},
                },
            )
        except stripe.StripeError as e:
            error_type = _classify_error(e)
            logger.error(f"Stripe PaymentIntent creation failed ({error_type}): {e.code or 'no code'}")
            raise PaymentProviderError(
                error_type,
                e.user_message or "Payment provider request failed",
                code=e.code,
                http_status=e.http_status,
            ) from e

        raw = pi.to_dict()
        return PaymentIntentResult(
            id=pi.id,
            client_secret=pi.client_secret,
            status=pi.status,
            amount=raw.get("amount", request.amount),
            currency=raw.get("currency", request.currency),
            metadata=raw.get("metadata") or request.metadata,
            # the secret goes to the browser only via the top-level result field
            raw_provider_response={k: v for k, v in raw.items() if k != "client_secret"},
        )

    def health_check(self) -> Dict[str, Any]:
        return {
            "ok": bool(self._api_key),
            "provider": "stripe",
            "configured": bool(self._api_key),
            "api_version": self.api_version,
        }
