"""Checkout service layer: verify the challenge, then create the payment intent."""

import logging
from typing import Optional, Dict

from fastapi.concurrency import run_in_threadpool

from .config import PAYMENT_AMOUNT, PAYMENT_CURRENCY, CheckoutSettings
from .connectors.base import (
    ChallengeVerifier,
    PaymentIntentConnector,
    PaymentIntentRequest,
    PaymentIntentResult,
    VerificationOutcome,
)
from .connectors.simulator_connector import SimulatorPaymentConnector, SimulatorVerifier
from .connectors.stripe_connector import StripeConnector
from .connectors.turnstile_connector import TurnstileVerifier
from .errors import VerificationFailedError

logger = logging.getLogger(__name__)


def build_intent_request(outcome: VerificationOutcome) -> PaymentIntentRequest:
    """Build the fixed-price intent request for a verification outcome.

    A passed challenge lets the card network decide on 3D Secure; a failed
    one forces it whenever the card supports it.
    """
    return PaymentIntentRequest(
        amount=PAYMENT_AMOUNT,
        currency=PAYMENT_CURRENCY,
        metadata=outcome.to_metadata(),
        request_three_d_secure="automatic" if outcome.success else "any",
    )


class CheckoutService:
    """Service class for the payment-intent flow."""

    def __init__(
        self,
        verifier: ChallengeVerifier,
        connector: PaymentIntentConnector,
        block_on_verification_failure: bool = False,
    ):
        """Initialize the service.

        Args:
            verifier: Redeems challenge tokens.
            connector: Creates payment intents.
            block_on_verification_failure: Reject failed challenges instead of
                recording them in the intent metadata.
        """
        self.verifier = verifier
        self.connector = connector
        self.block_on_verification_failure = block_on_verification_failure

    @classmethod
    def from_settings(cls, settings: CheckoutSettings) -> "CheckoutService":
        """Wire live or simulated connectors according to settings."""
        if settings.provider_mode == "simulator":
            logger.info("Using simulator connectors; no provider will be contacted")
            verifier: ChallengeVerifier = SimulatorVerifier()
            connector: PaymentIntentConnector = SimulatorPaymentConnector()
        else:
            verifier = TurnstileVerifier(
                secret_key=settings.turnstile_secret_key,
                timeout=settings.turnstile_timeout,
            )
            connector = StripeConnector(api_key=settings.stripe_secret_key)
        return cls(
            verifier=verifier,
            connector=connector,
            block_on_verification_failure=settings.block_on_verification_failure,
        )

    async def create_payment_intent(self, token: str, remote_ip: Optional[str] = None) -> PaymentIntentResult:
        """Verify a challenge token and create a payment intent.

        Args:
            token: Challenge token from the client widget.
            remote_ip: Caller address from the trusted proxy header.

        Returns:
            The created PaymentIntentResult.

        Raises:
            VerificationError: If the verification endpoint is unusable.
            VerificationFailedError: If the challenge failed and blocking is enabled.
            PaymentProviderError: If the payments provider rejects the request.
        """
        outcome = await self.verifier.verify(token, remote_ip)

        if not outcome.success and self.block_on_verification_failure:
            logger.warning(f"Blocking payment after failed challenge: {outcome.error_codes}")
            raise VerificationFailedError(outcome.model_dump(by_alias=True))

        request = build_intent_request(outcome)
        result = await run_in_threadpool(self.connector.create_payment_intent, request)
        logger.info(
            f"Created payment intent {result.id} "
            f"(turnstile_result={outcome.result_label}, 3ds={request.request_three_d_secure})"
        )
        return result

    def health_check(self) -> Dict[str, Dict]:
        return {
            "verifier": self.verifier.health_check(),
            "connector": self.connector.health_check(),
        }
