"""Challenge verification and payment provider connectors."""

from .base import (
    ChallengeVerifier,
    PaymentIntentConnector,
    PaymentIntentRequest,
    PaymentIntentResult,
    VerificationOutcome,
    MAX_METADATA_VALUE_LENGTH,
)
from .stripe_connector import StripeConnector
from .turnstile_connector import TurnstileVerifier
from .simulator_connector import (
    SimulatorVerifier,
    SimulatorPaymentConnector,
    SimulatedIntent,
)

__all__ = [
    # Base classes and models
    "ChallengeVerifier",
    "PaymentIntentConnector",
    "PaymentIntentRequest",
    "PaymentIntentResult",
    "VerificationOutcome",
    "MAX_METADATA_VALUE_LENGTH",
    # Connectors
    "StripeConnector",
    "TurnstileVerifier",
    "SimulatorVerifier",
    "SimulatorPaymentConnector",
    "SimulatedIntent",
]
