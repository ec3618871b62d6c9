"""Simulator connectors for running the checkout flow without real provider calls."""

import uuid
import logging
from collections import OrderedDict
from typing import Dict, Any, Optional
from dataclasses import dataclass, field
from datetime import datetime, timezone

from .base import (
    ChallengeVerifier,
    PaymentIntentConnector,
    PaymentIntentRequest,
    PaymentIntentResult,
    VerificationOutcome,
)

logger = logging.getLogger(__name__)


@dataclass
class SimulatedIntent:
    """In-memory representation of a simulated payment intent."""
    id: str
    client_secret: str
    amount: int
    currency: str
    request_three_d_secure: str
    status: str = "requires_payment_method"
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    metadata: Dict[str, str] = field(default_factory=dict)


class SimulatorVerifier(ChallengeVerifier):
    """
    Offline stand-in for siteverify.

    Special tokens:
    - ``sim_fail`` fails with ``invalid-input-response``
    - an empty token fails with ``missing-input-response``
    Every other token passes.
    """

    TOKEN_FAIL = "sim_fail"

    def __init__(self, hostname: str = "localhost"):
        self.hostname = hostname
        logger.info("SimulatorVerifier initialized")

    async def verify(self, token: str, remote_ip: Optional[str] = None) -> VerificationOutcome:
        if not token:
            return VerificationOutcome(success=False, error_codes=["missing-input-response"])
        if token == self.TOKEN_FAIL:
            return VerificationOutcome(success=False, error_codes=["invalid-input-response"])
        return VerificationOutcome(
            success=True,
            challenge_ts=datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z"),
            hostname=self.hostname,
        )

    def health_check(self) -> Dict[str, Any]:
        return {"ok": True, "provider": "simulator"}


class SimulatorPaymentConnector(PaymentIntentConnector):
    """
    Records payment intents in memory and mints Stripe-shaped client secrets.

    The ledger keeps at most ``max_intents`` entries; the oldest are evicted
    first.
    """

    def __init__(self, max_intents: int = 1000):
        if max_intents < 1:
            raise ValueError("max_intents must be at least 1")
        self.max_intents = max_intents
        self._intents: "OrderedDict[str, SimulatedIntent]" = OrderedDict()
        logger.info("SimulatorPaymentConnector initialized")

    def _generate_id(self) -> str:
        return f"pi_sim_{uuid.uuid4().hex[:24]}"

    def create_payment_intent(self, request: PaymentIntentRequest) -> PaymentIntentResult:
        intent_id = self._generate_id()
        intent = SimulatedIntent(
            id=intent_id,
            client_secret=f"{intent_id}_secret_{uuid.uuid4().hex[:24]}",
            amount=request.amount,
            currency=request.currency,
            request_three_d_secure=request.request_three_d_secure,
            metadata=dict(request.metadata),
        )
        self._intents[intent_id] = intent
        while len(self._intents) > self.max_intents:
            self._intents.popitem(last=False)
        return PaymentIntentResult(
            id=intent.id,
            client_secret=intent.client_secret,
            status=intent.status,
            amount=intent.amount,
            currency=intent.currency,
            metadata=intent.metadata,
            raw_provider_response={
                "simulator": True,
                "payment_method_options": {"card": {"request_three_d_secure": intent.request_three_d_secure}},
            },
        )

    def get_intent(self, intent_id: str) -> Optional[SimulatedIntent]:
        """Get an intent from in-memory storage (for testing)."""
        return self._intents.get(intent_id)

    def get_all_intents(self) -> Dict[str, SimulatedIntent]:
        """Get all intents (for testing)."""
        return dict(self._intents)

    def clear_intents(self) -> None:
        """Clear all stored intents (for test cleanup)."""
        self._intents.clear()

    def health_check(self) -> Dict[str, Any]:
        return {
            "ok": True,
            "provider": "simulator",
            "intent_count": len(self._intents),
        }
