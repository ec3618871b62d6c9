"""Shared test fixtures and configuration."""

import json
import os
import pytest
from unittest.mock import MagicMock
from typing import Any, Callable, Dict, List
from urllib.parse import parse_qs

import httpx

# Set up test environment variables before importing modules
os.environ.setdefault("TURNSTILE_SITE_KEY", "1x00000000000000000000AA")
os.environ.setdefault("STRIPE_PUBLISHABLE_KEY", "pk_test_dummy_publishable_key")
os.environ.setdefault("STRIPE_SECRET_KEY", "sk_test_dummy_key_for_testing")
os.environ.setdefault("TURNSTILE_SECRET_KEY", "1x0000000000000000000000000000000AA")

from turnstile_checkout.config import CheckoutSettings


@pytest.fixture
def settings() -> CheckoutSettings:
    """Return live-mode settings with test keys."""
    return CheckoutSettings(
        turnstile_site_key="1x00000000000000000000AA",
        stripe_publishable_key="pk_test_51AbCdEfGhIjKlMnOp",
        stripe_secret_key="sk_test_51AbCdEfGhIjKlMnOp",
        turnstile_secret_key="1x0000000000000000000000000000000AA",
    )


@pytest.fixture
def success_outcome() -> Dict[str, Any]:
    """Return a passing siteverify payload."""
    return {
        "success": True,
        "challenge_ts": "2026-10-19T09:15:02.123Z",
        "hostname": "checkout.example.com",
        "error-codes": [],
        "action": "checkout",
        "cdata": "session-42",
    }


@pytest.fixture
def failed_outcome() -> Dict[str, Any]:
    """Return a failing siteverify payload."""
    return {
        "success": False,
        "error-codes": ["invalid-input-response"],
    }


@pytest.fixture
def siteverify_transport() -> Callable[..., httpx.MockTransport]:
    """Build a mock siteverify transport that records submitted forms.

    The returned factory takes the JSON payload (or raw bytes) to answer with
    and an optional status code; submitted forms are appended to
    ``transport.forms``.
    """

    def factory(payload: Any, status_code: int = 200) -> httpx.MockTransport:
        forms: List[Dict[str, str]] = []

        def handler(request: httpx.Request) -> httpx.Response:
            parsed = parse_qs(request.content.decode(), keep_blank_values=True)
            forms.append({k: v[0] for k, v in parsed.items()})
            if isinstance(payload, bytes):
                return httpx.Response(status_code, content=payload)
            return httpx.Response(status_code, content=json.dumps(payload).encode(),
                                  headers={"content-type": "application/json"})

        transport = httpx.MockTransport(handler)
        transport.forms = forms
        return transport

    return factory


def _mock_payment_intent(metadata: Dict[str, str], three_ds: str = "automatic") -> MagicMock:
    mock_pi = MagicMock()
    mock_pi.id = "pi_3NxYz1234567890abcdefghi"
    mock_pi.client_secret = "pi_3NxYz1234567890abcdefghi_secret_AbCdEf"
    mock_pi.status = "requires_payment_method"
    mock_pi.to_dict.return_value = {
        "id": "pi_3NxYz1234567890abcdefghi",
        "object": "payment_intent",
        "status": "requires_payment_method",
        "amount": 1000,
        "currency": "jpy",
        "client_secret": "pi_3NxYz1234567890abcdefghi_secret_AbCdEf",
        "metadata": metadata,
        "payment_method_options": {"card": {"request_three_d_secure": three_ds}},
    }
    return mock_pi


@pytest.fixture
def mock_stripe_payment_intent():
    """Create a mock Stripe PaymentIntent for a passed challenge."""
    return _mock_payment_intent({"turnstile_result": "success"})


@pytest.fixture
def stripe_create_echo():
    """Side effect for stripe.PaymentIntent.create that echoes the request."""

    def create(**params):
        return _mock_payment_intent(
            params.get("metadata", {}),
            params["payment_method_options"]["card"]["request_three_d_secure"],
        )

    return create
