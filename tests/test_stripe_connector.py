"""Tests for StripeConnector implementation."""

import pytest
from unittest.mock import patch
import stripe

from turnstile_checkout.config import STRIPE_API_VERSION
from turnstile_checkout.connectors.stripe_connector import StripeConnector
from turnstile_checkout.connectors.simulator_connector import SimulatorPaymentConnector
from turnstile_checkout.connectors.base import PaymentIntentRequest
from turnstile_checkout.errors import PaymentProviderError


@pytest.fixture
def connector():
    """Create a StripeConnector instance."""
    return StripeConnector(api_key="sk_test_mock")


@pytest.fixture
def intent_request():
    return PaymentIntentRequest(
        amount=1000,
        currency="jpy",
        metadata={"turnstile_result": "success", "turnstile_challenge_ts": "2026-10-19T09:15:02.123Z"},
        request_three_d_secure="automatic",
    )


class TestStripeConnectorInit:
    """Tests for StripeConnector initialization."""

    def test_init_with_api_key_argument(self):
        connector = StripeConnector(api_key="sk_test_key")
        assert connector._api_key == "sk_test_key"
        assert connector.api_version == STRIPE_API_VERSION

    def test_init_without_api_key_still_constructs(self):
        """A missing key is reported at call time, not construction time."""
        connector = StripeConnector(api_key="")
        assert connector.health_check()["configured"] is False

    def test_create_without_api_key_raises(self, intent_request):
        connector = StripeConnector()
        with patch("stripe.PaymentIntent.create") as mock_create:
            with pytest.raises(PaymentProviderError) as exc_info:
                connector.create_payment_intent(intent_request)
        assert exc_info.value.error_type == "authentication_error"
        mock_create.assert_not_called()


class TestCreatePaymentIntent:
    """Tests for StripeConnector.create_payment_intent."""

    def test_create_success(self, connector, intent_request, mock_stripe_payment_intent):
        with patch("stripe.PaymentIntent.create", return_value=mock_stripe_payment_intent):
            result = connector.create_payment_intent(intent_request)

        assert result.id == "pi_3NxYz1234567890abcdefghi"
        assert result.client_secret == "pi_3NxYz1234567890abcdefghi_secret_AbCdEf"
        assert result.amount == 1000
        assert result.currency == "jpy"

    def test_create_sends_expected_parameters(self, connector, intent_request, mock_stripe_payment_intent):
        with patch("stripe.PaymentIntent.create", return_value=mock_stripe_payment_intent) as mock_create:
            connector.create_payment_intent(intent_request)

        kwargs = mock_create.call_args.kwargs
        assert kwargs["amount"] == 1000
        assert kwargs["currency"] == "jpy"
        assert kwargs["metadata"] == intent_request.metadata
        assert kwargs["payment_method_options"] == {"card": {"request_three_d_secure": "automatic"}}
        assert kwargs["api_key"] == "sk_test_mock"
        assert kwargs["stripe_version"] == STRIPE_API_VERSION

    def test_create_forwards_strict_three_d_secure(self, connector, mock_stripe_payment_intent):
        request = PaymentIntentRequest(
            amount=1000, currency="jpy",
            metadata={"turnstile_result": "failed"},
            request_three_d_secure="any",
        )
        with patch("stripe.PaymentIntent.create", return_value=mock_stripe_payment_intent) as mock_create:
            connector.create_payment_intent(request)

        assert mock_create.call_args.kwargs["payment_method_options"]["card"]["request_three_d_secure"] == "any"

    def test_raw_response_drops_only_client_secret(self, connector, intent_request, mock_stripe_payment_intent):
        with patch("stripe.PaymentIntent.create", return_value=mock_stripe_payment_intent):
            result = connector.create_payment_intent(intent_request)

        assert "client_secret" not in result.raw_provider_response
        assert result.raw_provider_response["id"] == "pi_3NxYz1234567890abcdefghi"

    def test_raw_response_keeps_three_d_secure_policy(self, connector, stripe_create_echo):
        request = PaymentIntentRequest(
            amount=1000, currency="jpy",
            metadata={"turnstile_result": "failed"},
            request_three_d_secure="any",
        )
        with patch("stripe.PaymentIntent.create", side_effect=stripe_create_echo):
            live = connector.create_payment_intent(request)
        simulated = SimulatorPaymentConnector().create_payment_intent(request)

        expected = {"card": {"request_three_d_secure": "any"}}
        assert live.raw_provider_response["payment_method_options"] == expected
        assert simulated.raw_provider_response["payment_method_options"] == expected


class TestStripeErrorHandling:
    """Tests for Stripe API error classification."""

    @pytest.mark.parametrize("error, error_type", [
        (stripe.CardError(message="Your card was declined.", param="card", code="card_declined"), "card_error"),
        (stripe.RateLimitError(message="Too many requests"), "rate_limit"),
        (stripe.InvalidRequestError(message="Invalid currency", param="currency"), "invalid_request"),
        (stripe.AuthenticationError(message="Invalid API key"), "authentication_error"),
        (stripe.APIConnectionError(message="Connection failed"), "connection_error"),
        (stripe.APIError(message="API error"), "api_error"),
    ])
    def test_errors_are_classified(self, connector, intent_request, error, error_type):
        with patch("stripe.PaymentIntent.create", side_effect=error):
            with pytest.raises(PaymentProviderError) as exc_info:
                connector.create_payment_intent(intent_request)

        assert exc_info.value.error_type == error_type
        assert exc_info.value.__cause__ is error

    def test_card_error_keeps_code_and_status(self, connector, intent_request):
        error = stripe.CardError(
            message="Your card was declined.", param="card", code="card_declined", http_status=402
        )
        with patch("stripe.PaymentIntent.create", side_effect=error):
            with pytest.raises(PaymentProviderError) as exc_info:
                connector.create_payment_intent(intent_request)

        assert exc_info.value.code == "card_declined"
        assert exc_info.value.http_status == 402
        assert exc_info.value.message == "Your card was declined."
