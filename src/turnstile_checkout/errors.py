"""Exceptions raised while verifying challenges and creating payment intents."""

from typing import Any, Dict, Optional


class CheckoutError(Exception):
    """Base class for checkout failures."""


class VerificationError(CheckoutError):
    """The challenge verification endpoint could not be reached or answered garbage."""


class VerificationFailedError(CheckoutError):
    """The challenge token was redeemed but did not pass verification.

    Only raised when blocking on verification failure is enabled.
    """

    def __init__(self, outcome: Dict[str, Any]):
        self.outcome = outcome
        super().__init__(f"Challenge verification failed: {outcome.get('error-codes') or []}")


class PaymentProviderError(CheckoutError):
    """The payments provider rejected or failed a request.

    Attributes:
        error_type: Canonical error category (card_error, rate_limit, ...).
        message: Provider message safe to show the client.
        code: Provider error code, if any.
        http_status: HTTP status reported by the provider, if any.
    """

    def __init__(
        self,
        error_type: str,
        message: str,
        code: Optional[str] = None,
        http_status: Optional[int] = None,
    ):
        self.error_type = error_type
        self.message = message
        self.code = code
        self.http_status = http_status
        super().__init__(f"{error_type}: {message}")

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.error_type, "message": self.message, "code": self.code}
