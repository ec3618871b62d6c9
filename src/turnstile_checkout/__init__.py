# turnstile_checkout package
__version__ = "0.1.0"

from .config import CheckoutSettings, PAYMENT_AMOUNT, PAYMENT_CURRENCY
from .errors import (
    CheckoutError,
    VerificationError,
    VerificationFailedError,
    PaymentProviderError,
)
from .services import CheckoutService, build_intent_request
