import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import HTMLResponse, JSONResponse
from pydantic import BaseModel, ConfigDict, Field
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from .config import CheckoutSettings
from .errors import PaymentProviderError, VerificationError, VerificationFailedError
from .page import PAYMENT_INTENT_PATH, render_checkout_page
from .security import create_limiter, get_client_ip
from .services import CheckoutService

logger = logging.getLogger(__name__)

# Cloudflare documents 2048 characters as the maximum token length
MAX_TOKEN_LENGTH = 2048


class PaymentIntentBody(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    turnstile_token: str = Field(..., alias="turnstileToken", max_length=MAX_TOKEN_LENGTH)


class PaymentIntentResponse(BaseModel):
    client_secret: str


async def verification_failed_handler(request: Request, exc: VerificationFailedError) -> JSONResponse:
    return JSONResponse(status_code=401, content={"detail": exc.outcome})


async def verification_error_handler(request: Request, exc: VerificationError) -> JSONResponse:
    return JSONResponse(status_code=502, content={"detail": "Challenge verification unavailable"})


async def payment_provider_error_handler(request: Request, exc: PaymentProviderError) -> JSONResponse:
    # Client-side problems keep the provider's status; anything else is a bad gateway
    status_code = exc.http_status if exc.http_status and 400 <= exc.http_status < 500 else 502
    return JSONResponse(status_code=status_code, content={"error": exc.to_dict()})


def create_app(
    settings: Optional[CheckoutSettings] = None,
    service: Optional[CheckoutService] = None,
) -> FastAPI:
    """Build the checkout application.

    Args:
        settings: Runtime configuration. Read from the environment when omitted.
        service: Pre-wired checkout service. Built from settings when omitted.
    """
    settings = settings or CheckoutSettings.from_env()
    service = service or CheckoutService.from_settings(settings)
    limiter = create_limiter(settings.client_ip_header)

    app = FastAPI(title="Turnstile Checkout")
    app.state.settings = settings
    app.state.service = service
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    app.add_exception_handler(VerificationFailedError, verification_failed_handler)
    app.add_exception_handler(VerificationError, verification_error_handler)
    app.add_exception_handler(PaymentProviderError, payment_provider_error_handler)

    @app.get("/", response_class=HTMLResponse)
    async def checkout_page():
        return HTMLResponse(render_checkout_page(settings))

    @app.post(PAYMENT_INTENT_PATH, response_model=PaymentIntentResponse)
    @limiter.limit(settings.payment_intent_rate_limit)
    async def create_payment_intent(request: Request, body: PaymentIntentBody):
        remote_ip = get_client_ip(request, settings.client_ip_header)
        result = await service.create_payment_intent(body.turnstile_token, remote_ip)
        return PaymentIntentResponse(client_secret=result.client_secret)

    @app.get("/health")
    async def health():
        return {"status": "ok", "providers": service.health_check()}

    return app


app = create_app()
