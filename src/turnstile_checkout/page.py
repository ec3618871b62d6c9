"""Checkout page rendering."""

from functools import lru_cache

from jinja2 import Environment, PackageLoader, StrictUndefined, select_autoescape

from .config import PAYMENT_AMOUNT, PAYMENT_CURRENCY, CheckoutSettings

PAGE_TEMPLATE = "checkout.html"
PAYMENT_INTENT_PATH = "/payment-intent"


@lru_cache(maxsize=1)
def get_template_environment() -> Environment:
    return Environment(
        loader=PackageLoader("turnstile_checkout", "templates"),
        autoescape=select_autoescape(["html"]),
        undefined=StrictUndefined,
    )


def render_checkout_page(settings: CheckoutSettings) -> str:
    """Render the checkout page with the public keys embedded.

    Empty keys render as empty strings; the widgets then fail to initialise
    in the browser.
    """
    template = get_template_environment().get_template(PAGE_TEMPLATE)
    return template.render(
        turnstile_site_key=settings.turnstile_site_key,
        stripe_publishable_key=settings.stripe_publishable_key,
        amount=PAYMENT_AMOUNT,
        currency=PAYMENT_CURRENCY,
        return_url=settings.return_url,
        payment_intent_path=PAYMENT_INTENT_PATH,
    )
