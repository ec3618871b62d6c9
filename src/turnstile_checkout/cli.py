#!/usr/bin/env python3
"""Command-line interface for the checkout service.

Usage:
    turnstile-checkout serve --host 0.0.0.0 --port 8787
    turnstile-checkout render-page > checkout.html
"""

import argparse
import logging
import sys
from typing import Optional

import uvicorn

from .config import CheckoutSettings
from .page import render_checkout_page

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )


def cmd_serve(args: argparse.Namespace, settings: CheckoutSettings) -> int:
    """Run the application under uvicorn."""
    if settings.provider_mode == "simulator":
        logger.warning("Running with simulator connectors; payments will not reach Stripe")
    if settings.block_on_verification_failure:
        logger.info("Payments are blocked when challenge verification fails")
    logger.info(f"Serving checkout on http://{args.host}:{args.port}")
    uvicorn.run(
        "turnstile_checkout.api:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level=args.log_level.lower(),
    )
    return 0


def cmd_render_page(args: argparse.Namespace, settings: CheckoutSettings) -> int:
    """Print the rendered checkout page."""
    sys.stdout.write(render_checkout_page(settings))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="turnstile-checkout",
        description="Checkout page with Turnstile-verified Stripe payment intents",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Logging level (defaults to LOG_LEVEL or INFO)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    serve = subparsers.add_parser("serve", help="Run the HTTP server")
    serve.add_argument("--host", default="127.0.0.1", help="Bind address")
    serve.add_argument("--port", type=int, default=8787, help="Bind port")
    serve.add_argument("--reload", action="store_true", help="Reload on code changes")
    serve.set_defaults(handler=cmd_serve)

    render = subparsers.add_parser("render-page", help="Print the checkout page HTML")
    render.set_defaults(handler=cmd_render_page)

    return parser


def main(argv: Optional[list] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    settings = CheckoutSettings.from_env()
    args.log_level = args.log_level or settings.log_level
    configure_logging(args.log_level)
    return args.handler(args, settings)


if __name__ == "__main__":
    sys.exit(main())
