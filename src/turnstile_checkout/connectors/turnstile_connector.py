"""Cloudflare Turnstile siteverify client."""

import logging
from typing import Any, Dict, Optional

import httpx
from pydantic import ValidationError

from ..config import TURNSTILE_VERIFY_URL
from ..errors import VerificationError
from .base import ChallengeVerifier, VerificationOutcome

logger = logging.getLogger(__name__)


class TurnstileVerifier(ChallengeVerifier):
    """
    Redeems Turnstile tokens with a form-encoded POST to siteverify.

    Tokens are single use; a second redemption comes back as a failed
    outcome with ``timeout-or-duplicate``, not as an exception.
    """

    def __init__(
        self,
        secret_key: str,
        verify_url: str = TURNSTILE_VERIFY_URL,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._secret_key = secret_key
        self.verify_url = verify_url
        self.timeout = timeout
        self._transport = transport
        if not secret_key:
            logger.warning("TURNSTILE_SECRET_KEY is not configured; every token will fail verification")

    async def verify(self, token: str, remote_ip: Optional[str] = None) -> VerificationOutcome:
        form = {
            "secret": self._secret_key,
            "response": token,
            "remoteip": remote_ip or "",
        }
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                r = await client.post(self.verify_url, data=form)
                r.raise_for_status()
                payload = r.json()
        except httpx.HTTPError as e:
            logger.error(f"Turnstile siteverify request failed: {e}")
            raise VerificationError("Challenge verification request failed") from e
        except ValueError as e:
            logger.error("Turnstile siteverify returned a non-JSON body")
            raise VerificationError("Challenge verification returned malformed JSON") from e

        return self._parse_outcome(payload)

    def _parse_outcome(self, payload: Any) -> VerificationOutcome:
        if not isinstance(payload, dict):
            raise VerificationError("Challenge verification returned an unexpected payload")
        try:
            outcome = VerificationOutcome.model_validate(payload)
        except ValidationError as e:
            logger.error(f"Turnstile siteverify payload failed validation: {e.error_count()} errors")
            raise VerificationError("Challenge verification returned an unexpected payload") from e
        if not outcome.success:
            logger.warning(f"Turnstile verification failed: {outcome.error_codes}")
        return outcome

    def health_check(self) -> Dict[str, Any]:
        return {
            "ok": bool(self._secret_key),
            "provider": "turnstile",
            "configured": bool(self._secret_key),
        }
