from abc import ABC, abstractmethod
from typing import Optional, Dict, Any, List, Literal
from pydantic import BaseModel, ConfigDict, Field

# Stripe rejects metadata values longer than this
MAX_METADATA_VALUE_LENGTH = 500


# Canonical models
class VerificationOutcome(BaseModel):
    """Result of redeeming a challenge token, as returned by siteverify."""
    model_config = ConfigDict(populate_by_name=True)

    success: bool
    challenge_ts: Optional[str] = None
    hostname: Optional[str] = None
    error_codes: List[str] = Field(default_factory=list, alias="error-codes")
    action: Optional[str] = None
    cdata: Optional[str] = None

    @property
    def result_label(self) -> str:
        return "success" if self.success else "failed"

    def to_metadata(self) -> Dict[str, str]:
        """
        Flatten the outcome into payment-intent metadata. Absent fields are
        omitted rather than sent as empty strings.
        """
        metadata = {"turnstile_result": self.result_label}
        optional = {
            "turnstile_challenge_ts": self.challenge_ts,
            "turnstile_hostname": self.hostname,
            "turnstile_action": self.action,
            "turnstile_cdata": self.cdata,
            "turnstile_error_codes": ",".join(self.error_codes) or None,
        }
        for key, value in optional.items():
            if value:
                metadata[key] = value[:MAX_METADATA_VALUE_LENGTH]
        return metadata


class PaymentIntentRequest(BaseModel):
    amount: int = Field(..., gt=0)  # minor units
    currency: str = Field(..., pattern=r"^[a-z]{3}$")
    metadata: Dict[str, str] = Field(default_factory=dict)
    request_three_d_secure: Literal["automatic", "any"] = "automatic"


class PaymentIntentResult(BaseModel):
    id: str
    client_secret: str
    status: str
    amount: int
    currency: str
    metadata: Dict[str, str] = Field(default_factory=dict)
    raw_provider_response: Optional[Dict[str, Any]] = None


class ChallengeVerifier(ABC):
    """
    Redeems client-side challenge tokens against a verification service.
    """

    @abstractmethod
    async def verify(self, token: str, remote_ip: Optional[str] = None) -> VerificationOutcome:
        """
        Verify a token. A token that fails verification is a normal outcome
        with success=False; only transport or protocol problems raise.
        """
        raise NotImplementedError

    def health_check(self) -> Dict[str, Any]:
        return {"ok": True}


class PaymentIntentConnector(ABC):
    """
    Minimal payment-intent interface. Implementations should be side-effect
    free until the method makes a network call to a PSP.
    """

    @abstractmethod
    def create_payment_intent(self, request: PaymentIntentRequest) -> PaymentIntentResult:
        raise NotImplementedError

    def health_check(self) -> Dict[str, Any]:
        return {"ok": True}
