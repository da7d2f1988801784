"""
Pydantic Redirect Response Model

Query parameters Hyperswitch appends to the merchant return_url once a
payment leaves the customer-facing flow.
"""
from typing import Dict, Optional
from pydantic import BaseModel, Field

from ..services.payment_status import PaymentStatus


class RedirectResponse(BaseModel):
    """
    Parsed return URL parameters.

    amount and manual_retry_allowed arrive as query strings and are coerced
    to int and bool.
    """
    status: str
    payment_intent_client_secret: Optional[str] = None
    amount: Optional[int] = Field(default=None, ge=0)
    manual_retry_allowed: Optional[bool] = None
    signature: Optional[str] = None
    signature_algorithm: Optional[str] = None
    extra_params: Dict[str, str] = Field(default_factory=dict)

    model_config = {
        "frozen": True,
        "json_schema_extra": {
            "example": {
                "status": "succeeded",
                "payment_intent_client_secret": "pay_U42c409qyHwOkWo3vK60_secret_el9ksDkiB8hi6j9N78yo",
                "amount": 6540,
                "manual_retry_allowed": False,
                "signature": "4fae0cfa775e4551db9356563d4b98b55662fe3c1c945fe215d90ccf3541282c48e8b9b8fc2cc4e5f36a78c3c7a52ba1a4fa5bd2d7ea46d8b5d09d5b1e3e1a8f",
                "signature_algorithm": "HMAC-SHA512",
                "extra_params": {}
            }
        }
    }

    @property
    def payment_id(self) -> Optional[str]:
        """Payment id embedded in the client secret (<payment_id>_secret_<nonce>)."""
        if not self.payment_intent_client_secret:
            return None
        payment_id, sep, _ = self.payment_intent_client_secret.partition("_secret_")
        return payment_id if sep else None

    @property
    def payment_status(self) -> Optional[PaymentStatus]:
        """Status as a documented PaymentStatus, None if undocumented."""
        try:
            return PaymentStatus(self.status)
        except ValueError:
            return None
