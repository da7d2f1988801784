"""
Payment Status Table

The payment lifecycle statuses documented for the Hyperswitch payments API,
with the description shown to integrators for each one.
"""
from enum import Enum
from typing import Dict, List, Union
import logging

from ..exceptions import UnknownStatusError

logger = logging.getLogger(__name__)


class PaymentStatus(str, Enum):
    """Status of a payment as returned by the payments API."""
    REQUIRES_PAYMENT_METHOD = "requires_payment_method"
    REQUIRES_CONFIRMATION = "requires_confirmation"
    REQUIRES_CUSTOMER_ACTION = "requires_customer_action"
    REQUIRES_CAPTURE = "requires_capture"
    PROCESSING = "processing"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    EXPIRED = "expired"


# Documented order; descriptions follow the payment status table
STATUS_DESCRIPTIONS: Dict[PaymentStatus, str] = {
    PaymentStatus.REQUIRES_PAYMENT_METHOD: (
        "The payment was created without a payment method, or the attached "
        "payment method failed. Attach a payment method to continue."
    ),
    PaymentStatus.REQUIRES_CONFIRMATION: (
        "A payment method is attached and the payment is waiting to be "
        "confirmed before it is sent to the connector."
    ),
    PaymentStatus.REQUIRES_CUSTOMER_ACTION: (
        "The customer has to complete an additional step, such as 3DS "
        "authentication or a bank redirect, before the payment can proceed."
    ),
    PaymentStatus.REQUIRES_CAPTURE: (
        "The customer action succeeded and the payment is authorized. With "
        "manual capture, the merchant must capture the payment to collect the funds."
    ),
    PaymentStatus.PROCESSING: (
        "The payment has been submitted and is being processed by the connector."
    ),
    PaymentStatus.SUCCEEDED: (
        "The payment was completed successfully and the funds were captured."
    ),
    PaymentStatus.FAILED: (
        "The payment failed at the connector. A new payment attempt is needed."
    ),
    PaymentStatus.EXPIRED: (
        "The payment was not completed within its validity window and can no "
        "longer be confirmed."
    ),
}

TERMINAL_STATUSES = frozenset({
    PaymentStatus.SUCCEEDED,
    PaymentStatus.FAILED,
    PaymentStatus.EXPIRED,
})


def get_status(status: Union[PaymentStatus, str]) -> PaymentStatus:
    """
    Coerce a status string into a PaymentStatus.

    Raises:
        UnknownStatusError: If the status is not documented
    """
    if isinstance(status, PaymentStatus):
        return status
    try:
        return PaymentStatus(str(status).strip().lower())
    except ValueError:
        logger.warning(f"Unknown payment status: {status!r}")
        raise UnknownStatusError(
            f"Unknown payment status '{status}'",
            details={"status": status, "known": [s.value for s in PaymentStatus]}
        )


def describe_status(status: Union[PaymentStatus, str]) -> str:
    """Documented description for a payment status."""
    return STATUS_DESCRIPTIONS[get_status(status)]


def list_statuses() -> List[Dict[str, str]]:
    """
    All documented statuses in table order.

    Returns:
        [{"status": "requires_payment_method", "description": "..."}, ...]
    """
    return [
        {"status": status.value, "description": description}
        for status, description in STATUS_DESCRIPTIONS.items()
    ]


def is_terminal(status: Union[PaymentStatus, str]) -> bool:
    """True for statuses after which the payment no longer changes."""
    return get_status(status) in TERMINAL_STATUSES
