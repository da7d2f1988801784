"""
Redirect Signature Service

Signs and verifies the return_url Hyperswitch redirects customers to.

Signed payload: URL-encoded query string of every redirect parameter except
signature and signature_algorithm, in order of appearance.
Signature: hex-encoded HMAC of the payload keyed with the merchant's
payment response hash key (HMAC-SHA512 unless configured otherwise).
"""
import hmac
import hashlib
import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, Union
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from ..config import settings
from ..exceptions import SignatureInvalidError
from ..models.redirects import RedirectResponse

logger = logging.getLogger(__name__)


SIGNATURE_ALGORITHMS = {
    "HMAC-SHA512": hashlib.sha512,
    "HMAC-SHA256": hashlib.sha256,
}

SIGNATURE_PARAMS = ("signature", "signature_algorithm")

REDIRECT_FIELDS = (
    "status",
    "payment_intent_client_secret",
    "amount",
    "manual_retry_allowed",
)

Params = Union[Mapping[str, Any], Sequence[Tuple[str, Any]]]


def get_secret(secret_key: Optional[str] = None) -> str:
    """
    Payment response hash key to sign with.

    Raises:
        RuntimeError: If no key is passed and none is configured
    """
    secret = secret_key or settings.payment_response_hash_key
    if not secret:
        raise RuntimeError(
            "Missing payment response hash key. Pass secret_key or set "
            "HYPERSWITCH_PAYMENT_RESPONSE_HASH_KEY."
        )
    return secret


def _format_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _split_query(url: str) -> List[Tuple[str, str]]:
    return parse_qsl(urlsplit(url).query, keep_blank_values=True)


def create_signature_payload(params: Sequence[Tuple[str, str]]) -> str:
    """URL-encoded payload of all non-signature parameters, order preserved."""
    return urlencode([(k, v) for k, v in params if k not in SIGNATURE_PARAMS])


def compute_signature(payload: str, secret_key: str, algorithm: str = "HMAC-SHA512") -> str:
    """
    Hex-encoded HMAC of payload.

    Raises:
        ValueError: If the algorithm is not supported
    """
    digest = SIGNATURE_ALGORITHMS.get(algorithm.upper())
    if digest is None:
        raise ValueError(
            f"Unsupported signature algorithm '{algorithm}'. "
            f"Must be one of {', '.join(SIGNATURE_ALGORITHMS)}."
        )
    return hmac.new(
        secret_key.encode('utf-8'),
        payload.encode('utf-8'),
        digest
    ).hexdigest()


def sign_redirect_url(
    url: str,
    params: Optional[Params] = None,
    secret_key: Optional[str] = None,
    algorithm: Optional[str] = None
) -> str:
    """
    Append redirect parameters plus signature to a return URL.

    Args:
        url: Merchant return_url; its existing query parameters are signed too
        params: Redirect parameters (status, payment_intent_client_secret, ...)
        secret_key: Payment response hash key (defaults to settings)
        algorithm: HMAC-SHA512 or HMAC-SHA256 (defaults to settings)

    Returns:
        URL with signature and signature_algorithm appended
    """
    algorithm = algorithm or settings.signature_algorithm
    items = params.items() if isinstance(params, Mapping) else (params or [])

    pairs = [(k, v) for k, v in _split_query(url) if k not in SIGNATURE_PARAMS]
    pairs.extend((k, _format_value(v)) for k, v in items if v is not None)

    signature = compute_signature(create_signature_payload(pairs), get_secret(secret_key), algorithm)
    pairs.extend([("signature", signature), ("signature_algorithm", algorithm)])

    parts = urlsplit(url)
    return urlunsplit((parts.scheme, parts.netloc, parts.path, urlencode(pairs), parts.fragment))


def verify_redirect_signature(url: str, secret_key: Optional[str] = None) -> bool:
    """
    Verify the signature carried by a redirect URL.

    Returns:
        True if the signature matches, False if it is missing, uses an
        unsupported algorithm, does not match, or no key is passed or
        configured

    Uses constant-time comparison to prevent timing attacks.
    """
    pairs = _split_query(url)
    provided = dict(pairs)
    signature = provided.get("signature")
    algorithm = provided.get("signature_algorithm", "HMAC-SHA512")

    if not signature:
        logger.warning("Redirect URL carries no signature")
        return False
    if algorithm.upper() not in SIGNATURE_ALGORITHMS:
        logger.warning(f"Unsupported redirect signature algorithm: {algorithm}")
        return False

    secret = secret_key or settings.payment_response_hash_key
    if not secret:
        logger.warning("No payment response hash key available to verify redirect signature")
        return False

    expected = compute_signature(create_signature_payload(pairs), secret, algorithm)
    if not hmac.compare_digest(expected, signature.lower()):
        logger.warning("Redirect signature mismatch")
        return False
    return True


def parse_redirect_response(
    url: str,
    secret_key: Optional[str] = None,
    verify: bool = True
) -> RedirectResponse:
    """
    Parse the documented redirect parameters from a return URL.

    Args:
        url: Full redirect URL
        secret_key: Payment response hash key (defaults to settings)
        verify: Check the signature when a key is available

    Returns:
        RedirectResponse; unknown parameters end up in extra_params

    Raises:
        ValueError: If the status parameter is missing
        SignatureInvalidError: If verification is requested, a key is
            available and the signature does not match
    """
    pairs = _split_query(url)
    values: Dict[str, Any] = {}
    extra: Dict[str, str] = {}
    for key, value in pairs:
        if key in REDIRECT_FIELDS or key in SIGNATURE_PARAMS:
            values[key] = value
        else:
            extra[key] = value

    if "status" not in values:
        raise ValueError("Redirect URL has no status parameter")

    has_secret = bool(secret_key or settings.payment_response_hash_key)
    if verify and has_secret and not verify_redirect_signature(url, secret_key):
        raise SignatureInvalidError(
            "Redirect signature verification failed",
            details={
                "signature_algorithm": values.get("signature_algorithm"),
                "has_signature": "signature" in values,
            }
        )

    return RedirectResponse(**values, extra_params=extra)
