"""
Hyperswitch Collection Toolkit

Loads the Hyperswitch Postman collection, resolves its request templates
against variable environments, and exposes the documented payment status
table and redirect signature format.

Usage:
    from hyperswitch_collection import RequestTemplateStore, build_environment

    store = RequestTemplateStore.default()
    request = store.resolve("Payments - Update", build_environment("sandbox", payment_id="pay_123"))
    request.url  # https://sandbox.hyperswitch.io/payments/pay_123
"""
from .exceptions import (
    CollectionError,
    CollectionFormatError,
    SignatureInvalidError,
    TemplateInvalidError,
    TemplateNotFoundError,
    UnknownStatusError,
    UnresolvedVariableError,
)
from .models import RequestTemplate, ResolvedRequest, RedirectResponse, VariableEnvironment
from .services.resolver import resolve, find_placeholders, referenced_variables
from .services.template_store import RequestTemplateStore
from .services.payment_status import PaymentStatus, describe_status, list_statuses, is_terminal
from .services.signature_service import (
    parse_redirect_response,
    sign_redirect_url,
    verify_redirect_signature,
)
from .data.environments import build_environment

__version__ = "0.1.0"

__all__ = [
    "CollectionError",
    "CollectionFormatError",
    "SignatureInvalidError",
    "TemplateInvalidError",
    "TemplateNotFoundError",
    "UnknownStatusError",
    "UnresolvedVariableError",
    "RequestTemplate",
    "ResolvedRequest",
    "RedirectResponse",
    "VariableEnvironment",
    "resolve",
    "find_placeholders",
    "referenced_variables",
    "RequestTemplateStore",
    "PaymentStatus",
    "describe_status",
    "list_statuses",
    "is_terminal",
    "parse_redirect_response",
    "sign_redirect_url",
    "verify_redirect_signature",
    "build_environment",
]
