"""
Collection Exception Hierarchy

Stable error codes for collection loading, template resolution, payment
status lookups and redirect signature checks.
All errors carry a machine-readable code plus structured details.
"""
from typing import Optional, Dict, Any, List


class CollectionError(Exception):
    """
    Base exception for all collection toolkit errors.

    Every subclass fixes its own error_code so callers can branch on the code
    instead of the class.
    """

    def __init__(
        self,
        error_code: str,
        message: str,
        details: Optional[Dict[str, Any]] = None
    ):
        self.error_code = error_code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to error response format."""
        return {
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details
        }


class UnresolvedVariableError(CollectionError):
    """
    A placeholder token has no bound value at resolution time.

    Examples:
    - {{payment_id}} missing from the environment and the collection defaults
    - :id path variable whose declared value references a missing variable
    - Variables that reference each other in a cycle
    """

    def __init__(
        self,
        variables: List[str],
        request_name: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        self.variables = sorted(set(variables))
        names = ", ".join(self.variables)
        target = f" in request '{request_name}'" if request_name else ""
        merged = {"request": request_name, "missing": self.variables}
        merged.update(details or {})
        super().__init__(
            "collection:variable:unresolved",
            f"Unresolved variable(s){target}: {names}",
            merged
        )


class TemplateInvalidError(CollectionError):
    """
    Request template is not well-formed.

    Examples:
    - Empty or unsupported HTTP method
    - Empty URL
    - Unbalanced {{ }} markers
    """

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__("collection:template:invalid", message, details)


class TemplateNotFoundError(CollectionError):
    """No request template is registered under the requested name."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__("collection:template:not_found", message, details)


class CollectionFormatError(CollectionError):
    """
    Collection or environment document could not be parsed.

    Examples:
    - File is not valid JSON
    - Required fields (info, item, request.method) are missing
    """

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__("collection:format:invalid", message, details)


class UnknownStatusError(CollectionError):
    """Payment status is not one of the documented statuses."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__("payment:status:unknown", message, details)


class SignatureInvalidError(CollectionError):
    """
    Redirect signature verification failed.

    Examples:
    - signature query parameter missing
    - HMAC does not match the redirect parameters
    - Unsupported signature_algorithm
    """

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__("redirect:signature:invalid", message, details)
