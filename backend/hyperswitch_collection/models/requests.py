"""
Pydantic Resolved Request Model

The materialized form of a request template: every placeholder replaced,
ready to hand to an HTTP client. Never persisted.
"""
import json
from typing import Any, Dict, List, Optional, Tuple
from pydantic import BaseModel


class ResolvedRequest(BaseModel):
    """
    Fully resolved request.

    Headers and query parameters keep their template order; disabled
    entries are already removed.
    """
    name: str
    method: str
    url: str
    headers: List[Tuple[str, str]] = []
    path: List[str] = []
    query: List[Tuple[str, Optional[str]]] = []
    body: Optional[str] = None
    body_language: Optional[str] = None

    model_config = {
        "frozen": True,
        "json_schema_extra": {
            "example": {
                "name": "Payments - Update",
                "method": "POST",
                "url": "https://sandbox.hyperswitch.io/payments/pay_123",
                "headers": [["Content-Type", "application/json"], ["Accept", "application/json"]],
                "path": ["payments", "pay_123"],
                "query": [],
                "body": "{\"amount\": 20000}",
                "body_language": "json"
            }
        }
    }

    def header(self, name: str) -> Optional[str]:
        """Case-insensitive header lookup; first match wins."""
        lowered = name.lower()
        for key, value in self.headers:
            if key.lower() == lowered:
                return value
        return None

    def headers_dict(self) -> Dict[str, str]:
        return dict(self.headers)

    def json_body(self) -> Any:
        """
        Parse the body as JSON.

        Raises:
            ValueError: If there is no body or it is not valid JSON
        """
        if self.body is None:
            raise ValueError(f"Request '{self.name}' has no body")
        return json.loads(self.body)

    def to_dict(self) -> Dict[str, Any]:
        """Plain representation; JSON bodies are included parsed."""
        data = self.model_dump()
        if self.body is not None and self.body_language == "json":
            try:
                data["body"] = self.json_body()
            except ValueError:
                pass  # keep raw text
        return data
