"""
Shared fixtures for the collection toolkit tests.

Run with: python -m pytest -v
"""
import json

import pytest

from hyperswitch_collection.config import settings
from hyperswitch_collection.models.collection import CollectionItem, RequestTemplate


UPDATE_BODY = (
    "{\n"
    "  \"amount\": 20000,\n"
    "  \"currency\": \"SGD\",\n"
    "  \"confirm\": false,\n"
    "  \"capture_method\": \"automatic\",\n"
    "  \"description\": \"Its my first payment request\"\n"
    "}"
)


def make_template(request: dict, name: str = "Test Request") -> RequestTemplate:
    """Build a template from a raw collection item request block."""
    return RequestTemplate.from_item(CollectionItem.model_validate({"name": name, "request": request}))


@pytest.fixture
def update_request() -> dict:
    """Request block of the documented "Payments - Update" item."""
    return {
        "method": "POST",
        "header": [
            {"key": "Content-Type", "value": "application/json"},
            {"key": "Accept", "value": "application/json"},
        ],
        "body": {
            "mode": "raw",
            "raw": UPDATE_BODY,
            "options": {"raw": {"language": "json"}},
        },
        "url": {
            "raw": "{{baseUrl}}/payments/:id",
            "host": ["{{baseUrl}}"],
            "path": ["payments", ":id"],
            "variable": [
                {
                    "key": "id",
                    "value": "{{payment_id}}",
                    "description": "(Required) unique payment id",
                }
            ],
        },
        "description": "To update the properties of a PaymentIntent object.",
    }


@pytest.fixture
def update_template(update_request) -> RequestTemplate:
    return make_template(update_request, name="Payments - Update")


@pytest.fixture
def sandbox_env() -> dict:
    return {"baseUrl": "https://sandbox.hyperswitch.io", "payment_id": "pay_123"}


@pytest.fixture
def collection_data(update_request) -> dict:
    """Collection with one folder holding the update request."""
    return {
        "info": {
            "name": "Hyperswitch Test",
            "schema": "https://schema.getpostman.com/json/collection/v2.1.0/collection.json",
        },
        "item": [
            {
                "name": "Payments",
                "item": [{"name": "Payments - Update", "request": update_request}],
            }
        ],
        "variable": [{"key": "baseUrl", "value": "https://sandbox.hyperswitch.io"}],
    }


@pytest.fixture
def collection_file(tmp_path, collection_data):
    path = tmp_path / "test.postman_collection.json"
    path.write_text(json.dumps(collection_data), encoding="utf-8")
    return path


@pytest.fixture
def clean_settings(monkeypatch):
    """Reset secrets and overrides that a local environment might set."""
    monkeypatch.setattr(settings, "collection_path", None)
    monkeypatch.setattr(settings, "api_key", None)
    monkeypatch.setattr(settings, "payment_response_hash_key", None)
    monkeypatch.setattr(settings, "signature_algorithm", "HMAC-SHA512")
    monkeypatch.setattr(settings, "environment", "sandbox")
    return settings
