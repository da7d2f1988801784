"""
Tests for loading and looking up request templates.
"""
import json

import pytest

from hyperswitch_collection.exceptions import (
    CollectionFormatError,
    TemplateNotFoundError,
    UnresolvedVariableError,
)
from hyperswitch_collection.services.template_store import (
    DEFAULT_COLLECTION_PATH,
    RequestTemplateStore,
)


class TestBundledCollection:
    """The collection shipped with the package."""

    def test_bundled_file_exists(self):
        assert DEFAULT_COLLECTION_PATH.is_file()

    def test_default_store(self, clean_settings):
        store = RequestTemplateStore.default()

        assert store.name == "Hyperswitch"
        assert len(store) == 1
        assert store.names() == ["Payments/Payments - Update"]
        assert "Payments - Update" in store
        assert "Payments/Payments - Update" in store

    def test_update_template(self, clean_settings):
        template = RequestTemplateStore.default().get("Payments - Update")

        assert template.method == "POST"
        assert template.folder == ("Payments",)
        assert template.url.raw == "{{baseUrl}}/payments/:id"
        assert template.url.variable_map() == {"id": "{{payment_id}}"}
        assert template.body.is_json

    def test_resolve_uses_collection_default(self, clean_settings):
        store = RequestTemplateStore.default()

        resolved = store.resolve("Payments - Update", {"payment_id": "pay_123"})

        assert resolved.url == "https://sandbox.hyperswitch.io/payments/pay_123"
        assert resolved.json_body()["amount"] == 20000
        assert resolved.header("api-key") is None

    def test_resolve_without_payment_id(self, clean_settings):
        store = RequestTemplateStore.default()

        with pytest.raises(UnresolvedVariableError) as exc_info:
            store.resolve("Payments - Update", {})

        assert exc_info.value.variables == ["payment_id"]

    def test_required_and_missing_variables(self, clean_settings):
        store = RequestTemplateStore.default()

        assert store.required_variables("Payments - Update") == ["baseUrl", "payment_id"]
        assert store.missing_variables("Payments - Update") == ["payment_id"]
        assert store.missing_variables("Payments - Update", {"payment_id": "pay_1"}) == []

    def test_bound_path_variable_skips_declared_value(self, clean_settings):
        store = RequestTemplateStore.default()
        environment = {"id": "pay_1"}

        assert store.missing_variables("Payments - Update", environment) == []
        assert store.resolve("Payments - Update", environment).url == (
            "https://sandbox.hyperswitch.io/payments/pay_1"
        )

    def test_empty_path_binding_is_missing(self, clean_settings):
        store = RequestTemplateStore.default()

        assert store.missing_variables("Payments - Update", {"id": ""}) == [":id"]

    def test_defaults_are_a_copy(self, clean_settings):
        store = RequestTemplateStore.default()
        store.defaults["baseUrl"] = "https://changed.example.com"

        assert store.defaults == {"baseUrl": "https://sandbox.hyperswitch.io"}

    def test_configured_collection_path(self, clean_settings, collection_file):
        clean_settings.collection_path = str(collection_file)

        store = RequestTemplateStore.default()

        assert store.name == "Hyperswitch Test"
        assert store.source == str(collection_file)


class TestLookup:
    """Name and qualified-name lookup."""

    def test_unknown_name(self, collection_data):
        store = RequestTemplateStore.from_dict(collection_data)

        with pytest.raises(TemplateNotFoundError) as exc_info:
            store.get("Refunds - Create")

        error = exc_info.value
        assert error.error_code == "collection:template:not_found"
        assert error.details["available"] == ["Payments/Payments - Update"]

    def test_duplicate_names_keep_first(self, caplog):
        data = {
            "info": {"name": "Duplicates"},
            "item": [
                {"name": "Payments", "item": [{"name": "Retrieve", "request": "https://a.example.com/payments"}]},
                {"name": "Refunds", "item": [{"name": "Retrieve", "request": "https://a.example.com/refunds"}]},
            ],
        }

        store = RequestTemplateStore.from_dict(data)

        assert len(store) == 2
        assert store.get("Retrieve").url.raw == "https://a.example.com/payments"
        assert store.get("Refunds/Retrieve").url.raw == "https://a.example.com/refunds"
        assert "Duplicate request name 'Retrieve'" in caplog.text

    def test_nested_folders(self):
        data = {
            "info": {"name": "Nested"},
            "item": [
                {
                    "name": "Payments",
                    "item": [
                        {"name": "Cards", "item": [{"name": "Create", "request": {"method": "post", "url": "{{baseUrl}}/payments"}}]},
                    ],
                },
                {"name": "Health", "request": "{{baseUrl}}/health"},
            ],
        }

        store = RequestTemplateStore.from_dict(data)

        assert store.names() == ["Payments/Cards/Create", "Health"]
        assert store.get("Create").method == "POST"
        assert [t.name for t in store] == ["Create", "Health"]

    def test_disabled_collection_variable_is_ignored(self, collection_data):
        collection_data["variable"].append({"key": "payment_id", "value": "pay_default", "disabled": True})

        store = RequestTemplateStore.from_dict(collection_data)

        assert "payment_id" not in store.defaults


class TestLoadingErrors:
    """Documents that are not collections."""

    def test_missing_info(self):
        with pytest.raises(CollectionFormatError) as exc_info:
            RequestTemplateStore.from_dict({"item": []})

        assert exc_info.value.error_code == "collection:format:invalid"
        assert exc_info.value.details["errors"]

    def test_invalid_json_file(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json", encoding="utf-8")

        with pytest.raises(CollectionFormatError) as exc_info:
            RequestTemplateStore.from_file(path)

        assert exc_info.value.details["path"] == str(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(CollectionFormatError):
            RequestTemplateStore.from_file(tmp_path / "absent.json")

    def test_top_level_array(self, tmp_path):
        path = tmp_path / "array.json"
        path.write_text(json.dumps([1, 2]), encoding="utf-8")

        with pytest.raises(CollectionFormatError):
            RequestTemplateStore.from_file(path)

    def test_from_file(self, collection_file):
        store = RequestTemplateStore.from_file(collection_file)

        assert store.names() == ["Payments/Payments - Update"]
