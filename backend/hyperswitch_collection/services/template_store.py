"""
Request Template Store

Holds the named request templates of a Postman collection and resolves
them on demand. Templates are loaded once and never mutated; resolution
goes through services.resolver and has no side effects.
"""
import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Tuple, Union

from pydantic import ValidationError

from ..config import settings
from ..exceptions import CollectionFormatError, TemplateNotFoundError
from ..models.collection import Collection, CollectionItem, RequestTemplate
from ..models.requests import ResolvedRequest
from .resolver import EnvironmentLike, referenced_variables, resolve

logger = logging.getLogger(__name__)


DATA_DIR = Path(__file__).resolve().parent.parent / "data"
DEFAULT_COLLECTION_PATH = DATA_DIR / "hyperswitch.postman_collection.json"


def _flatten(
    items: List[CollectionItem],
    folder: Tuple[str, ...] = ()
) -> Iterator[RequestTemplate]:
    """Depth-first walk yielding request templates; folders are descended."""
    for item in items:
        if item.is_folder:
            yield from _flatten(item.item, folder + (item.name,))
        else:
            yield RequestTemplate.from_item(item, folder)


class RequestTemplateStore:
    """
    Read-only store of request templates.

    Templates are addressable by item name and by qualified name
    ("Folder/Sub folder/Item name"). When two items share a name, the first
    one keeps the bare name and later ones are reachable by qualified name only.

    Usage:
        store = RequestTemplateStore.default()
        request = store.resolve("Payments - Update", {"baseUrl": "...", "payment_id": "pay_123"})
    """

    def __init__(self, collection: Collection, source: Optional[str] = None):
        self.collection = collection
        self.source = source
        self._templates: Dict[str, RequestTemplate] = {}
        self._by_qualified_name: Dict[str, RequestTemplate] = {}
        self._defaults = collection.variable_defaults()

        for template in _flatten(collection.item):
            self._by_qualified_name[template.qualified_name] = template
            if template.name in self._templates:
                logger.warning(
                    f"Duplicate request name '{template.name}' in collection "
                    f"'{collection.info.name}'; use '{template.qualified_name}'"
                )
                continue
            self._templates[template.name] = template

        logger.info(
            f"Loaded collection '{collection.info.name}' with "
            f"{len(self._by_qualified_name)} request(s)"
            + (f" from {source}" if source else "")
        )

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    @classmethod
    def from_dict(cls, data: Dict[str, Any], source: Optional[str] = None) -> "RequestTemplateStore":
        """
        Build a store from a parsed collection document.

        Raises:
            CollectionFormatError: If the document is not a valid collection
        """
        try:
            collection = Collection.model_validate(data)
        except ValidationError as e:
            raise CollectionFormatError(
                "Invalid Postman collection document",
                details={"source": source, "errors": e.errors(include_url=False)}
            ) from e
        return cls(collection, source=source)

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "RequestTemplateStore":
        """
        Load a collection JSON file.

        Raises:
            CollectionFormatError: If the file cannot be read or parsed
        """
        path = Path(path)
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise CollectionFormatError(
                f"Cannot read collection file {path}: {e}",
                details={"path": str(path)}
            ) from e
        if not isinstance(data, dict):
            raise CollectionFormatError(
                f"Collection file {path} must contain a JSON object",
                details={"path": str(path)}
            )
        return cls.from_dict(data, source=str(path))

    @classmethod
    def default(cls) -> "RequestTemplateStore":
        """Store for the configured collection, or the bundled one."""
        return cls.from_file(settings.collection_path or DEFAULT_COLLECTION_PATH)

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    @property
    def name(self) -> str:
        return self.collection.info.name

    @property
    def defaults(self) -> Dict[str, str]:
        """Collection-level variable defaults (copy)."""
        return dict(self._defaults)

    def names(self) -> List[str]:
        """Qualified names of all requests, in collection order."""
        return list(self._by_qualified_name)

    def get(self, name: str) -> RequestTemplate:
        """
        Template by item name or qualified name.

        Raises:
            TemplateNotFoundError: If no request matches
        """
        template = self._templates.get(name) or self._by_qualified_name.get(name)
        if template is None:
            raise TemplateNotFoundError(
                f"No request named '{name}' in collection '{self.name}'",
                details={"name": name, "available": self.names()}
            )
        return template

    def __contains__(self, name: object) -> bool:
        return name in self._templates or name in self._by_qualified_name

    def __len__(self) -> int:
        return len(self._by_qualified_name)

    def __iter__(self) -> Iterator[RequestTemplate]:
        return iter(self._by_qualified_name.values())

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------

    def required_variables(self, name: str) -> List[str]:
        """Variables the named request pulls from the environment."""
        return referenced_variables(self.get(name))

    def missing_variables(self, name: str, environment: EnvironmentLike = None) -> List[str]:
        """Referenced variables bound neither by the environment nor the collection."""
        environment = environment or {}
        missing = []
        for variable in referenced_variables(self.get(name), environment):
            if variable.startswith(":"):
                # Undeclared or empty path variable, only a non-empty binding fixes it
                if not environment.get(variable[1:]):
                    missing.append(variable)
            elif variable not in environment and variable not in self._defaults:
                missing.append(variable)
        return missing

    def resolve(self, name: str, environment: EnvironmentLike = None) -> ResolvedRequest:
        """
        Resolve the named request against an environment.

        Collection variables are used for tokens the environment does not bind.

        Raises:
            TemplateNotFoundError: If no request matches
            UnresolvedVariableError: If a token cannot be bound
        """
        return resolve(self.get(name), environment, defaults=self._defaults)
