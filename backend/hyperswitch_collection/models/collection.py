"""
Pydantic Collection Models

Typed view of the Postman collection format (v2.1) as used by the
Hyperswitch documentation: items and folders, headers, raw bodies and
templated URLs with path variables.

Only the subset of the format the documentation relies on is modeled;
unknown keys (auth, event, protocolProfileBehavior, ...) are ignored.
"""
import json
from typing import Annotated, Any, List, Optional, Tuple
from pydantic import BaseModel, BeforeValidator, Field, field_validator, model_validator


def _flatten_description(v: Any) -> Optional[str]:
    """Postman stores descriptions either as text or as {content, type}."""
    if isinstance(v, dict):
        return v.get("content")
    return v


def _stringify_value(v: Any) -> Optional[str]:
    """Variable values may be numbers or booleans in exported files."""
    if v is None or isinstance(v, str):
        return v
    return json.dumps(v)


Description = Annotated[Optional[str], BeforeValidator(_flatten_description)]
VariableValue = Annotated[Optional[str], BeforeValidator(_stringify_value)]

FROZEN = {"frozen": True, "extra": "ignore", "populate_by_name": True}


# ==================== URL ====================

class QueryParam(BaseModel):
    """Single query string parameter."""
    key: str
    value: VariableValue = None
    disabled: bool = False
    description: Description = None

    model_config = FROZEN


class UrlVariable(BaseModel):
    """Path variable declaration bound to a :name segment."""
    key: str
    value: VariableValue = None
    description: Description = None

    model_config = FROZEN


def decompose_url(raw: str) -> dict:
    """
    Split a raw templated URL into Postman's decomposed form.

    Example:
        "{{baseUrl}}/payments/:id?expand=true" ->
        {"raw": ..., "host": ["{{baseUrl}}"], "path": ["payments", ":id"],
         "query": [{"key": "expand", "value": "true"}]}
    """
    base, _, query_string = raw.partition("?")
    query_string = query_string.split("#", 1)[0]
    base = base.split("#", 1)[0]

    protocol = None
    if "://" in base:
        protocol, base = base.split("://", 1)

    segments = base.split("/")
    host_part = segments[0]
    if "{{" in host_part:
        host = [host_part] if host_part else []
    else:
        host = [h for h in host_part.split(".") if h]
    path = [s for s in segments[1:] if s]

    query = []
    if query_string:
        for pair in query_string.split("&"):
            if not pair:
                continue
            key, sep, value = pair.partition("=")
            query.append({"key": key, "value": value if sep else None})

    decomposed = {"raw": raw, "host": host, "path": path, "query": query}
    if protocol:
        decomposed["protocol"] = protocol
    return decomposed


class Url(BaseModel):
    """
    Templated request URL.

    raw is authoritative for resolution; host/path/query are the decomposed
    view Postman keeps alongside it.
    """
    raw: str = ""
    protocol: Optional[str] = None
    host: List[str] = Field(default_factory=list)
    path: List[str] = Field(default_factory=list)
    query: List[QueryParam] = Field(default_factory=list)
    variable: List[UrlVariable] = Field(default_factory=list)

    model_config = FROZEN

    @field_validator("host", "path", mode="before")
    @classmethod
    def split_string_segments(cls, v, info):
        """Accept "a.b.c" host and "a/b" path strings."""
        if isinstance(v, str):
            separator = "." if info.field_name == "host" else "/"
            return [s for s in v.split(separator) if s]
        return v

    @model_validator(mode="before")
    @classmethod
    def fill_decomposed_parts(cls, data):
        """Derive host/path/query from raw when only raw was given."""
        if isinstance(data, dict) and data.get("raw") and not data.get("host") and not data.get("path"):
            parts = decompose_url(data["raw"])
            merged = dict(parts)
            merged.update({k: v for k, v in data.items() if v})
            return merged
        return data

    def variable_map(self) -> dict:
        """Declared path variables as {name: value}."""
        return {v.key: v.value for v in self.variable}


# ==================== Headers & Body ====================

class Header(BaseModel):
    """Request header. Disabled headers are kept but never sent."""
    key: str
    value: VariableValue = ""
    disabled: bool = False
    description: Description = None

    model_config = FROZEN


class RawOptions(BaseModel):
    """Language tag of a raw body (json, text, xml, ...)."""
    language: str = "text"

    model_config = FROZEN


class BodyOptions(BaseModel):
    raw: Optional[RawOptions] = None

    model_config = FROZEN


class Body(BaseModel):
    """
    Request body.

    Only raw mode carries content that takes part in resolution; other modes
    are accepted so collections load, but their content is not materialized.
    """
    mode: str = "raw"
    raw: Optional[str] = None
    options: Optional[BodyOptions] = None
    disabled: bool = False

    model_config = FROZEN

    @property
    def language(self) -> str:
        """Declared content language, 'text' when unspecified."""
        if self.options and self.options.raw:
            return self.options.raw.language.lower()
        return "text"

    @property
    def is_json(self) -> bool:
        return self.mode == "raw" and self.language == "json"


# ==================== Requests ====================

class RequestDefinition(BaseModel):
    """The request block of a collection item."""
    method: str = "GET"
    header: List[Header] = Field(default_factory=list)
    body: Optional[Body] = None
    url: Url = Field(default_factory=Url)
    description: Description = None

    model_config = FROZEN

    @field_validator("method", mode="before")
    @classmethod
    def normalize_method(cls, v):
        if isinstance(v, str):
            return v.strip().upper()
        return v

    @field_validator("url", mode="before")
    @classmethod
    def parse_url_string(cls, v):
        """Postman allows url to be a bare string."""
        if isinstance(v, str):
            return decompose_url(v)
        return v


class RequestTemplate(RequestDefinition):
    """
    Named, read-only request template.

    Built from a collection item; folder holds the names of the enclosing
    folders, outermost first.
    """
    name: str
    folder: Tuple[str, ...] = ()

    @property
    def qualified_name(self) -> str:
        """Folder path plus item name, e.g. "Payments/Payments - Update"."""
        return "/".join(self.folder + (self.name,))

    @classmethod
    def from_item(cls, item: "CollectionItem", folder: Tuple[str, ...] = ()) -> "RequestTemplate":
        """Build a template from a request item."""
        if item.request is None:
            raise ValueError(f"Item '{item.name}' is a folder, not a request")
        data = item.request.model_dump(by_alias=True)
        data.update(name=item.name, folder=tuple(folder))
        if not data.get("description"):
            data["description"] = item.description
        return cls.model_validate(data)


class CollectionItem(BaseModel):
    """Request item or folder (folders carry a nested item list)."""
    name: str
    request: Optional[RequestDefinition] = None
    item: List["CollectionItem"] = Field(default_factory=list)
    description: Description = None

    model_config = FROZEN

    @field_validator("request", mode="before")
    @classmethod
    def parse_request_string(cls, v):
        """A bare string request is a GET to that URL."""
        if isinstance(v, str):
            return {"method": "GET", "url": v}
        return v

    @property
    def is_folder(self) -> bool:
        return self.request is None


# ==================== Collection ====================

class CollectionInfo(BaseModel):
    name: str
    postman_id: Optional[str] = Field(default=None, alias="_postman_id")
    schema_url: Optional[str] = Field(default=None, alias="schema")
    description: Description = None

    model_config = FROZEN


class CollectionVariable(BaseModel):
    """Collection-level variable; acts as a default for {{name}} tokens."""
    key: str
    value: VariableValue = None
    disabled: bool = False

    model_config = FROZEN


class Collection(BaseModel):
    """
    Postman collection document.

    Example:
        Collection.model_validate_json(path.read_text())
    """
    info: CollectionInfo
    item: List[CollectionItem] = Field(default_factory=list)
    variable: List[CollectionVariable] = Field(default_factory=list)

    model_config = FROZEN

    def variable_defaults(self) -> dict:
        """Enabled collection variables as {name: value}."""
        return {
            v.key: v.value
            for v in self.variable
            if not v.disabled and v.value is not None
        }


CollectionItem.model_rebuild()
