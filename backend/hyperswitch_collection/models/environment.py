"""
Pydantic Variable Environment Models

A variable environment maps variable names to string values and is
supplied by the consumer at resolution time. Environments can be built
from dicts, KEY=VALUE pairs or Postman environment exports.
"""
import json
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, List, Optional, Union
from pydantic import BaseModel, Field, ValidationError

from ..exceptions import CollectionFormatError
from .collection import VariableValue


class PostmanEnvironmentValue(BaseModel):
    """Single entry of a Postman environment export."""
    key: str
    value: VariableValue = None
    enabled: bool = True
    type: Optional[str] = None  # "default" or "secret"

    model_config = {"extra": "ignore"}


class PostmanEnvironment(BaseModel):
    """Postman environment export document."""
    name: Optional[str] = None
    values: List[PostmanEnvironmentValue] = Field(default_factory=list)

    model_config = {"extra": "ignore"}


class VariableEnvironment(BaseModel):
    """
    Named variable bindings used to resolve placeholder tokens.

    Behaves as a read-only mapping; with_overrides() returns a new
    environment instead of mutating this one.

    Example:
        env = VariableEnvironment.from_pairs(["baseUrl=https://sandbox.hyperswitch.io"])
        env["baseUrl"]
    """
    name: Optional[str] = None
    variables: Dict[str, str] = Field(default_factory=dict)

    model_config = {"frozen": True}

    def __getitem__(self, key: str) -> str:
        return self.variables[key]

    def __contains__(self, key: object) -> bool:
        return key in self.variables

    def __iter__(self) -> Iterator[str]:  # type: ignore[override]
        return iter(self.variables)

    def __len__(self) -> int:
        return len(self.variables)

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        return self.variables.get(key, default)

    def keys(self):
        return self.variables.keys()

    def with_overrides(self, overrides: Optional[Dict[str, str]] = None, **kwargs: str) -> "VariableEnvironment":
        """Return a copy with extra bindings; later values win."""
        merged = dict(self.variables)
        merged.update(overrides or {})
        merged.update(kwargs)
        return VariableEnvironment(name=self.name, variables=merged)

    @classmethod
    def from_mapping(cls, values: Dict[str, Any], name: Optional[str] = None) -> "VariableEnvironment":
        """Build from a plain dict; non-string values are JSON-encoded."""
        return cls(
            name=name,
            variables={
                k: v if isinstance(v, str) else json.dumps(v)
                for k, v in values.items()
                if v is not None
            }
        )

    @classmethod
    def from_pairs(cls, pairs: Iterable[str], name: Optional[str] = None) -> "VariableEnvironment":
        """
        Build from KEY=VALUE strings (command-line style).

        Raises:
            ValueError: If a pair has no '=' or an empty key
        """
        values = {}
        for pair in pairs:
            key, sep, value = pair.partition("=")
            if not sep or not key.strip():
                raise ValueError(f"Invalid variable assignment '{pair}', expected KEY=VALUE")
            values[key.strip()] = value
        return cls(name=name, variables=values)

    @classmethod
    def from_postman(cls, data: Dict[str, Any]) -> "VariableEnvironment":
        """
        Build from a parsed Postman environment export.

        Disabled entries are skipped.

        Raises:
            CollectionFormatError: If the document is not an environment export
        """
        try:
            document = PostmanEnvironment.model_validate(data)
        except ValidationError as e:
            raise CollectionFormatError(
                "Invalid Postman environment document",
                details={"errors": e.errors(include_url=False)}
            ) from e

        return cls(
            name=document.name,
            variables={
                v.key: v.value
                for v in document.values
                if v.enabled and v.value is not None
            }
        )

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "VariableEnvironment":
        """
        Load a Postman environment export or a flat {"name": "value"} JSON file.

        Raises:
            CollectionFormatError: If the file cannot be read or parsed
        """
        path = Path(path)
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise CollectionFormatError(
                f"Cannot read environment file {path}: {e}",
                details={"path": str(path)}
            ) from e

        if not isinstance(data, dict):
            raise CollectionFormatError(
                f"Environment file {path} must contain a JSON object",
                details={"path": str(path)}
            )

        if isinstance(data.get("values"), list):
            return cls.from_postman(data)
        return cls.from_mapping(data, name=path.stem)
