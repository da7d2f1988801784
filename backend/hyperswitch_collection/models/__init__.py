"""
Models package for the Hyperswitch collection toolkit.

Exports the collection format models, variable environments, resolved
requests and redirect responses.
"""
from .collection import (
    Body,
    Collection,
    CollectionItem,
    Header,
    QueryParam,
    RequestDefinition,
    RequestTemplate,
    Url,
    UrlVariable,
)
from .environment import VariableEnvironment
from .requests import ResolvedRequest
from .redirects import RedirectResponse

__all__ = [
    "Body",
    "Collection",
    "CollectionItem",
    "Header",
    "QueryParam",
    "RequestDefinition",
    "RequestTemplate",
    "Url",
    "UrlVariable",
    "VariableEnvironment",
    "ResolvedRequest",
    "RedirectResponse",
]
