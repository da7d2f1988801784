"""
Request Template Resolver

Materializes a request template against a variable environment:
- :name path segments bind to the environment, then to the declared path variable
- {{name}} tokens bind to the environment, then to collection defaults
- JSON bodies are substituted token by token, untouched fields keep their bytes

Resolution is a pure function of its inputs. Any token left without a value
fails the whole resolution with UnresolvedVariableError.
"""
import json
import re
import logging
from typing import Dict, Iterable, List, Mapping, Optional, Set, Tuple, Union

from ..exceptions import TemplateInvalidError, UnresolvedVariableError
from ..models.collection import RequestTemplate
from ..models.environment import VariableEnvironment
from ..models.requests import ResolvedRequest

logger = logging.getLogger(__name__)


SUPPORTED_METHODS = frozenset({
    "GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS",
})

TOKEN_RE = re.compile(r"\{\{([^{}]+)\}\}")
PATH_VARIABLE_RE = re.compile(r"(?<=/):([A-Za-z_][\w.\-]*)")

# A JSON string literal, or a token standing outside any string literal
JSON_SCAN_RE = re.compile(r'"(?:[^"\\]|\\.)*"|\{\{([^{}]+)\}\}', re.DOTALL)

# Combined scan for the path part of a URL: token or :name segment
URL_PATH_SCAN_RE = re.compile(r"\{\{([^{}]+)\}\}|(?<=/):([A-Za-z_][\w.\-]*)")

EnvironmentLike = Union[VariableEnvironment, Mapping[str, str], None]


# ============================================================================
# Placeholder discovery
# ============================================================================

def _unique(names: Iterable[str]) -> List[str]:
    seen: Set[str] = set()
    ordered = []
    for name in names:
        if name not in seen:
            seen.add(name)
            ordered.append(name)
    return ordered


def find_placeholders(text: Optional[str]) -> List[str]:
    """
    Names of {{name}} tokens in text, in order of first appearance.

    Example:
        find_placeholders("{{baseUrl}}/payments/{{payment_id}}")
        -> ["baseUrl", "payment_id"]
    """
    if not text:
        return []
    return _unique(TOKEN_RE.findall(text))


def find_path_variables(template: RequestTemplate) -> List[str]:
    """Names of :name segments in the template URL path."""
    names = [segment[1:] for segment in template.url.path if segment.startswith(":") and len(segment) > 1]
    base = template.url.raw.partition("?")[0]
    names.extend(PATH_VARIABLE_RE.findall(base))
    return _unique(names)


def referenced_variables(template: RequestTemplate, environment: EnvironmentLike = None) -> List[str]:
    """
    Every {{name}} a template can pull from the environment.

    Path variables contribute the tokens inside their declared values, or
    ":name" when nothing is declared for them. A path variable the
    environment binds directly contributes nothing, since its declared
    value is never consulted; an empty binding contributes ":name".
    """
    bound = _as_mapping(environment)
    names: List[str] = find_placeholders(template.url.raw)
    declared = template.url.variable_map()
    for path_name in find_path_variables(template):
        if path_name in bound:
            if not bound[path_name]:
                names.append(f":{path_name}")
            continue
        value = declared.get(path_name)
        if value:
            names.extend(find_placeholders(value))
        else:
            names.append(f":{path_name}")
    for param in template.url.query:
        if not param.disabled:
            names.extend(find_placeholders(param.key))
            names.extend(find_placeholders(param.value))
    for header in template.header:
        if not header.disabled:
            names.extend(find_placeholders(header.key))
            names.extend(find_placeholders(header.value))
    if template.body is not None and template.body.raw:
        names.extend(find_placeholders(template.body.raw))
    return _unique(names)


# ============================================================================
# Validation
# ============================================================================

def validate_template(template: RequestTemplate) -> None:
    """
    Check that a template is well-formed enough to resolve.

    Raises:
        TemplateInvalidError: Empty/unsupported method, empty URL, or
            unbalanced {{ }} markers in the URL
    """
    details = {"request": template.name}

    if not template.method:
        raise TemplateInvalidError(f"Request '{template.name}' has no HTTP method", details)
    if template.method not in SUPPORTED_METHODS:
        raise TemplateInvalidError(
            f"Request '{template.name}' uses unsupported method '{template.method}'",
            {**details, "method": template.method}
        )

    raw = template.url.raw.strip()
    if not raw:
        raise TemplateInvalidError(f"Request '{template.name}' has an empty URL", details)

    if _has_unbalanced_markers(raw):
        raise TemplateInvalidError(
            f"Request '{template.name}' has unbalanced '{{{{ }}}}' markers in its URL",
            {**details, "url": raw}
        )

    for header in template.header:
        if header.disabled:
            continue
        if _has_unbalanced_markers(header.key) or _has_unbalanced_markers(header.value):
            raise TemplateInvalidError(
                f"Request '{template.name}' has unbalanced '{{{{ }}}}' markers in header '{header.key}'",
                {**details, "header": header.key}
            )

    body = template.body
    if body is not None and not body.disabled and body.mode == "raw":
        # Nested JSON objects legitimately end in "}}", only an opening marker is suspect
        if _has_unbalanced_markers(body.raw, closing=not body.is_json):
            raise TemplateInvalidError(
                f"Request '{template.name}' has unbalanced '{{{{ }}}}' markers in its body",
                details
            )


def _has_unbalanced_markers(text: Optional[str], closing: bool = True) -> bool:
    if not text:
        return False
    leftover = TOKEN_RE.sub("", text)
    return "{{" in leftover or (closing and "}}" in leftover)


# ============================================================================
# Resolution
# ============================================================================

class _Bindings:
    """
    Variable lookup for a single resolution.

    Collects every missing name instead of stopping at the first one so the
    error lists all of them.
    """

    def __init__(
        self,
        environment: Mapping[str, str],
        defaults: Mapping[str, str],
        path_variables: Mapping[str, Optional[str]]
    ):
        self.environment = environment
        self.defaults = defaults
        self.path_variables = path_variables
        self.missing: Set[str] = set()
        self.cycles: Set[str] = set()

    def lookup(self, name: str, stack: Tuple[str, ...] = ()) -> Optional[str]:
        """Value for {{name}}, expanded recursively; None if unresolvable."""
        if name in stack:
            self.cycles.add(name)
            self.missing.add(name)
            return None
        if name in self.environment:
            value = self.environment[name]
        elif name in self.defaults:
            value = self.defaults[name]
        else:
            self.missing.add(name)
            return None
        return self.expand(str(value), stack + (name,))

    def path_value(self, name: str) -> Optional[str]:
        """Value for a :name segment: environment first, then the declared value."""
        if name in self.environment:
            value = self.environment[name]
            if value is None or str(value) == "":
                # An empty segment would address a different endpoint
                self.missing.add(f":{name}")
                return None
            return self.expand(str(value), (name,))
        declared = self.path_variables.get(name)
        if declared:
            return self.expand(declared)
        self.missing.add(f":{name}")
        return None

    def expand(self, text: Optional[str], stack: Tuple[str, ...] = ()) -> Optional[str]:
        """Replace every {{name}} in text; unresolved tokens stay as written."""
        if not text:
            return text

        def replace(match):
            value = self.lookup(match.group(1), stack)
            return match.group(0) if value is None else value

        return TOKEN_RE.sub(replace, text)

    def expand_url(self, raw: str) -> str:
        """Replace :name segments in the path and tokens everywhere."""
        base, sep, rest = raw.partition("?")

        def replace(match):
            token, path_name = match.group(1), match.group(2)
            if token is not None:
                value = self.lookup(token)
            else:
                value = self.path_value(path_name)
            return match.group(0) if value is None else value

        return URL_PATH_SCAN_RE.sub(replace, base) + sep + (self.expand(rest) or "")

    def expand_path_segment(self, segment: str) -> str:
        if segment.startswith(":") and len(segment) > 1:
            value = self.path_value(segment[1:])
            return segment if value is None else value
        return self.expand(segment) or ""

    def expand_json(self, raw: str) -> str:
        """
        Token-level substitution inside a JSON document.

        Tokens inside string literals are inserted JSON-escaped; bare tokens
        are inserted verbatim so "amount": {{amount}} becomes a number.
        """

        def replace_in_string(match):
            value = self.lookup(match.group(1))
            if value is None:
                return match.group(0)
            return json.dumps(value, ensure_ascii=False)[1:-1]

        def replace(match):
            bare_token = match.group(1)
            if bare_token is not None:
                value = self.lookup(bare_token)
                return match.group(0) if value is None else value
            literal = match.group(0)
            if "{{" not in literal:
                return literal
            return TOKEN_RE.sub(replace_in_string, literal)

        return JSON_SCAN_RE.sub(replace, raw)


def _as_mapping(values: EnvironmentLike) -> Mapping[str, str]:
    if values is None:
        return {}
    if isinstance(values, VariableEnvironment):
        return values.variables
    return values


def resolve(
    template: RequestTemplate,
    environment: EnvironmentLike = None,
    defaults: EnvironmentLike = None
) -> ResolvedRequest:
    """
    Materialize a request template.

    Args:
        template: Request template to resolve
        environment: Variable bindings supplied by the caller; may be partial
        defaults: Fallback bindings for {{name}} tokens (collection variables)

    Returns:
        ResolvedRequest with no placeholder tokens left

    Raises:
        TemplateInvalidError: If the template is malformed
        UnresolvedVariableError: If any token has no value in the environment,
            the defaults or the declared path variables

    Example:
        resolve(template, {"baseUrl": "https://sandbox.hyperswitch.io", "payment_id": "pay_123"}).url
        -> "https://sandbox.hyperswitch.io/payments/pay_123"
    """
    validate_template(template)

    bindings = _Bindings(
        environment=_as_mapping(environment),
        defaults=_as_mapping(defaults),
        path_variables=template.url.variable_map()
    )

    url = bindings.expand_url(template.url.raw.strip())
    path = [bindings.expand_path_segment(segment) for segment in template.url.path]
    query = [
        (bindings.expand(param.key) or "", bindings.expand(param.value))
        for param in template.url.query
        if not param.disabled
    ]
    headers = [
        (bindings.expand(header.key) or "", bindings.expand(header.value) or "")
        for header in template.header
        if not header.disabled
    ]

    body: Optional[str] = None
    body_language: Optional[str] = None
    if template.body is not None and not template.body.disabled:
        if template.body.mode == "raw" and template.body.raw is not None:
            body_language = template.body.language
            if template.body.is_json:
                body = bindings.expand_json(template.body.raw)
            else:
                body = bindings.expand(template.body.raw)
        else:
            logger.debug(
                f"Body mode '{template.body.mode}' of request '{template.name}' is not materialized"
            )

    if bindings.missing:
        error_details: Dict[str, List[str]] = {}
        if bindings.cycles:
            error_details["cycles"] = sorted(bindings.cycles)
        logger.warning(
            f"Cannot resolve request '{template.name}': "
            f"missing {sorted(bindings.missing)}"
        )
        raise UnresolvedVariableError(
            sorted(bindings.missing),
            request_name=template.name,
            details=error_details
        )

    logger.debug(f"Resolved request '{template.name}': {template.method} {url}")

    return ResolvedRequest(
        name=template.name,
        method=template.method,
        url=url,
        headers=headers,
        path=path,
        query=query,
        body=body,
        body_language=body_language
    )
