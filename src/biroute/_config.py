"""Route tree construction from config dicts.

The same JSON/YAML shape describes any route tree:
  dict → parse_route() → Route

A route is a dict with a ``pattern`` and exactly one of ``handler``,
``routes`` (alternatives) or ``route`` (nested)::

    pattern: "/"
    routes:
      - pattern: index.html
        handler: index
      - pattern:
          type: segments
          segments: ["articles/", {type: wildcard, key: id}, "/article.html"]
        handler: article

Patterns and segments use a ``type`` discriminant; a bare string is
shorthand for a literal. ``custom`` types are resolved through a
Registry (see biroute._registry).
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from biroute._errors import ConfigParseError, RouteError, UnknownTypeUrlError
from biroute._patterns import AttributeGuard, Constant, MethodGuard, Segments
from biroute._routes import Alternatives, Handler, Nested, Route
from biroute._segments import Keyed, Literal, Regex, Wildcard

if TYPE_CHECKING:
    from biroute._patterns import Pattern
    from biroute._registry import Registry
    from biroute._routes import Matched
    from biroute._segments import PatternSegment

_MATCHED_FIELDS = ("handler", "routes", "route")


def parse_route(data: dict[str, Any], registry: Registry | None = None) -> Route:
    """Parse a dict into a Route.

    This is the main entry point for config loading.

    Raises:
        ConfigParseError: If the dict is malformed.
        UnknownTypeUrlError: If a custom type_url is not registered.
    """
    if not isinstance(data, dict):
        msg = f"route must be a dict, got {type(data).__name__}"
        raise ConfigParseError(msg)
    if "pattern" not in data:
        msg = "route missing required field 'pattern'"
        raise ConfigParseError(msg)

    pattern = parse_pattern(data["pattern"], registry)
    matched = _parse_matched(data, registry)
    return Route(pattern=pattern, matched=matched)


def parse_pattern(data: Any, registry: Registry | None = None) -> Pattern:
    """Parse a pattern config: a string, or a dict with a 'type' discriminant."""
    if isinstance(data, str):
        return Literal(data)
    if not isinstance(data, dict):
        msg = f"pattern must be a string or dict, got {type(data).__name__}"
        raise ConfigParseError(msg)

    kind = data.get("type")
    try:
        match kind:
            case "literal":
                return Literal(_require_str(data, "text", "literal pattern"))
            case "regex":
                return Regex(_require_str(data, "pattern", "regex pattern"))
            case "segments":
                raw = data.get("segments")
                if not isinstance(raw, list):
                    msg = f"'segments' must be a list, got {type(raw).__name__}"
                    raise ConfigParseError(msg)
                return Segments(tuple(parse_segment(s, registry) for s in raw))
            case "method":
                return MethodGuard(_require_str(data, "method", "method guard"))
            case "attributes":
                rules = data.get("rules")
                if not isinstance(rules, dict):
                    msg = f"attribute guard 'rules' must be a dict, got {type(rules).__name__}"
                    raise ConfigParseError(msg)
                return AttributeGuard({k: _parse_rule(v) for k, v in rules.items()})
            case "constant":
                matches = data.get("matches")
                if not isinstance(matches, bool):
                    msg = f"constant pattern 'matches' must be a bool, got {type(matches).__name__}"
                    raise ConfigParseError(msg)
                return Constant(matches)
            case "custom":
                return _load_custom(data, "pattern", registry)
            case None:
                msg = "pattern missing required field 'type'"
                raise ConfigParseError(msg)
            case _:
                msg = f"unknown pattern type: {kind!r}"
                raise ConfigParseError(msg)
    except ConfigParseError:
        raise
    except RouteError as e:
        raise ConfigParseError(str(e)) from e


def parse_segment(data: Any, registry: Registry | None = None) -> PatternSegment:
    """Parse a segment config: a string, or a dict with a 'type' discriminant."""
    if isinstance(data, str):
        return Literal(data)
    if not isinstance(data, dict):
        msg = f"segment must be a string or dict, got {type(data).__name__}"
        raise ConfigParseError(msg)

    kind = data.get("type")
    try:
        match kind:
            case "literal":
                return Literal(_require_str(data, "text", "literal segment"))
            case "regex":
                return Regex(_require_str(data, "pattern", "regex segment"))
            case "wildcard":
                return Wildcard(_require_str(data, "key", "wildcard segment"))
            case "keyed":
                if "segment" not in data:
                    msg = "keyed segment missing required field 'segment'"
                    raise ConfigParseError(msg)
                inner = parse_segment(data["segment"], registry)
                return Keyed(inner, _require_str(data, "key", "keyed segment"))
            case "custom":
                return _load_custom(data, "segment", registry)
            case None:
                msg = "segment missing required field 'type'"
                raise ConfigParseError(msg)
            case _:
                msg = f"unknown segment type: {kind!r}"
                raise ConfigParseError(msg)
    except ConfigParseError:
        raise
    except RouteError as e:
        raise ConfigParseError(str(e)) from e


def _parse_matched(data: dict[str, Any], registry: Registry | None) -> Matched:
    """Parse the right half of a route. Enforces oneof handler/routes/route."""
    present = [name for name in _MATCHED_FIELDS if name in data]
    if len(present) != 1:
        msg = f"exactly one of 'handler', 'routes' or 'route' must be set, got {present}"
        raise ConfigParseError(msg)

    match present[0]:
        case "handler":
            return Handler(data["handler"])
        case "routes":
            routes = data["routes"]
            if not isinstance(routes, list):
                msg = f"'routes' must be a list, got {type(routes).__name__}"
                raise ConfigParseError(msg)
            return Alternatives(tuple(parse_route(r, registry) for r in routes))
        case _:
            return Nested(parse_route(data["route"], registry))


def _parse_rule(value: Any) -> Any:
    # Lists stand in for sets, which JSON and YAML cannot express.
    if isinstance(value, list):
        try:
            return frozenset(value)
        except TypeError as e:
            msg = f"attribute rule values must be hashable: {value!r}"
            raise ConfigParseError(msg) from e
    return value


def _load_custom(data: dict[str, Any], kind: str, registry: Registry | None) -> Any:
    type_url = _require_str(data, "type_url", f"custom {kind}")
    config = data.get("config", {})
    if not isinstance(config, dict):
        msg = f"config must be a dict, got {type(config).__name__}"
        raise ConfigParseError(msg)
    if registry is None:
        raise UnknownTypeUrlError(type_url, kind, [])
    if kind == "pattern":
        return registry.create_pattern(type_url, config)
    return registry.create_segment(type_url, config)


def _require_str(data: dict[str, Any], name: str, what: str) -> str:
    if name not in data:
        msg = f"{what} missing required field '{name}'"
        raise ConfigParseError(msg)
    value = data[name]
    if not isinstance(value, str):
        msg = f"{what} '{name}' must be a string, got {type(value).__name__}"
        raise ConfigParseError(msg)
    return value
