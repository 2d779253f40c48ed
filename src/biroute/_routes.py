"""Routes — pattern/matched pairs and the two driver operations.

Mirrors the evaluation semantics of a first-match-wins matcher tree:
- Alternatives are tried in order; the first success wins
- A Handler resolves only once the whole path has been consumed
- Generation walks the same tree, looking for the requested handler
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from biroute._errors import NoRouteForHandlerError, RouteError
from biroute._patterns import match_pattern, unmatch_pattern
from biroute._types import MatchContext, RouteMatch

if TYPE_CHECKING:
    from collections.abc import Mapping

    from biroute._patterns import Pattern

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Handler:
    """Terminal: the opaque handler identifier a path routes to."""

    value: Any


@dataclass(frozen=True, slots=True)
class Alternatives:
    """Routes tried in order. The first one that matches wins."""

    routes: tuple[Route, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "routes", tuple(self.routes))


@dataclass(frozen=True, slots=True)
class Nested:
    """A single route to continue into."""

    route: Route


type Matched = Handler | Alternatives | Nested


@dataclass(frozen=True, slots=True)
class Route:
    """A pattern on the left, whatever it matches on the right."""

    pattern: Pattern
    matched: Matched


def match_pair(route: Route, ctx: MatchContext) -> MatchContext | None:
    """Match the route's pattern, then resolve what it leads to."""
    matched_ctx = match_pattern(route.pattern, ctx)
    if matched_ctx is None:
        return None
    return resolve(route.matched, matched_ctx)


def unmatch_pair(route: Route, ctx: MatchContext) -> str | None:
    """Generate the path through ``route`` to ``ctx.handler``, if it has one.

    The matched side is generated first, so a pattern is only rendered on
    the branch that actually leads to the requested handler.
    """
    suffix = generate(route.matched, ctx)
    if suffix is None:
        return None
    prefix = unmatch_pattern(route.pattern, ctx)
    if prefix is None:
        return None
    return prefix + suffix


def resolve(matched: Matched, ctx: MatchContext) -> MatchContext | None:
    """Resolve a matched value against ``ctx``."""
    match matched:
        case Handler(value=value):
            if ctx.remainder != "":
                return None
            return replace(ctx, remainder="", handler=value)
        case Alternatives(routes=routes):
            for route in routes:
                result = match_pair(route, ctx)
                if result is not None:
                    return result
            return None
        case Nested(route=route):
            return match_pair(route, ctx)
        case _:
            msg = f"unsupported matched value: {matched!r}"
            raise RouteError(msg)


def generate(matched: Matched, ctx: MatchContext) -> str | None:
    """Inverse of resolve: the path suffix leading to ``ctx.handler``."""
    match matched:
        case Handler(value=value):
            return "" if value == ctx.handler else None
        case Alternatives(routes=routes):
            for route in routes:
                result = unmatch_pair(route, ctx)
                if result is not None:
                    return result
            return None
        case Nested(route=route):
            return unmatch_pair(route, ctx)
        case _:
            msg = f"unsupported matched value: {matched!r}"
            raise RouteError(msg)


def match_route(
    path: str,
    routes: Route,
    attributes: Mapping[str, Any] | None = None,
) -> RouteMatch | None:
    """Return the handler and params that ``path`` routes to.

    ``attributes`` are the request attributes guards inspect (method,
    server_name, ...). Returns None when nothing in the tree matches.
    """
    ctx = MatchContext(
        remainder=path,
        attributes=MappingProxyType(dict(attributes or {})),
    )
    result = match_pair(routes, ctx)
    if result is None:
        logger.debug("no route matches %r", path)
        return None
    return RouteMatch(handler=result.handler, params=result.params)


def path_for(
    handler: Any,
    routes: Route,
    params: Mapping[str, Any] | None = None,
    /,
    **kwargs: Any,
) -> str:
    """Return a path that would route to ``handler``.

    Parameter values come from ``params`` and keyword arguments (keyword
    arguments win). Values are rendered with ``str()``.

    Raises:
        MissingParameterError: A key on the winning route has no value.
        IncompatibleParameterError: A value does not match its segment.
        UninvertiblePatternError: The winning route has a bare Regex.
        NoRouteForHandlerError: No route in the tree produces ``handler``.
    """
    ctx = MatchContext(
        params=MappingProxyType({**(params or {}), **kwargs}),
        handler=handler,
    )
    path = unmatch_pair(routes, ctx)
    if path is None:
        raise NoRouteForHandlerError(handler)
    logger.debug("generated %r for handler %r", path, handler)
    return path
