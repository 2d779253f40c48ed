"""Core protocols and value types for biroute.

- MatchContext is the per-call state threaded through matching
- SegmentLike / PatternLike are the extension ports for custom variants
- RouteMatch is the result of a successful match
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from types import MappingProxyType
from typing import Any, Protocol, runtime_checkable

_EMPTY: Mapping[str, Any] = MappingProxyType({})


class Method(StrEnum):
    """HTTP request methods a MethodGuard can require."""

    GET = "GET"
    HEAD = "HEAD"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    PATCH = "PATCH"
    OPTIONS = "OPTIONS"
    TRACE = "TRACE"
    CONNECT = "CONNECT"


@dataclass(frozen=True, slots=True)
class MatchContext:
    """Transient state for one match_route or path_for call.

    Matching consumes ``remainder`` and accumulates ``params``.
    Generation reads ``params`` and the requested ``handler``.
    ``attributes`` are the request attributes and never change.
    """

    remainder: str = ""
    params: Mapping[str, Any] = field(default_factory=lambda: _EMPTY)
    attributes: Mapping[str, Any] = field(default_factory=lambda: _EMPTY)
    handler: Any = None


@dataclass(frozen=True, slots=True)
class RouteMatch:
    """Result of a successful route match."""

    handler: Any
    params: Mapping[str, str]


@runtime_checkable
class SegmentLike(Protocol):
    """A custom pattern segment.

    Implement all four methods and a custom segment can sit in a
    Segments pattern next to the built-in variants. ``expression``
    returns the bare regex; the capturing group for ``param_key`` is
    added by the caller.
    """

    def expression(self) -> str: ...

    def param_key(self) -> str | None: ...

    def render(self, params: Mapping[str, Any], /) -> str: ...

    def matches(self, value: str, /) -> bool: ...


@runtime_checkable
class PatternLike(Protocol):
    """A custom pattern.

    ``match`` returns the updated context or None; ``unmatch`` returns
    the path text the pattern contributes during generation.
    """

    def match(self, ctx: MatchContext, /) -> MatchContext | None: ...

    def unmatch(self, ctx: MatchContext, /) -> str: ...
