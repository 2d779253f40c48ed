"""Patterns — the left half of a Route.

A pattern is tested against the current MatchContext. Path patterns
consume a prefix of the remainder; guards inspect request attributes
without consuming anything.

The Pattern union type is pattern-matchable via match/case.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, replace
from types import MappingProxyType
from typing import Any

import re2

from biroute._errors import (
    InvalidPatternError,
    MalformedSegmentError,
    RouteError,
    UninvertiblePatternError,
)
from biroute._segments import (
    REST_EXPRESSION,
    REST_GROUP,
    Literal,
    PatternSegment,
    Regex,
    compile_segments,
    is_segment,
    render_segment,
    segment_expression,
)
from biroute._types import MatchContext, Method, PatternLike


@dataclass(frozen=True, slots=True)
class Segments:
    """An ordered list of segments matched as one expression.

    The concatenated expression must match the whole remainder, with
    the trailing catch-all taking whatever the segments leave over.
    Segments never backtrack into one another beyond what the single
    expression allows.
    """

    segments: tuple[PatternSegment, ...]

    def __post_init__(self) -> None:
        segments = tuple(self.segments)
        for segment in segments:
            if not is_segment(segment):
                msg = f"unsupported pattern segment: {segment!r}"
                raise MalformedSegmentError(msg)
        object.__setattr__(self, "segments", segments)


@dataclass(frozen=True, slots=True)
class MethodGuard:
    """Passes only when the request method equals ``method``."""

    method: Method

    def __post_init__(self) -> None:
        try:
            method = Method(self.method)
        except ValueError as e:
            msg = f"unknown request method: {self.method!r}"
            raise RouteError(msg) from e
        object.__setattr__(self, "method", method)


@dataclass(frozen=True, slots=True)
class AttributeGuard:
    """Passes only when every rule holds for the request attributes.

    A rule is a predicate (any callable), a set of allowed values, or a
    single value compared for equality. A missing attribute is None.
    """

    rules: Mapping[str, Any]

    def __post_init__(self) -> None:
        object.__setattr__(self, "rules", MappingProxyType(dict(self.rules)))


@dataclass(frozen=True, slots=True)
class Constant:
    """Always passes (True) or never passes (False). Consumes nothing."""

    matches: bool


type Pattern = Literal | Regex | Segments | MethodGuard | AttributeGuard | Constant | PatternLike


def match_pattern(pattern: Pattern, ctx: MatchContext) -> MatchContext | None:
    """Match ``pattern`` against ``ctx``.

    Returns the updated context, or None if the pattern does not match.
    """
    match pattern:
        case Literal() | Regex():
            return _match_beginning(segment_expression(pattern), ctx)
        case Segments(segments=segments):
            return _match_segments(segments, ctx)
        case MethodGuard(method=method):
            return ctx if ctx.attributes.get("method") == method else None
        case AttributeGuard(rules=rules):
            for key, rule in rules.items():
                if not _rule_holds(rule, ctx.attributes.get(key)):
                    return None
            return ctx
        case Constant(matches=matches):
            return ctx if matches else None
        case PatternLike():
            return pattern.match(ctx)
        case _:
            raise _unsupported(pattern)


def unmatch_pattern(pattern: Pattern, ctx: MatchContext) -> str | None:
    """Render ``pattern`` back to the path text it consumes.

    Guards contribute no text. Returns None for a pattern that can never
    match, so no path is generated through it.

    Raises:
        UninvertiblePatternError: The pattern is a bare Regex.
        MissingParameterError: A segment's key has no value.
        IncompatibleParameterError: A Keyed value does not match its segment.
    """
    match pattern:
        case Literal(text=text):
            return text
        case Regex():
            raise UninvertiblePatternError(pattern)
        case Segments(segments=segments):
            return "".join(render_segment(s, ctx.params) for s in segments)
        case MethodGuard() | AttributeGuard():
            return ""
        case Constant(matches=matches):
            return "" if matches else None
        case PatternLike():
            return pattern.unmatch(ctx)
        case _:
            raise _unsupported(pattern)


def _match_beginning(expression: str, ctx: MatchContext) -> MatchContext | None:
    """Match the start of the remainder; the rest becomes the new remainder."""
    m = _compile(expression + REST_EXPRESSION).fullmatch(ctx.remainder)
    if m is None:
        return None
    return replace(ctx, remainder=m.group(REST_GROUP))


def _match_segments(
    segments: tuple[PatternSegment, ...], ctx: MatchContext
) -> MatchContext | None:
    expression, groups = compile_segments(segments)
    m = _compile(expression).fullmatch(ctx.remainder)
    if m is None:
        return None
    params = dict(ctx.params)
    # Later segments overwrite earlier ones bound to the same key.
    for name, key in groups.items():
        params[key] = m.group(name)
    return replace(
        ctx,
        remainder=m.group(REST_GROUP),
        params=MappingProxyType(params),
    )


def _compile(expression: str) -> re2.Pattern[str]:
    try:
        return re2.compile(expression)
    except re2.error as e:
        raise InvalidPatternError(expression, str(e)) from e


def _rule_holds(rule: Any, value: Any) -> bool:
    if callable(rule):
        return bool(rule(value))
    if isinstance(rule, (set, frozenset)):
        try:
            return value in rule
        except TypeError:
            # Unhashable values (mappings, lists) are never members
            return False
    return rule == value


def _unsupported(pattern: Any) -> RouteError:
    return RouteError(f"unsupported pattern: {pattern!r}")
