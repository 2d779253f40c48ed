"""Pattern segments — the pieces of a multi-part path pattern.

Each segment is a frozen dataclass. A segment contributes a regex
fragment when matching and literal text when generating a path.
Wildcard and Keyed segments are bound to a parameter key.

Regex uses ``google-re2`` for guaranteed linear-time matching. RE2 does not
support backreferences or lookahead/lookbehind because they require
backtracking. Patterns using them are rejected at construction time.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

import re2

from biroute._errors import (
    IncompatibleParameterError,
    InvalidPatternError,
    MalformedSegmentError,
    MissingParameterError,
    UninvertiblePatternError,
)
from biroute._types import SegmentLike

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

# Group name of the trailing catch-all. Parameter groups are "_p0", "_p1", ...
REST_GROUP = "_rest"
ANY_TEXT = "(?s:.*)"
REST_EXPRESSION = f"(?P<{REST_GROUP}>{ANY_TEXT})"


@dataclass(frozen=True, slots=True)
class Literal:
    """Text matched verbatim. Also usable as a whole Pattern (prefix match)."""

    text: str


@dataclass(frozen=True, slots=True)
class Regex:
    """A regular expression. Also usable as a whole Pattern (prefix match).

    The pattern is compiled at construction time via ``google-re2``.
    A bare Regex cannot be inverted; pair it with a key via Keyed to
    make it usable in path generation.

    Raises:
        InvalidPatternError: If the pattern is not valid RE2 syntax, or
            names a group "_rest" or "_p<N>".
    """

    pattern: str
    _compiled: re2.Pattern[str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        try:
            compiled = re2.compile(self.pattern)
        except re2.error as e:
            raise InvalidPatternError(self.pattern, str(e)) from e
        reserved = sorted(name for name in compiled.groupindex if _is_reserved_group(name))
        if reserved:
            reason = f"group names {reserved} are reserved for parameter capture"
            raise InvalidPatternError(self.pattern, reason)
        object.__setattr__(self, "_compiled", compiled)


@dataclass(frozen=True, slots=True)
class Wildcard:
    """Matches any text (greedy) and binds it to ``key``."""

    key: str

    def __post_init__(self) -> None:
        _check_key(self.key, self)


@dataclass(frozen=True, slots=True)
class Keyed:
    """Binds a Literal or Regex segment to a parameter key."""

    segment: Literal | Regex
    key: str

    def __post_init__(self) -> None:
        if not isinstance(self.segment, (Literal, Regex)):
            msg = (
                "a Keyed segment must wrap a Literal or Regex segment, "
                f"got {type(self.segment).__name__}"
            )
            raise MalformedSegmentError(msg)
        _check_key(self.key, self)


type PatternSegment = Literal | Regex | Wildcard | Keyed | SegmentLike


def is_segment(value: Any) -> bool:
    """Whether ``value`` can appear in a Segments pattern."""
    return isinstance(value, (Literal, Regex, Wildcard, Keyed, SegmentLike))


def segment_expression(segment: PatternSegment) -> str:
    """Return the regex fragment matching ``segment``.

    Key-bearing segments are wrapped in a capturing group.
    """
    body = _segment_body(segment)
    if param_key(segment) is None:
        return body
    return f"({body})"


def param_key(segment: PatternSegment) -> str | None:
    """Return the parameter key bound to ``segment``, if any."""
    match segment:
        case Wildcard(key=key) | Keyed(key=key):
            return key
        case Literal() | Regex():
            return None
        case SegmentLike():
            return segment.param_key()
        case _:
            raise _unsupported(segment)


def render_segment(segment: PatternSegment, params: Mapping[str, Any]) -> str:
    """Render ``segment`` back to literal path text.

    Raises:
        MissingParameterError: The segment's key has no value in ``params``.
        IncompatibleParameterError: A Keyed value does not match its segment.
        UninvertiblePatternError: The segment is a bare Regex.
    """
    match segment:
        case Literal(text=text):
            return text
        case Regex():
            raise UninvertiblePatternError(segment)
        case Wildcard(key=key):
            return _lookup(params, key)
        case Keyed(segment=inner, key=key):
            value = _lookup(params, key)
            if not segment_matches(inner, value):
                raise IncompatibleParameterError(key, params[key], segment)
            return value
        case SegmentLike():
            return segment.render(params)
        case _:
            raise _unsupported(segment)


def segment_matches(segment: PatternSegment, value: str) -> bool:
    """Test a literal string against a segment (whole-string match)."""
    match segment:
        case Regex(_compiled=compiled):
            return compiled.fullmatch(value) is not None
        case Literal(text=text):
            return value == text
        case Wildcard():
            return True
        case Keyed(segment=inner):
            return segment_matches(inner, value)
        case SegmentLike():
            return segment.matches(value)
        case _:
            raise _unsupported(segment)


def compile_segments(segments: Sequence[PatternSegment]) -> tuple[str, dict[str, str]]:
    """Concatenate segment fragments into one expression.

    Returns the expression (ending in the catch-all rest group) and a
    mapping from group name to parameter key, in segment order.
    Parameter groups are named so that groups inside user regexes
    cannot shift them.
    """
    parts: list[str] = []
    groups: dict[str, str] = {}
    for index, segment in enumerate(segments):
        body = _segment_body(segment)
        key = param_key(segment)
        if key is None:
            parts.append(body)
        else:
            name = f"_p{index}"
            groups[name] = key
            parts.append(f"(?P<{name}>{body})")
    parts.append(REST_EXPRESSION)
    return "".join(parts), groups


def _segment_body(segment: PatternSegment) -> str:
    match segment:
        case Literal(text=text):
            return re2.escape(text)
        case Regex(pattern=pattern):
            return f"(?:{pattern})"
        case Wildcard():
            return ANY_TEXT
        case Keyed(segment=inner):
            return _segment_body(inner)
        case SegmentLike():
            return f"(?:{segment.expression()})"
        case _:
            raise _unsupported(segment)


def _lookup(params: Mapping[str, Any], key: str) -> str:
    value = params.get(key)
    if value is None:
        raise MissingParameterError(key)
    return str(value)


def _check_key(key: Any, segment: Any) -> None:
    if not isinstance(key, str) or not key:
        msg = f"the key associated with a pattern segment must be a non-empty string: {segment!r}"
        raise MalformedSegmentError(msg)


def _is_reserved_group(name: str) -> bool:
    return name == REST_GROUP or (name.startswith("_p") and name[2:].isdigit())


def _unsupported(segment: Any) -> MalformedSegmentError:
    return MalformedSegmentError(f"unsupported pattern segment: {segment!r}")
