"""Test utilities for biroute.

Provides small custom segment and pattern implementations for use in
tests and examples. They show how to plug into the SegmentLike and
PatternLike protocols without touching the core.

For real applications, implement the protocols for your own types.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Any

from biroute._errors import IncompatibleParameterError, MissingParameterError

if TYPE_CHECKING:
    from collections.abc import Mapping

    from biroute._registry import RegistryBuilder
    from biroute._types import MatchContext


@dataclass(frozen=True, slots=True)
class Digits:
    """A segment matching one or more ASCII digits, bound to ``key``.

    >>> from biroute import Literal, Route, Segments, Handler, match_route
    >>> from biroute.testing import Digits
    >>> r = Route(Segments((Literal("/users/"), Digits("id"))), Handler("user"))
    >>> match_route("/users/42", r).params["id"]
    '42'
    """

    key: str

    def expression(self) -> str:
        return "[0-9]+"

    def param_key(self) -> str | None:
        return self.key

    def render(self, params: Mapping[str, Any], /) -> str:
        value = params.get(self.key)
        if value is None:
            raise MissingParameterError(self.key)
        text = str(value)
        if not self.matches(text):
            raise IncompatibleParameterError(self.key, value, self)
        return text

    def matches(self, value: str, /) -> bool:
        return value.isascii() and value.isdigit()


@dataclass(frozen=True, slots=True)
class OptionalSlash:
    """A pattern that consumes a single leading "/" if there is one.

    Generates no text, so generated paths never carry the slash.
    """

    def match(self, ctx: MatchContext, /) -> MatchContext | None:
        if ctx.remainder.startswith("/"):
            return replace(ctx, remainder=ctx.remainder[1:])
        return ctx

    def unmatch(self, ctx: MatchContext, /) -> str:
        return ""


def register(builder: RegistryBuilder) -> RegistryBuilder:
    """Register the test-domain types.

    Type URLs:
    - biroute.test.v1.Digits (segment), config: { "key": "param_name" }
    - biroute.test.v1.OptionalSlash (pattern), no config
    """
    return builder.segment("biroute.test.v1.Digits", _digits_factory).pattern(
        "biroute.test.v1.OptionalSlash", _optional_slash_factory
    )


def _digits_factory(config: dict[str, Any]) -> Digits:
    key = config.get("key")
    if not isinstance(key, str) or not key:
        msg = "Digits requires a non-empty 'key' field (string)"
        raise ValueError(msg)
    return Digits(key=key)


def _optional_slash_factory(_config: dict[str, Any]) -> OptionalSlash:
    return OptionalSlash()
