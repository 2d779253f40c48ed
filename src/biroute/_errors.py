"""Error hierarchy for biroute.

No-match is never an error: ``match_route`` returns None for that.
Everything here signals a caller mistake: a malformed route tree, a
config that cannot be parsed, or a path that cannot be generated.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any


class RouteError(Exception):
    """Base class for all biroute errors."""


class MalformedSegmentError(RouteError):
    """A pattern segment was constructed with invalid parts."""


class InvalidPatternError(RouteError):
    """A regular expression is not valid RE2 syntax or uses a reserved group name."""

    def __init__(self, pattern: str, reason: str) -> None:
        self.pattern = pattern
        self.reason = reason
        super().__init__(f'invalid regex pattern "{pattern}": {reason}')


class FailureKind(StrEnum):
    """Why path generation failed."""

    MISSING_PARAMETER = "missing_parameter"
    INCOMPATIBLE_PARAMETER = "incompatible_parameter"
    UNINVERTIBLE_PATTERN = "uninvertible_pattern"
    NO_ROUTE = "no_route"


class PathGenerationError(RouteError):
    """``path_for`` could not produce a path.

    ``kind`` identifies the failure; subclasses carry the offending key,
    value or pattern as attributes.
    """

    kind: FailureKind


class MissingParameterError(PathGenerationError):
    """No value was supplied for a parameter the winning route declares."""

    kind = FailureKind.MISSING_PARAMETER

    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f"no parameter value given for {key!r}")


class IncompatibleParameterError(PathGenerationError):
    """A parameter value does not match its segment's expression."""

    kind = FailureKind.INCOMPATIBLE_PARAMETER

    def __init__(self, key: str, value: Any, segment: Any) -> None:
        self.key = key
        self.value = value
        self.segment = segment
        super().__init__(
            f"parameter value {value!r} (key {key!r}) is not compatible "
            f"with the route pattern {segment!r}"
        )


class UninvertiblePatternError(PathGenerationError):
    """A bare regex has no inverse and cannot be rendered as a path."""

    kind = FailureKind.UNINVERTIBLE_PATTERN

    def __init__(self, pattern: Any) -> None:
        self.pattern = pattern
        super().__init__(
            f"cannot generate a path through {pattern!r}: a regex is only "
            "invertible when paired with a parameter key"
        )


class NoRouteForHandlerError(PathGenerationError):
    """No branch of the route tree resolves to the requested handler."""

    kind = FailureKind.NO_ROUTE

    def __init__(self, handler: Any) -> None:
        self.handler = handler
        super().__init__(f"no route produces handler {handler!r}")


class ConfigParseError(RouteError):
    """Error parsing a config dict into a route tree."""


class UnknownTypeUrlError(ConfigParseError):
    """A custom type_url was not found in the registry."""

    def __init__(self, type_url: str, kind: str, available: list[str]) -> None:
        self.type_url = type_url
        self.kind = kind
        self.available = sorted(available)
        if self.available:
            registered = ", ".join(self.available)
            msg = f"unknown {kind} type_url: {type_url!r} (registered: {registered})"
        else:
            msg = (
                f"unknown {kind} type_url: {type_url!r} "
                f"(no {kind} types are registered)"
            )
        super().__init__(msg)
