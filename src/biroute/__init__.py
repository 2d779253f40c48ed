"""biroute — Bidirectional URI routing over immutable route trees.

Match a path (plus request attributes) to a handler and its parameters,
or go the other way and build the path for a handler. All public types
are exported from this module for flat imports:

    from biroute import Route, Literal, Segments, Wildcard, Handler, match_route
"""

__version__ = "0.1.0"

# Config loading: see biroute._config for details
from biroute._config import parse_pattern, parse_route, parse_segment

# Errors
from biroute._errors import (
    ConfigParseError,
    FailureKind,
    IncompatibleParameterError,
    InvalidPatternError,
    MalformedSegmentError,
    MissingParameterError,
    NoRouteForHandlerError,
    PathGenerationError,
    RouteError,
    UninvertiblePatternError,
    UnknownTypeUrlError,
)

# Patterns
from biroute._patterns import (
    AttributeGuard,
    Constant,
    MethodGuard,
    Pattern,
    Segments,
    match_pattern,
    unmatch_pattern,
)

# Registry: see biroute._registry for details
from biroute._registry import Registry, RegistryBuilder

# Routes and the driver API
from biroute._routes import (
    Alternatives,
    Handler,
    Matched,
    Nested,
    Route,
    generate,
    match_pair,
    match_route,
    path_for,
    resolve,
    unmatch_pair,
)

# Segments
from biroute._segments import (
    Keyed,
    Literal,
    PatternSegment,
    Regex,
    Wildcard,
    param_key,
    render_segment,
    segment_expression,
    segment_matches,
)
from biroute._types import MatchContext, Method, PatternLike, RouteMatch, SegmentLike

__all__ = [
    # Protocols and context
    "MatchContext",
    "RouteMatch",
    "Method",
    "SegmentLike",
    "PatternLike",
    # Segments
    "Literal",
    "Regex",
    "Wildcard",
    "Keyed",
    "PatternSegment",
    "segment_expression",
    "param_key",
    "render_segment",
    "segment_matches",
    # Patterns
    "Segments",
    "MethodGuard",
    "AttributeGuard",
    "Constant",
    "Pattern",
    "match_pattern",
    "unmatch_pattern",
    # Routes
    "Route",
    "Handler",
    "Alternatives",
    "Nested",
    "Matched",
    "resolve",
    "generate",
    "match_pair",
    "unmatch_pair",
    # Driver API
    "match_route",
    "path_for",
    # Config
    "parse_route",
    "parse_pattern",
    "parse_segment",
    "RegistryBuilder",
    "Registry",
    # Errors
    "RouteError",
    "MalformedSegmentError",
    "InvalidPatternError",
    "PathGenerationError",
    "FailureKind",
    "MissingParameterError",
    "IncompatibleParameterError",
    "UninvertiblePatternError",
    "NoRouteForHandlerError",
    "ConfigParseError",
    "UnknownTypeUrlError",
]
