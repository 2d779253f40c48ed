"""Type registry for custom patterns and segments in config.

The registry lets config refer to pattern and segment types the core
does not know about:

- RegistryBuilder → .build() → Registry (immutable)
- Factories are plain callables: (config: dict) → PatternLike or SegmentLike
- load_route() parses a route dict, resolving ``custom`` entries here

Example::

    builder = RegistryBuilder()
    builder.segment("example.v1.Digits", lambda cfg: Digits(cfg["key"]))
    registry = builder.build()

    route = registry.load_route(yaml.safe_load(text))
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from biroute._config import parse_route
from biroute._errors import ConfigParseError, UnknownTypeUrlError
from biroute._types import PatternLike, SegmentLike

if TYPE_CHECKING:
    from collections.abc import Callable

    from biroute._routes import Route

# Factory type aliases
type PatternFactory = Callable[[dict[str, Any]], PatternLike]
type SegmentFactory = Callable[[dict[str, Any]], SegmentLike]


class RegistryBuilder:
    """Builder for constructing a Registry.

    Register pattern and segment factories with type URLs, then call
    build() to produce an immutable Registry.
    """

    def __init__(self) -> None:
        self._pattern_factories: dict[str, PatternFactory] = {}
        self._segment_factories: dict[str, SegmentFactory] = {}

    def pattern(self, type_url: str, factory: PatternFactory) -> RegistryBuilder:
        """Register a custom pattern factory with a type URL."""
        self._pattern_factories[type_url] = factory
        return self

    def segment(self, type_url: str, factory: SegmentFactory) -> RegistryBuilder:
        """Register a custom segment factory with a type URL."""
        self._segment_factories[type_url] = factory
        return self

    def build(self) -> Registry:
        """Freeze the registry. No further registration is possible."""
        return Registry(
            _pattern_factories=MappingProxyType(dict(self._pattern_factories)),
            _segment_factories=MappingProxyType(dict(self._segment_factories)),
        )


@dataclass(frozen=True, slots=True)
class Registry:
    """Immutable registry of custom pattern and segment factories.

    Constructed via RegistryBuilder.
    """

    _pattern_factories: MappingProxyType[str, PatternFactory] = field(
        default_factory=lambda: MappingProxyType({})
    )
    _segment_factories: MappingProxyType[str, SegmentFactory] = field(
        default_factory=lambda: MappingProxyType({})
    )

    def load_route(self, data: dict[str, Any]) -> Route:
        """Parse a route dict, resolving custom types through this registry."""
        return parse_route(data, self)

    def create_pattern(self, type_url: str, config: dict[str, Any]) -> PatternLike:
        """Construct a custom pattern from its registered factory.

        Raises:
            UnknownTypeUrlError: type_url not registered
            ConfigParseError: the factory failed or returned a non-pattern
        """
        pattern = _create(self._pattern_factories, "pattern", type_url, config)
        if not isinstance(pattern, PatternLike):
            msg = f"factory for {type_url!r} did not return a pattern: {pattern!r}"
            raise ConfigParseError(msg)
        return pattern

    def create_segment(self, type_url: str, config: dict[str, Any]) -> SegmentLike:
        """Construct a custom segment from its registered factory.

        Raises:
            UnknownTypeUrlError: type_url not registered
            ConfigParseError: the factory failed or returned a non-segment
        """
        segment = _create(self._segment_factories, "segment", type_url, config)
        if not isinstance(segment, SegmentLike):
            msg = f"factory for {type_url!r} did not return a segment: {segment!r}"
            raise ConfigParseError(msg)
        return segment

    @property
    def pattern_count(self) -> int:
        """Number of registered pattern types."""
        return len(self._pattern_factories)

    @property
    def segment_count(self) -> int:
        """Number of registered segment types."""
        return len(self._segment_factories)

    def contains_pattern(self, type_url: str) -> bool:
        return type_url in self._pattern_factories

    def contains_segment(self, type_url: str) -> bool:
        return type_url in self._segment_factories

    def pattern_type_urls(self) -> list[str]:
        """Return all registered pattern type URLs (sorted)."""
        return sorted(self._pattern_factories.keys())

    def segment_type_urls(self) -> list[str]:
        """Return all registered segment type URLs (sorted)."""
        return sorted(self._segment_factories.keys())


def _create(
    factories: MappingProxyType[str, Callable[[dict[str, Any]], Any]],
    kind: str,
    type_url: str,
    config: dict[str, Any],
) -> Any:
    factory = factories.get(type_url)
    if factory is None:
        raise UnknownTypeUrlError(type_url, kind, list(factories.keys()))
    try:
        return factory(config)
    except Exception as e:
        msg = f"invalid {kind} config for {type_url!r}: {e}"
        raise ConfigParseError(msg) from e
