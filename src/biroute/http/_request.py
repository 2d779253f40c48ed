"""HttpRequest — Simple HTTP request context for routing.

Holds method, path (without query string), headers (case-insensitive),
query parameters (parsed from the raw path), and the parameters a
successful match attaches to the request.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any
from urllib.parse import parse_qsl

_EMPTY: Mapping[str, Any] = MappingProxyType({})


@dataclass(frozen=True, slots=True)
class HttpRequest:
    """HTTP request context for routing.

    The path should be provided as-is from the wire (may include query string).
    Query parameters are parsed and percent-decoded, and the path is cleaned.

    Headers are stored with lowercased keys for case-insensitive lookup.
    """

    method: str = "GET"
    raw_path: str = "/"
    headers: dict[str, str] = field(default_factory=dict)
    server_name: str | None = None
    scheme: str = "http"
    route_params: Mapping[str, str] = field(default_factory=lambda: _EMPTY)
    params: Mapping[str, Any] = field(default_factory=lambda: _EMPTY)

    # Computed fields, parsed from raw_path
    _clean_path: str = field(init=False, repr=False)
    _query_params: dict[str, str] = field(init=False, repr=False)
    _lower_headers: dict[str, str] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        # Split and percent-decode the query string; repeated keys keep the last value
        path, _, query_string = self.raw_path.partition("?")
        object.__setattr__(self, "_clean_path", path)
        object.__setattr__(
            self, "_query_params", dict(parse_qsl(query_string, keep_blank_values=True))
        )

        # Lowercase header keys for case-insensitive lookup
        object.__setattr__(
            self,
            "_lower_headers",
            {k.lower(): v for k, v in self.headers.items()},
        )

    @property
    def path(self) -> str:
        """Path without query string."""
        return self._clean_path

    @property
    def query_params(self) -> dict[str, str]:
        """Parsed query parameters."""
        return self._query_params

    def header(self, name: str) -> str | None:
        """Get a header value by name (case-insensitive)."""
        return self._lower_headers.get(name.lower())

    def query_param(self, name: str) -> str | None:
        """Get a query parameter by name."""
        return self._query_params.get(name)

    def attributes(self) -> dict[str, Any]:
        """The attribute map route guards are evaluated against."""
        return {
            "method": self.method,
            "path": self.path,
            "server_name": self.server_name or self.header("host"),
            "scheme": self.scheme,
            "headers": MappingProxyType(self._lower_headers),
            "query_params": MappingProxyType(self._query_params),
        }

    def with_route_params(self, route_params: Mapping[str, str]) -> HttpRequest:
        """Return a copy carrying ``route_params``, also merged into ``params``.

        Parameters already on the request take precedence over route params.
        """
        return replace(
            self,
            route_params=MappingProxyType(dict(route_params)),
            params=MappingProxyType({**route_params, **self.params}),
        )
