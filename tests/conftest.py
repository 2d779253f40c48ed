"""Shared route trees for the biroute test suite."""

from __future__ import annotations

import pytest

from biroute import (
    Alternatives,
    Handler,
    Keyed,
    Literal,
    MethodGuard,
    Nested,
    Regex,
    Route,
    Segments,
    Wildcard,
)


@pytest.fixture
def article_routes() -> Route:
    """The index/article tree: "/" then index.html or articles/<id>/article.html."""
    return Route(
        Literal("/"),
        Alternatives(
            (
                Route(Literal("index.html"), Handler("index")),
                Route(
                    Segments((Literal("articles/"), Wildcard("id"), Literal("/article.html"))),
                    Handler("article"),
                ),
            )
        ),
    )


@pytest.fixture
def blog_routes() -> Route:
    """A deeper tree with guards, keyed regexes and nested alternatives."""
    return Route(
        Literal("/blog"),
        Alternatives(
            (
                Route(Literal("/index.html"), Handler("blog-index")),
                Route(
                    Segments((Literal("/users/"), Keyed(Regex("[^/]+"), "user"))),
                    Alternatives(
                        (
                            Route(Literal("/articles"), Nested(Route(MethodGuard("GET"), Handler("list")))),
                            Route(Literal("/articles"), Nested(Route(MethodGuard("POST"), Handler("create")))),
                            Route(
                                Segments(
                                    (
                                        Literal("/articles/"),
                                        Keyed(Regex("[0-9]+"), "article"),
                                        Literal(".html"),
                                    )
                                ),
                                Handler("show"),
                            ),
                        )
                    ),
                ),
            )
        ),
    )
