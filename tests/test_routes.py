"""Tests for route resolution and the driver API (biroute._routes)."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor

import pytest

from biroute import (
    Alternatives,
    AttributeGuard,
    Constant,
    FailureKind,
    Handler,
    IncompatibleParameterError,
    Keyed,
    Literal,
    MatchContext,
    MethodGuard,
    MissingParameterError,
    Nested,
    NoRouteForHandlerError,
    PathGenerationError,
    Regex,
    Route,
    RouteError,
    RouteMatch,
    Segments,
    UninvertiblePatternError,
    Wildcard,
    generate,
    match_route,
    path_for,
    resolve,
)


class TestResolve:
    def test_handler_requires_empty_remainder(self) -> None:
        assert resolve(Handler("h"), MatchContext(remainder="/more")) is None

    def test_handler_sets_handler(self) -> None:
        result = resolve(Handler("h"), MatchContext(remainder=""))
        assert result is not None
        assert result.handler == "h"
        assert result.remainder == ""

    def test_empty_alternatives_fail(self) -> None:
        assert resolve(Alternatives(()), MatchContext(remainder="")) is None

    def test_unsupported_matched_value(self) -> None:
        with pytest.raises(RouteError, match="unsupported matched value"):
            resolve("h", MatchContext())  # type: ignore[arg-type]


class TestGenerate:
    def test_handler_equal(self) -> None:
        assert generate(Handler("h"), MatchContext(handler="h")) == ""

    def test_handler_not_equal(self) -> None:
        assert generate(Handler("h"), MatchContext(handler="other")) is None

    def test_unsupported_matched_value(self) -> None:
        with pytest.raises(RouteError):
            generate(["h"], MatchContext(handler="h"))  # type: ignore[arg-type]


class TestMatchRoute:
    def test_single_route(self) -> None:
        route = Route(Literal("/index.html"), Handler("index"))
        assert match_route("/index.html", route) == RouteMatch(handler="index", params={})

    def test_single_route_no_match(self) -> None:
        route = Route(Literal("/index.html"), Handler("index"))
        assert match_route("/other.html", route) is None

    def test_trailing_text_is_no_match(self) -> None:
        route = Route(Literal("/index.html"), Handler("index"))
        assert match_route("/index.html/x", route) is None

    def test_alternatives_with_wildcard(self, article_routes: Route) -> None:
        result = match_route("/articles/123/article.html", article_routes)
        assert result == RouteMatch(handler="article", params={"id": "123"})

    def test_alternatives_first_branch(self, article_routes: Route) -> None:
        result = match_route("/index.html", article_routes)
        assert result is not None
        assert result.handler == "index"
        assert result.params == {}

    def test_extra_trailing_content_fails(self, article_routes: Route) -> None:
        assert match_route("/articles/123/article.html/x", article_routes) is None

    def test_first_match_wins(self) -> None:
        routes = Route(
            Literal("/"),
            Alternatives(
                (
                    Route(Segments((Wildcard("page"),)), Handler("catch-all")),
                    Route(Literal("about"), Handler("about")),
                )
            ),
        )
        result = match_route("/about", routes)
        assert result is not None
        assert result.handler == "catch-all"
        assert result.params == {"page": "about"}

    def test_reordered_alternatives(self) -> None:
        routes = Route(
            Literal("/"),
            Alternatives(
                (
                    Route(Literal("about"), Handler("about")),
                    Route(Segments((Wildcard("page"),)), Handler("catch-all")),
                )
            ),
        )
        assert match_route("/about", routes).handler == "about"  # type: ignore[union-attr]
        assert match_route("/contact", routes).handler == "catch-all"  # type: ignore[union-attr]

    def test_disjoint_alternatives_order_independent(self) -> None:
        a = Route(Literal("a"), Handler("a"))
        b = Route(Segments((Literal("b/"), Wildcard("x"))), Handler("b"))
        forward = Route(Literal("/"), Alternatives((a, b)))
        backward = Route(Literal("/"), Alternatives((b, a)))
        for path in ("/a", "/b/1", "/c"):
            assert match_route(path, forward) == match_route(path, backward)

    def test_nested_failure_falls_through(self) -> None:
        routes = Route(
            Literal("/a"),
            Alternatives(
                (
                    Route(Literal(""), Nested(Route(Literal("/b"), Handler("ab")))),
                    Route(Literal("/c"), Handler("ac")),
                )
            ),
        )
        assert match_route("/a/c", routes).handler == "ac"  # type: ignore[union-attr]
        assert match_route("/a/b", routes).handler == "ab"  # type: ignore[union-attr]

    def test_params_accumulate_across_levels(self, blog_routes: Route) -> None:
        result = match_route("/blog/users/alice/articles/7.html", blog_routes)
        assert result == RouteMatch(handler="show", params={"user": "alice", "article": "7"})

    def test_greedy_wildcard_does_not_backtrack_across_levels(self) -> None:
        routes = Route(
            Segments((Literal("/users/"), Wildcard("user"))),
            Nested(Route(Literal("/edit"), Handler("edit"))),
        )
        # The wildcard takes the whole rest of the path at its own level.
        assert match_route("/users/alice/edit", routes) is None

    def test_function_handler_ids(self) -> None:
        def show() -> None: ...

        routes = Route(Literal("/show"), Handler(show))
        result = match_route("/show", routes)
        assert result is not None
        assert result.handler is show

    def test_attributes_are_not_mutated(self) -> None:
        attributes = {"method": "GET"}
        route = Route(MethodGuard("GET"), Handler("h"))  # type: ignore[arg-type]
        match_route("", route, attributes)
        assert attributes == {"method": "GET"}


class TestGuards:
    def test_method_guard_rejects_other_method(self) -> None:
        guard = MethodGuard("GET")  # type: ignore[arg-type]
        guarded = Route(Literal("/x"), Nested(Route(guard, Handler("handler"))))
        assert match_route("/x", guarded, {"method": "POST"}) is None
        assert match_route("/x", guarded, {"method": "GET"}) == RouteMatch("handler", {})

    def test_method_guard_selects_branch(self, blog_routes: Route) -> None:
        path = "/blog/users/alice/articles"
        listing = match_route(path, blog_routes, {"method": "GET"})
        creating = match_route(path, blog_routes, {"method": "POST"})
        assert listing == RouteMatch("list", {"user": "alice"})
        assert creating == RouteMatch("create", {"user": "alice"})
        assert match_route(path, blog_routes, {"method": "DELETE"}) is None

    def test_attribute_guard_server_name(self) -> None:
        routes = Route(
            AttributeGuard({"server_name": {"juxt.pro"}}),
            Nested(Route(Literal("/index.html"), Handler("index"))),
        )
        assert match_route("/index.html", routes, {"server_name": "juxt.pro"}) is not None
        assert match_route("/index.html", routes, {"server_name": "example.org"}) is None
        assert match_route("/index.html", routes, {}) is None

    def test_disabled_branch(self) -> None:
        routes = Route(
            Literal("/"),
            Alternatives(
                (
                    Route(Constant(False), Nested(Route(Literal("beta"), Handler("beta")))),
                    Route(Constant(True), Nested(Route(Literal("beta"), Handler("fallback")))),
                )
            ),
        )
        assert match_route("/beta", routes).handler == "fallback"  # type: ignore[union-attr]


class TestPathFor:
    def test_literal_route(self) -> None:
        route = Route(Literal("/index.html"), Handler("index"))
        assert path_for("index", route) == "/index.html"

    def test_wildcard_route(self, article_routes: Route) -> None:
        assert path_for("article", article_routes, {"id": 123}) == "/articles/123/article.html"

    def test_keyword_params(self, article_routes: Route) -> None:
        assert path_for("article", article_routes, id="abc") == "/articles/abc/article.html"

    def test_keyword_params_win(self, article_routes: Route) -> None:
        path = path_for("article", article_routes, {"id": 1}, id=2)
        assert path == "/articles/2/article.html"

    def test_missing_parameter(self, article_routes: Route) -> None:
        with pytest.raises(MissingParameterError) as exc_info:
            path_for("article", article_routes, {})
        assert exc_info.value.key == "id"
        assert exc_info.value.kind is FailureKind.MISSING_PARAMETER

    def test_missing_parameter_only_on_winning_branch(self, article_routes: Route) -> None:
        assert path_for("index", article_routes) == "/index.html"

    def test_incompatible_parameter(self, blog_routes: Route) -> None:
        with pytest.raises(IncompatibleParameterError) as exc_info:
            path_for("show", blog_routes, user="alice", article="seven")
        assert exc_info.value.key == "article"
        assert exc_info.value.value == "seven"

    def test_unknown_handler(self, article_routes: Route) -> None:
        with pytest.raises(NoRouteForHandlerError) as exc_info:
            path_for("missing", article_routes)
        assert exc_info.value.handler == "missing"
        assert exc_info.value.kind is FailureKind.NO_ROUTE

    def test_bare_regex_pattern(self) -> None:
        routes = Route(Regex("/[a-z]+"), Handler("h"))
        with pytest.raises(UninvertiblePatternError):
            path_for("h", routes)

    def test_bare_regex_on_other_branch_is_ignored(self) -> None:
        routes = Route(
            Literal("/"),
            Alternatives(
                (
                    Route(Regex("[a-z]+"), Handler("regex")),
                    Route(Literal("plain"), Handler("plain")),
                )
            ),
        )
        assert path_for("plain", routes) == "/plain"

    def test_guards_contribute_nothing(self, blog_routes: Route) -> None:
        assert path_for("create", blog_routes, user="bob") == "/blog/users/bob/articles"

    def test_disabled_branch_is_skipped(self) -> None:
        routes = Route(
            Literal("/"),
            Alternatives(
                (
                    Route(Constant(False), Nested(Route(Literal("old"), Handler("h")))),
                    Route(Literal("new"), Handler("h")),
                )
            ),
        )
        assert path_for("h", routes) == "/new"

    def test_first_route_to_handler_wins(self) -> None:
        routes = Route(
            Literal("/"),
            Alternatives(
                (
                    Route(Literal("first"), Handler("h")),
                    Route(Literal("second"), Handler("h")),
                )
            ),
        )
        assert path_for("h", routes) == "/first"

    def test_function_handler_ids(self) -> None:
        def show() -> None: ...

        def other() -> None: ...

        routes = Route(
            Literal("/"),
            Alternatives((Route(Literal("other"), Handler(other)), Route(Literal("show"), Handler(show)))),
        )
        assert path_for(show, routes) == "/show"

    def test_errors_share_a_base(self) -> None:
        for error in (
            MissingParameterError,
            IncompatibleParameterError,
            UninvertiblePatternError,
            NoRouteForHandlerError,
        ):
            assert issubclass(error, PathGenerationError)
            assert issubclass(error, RouteError)


class TestRoundTrip:
    @pytest.mark.parametrize(
        ("handler", "params"),
        [
            ("index", {}),
            ("article", {"id": "123"}),
            ("article", {"id": "a-b_c"}),
            ("article", {"id": "nested/part"}),
            ("article", {"id": "line\none"}),
        ],
    )
    def test_article_routes(self, article_routes: Route, handler: str, params: dict[str, str]) -> None:
        path = path_for(handler, article_routes, params)
        assert match_route(path, article_routes) == RouteMatch(handler, params)

    @pytest.mark.parametrize(
        ("handler", "params"),
        [
            ("blog-index", {}),
            ("show", {"user": "alice", "article": "42"}),
        ],
    )
    def test_blog_routes(self, blog_routes: Route, handler: str, params: dict[str, str]) -> None:
        path = path_for(handler, blog_routes, params)
        assert match_route(path, blog_routes) == RouteMatch(handler, params)

    def test_keyed_literal(self) -> None:
        routes = Route(
            Segments((Literal("/"), Keyed(Literal("en"), "lang"), Literal("/home"))),
            Handler("home"),
        )
        path = path_for("home", routes, lang="en")
        assert path == "/en/home"
        assert match_route(path, routes) == RouteMatch("home", {"lang": "en"})


class TestConcurrency:
    def test_shared_tree_across_threads(self, blog_routes: Route) -> None:
        paths = [f"/blog/users/u{i}/articles/{i}.html" for i in range(200)]

        def roundtrip(path: str) -> str:
            result = match_route(path, blog_routes)
            assert result is not None
            return path_for(result.handler, blog_routes, result.params)

        with ThreadPoolExecutor(max_workers=8) as pool:
            assert list(pool.map(roundtrip, paths)) == paths
