"""Tests for waypoint.routing.router — registration and first-match dispatch."""

import logging

import pytest
import re2

from waypoint.config import RouterConfig
from waypoint.context import Context
from waypoint.errors import ConfigurationError, RouteNotFound, RouterFrozenError
from waypoint.http.request import Request
from waypoint.http.response import Response
from waypoint.routing.router import Router


def _noop(ctx: Context) -> None:
    pass


def _other(ctx: Context) -> None:
    pass


class TestRegistration:
    def test_method_helpers(self) -> None:
        router = Router()
        for name in ("get", "post", "put", "delete", "patch", "head", "options"):
            getattr(router, name)("/x", _noop)
        assert sorted(r.method for r in router.routes) == sorted(
            ["GET", "POST", "PUT", "DELETE", "PATCH", "HEAD", "OPTIONS"]
        )

    def test_add_route_normalizes_method(self) -> None:
        router = Router()
        route = router.add_route("get", "/x", _noop)
        assert route.method == "GET"

    def test_unknown_method_rejected(self) -> None:
        router = Router()
        with pytest.raises(ConfigurationError, match="BREW"):
            router.add_route("BREW", "/coffee", _noop)

    def test_non_callable_handler_rejected(self) -> None:
        router = Router()
        with pytest.raises(ConfigurationError, match="not callable"):
            router.get("/x", "nope")  # type: ignore[arg-type]

    def test_handler_arity_checked(self) -> None:
        router = Router()
        with pytest.raises(ConfigurationError, match="expected"):
            router.get("/x", lambda: None)
        with pytest.raises(ConfigurationError):
            router.get("/x", lambda a, b, c: None)

    def test_handler_forms_detected(self) -> None:
        router = Router()
        ctx_route = router.get("/a", lambda ctx: None)
        pair_route = router.get("/b", lambda req, res: None)
        assert ctx_route.takes_context is True
        assert pair_route.takes_context is False

    def test_non_callable_route_middleware_rejected(self) -> None:
        router = Router()
        with pytest.raises(ConfigurationError):
            router.get("/x", _noop, [42])  # type: ignore[list-item]

    def test_compile_error_surfaces_at_registration(self) -> None:
        router = Router()
        with pytest.raises(ConfigurationError):
            router.get("/users/:id([0-9)", _noop)
        assert router.routes == []

    def test_duplicate_params_follow_config(self) -> None:
        with pytest.raises(ConfigurationError):
            Router().get("/a/:id/:id", _noop)
        router = Router(RouterConfig(allow_duplicate_params=True))
        router.get("/a/:id/:id", _noop)
        assert router.dispatch("GET", "/a/1/2").path_params == {"id": "2"}

    def test_registration_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        router = Router()
        with caplog.at_level(logging.DEBUG, logger="waypoint.routing"):
            router.get("/users/:id", _noop)
        assert "registered GET /users/:id" in caplog.text


class TestFreeze:
    def test_registration_after_freeze_rejected(self) -> None:
        router = Router()
        router.get("/x", _noop)
        router.freeze()
        with pytest.raises(RouterFrozenError):
            router.get("/y", _noop)
        with pytest.raises(RouterFrozenError):
            router.use(lambda req, res, chain: chain.next(req, res))
        with pytest.raises(RouterFrozenError):
            router.middlewares.use(lambda req, res, chain: chain.next(req, res))

    def test_group_registration_after_freeze_rejected(self) -> None:
        router = Router()
        api = router.group("/api")
        router.freeze()
        with pytest.raises(RouterFrozenError):
            api.get("/x", _noop)
        with pytest.raises(RouterFrozenError):
            api.use(lambda req, res, chain: chain.next(req, res))

    def test_freeze_idempotent(self) -> None:
        router = Router()
        router.freeze()
        router.freeze()
        assert router.frozen is True

    def test_dispatch_works_before_freeze(self) -> None:
        router = Router()
        router.get("/x", _noop)
        assert router.dispatch("GET", "/x").route.path == "/x"


class TestDispatch:
    def test_first_match_wins(self) -> None:
        router = Router()
        numeric = router.get("/users/:id([0-9]+)", _noop)
        general = router.get("/users/:id", _other)

        match = router.dispatch("GET", "/users/42")
        assert match.route is numeric
        assert match.path_params == {"id": "42"}

        match = router.dispatch("GET", "/users/abc")
        assert match.route is general
        assert match.path_params == {"id": "abc"}

    def test_registration_order_not_specificity(self) -> None:
        router = Router()
        general = router.get("/users/:id", _noop)
        router.get("/users/me", _other)
        assert router.dispatch("GET", "/users/me").route is general

    def test_regex_anchored_on_whole_segment(self) -> None:
        router = Router()
        router.get("/users/:id([0-9]+)", _noop)
        assert router.dispatch("GET", "/users/12345").path_params == {"id": "12345"}
        for path in ("/users/12a", "/users/a12"):
            with pytest.raises(RouteNotFound):
                router.dispatch("GET", path)

    def test_segment_count_exact(self) -> None:
        router = Router()
        router.get("/a/:x", _noop)
        for path in ("/a", "/a/b/c"):
            with pytest.raises(RouteNotFound):
                router.dispatch("GET", path)

    def test_method_partitioned(self) -> None:
        router = Router()
        router.post("/users", _noop)
        with pytest.raises(RouteNotFound) as exc_info:
            router.dispatch("GET", "/users")
        assert exc_info.value.status == 404
        assert exc_info.value.method == "GET"
        assert exc_info.value.path == "/users"

    def test_method_case_insensitive(self) -> None:
        router = Router()
        router.get("/x", _noop)
        assert router.dispatch("get", "/x").route.method == "GET"

    def test_empty_segments_ignored(self) -> None:
        router = Router()
        router.get("/users/list", _noop)
        assert router.dispatch("GET", "//users//list/").path_params == {}

    def test_query_string_ignored(self) -> None:
        router = Router()
        router.get("/search/:term", _noop)
        assert router.dispatch("GET", "/search/cats?page=2").path_params == {"term": "cats"}

    def test_root_route(self) -> None:
        router = Router()
        router.get("/", _noop)
        assert router.dispatch("GET", "/").route.path == "/"

    def test_nested_params_scenario(self) -> None:
        router = Router()
        router.get("/users/:id([0-9]+)", _noop)
        router.get("/users/:id([0-9]+)/posts/:postId([0-9]+)", _other)

        assert router.dispatch("GET", "/users/7").path_params == {"id": "7"}
        assert router.dispatch("GET", "/users/7/posts/3").path_params == {"id": "7", "postId": "3"}
        with pytest.raises(RouteNotFound):
            router.dispatch("GET", "/users/7/posts/x")

    def test_dispatch_is_repeatable(self) -> None:
        router = Router()
        router.get("/users/:id([0-9]+)", _noop)
        router.get("/users/:id", _other)

        first = router.dispatch("GET", "/users/42")
        second = router.dispatch("GET", "/users/42")
        assert first.route is second.route
        assert first.path_params == second.path_params == {"id": "42"}
        assert first.path_params is not second.path_params
        assert [r.handler for r in router.routes] == [_noop, _other]

    def test_regex_engine_failure_skips_route(self, caplog: pytest.LogCaptureFixture) -> None:
        router = Router()
        broken = router.get("/users/:id([0-9]+)", _noop)
        fallback = router.get("/users/:id", _other)

        class BrokenPattern:
            def fullmatch(self, value: str) -> None:
                raise re2.error("engine failure")

        object.__setattr__(broken.segments[1].matcher, "_compiled", BrokenPattern())
        with caplog.at_level(logging.WARNING, logger="waypoint.routing"):
            match = router.dispatch("GET", "/users/1")
        assert match.route is fallback
        assert "regex failure" in caplog.text


class TestHandle:
    def test_context_handler(self) -> None:
        router = Router()
        router.get("/users/:id([0-9]+)", lambda ctx: ctx.json({"id": ctx.param("id")}))
        response = router.handle(Request.build("GET", "/users/42"))
        assert response.status == 200
        assert bytes(response.body) == b'{"id":"42"}'
        assert response.headers["content-type"] == "application/json"

    def test_request_response_handler(self) -> None:
        def handler(request: Request, response: Response) -> None:
            response.text(f"hello {request.param('name')}")

        router = Router()
        router.get("/hello/:name", handler)
        response = router.handle(Request.build("GET", "/hello/ada"))
        assert bytes(response.body) == b"hello ada"

    def test_path_params_set_on_request(self) -> None:
        request = Request.build("GET", "/users/9")
        router = Router()
        router.get("/users/:id", _noop)
        router.handle(request)
        assert request.path_params == {"id": "9"}

    def test_uses_given_response(self) -> None:
        router = Router()
        router.get("/", lambda ctx: ctx.text("ok"))
        response = Response()
        assert router.handle(Request.build("GET", "/"), response) is response

    def test_context_carries_router_and_server(self) -> None:
        seen: list[Context] = []

        def handler(ctx: Context) -> None:
            seen.append(ctx)

        router = Router()
        router.get("/", handler)
        sentinel = object()
        router.handle(Request.build("GET", "/"), server=sentinel)  # type: ignore[arg-type]
        assert seen[0].router is router
        assert seen[0].server is sentinel

    def test_handler_error_propagates(self) -> None:
        def boom(ctx: Context) -> None:
            raise ValueError("broken handler")

        router = Router()
        router.get("/", boom)
        with pytest.raises(ValueError, match="broken handler"):
            router.handle(Request.build("GET", "/"))

    def test_not_found_raises_without_middleware(self) -> None:
        router = Router()
        with pytest.raises(RouteNotFound):
            router.handle(Request.build("GET", "/missing"))


class TestFormatRoutes:
    def test_empty(self) -> None:
        assert Router().format_routes() == "No routes registered"

    def test_lists_routes(self) -> None:
        router = Router()
        router.get("/users/:id([0-9]+)", _noop)
        router.post("/users", _noop, [lambda req, res, chain: chain.next(req, res)])
        table = router.format_routes()
        assert "GET" in table
        assert "/users/:id([0-9]+)" in table
        assert "param :id([0-9]+)" in table
        assert "middleware x1" in table
        assert "Total: 2 route(s)" in table
