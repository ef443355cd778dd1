"""Tests for waypoint.middleware.cors."""

from waypoint.http.request import Request
from waypoint.middleware.cors import CORSConfig, CORSMiddleware
from waypoint.routing.router import Router


def _router(config: CORSConfig | None = None) -> tuple[Router, list[str]]:
    calls: list[str] = []
    router = Router()
    router.use(CORSMiddleware(config))
    router.get("/data", lambda ctx: (calls.append("GET"), ctx.json({"ok": True})))
    router.options("/data", lambda ctx: calls.append("OPTIONS"))
    return router, calls


class TestCORS:
    def test_defaults_on_simple_request(self) -> None:
        router, calls = _router()
        response = router.handle(Request.build("GET", "/data", headers={"Origin": "https://a.test"}))
        assert calls == ["GET"]
        assert response.headers["access-control-allow-origin"] == "*"
        assert response.headers["access-control-allow-methods"] == "GET, POST, PUT, DELETE, OPTIONS"
        assert response.headers["access-control-allow-headers"] == "Content-Type, Authorization"
        assert "access-control-allow-credentials" not in response.headers
        assert "access-control-max-age" not in response.headers

    def test_preflight_short_circuits(self) -> None:
        router, calls = _router(CORSConfig(max_age=600))
        response = router.handle(Request.build("OPTIONS", "/data", headers={"Origin": "https://a.test"}))
        assert calls == []
        assert response.status == 204
        assert bytes(response.body) == b""
        assert response.headers["access-control-max-age"] == "600"

    def test_preflight_for_unrouted_path(self) -> None:
        router, _ = _router()
        response = router.handle(Request.build("OPTIONS", "/elsewhere"))
        assert response.status == 204

    def test_explicit_origin_list(self) -> None:
        router, _ = _router(CORSConfig(allow_origins=("https://good.test",)))
        good = router.handle(Request.build("GET", "/data", headers={"Origin": "https://good.test"}))
        assert good.headers["access-control-allow-origin"] == "https://good.test"
        assert good.headers["vary"] == "Origin"

        bad = router.handle(Request.build("GET", "/data", headers={"Origin": "https://evil.test"}))
        assert "access-control-allow-origin" not in bad.headers
        assert bad.status == 200

    def test_credentials_echo_origin_instead_of_wildcard(self) -> None:
        router, _ = _router(CORSConfig(allow_credentials=True))
        response = router.handle(Request.build("GET", "/data", headers={"Origin": "https://a.test"}))
        assert response.headers["access-control-allow-origin"] == "https://a.test"
        assert response.headers["access-control-allow-credentials"] == "true"

    def test_custom_methods_and_headers(self) -> None:
        router, _ = _router(CORSConfig(allow_methods=("GET",), allow_headers=("X-Token",)))
        response = router.handle(Request.build("GET", "/data"))
        assert response.headers["access-control-allow-methods"] == "GET"
        assert response.headers["access-control-allow-headers"] == "X-Token"
