"""Tests for waypoint.http.request."""

import io

import pytest

from waypoint.http.request import Request


class TestBuild:
    def test_parses_target(self) -> None:
        request = Request.build("get", "/search?q=cats", headers={"Cookie": "sid=1", "X-Id": "9"})
        assert request.method == "GET"
        assert request.uri == "/search?q=cats"
        assert request.path == "/search"
        assert request.query == {"q": "cats"}
        assert request.cookies == {"sid": "1"}
        assert request.header("x-id") == "9"
        assert request.path_params == {}
        assert request.state == {}

    def test_empty_path_is_root(self) -> None:
        assert Request.build("GET", "?x=1").path == "/"

    def test_accessors(self) -> None:
        request = Request.build("POST", "/p?a=1", headers={"Content-Type": "application/json"}, body=b'{"n": 2}')
        request.path_params = {"id": "5"}
        assert request.param("id") == "5"
        assert request.param("nope") is None
        assert request.query_param("a") == "1"
        assert request.content_type == "application/json"
        assert request.text() == '{"n": 2}'
        assert request.json() == {"n": 2}

    def test_state_is_per_request(self) -> None:
        a = Request.build("GET", "/")
        b = Request.build("GET", "/")
        a.state["k"] = 1
        assert b.state == {}


class TestFromWSGI:
    @pytest.fixture
    def environ(self) -> dict:
        body = b"hello"
        return {
            "REQUEST_METHOD": "POST",
            "PATH_INFO": "/caf\xc3\xa9",
            "QUERY_STRING": "x=1",
            "CONTENT_TYPE": "text/plain",
            "CONTENT_LENGTH": str(len(body)),
            "HTTP_USER_AGENT": "pytest",
            "HTTP_X_FORWARDED_FOR": "10.0.0.1",
            "REMOTE_ADDR": "127.0.0.1",
            "REMOTE_PORT": "5555",
            "wsgi.input": io.BytesIO(body),
        }

    def test_from_environ(self, environ: dict) -> None:
        request = Request.from_wsgi(environ)
        assert request.method == "POST"
        assert request.path == "/café"
        assert request.uri == "/café?x=1"
        assert request.query == {"x": "1"}
        assert request.body == b"hello"
        assert request.content_type == "text/plain"
        assert request.header("user-agent") == "pytest"
        assert request.header("x-forwarded-for") == "10.0.0.1"
        assert request.client == ("127.0.0.1", 5555)

    def test_missing_path_is_root(self) -> None:
        request = Request.from_wsgi({"REQUEST_METHOD": "GET"})
        assert request.path == "/"
        assert request.body == b""
        assert request.client is None
