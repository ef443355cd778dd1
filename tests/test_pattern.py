"""Tests for waypoint.routing.pattern — route template compilation."""

import pytest

from waypoint.errors import ConfigurationError, PatternCompileError
from waypoint.routing.pattern import LiteralSegment, ParamSegment, compile_pattern, split_path


class TestCompilePattern:
    def test_literal_segments(self) -> None:
        pattern = compile_pattern("/api/v2/users")
        assert pattern.segments == (
            LiteralSegment("api"),
            LiteralSegment("v2"),
            LiteralSegment("users"),
        )
        assert pattern.has_params is False

    def test_root(self) -> None:
        assert compile_pattern("/").segments == ()

    def test_empty_tokens_discarded(self) -> None:
        assert compile_pattern("//users///list/").segments == compile_pattern("/users/list").segments

    def test_plain_param(self) -> None:
        pattern = compile_pattern("/users/:id")
        segment = pattern.segments[1]
        assert isinstance(segment, ParamSegment)
        assert segment.name == "id"
        assert segment.matcher is None
        assert segment.pattern is None

    def test_constrained_param(self) -> None:
        segment = compile_pattern("/users/:id([0-9]+)").segments[1]
        assert isinstance(segment, ParamSegment)
        assert segment.name == "id"
        assert segment.pattern == "[0-9]+"

    def test_regex_with_nested_parens(self) -> None:
        segment = compile_pattern("/files/:name((foo|bar)[0-9]*)").segments[1]
        assert segment.pattern == "(foo|bar)[0-9]*"

    def test_empty_constraint_is_unconstrained(self) -> None:
        segment = compile_pattern("/users/:id()").segments[1]
        assert segment.matcher is None

    def test_param_names(self) -> None:
        pattern = compile_pattern("/users/:id([0-9]+)/posts/:postId")
        assert pattern.param_names == ("id", "postId")

    def test_str_round_trips_template_syntax(self) -> None:
        segment = compile_pattern("/users/:id([0-9]+)").segments[1]
        assert str(segment) == ":id([0-9]+)"


class TestCompileErrors:
    def test_invalid_regex(self) -> None:
        with pytest.raises(PatternCompileError) as exc_info:
            compile_pattern("/users/:id([0-9)")
        assert exc_info.value.template == "/users/:id([0-9)"
        assert "id" in exc_info.value.reason

    def test_unsupported_regex_feature(self) -> None:
        # RE2 has no backreferences
        with pytest.raises(PatternCompileError):
            compile_pattern(r"/x/:v((a)\1)")

    def test_missing_close_paren(self) -> None:
        with pytest.raises(PatternCompileError, match="missing"):
            compile_pattern("/users/:id([0-9]+")

    def test_stray_close_paren(self) -> None:
        with pytest.raises(PatternCompileError, match="unbalanced"):
            compile_pattern("/users/:id)")

    def test_text_after_constraint(self) -> None:
        with pytest.raises(PatternCompileError, match="after"):
            compile_pattern("/users/:id([0-9]+)x")

    def test_unnamed_param(self) -> None:
        with pytest.raises(PatternCompileError, match="no name"):
            compile_pattern("/users/:([0-9]+)")

    @pytest.mark.parametrize("template", ["/a/:x)y(z)", "/a/:user-id", "/a/:1st", "/a/:na me([a-z]+)"])
    def test_param_name_must_be_identifier(self, template: str) -> None:
        with pytest.raises(PatternCompileError, match="not an identifier"):
            compile_pattern(template)

    def test_duplicate_param_names_rejected(self) -> None:
        with pytest.raises(PatternCompileError, match="duplicate"):
            compile_pattern("/a/:id/b/:id")

    def test_duplicate_param_names_allowed(self) -> None:
        pattern = compile_pattern("/a/:id/b/:id", allow_duplicate_params=True)
        assert pattern.match(["a", "1", "b", "2"]) == {"id": "2"}

    def test_is_a_configuration_error(self) -> None:
        with pytest.raises(ConfigurationError):
            compile_pattern("/users/:id([)")


class TestMatch:
    def test_literal_exact(self) -> None:
        pattern = compile_pattern("/users/list")
        assert pattern.match(["users", "list"]) == {}
        assert pattern.match(["users", "List"]) is None

    def test_segment_count_must_be_equal(self) -> None:
        pattern = compile_pattern("/a/:x")
        assert pattern.match(["a"]) is None
        assert pattern.match(["a", "b", "c"]) is None
        assert pattern.match(["a", "b"]) == {"x": "b"}

    def test_constraint_anchored(self) -> None:
        pattern = compile_pattern("/users/:id([0-9]+)")
        assert pattern.match(["users", "12345"]) == {"id": "12345"}
        assert pattern.match(["users", "12a"]) is None
        assert pattern.match(["users", "a12"]) is None

    def test_fresh_dict_per_match(self) -> None:
        pattern = compile_pattern("/users/:id")
        first = pattern.match(["users", "1"])
        second = pattern.match(["users", "1"])
        assert first == second
        assert first is not second


class TestSplitPath:
    @pytest.mark.parametrize(
        ("path", "expected"),
        [
            ("/", []),
            ("", []),
            ("/users", ["users"]),
            ("/users/", ["users"]),
            ("//users//42", ["users", "42"]),
            ("/users/42?debug=1", ["users", "42"]),
        ],
    )
    def test_split(self, path: str, expected: list[str]) -> None:
        assert split_path(path) == expected
