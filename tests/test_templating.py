"""Tests for path template rendering and URL joining."""

from __future__ import annotations

import pytest

from fetchkit.exceptions import TemplateError
from fetchkit.templating import compile_template, join_url, placeholders


class TestCompileTemplate:
    def test_substitutes_named_segment(self) -> None:
        assert compile_template("/users/:id")({"id": "42"}) == "/users/42"

    def test_substitutes_brace_segment(self) -> None:
        assert compile_template("/users/{id}/posts")({"id": 7}) == "/users/7/posts"

    def test_multiple_segments(self) -> None:
        render = compile_template("/users/:userId/posts/:postId")
        assert render({"userId": "a", "postId": "b"}) == "/users/a/posts/b"

    def test_missing_required_raises(self) -> None:
        with pytest.raises(TemplateError, match="'id'") as exc_info:
            compile_template("/users/:id")({})
        assert "/users/:id" in str(exc_info.value)
        assert exc_info.value.exit_code == 3

    def test_none_params_with_placeholder_raises(self) -> None:
        with pytest.raises(TemplateError):
            compile_template("/users/:id")(None)

    def test_no_placeholders_ignores_params(self) -> None:
        assert compile_template("/users")(None) == "/users"
        assert compile_template("/users")({"id": "1"}) == "/users"

    def test_optional_segment_dropped(self) -> None:
        render = compile_template("/pets/:petId/photos/:photoId?")
        assert render({"petId": "1"}) == "/pets/1/photos"
        assert render({"petId": "1", "photoId": "9"}) == "/pets/1/photos/9"

    def test_empty_required_raises(self) -> None:
        with pytest.raises(TemplateError, match="Empty path parameter 'id'"):
            compile_template("/users/:id")({"id": ""})

    def test_empty_optional_segment_dropped(self) -> None:
        render = compile_template("/pets/:petId/photos/:photoId?")
        assert render({"petId": "1", "photoId": ""}) == "/pets/1/photos"

    def test_values_are_percent_encoded(self) -> None:
        render = compile_template("/files/:name")
        assert render({"name": "a b/c"}) == "/files/a%20b%2Fc"

    def test_literal_text_untouched(self) -> None:
        render = compile_template("/v1.0/items/:id.json")
        assert render({"id": "5"}) == "/v1.0/items/5.json"

    def test_compiled_once_per_pattern(self) -> None:
        assert compile_template("/cached/:id") is compile_template("/cached/:id")


class TestPlaceholders:
    def test_lists_names_in_order(self) -> None:
        assert placeholders("/a/:x/b/{y}/:z?") == ["x", "y", "z?"]

    def test_empty_for_static_path(self) -> None:
        assert placeholders("/health") == []


class TestJoinUrl:
    @pytest.mark.parametrize(
        ("base", "path", "expected"),
        [
            ("https://api.example.com", "/users", "https://api.example.com/users"),
            ("https://api.example.com/", "/users", "https://api.example.com/users"),
            ("https://api.example.com/v1", "users", "https://api.example.com/v1/users"),
            ("https://api.example.com", "", "https://api.example.com"),
            ("", "/users", "/users"),
        ],
    )
    def test_joins_with_single_slash(self, base: str, path: str, expected: str) -> None:
        assert join_url(base, path) == expected

    def test_absolute_path_wins(self) -> None:
        assert join_url("https://a.example.com", "https://b.example.com/x") == "https://b.example.com/x"

    def test_protocol_relative_path_wins(self) -> None:
        assert join_url("https://a.example.com", "//cdn.example.com/x") == "//cdn.example.com/x"
