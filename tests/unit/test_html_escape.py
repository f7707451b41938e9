"""Tests for the HTML and JSON escapers."""

from __future__ import annotations

import json as stdlib_json

import pytest

from tagweave.utils.html import html_escape, json_escape, script_json_escape


class TestHtmlEscape:
    """html_escape() replaces the five HTML-special characters."""

    def test_escapes_markup(self) -> None:
        assert html_escape("<b>Tom & Jerry</b>") == "&lt;b&gt;Tom &amp; Jerry&lt;/b&gt;"

    def test_escapes_quotes(self) -> None:
        assert html_escape("\"'") == "&quot;&#39;"

    def test_none_is_empty(self) -> None:
        assert html_escape(None) == ""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [(42, "42"), (1.5, "1.5"), (False, "False"), (True, "True")],
    )
    def test_scalars_use_str(self, value: object, expected: str) -> None:
        assert html_escape(value) == expected

    def test_plain_text_unchanged(self) -> None:
        text = "Hello World no special chars here at all"
        assert html_escape(text) is text

    def test_ampersand_escaped_once(self) -> None:
        assert html_escape("&amp;") == "&amp;amp;"

    def test_objects_use_str(self) -> None:
        class Thing:
            def __str__(self) -> str:
                return "<thing>"

        assert html_escape(Thing()) == "&lt;thing&gt;"


class TestJsonEscape:
    """json_escape() follows JSON.stringify semantics."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (42, "42"),
            (1.5, "1.5"),
            (True, "true"),
            (None, "null"),
            ("hi", '"hi"'),
            ('say "hi"', '"say \\"hi\\""'),
            ("line\nbreak", '"line\\nbreak"'),
            ("é", '"é"'),
        ],
    )
    def test_scalars(self, value: object, expected: str) -> None:
        assert json_escape(value) == expected

    def test_containers_are_compact(self) -> None:
        assert json_escape({"a": [1, 2], "b": None}) == '{"a":[1,2],"b":null}'

    def test_non_finite_floats_become_null(self) -> None:
        assert json_escape(float("nan")) == "null"
        assert json_escape([1, float("inf")]) == "[1,null]"
        assert json_escape({"x": float("-inf")}) == '{"x":null}'

    def test_unknown_objects_use_str(self) -> None:
        class Thing:
            def __str__(self) -> str:
                return "thing"

        assert json_escape(Thing()) == '"thing"'
        assert json_escape({"t": Thing()}) == '{"t":"thing"}'

    def test_circular_container_does_not_raise(self) -> None:
        loop: list[object] = []
        loop.append(loop)
        result = json_escape(loop)
        assert result.startswith('"')
        assert result.endswith('"')

    def test_html_is_not_escaped(self) -> None:
        assert json_escape("</script>") == '"</script>"'

    def test_non_scalar_keys_use_str(self) -> None:
        assert json_escape({(1, 2): "x"}) == '{"(1, 2)":"x"}'
        assert json_escape({"a": {frozenset(): 1}}) == '{"a":{"frozenset()":1}}'

    def test_non_finite_keys_use_str(self) -> None:
        assert json_escape({float("nan"): 1}) == '{"nan":1}'

    def test_deep_nesting_does_not_raise(self) -> None:
        deep: list[object] = []
        for _ in range(5000):
            deep = [deep]
        result = json_escape(deep)
        assert result.startswith('"')
        assert result.endswith('"')


class TestScriptJsonEscape:
    """script_json_escape() keeps JSON text inert inside <script>."""

    def test_closing_tag_escaped(self) -> None:
        text = script_json_escape(json_escape("</script><script>alert(1)</script>"))
        assert "<" not in text
        assert ">" not in text
        assert text == '"\\u003c/script\\u003e\\u003cscript\\u003ealert(1)\\u003c/script\\u003e"'

    def test_ampersand_escaped(self) -> None:
        assert script_json_escape('"a&b"') == '"a\\u0026b"'

    def test_parses_back(self) -> None:
        value = {"html": "<b>&</b>", "n": [1, 2]}
        assert stdlib_json.loads(script_json_escape(json_escape(value))) == value
