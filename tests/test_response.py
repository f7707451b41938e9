"""Tests for the response boundary (html_responder and Response)."""

from __future__ import annotations

import logging

import pytest

from tagweave import (
    INITIAL_HEAD,
    STANDARD_DEV_RELOADER,
    DeferredError,
    DocumentConfig,
    RequestContext,
    Response,
    StreamConsumedError,
    TemplateValueError,
    based_html,
    dangerjson,
    get_default_head,
    html,
    html_responder,
    is_error,
    json,
    set_default_head,
    set_reloader,
)
from tagweave.environment.fragments import DANGERJSON_ROOT_WARNING
from tagweave.response import merge_headers
from tagweave.utils.constants import HTML_CONTENT_TYPE, JSON_CONTENT_TYPE

# ---------------------------------------------------------------------------
# Document skeleton
# ---------------------------------------------------------------------------


class TestHtmlDocument:
    """HTML results are wrapped in the document skeleton."""

    @pytest.mark.asyncio
    async def test_wraps_content(self, ctx: RequestContext) -> None:
        response = await html_responder(ctx, html(("<h1>", "</h1>"), "<b>x</b>"))
        body = response.text()

        assert response.status == 200
        assert response.headers == {"Content-Type": HTML_CONTENT_TYPE}
        assert body.startswith("<!DOCTYPE html>")
        assert "<h1>&lt;b&gt;x&lt;/b&gt;</h1>" in body
        assert body.index("<head>") < body.index("</head>") < body.index("<body>")
        assert body.rstrip().endswith("</html>")

    @pytest.mark.asyncio
    async def test_default_head(self, ctx: RequestContext) -> None:
        body = (await html_responder(ctx, html("<p>x</p>"))).text()
        assert INITIAL_HEAD in body
        assert "<title>tagweave</title>" in body

    @pytest.mark.asyncio
    async def test_deferred_content(self, ctx: RequestContext) -> None:
        page = html(("<p>", "</p>"), lambda c: c.data["name"])
        body = (await html_responder(ctx, page)).text()
        assert "<p>Ada</p>" in body

    @pytest.mark.asyncio
    async def test_plain_string_is_escaped(self, ctx: RequestContext) -> None:
        body = (await html_responder(ctx, "<b>")).text()
        assert "&lt;b&gt;" in body
        assert "<b>" not in body

    @pytest.mark.asyncio
    async def test_none_is_empty_body(self, ctx: RequestContext) -> None:
        body = (await html_responder(ctx, None)).text()
        assert "<body>\n\n</body>" in body

    @pytest.mark.asyncio
    async def test_based_html_content(self, ctx: RequestContext) -> None:
        body = (await html_responder(ctx, based_html("<hr>"))).text()
        assert "<body>\n<hr>\n</body>" in body

    @pytest.mark.asyncio
    async def test_dangerjson_root_replaced(
        self, ctx: RequestContext, caplog: pytest.LogCaptureFixture
    ) -> None:
        with caplog.at_level(logging.WARNING, logger="tagweave"):
            response = await html_responder(ctx, dangerjson(("", ""), {"a": 1}))
        body = response.text()
        assert DANGERJSON_ROOT_WARNING in body
        assert '{"a":1}' not in body
        assert response.headers["Content-Type"] == HTML_CONTENT_TYPE
        assert caplog.records


# ---------------------------------------------------------------------------
# JSON responses
# ---------------------------------------------------------------------------


class TestJsonResponse:
    """A JSON root is streamed verbatim with the JSON content type."""

    @pytest.mark.asyncio
    async def test_json_body(self, ctx: RequestContext) -> None:
        response = await html_responder(ctx, json(('{"name":', "}"), lambda c: c.data["name"]))
        assert response.text() == '{"name":"Ada"}'
        assert response.headers["Content-Type"] == JSON_CONTENT_TYPE

    @pytest.mark.asyncio
    async def test_json_content_type_wins_over_handler(self, ctx: RequestContext) -> None:
        ctx.headers({"content-type": "text/plain", "X-Extra": "1"})
        response = await html_responder(ctx, json("[]"))
        assert response.headers == {"X-Extra": "1", "Content-Type": JSON_CONTENT_TYPE}


# ---------------------------------------------------------------------------
# Head precedence
# ---------------------------------------------------------------------------


class TestHead:
    """handler head > config head > process-wide default."""

    @pytest.mark.asyncio
    async def test_handler_head(self, ctx: RequestContext) -> None:
        ctx.head(based_html("<title>mine</title>"))
        config = DocumentConfig(head=based_html("<title>config</title>"))
        body = (await html_responder(ctx, html("x"), config=config)).text()
        assert "<title>mine</title>" in body
        assert "<title>config</title>" not in body
        assert INITIAL_HEAD not in body

    @pytest.mark.asyncio
    async def test_explicit_head_argument(self, ctx: RequestContext) -> None:
        body = (await html_responder(ctx, html("x"), head=html("<title>arg</title>"))).text()
        assert "<title>arg</title>" in body

    @pytest.mark.asyncio
    async def test_config_head(self, ctx: RequestContext) -> None:
        config = DocumentConfig(head=based_html("<title>config</title>"))
        body = (await html_responder(ctx, html("x"), config=config)).text()
        assert "<title>config</title>" in body
        assert INITIAL_HEAD not in body

    @pytest.mark.asyncio
    async def test_process_default_head(self, ctx: RequestContext) -> None:
        set_default_head(based_html("<title>site</title>"))
        body = (await html_responder(ctx, html("x"))).text()
        assert "<title>site</title>" in body

    @pytest.mark.asyncio
    async def test_deferred_head(self, ctx: RequestContext) -> None:
        ctx.head(lambda c: html(("<title>", "</title>"), c.data["name"]))
        body = (await html_responder(ctx, html("x"))).text()
        assert "<title>Ada</title>" in body

    @pytest.mark.asyncio
    async def test_head_set_during_resolution(self, ctx: RequestContext) -> None:
        def content(c: RequestContext) -> str:
            c.head(based_html("<title>late</title>"))
            return "body"

        body = (await html_responder(ctx, html(("<p>", "</p>"), content))).text()
        assert "<title>late</title>" in body
        assert "<p>body</p>" in body

    def test_unresolved_default_head_rejected(self) -> None:
        with pytest.raises(TemplateValueError):
            set_default_head(html(("", ""), lambda c: 1))
        assert get_default_head() is INITIAL_HEAD

    def test_resolved_and_callable_default_head_accepted(self) -> None:
        set_default_head(html("<title>ok</title>"))
        set_default_head(lambda c: html("<title>ok</title>"))
        assert callable(get_default_head())


# ---------------------------------------------------------------------------
# Reloader
# ---------------------------------------------------------------------------


class TestReloader:
    """The live-reload fragment is injected first in <head>."""

    @pytest.mark.asyncio
    async def test_absent_by_default(self, ctx: RequestContext) -> None:
        body = (await html_responder(ctx, html("x"))).text()
        assert "WebSocket" not in body

    @pytest.mark.asyncio
    async def test_process_reloader(self, ctx: RequestContext) -> None:
        set_reloader(STANDARD_DEV_RELOADER)
        body = (await html_responder(ctx, html("x"))).text()
        assert body.index(STANDARD_DEV_RELOADER) < body.index("<title>")

    @pytest.mark.asyncio
    async def test_config_reloader(self, ctx: RequestContext) -> None:
        config = DocumentConfig(reloader=based_html("<script>reload()</script>"))
        body = (await html_responder(ctx, html("x"), config=config)).text()
        assert "<script>reload()</script>" in body


# ---------------------------------------------------------------------------
# Headers, status, redirects
# ---------------------------------------------------------------------------


class TestResponseOptions:
    """Side channels on the context shape the response."""

    @pytest.mark.asyncio
    async def test_extra_headers_merged(self, ctx: RequestContext) -> None:
        ctx.headers({"Cache-Control": "no-store"})
        response = await html_responder(ctx, html("x"))
        assert response.headers == {
            "Content-Type": HTML_CONTENT_TYPE,
            "Cache-Control": "no-store",
        }

    @pytest.mark.asyncio
    async def test_headers_overwrite(self, ctx: RequestContext) -> None:
        ctx.headers({"X-Only": "1"}, overwrite=True)
        response = await html_responder(ctx, html("x"))
        assert response.headers == {"X-Only": "1"}

    @pytest.mark.asyncio
    async def test_header_names_case_insensitive(self, ctx: RequestContext) -> None:
        ctx.headers({"content-type": "text/plain"})
        response = await html_responder(ctx, html("x"))
        assert response.headers == {"content-type": "text/plain"}

    @pytest.mark.asyncio
    async def test_config_headers(self, ctx: RequestContext) -> None:
        config = DocumentConfig(headers={"X-Frame-Options": "DENY"})
        response = await html_responder(ctx, html("x"), config=config)
        assert response.headers["X-Frame-Options"] == "DENY"

    @pytest.mark.asyncio
    async def test_status(self, ctx: RequestContext) -> None:
        ctx.options(status=201)
        response = await html_responder(ctx, html("x"))
        assert response.status == 201

    @pytest.mark.asyncio
    async def test_headers_set_during_resolution(self, ctx: RequestContext) -> None:
        def content(c: RequestContext) -> str:
            c.headers({"X-Late": "yes"})
            return "x"

        response = await html_responder(ctx, html(("", ""), content))
        assert response.headers["X-Late"] == "yes"

    @pytest.mark.asyncio
    async def test_redirect_during_resolution(self, ctx: RequestContext) -> None:
        def content(c: RequestContext) -> str:
            c.redirect("/login", 303)
            return "x"

        response = await html_responder(ctx, html(("", ""), content))
        assert response.status == 303
        assert response.headers == {"Location": "/login"}
        assert response.text() == ""

    @pytest.mark.asyncio
    async def test_failure_propagates(self, ctx: RequestContext) -> None:
        with pytest.raises(DeferredError):
            await html_responder(ctx, html(("", ""), lambda c: 1 / 0))


# ---------------------------------------------------------------------------
# Response object
# ---------------------------------------------------------------------------


class TestResponse:
    """Response bodies are lazy and single-pass."""

    @pytest.mark.asyncio
    async def test_chunks(self, ctx: RequestContext) -> None:
        response = await html_responder(ctx, json(("[", "]"), 1))
        assert list(response) == ["[", "1", "]"]

    def test_single_pass(self) -> None:
        response = Response(iter(["a", "b"]))
        assert response.consumed is False
        assert response.text() == "ab"
        assert response.consumed is True
        with pytest.raises(StreamConsumedError):
            list(response)

    def test_redirect(self) -> None:
        response = Response.redirect("/next")
        assert response.status == 302
        assert response.headers == {"Location": "/next"}

    def test_repr(self) -> None:
        assert repr(Response(status=404)) == "<Response status=404 headers={}>"


class TestHelpers:
    """merge_headers() and is_error()."""

    def test_merge_headers_later_wins(self) -> None:
        merged = merge_headers({"Content-Type": "a", "X": "1"}, None, {"content-type": "b"})
        assert merged == {"X": "1", "content-type": "b"}

    def test_is_error(self) -> None:
        assert is_error({"error": html("<p>bad</p>")}) is True
        assert is_error({"error": "bad"}) is False
        assert is_error(None) is False
        assert is_error(html("x")) is False
