"""Response boundary: resolve a template against a context and stream it.

This is the single entry point the routing layer uses::

    response = await html_responder(ctx, handler_result)
    for chunk in response:
        send(chunk)

Rules:
    - non-template results are wrapped as escaped HTML text
    - a ``DangerJsonInHtml`` root is replaced by a visible warning
    - a ``JsonString`` root is streamed verbatim as ``application/json``
    - everything else is wrapped in the HTML document skeleton

The whole tree is resolved before the ``Response`` exists, so a failing
deferred propagates out of ``html_responder`` and no chunk is ever produced
for it.

"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping
from typing import Any

from tagweave.environment.exceptions import StreamConsumedError
from tagweave.environment.fragments import DANGERJSON_ROOT_WARNING
from tagweave.environment.settings import DocumentConfig, pick_head, pick_reloader
from tagweave.render_context import RequestContext
from tagweave.template.core import BasedHtml, DangerJsonInHtml, JsonString, TemplateString
from tagweave.template.flatten import iter_chunks
from tagweave.template.resolver import resolve
from tagweave.template.tags import html
from tagweave.utils.constants import HTML_CONTENT_TYPE, JSON_CONTENT_TYPE

logger = logging.getLogger(__name__)

_DOCUMENT_PARTS = (
    "<!DOCTYPE html>\n<html>\n<head>\n",
    " ",
    "\n</head>\n<body>\n",
    "\n</body>\n</html>\n",
)


class Response:
    """Status, headers and a lazy, single-pass body of text chunks.

    Iterating the response drains the body; a second iteration raises
    ``StreamConsumedError``.

    Example:
        >>> response = await html_responder(ctx, page)
        >>> response.headers["Content-Type"]
        'text/html; charset=utf-8'
        >>> body = response.text()
    """

    __slots__ = ("_body", "_consumed", "headers", "status")

    def __init__(
        self,
        body: Iterable[str] = (),
        *,
        status: int = 200,
        headers: Mapping[str, str] | None = None,
    ):
        self._body = body
        self._consumed = False
        self.status = status
        self.headers: dict[str, str] = dict(headers or {})

    @classmethod
    def redirect(cls, url: str, status: int = 302) -> Response:
        """Build an empty redirect response."""
        return cls(status=status, headers={"Location": url})

    @property
    def consumed(self) -> bool:
        return self._consumed

    def __iter__(self) -> Iterator[str]:
        if self._consumed:
            raise StreamConsumedError("Response body has already been consumed")
        self._consumed = True
        return iter(self._body)

    def text(self) -> str:
        """Drain the body into one string."""
        return "".join(self)

    def __repr__(self) -> str:
        return f"<Response status={self.status} headers={self.headers!r}>"


def merge_headers(*layers: Mapping[str, str] | None) -> dict[str, str]:
    """Merge header mappings left to right; names compare case-insensitively."""
    merged: dict[str, str] = {}
    for layer in layers:
        if not layer:
            continue
        for name, value in layer.items():
            for existing in [k for k in merged if k.lower() == name.lower()]:
                del merged[existing]
            merged[name] = value
    return merged


def _response_headers(ctx: RequestContext, config: DocumentConfig | None) -> dict[str, str]:
    state = ctx.state
    if state.replace_headers:
        return dict(state.headers)
    return merge_headers(
        {"Content-Type": HTML_CONTENT_TYPE},
        config.headers if config is not None else None,
        state.headers,
    )


async def html_responder(
    ctx: RequestContext,
    value: Any,
    *,
    head: Any = None,
    config: DocumentConfig | None = None,
) -> Response:
    """Resolve ``value`` against ``ctx`` and build a streaming response.

    Args:
        ctx: The request context (its side channels decide head, headers,
            status and redirects)
        value: Handler result: a template, a string, or None
        head: Explicit handler-level head; defaults to ``ctx.state.head``
        config: Per-request document defaults

    Returns:
        A Response whose body yields one chunk per non-empty leaf.

    Raises:
        DeferredError: If any deferred node fails during resolution.
    """
    if not isinstance(value, (TemplateString, BasedHtml)):
        value = html(("", ""), "" if value is None else str(value))

    if isinstance(value, DangerJsonInHtml):
        logger.warning("dangerjson returned as a response; substituted warning fragment")
        value = DANGERJSON_ROOT_WARNING

    # Resolve the content first so deferred nodes may still set the head,
    # headers or a redirect before the document is assembled.
    await resolve(value, ctx)

    state = ctx.state
    if state.redirect_to is not None:
        logger.debug("Redirecting to %s", state.redirect_to)
        return Response.redirect(state.redirect_to, state.redirect_status)

    headers = _response_headers(ctx, config)
    status = state.status or 200

    if isinstance(value, JsonString):
        headers = merge_headers(headers, {"Content-Type": JSON_CONTENT_TYPE})
        return Response(iter_chunks(value), status=status, headers=headers)

    chosen_head = pick_head(head if head is not None else state.head, config)
    reloader = pick_reloader(config)
    document = html(_DOCUMENT_PARTS, reloader, chosen_head, value)
    await resolve(document, ctx)

    logger.debug("Streaming HTML document (status=%d)", status)
    return Response(iter_chunks(document), status=status, headers=headers)


def is_error(result: Any) -> bool:
    """True if ``result`` is a mapping whose ``"error"`` entry is an HtmlString."""
    from tagweave.template.core import HtmlString

    return isinstance(result, Mapping) and isinstance(result.get("error"), HtmlString)
