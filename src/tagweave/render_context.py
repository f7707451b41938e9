"""RequestContext: the per-request handbag passed to every deferred node.

A deferred callable receives the context by reference::

    html(t"<p>Hello {lambda ctx: ctx.data['name']}</p>")

Besides request data the context carries side channels that write to a
``ResponseState`` shared with the response layer: the document head,
response headers, status, and redirects.

While ``resolve()`` walks a tree the context is also published through a
``ContextVar`` so helpers deep in the call stack can reach it with
``get_request_context()`` without threading it through arguments.

Thread Safety:
    Each request builds its own context and its own template tree; neither
    is shared across tasks, so no locking is involved. ContextVars are
    task-local.

"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from contextvars import ContextVar, Token
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from tagweave.template import tags

if TYPE_CHECKING:
    from tagweave.routing import Request


@dataclass
class ResponseState:
    """Response settings written by handlers and deferred nodes.

    Attributes:
        head: Handler-level head fragment (overrides configured defaults)
        headers: Extra response headers
        replace_headers: If True, ``headers`` replaces the defaults entirely
        status: Response status override
        redirect_to: Redirect target; when set no document is rendered
        redirect_status: Status used for the redirect
    """

    head: Any = None
    headers: dict[str, str] = field(default_factory=dict)
    replace_headers: bool = False
    status: int | None = None
    redirect_to: str | None = None
    redirect_status: int = 302


@dataclass
class RequestContext:
    """Per-request state handed to handlers and deferred callables.

    Attributes:
        request: The incoming request (None outside a router)
        data: Blend data produced by ``Router.data(...)``
        route: Request path
        params: Parsed query string
        url: Full request URL
        state: Response side-channel state (shared with derived contexts)

    Example:
        >>> def page(ctx: RequestContext):
        ...     ctx.headers({"Cache-Control": "no-store"})
        ...     ctx.head(ctx.html(t"<title>Profile</title>"))
        ...     return ctx.html(t"<h1>{ctx.data.name}</h1>")
    """

    request: Request | None = None
    data: Any = None
    route: str = "/"
    params: dict[str, list[str]] = field(default_factory=dict)
    url: str = ""
    state: ResponseState = field(default_factory=ResponseState)

    # Framework metadata (CSRF tokens, HTMX flags, ...)
    _meta: dict[str, object] = field(default_factory=dict)

    html = staticmethod(tags.html)
    css = staticmethod(tags.css)
    json = staticmethod(tags.json)
    dangerjson = staticmethod(tags.dangerjson)
    deliver = staticmethod(tags.deliver)

    def head(self, fragment: Any) -> None:
        """Set the document head for this response.

        Accepts an ``HtmlString``, a ``BasedHtml`` or a deferred callable.
        Overrides both the per-request config and the process-wide default.
        """
        self.state.head = fragment

    def headers(self, headers: Mapping[str, str], overwrite: bool = False) -> None:
        """Add response headers, or replace all headers if ``overwrite``."""
        if overwrite:
            self.state.headers = dict(headers)
            self.state.replace_headers = True
        else:
            self.state.headers.update(headers)

    def options(self, *, status: int | None = None, headers: Mapping[str, str] | None = None) -> None:
        """Replace the response status and/or the full header set."""
        if status is not None:
            self.state.status = status
        if headers is not None:
            self.headers(headers, overwrite=True)

    def redirect(self, url: str, status: int = 302) -> None:
        """Answer with a redirect instead of rendering the handler's result."""
        self.state.redirect_to = url
        self.state.redirect_status = status

    def with_data(self, data: Any) -> RequestContext:
        """Create a derived context carrying ``data``.

        Shares ``state`` and metadata with this context, so side channels
        used by the derived context affect the same response.
        """
        return RequestContext(
            request=self.request,
            data=data,
            route=self.route,
            params=self.params,
            url=self.url,
            state=self.state,
            _meta=self._meta,
        )

    def get_meta(self, key: str, default: object = None) -> object:
        """Get framework-specific metadata."""
        return self._meta.get(key, default)

    def set_meta(self, key: str, value: object) -> None:
        """Set framework-specific metadata."""
        self._meta[key] = value


# Module-level ContextVar
_request_context: ContextVar[Any] = ContextVar("request_context", default=None)


def get_request_context() -> Any:
    """Get the context of the resolution in progress (None outside one)."""
    return _request_context.get()


def set_request_context(ctx: Any) -> Token[Any]:
    """Set the current context and return the reset token.

    Low-level; ``resolve()`` uses it around each walk.
    """
    return _request_context.set(ctx)


def reset_request_context(token: Token[Any]) -> None:
    """Reset the current context using a token from ``set_request_context``."""
    _request_context.reset(token)


@contextmanager
def request_context(ctx: Any) -> Iterator[Any]:
    """Publish ``ctx`` as the current context for the duration of the block.

    Example:
        with request_context(ctx):
            assert get_request_context() is ctx
    """
    token = _request_context.set(ctx)
    try:
        yield ctx
    finally:
        _request_context.reset(token)
