"""Tagweave: context-aware HTML/JSON templates with deferred, per-request resolution.

Templates are built from tagged template strings (PEP 750 t-strings) or from
an explicit ``(strings, *values)`` call. Every interpolated value is
classified once at construction: plain values are escaped for the context,
nested templates compose without re-escaping, and callables are deferred
until a request context exists.

Quickstart:
    >>> from tagweave import html, render
    >>> render(html(t"<h1>{'<b>x</b>'}</h1>"))
    '<h1>&lt;b&gt;x&lt;/b&gt;</h1>'

Deferred content:
    >>> from tagweave import RequestContext, html, resolve
    >>> page = html(t"<p>Hello {lambda ctx: ctx.data['name']}</p>")
    >>> await resolve(page, RequestContext(data={"name": "Ada"}))
    >>> str(page)
    '<p>Hello Ada</p>'

Architecture:
tag constructor → TemplateString tree → resolve(context) → flatten → chunks

1. **Constructors** (``html``, ``json``, ``dangerjson``, ``based_html``)
   classify values into nodes for their context
2. **Resolver** walks the tree sequentially, invoking deferred callables
   with the request context and committing each template once
3. **Flattener** collapses the resolved tree into ordered text chunks
4. **Response boundary** wraps the result in a document and streams it

Contexts:
- ``html``: values HTML-escaped, HTML templates nest raw
- ``json``: values JSON-serialized, HTML templates become JSON strings
- ``dangerjson``: JSON that may be embedded raw inside HTML
- ``based_html``: context-free, resolved at construction, shareable

Mixing contexts never raises: misuse such as a ``json`` template inside
``html`` renders a visible warning fragment instead.

Concurrency:
Each request gets its own context and template tree. Resolution is
sequential within one tree; separate trees resolve concurrently on the
event loop without shared mutable state.

"""

from tagweave.environment import (
    BasedTemplateError,
    DeferredError,
    ErrorCode,
    StreamConsumedError,
    TemplateError,
    TemplateRuntimeError,
    TemplateValueError,
    UnresolvedTemplateError,
)
from tagweave.template import (
    BasedHtml,
    DangerJsonInHtml,
    HtmlString,
    JsonString,
    Kind,
    TemplateString,
    based_html,
    css,
    dangerjson,
    deliver,
    flatten,
    html,
    iter_chunks,
    json,
    render,
    resolve,
    stream,
)
from tagweave.environment.fragments import (
    COMMON_HEAD,
    CSS_RESET,
    INITIAL_HEAD,
    STANDARD_DEV_RELOADER,
)
from tagweave.environment.settings import (
    DocumentConfig,
    get_default_head,
    get_reloader,
    reset_default_head,
    set_default_head,
    set_reloader,
)
from tagweave.render_context import (
    RequestContext,
    ResponseState,
    get_request_context,
    request_context,
)
from tagweave.response import Response, html_responder, is_error
from tagweave.routing import Request, Router
from tagweave.utils.html import html_escape, json_escape

__version__ = "0.1.0"

__all__ = [
    # Version
    "__version__",
    # Templates
    "BasedHtml",
    "DangerJsonInHtml",
    "HtmlString",
    "JsonString",
    "Kind",
    "TemplateString",
    "based_html",
    "css",
    "dangerjson",
    "deliver",
    "html",
    "json",
    # Resolution and output
    "flatten",
    "iter_chunks",
    "render",
    "resolve",
    "stream",
    # Request context
    "RequestContext",
    "ResponseState",
    "get_request_context",
    "request_context",
    # Response boundary
    "COMMON_HEAD",
    "CSS_RESET",
    "DocumentConfig",
    "INITIAL_HEAD",
    "STANDARD_DEV_RELOADER",
    "Response",
    "get_default_head",
    "get_reloader",
    "html_responder",
    "is_error",
    "reset_default_head",
    "set_default_head",
    "set_reloader",
    # Routing
    "Request",
    "Router",
    # Escaping
    "html_escape",
    "json_escape",
    # Exceptions
    "BasedTemplateError",
    "DeferredError",
    "ErrorCode",
    "StreamConsumedError",
    "TemplateError",
    "TemplateRuntimeError",
    "TemplateValueError",
    "UnresolvedTemplateError",
]
