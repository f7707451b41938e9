"""Minimal router: path lookup, request contexts, data blends and links.

A route handler takes a ``RequestContext`` and returns a template (sync or
async)::

    router = Router()
    router.set("/", lambda ctx: ctx.html(t"<h1>Hello {ctx.params}</h1>"))
    response = await router.match(Request(url="http://localhost/"))

Paths are registered with all their slash variations, so ``"about"``,
``"/about"`` and ``"/about/"`` all reach the same handler.

"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Awaitable, Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import parse_qs, parse_qsl, urlencode, urlsplit

from tagweave.environment.fragments import POST_ONLY_WARNING
from tagweave.environment.settings import DocumentConfig
from tagweave.render_context import RequestContext
from tagweave.response import Response, html_responder
from tagweave.template.core import TemplateString
from tagweave.template.resolver import resolve

logger = logging.getLogger(__name__)

Handler = Callable[[RequestContext], Any]
DataMaker = Callable[[RequestContext], Any]

_MISSING_LINK_TARGET = "/url_not_found_error"


@dataclass(frozen=True, slots=True)
class Request:
    """An incoming HTTP request, reduced to what the router needs."""

    url: str
    method: str = "GET"
    headers: Mapping[str, str] = field(default_factory=dict)

    @property
    def path(self) -> str:
        return urlsplit(self.url).path or "/"

    @property
    def is_post(self) -> bool:
        return self.method.upper() == "POST"


async def _call(func: Callable[[RequestContext], Any], ctx: RequestContext) -> Any:
    result = func(ctx)
    if inspect.isawaitable(result):
        result = await result
    return result


class DataBlend:
    """Binds a data maker to the handlers that consume its data.

    Created by ``Router.data(maker)``; see there.
    """

    __slots__ = ("maker",)

    def __init__(self, maker: DataMaker):
        self.maker = maker

    def handler(self, func: Handler) -> Callable[[RequestContext], Awaitable[Any]]:
        """Wrap ``func`` so it receives a context carrying the blend's data.

        A template returned by ``func`` is resolved against that derived
        context before it is handed back, so deferred nodes inside it see
        the data too.
        """

        async def blended(ctx: RequestContext) -> Any:
            data = await _call(self.maker, ctx)
            derived = ctx.with_data(data)
            result = await _call(func, derived)
            if isinstance(result, TemplateString):
                return await resolve(result, derived)
            return result

        blended.__qualname__ = getattr(func, "__qualname__", blended.__qualname__)
        return blended


class Router:
    """Maps request paths to handlers and answers requests with a Response.

    Args:
        config: Document defaults handed to the response boundary

    Example:
        >>> router = Router()
        >>> router.set([
        ...     ("/", lambda ctx: ctx.html(t"<h1>Home</h1>")),
        ...     ("/apple", lambda ctx: ctx.html(t"<h1>Apple</h1>")),
        ... ])
        >>> router.get("apple")
        'apple'
    """

    def __init__(self, config: DocumentConfig | None = None):
        self.config = config
        self._handlers: dict[str, Handler] = {}

    @staticmethod
    def generate_variations(path: str) -> list[str]:
        """Return the leading-slash form of ``path`` and its trailing-slash twin.

        The first entry is the canonical form. ``"/"`` maps only to itself.

        Example:
            >>> Router.generate_variations("about")
            ['/about', '/about/']
            >>> Router.generate_variations("/about/")
            ['/about/', '/about']
        """
        if path == "/":
            return ["/"]
        if not path.startswith("/"):
            path = "/" + path
        if path.endswith("/"):
            return [path, path[:-1]]
        return [path, path + "/"]

    def set(
        self,
        path: str | Iterable[tuple[str, Handler]],
        handler: Handler | None = None,
    ) -> None:
        """Register one route, or many from ``(path, handler)`` pairs.

        Registering an existing path replaces its handler.
        """
        if isinstance(path, str):
            if handler is None:
                raise TypeError(f"Router.set({path!r}) needs a handler")
            entries: Iterable[tuple[str, Handler]] = [(path, handler)]
        else:
            entries = path
        for entry_path, entry_handler in entries:
            for variation in self.generate_variations(entry_path):
                self._handlers[variation] = entry_handler
            logger.debug("Route registered: %s", entry_path)

    def remove(self, path: str) -> None:
        """Remove a route with all of its slash variations."""
        stripped = path.rstrip("/") or "/"
        for variation in self.generate_variations(stripped):
            self._handlers.pop(variation, None)

    def get(self, path: str) -> str | None:
        """Return ``path`` if a handler is registered for it, else None."""
        if self.generate_variations(path)[0] in self._handlers:
            return path
        return None

    def __contains__(self, path: str) -> bool:
        return self.get(path) is not None

    def __len__(self) -> int:
        return len(self._handlers)

    async def match(self, request: Request, path: str | None = None) -> Response | None:
        """Dispatch ``request`` to the handler registered for its path.

        Args:
            request: The incoming request
            path: Path to look up instead of the request's own

        Returns:
            The Response, or None if no route matches.
        """
        lookup = request.path if path is None else path
        handler = self._handlers.get(lookup)
        if handler is None:
            logger.debug("No route for %s", lookup)
            return None
        logger.debug("Dispatching %s %s", request.method, lookup)
        return await self.handle(request, handler)

    async def handle(self, request: Request, handler: Handler) -> Response:
        """Run ``handler`` for ``request`` and build the response.

        A redirect requested by the handler short-circuits rendering.
        """
        split = urlsplit(request.url)
        ctx = RequestContext(
            request=request,
            route=split.path or "/",
            params=parse_qs(split.query),
            url=request.url,
        )
        result = await _call(handler, ctx)
        if ctx.state.redirect_to is not None:
            return Response.redirect(ctx.state.redirect_to, ctx.state.redirect_status)
        return await html_responder(ctx, result, config=self.config)

    @staticmethod
    def post(handler: Handler) -> Handler:
        """Only call ``handler`` for POST requests.

        Any other method gets a visible warning fragment instead, which
        keeps state-changing handlers away from plain links.
        """

        def post_only(ctx: RequestContext) -> Any:
            if ctx.request is not None and ctx.request.is_post:
                return handler(ctx)
            return POST_ONLY_WARNING

        return post_only

    @staticmethod
    def data(maker: DataMaker) -> DataBlend:
        """Start a data blend: ``maker(ctx)`` computes data for the handlers.

        Example:
            >>> logged_in = Router.data(lambda ctx: load_user(ctx))
            >>> router.set("/me", logged_in.handler(
            ...     lambda ctx: ctx.html(t"<h1>{ctx.data.name}</h1>")
            ... ))
        """
        return DataBlend(maker)

    def link(
        self,
        path: str,
        qs: str | Sequence[str] = (),
        settings: Mapping[str, Any] | None = None,
    ) -> Callable[[RequestContext], str]:
        """Build a deferred link to a registered path.

        Args:
            path: Target path (unregistered paths point at a placeholder)
            qs: Query parameter names to carry over from the current request
            settings: Query parameters to set; None values are skipped

        Example:
            >>> html(t'<a href="{router.link("/login", "next")}">log in</a>')
        """
        names = [qs] if isinstance(qs, str) else list(qs)

        def link(ctx: RequestContext) -> str:
            target = self.get(path)
            if target is None:
                target = _MISSING_LINK_TARGET
            elif not target.startswith("/"):
                target = "/" + target
            split = urlsplit(target)
            query = dict(parse_qsl(split.query))
            current = parse_qs(urlsplit(ctx.url).query)
            for name in names:
                values = current.get(name)
                if name and values and values[0]:
                    query[name] = values[0]
            for key, value in (settings or {}).items():
                if value is not None:
                    query[key] = str(value)
            if not query:
                return split.path
            return f"{split.path}?{urlencode(query)}"

        return link
