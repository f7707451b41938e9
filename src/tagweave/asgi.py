"""ASGI adapter built on Starlette.

Requires the ``asgi`` extra (``pip install tagweave[asgi]``)::

    from tagweave.asgi import create_app
    app = create_app(router)   # uvicorn module:app

The response body is handed to ``StreamingResponse`` unchanged, so chunks
reach the client as the body iterator produces them.
"""

from __future__ import annotations

import logging

from starlette.applications import Starlette
from starlette.requests import Request as StarletteRequest
from starlette.responses import PlainTextResponse, StreamingResponse
from starlette.responses import Response as StarletteResponse
from starlette.routing import Route

from tagweave.response import Response
from tagweave.routing import Request, Router
from tagweave.utils.constants import NO_MATCHING_URL_TEXT

logger = logging.getLogger(__name__)

_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS"]


def to_starlette_response(response: Response) -> StarletteResponse:
    """Wrap a tagweave Response in a Starlette ``StreamingResponse``."""
    if 300 <= response.status < 400 and "Location" in response.headers:
        return StarletteResponse(status_code=response.status, headers=response.headers)
    return StreamingResponse(
        iter(response),
        status_code=response.status,
        headers=response.headers,
    )


def to_request(request: StarletteRequest) -> Request:
    """Reduce a Starlette request to a tagweave ``Request``."""
    return Request(
        url=str(request.url),
        method=request.method,
        headers=dict(request.headers),
    )


def create_app(router: Router, *, debug: bool = False) -> Starlette:
    """Build a Starlette application that dispatches every path to ``router``.

    Unmatched paths answer 404 with a plain-text message.
    """

    async def dispatch(request: StarletteRequest) -> StarletteResponse:
        # Relative to any mount point
        path = "/" + request.path_params.get("path", "")
        response = await router.match(to_request(request), path)
        if response is None:
            logger.debug("404 for %s", path)
            return PlainTextResponse(NO_MATCHING_URL_TEXT, status_code=404)
        return to_starlette_response(response)

    return Starlette(
        debug=debug,
        routes=[Route("/{path:path}", dispatch, methods=_METHODS)],
    )
