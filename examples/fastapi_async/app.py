"""FastAPI async integration -- streaming template responses.

Demonstrates tagweave's html_responder() with FastAPI's StreamingResponse.
Deferred callables await async data sources while the tree resolves, then
the document streams to the client chunk by chunk.

Requires: fastapi, uvicorn, httpx

Run:
    uvicorn app:app --reload
"""

from collections.abc import AsyncIterator

from fastapi import FastAPI, Request
from fastapi.responses import StreamingResponse

from tagweave import RequestContext, html, html_responder
from tagweave.asgi import create_app, to_starlette_response
from tagweave.routing import Router


async def fetch_items() -> AsyncIterator[dict]:
    """Simulate an async data source (database cursor, API, etc.)."""
    items = [
        {"name": "Revenue", "value": "$1.2M"},
        {"name": "Users", "value": "45,000"},
        {"name": "Orders", "value": "12,350"},
    ]
    for item in items:
        yield item


async def item_rows(ctx: RequestContext):
    return [
        html(("<li>", ": ", "</li>"), item["name"], item["value"])
        async for item in fetch_items()
    ]


def dashboard(ctx: RequestContext):
    ctx.head(html(("<title>", "</title>"), ctx.data["title"]))
    return html(("<h1>", "</h1><ul>", "</ul>"), ctx.data["title"], item_rows)


app = FastAPI()


@app.get("/")
async def index(request: Request) -> StreamingResponse:
    """Stream a tagweave document as an HTTP response."""
    ctx = RequestContext(data={"title": "Dashboard"}, url=str(request.url))
    response = await html_responder(ctx, dashboard(ctx))
    return to_starlette_response(response)


@app.get("/full")
async def full(request: Request) -> StreamingResponse:
    """Render the whole document first (non-streaming) for comparison."""
    ctx = RequestContext(data={"title": "Dashboard"}, url=str(request.url))
    response = await html_responder(ctx, dashboard(ctx))
    body = response.text()
    return StreamingResponse(iter([body]), media_type="text/html")


# A tagweave Router mounted as a sub-application
router = Router()
router.set("/", Router.data(lambda ctx: {"title": "Mounted"}).handler(dashboard))
app.mount("/pages", create_app(router))


# For test access via example_app fixture
output = "FastAPI example (run with uvicorn)"


def main() -> None:
    print("Run with: uvicorn app:app --reload")
    print("Endpoints:")
    print("  GET /        -- streaming response")
    print("  GET /full    -- full render response")
    print("  GET /pages/  -- tagweave Router mounted under FastAPI")


if __name__ == "__main__":
    main()
