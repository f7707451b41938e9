"""Deferred content -- values computed per request.

Callables interpolated into a template run only when the template is
resolved against a request context. Async callables are awaited, and
callables run in the order they appear, so an earlier one can set the
head or headers for the response.

Run:
    python app.py
"""

import asyncio

from tagweave import RequestContext, html, html_responder

USERS = {"ada": "Ada Lovelace", "alan": "Alan Turing"}


async def load_user(ctx: RequestContext) -> str:
    """Simulate an async lookup (database, API, ...)."""
    await asyncio.sleep(0)
    return USERS.get(ctx.data["user"], "stranger")


def set_title(ctx: RequestContext) -> str:
    ctx.head(html(("<title>", "</title>"), USERS[ctx.data["user"]]))
    return ""


def profile_page():
    return html(
        ("", "<h1>Hello ", "</h1><p>", "</p>"),
        set_title,
        load_user,
        lambda ctx: f"{len(ctx.data['user'])} letters",
    )


async def render_for(user: str) -> tuple[str, dict[str, str]]:
    """Render the full document for one user."""
    ctx = RequestContext(data={"user": user})
    response = await html_responder(ctx, profile_page())
    return response.text(), response.headers


# Run at import time for test access
output, headers = asyncio.run(render_for("ada"))


def main() -> None:
    print(output)
    print(headers)


if __name__ == "__main__":
    main()
