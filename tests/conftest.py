"""Pytest configuration and fixtures for tagweave tests."""

from types import SimpleNamespace

import pytest

from tagweave import RequestContext, Router
from tagweave.environment.settings import reset_default_head, set_reloader


@pytest.fixture
def ctx() -> RequestContext:
    """Create a request context carrying a small data mapping."""
    return RequestContext(data={"name": "Ada"}, url="http://example.com/page?next=%2Fhome")


@pytest.fixture
def router() -> Router:
    """Create an empty router."""
    return Router()


@pytest.fixture(autouse=True)
def _reset_document_settings():
    """Restore the process-wide head and reloader around every test."""
    reset_default_head()
    set_reloader(None)
    yield
    reset_default_head()
    set_reloader(None)


def make_tstring(*parts: object) -> SimpleNamespace:
    """Build an object shaped like ``string.templatelib.Template``.

    Arguments alternate: fixed part, interpolated value, fixed part, ...
    Non-string arguments are always values; empty parts are filled in
    around adjacent values.

    Example:
        >>> make_tstring("Hello ", "<World>", "!").strings
        ('Hello ', '!')
    """
    strings: list[str] = []
    interpolations: list[SimpleNamespace] = []
    last_was_string = False
    for part in parts:
        if isinstance(part, str) and not last_was_string:
            strings.append(part)
            last_was_string = True
            continue
        if not last_was_string:
            strings.append("")
        interpolations.append(SimpleNamespace(value=part, conversion=None, format_spec=""))
        last_was_string = False
    if not last_was_string:
        strings.append("")
    return SimpleNamespace(strings=tuple(strings), interpolations=tuple(interpolations))
