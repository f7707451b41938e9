"""Shared pytest configuration for tagweave examples.

``example_app`` loads the ``app.py`` next to the requesting test in a fresh
module namespace, so every test sees the example's import-time results
without state left over from another test. Process-wide document settings
are restored around each test for the same reason.
"""

import importlib.util
from pathlib import Path

import pytest

from tagweave.environment.settings import reset_default_head, set_reloader


@pytest.fixture(autouse=True)
def _clean_document_settings():
    yield
    reset_default_head()
    set_reloader(None)


@pytest.fixture
def example_app(request: pytest.FixtureRequest):
    """Execute the sibling app.py and return it as a module."""
    app_path = Path(request.path).parent / "app.py"
    spec = importlib.util.spec_from_file_location(
        f"tagweave_example_{app_path.parent.name}", app_path
    )
    assert spec is not None and spec.loader is not None
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module
