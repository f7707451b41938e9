"""Document configuration for the response boundary.

Head precedence (highest first):
    1. handler-level: ``ctx.head(fragment)`` during the request
    2. per-request: ``DocumentConfig(head=...)`` passed to the responder
    3. process-wide: ``set_default_head(fragment)``, initially ``INITIAL_HEAD``

The live-reload fragment follows config > process-wide (``set_reloader``),
and is empty by default.

The process-wide values are the only module-level mutable settings. They
must be resolved fragments (or callables producing a fresh fragment per
request), since a shared tree must never be resolved in place.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from tagweave.environment.exceptions import TemplateValueError
from tagweave.environment.fragments import INITIAL_HEAD
from tagweave.template.core import BasedHtml, TemplateString

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class DocumentConfig:
    """Per-request defaults for the HTML document skeleton.

    Attributes:
        head: Head fragment used when the handler sets none
        reloader: Live-reload fragment injected first in ``<head>``
        headers: Headers merged over the built-in defaults
    """

    head: Any = None
    reloader: Any = None
    headers: Mapping[str, str] | None = None


def _check_shareable(fragment: Any, what: str) -> None:
    if fragment is None or isinstance(fragment, BasedHtml) or callable(fragment):
        return
    if isinstance(fragment, TemplateString) and fragment.resolved:
        return
    raise TemplateValueError(
        f"The process-wide {what} must be a resolved fragment or a callable "
        f"returning one, got {fragment!r}"
    )


_default_head: Any = INITIAL_HEAD
_reloader: Any = None


def set_default_head(fragment: Any) -> None:
    """Set the default head for all pages. Pages may still override it.

    Example:
        >>> set_default_head(based_html("<title>hello hello</title>"))
    """
    global _default_head
    _check_shareable(fragment, "head")
    logger.debug("Default head replaced")
    _default_head = fragment


def get_default_head() -> Any:
    """Return the current process-wide default head."""
    return _default_head


def reset_default_head() -> None:
    """Restore the initial default head."""
    global _default_head
    _default_head = INITIAL_HEAD


def set_reloader(fragment: Any) -> None:
    """Set (or clear with ``None``) the process-wide live-reload fragment."""
    global _reloader
    _check_shareable(fragment, "reloader")
    _reloader = fragment


def get_reloader() -> Any:
    """Return the current process-wide live-reload fragment, if any."""
    return _reloader


def pick_head(handler_head: Any, config: DocumentConfig | None) -> Any:
    """Apply the head precedence rules."""
    if handler_head is not None:
        return handler_head
    if config is not None and config.head is not None:
        return config.head
    return _default_head


def pick_reloader(config: DocumentConfig | None) -> Any:
    """Apply the reloader precedence rules."""
    if config is not None and config.reloader is not None:
        return config.reloader
    return _reloader
