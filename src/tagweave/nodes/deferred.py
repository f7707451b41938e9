"""Nodes that need a request context before they can be rendered."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from tagweave.nodes.base import Node


@dataclass(frozen=True, slots=True)
class Deferred(Node):
    """An interpolated callable awaiting invocation: ``func(context)``.

    The callable may be a plain function or a coroutine function; it may
    return a scalar, a template, a list of templates, or another callable.
    """

    func: Callable[[Any], Any]

    @property
    def resolved(self) -> bool:
        return False

    @property
    def name(self) -> str:
        """Qualified name of the callable, for error messages and logs."""
        return getattr(self.func, "__qualname__", None) or repr(self.func)


@dataclass(frozen=True, slots=True)
class DeferredGroup(Node):
    """A list of templates passed as one interpolation value.

    Each member is already classified for the parent's context (usually
    ``Trusted``). The group is resolved once every member is.
    """

    members: tuple[Node, ...]

    @property
    def resolved(self) -> bool:
        return all(member.resolved for member in self.members)
