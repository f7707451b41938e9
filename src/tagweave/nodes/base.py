"""Base node class for template trees."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Node:
    """Base class for all template nodes.

    Nodes are immutable. A template changes only by having its whole node
    sequence replaced once, by the resolver.

    """

    @property
    def resolved(self) -> bool:
        """True if this node needs no request context to be rendered."""
        return True
