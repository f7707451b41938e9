"""Leaf and nested-template nodes."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from tagweave.nodes.base import Node

if TYPE_CHECKING:
    from tagweave.template.core import TemplateString


@dataclass(frozen=True, slots=True)
class Literal(Node):
    """Fixed text from the template's own string parts. Never escaped."""

    text: str


@dataclass(frozen=True, slots=True)
class Escaped(Node):
    """An interpolated value already converted to safe text for its context."""

    text: str


@dataclass(frozen=True, slots=True)
class Trusted(Node):
    """A nested template of a compatible kind, embedded without re-escaping.

    When the nested template is HTML and the parent is a JSON context, the
    resolver turns it into a JSON string of its rendered text instead.
    """

    template: TemplateString

    @property
    def resolved(self) -> bool:
        return self.template.resolved
