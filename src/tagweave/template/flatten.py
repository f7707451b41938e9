"""Flattening and chunk streaming.

``flatten()`` collapses nested templates and groups into one ordered node
sequence. ``iter_chunks()`` turns a resolved tree into a lazy, single-pass
sequence of text chunks, one per non-empty leaf, suitable for chunked
transfer without buffering the whole document.

Depth:
    Each nested template counts as one level. A group (a list interpolated
    as one value) is transparent: its members are spliced at the group's
    own level, just as the list itself was spliced at construction.
    ``depth=None`` or ``math.inf`` flattens completely.

"""

from __future__ import annotations

import math
from collections.abc import AsyncIterator, Iterator
from typing import Any, TypeVar

from tagweave.environment.exceptions import UnresolvedTemplateError
from tagweave.nodes import DeferredGroup, Escaped, Literal, Node, Trusted
from tagweave.template.core import BasedHtml, Kind, TemplateString

T = TypeVar("T", TemplateString, BasedHtml)


def _expand(nodes: tuple[Node, ...], kind: Kind, depth: float) -> Iterator[Node]:
    for node in nodes:
        match node:
            case DeferredGroup(members=members):
                yield from _expand(members, kind, depth)
            case Trusted(template=sub) if depth > 0:
                if kind.is_json and sub.kind is Kind.HTML:
                    # Needs the resolver's JSON string conversion first
                    yield node
                elif sub.kind is not kind and not sub.resolved:
                    # Deferred results are classified by the owning template's kind
                    yield node
                else:
                    yield from _expand(sub.nodes, sub.kind, depth - 1)
            case _:
                yield node


def flatten(template: T, depth: float | None = 1) -> T:
    """Expand nested templates ``depth`` levels into a new template.

    Order and the ``resolved`` flag are preserved; the source template is
    not modified.

    Args:
        template: Template to flatten (``BasedHtml`` is returned as-is)
        depth: Levels to expand; ``None`` or ``math.inf`` for all

    Returns:
        A new template of the same class.

    Example:
        >>> items = [html(t"<li>{x}</li>") for x in "ab"]
        >>> flat = flatten(html(t"<ul>{items}</ul>"), None)
        >>> [n.text for n in flat]
        ['<ul>', '<li>', 'a', '</li>', '<li>', 'b', '</li>', '</ul>']
    """
    if isinstance(template, BasedHtml):
        return template
    limit = math.inf if depth is None else depth
    if limit < 0:
        raise ValueError(f"flatten depth must be >= 0, got {depth}")
    nodes = _expand(template.nodes, template.kind, limit)
    return type(template)._from_flat(nodes, template.resolved)


def _leaves(nodes: tuple[Node, ...]) -> Iterator[str]:
    for node in nodes:
        match node:
            case Literal(text=text) | Escaped(text=text):
                if text:
                    yield text
            case _:
                raise TypeError(f"Unexpected {type(node).__name__} in a resolved tree")


def iter_chunks(template: TemplateString | BasedHtml) -> Iterator[str]:
    """Return a lazy, single-pass iterator over the output chunks.

    Empty leaves are skipped. The resolved check happens at call time, so
    an unresolved tree fails before any chunk exists.

    Raises:
        UnresolvedTemplateError: If the template still holds deferred content.
    """
    if isinstance(template, BasedHtml):
        return iter((template,) if template else ())
    if not template.resolved:
        raise UnresolvedTemplateError(type(template).__name__)
    return _leaves(flatten(template, None).nodes)


def render(template: TemplateString | BasedHtml) -> str:
    """Render a resolved template to a single string."""
    return "".join(iter_chunks(template))


async def stream(template: TemplateString | BasedHtml, context: Any) -> AsyncIterator[str]:
    """Resolve ``template`` against ``context``, then yield its chunks.

    Resolution finishes before the first chunk is yielded, so a failing
    deferred produces no output at all.

    Example:
        >>> async for chunk in stream(page, ctx):
        ...     await send(chunk)
    """
    from tagweave.template.resolver import resolve

    await resolve(template, context)
    for chunk in iter_chunks(template):
        yield chunk
