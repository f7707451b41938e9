"""Resolver: turns an unresolved template tree into a resolved one.

Algorithm:
    Walk the node sequence in declared order, one node at a time. Deferred
    callables are invoked with the request context and awaited; what they
    return is classified for the parent's context and resolved in turn.
    Nested templates and groups are resolved recursively with the same
    context. The new nodes are collected in a buffer owned by this call and
    committed to the template once, at the end.

Ordering:
    Resolution is strictly sequential, never concurrent. A later deferred
    may rely on side effects of an earlier one (e.g. one sets response
    headers or the document head before another renders content that
    assumes them).

Idempotence:
    A resolved template is returned unchanged, so each deferred callable runs
    at most once no matter how often ``resolve()`` is called.

Errors:
    A failing deferred is wrapped in ``DeferredError`` (original exception
    chained) and propagates. Nothing is retried and the failing template is
    left unresolved, so no partial output can be produced from it.

"""

from __future__ import annotations

import inspect
import logging
from typing import Any, TypeVar

from tagweave.environment.exceptions import DeferredError, TemplateError
from tagweave.nodes import Deferred, DeferredGroup, Escaped, Literal, Node, Trusted
from tagweave.template.core import BasedHtml, Kind, TemplateString
from tagweave.template.tags import classify
from tagweave.utils.html import json_escape

logger = logging.getLogger(__name__)

T = TypeVar("T", TemplateString, BasedHtml)


async def _invoke(node: Deferred, context: Any, owner: TemplateString, index: int) -> Any:
    try:
        result = node.func(context)
        if inspect.isawaitable(result):
            result = await result
    except TemplateError:
        raise
    except Exception as exc:
        raise DeferredError(
            node.name,
            exc,
            template_kind=type(owner).__name__,
            index=index,
        ) from exc
    return result


async def _resolve_node(
    node: Node,
    context: Any,
    owner: TemplateString,
    index: int,
) -> Node:
    kind = owner.kind
    match node:
        case Literal() | Escaped():
            return node
        case Trusted(template=sub):
            await resolve(sub, context)
            if kind.is_json and sub.kind is Kind.HTML:
                # HTML inside JSON becomes a JSON string of its rendered text
                return Escaped(json_escape(str(sub)))
            return node
        case Deferred():
            logger.debug("Invoking deferred %s in %s node %d", node.name, type(owner).__name__, index)
            result = await _invoke(node, context, owner, index)
            replacement = classify(result, kind, deferred_result=True)
            return await _resolve_node(replacement, context, owner, index)
        case DeferredGroup(members=members):
            resolved_members: list[Node] = []
            for member in members:
                resolved_members.append(await _resolve_node(member, context, owner, index))
            return DeferredGroup(tuple(resolved_members))
        case _:
            raise TypeError(f"Unknown template node: {type(node).__name__}")


async def resolve(template: T, context: Any) -> T:
    """Resolve every deferred node of ``template`` against ``context``.

    Args:
        template: Any template (``BasedHtml`` and resolved templates are
            returned as-is)
        context: The per-request context passed to every deferred callable

    Returns:
        The same template object, now resolved.

    Raises:
        DeferredError: If a deferred callable raises.
        TypeError: If ``template`` is not a template.

    Example:
        >>> page = html(("<p>", "</p>"), lambda ctx: ctx.data)
        >>> await resolve(page, ctx)
        <HtmlString resolved nodes=3>
    """
    if isinstance(template, BasedHtml):
        return template
    if not isinstance(template, TemplateString):
        raise TypeError(f"resolve() expects a template, got {type(template).__name__}")
    if template.resolved:
        return template

    from tagweave.render_context import reset_request_context, set_request_context

    logger.debug("Resolving %s (%d nodes)", type(template).__name__, len(template))
    token = set_request_context(context)
    try:
        buffer: list[Node] = []
        for index, node in enumerate(template.nodes):
            buffer.append(await _resolve_node(node, context, template, index))
    finally:
        reset_request_context(token)

    template._commit(buffer)
    return template
