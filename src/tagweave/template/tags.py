"""Tag constructors: ``html``, ``css``, ``json``, ``dangerjson``, ``based_html``.

Each constructor interleaves the fixed string parts with processed values.
Every value is classified once, here, into a node:

================  ==================  ===========================  =====================
value             HTML parent         JSON parent                  DANGER_JSON parent
================  ==================  ===========================  =====================
HtmlString        Trusted             JSON string of its text      JSON string of its text
BasedHtml         Escaped (as is)     JSON string of its text      JSON string of its text
JsonString        warning fragment    Trusted                      Trusted
DangerJsonInHtml  Trusted             warning string               Trusted
callable          Deferred            Deferred                     Deferred
[templates...]    DeferredGroup       DeferredGroup                DeferredGroup
anything else     html_escape         json_escape                  json_escape
================  ==================  ===========================  =====================

The resolver classifies the values returned by deferred callables with the
same function, so the guards hold at request time too.

Example:
    >>> page = html(("<h1>", "</h1>"), "<b>x</b>")
    >>> str(page)
    '<h1>&lt;b&gt;x&lt;/b&gt;</h1>'
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Sequence
from typing import Any, cast

from tagweave.environment.exceptions import BasedTemplateError
from tagweave.environment.fragments import (
    DANGERJSON_IN_JSON_WARNING,
    JSON_IN_HTML_WARNING,
)
from tagweave.nodes import Deferred, DeferredGroup, Escaped, Literal, Node, Trusted
from tagweave.template.core import (
    TEMPLATE_CLASSES,
    BasedHtml,
    DangerJsonInHtml,
    HtmlString,
    JsonString,
    Kind,
    TemplateString,
)
from tagweave.tstring import TemplateProtocol, split_parts
from tagweave.utils.html import html_escape, json_escape, script_json_escape

logger = logging.getLogger(__name__)

TemplateInput = TemplateProtocol | Sequence[str] | str


def _is_template_sequence(value: Any, kind: Kind) -> bool:
    if not isinstance(value, (list, tuple)):
        return False
    if not value:
        # An empty list renders nothing in HTML; in JSON it stays "[]".
        return kind is Kind.HTML
    return all(isinstance(item, (TemplateString, BasedHtml)) for item in value)


def _is_scalar(value: Any) -> bool:
    # Booleans go through json_escape so they read true/false
    if isinstance(value, bool):
        return False
    return value is None or isinstance(value, (str, int, float))


def _classify_template(value: TemplateString, kind: Kind) -> Node:
    if kind is Kind.HTML:
        if value.kind is Kind.JSON:
            logger.warning(
                "JsonString interpolated into HTML; substituted warning fragment "
                "(use dangerjson to embed JSON in HTML)"
            )
            return Escaped(JSON_IN_HTML_WARNING)
        return Trusted(value)

    if value.kind is Kind.HTML:
        if value.resolved:
            return Escaped(json_escape(str(value)))
        return Trusted(value)
    if kind is Kind.JSON and value.kind is Kind.DANGER_JSON:
        logger.warning(
            "DangerJsonInHtml interpolated into json; substituted warning string"
        )
        return Escaped(DANGERJSON_IN_JSON_WARNING)
    return Trusted(value)


def classify(value: Any, kind: Kind, *, deferred_result: bool = False) -> Node:
    """Turn one interpolated value into a node for a parent of ``kind``.

    Args:
        value: The interpolated value (or a deferred callable's result)
        kind: Context kind of the parent template
        deferred_result: True when classifying what a deferred returned;
            a DANGER_JSON parent then inserts scalars unescaped.

    Returns:
        A single node. Never raises.
    """
    if isinstance(value, TemplateString):
        return _classify_template(value, kind)

    if isinstance(value, BasedHtml):
        if kind is Kind.HTML:
            return Escaped(str(value))
        return Escaped(json_escape(str(value)))

    if _is_template_sequence(value, kind):
        return DeferredGroup(tuple(classify(item, kind) for item in value))

    if callable(value):
        return Deferred(value)

    if hasattr(value, "__html__"):
        text = str(value.__html__())
        if kind is Kind.HTML:
            return Escaped(text)
        return Escaped(json_escape(text))

    if kind is Kind.HTML:
        return Escaped(html_escape(value))
    if deferred_result and kind is Kind.DANGER_JSON and _is_scalar(value):
        return Escaped("" if value is None else str(value))
    return Escaped(json_escape(value))


def _build(kind: Kind, template: TemplateInput, values: tuple[Any, ...]) -> TemplateString:
    strings, values = split_parts(template, values)
    nodes: list[Node] = []
    for index, text in enumerate(strings):
        if text:
            nodes.append(Literal(text))
        if index < len(values):
            nodes.append(classify(values[index], kind))
    return TEMPLATE_CLASSES[kind](nodes)


def html(template: TemplateInput, /, *values: Any) -> HtmlString:
    """Build an HTML-context template.

    Plain values are HTML-escaped, callables are deferred until the request
    context is known, and HTML templates nest without re-escaping.

    Example:
        >>> html(t"<p>{user_input}</p>")
        >>> html(("<p>", "</p>"), user_input)  # equivalent, any Python
    """
    return cast(HtmlString, _build(Kind.HTML, template, values))


css = html


def json(template: TemplateInput, /, *values: Any) -> JsonString:
    """Build a JSON-context template; plain values are JSON-serialized.

    Example:
        >>> str(json(("{\\"n\\": ", "}"), 42))
        '{"n": 42}'
    """
    return cast(JsonString, _build(Kind.JSON, template, values))


def dangerjson(template: TemplateInput, /, *values: Any) -> DangerJsonInHtml:
    """Build a JSON template that may be embedded in HTML unescaped.

    Use it to be explicit about putting JSON inside an HTML document, e.g.
    in a ``<script type="application/json">`` element.
    """
    return cast(DangerJsonInHtml, _build(Kind.DANGER_JSON, template, values))


def _based_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, BasedHtml):
        return str(value)
    if isinstance(value, TemplateString) or callable(value):
        raise BasedTemplateError(value)
    if isinstance(value, (list, tuple)):
        return "".join(_based_text(item) for item in value)
    if hasattr(value, "__html__"):
        return str(value.__html__())
    return html_escape(value)


def based_html(template: TemplateInput, /, *values: Any) -> BasedHtml:
    """Build a context-free HTML fragment, resolved at construction.

    Accepts primitives, ``None``, ``BasedHtml`` and lists of those. There
    is no deferred path: construction itself is the resolution.

    Raises:
        BasedTemplateError: If a value is callable or a context template.
    """
    strings, values = split_parts(template, values)
    parts: list[str] = []
    for index, text in enumerate(strings):
        parts.append(text)
        if index < len(values):
            parts.append(_based_text(values[index]))
    return BasedHtml("".join(parts))


def _script_payload(value: Any) -> Any:
    if callable(value):

        async def payload(ctx: Any) -> Any:
            result = value(ctx)
            if inspect.isawaitable(result):
                result = await result
            return _script_payload(result)

        payload.__qualname__ = getattr(value, "__qualname__", payload.__qualname__)
        return payload

    if isinstance(value, TemplateString):
        wrapped = dangerjson(("", ""), value)
        if not wrapped.resolved:

            async def payload(ctx: Any) -> Any:
                await wrapped.resolve(ctx)
                return BasedHtml(script_json_escape(str(wrapped)))

            return payload
        return BasedHtml(script_json_escape(str(wrapped)))

    return BasedHtml(script_json_escape(json_escape(value)))


def deliver(name: str, value: Any) -> HtmlString:
    """Expose a value to browser code as ``window[name]``.

    The value is serialized as JSON inside a
    ``<script type="application/json">`` element and parsed on load.
    ``< > &`` are written as ``\\uXXXX`` escapes so no value can close the
    element. A callable value is called with the request context first.

    Example:
        >>> deliver("user", {"id": 7})  # window["user"] = {id: 7}
    """
    return html(
        (
            '<script type="application/json" id="',
            '">',
            '</script>\n<script>\n  window["',
            '"] = JSON.parse(document.getElementById("',
            '").innerHTML);\n</script>',
        ),
        name,
        _script_payload(value),
        name,
        name,
    )
