"""Template package: containers, tag constructors, resolver, flattener.

Data flow:
    tag constructor → TemplateString (maybe unresolved) → resolve(context)
    → resolved TemplateString → flatten → chunk iterator

"""

from tagweave.template.core import (
    BasedHtml,
    DangerJsonInHtml,
    HtmlString,
    JsonString,
    Kind,
    TemplateString,
)
from tagweave.template.tags import based_html, classify, css, dangerjson, deliver, html, json
from tagweave.template.resolver import resolve
from tagweave.template.flatten import flatten, iter_chunks, render, stream

__all__ = [
    "BasedHtml",
    "DangerJsonInHtml",
    "HtmlString",
    "JsonString",
    "Kind",
    "TemplateString",
    "based_html",
    "classify",
    "css",
    "dangerjson",
    "deliver",
    "flatten",
    "html",
    "iter_chunks",
    "json",
    "render",
    "resolve",
    "stream",
]
