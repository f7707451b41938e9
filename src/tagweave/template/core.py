"""Template containers: the trees built by the tag constructors.

Architecture:
    ```
    TemplateString            # ordered node tuple + resolved flag
    ├── HtmlString            # Kind.HTML: html`` / css``
    ├── JsonString            # Kind.JSON: json``
    └── DangerJsonInHtml      # Kind.DANGER_JSON: dangerjson``
    BasedHtml(str)            # Kind.BASED: based_html``, always resolved
    ```

Lifecycle:
A template is created once by a tag constructor. It is either resolved from
the start (no deferred content) or unresolved, in which case the resolver
builds a replacement node list in a buffer it owns and commits it exactly
once with ``_commit()``. After that the template is read-only. A resolve
that fails never commits, so a half-resolved tree is never observable.

Thread-Safety:
Templates are single-owner values: each request builds its own tree.
Resolved templates are immutable and safe to share for reading.

"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from enum import Enum
from typing import TYPE_CHECKING, Any, ClassVar

if TYPE_CHECKING:
    from tagweave.nodes import Node


class Kind(Enum):
    """Context kind of a template; drives escaping and the misuse guards."""

    HTML = "html"
    JSON = "json"
    DANGER_JSON = "danger_json"
    BASED = "based"

    @property
    def is_json(self) -> bool:
        """True for both JSON kinds (escaped and danger)."""
        return self is Kind.JSON or self is Kind.DANGER_JSON


class TemplateString:
    """Ordered sequence of nodes with a context kind and a resolved flag.

    Do not instantiate directly; use ``html``, ``json``, ``dangerjson``.

    Attributes:
        kind: Context kind of this template class
        nodes: The node tuple (replaced once by the resolver)
        resolved: True iff no node needs a request context

    Example:
            >>> page = html(t"<p>{lambda ctx: ctx.data['name']}</p>")
            >>> page.resolved
            False
            >>> str(await page.resolve(ctx))
            '<p>Ada</p>'
    """

    __slots__ = ("_nodes", "_resolved")

    kind: ClassVar[Kind]

    def __init__(self, nodes: Iterable[Node] = ()):
        self._nodes: tuple[Node, ...] = tuple(nodes)
        self._resolved: bool = all(node.resolved for node in self._nodes)

    @property
    def nodes(self) -> tuple[Node, ...]:
        return self._nodes

    @property
    def resolved(self) -> bool:
        return self._resolved

    def _commit(self, nodes: Iterable[Node]) -> None:
        """Replace the node sequence with its resolved form and seal it.

        Only the resolver calls this, once per template.

        Raises:
            RuntimeError: If the template is already resolved, or if the
                new nodes still contain deferred content.
        """
        if self._resolved:
            raise RuntimeError(f"{type(self).__name__} is already resolved")
        new_nodes = tuple(nodes)
        if not all(node.resolved for node in new_nodes):
            raise RuntimeError(
                f"{type(self).__name__} still holds unresolved nodes after resolution"
            )
        self._nodes = new_nodes
        self._resolved = True

    @classmethod
    def _from_flat(cls, nodes: Iterable[Node], resolved: bool) -> TemplateString:
        # Flattening keeps the source's resolved flag even if it is stale.
        template = cls.__new__(cls)
        template._nodes = tuple(nodes)
        template._resolved = resolved
        return template

    async def resolve(self, context: Any) -> TemplateString:
        """Resolve all deferred content against ``context``. Idempotent."""
        from tagweave.template.resolver import resolve

        return await resolve(self, context)

    def flat(self, depth: float | None = 1) -> TemplateString:
        """Expand nested templates and groups ``depth`` levels deep."""
        from tagweave.template.flatten import flatten

        return flatten(self, depth)

    def __len__(self) -> int:
        return len(self._nodes)

    def __iter__(self) -> Iterator[Node]:
        return iter(self._nodes)

    def __str__(self) -> str:
        from tagweave.template.flatten import render

        return render(self)

    def __repr__(self) -> str:
        state = "resolved" if self._resolved else "unresolved"
        return f"<{type(self).__name__} {state} nodes={len(self._nodes)}>"


class HtmlString(TemplateString):
    """HTML-context template built by ``html`` / ``css``."""

    __slots__ = ()

    kind: ClassVar[Kind] = Kind.HTML

    def __html__(self) -> str:
        return str(self)


class JsonString(TemplateString):
    """JSON-context template built by ``json``. Never embeddable in HTML."""

    __slots__ = ()

    kind: ClassVar[Kind] = Kind.JSON


class DangerJsonInHtml(TemplateString):
    """JSON-context template built by ``dangerjson``.

    The explicit "I accept the risk" channel: it may be embedded in HTML
    as-is, and scalars returned by its deferred callables are not escaped.
    """

    __slots__ = ()

    kind: ClassVar[Kind] = Kind.DANGER_JSON

    def __html__(self) -> str:
        return str(self)


class BasedHtml(str):
    """Context-free HTML fragment resolved at construction time.

    A ``str`` subclass, like a Markup string: its text is already safe for
    HTML and it never holds deferred content.

    Example:
            >>> based_html(("<b>", "</b>"), "<i>")
            BasedHtml('<b>&lt;i&gt;</b>')
    """

    __slots__ = ()

    kind: ClassVar[Kind] = Kind.BASED
    resolved: ClassVar[bool] = True

    def __html__(self) -> str:
        return self

    def __repr__(self) -> str:
        return f"BasedHtml({str.__repr__(self)})"


TEMPLATE_CLASSES: dict[Kind, type[TemplateString]] = {
    Kind.HTML: HtmlString,
    Kind.JSON: JsonString,
    Kind.DANGER_JSON: DangerJsonInHtml,
}
