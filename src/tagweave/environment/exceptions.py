"""Exceptions for the tagweave template engine.

Exception Hierarchy:
TemplateError (base)
├── TemplateValueError        # Malformed tag call (parts/values mismatch)
├── BasedTemplateError        # Deferred content passed to based_html
├── UnresolvedTemplateError   # Rendering or streaming an unresolved tree
├── StreamConsumedError       # Draining a single-pass body twice
└── TemplateRuntimeError      # Resolution-time error with context
    └── DeferredError         # A deferred callable raised

Cross-context misuse (JSON interpolated into HTML, dangerjson where json was
expected) is deliberately NOT part of this hierarchy: it is caught at
construction time and replaced with a visible warning fragment.

Example:
    ```
    T-RES-001: Runtime Error: Deferred 'load_user' failed: KeyError: 'user_id'
      Location: HtmlString node 3
      Docs: docs/errors.md#t-res-001
    ```

"""

from __future__ import annotations

from enum import Enum

_TAGWEAVE_DOCS_BASE = "docs/errors.md"


class ErrorCode(Enum):
    """Searchable error codes for tagweave errors.

    Format: T-{CATEGORY}-{NUMBER}
    Categories: TAG (construction), RES (resolution), OUT (output)
    """

    # Construction errors (T-TAG-xxx)
    PARTS_MISMATCH = "T-TAG-001"
    BASED_DEFERRED = "T-TAG-002"

    # Resolution errors (T-RES-xxx)
    DEFERRED_FAILED = "T-RES-001"
    RUNTIME_ERROR = "T-RES-002"

    # Output errors (T-OUT-xxx)
    UNRESOLVED_OUTPUT = "T-OUT-001"
    STREAM_CONSUMED = "T-OUT-002"

    @property
    def docs_url(self) -> str:
        """Location of this error code in the project's error reference."""
        return f"{_TAGWEAVE_DOCS_BASE}#{self.value.lower()}"

    @property
    def category(self) -> str:
        """Error category (e.g., 'construction', 'resolution', 'output')."""
        prefix = self.value.split("-")[1]
        return {
            "TAG": "construction",
            "RES": "resolution",
            "OUT": "output",
        }.get(prefix, "unknown")


class TemplateError(Exception):
    """Base exception for all tagweave errors.

    Enables broad exception handling around a request:

        >>> try:
        ...     response = await html_responder(ctx, page)
        ... except TemplateError as e:
        ...     log.error(e.format_compact())

    Attributes:
        code: Optional ErrorCode for searchable error identification.
    """

    code: ErrorCode | None = None

    def format_compact(self) -> str:
        """Format error as a short, human-readable summary with its docs link."""
        header = str(self)
        if self.code and self.code.value not in header:
            header = f"{self.code.value}: {header}"
        parts = [header]
        if self.code:
            parts.append(f"  Docs: {self.code.docs_url}")
        return "\n".join(parts)


class TemplateValueError(TemplateError, ValueError):
    """A tag constructor was called with mismatched string parts and values."""

    code: ErrorCode | None = ErrorCode.PARTS_MISMATCH


class BasedTemplateError(TemplateError, TypeError):
    """Deferred or unresolved content was interpolated into ``based_html``.

    A based fragment is resolved at construction time, so it can never hold
    a callable or a context-bound template.
    """

    code: ErrorCode | None = ErrorCode.BASED_DEFERRED

    def __init__(self, value: object):
        self.value = value
        super().__init__(
            f"based_html() cannot interpolate {type(value).__name__}; "
            f"only primitives and BasedHtml fragments are allowed. "
            f"Use html() for content that needs a request context."
        )


class UnresolvedTemplateError(TemplateError):
    """An unresolved template was rendered or streamed before ``resolve()``."""

    code: ErrorCode | None = ErrorCode.UNRESOLVED_OUTPUT

    def __init__(self, template_kind: str):
        self.template_kind = template_kind
        super().__init__(
            f"Cannot render an unresolved {template_kind}: "
            f"await resolve(template, context) first"
        )


class StreamConsumedError(TemplateError):
    """A single-pass response body was iterated a second time."""

    code: ErrorCode | None = ErrorCode.STREAM_CONSUMED


class TemplateRuntimeError(TemplateError):
    """Resolution-time error with debugging context.

    Output Format:
            ```
            Runtime Error: Deferred 'load_user' failed: KeyError: 'user_id'
              Location: HtmlString node 3
              Suggestion: ...
            ```

    Attributes:
        message: Error description
        template_kind: Class name of the template being resolved
        index: Position of the failing node in its template
        suggestion: Actionable fix suggestion
    """

    code: ErrorCode | None = ErrorCode.RUNTIME_ERROR

    def __init__(
        self,
        message: str,
        *,
        template_kind: str | None = None,
        index: int | None = None,
        suggestion: str | None = None,
    ):
        self.message = message
        self.template_kind = template_kind
        self.index = index
        self.suggestion = suggestion
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        parts = [f"Runtime Error: {self.message}"]
        if self.template_kind is not None:
            loc = self.template_kind
            if self.index is not None:
                loc += f" node {self.index}"
            parts.append(f"  Location: {loc}")
        if self.suggestion:
            parts.append(f"  Suggestion: {self.suggestion}")
        return "\n".join(parts)


class DeferredError(TemplateRuntimeError):
    """A deferred callable raised while its template was being resolved.

    The original exception is chained as ``__cause__``. The resolver never
    retries; the caller decides what to answer (typically a 500).
    """

    code: ErrorCode | None = ErrorCode.DEFERRED_FAILED

    def __init__(
        self,
        func_name: str,
        error: BaseException,
        *,
        template_kind: str | None = None,
        index: int | None = None,
    ):
        self.func_name = func_name
        self.error = error
        super().__init__(
            f"Deferred '{func_name}' failed: {type(error).__name__}: {error}",
            template_kind=template_kind,
            index=index,
        )
