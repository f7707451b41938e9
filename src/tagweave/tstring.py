"""Template String support (PEP 750).

Lets the tag constructors accept Python 3.14+ t-strings::

    >>> name = "<World>"
    >>> render(html(t"Hello {name}!"))
    'Hello &lt;World&gt;!'

as well as the explicit form that works on any interpreter::

    >>> render(html(("Hello ", "!"), name))
    'Hello &lt;World&gt;!'

Any object that structurally matches ``string.templatelib.Template`` is
accepted, so tests and callers on older Pythons can pass compatible objects.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Protocol, runtime_checkable

from tagweave.environment.exceptions import TemplateValueError
from tagweave.template.core import BasedHtml, TemplateString


@runtime_checkable
class TemplateProtocol(Protocol):
    strings: tuple[str, ...]
    interpolations: tuple[Any, ...]


def _is_formattable(value: Any) -> bool:
    # Templates, callables and sequences keep their identity; only scalars
    # honour !r / !s / !a and format specs.
    if isinstance(value, (TemplateString, BasedHtml, list, tuple)):
        return False
    if callable(value) or hasattr(value, "__html__"):
        return False
    return True


def _apply_format(value: Any, conversion: str | None, format_spec: str) -> Any:
    if not _is_formattable(value):
        return value
    if conversion == "r":
        value = repr(value)
    elif conversion == "s":
        value = str(value)
    elif conversion == "a":
        value = ascii(value)
    if format_spec:
        value = format(value, format_spec)
    return value


def split_parts(
    template: TemplateProtocol | Sequence[str] | str,
    values: tuple[Any, ...],
) -> tuple[tuple[str, ...], tuple[Any, ...]]:
    """Normalize a tag call into ``(strings, values)``.

    Args:
        template: A t-string (or compatible object), a sequence of fixed
            string parts, or a single plain string with no values.
        values: Interpolated values for the explicit form.

    Returns:
        The fixed parts and the values, with ``len(strings) == len(values) + 1``.

    Raises:
        TemplateValueError: If the parts and values do not interleave.
    """
    if isinstance(template, str):
        strings: tuple[str, ...] = (template,)
    elif isinstance(template, TemplateProtocol) and not isinstance(template, (list, tuple)):
        if values:
            raise TemplateValueError(
                "Extra positional values are not allowed with a t-string"
            )
        strings = tuple(template.strings)
        values = tuple(
            _apply_format(
                interp.value,
                getattr(interp, "conversion", None),
                getattr(interp, "format_spec", "") or "",
            )
            for interp in template.interpolations
        )
    else:
        strings = tuple(template)
        if not all(isinstance(s, str) for s in strings):
            raise TemplateValueError("Template string parts must all be str")

    if len(strings) != len(values) + 1:
        raise TemplateValueError(
            f"Expected {len(values) + 1} string parts for {len(values)} values, "
            f"got {len(strings)}"
        )
    return strings, values
