"""Escaping for the two output syntaxes tagweave composes: HTML and JSON.

The escapers are pure, total and deterministic. They never raise for any
input, so an interpolated value can never take a request down.

Complexity:
- ``html_escape()``: O(n) single pass via ``str.translate()``
- ``json_escape()``: O(n) via the ``json`` encoder

"""

from __future__ import annotations

import json
import math
from typing import Any

_HTML_ESCAPE_TABLE = str.maketrans(
    {
        "&": "&amp;",
        "<": "&lt;",
        ">": "&gt;",
        '"': "&quot;",
        "'": "&#39;",
    }
)

# Fast-path check: most interpolated values contain none of these.
_HTML_SPECIAL = frozenset("&<>\"'")


def html_escape(value: Any) -> str:
    """Convert any value to HTML-safe text.

    ``None`` becomes the empty string; everything else goes through
    ``str()`` and has ``& < > " '`` replaced with entities.

    Example:
        >>> html_escape("<b>Tom & Jerry</b>")
        '&lt;b&gt;Tom &amp; Jerry&lt;/b&gt;'
        >>> html_escape(None)
        ''
    """
    if value is None:
        return ""
    s = value if type(value) is str else str(value)
    if _HTML_SPECIAL.isdisjoint(s):
        return s
    return s.translate(_HTML_ESCAPE_TABLE)


def _json_default(value: Any) -> Any:
    return str(value)


def _json_key(key: Any) -> Any:
    if isinstance(key, float) and not math.isfinite(key):
        return str(key)
    if key is None or isinstance(key, (str, int, float, bool)):
        return key
    return str(key)


def _sanitize(value: Any) -> Any:
    # JSON has no NaN/Infinity (JSON.stringify writes null) and only
    # scalar object keys.
    if isinstance(value, float) and not math.isfinite(value):
        return None
    if isinstance(value, dict):
        return {_json_key(k): _sanitize(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_sanitize(v) for v in value]
    return value


def _dumps(value: Any) -> str:
    return json.dumps(
        value,
        ensure_ascii=False,
        separators=(",", ":"),
        default=_json_default,
        allow_nan=False,
    )


def _fallback_text(value: Any) -> str:
    try:
        return str(value)
    except RecursionError:
        return f"<{type(value).__name__}>"


def json_escape(value: Any) -> str:
    """Serialize a value as JSON text with ``JSON.stringify`` semantics.

    Strings are quoted with backslash and control-character escaping,
    numbers and booleans are written verbatim, ``None`` becomes ``null``.
    Objects the encoder does not know are serialized through ``str()``,
    and so are dict keys that JSON cannot represent. A container that is
    circular or too deep to encode becomes a JSON string of its text.

    Example:
        >>> json_escape(42)
        '42'
        >>> json_escape('say "hi"')
        '"say \\\\"hi\\\\""'
        >>> json_escape({"a": [1, 2]})
        '{"a":[1,2]}'
    """
    try:
        return _dumps(value)
    except (TypeError, ValueError, RecursionError):
        # Non-finite floats, non-scalar keys, circular or very deep containers
        try:
            return _dumps(_sanitize(value))
        except (TypeError, ValueError, RecursionError):
            return json.dumps(_fallback_text(value), ensure_ascii=False)


_SCRIPT_JSON_TABLE = str.maketrans(
    {
        "<": "\\u003c",
        ">": "\\u003e",
        "&": "\\u0026",
    }
)


def script_json_escape(text: str) -> str:
    """Make JSON text safe to embed in a ``<script>`` element.

    ``< > &`` only occur inside JSON strings, where the ``\\uXXXX`` forms
    parse back to the same characters, so ``</script>`` can never close the
    element early.

    Example:
        >>> script_json_escape('"</script>"')
        '"\\\\u003c/script\\\\u003e"'
    """
    return text.translate(_SCRIPT_JSON_TABLE)
