"""Escaping for content inlined into HTML ``<script>`` and ``<style>`` elements.

The HTML tokenizer ends a script or style element at the first ``</script`` or
``</style`` (any case), whatever the JS/CSS around it means. These helpers
rewrite just those sequences into forms the JS/CSS parser reads identically.
"""

import json
import re
from typing import Any

__all__: list[str] = [
    "escape_css_content_to_inline",
    "escape_js_content_to_inline",
    "escape_js_string_literal",
    "stringify_for_json_script",
]

_SCRIPT_CLOSE_RE: re.Pattern[str] = re.compile(r"</(script)", re.IGNORECASE)
_STYLE_CLOSE_RE: re.Pattern[str] = re.compile(r"</(style)", re.IGNORECASE)

# JS string escapes; "$" is escaped so "${" cannot open a template substitution.
_JS_STRING_ESCAPES: dict[str, str] = {
    "\\": "\\\\",
    '"': '\\"',
    "'": "\\'",
    "`": "\\`",
    "$": "\\$",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\b": "\\b",
    "\f": "\\f",
    "\v": "\\v",
    "\u2028": "\\u2028",
    "\u2029": "\\u2029",
}

_JSON_SCRIPT_ESCAPES: dict[str, str] = {
    "<": "\\u003c",
    ">": "\\u003e",
    "&": "\\u0026",
    "\u2028": "\\u2028",
    "\u2029": "\\u2029",
}
_JSON_SCRIPT_RE: re.Pattern[str] = re.compile("[<>&\u2028\u2029]")


def escape_js_content_to_inline(text: str) -> str:
    """Make JS source safe to place verbatim inside a ``<script>`` element.

    ``</script`` becomes ``<\\/script`` (tag-name case preserved) and ``<!--``
    becomes ``<\\!--``. Inside JS strings, template literals, and comments,
    where these sequences can legitimately appear, both forms mean the same.

    :param text: JS source.
    :returns: Escaped JS source.
    """

    text = _SCRIPT_CLOSE_RE.sub(r"<\\/\1", text)
    return text.replace("<!--", "<\\!--")


def escape_js_string_literal(text: str) -> str:
    """Escape text for use as the body of a quoted JS string or template literal.

    :param text: Arbitrary text.
    :returns: Literal body (without surrounding quotes), safe inside ``<script>``.
    """

    parts: list[str] = []
    for ch in text:
        escaped: str | None = _JS_STRING_ESCAPES.get(ch)
        if escaped is not None:
            parts.append(escaped)
        elif ord(ch) < 0x20 or ord(ch) == 0x7F:
            parts.append(f"\\x{ord(ch):02x}")
        else:
            parts.append(ch)
    return escape_js_content_to_inline("".join(parts))


def escape_css_content_to_inline(text: str) -> str:
    """Make a stylesheet safe to place verbatim inside a ``<style>`` element.

    :param text: CSS source.
    :returns: CSS with every ``</style`` rewritten as ``<\\/style``.
    """

    return _STYLE_CLOSE_RE.sub(r"<\\/\1", text)


def stringify_for_json_script(value: Any) -> str:
    """Serialize ``value`` as JSON that can sit inside ``<script type="application/json">``.

    ``<``, ``>``, ``&`` and the JS line terminators U+2028/U+2029 are written as
    ``\\uXXXX`` escapes, so the output never contains a raw ``<`` and still
    parses back to ``value`` with any JSON parser.

    :param value: JSON-serializable value.
    :returns: JSON text.
    :raises ValueError: If ``value`` contains NaN or infinite floats.
    :raises TypeError: If ``value`` is not JSON-serializable.
    """

    raw: str = json.dumps(value, ensure_ascii=False, allow_nan=False, separators=(",", ":"))
    return _JSON_SCRIPT_RE.sub(lambda m: _JSON_SCRIPT_ESCAPES[m.group(0)], raw)
