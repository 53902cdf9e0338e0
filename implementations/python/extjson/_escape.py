"""String escaping shared by every string-bearing kind.

One escaper for strings, symbols, code, regex pattern/options, DBRef
collection names and field names, so the whole output obeys a single
escaping contract:

    "  \\  \\b \\f \\n \\r \\t   → short escapes
    other U+0000–U+001F         → \\u00xx
    lone surrogates             → U+FFFD
    everything else             → passed through as UTF-8

Lone surrogates can't be encoded as UTF-8 at all, and a \\uXXXX escape of
one decodes back to the same unencodable code point.  They become U+FFFD,
the same replacement character that invalid UTF-8 in raw bytes gets.
"""

from __future__ import annotations

import re
from typing import Union

_ESCAPE = re.compile(r'[\x00-\x1f\\"\ud800-\udfff]')

_ESCAPE_DCT = {
    "\\": "\\\\",
    '"': '\\"',
    "\b": "\\b",
    "\f": "\\f",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
}


def _replace(match: "re.Match[str]") -> str:
    ch = match.group(0)
    try:
        return _ESCAPE_DCT[ch]
    except KeyError:
        if "\ud800" <= ch <= "\udfff":
            return "\ufffd"
        return "\\u{0:04x}".format(ord(ch))


def escape_text(text: Union[str, bytes]) -> str:
    """Return `text` escaped for embedding between JSON double quotes."""
    if isinstance(text, (bytes, bytearray, memoryview)):
        text = bytes(text).decode("utf-8", errors="replace")
    return _ESCAPE.sub(_replace, text)


def append_escaped(buf: bytearray, text: Union[str, bytes]) -> None:
    """Append the escaped form of `text` to `buf` as UTF-8."""
    buf += escape_text(text).encode("utf-8")
