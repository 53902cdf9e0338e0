"""extjson — canonical Extended JSON (v2) for BSON values.

Render BSON values as JSON text that keeps their exact type, so a reader
can tell an int32 from an int64, a double, or a string.

Quick start:
    >>> from extjson import dumps
    >>> dumps({"n": 1, "big": 2**40, "x": 1.5, "s": "1"})
    '{"n":{"$numberInt":"1"},"big":{"$numberLong":"1099511627776"},"x":{"$numberDouble":"1.5"},"s":"1"}'

Raw BSON goes through pymongo's decoder first:
    >>> bson_to_canonical(bytes.fromhex("0C000000106100F9FFFFFF00"))
    '{"a":{"$numberInt":"-7"}}'
"""

from __future__ import annotations

from typing import Any, BinaryIO, Iterator, Mapping

import bson
from bson.codec_options import CodecOptions, DatetimeConversion
from bson.errors import InvalidBSON

from ._constants import MAX_DEPTH
from ._core import CANONICAL_WRITER, CanonicalWriter
from ._errors import (
    ERR_BSON,
    ERR_LIMIT_DEPTH,
    ERR_NUMBER,
    ERR_SCHEMA,
    ERR_TYPE,
    ExtJSONError,
)
from ._escape import escape_text
from ._types import UNDEFINED, DBPointer, Symbol
from ._walker import DocumentWalker

__version__ = "1.0.0"

__all__ = [
    # Public API functions
    "dumps",
    "dumps_bytes",
    "dumps_value",
    "bson_to_canonical",
    "iter_canonical",
    "escape_text",
    # Components
    "CanonicalWriter",
    "CANONICAL_WRITER",
    "DocumentWalker",
    # Value types
    "Symbol",
    "DBPointer",
    "UNDEFINED",
    # Exception
    "ExtJSONError",
    # Error codes
    "ERR_NUMBER",
    "ERR_LIMIT_DEPTH",
    "ERR_TYPE",
    "ERR_SCHEMA",
    "ERR_BSON",
    # Limits
    "MAX_DEPTH",
]

# Dates stay raw milliseconds so values outside datetime's range survive.
_CODEC_OPTIONS = CodecOptions(datetime_conversion=DatetimeConversion.DATETIME_MS)


# ── Python documents ──────────────────────────────────────────

def dumps_bytes(doc: Mapping[str, Any], *, max_depth: int = MAX_DEPTH) -> bytes:
    """Return the canonical Extended JSON for a document as UTF-8 bytes."""
    buf = bytearray()
    DocumentWalker(max_depth).write_document(CANONICAL_WRITER, buf, doc)
    return bytes(buf)


def dumps(doc: Mapping[str, Any], *, max_depth: int = MAX_DEPTH) -> str:
    """Return the canonical Extended JSON for a document.

    Field order is preserved as given.  Python values map to BSON kinds
    the same way pymongo encodes them: int → int32 when it fits, else
    int64; bytes → binary subtype 0; datetime → date; and so on.
    """
    return dumps_bytes(doc, max_depth=max_depth).decode("utf-8")


def dumps_value(value: Any, *, max_depth: int = MAX_DEPTH) -> str:
    """Return the canonical Extended JSON for one value outside any document."""
    buf = bytearray()
    DocumentWalker(max_depth).write_value(CANONICAL_WRITER, buf, value, 0)
    return buf.decode("utf-8")


# ── Raw BSON ──────────────────────────────────────────────────

def bson_to_canonical(raw: bytes, *, max_depth: int = MAX_DEPTH) -> str:
    """Decode one raw BSON document and return its canonical Extended JSON.

    pymongo has no Python type for BSON symbol or undefined; those come
    out as a plain string and null.  It also decodes a DBPointer to the
    same DBRef as an ordinary {"$ref", "$id"} document, so both render as
    that document with a tagged $id.
    """
    try:
        doc = bson.decode(raw, codec_options=_CODEC_OPTIONS)
    except InvalidBSON as e:
        raise ExtJSONError(ERR_BSON, "invalid BSON: {}".format(e)) from e
    return dumps(doc, max_depth=max_depth)


def iter_canonical(stream: BinaryIO, *, max_depth: int = MAX_DEPTH) -> Iterator[str]:
    """Yield one canonical line per document from a stream of BSON documents.

    This is the dump-file case: documents laid end to end with no framing
    beyond their own length prefixes.
    """
    walker = DocumentWalker(max_depth)
    docs = bson.decode_file_iter(stream, codec_options=_CODEC_OPTIONS)
    while True:
        try:
            doc = next(docs)
        except StopIteration:
            return
        except InvalidBSON as e:
            raise ExtJSONError(ERR_BSON, "invalid BSON: {}".format(e)) from e
        buf = bytearray()
        walker.write_document(CANONICAL_WRITER, buf, doc)
        yield buf.decode("utf-8")
