"""extjson core — the canonical Extended JSON writer.

One `write_*` method per BSON kind.  Each method takes the output buffer
and the value's payload, appends the canonical text, and does nothing
else:

    null / undefined / minKey / maxKey   fixed literals
    bool                                 true | false
    int32 / int64 / date                 {"$numberInt"|"$numberLong":"<n>"}
    double / decimal128                  {"$numberDouble"|"$numberDecimal":"<text>"}
    string                               "<escaped>"
    symbol / code                        {"$symbol"|"$code":"<escaped>"}
    oid / dbref                          {"$oid":"<hex>"} / {"$ref":..,"$id":..}
    timestamp / binary / regex           nested tag objects
    code with scope                      {"$code":..,"$scope":<document>}

The writer holds no state.  It never reads the buffer back, and the only
recursion goes through the document walker for code-with-scope, carrying
the caller's depth so the walker can enforce its nesting bound.
"""

from __future__ import annotations

import base64
import math
from typing import TYPE_CHECKING, Any, Mapping, Union

from bson.decimal128 import Decimal128
from bson.objectid import ObjectId
from bson.timestamp import Timestamp

from ._constants import (
    DOUBLE_LOWEST,
    DOUBLE_MAX,
    LIT_FALSE,
    LIT_MAX_KEY,
    LIT_MIN_KEY,
    LIT_NULL,
    LIT_TRUE,
    LIT_UNDEFINED,
)
from ._errors import ERR_NUMBER, ExtJSONError
from ._escape import append_escaped

if TYPE_CHECKING:
    from ._walker import DocumentWalker

Text = Union[str, bytes]


def _ascii(buf: bytearray, text: str) -> None:
    buf += text.encode("ascii")


class CanonicalWriter:
    """Canonical (v2) Extended JSON emitter for single BSON values."""

    __slots__ = ()

    # ── Payload-free kinds ────────────────────────────────────

    def write_null(self, buf: bytearray) -> None:
        buf += LIT_NULL

    def write_undefined(self, buf: bytearray) -> None:
        buf += LIT_UNDEFINED

    def write_min_key(self, buf: bytearray) -> None:
        buf += LIT_MIN_KEY

    def write_max_key(self, buf: bytearray) -> None:
        buf += LIT_MAX_KEY

    def write_padding(self, buf: bytearray) -> None:
        """Whitespace hook between fields.  Canonical output is compact."""

    # ── Scalars ───────────────────────────────────────────────

    def write_bool(self, buf: bytearray, val: bool) -> None:
        buf += LIT_TRUE if val else LIT_FALSE

    def write_int32(self, buf: bytearray, val: int) -> None:
        _ascii(buf, '{{"$numberInt":"{}"}}'.format(int(val)))

    def write_int64(self, buf: bytearray, val: int) -> None:
        _ascii(buf, '{{"$numberLong":"{}"}}'.format(int(val)))

    def write_double(self, buf: bytearray, val: float) -> None:
        """Emit a double.

        Finite values use repr(), which is the shortest text that parses
        back to the same bits ("1.0", "-0.0", "1e+300").  The last branch
        can't be reached for a real float and is kept as an assertion on
        whatever produced the value.
        """
        val = float(val)
        if DOUBLE_LOWEST <= val <= DOUBLE_MAX:
            _ascii(buf, '{{"$numberDouble":"{!r}"}}'.format(val))
        elif math.isnan(val):
            buf += b'{"$numberDouble":"NaN"}'
        elif math.isinf(val):
            if val > 0:
                buf += b'{"$numberDouble":"Infinity"}'
            else:
                buf += b'{"$numberDouble":"-Infinity"}'
        else:
            raise ExtJSONError(
                ERR_NUMBER, "Number {!r} cannot be represented in JSON".format(val))

    def write_decimal128(self, buf: bytearray, val: Decimal128) -> None:
        dec = val.to_decimal()
        if dec.is_nan():
            # Quiet and signalling NaN both render as plain NaN.
            buf += b'{"$numberDecimal":"NaN"}'
        elif dec.is_infinite():
            _ascii(buf, '{{"$numberDecimal":"{}"}}'.format(
                "-Infinity" if dec.is_signed() else "Infinity"))
        else:
            _ascii(buf, '{{"$numberDecimal":"{}"}}'.format(val))

    def write_date(self, buf: bytearray, millis: int) -> None:
        # Milliseconds, not a calendar string: lossless and timezone-free.
        _ascii(buf, '{{"$date":{{"$numberLong":"{}"}}}}'.format(int(millis)))

    def write_timestamp(self, buf: bytearray, val: Timestamp) -> None:
        _ascii(buf, '{{"$timestamp":{{"t":{},"i":{}}}}}'.format(val.time, val.inc))

    # ── Identifiers ───────────────────────────────────────────
    # ObjectId text is 24 hex digits and never needs escaping.

    def write_oid(self, buf: bytearray, val: ObjectId) -> None:
        _ascii(buf, '{{"$oid":"{}"}}'.format(val))

    def write_dbref(self, buf: bytearray, ref: Text, oid: ObjectId) -> None:
        # Collection names can contain control characters.
        buf += b'{"$ref":"'
        append_escaped(buf, ref)
        _ascii(buf, '","$id":"{}"}}'.format(oid))

    # ── Text-bearing kinds ────────────────────────────────────

    def write_string(self, buf: bytearray, val: Text) -> None:
        buf += b'"'
        append_escaped(buf, val)
        buf += b'"'

    def write_symbol(self, buf: bytearray, val: Text) -> None:
        buf += b'{"$symbol":"'
        append_escaped(buf, val)
        buf += b'"}'

    def write_code(self, buf: bytearray, code: Text) -> None:
        buf += b'{"$code":"'
        append_escaped(buf, code)
        buf += b'"}'

    def write_regex(self, buf: bytearray, pattern: Text, options: Text) -> None:
        buf += b'{"$regularExpression":{"pattern":"'
        append_escaped(buf, pattern)
        buf += b'","options":"'
        append_escaped(buf, options)
        buf += b'"}}'

    def write_bindata(self, buf: bytearray, data: bytes, subtype: int) -> None:
        buf += b'{"$binary":{"base64":"'
        buf += base64.b64encode(bytes(data))
        _ascii(buf, '","subType":"{:02x}"}}}}'.format(subtype))

    # ── Recursive kind ────────────────────────────────────────

    def write_code_with_scope(self, buf: bytearray, code: Text,
                              scope: Mapping[str, Any],
                              walker: "DocumentWalker", depth: int) -> None:
        """Emit code with its scope document.

        `depth` is the nesting depth of the document holding this value.
        The scope sits one level below it, and the walker raises
        ERR_LIMIT_DEPTH if that is past its bound.
        """
        buf += b'{"$code":"'
        append_escaped(buf, code)
        buf += b'","$scope":'
        walker.write_document(self, buf, scope, depth + 1)
        buf += b"}"


# Shared instance; the writer has no state, so one is enough for every thread.
CANONICAL_WRITER = CanonicalWriter()
