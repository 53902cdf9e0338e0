"""extjson document walker — maps Python/BSON values onto writer calls.

The walker owns traversal: field order, separators, and nesting depth.
It hands every leaf value to the writer method for its BSON kind.  The
writer calls back into `write_document` for a code-with-scope scope, which
is the one place the recursion crosses from writer to walker.

Depth semantics:
  - The root document is depth 0.
  - Every nested document, array, or scope is depth + 1.
  - A container deeper than max_depth raises ERR_LIMIT_DEPTH before any
    of its bytes are written.
"""

from __future__ import annotations

import datetime
import re
import uuid
from collections.abc import Mapping
from typing import Any, Iterable

from bson.binary import Binary
from bson.code import Code
from bson.datetime_ms import DatetimeMS
from bson.dbref import DBRef
from bson.decimal128 import Decimal128
from bson.int64 import Int64
from bson.max_key import MaxKey
from bson.min_key import MinKey
from bson.objectid import ObjectId
from bson.regex import Regex
from bson.timestamp import Timestamp

from ._constants import (
    INT32_MAX,
    INT32_MIN,
    INT64_MAX,
    INT64_MIN,
    MAX_DEPTH,
    REGEX_OPTIONS,
)
from ._core import CanonicalWriter
from ._errors import ERR_LIMIT_DEPTH, ERR_SCHEMA, ERR_TYPE, ExtJSONError
from ._escape import append_escaped
from ._types import UNDEFINED, DBPointer, Symbol

_RE_TYPE = type(re.compile(""))  # re.Pattern


def regex_options(flags: int) -> str:
    """Render re flags as the alphabetical option letters BSON stores."""
    return "".join(letter for flag, letter in REGEX_OPTIONS if flags & flag)


class DocumentWalker:
    """Emit whole documents through a CanonicalWriter.

    Holds only its depth bound, so one instance can be shared freely.
    """

    __slots__ = ("max_depth",)

    def __init__(self, max_depth: int = MAX_DEPTH) -> None:
        self.max_depth = max_depth

    def _check_depth(self, depth: int) -> None:
        if depth > self.max_depth:
            raise ExtJSONError(
                ERR_LIMIT_DEPTH,
                "document nested deeper than max_depth={}".format(self.max_depth))

    def write_document(self, writer: CanonicalWriter, buf: bytearray,
                       doc: Mapping[str, Any], depth: int = 0) -> None:
        self._check_depth(depth)
        buf += b"{"
        first = True
        for key, value in doc.items():
            if not isinstance(key, str):
                raise ExtJSONError(
                    ERR_SCHEMA,
                    "field name must be a string, not {}".format(type(key).__name__))
            if not first:
                buf += b","
            first = False
            writer.write_padding(buf)
            buf += b'"'
            append_escaped(buf, key)
            buf += b'":'
            self.write_value(writer, buf, value, depth)
        buf += b"}"

    def write_array(self, writer: CanonicalWriter, buf: bytearray,
                    items: Iterable[Any], depth: int) -> None:
        self._check_depth(depth)
        buf += b"["
        first = True
        for item in items:
            if not first:
                buf += b","
            first = False
            writer.write_padding(buf)
            self.write_value(writer, buf, item, depth)
        buf += b"]"

    def write_value(self, writer: CanonicalWriter, buf: bytearray,
                    value: Any, depth: int) -> None:
        """Dispatch one value.  `depth` is that of the enclosing container.

        Order matters: bool and Int64 are int subclasses, Binary is a
        bytes subclass, and Code and Symbol are str subclasses, so each
        subclass is tested before its base.
        """
        if value is None:
            writer.write_null(buf)
        elif value is UNDEFINED:
            writer.write_undefined(buf)
        elif isinstance(value, bool):
            writer.write_bool(buf, value)
        elif isinstance(value, Int64):
            writer.write_int64(buf, value)
        elif isinstance(value, int):
            self._write_int(writer, buf, value)
        elif isinstance(value, float):
            writer.write_double(buf, value)
        elif isinstance(value, Decimal128):
            writer.write_decimal128(buf, value)
        elif isinstance(value, Code):
            if value.scope is not None:
                writer.write_code_with_scope(buf, str(value), value.scope, self, depth)
            else:
                writer.write_code(buf, str(value))
        elif isinstance(value, Symbol):
            writer.write_symbol(buf, str(value))
        elif isinstance(value, str):
            writer.write_string(buf, value)
        elif isinstance(value, ObjectId):
            writer.write_oid(buf, value)
        elif isinstance(value, DBPointer):
            writer.write_dbref(buf, value.collection, value.id)
        elif isinstance(value, DBRef):
            # An ordinary $ref/$id/$db document; $id keeps its own tag.
            self.write_document(writer, buf, value.as_doc(), depth + 1)
        elif isinstance(value, DatetimeMS):
            writer.write_date(buf, int(value))
        elif isinstance(value, datetime.datetime):
            writer.write_date(buf, int(DatetimeMS(value)))
        elif isinstance(value, Timestamp):
            writer.write_timestamp(buf, value)
        elif isinstance(value, Binary):
            writer.write_bindata(buf, bytes(value), value.subtype)
        elif isinstance(value, uuid.UUID):
            binary = Binary.from_uuid(value)
            writer.write_bindata(buf, bytes(binary), binary.subtype)
        elif isinstance(value, (bytes, bytearray, memoryview)):
            writer.write_bindata(buf, bytes(value), 0)
        elif isinstance(value, (Regex, _RE_TYPE)):
            writer.write_regex(buf, value.pattern, regex_options(value.flags))
        elif isinstance(value, MinKey):
            writer.write_min_key(buf)
        elif isinstance(value, MaxKey):
            writer.write_max_key(buf)
        elif isinstance(value, Mapping):
            self.write_document(writer, buf, value, depth + 1)
        elif isinstance(value, (list, tuple)):
            self.write_array(writer, buf, value, depth + 1)
        else:
            raise ExtJSONError(
                ERR_TYPE, "cannot encode object of type {}".format(type(value).__name__))

    @staticmethod
    def _write_int(writer: CanonicalWriter, buf: bytearray, value: int) -> None:
        # Same width rule as the BSON encoder: int32 when it fits.
        if INT32_MIN <= value <= INT32_MAX:
            writer.write_int32(buf, value)
        elif INT64_MIN <= value <= INT64_MAX:
            writer.write_int64(buf, value)
        else:
            raise ExtJSONError(ERR_TYPE, "integer {} outside int64 range".format(value))

