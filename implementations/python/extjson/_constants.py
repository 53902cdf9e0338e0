"""extjson constants — output literals, integer ranges, and normative limits.

Values here are the single source of truth for the writer, the walker and
the CLI.  Anything that looks like configuration (MAX_DEPTH) can be
overridden per call; everything else is fixed by the canonical format.
"""

from __future__ import annotations

import re
import sys

__format_version__ = "2.0.0"  # canonical Extended JSON v2

# ── Fixed literals ────────────────────────────────────────────
# Kinds without a payload always render to the same bytes.
LIT_NULL = b"null"
LIT_TRUE = b"true"
LIT_FALSE = b"false"
LIT_UNDEFINED = b'{"$undefined":true}'
LIT_MIN_KEY = b'{"$minKey":1}'
LIT_MAX_KEY = b'{"$maxKey":1}'

# ── Integer ranges ────────────────────────────────────────────
# Python ints are arbitrary-precision, so the walker picks the BSON width.
INT32_MIN: int = -(2**31)
INT32_MAX: int = 2**31 - 1
INT64_MIN: int = -(2**63)
INT64_MAX: int = 2**63 - 1

# ── Double range ──────────────────────────────────────────────
# Every finite IEEE-754 double lies inside [DOUBLE_LOWEST, DOUBLE_MAX].
DOUBLE_MAX: float = sys.float_info.max
DOUBLE_LOWEST: float = -sys.float_info.max

# ── Regex flag letters ────────────────────────────────────────
# Alphabetical; canonical output lists options in this order.
REGEX_OPTIONS = (
    (re.IGNORECASE, "i"),
    (re.LOCALE, "l"),
    (re.MULTILINE, "m"),
    (re.DOTALL, "s"),
    (re.UNICODE, "u"),
    (re.VERBOSE, "x"),
)

# ── Safety limits ─────────────────────────────────────────────
# Nesting bound for documents, arrays and code-with-scope scopes.  Each
# level costs a few Python frames, so keep it well under the interpreter
# recursion limit.
MAX_DEPTH: int = 100
