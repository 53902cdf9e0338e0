"""extjson error codes and exception class.

Every failure aborts the serialization in progress; a truncated canonical
document is useless downstream, so nothing is retried or recovered.
"""

from __future__ import annotations

# ── Error codes ───────────────────────────────────────────────
# Grep-friendly strings; tests and the CLI compare against these.

ERR_NUMBER: str = "ERR_NUMBER"            # double outside the finite range
ERR_LIMIT_DEPTH: str = "ERR_LIMIT_DEPTH"  # nested deeper than max_depth
ERR_TYPE: str = "ERR_TYPE"                # value has no BSON kind
ERR_SCHEMA: str = "ERR_SCHEMA"            # bad shape (non-string field name)
ERR_BSON: str = "ERR_BSON"                # input bytes are not valid BSON


class ExtJSONError(Exception):
    """Exception for canonical Extended JSON emission errors.

    The `.code` attribute is one of the ERR_* strings above.
    """

    def __init__(self, code: str, msg: str = "") -> None:
        super().__init__(msg or code)
        self.code = code
