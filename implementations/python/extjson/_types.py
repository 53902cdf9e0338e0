"""BSON kinds that have no distinct Python type in the bson package.

pymongo decodes BSON symbol to str, BSON undefined to None, and DBPointer
to the same DBRef it builds for a {"$ref", "$id"} document.  Code that
wants those kinds rendered as themselves builds values from these types.
"""

from __future__ import annotations

from typing import Any


class Symbol(str):
    """A BSON symbol: text that renders as {"$symbol": ...}."""

    __slots__ = ()

    def __repr__(self) -> str:
        return "Symbol({})".format(str.__repr__(self))


class _UndefinedType:
    """The BSON undefined value.  Use the UNDEFINED singleton."""

    __slots__ = ()
    _instance = None

    def __new__(cls) -> "_UndefinedType":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNDEFINED"

    def __bool__(self) -> bool:
        return False

    def __reduce__(self) -> str:
        return "UNDEFINED"


UNDEFINED = _UndefinedType()


class DBPointer:
    """A BSON DBPointer: collection name plus ObjectId.

    Renders as {"$ref": ..., "$id": "<hex>"}.  An ordinary DBRef document
    ({"$ref": ..., "$id": ObjectId}) is not a DBPointer; bson.dbref.DBRef
    values are written as documents with a tagged $id.
    """

    __slots__ = ("collection", "id")

    def __init__(self, collection: str, id: Any) -> None:
        self.collection = collection
        self.id = id

    def __repr__(self) -> str:
        return "DBPointer({!r}, {!r})".format(self.collection, self.id)

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, DBPointer):
            return (self.collection, self.id) == (other.collection, other.id)
        return NotImplemented

    def __hash__(self) -> int:
        return hash((self.collection, self.id))
