from __future__ import annotations

from bson import ObjectId
from bson.errors import InvalidId


def new_id() -> str:
    """Fresh document id, same shape the Mongo driver assigns (24 hex chars)."""
    return str(ObjectId())


def parse_id(raw: str) -> ObjectId | None:
    """Parse a caller-supplied id, or None when it is not a valid ObjectId."""
    try:
        return ObjectId(raw)
    except (InvalidId, TypeError):
        return None
