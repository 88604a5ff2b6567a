from typing import Any, Dict, Optional

from bson import ObjectId


def parse_object_id(value: Optional[str]) -> Optional[ObjectId]:
    """Return an ObjectId for a 24-hex string, or None when it is not one."""
    if not value or not ObjectId.is_valid(value):
        return None
    return ObjectId(value)


def with_id(document: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    # Expose the string form of _id for response models
    if document is not None:
        document["id"] = str(document["_id"])
    return document
