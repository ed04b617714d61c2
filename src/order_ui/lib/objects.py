"""
Object utilities for fingerprinting and JSON serialization.

Snapshots handed to the view layer are compared by fingerprint: a stable
SHA-256 digest of their JSON form. Two snapshots with the same fingerprint
carry identical data, which is how callers check that a failed operation
left resident state untouched.
"""

import hashlib
import json
from dataclasses import asdict, is_dataclass
from datetime import date, datetime
from enum import Enum
from typing import Any


def fingerprint(obj: Any) -> str:
    """
    Return a stable hexadecimal digest of an object.

    Objects are serialized to JSON with sorted keys before hashing so the
    result is identical across Python sessions.

    Args:
        obj: A dataclass, mapping, sequence or scalar.

    Returns:
        SHA-256 hex digest.
    """
    payload = to_json(obj, sort_keys=True)
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()


def to_json(obj: Any, indent: int | None = None, sort_keys: bool = False) -> str:
    """
    Serialize an object to a JSON string.

    Handles dataclasses by converting them to dictionaries first.

    Args:
        obj: Object to serialize.
        indent: Optional indentation for pretty printing.
        sort_keys: Sort mapping keys for a canonical form.

    Returns:
        JSON string representation.
    """
    if is_dataclass(obj) and not isinstance(obj, type):
        obj = asdict(obj)
    return json.dumps(
        obj, default=_default_serializer, indent=indent, sort_keys=sort_keys
    )


def _default_serializer(obj: Any) -> Any:
    """Return a JSON-compatible representation for non-native types."""
    if is_dataclass(obj) and not isinstance(obj, type):
        return asdict(obj)
    if isinstance(obj, (datetime, date)):
        return obj.isoformat()
    if isinstance(obj, Enum):
        return obj.value
    if isinstance(obj, (set, frozenset)):
        return sorted(obj)
    if hasattr(obj, "to_dict"):
        return obj.to_dict()
    return str(obj)
