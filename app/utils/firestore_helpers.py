"""
Firestore query helpers shared by the services.

NOTE: For firebase_admin SDK, we use positional arguments which still work.
The deprecation warning is just a warning - the functionality is still supported.
"""

from datetime import datetime, timezone
from typing import Any, Dict, Optional

# Highest code point in the Basic Multilingual Plane's private use area;
# name <= prefix + sentinel bounds a prefix range query.
PREFIX_SENTINEL = "\uf8ff"


def where_filter(query, field_path: str, op_string: str, value):
    """
    Helper function for Firestore queries.

    Usage:
        query = where_filter(collection, "userId", "==", uid)
        query = where_filter(query, "state", "==", "Lagos")
    """
    return query.where(field_path, op_string, value)


def prefix_filter(query, field_path: str, prefix: str):
    """Restrict a query to documents whose string field starts with prefix."""
    query = where_filter(query, field_path, ">=", prefix)
    return where_filter(query, field_path, "<=", prefix + PREFIX_SENTINEL)


def snapshot_to_dict(doc) -> Optional[Dict[str, Any]]:
    """Document data with the document id under "id", or None if missing."""
    data = doc.to_dict()
    if data is None:
        return None
    data["id"] = doc.id
    return data


def utc_now_iso() -> str:
    """Creation timestamps are stored as ISO-8601 strings, like the web client writes them."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")
