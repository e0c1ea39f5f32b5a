"""
Canonical serialization for document signatures.

The canonical format ensures:
1. Deterministic ordering of mapping keys
2. No whitespace variations
3. ASCII-only output, so the string is byte-stable across transports

Mapping key order does not affect the result; any change to a key, a leaf,
a sequence or the nesting does.
"""

import hmac
import json
from typing import Any


def canonical_json(data: Any) -> str:
    """
    Convert data to canonical JSON string.

    Args:
        data: Data to serialize (dict, list, or primitive)

    Returns:
        Canonical JSON string with sorted keys and no extra whitespace

    Raises:
        ValueError: For NaN or infinite floats, which have no JSON form
    """
    return json.dumps(
        data,
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=True,
        allow_nan=False,
    )


def canonical_equals(expected: str, actual: str) -> bool:
    """Constant-time comparison of two canonical strings."""
    return hmac.compare_digest(expected.encode("utf-8"), actual.encode("utf-8"))
