"""
Query-value preparation for predicates over encrypted documents.

Predicate builders (SQL or otherwise) live outside this package. They only
need ciphertext that compares equal to what ``DocumentEncryptor.encrypt``
stored, which is what these helpers produce:

- ``encrypt_query_values``: IN-list values
- ``containment_document``: a ``{"message": ...}`` fragment for JSON
  containment (``@>``) predicates
- ``json_path`` / ``extract_path``: path handling for ``#>>``-style lookups
"""

from collections.abc import Mapping
from typing import Any, Iterable, List, Sequence, Union

from .encryptor import MESSAGE_FIELD, DocumentEncryptor
from .transform import deep_transform

PathLike = Union[str, Sequence[str]]


def encrypt_query_values(encryptor: DocumentEncryptor, values: Iterable[Any]) -> List[Any]:
    """Encrypt each value for an IN predicate; None entries stay None."""
    return [encryptor.encrypt_for_query(value) for value in values]


def containment_document(encryptor: DocumentEncryptor, query: Mapping) -> dict:
    """
    Encrypt a partial document for a containment predicate.

    ``{"user": {"name": "John"}}`` becomes
    ``{"message": {"user": {"name": <envelope of "John">}}}``, which a stored
    encrypted record contains whenever its plaintext has that name.
    """
    if not isinstance(query, Mapping):
        raise TypeError(f"containment query must be a mapping, got {type(query).__name__}")
    encrypted = deep_transform(query, encryptor.encrypt_for_query, encryptor.config.max_depth)
    return {MESSAGE_FIELD: encrypted}


def json_path(path: PathLike) -> List[str]:
    """
    Normalize a path to a list of segments.

    Accepts ``"user.profile.name"`` or ``["user", "profile", "name"]``.
    """
    segments = path.split(".") if isinstance(path, str) else [str(segment) for segment in path]
    if not segments or any(segment == "" for segment in segments):
        raise ValueError(f"invalid document path: {path!r}")
    return segments


def extract_path(message: Any, path: PathLike) -> Any:
    """Value stored at ``path`` in an encrypted message, or None if absent."""
    node = message
    for segment in json_path(path):
        if isinstance(node, Mapping):
            if segment not in node:
                return None
            node = node[segment]
        elif isinstance(node, list):
            if not segment.isdigit() or int(segment) >= len(node):
                return None
            node = node[int(segment)]
        else:
            return None
    return node
