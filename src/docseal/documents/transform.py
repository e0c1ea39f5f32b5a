"""
Shape-preserving traversal of JSON-like documents.

``deep_transform`` walks mappings and sequences, hands every terminal value
(null included) to a leaf function, and rebuilds an isomorphic structure from
the results. The input is never mutated. The same traversal serves both the
encrypt and decrypt directions.
"""

from collections.abc import Mapping, Sequence
from typing import Any, Callable

from ..errors import DocumentDepthError, UnsupportedValueError

DEFAULT_MAX_DEPTH = 100

LeafFn = Callable[[Any], Any]


def is_mapping(value: Any) -> bool:
    return isinstance(value, Mapping)


def is_sequence(value: Any) -> bool:
    """Sequences are containers; text and byte strings are not."""
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray))


def deep_transform(document: Any, leaf_fn: LeafFn, max_depth: int = DEFAULT_MAX_DEPTH) -> Any:
    """
    Rebuild ``document`` with every leaf replaced by ``leaf_fn(leaf)``.

    Args:
        document: Mapping, sequence or scalar, nested to any depth
        leaf_fn: Applied to each non-container value; its result is used verbatim
        max_depth: Maximum number of nested containers

    Returns:
        New structure: dicts for mappings (keys and order kept), lists for sequences

    Raises:
        DocumentDepthError: If containers nest deeper than ``max_depth``
        UnsupportedValueError: If a mapping key is not text
    """
    return _transform(document, leaf_fn, max_depth, 0)


def _transform(node: Any, leaf_fn: LeafFn, max_depth: int, depth: int) -> Any:
    if is_mapping(node):
        if depth >= max_depth:
            raise DocumentDepthError(max_depth)
        result = {}
        for key, value in node.items():
            if not isinstance(key, str):
                raise UnsupportedValueError(type(key).__name__, position="key")
            result[key] = _transform(value, leaf_fn, max_depth, depth + 1)
        return result

    if is_sequence(node):
        if depth >= max_depth:
            raise DocumentDepthError(max_depth)
        return [_transform(item, leaf_fn, max_depth, depth + 1) for item in node]

    return leaf_fn(node)

