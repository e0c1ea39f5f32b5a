"""
Document layer: leaf codec, traversal and canonical form.

The encryptor itself lives in ``docseal.documents.encryptor``.
"""

from .codec import CodecVersion, PrimitiveCodec, TypeTag
from .transform import DEFAULT_MAX_DEPTH, deep_transform

__all__ = [
    "CodecVersion",
    "PrimitiveCodec",
    "TypeTag",
    "DEFAULT_MAX_DEPTH",
    "deep_transform",
]
