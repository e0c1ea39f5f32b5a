"""
DocSeal: Queryable Encryption for JSON Documents

Structure-preserving, deterministic encryption of semi-structured documents:
- Every scalar leaf encrypted in place with AES-256-GCM, container shape kept
- Type-tagged leaves so integers, floats and booleans survive the round trip
- Whole-document signature binding the encrypted message against tampering
- Query values byte-identical to stored leaves for equality/IN/contains lookups
"""

__version__ = "1.0.0"

from .documents.codec import CodecVersion
from .documents.encryptor import DocumentEncryptor, EncryptedDocument
from .errors import (
    ConfigMissingError,
    ConfigurationError,
    DecryptionError,
    DocSealError,
    DocumentDepthError,
    DocumentFormatError,
    InvalidSignatureError,
    UnsupportedValueError,
)
from .utils.config import DocSealSettings, EncryptorConfig

__all__ = [
    "__version__",
    "CodecVersion",
    "DocumentEncryptor",
    "EncryptedDocument",
    "EncryptorConfig",
    "DocSealSettings",
    "DocSealError",
    "ConfigurationError",
    "ConfigMissingError",
    "DecryptionError",
    "InvalidSignatureError",
    "DocumentFormatError",
    "DocumentDepthError",
    "UnsupportedValueError",
]
