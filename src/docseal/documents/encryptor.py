"""
Structure-preserving deterministic encryption of JSON-like documents.

``DocumentEncryptor.encrypt`` replaces every non-null scalar leaf with a
deterministic ciphertext envelope and signs the result::

    {"message": <same shape, leaves are envelope strings>,
     "signature": <envelope of canonical_json(message)>}

``decrypt`` verifies the signature before touching any leaf, then restores
the original values and types. ``encrypt_for_query`` yields the exact
envelope a scalar would get as a document leaf, so equality, IN and
array-membership predicates can run against stored ciphertext.
"""

import json
from collections.abc import Mapping
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict

from ..crypto.aead import AeadCipher
from ..errors import (
    DecryptionError,
    DocumentFormatError,
    InvalidSignatureError,
    UnsupportedValueError,
)
from ..logging import get_logger
from ..utils.config import DocSealSettings, EncryptorConfig, get_settings
from .canonical import canonical_equals, canonical_json
from .codec import CodecVersion, PrimitiveCodec, is_scalar
from .transform import DEFAULT_MAX_DEPTH, deep_transform

logger = get_logger(__name__)

MESSAGE_FIELD = "message"
SIGNATURE_FIELD = "signature"


class EncryptedDocument(BaseModel):
    """Persisted form of an encrypted document."""

    model_config = ConfigDict(frozen=True)

    message: Any
    signature: str

    def to_dict(self) -> dict:
        return {MESSAGE_FIELD: self.message, SIGNATURE_FIELD: self.signature}

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), separators=(",", ":"))

    @classmethod
    def from_json(cls, text: Union[str, bytes]) -> "EncryptedDocument":
        return cls.from_mapping(json.loads(text))

    @classmethod
    def from_mapping(cls, data: Any) -> "EncryptedDocument":
        if not isinstance(data, Mapping):
            raise DocumentFormatError(f"expected an object, got {type(data).__name__}")
        if MESSAGE_FIELD not in data:
            raise DocumentFormatError("missing 'message'")
        signature = data.get(SIGNATURE_FIELD)
        if not isinstance(signature, str) or not signature:
            raise InvalidSignatureError("signature is missing")
        return cls(message=data[MESSAGE_FIELD], signature=signature)


class DocumentEncryptor:
    """
    Encrypts and decrypts whole documents under one fixed key pair.

    The instance holds only immutable key material, so it can be shared
    across threads.

    Usage:
        encryptor = DocumentEncryptor(primary_key, deterministic_key)
        sealed = encryptor.encrypt({"age": 30})
        encryptor.decrypt(sealed)  # {"age": 30}
    """

    def __init__(
        self,
        primary_key: bytes,
        deterministic_key: bytes,
        *,
        max_depth: int = DEFAULT_MAX_DEPTH,
        codec_version: CodecVersion = CodecVersion.V1,
        compress: bool = True,
    ):
        self._init_from_config(
            EncryptorConfig(
                primary_key=primary_key,
                deterministic_key=deterministic_key,
                max_depth=max_depth,
                codec_version=codec_version,
                compress=compress,
            )
        )

    @classmethod
    def from_config(cls, config: EncryptorConfig) -> "DocumentEncryptor":
        instance = cls.__new__(cls)
        instance._init_from_config(config)
        return instance

    @classmethod
    def from_settings(cls, settings: Optional[DocSealSettings] = None) -> "DocumentEncryptor":
        """Build an encryptor from DS_* environment settings."""
        settings = settings or get_settings()
        return cls.from_config(settings.to_encryptor_config())

    def _init_from_config(self, config: EncryptorConfig) -> None:
        self.config = config
        self._cipher = AeadCipher(config.primary_key, config.deterministic_key, compress=config.compress)
        self._codec = PrimitiveCodec(config.codec_version)

    def __repr__(self) -> str:
        return f"DocumentEncryptor({self.config!r})"

    # ------------------------------------------------------------------
    # Encrypt
    # ------------------------------------------------------------------

    def encrypt(self, document: Any) -> Optional[EncryptedDocument]:
        """
        Encrypt every non-null scalar leaf and sign the result.

        Returns:
            EncryptedDocument, or None when ``document`` is None

        Raises:
            UnsupportedValueError: A leaf or key outside the JSON value model
            DocumentDepthError: Nesting deeper than the configured maximum
        """
        if document is None:
            return None

        leaf_count = 0

        def encrypt_leaf(value: Any) -> Any:
            nonlocal leaf_count
            if value is None:
                return None
            leaf_count += 1
            return self._encrypt_scalar(value)

        message = deep_transform(document, encrypt_leaf, self.config.max_depth)
        serialized = canonical_json(message)
        signature = self._cipher.encrypt(serialized, deterministic=True)

        logger.debug(
            "Encrypted document",
            extra={"leaf_count": leaf_count, "message_bytes": len(serialized)},
        )
        return EncryptedDocument(message=message, signature=signature)

    def encrypt_for_query(self, value: Any) -> Optional[str]:
        """
        Deterministic envelope for one scalar, identical to its document-leaf form.

        Returns:
            Envelope text, or None when ``value`` is None
        """
        if value is None:
            return None
        return self._encrypt_scalar(value)

    def _encrypt_scalar(self, value: Any) -> str:
        if not is_scalar(value):
            raise UnsupportedValueError(type(value).__name__)
        return self._cipher.encrypt(self._codec.encode(value), deterministic=True)

    # ------------------------------------------------------------------
    # Decrypt
    # ------------------------------------------------------------------

    def decrypt(self, encrypted: Union[EncryptedDocument, Mapping, str, bytes, None]) -> Any:
        """
        Verify the signature, then decrypt every leaf back to its original type.

        Args:
            encrypted: EncryptedDocument, a {"message", "signature"} mapping, or its JSON text

        Returns:
            The original document, or None when ``encrypted`` is None

        Raises:
            InvalidSignatureError: Signature missing, undecryptable or not matching
            DecryptionError: A leaf envelope failed authentication
            DocumentFormatError: Input is not an encrypted document record
        """
        if encrypted is None:
            return None

        record = self._coerce(encrypted)
        self._verify_signature(record)

        def decrypt_leaf(value: Any) -> Any:
            if not isinstance(value, str):
                return value
            return self._codec.decode(self._cipher.decrypt(value))

        return deep_transform(record.message, decrypt_leaf, self.config.max_depth)

    def verify(self, encrypted: Union[EncryptedDocument, Mapping, str, bytes]) -> bool:
        """True if the signature matches the message; leaves are not decrypted."""
        try:
            self._verify_signature(self._coerce(encrypted))
        except InvalidSignatureError:
            return False
        return True

    @staticmethod
    def _coerce(encrypted: Union[EncryptedDocument, Mapping, str, bytes]) -> EncryptedDocument:
        if isinstance(encrypted, EncryptedDocument):
            return encrypted
        if isinstance(encrypted, (str, bytes, bytearray)):
            return EncryptedDocument.from_json(encrypted)
        return EncryptedDocument.from_mapping(encrypted)

    def _verify_signature(self, record: EncryptedDocument) -> None:
        try:
            expected = self._cipher.decrypt(record.signature)
        except DecryptionError:
            logger.warning("Document signature failed authentication")
            raise InvalidSignatureError("signature failed authentication") from None

        try:
            actual = canonical_json(record.message)
        except (TypeError, ValueError):
            raise InvalidSignatureError("message is not serializable") from None

        if not canonical_equals(expected, actual):
            logger.warning("Document signature does not match message")
            raise InvalidSignatureError()


__all__ = [
    "DocumentEncryptor",
    "EncryptedDocument",
]
