"""
AEAD adapter over AES-256-GCM.

Two modes share one adapter:

- deterministic: encrypted under the deterministic key with a synthetic IV,
  HMAC-SHA256(deterministic key, input) truncated to 96 bits. Equal plaintexts
  give byte-identical envelopes, which is what makes stored values queryable.
- randomized: encrypted under the primary key with a fresh random IV.

``AESGCM`` holds no per-call state, so one adapter may be shared between
threads.
"""

import hashlib
import hmac
import secrets
import zlib

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from ..errors import ConfigurationError, DecryptionError
from ..logging import get_logger
from .envelope import Envelope

logger = get_logger(__name__)

KEY_LENGTH = 32
IV_LENGTH = 12
TAG_LENGTH = 16
COMPRESSION_THRESHOLD = 140


def validate_key(name: str, key: bytes) -> bytes:
    """Return ``key`` if it is exactly 32 bytes, else raise ConfigurationError."""
    if key is None:
        raise ConfigurationError(name, "key is missing")
    if not isinstance(key, (bytes, bytearray)):
        raise ConfigurationError(name, f"key must be bytes, got {type(key).__name__}")
    if len(key) != KEY_LENGTH:
        raise ConfigurationError(name, f"key must be {KEY_LENGTH} bytes, got {len(key)}")
    return bytes(key)


class AeadCipher:
    """Encrypts text into envelope strings and back."""

    def __init__(self, primary_key: bytes, deterministic_key: bytes, compress: bool = True):
        primary_key = validate_key("primary_key", primary_key)
        deterministic_key = validate_key("deterministic_key", deterministic_key)

        self._primary = AESGCM(primary_key)
        self._deterministic = AESGCM(deterministic_key)
        self._iv_key = deterministic_key
        self.compress = compress

    def encrypt(self, plaintext: str, deterministic: bool = True) -> str:
        """Encrypt ``plaintext`` and return the envelope text."""
        data = plaintext.encode("utf-8")
        data, compressed = self._maybe_compress(data)

        if deterministic:
            aead = self._deterministic
            iv = hmac.new(self._iv_key, data, hashlib.sha256).digest()[:IV_LENGTH]
        else:
            aead = self._primary
            iv = secrets.token_bytes(IV_LENGTH)

        sealed = aead.encrypt(iv, data, None)
        envelope = Envelope(
            payload=sealed[:-TAG_LENGTH],
            iv=iv,
            auth_tag=sealed[-TAG_LENGTH:],
            compressed=compressed,
        )
        return envelope.to_string()

    def decrypt(self, envelope_text: str) -> str:
        """
        Decrypt an envelope produced by either mode.

        Raises:
            DecryptionError: Malformed envelope, or authentication failed under both keys
        """
        envelope = Envelope.from_string(envelope_text)
        if len(envelope.iv) != IV_LENGTH or len(envelope.auth_tag) != TAG_LENGTH:
            raise DecryptionError("envelope IV or tag has the wrong length")

        sealed = envelope.payload + envelope.auth_tag
        for aead in (self._deterministic, self._primary):
            try:
                data = aead.decrypt(envelope.iv, sealed, None)
                break
            except InvalidTag:
                continue
        else:
            logger.debug("Envelope failed authentication under all keys")
            raise DecryptionError()

        if envelope.compressed:
            try:
                data = zlib.decompress(data)
            except zlib.error:
                raise DecryptionError("compressed payload is corrupt") from None

        try:
            return data.decode("utf-8")
        except UnicodeDecodeError:
            raise DecryptionError("plaintext is not valid UTF-8") from None

    def _maybe_compress(self, data: bytes):
        if not self.compress or len(data) <= COMPRESSION_THRESHOLD:
            return data, False
        deflated = zlib.compress(data)
        if len(deflated) < len(data):
            return deflated, True
        return data, False
