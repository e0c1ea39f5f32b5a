"""
DocSeal Configuration Module

Provides:
- ``EncryptorConfig``: the immutable configuration an encryptor owns
- ``DocSealSettings``: environment loading (DS_ prefix) via pydantic-settings

Environment Variable Naming Convention:
- All variables use the DS_ prefix (e.g., DS_PRIMARY_KEY, DS_MAX_DEPTH)
- Keys are 32 raw bytes given as 64 hex characters or base64
"""

import base64
import binascii
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..crypto.aead import validate_key
from ..documents.codec import CodecVersion
from ..documents.transform import DEFAULT_MAX_DEPTH
from ..errors import ConfigMissingError, ConfigurationError


@dataclass(frozen=True)
class EncryptorConfig:
    """Key material and limits for one DocumentEncryptor. Validated on construction."""

    primary_key: bytes
    deterministic_key: bytes
    max_depth: int = DEFAULT_MAX_DEPTH
    codec_version: CodecVersion = CodecVersion.V1
    compress: bool = True

    def __post_init__(self):
        object.__setattr__(self, "primary_key", validate_key("primary_key", self.primary_key))
        object.__setattr__(self, "deterministic_key", validate_key("deterministic_key", self.deterministic_key))

        if isinstance(self.max_depth, bool) or not isinstance(self.max_depth, int) or self.max_depth < 1:
            raise ConfigurationError("max_depth", "must be a positive integer")
        try:
            object.__setattr__(self, "codec_version", CodecVersion(self.codec_version))
        except ValueError:
            raise ConfigurationError("codec_version", f"unknown codec version {self.codec_version!r}") from None

    def __repr__(self) -> str:
        return (
            f"EncryptorConfig(max_depth={self.max_depth}, "
            f"codec_version={self.codec_version.name}, compress={self.compress})"
        )


def decode_key(name: str, raw: str) -> bytes:
    """Decode a key given as hex (64 chars) or base64 into raw bytes."""
    text = raw.strip()
    if len(text) == 64:
        try:
            return validate_key(name, bytes.fromhex(text))
        except ValueError:
            pass
    try:
        decoded = base64.b64decode(text, validate=True)
    except binascii.Error:
        try:
            decoded = base64.urlsafe_b64decode(text)
        except binascii.Error:
            raise ConfigurationError(name, "key is neither hex nor base64") from None
    return validate_key(name, decoded)


class DocSealSettings(BaseSettings):
    """
    DocSeal settings.

    Loads from environment variables with DS_ prefix.

    Usage:
        from docseal.utils.config import get_settings

        config = get_settings().to_encryptor_config()
    """

    model_config = SettingsConfigDict(
        env_prefix="DS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ==========================================================================
    # GENERAL
    # ==========================================================================
    ENVIRONMENT: str = Field(default="development", description="Runtime environment: development, staging, production")
    LOG_LEVEL: str = Field(default="INFO", description="Logging level: DEBUG, INFO, WARNING, ERROR")

    # ==========================================================================
    # KEYS
    # ==========================================================================
    PRIMARY_KEY: Optional[str] = Field(default=None, description="32-byte primary key, hex or base64")
    DETERMINISTIC_KEY: Optional[str] = Field(default=None, description="32-byte deterministic key, hex or base64")

    # ==========================================================================
    # DOCUMENTS
    # ==========================================================================
    MAX_DEPTH: int = Field(default=DEFAULT_MAX_DEPTH, description="Maximum container nesting depth")
    CODEC_VERSION: int = Field(default=int(CodecVersion.V1), description="Leaf codec grammar: 1 (interoperable) or 2 (tagged text)")
    COMPRESS: bool = Field(default=True, description="Deflate plaintexts longer than 140 bytes before encryption")

    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.ENVIRONMENT.lower() == "production"

    def to_encryptor_config(self) -> EncryptorConfig:
        """
        Build the immutable encryptor configuration.

        Raises:
            ConfigMissingError: If a key is not set
            ConfigurationError: If a key cannot be decoded or a limit is invalid
        """
        if not self.PRIMARY_KEY:
            raise ConfigMissingError("primary_key", env_var="DS_PRIMARY_KEY")
        if not self.DETERMINISTIC_KEY:
            raise ConfigMissingError("deterministic_key", env_var="DS_DETERMINISTIC_KEY")

        return EncryptorConfig(
            primary_key=decode_key("primary_key", self.PRIMARY_KEY),
            deterministic_key=decode_key("deterministic_key", self.DETERMINISTIC_KEY),
            max_depth=self.MAX_DEPTH,
            codec_version=self.CODEC_VERSION,
            compress=self.COMPRESS,
        )


@lru_cache(maxsize=1)
def get_settings() -> DocSealSettings:
    """Process-wide settings, read once from the environment."""
    return DocSealSettings()
