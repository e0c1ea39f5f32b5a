"""
DocSeal Unified Error Taxonomy.

This module provides a centralized error hierarchy for all DocSeal components.
All errors include:
- Machine-readable error codes
- Structured details (never sensitive data)
- Request ID correlation for tracing

Error Code Naming Convention:
- DS_<COMPONENT>_<SPECIFIC>
- Components: CONFIG, CRYPTO, DOC

Security:
- NEVER include keys, plaintext leaves or ciphertext payloads in error messages
- Errors should be safe to log and return to clients
"""

from typing import Any, Dict, Optional


class DocSealError(Exception):
    """Base exception for all DocSeal errors.

    All DocSeal errors include:
    - code: Machine-readable error code (e.g., DS_CRYPTO_DECRYPT_FAILED)
    - message: Human-readable description
    - details: Structured metadata (NEVER include sensitive data)
    - request_id: Optional correlation ID for distributed tracing
    """

    def __init__(
        self,
        message: str,
        code: str = "DS_INTERNAL_ERROR",
        details: Optional[Dict[str, Any]] = None,
        request_id: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}
        self.request_id = request_id

    def __str__(self) -> str:
        parts = [f"[{self.code}] {self.message}"]
        if self.request_id:
            parts.append(f"(request_id: {self.request_id})")
        return " ".join(parts)

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary for JSON serialization."""
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details,
            "request_id": self.request_id,
        }


# =============================================================================
# Configuration Errors (DS_CONFIG_*)
# =============================================================================


class ConfigurationError(DocSealError):
    """Raised when key material or encryptor limits are invalid."""

    def __init__(
        self,
        config_key: str,
        reason: str,
        request_id: Optional[str] = None,
        code: str = "DS_CONFIG_INVALID",
    ):
        super().__init__(
            message=f"Invalid configuration for {config_key}: {reason}",
            code=code,
            details={"config_key": config_key},
            request_id=request_id,
        )
        self.config_key = config_key


class ConfigMissingError(ConfigurationError):
    """Raised when required configuration is missing."""

    def __init__(
        self,
        config_key: str,
        env_var: Optional[str] = None,
        request_id: Optional[str] = None,
    ):
        reason = "value is missing"
        if env_var:
            reason += f" (set {env_var})"
        super().__init__(
            config_key=config_key,
            reason=reason,
            request_id=request_id,
            code="DS_CONFIG_MISSING",
        )
        if env_var:
            self.details["env_var"] = env_var


# =============================================================================
# Cryptography Errors (DS_CRYPTO_*)
# =============================================================================


class CryptoError(DocSealError):
    """Base class for cryptography errors."""

    pass


class DecryptionError(CryptoError):
    """Raised when authenticated decryption fails (tamper detected)."""

    def __init__(
        self,
        reason: str = "Authentication tag verification failed",
        algorithm: Optional[str] = "AES-256-GCM",
        request_id: Optional[str] = None,
    ):
        super().__init__(
            message=f"Decryption failed: {reason}",
            code="DS_CRYPTO_DECRYPT_FAILED",
            details={"algorithm": algorithm} if algorithm else {},
            request_id=request_id,
        )


# =============================================================================
# Document Errors (DS_DOC_*)
# =============================================================================


class DocumentError(DocSealError):
    """Base class for document structure and integrity errors."""

    pass


class InvalidSignatureError(DocumentError):
    """Raised when an encrypted document fails whole-document tamper detection."""

    def __init__(
        self,
        reason: str = "signature does not match message",
        request_id: Optional[str] = None,
    ):
        super().__init__(
            message=f"Invalid document signature: {reason}",
            code="DS_DOC_INVALID_SIGNATURE",
            request_id=request_id,
        )


class DocumentFormatError(DocumentError):
    """Raised when an encrypted document record is structurally invalid."""

    def __init__(
        self,
        reason: str,
        request_id: Optional[str] = None,
    ):
        super().__init__(
            message=f"Invalid encrypted document: {reason}",
            code="DS_DOC_FORMAT_ERROR",
            request_id=request_id,
        )


class UnsupportedValueError(DocumentError):
    """Raised when a document holds a value outside the JSON value model."""

    def __init__(
        self,
        value_type: str,
        position: str = "leaf",
        request_id: Optional[str] = None,
    ):
        super().__init__(
            message=f"Unsupported document {position} type: {value_type}",
            code="DS_DOC_UNSUPPORTED_VALUE",
            details={"value_type": value_type, "position": position},
            request_id=request_id,
        )


class DocumentDepthError(DocumentError):
    """Raised when container nesting exceeds the configured maximum depth."""

    def __init__(
        self,
        max_depth: int,
        request_id: Optional[str] = None,
    ):
        super().__init__(
            message=f"Document nesting exceeds maximum depth of {max_depth}",
            code="DS_DOC_DEPTH_EXCEEDED",
            details={"max_depth": max_depth},
            request_id=request_id,
        )


# =============================================================================
# Error Code Registry (for documentation and validation)
# =============================================================================

ERROR_CODES = {
    # Config errors
    "DS_CONFIG_INVALID": "Configuration validation failed",
    "DS_CONFIG_MISSING": "Required configuration missing",
    # Crypto errors
    "DS_CRYPTO_DECRYPT_FAILED": "Authenticated decryption failed",
    # Document errors
    "DS_DOC_INVALID_SIGNATURE": "Document signature verification failed",
    "DS_DOC_FORMAT_ERROR": "Invalid encrypted document record",
    "DS_DOC_UNSUPPORTED_VALUE": "Unsupported document value type",
    "DS_DOC_DEPTH_EXCEEDED": "Document nesting depth exceeded",
    # Generic
    "DS_INTERNAL_ERROR": "Internal error",
}


def validate_error_code(code: str) -> bool:
    """Validate that an error code is registered."""
    return code in ERROR_CODES


__all__ = [
    "DocSealError",
    "ConfigurationError",
    "ConfigMissingError",
    "CryptoError",
    "DecryptionError",
    "DocumentError",
    "InvalidSignatureError",
    "DocumentFormatError",
    "UnsupportedValueError",
    "DocumentDepthError",
    "ERROR_CODES",
    "validate_error_code",
]
