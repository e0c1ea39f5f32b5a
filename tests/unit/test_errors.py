"""
Tests for the error taxonomy.
"""

from docseal.errors import (
    ERROR_CODES,
    ConfigMissingError,
    ConfigurationError,
    CryptoError,
    DecryptionError,
    DocSealError,
    DocumentDepthError,
    DocumentError,
    DocumentFormatError,
    InvalidSignatureError,
    UnsupportedValueError,
    validate_error_code,
)


class TestErrorTaxonomy:
    def test_signature_and_decryption_errors_are_distinct(self):
        assert not issubclass(InvalidSignatureError, DecryptionError)
        assert not issubclass(DecryptionError, InvalidSignatureError)
        assert issubclass(InvalidSignatureError, DocumentError)
        assert issubclass(DecryptionError, CryptoError)

    def test_all_errors_share_base(self):
        for cls in (ConfigurationError, ConfigMissingError, DecryptionError, InvalidSignatureError,
                    DocumentFormatError, UnsupportedValueError, DocumentDepthError):
            assert issubclass(cls, DocSealError)

    def test_codes_are_registered(self):
        errors = [
            ConfigurationError("primary_key", "bad"),
            ConfigMissingError("primary_key", env_var="DS_PRIMARY_KEY"),
            DecryptionError(),
            InvalidSignatureError(),
            DocumentFormatError("bad"),
            UnsupportedValueError("bytes"),
            DocumentDepthError(10),
        ]
        for error in errors:
            assert validate_error_code(error.code), error.code
        assert not validate_error_code("DS_NOPE")
        assert len(ERROR_CODES) >= len(errors)

    def test_str_and_dict(self):
        error = DecryptionError("bad tag", request_id="req-1")
        assert str(error) == "[DS_CRYPTO_DECRYPT_FAILED] Decryption failed: bad tag (request_id: req-1)"
        assert error.to_dict() == {
            "code": "DS_CRYPTO_DECRYPT_FAILED",
            "message": "Decryption failed: bad tag",
            "details": {"algorithm": "AES-256-GCM"},
            "request_id": "req-1",
        }
