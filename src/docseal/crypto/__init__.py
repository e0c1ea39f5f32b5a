"""
DocSeal cryptography layer: AEAD adapter and ciphertext envelopes.
"""

from .aead import KEY_LENGTH, AeadCipher, validate_key
from .envelope import Envelope

__all__ = [
    "AeadCipher",
    "Envelope",
    "KEY_LENGTH",
    "validate_key",
]
