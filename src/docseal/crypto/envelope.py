"""
Ciphertext envelope: one AEAD encryption result in self-describing text form.

Text form (compact JSON, standard base64)::

    {"p": "<payload>", "h": {"iv": "<iv>", "at": "<auth tag>"}}

A ``"c": true`` header marks a zlib-compressed payload.
"""

import base64
import binascii
import json
from dataclasses import dataclass
from typing import Any, Dict

from ..errors import DecryptionError

PAYLOAD_FIELD = "p"
HEADERS_FIELD = "h"
IV_HEADER = "iv"
AUTH_TAG_HEADER = "at"
COMPRESSED_HEADER = "c"


def _b64encode(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


def _b64decode(text: Any, field_name: str) -> bytes:
    if not isinstance(text, str):
        raise DecryptionError(f"envelope field '{field_name}' is not text")
    try:
        return base64.b64decode(text.encode("ascii"), validate=True)
    except (binascii.Error, UnicodeEncodeError):
        raise DecryptionError(f"envelope field '{field_name}' is not valid base64") from None


@dataclass(frozen=True)
class Envelope:
    """Payload, IV and authentication tag of one encryption."""

    payload: bytes
    iv: bytes
    auth_tag: bytes
    compressed: bool = False

    def to_dict(self) -> Dict[str, Any]:
        headers: Dict[str, Any] = {
            IV_HEADER: _b64encode(self.iv),
            AUTH_TAG_HEADER: _b64encode(self.auth_tag),
        }
        if self.compressed:
            headers[COMPRESSED_HEADER] = True
        return {PAYLOAD_FIELD: _b64encode(self.payload), HEADERS_FIELD: headers}

    def to_string(self) -> str:
        return json.dumps(self.to_dict(), separators=(",", ":"))

    @classmethod
    def from_string(cls, text: str) -> "Envelope":
        """Parse the text form; any structural problem raises DecryptionError."""
        if not isinstance(text, str):
            raise DecryptionError("envelope is not text")
        try:
            data = json.loads(text)
        except ValueError:
            raise DecryptionError("envelope is not valid JSON") from None

        if not isinstance(data, dict) or not isinstance(data.get(HEADERS_FIELD), dict):
            raise DecryptionError("envelope is missing headers")
        headers = data[HEADERS_FIELD]
        if PAYLOAD_FIELD not in data:
            raise DecryptionError("envelope is missing payload")

        compressed = headers.get(COMPRESSED_HEADER, False)
        if not isinstance(compressed, bool):
            raise DecryptionError("envelope compression header is not boolean")

        return cls(
            payload=_b64decode(data[PAYLOAD_FIELD], PAYLOAD_FIELD),
            iv=_b64decode(headers.get(IV_HEADER), IV_HEADER),
            auth_tag=_b64decode(headers.get(AUTH_TAG_HEADER), AUTH_TAG_HEADER),
            compressed=compressed,
        )
