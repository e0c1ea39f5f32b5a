"""
Primitive codec for document leaves.

Scalars are turned into tagged text before encryption so that the type of a
leaf survives the round trip through a cipher that only sees strings.

Two wire grammars exist:

- ``CodecVersion.V1``: ``"<Tag>:<payload>"`` for integers, floats and
  booleans, bare text for strings. Interoperable with previously stored data.
  A string that happens to look like ``"Integer:30"`` decodes as the integer
  30; this collision is a known limitation of V1.
- ``CodecVersion.V2``: every value, strings included, is written as
  ``"ds2:<t>:<payload>"``. Untagged input is read with V1 rules.

Decoding never raises: a tag it does not understand, or a payload that does
not parse, comes back as the original text.
"""

import math
import re
from enum import Enum, IntEnum
from typing import Optional, Union

from ..errors import UnsupportedValueError
from ..logging import get_logger

logger = get_logger(__name__)

Scalar = Union[str, int, float, bool]

TAG_DELIMITER = ":"
V2_PREFIX = "ds2:"

# Largest integer, in decimal digits, the codec writes or reads. Matches the
# interpreter's default int/str conversion limit.
MAX_INTEGER_DIGITS = 4300

_INTEGER_RE = re.compile(r"[+-]?\d+", re.ASCII)
_FLOAT_RE = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?|-?Infinity|NaN", re.ASCII)


class CodecVersion(IntEnum):
    """Wire grammar used when encoding leaves."""

    V1 = 1
    V2 = 2


class TypeTag(str, Enum):
    """V1 type tags. Kept stable for stored data; not derived from Python type names."""

    INTEGER = "Integer"
    FLOAT = "Float"
    TRUE = "TrueClass"
    FALSE = "FalseClass"


class CompactTag(str, Enum):
    """V2 type tags."""

    TEXT = "s"
    INTEGER = "i"
    FLOAT = "f"
    BOOLEAN = "b"


def _format_float(value: float) -> str:
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    return repr(value)


def _format_integer(value: int) -> str:
    try:
        text = str(int(value))
    except ValueError:
        raise UnsupportedValueError(f"int (more than {MAX_INTEGER_DIGITS} digits)") from None
    if len(text.lstrip("-")) > MAX_INTEGER_DIGITS:
        raise UnsupportedValueError(f"int (more than {MAX_INTEGER_DIGITS} digits)")
    return text


def _parse_integer(payload: str) -> Optional[int]:
    if not _INTEGER_RE.fullmatch(payload) or len(payload.lstrip("+-")) > MAX_INTEGER_DIGITS:
        return None
    try:
        return int(payload)
    except ValueError:
        return None


def _parse_float(payload: str) -> Optional[float]:
    if not _FLOAT_RE.fullmatch(payload):
        return None
    try:
        return float(payload)
    except ValueError:
        return None


def _parse_boolean(payload: str) -> Optional[bool]:
    if payload == "true":
        return True
    if payload == "false":
        return False
    return None


def is_scalar(value: object) -> bool:
    """True for the leaf types the codec can encode (null excluded)."""
    return isinstance(value, (str, bool, int, float))


class PrimitiveCodec:
    """Encodes scalars to tagged text and back."""

    def __init__(self, version: CodecVersion = CodecVersion.V1):
        self.version = CodecVersion(version)

    def encode(self, value: Scalar) -> str:
        """Encode a non-null scalar into its tagged text form."""
        if self.version is CodecVersion.V2:
            return self._encode_v2(value)
        return self._encode_v1(value)

    def decode(self, text: str) -> Scalar:
        """Decode tagged text back to a scalar, falling back to the text itself."""
        if self.version is CodecVersion.V2 and text.startswith(V2_PREFIX):
            decoded = self._decode_v2(text[len(V2_PREFIX):])
            if decoded is not None:
                return decoded
            logger.debug("Unrecognized v2 tagged value, returning text")
            return text
        return self._decode_v1(text)

    # ------------------------------------------------------------------
    # V1
    # ------------------------------------------------------------------

    @staticmethod
    def _encode_v1(value: Scalar) -> str:
        if isinstance(value, str):
            return value
        if isinstance(value, bool):
            tag = TypeTag.TRUE if value else TypeTag.FALSE
            return f"{tag.value}{TAG_DELIMITER}{'true' if value else 'false'}"
        if isinstance(value, int):
            return f"{TypeTag.INTEGER.value}{TAG_DELIMITER}{_format_integer(value)}"
        if isinstance(value, float):
            return f"{TypeTag.FLOAT.value}{TAG_DELIMITER}{_format_float(value)}"
        raise UnsupportedValueError(type(value).__name__)

    @staticmethod
    def _decode_v1(text: str) -> Scalar:
        if TAG_DELIMITER not in text:
            return text

        tag, payload = text.split(TAG_DELIMITER, 1)
        decoded: Optional[Scalar] = None
        if tag == TypeTag.INTEGER.value:
            decoded = _parse_integer(payload)
        elif tag == TypeTag.FLOAT.value:
            decoded = _parse_float(payload)
        elif tag == TypeTag.TRUE.value:
            decoded = True if _parse_boolean(payload) is True else None
        elif tag == TypeTag.FALSE.value:
            decoded = False if _parse_boolean(payload) is False else None
        else:
            return text

        if decoded is None:
            logger.debug("Unparseable tagged payload, returning text", extra={"tag": tag})
            return text
        return decoded

    # ------------------------------------------------------------------
    # V2
    # ------------------------------------------------------------------

    @staticmethod
    def _encode_v2(value: Scalar) -> str:
        if isinstance(value, str):
            tag, payload = CompactTag.TEXT, value
        elif isinstance(value, bool):
            tag, payload = CompactTag.BOOLEAN, "true" if value else "false"
        elif isinstance(value, int):
            tag, payload = CompactTag.INTEGER, _format_integer(value)
        elif isinstance(value, float):
            tag, payload = CompactTag.FLOAT, _format_float(value)
        else:
            raise UnsupportedValueError(type(value).__name__)
        return f"{V2_PREFIX}{tag.value}{TAG_DELIMITER}{payload}"

    @staticmethod
    def _decode_v2(body: str) -> Optional[Scalar]:
        tag, sep, payload = body.partition(TAG_DELIMITER)
        if not sep:
            return None
        if tag == CompactTag.TEXT.value:
            return payload
        if tag == CompactTag.INTEGER.value:
            return _parse_integer(payload)
        if tag == CompactTag.FLOAT.value:
            return _parse_float(payload)
        if tag == CompactTag.BOOLEAN.value:
            return _parse_boolean(payload)
        return None


__all__ = [
    "CodecVersion",
    "TypeTag",
    "CompactTag",
    "PrimitiveCodec",
    "is_scalar",
]
