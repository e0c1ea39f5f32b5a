"""
Tests for the primitive leaf codec.
"""

import math

import pytest

from docseal.documents.codec import MAX_INTEGER_DIGITS, CodecVersion, PrimitiveCodec, TypeTag
from docseal.errors import UnsupportedValueError


@pytest.fixture
def codec():
    return PrimitiveCodec(CodecVersion.V1)


@pytest.fixture
def codec_v2():
    return PrimitiveCodec(CodecVersion.V2)


class TestEncodeV1:
    def test_text_passes_through(self, codec):
        assert codec.encode("hello") == "hello"
        assert codec.encode("") == ""

    def test_integer(self, codec):
        assert codec.encode(30) == "Integer:30"
        assert codec.encode(-100) == "Integer:-100"

    def test_float(self, codec):
        assert codec.encode(3.14) == "Float:3.14"
        assert codec.encode(0.0) == "Float:0.0"

    def test_booleans_are_not_integers(self, codec):
        assert codec.encode(True) == "TrueClass:true"
        assert codec.encode(False) == "FalseClass:false"

    def test_non_finite_floats(self, codec):
        assert codec.encode(float("inf")) == "Float:Infinity"
        assert codec.encode(float("-inf")) == "Float:-Infinity"
        assert codec.encode(float("nan")) == "Float:NaN"

    def test_unsupported_type_raises(self, codec):
        with pytest.raises(UnsupportedValueError):
            codec.encode(b"raw")

    def test_oversized_integer_raises(self, codec):
        with pytest.raises(UnsupportedValueError) as exc_info:
            codec.encode(10**5000)
        assert exc_info.value.code == "DS_DOC_UNSUPPORTED_VALUE"
        assert exc_info.value.details["position"] == "leaf"

    def test_tags_are_stable_wire_names(self):
        assert [tag.value for tag in TypeTag] == ["Integer", "Float", "TrueClass", "FalseClass"]


class TestDecodeV1:
    @pytest.mark.parametrize("value", ["plain", "", 0, 42, -7, 10**30, 1.5, -3.14, 1e20, True, False])
    def test_round_trip_preserves_type(self, codec, value):
        decoded = codec.decode(codec.encode(value))
        assert decoded == value
        assert type(decoded) is type(value)

    def test_non_finite_round_trip(self, codec):
        assert codec.decode("Float:Infinity") == float("inf")
        assert codec.decode("Float:-Infinity") == float("-inf")
        assert math.isnan(codec.decode("Float:NaN"))

    def test_text_without_delimiter(self, codec):
        assert codec.decode("no tag here") == "no tag here"

    def test_unknown_tag_returns_text(self, codec):
        assert codec.decode("https://example.com") == "https://example.com"
        assert codec.decode("BigDecimal:0.1e1") == "BigDecimal:0.1e1"

    @pytest.mark.parametrize(
        "text",
        ["Integer:abc", "Integer:", "Integer:3_0", "Integer: 30", "Float:1.2.3", "Float:", "TrueClass:yes", "FalseClass:true"],
    )
    def test_unparseable_payload_returns_text(self, codec, text):
        assert codec.decode(text) == text

    def test_oversized_integer_payload_returns_text(self, codec):
        text = "Integer:" + "1" * (MAX_INTEGER_DIGITS + 700)
        assert codec.decode(text) == text

    def test_integer_at_digit_limit_round_trips(self, codec):
        value = int("9" * MAX_INTEGER_DIGITS)
        assert codec.decode(codec.encode(value)) == value

    def test_v2_prefix_is_plain_text_for_v1(self, codec):
        assert codec.decode("ds2:s:hello") == "ds2:s:hello"

    def test_splits_on_first_delimiter_only(self, codec):
        assert codec.decode("note:Integer:30") == "note:Integer:30"

    def test_known_limitation_text_shaped_like_a_tag(self, codec):
        """A string that looks like an encoded integer is read back as that integer in V1."""
        decoded = codec.decode(codec.encode("Integer:30"))
        assert decoded == 30
        assert isinstance(decoded, int)


class TestCodecV2:
    @pytest.mark.parametrize("value", ["plain", "", 7, -1.25, True, False])
    def test_round_trip(self, codec_v2, value):
        decoded = codec_v2.decode(codec_v2.encode(value))
        assert decoded == value
        assert type(decoded) is type(value)

    def test_every_value_is_tagged(self, codec_v2):
        assert codec_v2.encode("hi") == "ds2:s:hi"
        assert codec_v2.encode(30) == "ds2:i:30"
        assert codec_v2.encode(True) == "ds2:b:true"

    def test_tag_shaped_text_is_unambiguous(self, codec_v2):
        for text in ["Integer:30", "ds2:i:30", "TrueClass:true"]:
            assert codec_v2.decode(codec_v2.encode(text)) == text

    def test_reads_v1_values(self, codec_v2):
        assert codec_v2.decode("Integer:30") == 30
        assert codec_v2.decode("plain") == "plain"

    def test_malformed_v2_returns_text(self, codec_v2):
        assert codec_v2.decode("ds2:i:x") == "ds2:i:x"
        assert codec_v2.decode("ds2:z:1") == "ds2:z:1"
        assert codec_v2.decode("ds2:nodelimiter") == "ds2:nodelimiter"

    def test_oversized_integer(self, codec_v2):
        with pytest.raises(UnsupportedValueError):
            codec_v2.encode(-(10**5000))
        text = "ds2:i:" + "7" * (MAX_INTEGER_DIGITS + 1)
        assert codec_v2.decode(text) == text
