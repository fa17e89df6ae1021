"""
Tests for text and binary output encodings.
"""

import math
import struct

import pytest

from randstream.distributions import ConfigurationError
from randstream.encoding import (
    BINARY_FORMATS,
    Encoder,
    encode_binary,
    encode_text,
    get_format,
    saturate,
)


def decode(data: bytes, name: str):
    fmt = BINARY_FORMATS[name]
    if fmt.is_float:
        order = ">" if fmt.byteorder == "big" else "<"
        code = "f" if fmt.width == 4 else "d"
        return struct.unpack(order + code, data)[0]
    return int.from_bytes(data, fmt.byteorder, signed=fmt.signed)


class TestFormatTable:
    """Test the binary format table."""

    def test_names_and_order(self):
        assert list(BINARY_FORMATS) == [
            "f32be", "f32le", "f64be", "f64le",
            "u8", "s8",
            "u16be", "u16le", "s16be", "s16le",
            "u32be", "u32le", "s32be", "s32le",
            "u64be", "u64le", "s64be", "s64le",
        ]

    def test_widths_and_ranges(self):
        assert BINARY_FORMATS["u8"].max_value == 255
        assert BINARY_FORMATS["s8"].min_value == -128
        assert BINARY_FORMATS["u16le"].width == 2
        assert BINARY_FORMATS["s32be"].max_value == 2 ** 31 - 1
        assert BINARY_FORMATS["u64be"].max_value == 2 ** 64 - 1
        assert BINARY_FORMATS["f32le"].is_float

    def test_unknown_format(self):
        with pytest.raises(ConfigurationError):
            get_format("u24le")


class TestSaturation:
    """Test float to integer narrowing."""

    def test_clamps_high(self):
        assert encode_binary(1000.0, BINARY_FORMATS["u8"]) == b"\xff"
        assert encode_binary(300.0, BINARY_FORMATS["u8"]) == b"\xff"

    def test_clamps_low(self):
        assert encode_binary(-5.0, BINARY_FORMATS["u8"]) == b"\x00"
        assert encode_binary(-200.0, BINARY_FORMATS["s8"]) == b"\x80"

    def test_truncates_toward_zero(self):
        assert saturate(127.9, BINARY_FORMATS["s8"]) == 127
        assert saturate(-3.7, BINARY_FORMATS["s16le"]) == -3

    def test_nan_is_zero(self):
        assert encode_binary(math.nan, BINARY_FORMATS["u32le"]) == b"\x00" * 4

    def test_infinities(self):
        assert decode(encode_binary(math.inf, BINARY_FORMATS["s32be"]), "s32be") == 2 ** 31 - 1
        assert decode(encode_binary(-math.inf, BINARY_FORMATS["s32be"]), "s32be") == -2 ** 31

    def test_64_bit_limits(self):
        assert decode(encode_binary(1e30, BINARY_FORMATS["u64le"]), "u64le") == 2 ** 64 - 1
        assert decode(encode_binary(-1e30, BINARY_FORMATS["s64be"]), "s64be") == -2 ** 63

    def test_endianness(self):
        assert encode_binary(1000.7, BINARY_FORMATS["s16be"]) == b"\x03\xe8"
        assert encode_binary(1000.7, BINARY_FORMATS["s16le"]) == b"\xe8\x03"
        assert encode_binary(-1.0, BINARY_FORMATS["s32le"]) == b"\xff\xff\xff\xff"

    @pytest.mark.parametrize("name", [n for n, f in BINARY_FORMATS.items() if not f.is_float])
    def test_decode_matches_clamped_value(self, name):
        fmt = BINARY_FORMATS[name]
        for value in (1000.0, -5.0):
            data = encode_binary(value, fmt)
            expected = min(max(int(value), fmt.min_value), fmt.max_value)

            assert len(data) == fmt.width
            assert decode(data, name) == expected


class TestFloatFormats:
    """Test IEEE-754 encodings."""

    def test_f64_bit_patterns(self):
        assert encode_binary(1.5, BINARY_FORMATS["f64le"]) == struct.pack("<d", 1.5)
        assert encode_binary(-2.25, BINARY_FORMATS["f64be"]) == struct.pack(">d", -2.25)

    def test_f32_bit_patterns(self):
        assert encode_binary(0.1, BINARY_FORMATS["f32be"]) == struct.pack(">f", 0.1)
        assert encode_binary(0.1, BINARY_FORMATS["f32le"]) == struct.pack("<f", 0.1)

    def test_f32_overflow_is_infinite(self):
        assert decode(encode_binary(1e300, BINARY_FORMATS["f32le"]), "f32le") == math.inf


class TestText:
    """Test decimal text output."""

    def test_fixed_precision(self):
        assert encode_text(3.14159, 2) == b"3.14\n"
        assert encode_text(2.0, 4) == b"2.0000\n"
        assert encode_text(-0.5, 0) == b"-0\n"

    def test_nan_and_infinities(self):
        assert encode_text(float("nan"), 3) == b"NaN\n"
        assert encode_text(float("inf"), 3) == b"inf\n"
        assert encode_text(float("-inf"), 3) == b"-inf\n"

    def test_encoder_defaults_to_ten_digits(self):
        line = Encoder()(1.0 / 3.0)

        assert line == b"0.3333333333\n"

    def test_encoder_binary_mode(self):
        assert Encoder(binary_format="u16be")(513.0) == b"\x02\x01"

    def test_encoder_rejects_negative_precision(self):
        with pytest.raises(ConfigurationError):
            Encoder(precision=-1)
