"""
Output encodings for generated samples.

Text output is one fixed-point decimal per line. Binary output is one of
eighteen fixed-width formats; integer formats truncate toward zero and
saturate at the bounds of the target type, with NaN encoded as zero.
"""

import math
import numpy as np
from typing import Dict, NamedTuple, Optional

from .distributions import ConfigurationError


class BinaryFormat(NamedTuple):
    """Layout of one binary sample encoding."""

    name: str
    width: int
    signed: bool
    is_float: bool
    byteorder: str  # "big" or "little"

    @property
    def min_value(self) -> int:
        return -(1 << (8 * self.width - 1)) if self.signed else 0

    @property
    def max_value(self) -> int:
        bits = 8 * self.width - 1 if self.signed else 8 * self.width
        return (1 << bits) - 1


def _build_formats() -> Dict[str, BinaryFormat]:
    formats = {}
    for width in (4, 8):
        for suffix, order in (("be", "big"), ("le", "little")):
            name = f"f{8 * width}{suffix}"
            formats[name] = BinaryFormat(name, width, True, True, order)
    for width in (1, 2, 4, 8):
        for prefix, signed in (("u", False), ("s", True)):
            if width == 1:
                name = f"{prefix}8"
                formats[name] = BinaryFormat(name, 1, signed, False, "little")
                continue
            for suffix, order in (("be", "big"), ("le", "little")):
                name = f"{prefix}{8 * width}{suffix}"
                formats[name] = BinaryFormat(name, width, signed, False, order)
    return formats


BINARY_FORMATS: Dict[str, BinaryFormat] = _build_formats()


def get_format(name: str) -> BinaryFormat:
    try:
        return BINARY_FORMATS[name]
    except KeyError:
        known = ", ".join(BINARY_FORMATS)
        raise ConfigurationError(f"Unknown binary format: {name} (expected one of {known})") from None


def saturate(x: float, fmt: BinaryFormat) -> int:
    """Convert a float to the integer range of ``fmt``, clamping out-of-range values."""
    if math.isnan(x):
        return 0
    if x <= fmt.min_value:
        return fmt.min_value
    if x >= fmt.max_value:
        return fmt.max_value
    return math.trunc(x)


def encode_text(x: float, precision: int) -> bytes:
    if math.isnan(x):
        return b"NaN\n"
    return f"{x:.{precision}f}\n".encode("ascii")


def encode_binary(x: float, fmt: BinaryFormat) -> bytes:
    """
    Encode one value in a fixed-width binary format.

    Args:
        x: Value to encode
        fmt: Target format from BINARY_FORMATS

    Returns:
        Exactly ``fmt.width`` bytes
    """
    if fmt.is_float:
        dtype = np.dtype(f"{'>' if fmt.byteorder == 'big' else '<'}f{fmt.width}")
        # Values beyond the f32 range become infinities, like an IEEE narrowing cast
        with np.errstate(over="ignore"):
            return np.array(x, dtype=dtype).tobytes()
    return saturate(x, fmt).to_bytes(fmt.width, fmt.byteorder, signed=fmt.signed)


class Encoder:
    """Renders processed samples as text lines or binary records."""

    def __init__(self, precision: int = 10, binary_format: Optional[str] = None):
        if precision < 0:
            raise ConfigurationError(f"Precision must be non-negative, got {precision}")
        self.precision = precision
        self.binary_format = get_format(binary_format) if binary_format else None

    def __call__(self, x: float) -> bytes:
        if self.binary_format is not None:
            return encode_binary(x, self.binary_format)
        return encode_text(x, self.precision)
