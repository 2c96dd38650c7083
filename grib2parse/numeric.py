"""Numeric conventions used by GRIB2 sections.

Implements big-endian field reading with bounds checking, the two signed
integer conventions (WMO sign-and-magnitude and plain two's complement),
the scale-factor/scaled-value codec, the basic-angle sentinel rule and
the simple-packing reconstruction formula.
"""

from __future__ import annotations

import struct

from grib2parse.errors import TruncatedBufferError

# Basic-angle defaults applied when the encoded value is 0 or all ones.
DEFAULT_BASIC_ANGLE = 1
DEFAULT_SUBDIVISIONS = 1_000_000

MISSING_U8 = 0xFF
MISSING_U32 = 0xFFFFFFFF


# ---------------------------------------------------------------------------
# Field reading
# ---------------------------------------------------------------------------

def unpack(fmt: str, data: bytes, offset: int = 0) -> tuple:
    """Big-endian ``struct.unpack_from`` that raises on short input.

    Parameters
    ----------
    fmt : str
        A :mod:`struct` format without byte-order prefix.
    data : bytes
        Buffer to read from.
    offset : int
        Position of the first byte.

    Raises
    ------
    TruncatedBufferError
        If the read would run past the end of *data*.
    """
    fmt = ">" + fmt
    size = struct.calcsize(fmt)
    if offset < 0 or offset + size > len(data):
        raise TruncatedBufferError(
            f"Need {size} bytes at offset {offset}, buffer holds {len(data)}",
            offset,
        )
    return struct.unpack_from(fmt, data, offset)


# ---------------------------------------------------------------------------
# Signed integers
# ---------------------------------------------------------------------------

def sign_magnitude(raw: int, bits: int) -> int:
    """Interpret *raw* as a sign-and-magnitude integer of *bits* bits."""
    sign_bit = 1 << (bits - 1)
    if raw & sign_bit:
        return -(raw & (sign_bit - 1))
    return raw


def twos_complement(raw: int, bits: int) -> int:
    """Interpret *raw* as a two's complement integer of *bits* bits."""
    if raw & (1 << (bits - 1)):
        return raw - (1 << bits)
    return raw


def to_signed(raw: int, bits: int, encoding: str = "sign_magnitude") -> int:
    """Convert an unsigned octet value to a signed integer.

    GRIB2 (Regulation 92.1.5) stores negative numbers with the leftmost
    bit set as the sign and the remaining bits as the magnitude.
    """
    if encoding == "sign_magnitude":
        return sign_magnitude(raw, bits)
    if encoding == "twos_complement":
        return twos_complement(raw, bits)
    raise ValueError(f"Unknown signed integer encoding: {encoding!r}")


# ---------------------------------------------------------------------------
# Scaled values and basic angle
# ---------------------------------------------------------------------------

def parse_scaled_value(scale: int, value: int) -> float:
    """Return ``value * 10 ** -scale``.

    >>> parse_scaled_value(2, 150)
    1.5
    """
    if scale >= 0:
        return value / 10 ** scale
    return float(value * 10 ** -scale)


def decode_scaled(scale_raw: int, value_raw: int,
                  encoding: str = "sign_magnitude") -> float | None:
    """Decode a raw scale-factor octet and 4-octet scaled value.

    Returns *None* for the all-ones missing pattern.
    """
    if scale_raw == MISSING_U8 and value_raw == MISSING_U32:
        return None
    return parse_scaled_value(to_signed(scale_raw, 8, encoding), value_raw)


def _default_if_sentinel(value: int, default: int) -> int:
    return default if value in (0, MISSING_U32) else value


def parse_basic_angle(angle: int, subdivisions: int) -> float:
    """Return the degrees-per-unit ratio ``angle / subdivisions``.

    ``0`` and ``0xFFFFFFFF`` select the defaults (1 and 1,000,000), giving
    units of micro-degrees.
    """
    angle = _default_if_sentinel(angle, DEFAULT_BASIC_ANGLE)
    subdivisions = _default_if_sentinel(subdivisions, DEFAULT_SUBDIVISIONS)
    return angle / subdivisions


def gaussian_scale(angle: int) -> float:
    """Scale applied to Gaussian-grid coordinates: ``1e-6 / basic angle``."""
    return 1e-6 / _default_if_sentinel(angle, DEFAULT_BASIC_ANGLE)


# ---------------------------------------------------------------------------
# Simple packing
# ---------------------------------------------------------------------------

def simple_packing_value(raw: int, reference_value: float,
                         binary_scale_factor: int,
                         decimal_scale_factor: int) -> float:
    """Reconstruct one simple-packed value.

    ``Y = (R + X * 2**E) * 10**-D``

    >>> simple_packing_value(5, 0.0, 0, 0)
    5.0
    """
    return (reference_value + raw * 2.0 ** binary_scale_factor) * 10.0 ** -decimal_scale_factor
