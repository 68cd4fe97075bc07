"""Signed 64.64 fixed-point (int128) <-> float conversion.

Market contracts store share amounts, prices and the liquidity parameter as
int128 values where the low 64 bits hold the fraction: ``x = raw / 2**64``.
"""

from __future__ import annotations

import math
from fractions import Fraction

from precog.errors import PrecisionLossError

FRACTION_BITS = 64
ONE = 1 << FRACTION_BITS  # 1.0 in 64.64

INT128_MIN = -(1 << 127)
INT128_MAX = (1 << 127) - 1
UINT128_MASK = (1 << 128) - 1

# Largest integer a float represents exactly
MAX_SAFE_INTEGER = (1 << 53) - 1


def to_signed(raw: int, bits: int = 128) -> int:
    """Reinterpret an unsigned ``bits``-wide word as two's complement."""
    raw &= (1 << bits) - 1
    if raw >> (bits - 1):
        return raw - (1 << bits)
    return raw


def decode(raw: int) -> float:
    """Convert a 64.64 fixed-point integer to a float.

    Precision beyond the float mantissa is lost; the division itself is
    correctly rounded.
    """
    return int(raw) / ONE


def encode(value: int | float, *, strict: bool = True) -> int:
    """Convert an integral number to 64.64 fixed point.

    Any fractional part is truncated toward zero. With ``strict`` (the default)
    a float outside the exact integer range of a double, or a result that does
    not fit in int128, raises PrecisionLossError. With ``strict=False`` the
    value is truncated silently and wrapped into int128 range.
    """
    if isinstance(value, bool):
        raise TypeError("cannot encode a bool as fixed point")

    if isinstance(value, int):
        integral = value
    elif isinstance(value, float):
        if not math.isfinite(value):
            raise PrecisionLossError(f"cannot encode non-finite value {value!r}")
        if strict and abs(value) > MAX_SAFE_INTEGER:
            raise PrecisionLossError(
                f"{value!r} is outside the exact integer range of a float (+/-{MAX_SAFE_INTEGER})"
            )
        integral = int(value)
    else:
        raise TypeError(f"expected int or float, got {type(value).__name__}")

    raw = integral * ONE
    if INT128_MIN <= raw <= INT128_MAX:
        return raw
    if strict:
        raise PrecisionLossError(f"{value!r} does not fit in a signed 64.64 fixed-point value")
    return to_signed(raw & UINT128_MASK)


def encode_fraction(value: int | float | str | Fraction) -> int:
    """Encode a possibly fractional value, rounding to the nearest 2**-64."""
    if isinstance(value, bool):
        raise TypeError("cannot encode a bool as fixed point")
    try:
        exact = Fraction(value)
    except (OverflowError, ValueError) as e:
        raise PrecisionLossError(f"cannot encode {value!r}: {e}") from e

    raw = round(exact * ONE)
    if not INT128_MIN <= raw <= INT128_MAX:
        raise PrecisionLossError(f"{value!r} does not fit in a signed 64.64 fixed-point value")
    return raw


def decode_packed(word: bytes | str | int, *, high: bool = True) -> float:
    """Decode one of the two int128 values packed into a 32-byte storage word.

    ``high`` selects the first 16 bytes (big-endian), which is where Solidity
    puts the later-declared of two packed variables.
    """
    if isinstance(word, int):
        data = word.to_bytes(32, "big")
    elif isinstance(word, str):
        hex_str = word[2:] if word.startswith(("0x", "0X")) else word
        if len(hex_str) > 64:
            raise ValueError(f"storage word longer than 32 bytes: {word}")
        data = bytes.fromhex(hex_str.zfill(64))
    else:
        data = bytes(word)
        if len(data) > 32:
            raise ValueError(f"storage word longer than 32 bytes: {len(data)} bytes")
        data = data.rjust(32, b"\x00")

    half = data[:16] if high else data[16:]
    return decode(to_signed(int.from_bytes(half, "big")))
