"""
Fixed-point binary codec.

Converts real numbers to and from fixed-width bit sequences made of an
optional sign bit, an unsigned integer field and an unsigned fraction field.
Bits are stored as ints (0 or 1) so genomes can be sliced and recombined
like any other gene list.
"""

import math
from typing import List, Optional, Sequence


def max_representable(integer_bits: int, fraction_bits: int) -> float:
    """
    Largest magnitude a variable with the given field widths can hold.

    Args:
        integer_bits: Width of the integer field
        fraction_bits: Width of the fraction field

    Returns:
        (2^integer_bits - 1) + (2^fraction_bits - 1) / 2^fraction_bits
    """
    grid = 2 ** fraction_bits
    return (2 ** integer_bits - 1) + (grid - 1) / grid


def int_to_bits(value: int, width: int) -> List[int]:
    """Zero-padded big-endian bits of a non-negative int (empty for width 0)."""
    return [(value >> shift) & 1 for shift in range(width - 1, -1, -1)]


def bits_to_int(bits: Sequence[int]) -> int:
    """Parse big-endian bits as an unsigned int (0 for an empty sequence)."""
    value = 0
    for bit in bits:
        value = (value << 1) | int(bit)
    return value


def encode_fixed_point(
    value: float,
    has_sign: bool,
    integer_bits: int,
    fraction_bits: int
) -> List[int]:
    """
    Encode a real number as a fixed-point bit sequence.

    Values outside the representable range are clamped, never rejected:
    a magnitude at or above the maximum becomes all ones (after the sign bit
    if there is one), and a negative value without a sign bit becomes all
    zeros. The fractional part is truncated toward zero onto the
    2^-fraction_bits grid.

    Args:
        value: Number to encode
        has_sign: Whether a leading sign bit is emitted
        integer_bits: Width of the integer field
        fraction_bits: Width of the fraction field

    Returns:
        List of bits, length integer_bits + fraction_bits (+1 if signed)

    Example:
        encode_fixed_point(2.5, False, 3, 2) -> [0, 1, 0, 1, 0]
    """
    width = integer_bits + fraction_bits
    bits = []

    if has_sign:
        bits.append(1 if value < 0 else 0)
    elif value < 0:
        return [0] * width

    magnitude = abs(value)
    if magnitude >= max_representable(integer_bits, fraction_bits):
        return bits + [1] * width

    integer_part = math.floor(magnitude)
    fraction = magnitude - integer_part
    fraction_part = math.floor(fraction * 2 ** fraction_bits)

    bits.extend(int_to_bits(integer_part, integer_bits))
    bits.extend(int_to_bits(fraction_part, fraction_bits))
    return bits


def decode_fixed_point(
    bits: Sequence[int],
    has_sign: bool,
    integer_bits: int,
    fraction_bits: int,
    scale: Optional[float] = None
) -> float:
    """
    Decode a fixed-point bit sequence produced by encode_fixed_point.

    Args:
        bits: The variable's bits (sign bit first if signed)
        has_sign: Whether the first bit is a sign bit
        integer_bits: Width of the integer field
        fraction_bits: Width of the fraction field
        scale: Precomputed 2^-fraction_bits (computed when omitted)

    Returns:
        Decoded float
    """
    if scale is None:
        scale = 2.0 ** -fraction_bits

    offset = 0
    sign = 1.0
    if has_sign:
        if int(bits[0]) == 1:
            sign = -1.0
        offset = 1

    integer_value = bits_to_int(bits[offset:offset + integer_bits])
    offset += integer_bits
    fraction_value = bits_to_int(bits[offset:offset + fraction_bits]) * scale

    return sign * (integer_value + fraction_value)


def bits_to_str(bits: Sequence[int]) -> str:
    return ''.join(str(int(bit)) for bit in bits)


def str_to_bits(text: str) -> List[int]:
    """
    Convert a string of '0'/'1' characters to a bit list.

    Raises:
        ValueError: If the string holds any other character
    """
    bits = []
    for char in text:
        if char not in '01':
            raise ValueError(f"Invalid bit character: {char!r}")
        bits.append(int(char))
    return bits
