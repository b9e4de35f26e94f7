"""
BCH-coded format and version information.

References:
- https://www.thonky.com/qr-code-tutorial/format-version-information
"""

from typing import Tuple

from .exceptions import FormatInfoError, InvalidMaskError
from .tables import check_version, normalize_level

# BCH generator polynomial: x^10 + x^8 + x^5 + x^4 + x^2 + x + 1
G15 = 0b10100110111
# Format mask pattern, keeps the format word from being all zero
G15_MASK = 0b101010000010010
# BCH generator polynomial: x^12 + x^11 + x^10 + x^9 + x^8 + x^5 + x^2 + 1
G18 = 0b1111100100101

# Error correction level bits
EC_LEVEL_BITS = {
    'L': 0b01,
    'M': 0b00,
    'Q': 0b11,
    'H': 0b10,
}
_LEVEL_FROM_BITS = {bits: level for level, bits in EC_LEVEL_BITS.items()}


def bch_digit(data: int) -> int:
    """Position of the highest set bit, plus one."""
    return data.bit_length()


def bch_remainder(data: int, generator: int) -> int:
    """Remainder of data(x) divided by generator(x) over GF(2)."""
    g_digit = bch_digit(generator)
    while bch_digit(data) >= g_digit:
        data ^= generator << (bch_digit(data) - g_digit)
    return data


def get_format_bits(level: str, mask_pattern: int) -> int:
    """Complete 15-bit format word for (level, mask)."""
    if not 0 <= mask_pattern <= 7:
        raise InvalidMaskError(f"Invalid mask pattern: {mask_pattern}")
    data = (EC_LEVEL_BITS[normalize_level(level)] << 3) | mask_pattern
    d = data << 10
    return (d | bch_remainder(d, G15)) ^ G15_MASK


def decode_format_bits(bits: int) -> Tuple[str, int]:
    """
    Recover (level, mask) from a 15-bit format word.

    Raises FormatInfoError if the BCH check bits do not match.
    """
    if not 0 <= bits < 1 << 15:
        raise FormatInfoError(f"Format word out of range: {bits:#x}")
    unmasked = bits ^ G15_MASK
    if bch_remainder(unmasked, G15) != 0:
        raise FormatInfoError(f"Format word fails BCH check: {bits:015b}")
    data = unmasked >> 10
    return _LEVEL_FROM_BITS[data >> 3], data & 0b111


def get_version_bits(version: int) -> int:
    """18-bit version word: 6 version bits and 12 BCH bits."""
    d = check_version(version) << 12
    return d | bch_remainder(d, G18)
