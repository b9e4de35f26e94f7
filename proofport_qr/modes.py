"""
Data encoding modes and the character classes that select them.
"""

import re
from dataclasses import dataclass
from typing import Callable, Optional, Tuple, Union

from .exceptions import InvalidCharacterError, InvalidVersionError


@dataclass(frozen=True)
class Mode:
    """
    An encoding mode: its 4-bit indicator and the width of its character
    count indicator in the three version bands (1-9, 10-26, 27-40).
    """

    name: str
    bit: int
    cc_bits: Tuple[int, int, int]

    def __str__(self) -> str:
        return self.name

    def char_count_bits(self, version: int) -> int:
        """Number of bits for the character count indicator."""
        if not 1 <= version <= 40:
            raise InvalidVersionError(f"Invalid QR Code version: {version}")
        if version < 10:
            return self.cc_bits[0]
        if version < 27:
            return self.cc_bits[1]
        return self.cc_bits[2]


NUMERIC = Mode("Numeric", 0b0001, (10, 12, 14))
ALPHANUMERIC = Mode("Alphanumeric", 0b0010, (9, 11, 13))
BYTE = Mode("Byte", 0b0100, (8, 16, 16))
KANJI = Mode("Kanji", 0b1000, (8, 10, 12))

MODES = (NUMERIC, ALPHANUMERIC, BYTE, KANJI)

# Width of the mode indicator that prefixes every segment
MODE_INDICATOR_BITS = 4


def mode_from(value: Union[Mode, str, None], default: Optional[Mode] = None) -> Optional[Mode]:
    """Resolve a Mode from a Mode instance or a case-insensitive name."""
    if value is None:
        return default
    if isinstance(value, Mode):
        return value
    name = str(value).strip().lower()
    for mode in MODES:
        if mode.name.lower() == name:
            return mode
    raise ValueError(f"Unknown mode: {value}")


#==============================================================================
# CHARACTER CLASSES
#==============================================================================

# 45-symbol alphabet; index is the encoded value
ALPHANUMERIC_CHARS = "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZ $%*+-./:"
ALPHANUMERIC_TABLE = {c: i for i, c in enumerate(ALPHANUMERIC_CHARS)}

_NUMERIC = r"[0-9]+"
_ALPHANUMERIC = r"[A-Z $%*+\-./:]+"
_KANJI = (
    r"(?:[\u3000-\u303F]|[\u3040-\u309F]|[\u30A0-\u30FF]|[\uFF00-\uFFEF]"
    r"|[\u4E00-\u9FAF]|[\u2605-\u2606]|[\u2190-\u2195]|\u203B"
    r"|[\u2010\u2015\u2018\u2019\u2025\u2026\u201C\u201D\u2225\u2260]"
    r"|[\u0391-\u0451]|[\u00A7\u00A8\u00B1\u00B4\u00D7\u00F7])+"
)
_BYTE = r"(?:(?![A-Z0-9 $%*+\-./:]|" + _KANJI + r").)+"

NUMERIC_RE = re.compile(_NUMERIC)
ALPHANUMERIC_RE = re.compile(_ALPHANUMERIC)
KANJI_RE = re.compile(_KANJI)
BYTE_RE = re.compile(_BYTE, re.DOTALL)
# Byte runs when kanji mode is off: kanji characters fall back to byte
BYTE_KANJI_RE = re.compile(r"[^A-Z0-9 $%*+\-./:]+")

# Whole-string tests, always used with fullmatch
_TEST_NUMERIC = re.compile(r"[0-9]+")
_TEST_ALPHANUMERIC = re.compile(r"[A-Z0-9 $%*+\-./:]+")
_TEST_KANJI = re.compile(_KANJI)


def is_numeric(data: str) -> bool:
    return bool(_TEST_NUMERIC.fullmatch(data))


def is_alphanumeric(data: str) -> bool:
    return bool(_TEST_ALPHANUMERIC.fullmatch(data))


def is_kanji(data: str) -> bool:
    return bool(_TEST_KANJI.fullmatch(data))


def best_mode_for_data(data: Union[str, bytes]) -> Mode:
    """Cheapest mode able to represent the whole of `data`."""
    if isinstance(data, (bytes, bytearray)):
        return BYTE
    if is_numeric(data):
        return NUMERIC
    if is_alphanumeric(data):
        return ALPHANUMERIC
    if is_kanji(data):
        return KANJI
    return BYTE


#==============================================================================
# SHIFT JIS CONVERSION
#==============================================================================

SJISConverter = Callable[[str], int]


def shift_jis_code(char: str) -> int:
    """
    Two-byte Shift JIS code of a single character.

    Suitable as the `to_sjis` converter that enables kanji mode.
    """
    try:
        encoded = char.encode("shift_jis")
    except UnicodeEncodeError as exc:
        raise InvalidCharacterError(
            f"Invalid SJIS character: {char!r}"
        ) from exc
    return int.from_bytes(encoded, "big")
