"""
Capacity and version tables for QR symbols, versions 1 to 40.

All numbers come from ISO/IEC 18004 tables 1 and 9.
"""

from typing import Optional, Sequence, Union

from .exceptions import InvalidLevelError, InvalidVersionError
from .modes import ALPHANUMERIC, BYTE, KANJI, MODE_INDICATOR_BITS, NUMERIC, Mode

MIN_VERSION = 1
MAX_VERSION = 40

# Error correction levels, lowest to highest redundancy
LEVELS = ("L", "M", "Q", "H")
DEFAULT_LEVEL = "M"

_LEVEL_ALIASES = {
    "L": "L", "LOW": "L",
    "M": "M", "MEDIUM": "M",
    "Q": "Q", "QUARTILE": "Q",
    "H": "H", "HIGH": "H",
}

# Total codewords per version (index 0 unused)
CODEWORDS_COUNT = [
    0,
    26, 44, 70, 100, 134, 172, 196, 242, 292, 346,
    404, 466, 532, 581, 655, 733, 815, 901, 991, 1085,
    1156, 1258, 1364, 1474, 1588, 1706, 1828, 1921, 2051, 2185,
    2323, 2465, 2611, 2761, 2876, 3034, 3196, 3362, 3532, 3706,
]

# Error correction blocks, indexed (version - 1) * 4 + level
EC_BLOCKS_TABLE = [
    # L   M   Q   H
    1, 1, 1, 1,
    1, 1, 1, 1,
    1, 1, 2, 2,
    1, 2, 2, 4,
    1, 2, 4, 4,
    2, 4, 4, 4,
    2, 4, 6, 5,
    2, 4, 6, 6,
    2, 5, 8, 8,
    4, 5, 8, 8,
    4, 5, 8, 11,
    4, 8, 10, 11,
    4, 9, 12, 16,
    4, 9, 16, 16,
    6, 10, 12, 18,
    6, 10, 17, 16,
    6, 11, 16, 19,
    6, 13, 18, 21,
    7, 14, 21, 25,
    8, 16, 20, 25,
    8, 17, 23, 25,
    9, 17, 23, 34,
    9, 18, 25, 30,
    10, 20, 27, 32,
    12, 21, 29, 35,
    12, 23, 34, 37,
    12, 25, 34, 40,
    13, 26, 35, 42,
    14, 28, 38, 45,
    15, 29, 40, 48,
    16, 31, 43, 51,
    17, 33, 45, 54,
    18, 35, 48, 57,
    19, 37, 51, 60,
    19, 38, 53, 63,
    20, 40, 56, 66,
    21, 43, 59, 70,
    22, 45, 62, 74,
    24, 47, 65, 77,
    25, 49, 68, 81,
]

# Total error correction codewords, indexed like EC_BLOCKS_TABLE
EC_CODEWORDS_TABLE = [
    # L    M     Q     H
    7, 10, 13, 17,
    10, 16, 22, 28,
    15, 26, 36, 44,
    20, 36, 52, 64,
    26, 48, 72, 88,
    36, 64, 96, 112,
    40, 72, 108, 130,
    48, 88, 132, 156,
    60, 110, 160, 192,
    72, 130, 192, 224,
    80, 150, 224, 264,
    96, 176, 260, 308,
    104, 198, 288, 352,
    120, 216, 320, 384,
    132, 240, 360, 432,
    144, 280, 408, 480,
    168, 308, 448, 532,
    180, 338, 504, 588,
    196, 364, 546, 650,
    224, 416, 600, 700,
    224, 442, 644, 750,
    252, 476, 690, 816,
    270, 504, 750, 900,
    300, 560, 810, 960,
    312, 588, 870, 1050,
    336, 644, 952, 1110,
    360, 700, 1020, 1200,
    390, 728, 1050, 1260,
    420, 784, 1140, 1350,
    450, 812, 1200, 1440,
    480, 868, 1290, 1530,
    510, 924, 1350, 1620,
    540, 980, 1440, 1710,
    570, 1036, 1530, 1800,
    570, 1064, 1590, 1890,
    600, 1120, 1680, 1980,
    630, 1204, 1770, 2100,
    660, 1260, 1860, 2220,
    720, 1316, 1950, 2310,
    750, 1372, 2040, 2430,
]


def is_valid_version(version) -> bool:
    return isinstance(version, int) and not isinstance(version, bool) \
        and MIN_VERSION <= version <= MAX_VERSION


def check_version(version) -> int:
    if not is_valid_version(version):
        raise InvalidVersionError(f"Invalid QR Code version: {version!r}")
    return version


def normalize_level(level: Optional[str], default: str = DEFAULT_LEVEL) -> str:
    """Map 'l', 'low', 'M', ... to one of L, M, Q, H."""
    if level is None:
        return default
    try:
        return _LEVEL_ALIASES[str(level).strip().upper()]
    except KeyError:
        raise InvalidLevelError(f"Unknown error correction level: {level!r}") from None


def _index(version: int, level: str) -> int:
    check_version(version)
    return (version - 1) * 4 + LEVELS.index(normalize_level(level))


#==============================================================================
# LOOKUPS
#==============================================================================

def get_symbol_size(version: int) -> int:
    """Modules per side: 4 * version + 17."""
    return check_version(version) * 4 + 17


def get_symbol_total_codewords(version: int) -> int:
    return CODEWORDS_COUNT[check_version(version)]


def get_total_ec_codewords(version: int, level: str) -> int:
    return EC_CODEWORDS_TABLE[_index(version, level)]


def get_blocks_count(version: int, level: str) -> int:
    return EC_BLOCKS_TABLE[_index(version, level)]


def get_data_codewords(version: int, level: str) -> int:
    return get_symbol_total_codewords(version) - get_total_ec_codewords(version, level)


def get_reserved_bits_count(mode: Mode, version: int) -> int:
    """Header bits of one segment: mode indicator plus character count."""
    return MODE_INDICATOR_BITS + mode.char_count_bits(version)


def get_capacity(version: int, level: str, mode: Optional[Mode] = BYTE) -> int:
    """
    Characters of a single `mode` segment that fit in (version, level).

    With mode=None the raw data capacity in bits is returned, which is what
    mixed-mode data must be measured against.
    """
    data_bits = get_data_codewords(version, level) * 8
    if mode is None:
        return data_bits

    usable_bits = data_bits - get_reserved_bits_count(mode, version)

    if mode == NUMERIC:
        return (usable_bits * 3) // 10
    if mode == ALPHANUMERIC:
        return (usable_bits * 2) // 11
    if mode == KANJI:
        return usable_bits // 13
    return usable_bits // 8


def get_total_bits(segments: Sequence, version: int) -> int:
    """Encoded size of all segments, headers included, at `version`."""
    return sum(
        get_reserved_bits_count(seg.mode, version) + seg.bit_length
        for seg in segments
    )


def get_best_version_for_data(segments: Union[Sequence, object], level: str) -> Optional[int]:
    """
    Smallest version whose capacity holds `segments` at `level`.

    Returns None when no version from 1 to 40 is large enough.
    """
    level = normalize_level(level)
    if not isinstance(segments, (list, tuple)):
        segments = [segments]

    if not segments:
        return MIN_VERSION

    if len(segments) == 1:
        seg = segments[0]
        for version in range(MIN_VERSION, MAX_VERSION + 1):
            if seg.length <= get_capacity(version, level, seg.mode):
                return version
        return None

    for version in range(MIN_VERSION, MAX_VERSION + 1):
        if get_total_bits(segments, version) <= get_capacity(version, level, None):
            return version
    return None
