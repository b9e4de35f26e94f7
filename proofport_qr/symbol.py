"""
Complete QR symbol generation.

Text (or caller-provided segments) goes in; a finished, masked module
matrix comes out. Each call builds everything from scratch and keeps no
state between calls.
"""

import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Tuple, Union

from .codewords import create_data
from .exceptions import DataOverflowError, EmptyInputError, VersionTooSmallError
from .masking import apply_mask, check_mask, get_best_mask
from .matrix import ModuleMatrix, QRMatrix
from .modes import SJISConverter
from .segments import Segment, from_list, from_string, raw_split
from .tables import MAX_VERSION, check_version, get_best_version_for_data, normalize_level

logger = logging.getLogger(__name__)

InputData = Union[str, bytes, Iterable]


@dataclass(frozen=True)
class QRSymbol:
    """
    A finished QR code and the parameters it was built with.

    The module grid is held privately: `modules` returns a copy and
    `to_list()` a fresh list of rows, so a finished symbol never changes.
    """

    _matrix: QRMatrix = field(repr=False)
    version: int
    error_correction: str
    mask_pattern: int
    segments: Tuple[Segment, ...]

    @property
    def modules(self) -> ModuleMatrix:
        return self._matrix.copy()

    @property
    def size(self) -> int:
        return self._matrix.size

    def to_list(self) -> List[List[bool]]:
        """Rows of booleans, True for dark modules."""
        return self._matrix.to_list()


def _resolve_segments(data: InputData, version: Optional[int], level: str,
                      to_sjis: Optional[SJISConverter]) -> List[Segment]:
    if isinstance(data, str):
        estimated = version
        if estimated is None:
            estimated = get_best_version_for_data(raw_split(data, to_sjis), level)
        return from_string(data, estimated or MAX_VERSION, to_sjis)

    if isinstance(data, (bytes, bytearray)):
        return from_list([bytes(data)], to_sjis)

    return from_list(data, to_sjis)


def create(data: InputData, *, version: Optional[int] = None,
           error_correction: Optional[str] = None,
           mask_pattern: Optional[int] = None,
           to_sjis: Optional[SJISConverter] = None) -> QRSymbol:
    """
    Build a QR symbol.

    Args:
        data: Text, raw bytes, or a list of segments given as strings,
            (data, mode) pairs or {"data", "mode"} mappings
        version: QR version (1-40), or None for the smallest that fits
        error_correction: 'L' (7%), 'M' (15%), 'Q' (25%) or 'H' (30%)
        mask_pattern: Force a mask (0-7) instead of the lowest-penalty one
        to_sjis: Character to Shift JIS code converter; enables kanji mode

    Raises:
        EmptyInputError: data is None or empty
        DataOverflowError: data does not fit any version at this level
        VersionTooSmallError: `version` is below the minimum needed
    """
    if data is None or (isinstance(data, (str, bytes, bytearray)) and len(data) == 0):
        raise EmptyInputError("No input text")

    level = normalize_level(error_correction)
    if version is not None:
        check_version(version)
    if mask_pattern is not None:
        check_mask(mask_pattern)

    segments = _resolve_segments(data, version, level, to_sjis)
    if not segments:
        raise EmptyInputError("No input text")

    best_version = get_best_version_for_data(segments, level)
    if best_version is None:
        raise DataOverflowError("The amount of data is too big to be stored in a QR Code")

    if version is None:
        version = best_version
    elif version < best_version:
        raise VersionTooSmallError(version, best_version)

    logger.debug("Encoding %d segment(s) as version %d-%s", len(segments), version, level)

    codewords = create_data(version, level, segments)

    matrix = QRMatrix(version)
    # dummy format bits, only to mark the area as reserved
    matrix.setup_format_info(level, 0)
    matrix.setup_version_info()
    bits_placed = matrix.place_data(codewords)
    logger.debug("Placed %d bits in %dx%d matrix", bits_placed, matrix.size, matrix.size)

    if mask_pattern is None:
        mask_pattern, penalty = get_best_mask(
            matrix, lambda mask: matrix.setup_format_info(level, mask)
        )
        logger.debug("Applied mask pattern %d (penalty: %d)", mask_pattern, penalty)

    apply_mask(mask_pattern, matrix)
    matrix.setup_format_info(level, mask_pattern)

    return QRSymbol(
        _matrix=matrix,
        version=version,
        error_correction=level,
        mask_pattern=mask_pattern,
        segments=tuple(segments),
    )


class QRCodeGenerator:
    """Reusable encoder bound to an error correction level."""

    def __init__(self, ec_level: str = 'M', to_sjis: Optional[SJISConverter] = None):
        """
        Args:
            ec_level: 'L' (7%), 'M' (15%), 'Q' (25%), or 'H' (30%)
            to_sjis: Optional Shift JIS converter enabling kanji mode
        """
        self.ec_level = normalize_level(ec_level)
        self.to_sjis = to_sjis

    def generate(self, data: InputData, version: Optional[int] = None,
                 mask_pattern: Optional[int] = None) -> QRSymbol:
        return create(
            data,
            version=version,
            error_correction=self.ec_level,
            mask_pattern=mask_pattern,
            to_sjis=self.to_sjis,
        )
