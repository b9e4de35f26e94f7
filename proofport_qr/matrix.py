"""
QR code matrix construction: function patterns and data placement.

References:
- https://www.thonky.com/qr-code-tutorial/module-placement-matrix
"""

from typing import List, Sequence, Tuple

from .format_info import get_format_bits, get_version_bits
from .tables import check_version, get_symbol_size


class ModuleMatrix:
    """
    Square grid of modules with a parallel grid of reserved flags.

    Reserved modules belong to function patterns; masking and data
    placement never touch them.
    """

    def __init__(self, size: int):
        if size <= 0:
            raise ValueError("Matrix size must be positive")
        self.size = size
        self.modules: List[List[int]] = [[0] * size for _ in range(size)]
        self.reserved: List[List[bool]] = [[False] * size for _ in range(size)]

    def set(self, row: int, col: int, value, reserved: bool = False):
        self.modules[row][col] = 1 if value else 0
        if reserved:
            self.reserved[row][col] = True

    def get(self, row: int, col: int) -> int:
        return self.modules[row][col]

    def xor(self, row: int, col: int, value):
        self.modules[row][col] ^= 1 if value else 0

    def is_reserved(self, row: int, col: int) -> bool:
        return self.reserved[row][col]

    def copy(self) -> "ModuleMatrix":
        other = ModuleMatrix(self.size)
        other.modules = [list(row) for row in self.modules]
        other.reserved = [list(row) for row in self.reserved]
        return other

    def dark_count(self) -> int:
        return sum(sum(row) for row in self.modules)

    def to_list(self) -> List[List[bool]]:
        return [[bool(cell) for cell in row] for row in self.modules]

    def __eq__(self, other) -> bool:
        if not isinstance(other, ModuleMatrix):
            return NotImplemented
        return self.modules == other.modules and self.reserved == other.reserved


def get_alignment_coords(version: int) -> List[int]:
    """
    Row/column coordinates of alignment pattern centres.

    Every pairing of these coordinates is a centre, except the three that
    would land on a finder pattern.
    """
    if check_version(version) == 1:
        return []

    pos_count = version // 7 + 2
    size = get_symbol_size(version)
    if size == 145:
        interval = 26
    else:
        interval = -(-(size - 13) // (2 * pos_count - 2)) * 2

    positions = [size - 7]
    for _ in range(1, pos_count - 1):
        positions.append(positions[-1] - interval)
    positions.append(6)
    positions.reverse()
    return positions


def get_alignment_positions(version: int) -> List[Tuple[int, int]]:
    coords = get_alignment_coords(version)
    last = len(coords) - 1
    positions = []
    for i, row in enumerate(coords):
        for j, col in enumerate(coords):
            if (i == 0 and j == 0) or (i == 0 and j == last) or (i == last and j == 0):
                continue
            positions.append((row, col))
    return positions


def get_finder_positions(version: int) -> List[Tuple[int, int]]:
    """Top-left corners of the three finder patterns."""
    size = get_symbol_size(version)
    return [(0, 0), (size - 7, 0), (0, size - 7)]


class QRMatrix(ModuleMatrix):
    """
    Module matrix for one symbol version, with all function patterns
    stamped and reserved.
    """

    def __init__(self, version: int):
        self.version = check_version(version)
        super().__init__(get_symbol_size(version))
        self._place_finder_patterns()
        self._place_timing_patterns()
        self._place_alignment_patterns()

    def _place_finder_patterns(self):
        """Finder patterns with their light separator border."""
        for row, col in get_finder_positions(self.version):
            for r in range(-1, 8):
                if not 0 <= row + r < self.size:
                    continue
                for c in range(-1, 8):
                    if not 0 <= col + c < self.size:
                        continue
                    dark = (
                        (0 <= r <= 6 and (c == 0 or c == 6))
                        or (0 <= c <= 6 and (r == 0 or r == 6))
                        or (2 <= r <= 4 and 2 <= c <= 4)
                    )
                    self.set(row + r, col + c, dark, reserved=True)

    def _place_timing_patterns(self):
        """Timing patterns (row 6 and column 6)."""
        for i in range(8, self.size - 8):
            dark = i % 2 == 0
            self.set(i, 6, dark, reserved=True)
            self.set(6, i, dark, reserved=True)

    def _place_alignment_patterns(self):
        for row, col in get_alignment_positions(self.version):
            for r in range(-2, 3):
                for c in range(-2, 3):
                    dark = abs(r) == 2 or abs(c) == 2 or (r == 0 and c == 0)
                    self.set(row + r, col + c, dark, reserved=True)

    def setup_version_info(self):
        """Two 6x3 version blocks, for version 7 and up."""
        if self.version < 7:
            return
        bits = get_version_bits(self.version)
        for i in range(18):
            row = i // 3
            col = i % 3 + self.size - 8 - 3
            dark = (bits >> i) & 1
            self.set(row, col, dark, reserved=True)
            self.set(col, row, dark, reserved=True)

    def setup_format_info(self, level: str, mask_pattern: int):
        """
        Write both copies of the 15-bit format word and the dark module.

        Called once before data placement (to reserve the area) and again
        for each mask candidate and for the chosen mask.
        """
        bits = get_format_bits(level, mask_pattern)
        size = self.size

        for i in range(15):
            dark = (bits >> i) & 1

            # vertical
            if i < 6:
                self.set(i, 8, dark, reserved=True)
            elif i < 8:
                self.set(i + 1, 8, dark, reserved=True)
            else:
                self.set(size - 15 + i, 8, dark, reserved=True)

            # horizontal
            if i < 8:
                self.set(8, size - i - 1, dark, reserved=True)
            elif i < 9:
                self.set(8, 15 - i - 1 + 1, dark, reserved=True)
            else:
                self.set(8, 15 - i - 1, dark, reserved=True)

        # fixed dark module
        self.set(size - 8, 8, 1, reserved=True)

    def place_data(self, codewords: Sequence[int]) -> int:
        """
        Place codeword bits in the two-column zigzag, MSB first.

        Starts bottom-right, moves up, then down in the next column pair,
        skipping the vertical timing column and reserved modules. Modules
        left over once the data runs out stay light. Returns the number of
        data bits placed.
        """
        total_bits = len(codewords) * 8
        bit_index = 0
        row = self.size - 1
        inc = -1

        col = self.size - 1
        while col > 0:
            if col == 6:
                col -= 1

            while True:
                for c in range(2):
                    if self.is_reserved(row, col - c):
                        continue
                    dark = 0
                    if bit_index < total_bits:
                        dark = (codewords[bit_index // 8] >> (7 - bit_index % 8)) & 1
                    self.set(row, col - c, dark)
                    bit_index += 1

                row += inc
                if row < 0 or row >= self.size:
                    row -= inc
                    inc = -inc
                    break

            col -= 2

        return min(bit_index, total_bits)
