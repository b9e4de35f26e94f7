"""
tests/test_matrix.py
Unit tests for matrix layout, data placement and masking.
"""
import pytest

from proofport_qr.exceptions import InvalidMaskError
from proofport_qr.format_info import get_version_bits
from proofport_qr.masking import (
    MASK_PATTERNS,
    apply_mask,
    calculate_penalty,
    get_best_mask,
    penalty_balance,
    penalty_boxes,
    penalty_finder_like,
    penalty_runs,
)
from proofport_qr.matrix import (
    ModuleMatrix,
    QRMatrix,
    get_alignment_coords,
    get_alignment_positions,
)

FINDER = [
    [1, 1, 1, 1, 1, 1, 1],
    [1, 0, 0, 0, 0, 0, 1],
    [1, 0, 1, 1, 1, 0, 1],
    [1, 0, 1, 1, 1, 0, 1],
    [1, 0, 1, 1, 1, 0, 1],
    [1, 0, 0, 0, 0, 0, 1],
    [1, 1, 1, 1, 1, 1, 1],
]


def block(matrix, row, col, height, width):
    return [matrix.modules[r][col:col + width] for r in range(row, row + height)]


class TestFunctionPatterns:
    """Tests for finder, timing and alignment patterns."""

    @pytest.mark.parametrize("version", range(1, 41))
    def test_size(self, version):
        assert QRMatrix(version).size == 4 * version + 17

    def test_finder_patterns(self):
        m = QRMatrix(1)
        assert block(m, 0, 0, 7, 7) == FINDER
        assert block(m, 0, 14, 7, 7) == FINDER
        assert block(m, 14, 0, 7, 7) == FINDER

    def test_separators_light_and_reserved(self):
        m = QRMatrix(1)
        for i in range(8):
            assert m.get(7, i) == 0 and m.is_reserved(7, i)
            assert m.get(i, 7) == 0 and m.is_reserved(i, 7)
            assert m.get(7, m.size - 1 - i) == 0 and m.is_reserved(7, m.size - 1 - i)

    def test_timing_patterns(self):
        m = QRMatrix(2)
        for i in range(8, m.size - 8):
            expected = 1 if i % 2 == 0 else 0
            assert m.get(6, i) == expected and m.is_reserved(6, i)
            assert m.get(i, 6) == expected and m.is_reserved(i, 6)

    def test_alignment_coords(self):
        assert get_alignment_coords(1) == []
        assert get_alignment_coords(2) == [6, 18]
        assert get_alignment_coords(7) == [6, 22, 38]
        assert get_alignment_coords(32) == [6, 34, 60, 86, 112, 138]
        assert get_alignment_coords(36) == [6, 24, 50, 76, 102, 128, 154]
        assert get_alignment_coords(40) == [6, 30, 58, 86, 114, 142, 170]

    def test_alignment_positions_skip_finders(self):
        assert get_alignment_positions(2) == [(18, 18)]
        positions = get_alignment_positions(7)
        assert len(positions) == 6
        assert (6, 6) not in positions and (6, 38) not in positions and (38, 6) not in positions

    def test_alignment_pattern(self):
        m = QRMatrix(2)
        assert block(m, 16, 16, 5, 5) == [
            [1, 1, 1, 1, 1],
            [1, 0, 0, 0, 1],
            [1, 0, 1, 0, 1],
            [1, 0, 0, 0, 1],
            [1, 1, 1, 1, 1],
        ]
        assert all(m.is_reserved(r, c) for r in range(16, 21) for c in range(16, 21))

    def test_version_info_blocks(self):
        m = QRMatrix(7)
        m.setup_version_info()
        read_top = sum(m.get(i // 3, i % 3 + m.size - 11) << i for i in range(18))
        read_left = sum(m.get(i % 3 + m.size - 11, i // 3) << i for i in range(18))
        assert read_top == read_left == get_version_bits(7)

    def test_no_version_info_below_7(self):
        m = QRMatrix(6)
        m.setup_version_info()
        assert not m.is_reserved(0, m.size - 11)

    def test_format_info_and_dark_module(self):
        m = QRMatrix(3)
        m.setup_format_info('M', 0)
        assert m.get(m.size - 8, 8) == 1
        assert m.is_reserved(8, 0) and m.is_reserved(0, 8) and m.is_reserved(8, m.size - 1)
        # timing module at (6, 8) is not part of the format area
        assert m.get(6, 8) == 1


class TestDataPlacement:
    """Tests for the zigzag fill."""

    def test_first_bits_bottom_right(self):
        m = QRMatrix(1)
        m.setup_format_info('M', 0)
        m.place_data(bytes([0b10110000]) + bytes(25))
        size = m.size
        # up the rightmost column pair, right module first
        assert m.get(size - 1, size - 1) == 1
        assert m.get(size - 1, size - 2) == 0
        assert m.get(size - 2, size - 1) == 1
        assert m.get(size - 2, size - 2) == 1

    def test_all_bits_placed(self):
        m = QRMatrix(1)
        m.setup_format_info('M', 0)
        assert m.place_data(bytes(26)) == 26 * 8

    def test_reserved_untouched(self):
        m = QRMatrix(2)
        m.setup_format_info('L', 0)
        before = m.copy()
        m.place_data(bytes([0xFF]) * 44)
        for r in range(m.size):
            for c in range(m.size):
                if m.is_reserved(r, c):
                    assert m.get(r, c) == before.get(r, c)

    def test_leftover_modules_light(self):
        """Version 2 has 7 remainder bits beyond its codewords."""
        m = QRMatrix(2)
        m.setup_format_info('L', 0)
        m.place_data(bytes([0xFF]) * 44)
        free = sum(1 for r in range(m.size) for c in range(m.size) if not m.is_reserved(r, c))
        dark = sum(m.get(r, c) for r in range(m.size) for c in range(m.size) if not m.is_reserved(r, c))
        assert free == 44 * 8 + 7
        assert dark == 44 * 8


class TestMasking:
    """Tests for mask patterns and application."""

    def test_mask_predicates(self):
        assert MASK_PATTERNS[0](0, 0) and not MASK_PATTERNS[0](0, 1)
        assert MASK_PATTERNS[1](2, 5) and not MASK_PATTERNS[1](1, 5)
        assert MASK_PATTERNS[2](4, 3) and not MASK_PATTERNS[2](4, 4)
        assert MASK_PATTERNS[5](0, 7)

    @pytest.mark.parametrize("mask", range(8))
    def test_apply_twice_restores(self, mask):
        m = QRMatrix(3)
        m.setup_format_info('Q', mask)
        m.place_data(bytes(range(70)))
        before = m.copy()
        apply_mask(mask, m)
        assert m != before
        apply_mask(mask, m)
        assert m == before

    def test_reserved_not_masked(self):
        m = QRMatrix(1)
        m.setup_format_info('M', 0)
        before = m.copy()
        apply_mask(0, m)
        for r in range(m.size):
            for c in range(m.size):
                if m.is_reserved(r, c):
                    assert m.get(r, c) == before.get(r, c)

    def test_invalid_mask(self):
        with pytest.raises(InvalidMaskError):
            apply_mask(8, QRMatrix(1))


class TestPenalties:
    """Tests for the four penalty rules."""

    def test_runs(self):
        m = ModuleMatrix(5)
        # 5 rows and 5 columns, each one run of 5
        assert penalty_runs(m) == 10 * 3

    def test_long_run(self):
        m = ModuleMatrix(7)
        for r in range(7):
            for c in range(7):
                m.set(r, c, (r + c) % 2)
        assert penalty_runs(m) == 0
        for c in range(7):
            m.set(3, c, 1)
        # one run of 7 in row 3
        assert penalty_runs(m) == 3 + 2

    def test_boxes(self):
        assert penalty_boxes(ModuleMatrix(5)) == 16 * 3
        checker = ModuleMatrix(4)
        for r in range(4):
            for c in range(4):
                checker.set(r, c, (r + c) % 2)
        assert penalty_boxes(checker) == 0

    def test_finder_like(self):
        m = ModuleMatrix(11)
        for c, bit in enumerate("10111010000"):
            m.set(0, c, int(bit))
        assert penalty_finder_like(m) == 40

    def test_finder_like_reversed_in_column(self):
        m = ModuleMatrix(11)
        for r, bit in enumerate("00001011101"):
            m.set(r, 0, int(bit))
        assert penalty_finder_like(m) == 40

    def test_balance(self):
        assert penalty_balance(ModuleMatrix(2)) == 100
        half = ModuleMatrix(2)
        half.set(0, 0, 1)
        half.set(1, 1, 1)
        assert penalty_balance(half) == 0

    def test_total(self):
        m = ModuleMatrix(5)
        assert calculate_penalty(m) == 30 + 48 + 0 + 100


class TestBestMask:
    """Tests for mask selection."""

    def test_ties_keep_first(self):
        m = ModuleMatrix(5)
        m.reserved = [[True] * 5 for _ in range(5)]
        assert get_best_mask(m)[0] == 0

    def test_matrix_left_unmasked(self):
        m = QRMatrix(2)
        m.setup_format_info('M', 0)
        m.place_data(bytes(range(44)))
        before = m.modules
        before = [list(row) for row in before]
        get_best_mask(m)
        assert m.modules == before

    def test_picks_minimum(self):
        m = QRMatrix(1)
        m.setup_format_info('L', 0)
        m.place_data(bytes(range(26)))

        def setup(mask):
            m.setup_format_info('L', mask)

        best, penalty = get_best_mask(m, setup)
        for mask in range(8):
            setup(mask)
            apply_mask(mask, m)
            assert calculate_penalty(m) >= penalty
            apply_mask(mask, m)
        assert 0 <= best < 8
