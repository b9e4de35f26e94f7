"""
Data masking with penalty calculation.

References:
- https://www.thonky.com/qr-code-tutorial/data-masking
"""

import logging
from typing import Callable, List, Optional, Tuple

from .exceptions import InvalidMaskError
from .matrix import ModuleMatrix

logger = logging.getLogger(__name__)

MASK_PATTERNS: List[Callable[[int, int], bool]] = [
    lambda r, c: (r + c) % 2 == 0,
    lambda r, c: r % 2 == 0,
    lambda r, c: c % 3 == 0,
    lambda r, c: (r + c) % 3 == 0,
    lambda r, c: (r // 2 + c // 3) % 2 == 0,
    lambda r, c: (r * c) % 2 + (r * c) % 3 == 0,
    lambda r, c: ((r * c) % 2 + (r * c) % 3) % 2 == 0,
    lambda r, c: ((r * c) % 3 + (r + c) % 2) % 2 == 0,
]

# Penalty weights
N1 = 3
N2 = 3
N3 = 40
N4 = 10

# 1:1:3:1:1 finder-like run with four light modules on one side
_FINDER_LIKE = (0b10111010000, 0b00001011101)


def is_valid_mask(mask_pattern) -> bool:
    return isinstance(mask_pattern, int) and not isinstance(mask_pattern, bool) \
        and 0 <= mask_pattern < len(MASK_PATTERNS)


def check_mask(mask_pattern) -> int:
    if not is_valid_mask(mask_pattern):
        raise InvalidMaskError(f"Invalid mask pattern: {mask_pattern!r}")
    return mask_pattern


def apply_mask(mask_pattern: int, matrix: ModuleMatrix):
    """XOR the mask into every non-reserved module, in place."""
    mask_func = MASK_PATTERNS[check_mask(mask_pattern)]
    for r in range(matrix.size):
        for c in range(matrix.size):
            if not matrix.is_reserved(r, c) and mask_func(r, c):
                matrix.xor(r, c, 1)


#==============================================================================
# PENALTY RULES
#==============================================================================

def penalty_runs(matrix: ModuleMatrix) -> int:
    """N1: runs of 5 or more same-colour modules in a row or column."""
    size = matrix.size
    modules = matrix.modules
    points = 0

    for i in range(size):
        for line in (modules[i], [modules[r][i] for r in range(size)]):
            run_length = 1
            for j in range(1, size):
                if line[j] == line[j - 1]:
                    run_length += 1
                else:
                    if run_length >= 5:
                        points += N1 + (run_length - 5)
                    run_length = 1
            if run_length >= 5:
                points += N1 + (run_length - 5)

    return points


def penalty_boxes(matrix: ModuleMatrix) -> int:
    """N2: every 2x2 block of one colour."""
    modules = matrix.modules
    points = 0
    for r in range(matrix.size - 1):
        for c in range(matrix.size - 1):
            total = modules[r][c] + modules[r][c + 1] + modules[r + 1][c] + modules[r + 1][c + 1]
            if total == 4 or total == 0:
                points += 1
    return points * N2


def penalty_finder_like(matrix: ModuleMatrix) -> int:
    """N3: finder-like 1:1:3:1:1 patterns in rows and columns."""
    size = matrix.size
    modules = matrix.modules
    points = 0

    for i in range(size):
        bits_row = 0
        bits_col = 0
        for j in range(size):
            bits_row = ((bits_row << 1) & 0x7FF) | modules[i][j]
            if j >= 10 and bits_row in _FINDER_LIKE:
                points += 1

            bits_col = ((bits_col << 1) & 0x7FF) | modules[j][i]
            if j >= 10 and bits_col in _FINDER_LIKE:
                points += 1

    return points * N3


def penalty_balance(matrix: ModuleMatrix) -> int:
    """N4: 10 points per 5% step the dark ratio strays from 50%."""
    dark_count = matrix.dark_count()
    total = matrix.size * matrix.size
    # ceil(dark% / 5) in integer arithmetic
    steps = -(-dark_count * 100 // (total * 5))
    return abs(steps - 10) * N4


def calculate_penalty(matrix: ModuleMatrix) -> int:
    """Total penalty score for a masked matrix."""
    return (
        penalty_runs(matrix)
        + penalty_boxes(matrix)
        + penalty_finder_like(matrix)
        + penalty_balance(matrix)
    )


def get_best_mask(matrix: ModuleMatrix,
                  setup_format: Optional[Callable[[int], None]] = None) -> Tuple[int, int]:
    """
    Choose the mask pattern with lowest penalty.

    `setup_format(mask)` writes the format bits for each candidate so that
    the format area is scored consistently. The matrix is left unmasked.
    Ties keep the lower-numbered pattern.
    """
    best_mask = 0
    best_penalty = None

    for mask_num in range(len(MASK_PATTERNS)):
        if setup_format is not None:
            setup_format(mask_num)
        apply_mask(mask_num, matrix)
        penalty = calculate_penalty(matrix)
        apply_mask(mask_num, matrix)

        logger.debug("Mask %d penalty %d", mask_num, penalty)
        if best_penalty is None or penalty < best_penalty:
            best_penalty = penalty
            best_mask = mask_num

    return best_mask, best_penalty
