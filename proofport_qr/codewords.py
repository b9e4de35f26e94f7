"""
Codeword assembly: segments to the final interleaved codeword sequence.

References:
- https://www.thonky.com/qr-code-tutorial/data-encoding
- https://www.thonky.com/qr-code-tutorial/structure-final-message
"""

import logging
from typing import List, Sequence

from .bitbuffer import BitBuffer
from .modes import MODE_INDICATOR_BITS
from .reed_solomon import ReedSolomonEncoder
from .tables import (
    get_blocks_count,
    get_symbol_total_codewords,
    get_total_ec_codewords,
)

logger = logging.getLogger(__name__)

# Filler codewords appended after the terminator, alternating
PAD_CODEWORDS = (0xEC, 0x11)
TERMINATOR_BITS = 4


def write_segments(segments: Sequence, version: int) -> BitBuffer:
    """Mode indicator, character count and payload of every segment."""
    buffer = BitBuffer()
    for segment in segments:
        buffer.put(segment.mode.bit, MODE_INDICATOR_BITS)
        buffer.put(segment.length, segment.mode.char_count_bits(version))
        segment.write(buffer)
    return buffer


def pad_buffer(buffer: BitBuffer, data_bits: int):
    """Terminator, byte alignment and pad codewords up to `data_bits`."""
    buffer.put(0, max(0, min(TERMINATOR_BITS, data_bits - len(buffer))))

    while len(buffer) % 8 != 0:
        buffer.put_bit(0)

    remaining = (data_bits - len(buffer)) // 8
    for i in range(remaining):
        buffer.put(PAD_CODEWORDS[i % 2], 8)


def create_codewords(buffer: BitBuffer, version: int, level: str) -> bytes:
    """
    Split data codewords into blocks, add EC codewords and interleave.

    Blocks of group 1 hold floor(data / blocks) codewords; the last
    (total % blocks) blocks hold one more. All blocks share one EC count.
    """
    total_codewords = get_symbol_total_codewords(version)
    ec_total_codewords = get_total_ec_codewords(version, level)
    data_total_codewords = total_codewords - ec_total_codewords
    ec_total_blocks = get_blocks_count(version, level)

    blocks_in_group2 = total_codewords % ec_total_blocks
    blocks_in_group1 = ec_total_blocks - blocks_in_group2

    total_codewords_in_group1 = total_codewords // ec_total_blocks
    data_codewords_in_group1 = data_total_codewords // ec_total_blocks
    data_codewords_in_group2 = data_codewords_in_group1 + 1

    ec_count = total_codewords_in_group1 - data_codewords_in_group1
    rs = ReedSolomonEncoder(ec_count)

    data = buffer.to_bytes()
    dc_blocks: List[bytes] = []
    ec_blocks: List[bytes] = []
    offset = 0

    for b in range(ec_total_blocks):
        size = data_codewords_in_group1 if b < blocks_in_group1 else data_codewords_in_group2
        block = data[offset:offset + size]
        dc_blocks.append(block)
        ec_blocks.append(rs.encode(block))
        offset += size

    result = bytearray()
    max_data_size = max(len(block) for block in dc_blocks)
    for i in range(max_data_size):
        for block in dc_blocks:
            if i < len(block):
                result.append(block[i])

    for i in range(ec_count):
        for block in ec_blocks:
            result.append(block[i])

    return bytes(result)


def create_data(version: int, level: str, segments: Sequence) -> bytes:
    """Final codeword stream for `segments` in a (version, level) symbol."""
    total_codewords = get_symbol_total_codewords(version)
    data_bits = (total_codewords - get_total_ec_codewords(version, level)) * 8

    buffer = write_segments(segments, version)
    logger.debug("Encoded %d data bits of %d available", len(buffer), data_bits)
    pad_buffer(buffer, data_bits)

    return create_codewords(buffer, version, level)
