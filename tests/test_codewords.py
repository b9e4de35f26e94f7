"""
tests/test_codewords.py
Unit tests for codeword assembly, padding and interleaving.
"""
from proofport_qr.bitbuffer import BitBuffer
from proofport_qr.codewords import create_codewords, create_data, pad_buffer, write_segments
from proofport_qr.reed_solomon import ReedSolomonEncoder
from proofport_qr.segments import AlphanumericSegment, ByteSegment, NumericSegment
from proofport_qr.tables import get_blocks_count, get_data_codewords, get_symbol_total_codewords

HELLO_WORLD_1M_DATA = [32, 91, 11, 120, 209, 114, 220, 77, 97, 64, 236, 17, 236, 17, 236, 17]
HELLO_WORLD_1M_EC = [196, 35, 39, 119, 235, 215, 231, 226, 93, 23]


class TestWriteSegments:
    """Tests for segment headers."""

    def test_numeric_header(self):
        buf = write_segments([NumericSegment("12345")], 1)
        bits = "".join(str(buf.get(i)) for i in range(14))
        assert bits == "0001" + "0000000101"

    def test_byte_header_widens_at_version_10(self):
        assert len(write_segments([ByteSegment("a")], 9)) == 4 + 8 + 8
        assert len(write_segments([ByteSegment("a")], 10)) == 4 + 16 + 8


class TestPadding:
    """Tests for terminator and pad codewords."""

    def test_pad_alternates(self):
        buf = BitBuffer()
        buf.put(0b0001, 4)
        pad_buffer(buf, 6 * 8)
        assert buf.to_bytes() == bytes([0x10, 0xEC, 0x11, 0xEC, 0x11, 0xEC])

    def test_short_terminator(self):
        """Only the bits that fit of the 4-bit terminator are written."""
        buf = BitBuffer()
        buf.put(0, 6)
        pad_buffer(buf, 8)
        assert len(buf) == 8

    def test_full_buffer_untouched(self):
        buf = BitBuffer()
        buf.put(0xFF, 8)
        pad_buffer(buf, 8)
        assert buf.to_bytes() == b"\xff"


class TestCreateData:
    """Full codeword streams against reference symbols."""

    def test_hello_world_1m(self):
        codewords = create_data(1, 'M', [AlphanumericSegment("HELLO WORLD")])
        assert list(codewords) == HELLO_WORLD_1M_DATA + HELLO_WORLD_1M_EC

    def test_iso_numeric_example(self):
        codewords = create_data(1, 'M', [NumericSegment("01234567")])
        assert list(codewords[:16]) == [16, 32, 12, 86, 97, 128, 236, 17,
                                        236, 17, 236, 17, 236, 17, 236, 17]
        assert list(codewords[16:]) == [165, 36, 212, 193, 237, 54, 199, 135, 44, 85]

    def test_exact_fit_without_terminator_room(self):
        """41 digits use 151 of the 152 data bits of a 1-L symbol."""
        codewords = create_data(1, 'L', [NumericSegment("1" * 41)])
        assert len(codewords) == get_symbol_total_codewords(1)

    def test_length_is_total_codewords(self):
        for version, level in ((1, 'H'), (7, 'Q'), (15, 'L'), (40, 'H')):
            codewords = create_data(version, level, [ByteSegment("proof")])
            assert len(codewords) == get_symbol_total_codewords(version)


class TestInterleaving:
    """Tests for block split and interleaving, using 5-Q (two groups)."""

    def setup_method(self):
        self.version, self.level = 5, 'Q'
        data_count = get_data_codewords(self.version, self.level)
        assert data_count == 62
        assert get_blocks_count(self.version, self.level) == 4
        self.data = bytes(range(data_count))
        buf = BitBuffer()
        for byte in self.data:
            buf.put(byte, 8)
        self.codewords = create_codewords(buf, self.version, self.level)

    def test_data_columns(self):
        """Blocks of 15, 15, 16, 16 start at 0, 15, 30, 46."""
        assert list(self.codewords[:4]) == [0, 15, 30, 46]
        assert list(self.codewords[4:8]) == [1, 16, 31, 47]

    def test_longer_blocks_finish_the_data(self):
        assert list(self.codewords[60:62]) == [45, 61]

    def test_ec_columns(self):
        rs = ReedSolomonEncoder(18)
        blocks = [self.data[0:15], self.data[15:30], self.data[30:46], self.data[46:62]]
        ec = [rs.encode(block) for block in blocks]
        expected = bytes(ec[b][i] for i in range(18) for b in range(4))
        assert self.codewords[62:] == expected
        assert len(self.codewords) == 134
