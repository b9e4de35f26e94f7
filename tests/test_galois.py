"""
tests/test_galois.py
Unit tests for GF(256) arithmetic, polynomials and Reed-Solomon coding.
"""
import pytest

from proofport_qr.exceptions import EncoderNotInitializedError, FieldError
from proofport_qr.galois import GF256, Polynomial, gf
from proofport_qr.reed_solomon import ReedSolomonEncoder


class TestGF256:
    """Tests for field tables and arithmetic."""

    def test_exp_table_start(self):
        """alpha^0..alpha^7 are the powers of two; alpha^8 wraps to 0x1d."""
        assert gf.exp_table[:8] == [1, 2, 4, 8, 16, 32, 64, 128]
        assert gf.exp_table[8] == 0x1d

    def test_exp_table_doubled(self):
        """The second half of the exponent table repeats the first."""
        for i in range(255):
            assert gf.exp_table[i + 255] == gf.exp_table[i]

    def test_log_inverts_exp(self):
        for i in range(255):
            assert gf.log(gf.exp(i)) == i

    def test_log_of_zero_rejected(self):
        with pytest.raises(FieldError):
            gf.log(0)

    def test_multiply_by_zero(self):
        assert gf.multiply(0, 77) == 0
        assert gf.multiply(77, 0) == 0

    def test_multiply_matches_shift_and_add(self):
        """Table multiplication agrees with carry-less multiplication."""
        def slow(a, b):
            result = 0
            while b:
                if b & 1:
                    result ^= a
                b >>= 1
                a <<= 1
                if a & 0x100:
                    a ^= GF256.PRIMITIVE_POLY
            return result

        for a in (1, 2, 3, 83, 202, 255):
            for b in (1, 7, 100, 254):
                assert gf.multiply(a, b) == slow(a, b)

    def test_inverse(self):
        for a in range(1, 256):
            assert gf.multiply(a, gf.inverse(a)) == 1

    def test_inverse_of_zero_rejected(self):
        with pytest.raises(FieldError):
            gf.inverse(0)

    def test_divide(self):
        assert gf.divide(gf.multiply(83, 202), 202) == 83
        with pytest.raises(FieldError):
            gf.divide(5, 0)


class TestPolynomial:
    """Tests for polynomial algebra over GF(256)."""

    def test_multiply_by_one(self):
        p = Polynomial([3, 5, 7])
        assert p.multiply(Polynomial([1])) == p

    def test_multiply_linear_factors(self):
        """(x + 1)(x + 1) = x^2 + 1 since 1 + 1 = 0."""
        assert Polynomial([1, 1]).multiply(Polynomial([1, 1])).coeffs == [1, 0, 1]

    def test_generator_degree_7(self):
        assert Polynomial.generator(7).coeffs == [1, 127, 122, 154, 164, 11, 68, 117]

    def test_generator_degree_10(self):
        assert Polynomial.generator(10).coeffs == [
            1, 216, 194, 159, 111, 199, 94, 95, 113, 157, 193
        ]

    def test_generator_roots(self):
        """alpha^0 .. alpha^(n-1) are roots of the generator."""
        gen = Polynomial.generator(13)
        for i in range(13):
            assert gen.evaluate(gf.exp(i)) == 0

    def test_mod_of_multiple_is_zero(self):
        gen = Polynomial.generator(5)
        product = gen.multiply(Polynomial([9, 1, 200]))
        assert product.mod(gen).coeffs == []

    def test_mod_shorter_than_divisor(self):
        gen = Polynomial.generator(5)
        assert Polynomial([4, 2]).mod(gen).coeffs == [4, 2]


class TestReedSolomon:
    """Reed-Solomon encoding against published vectors."""

    def test_iso_numeric_example(self):
        """ISO/IEC 18004 Annex I: '01234567' as version 1-M."""
        data = [16, 32, 12, 86, 97, 128, 236, 17, 236, 17, 236, 17, 236, 17, 236, 17]
        ec = ReedSolomonEncoder(10).encode(data)
        assert list(ec) == [165, 36, 212, 193, 237, 54, 199, 135, 44, 85]

    def test_hello_world_1m(self):
        data = [32, 91, 11, 120, 209, 114, 220, 77, 97, 64, 236, 17, 236, 17, 236, 17]
        ec = ReedSolomonEncoder(10).encode(data)
        assert list(ec) == [196, 35, 39, 119, 235, 215, 231, 226, 93, 23]

    def test_wikiversity_example(self):
        """'hello world' in byte mode, from Reed-Solomon codes for coders."""
        data = [0x40, 0xd2, 0x75, 0x47, 0x76, 0x17, 0x32, 0x06,
                0x27, 0x26, 0x96, 0xc6, 0xc6, 0x96, 0x70, 0xec]
        ec = ReedSolomonEncoder(10).encode(data)
        assert list(ec) == [0xbc, 0x2a, 0x90, 0x13, 0x6b, 0xaf, 0xef, 0xfd, 0x4b, 0xe0]

    def test_output_length_is_degree(self):
        """Leading zero remainder terms are kept."""
        rs = ReedSolomonEncoder(18)
        assert len(rs.encode([0] * 15)) == 18
        assert rs.encode([0] * 15) == bytes(18)

    def test_codeword_divisible_by_generator(self):
        rs = ReedSolomonEncoder(7)
        data = [1, 2, 3, 4, 5, 6, 7, 8, 9]
        codeword = Polynomial(data + list(rs.encode(data)))
        assert codeword.mod(rs.generator).coeffs == []

    def test_uninitialized_encoder(self):
        with pytest.raises(EncoderNotInitializedError):
            ReedSolomonEncoder().encode([1, 2, 3])

    def test_initialize_later(self):
        rs = ReedSolomonEncoder()
        rs.initialize(10)
        assert rs.degree == 10
        assert len(rs.encode([1, 2, 3])) == 10
