"""
Galois field GF(256) arithmetic and polynomials over it.

Uses the primitive polynomial x^8 + x^4 + x^3 + x^2 + 1 (0x11d) with
generator alpha = 2, as required for QR code error correction.

References:
- https://en.wikipedia.org/wiki/Finite_field_arithmetic
- https://research.swtch.com/field
"""

from typing import Iterable, List

from .exceptions import FieldError


#==============================================================================
# GALOIS FIELD GF(256) ARITHMETIC
#==============================================================================

class GF256:
    """
    Galois Field GF(2^8) with precomputed exponent and logarithm tables.

    The exponent table is doubled to 512 entries so that
    exp[log[a] + log[b]] never needs a modulo.
    """

    PRIMITIVE_POLY = 0x11d  # x^8 + x^4 + x^3 + x^2 + 1 = 285

    def __init__(self):
        self.exp_table = [0] * 512
        self.log_table = [0] * 256
        self._build_tables()

    def _build_tables(self):
        x = 1
        for i in range(255):
            self.exp_table[i] = x
            self.log_table[x] = i
            x <<= 1
            if x & 0x100:
                x ^= self.PRIMITIVE_POLY

        for i in range(255, 512):
            self.exp_table[i] = self.exp_table[i - 255]

    def log(self, n: int) -> int:
        """Discrete logarithm of n; undefined for 0."""
        if n < 1 or n > 255:
            raise FieldError(f"log({n}) is undefined in GF(256)")
        return self.log_table[n]

    def exp(self, n: int) -> int:
        return self.exp_table[n]

    def add(self, a: int, b: int) -> int:
        """Addition (and subtraction) in GF(256) is XOR."""
        return a ^ b

    def multiply(self, a: int, b: int) -> int:
        if a == 0 or b == 0:
            return 0
        return self.exp_table[self.log_table[a] + self.log_table[b]]

    def divide(self, a: int, b: int) -> int:
        if b == 0:
            raise FieldError("Division by zero in GF(256)")
        if a == 0:
            return 0
        return self.exp_table[(self.log_table[a] - self.log_table[b]) % 255]

    def power(self, a: int, n: int) -> int:
        if a == 0:
            return 0 if n > 0 else 1
        return self.exp_table[(self.log_table[a] * n) % 255]

    def inverse(self, a: int) -> int:
        """Multiplicative inverse, a^254 since a^255 = 1."""
        if a == 0:
            raise FieldError("No inverse for 0 in GF(256)")
        return self.exp_table[255 - self.log_table[a]]


# Shared field instance; the tables are immutable after construction
gf = GF256()


#==============================================================================
# POLYNOMIAL OPERATIONS OVER GF(256)
#==============================================================================

class Polynomial:
    """
    Polynomial with coefficients in GF(256).

    Coefficients are stored highest degree first, so coeffs[0] is the
    leading term. This is the order codewords are transmitted in.
    """

    def __init__(self, coefficients: Iterable[int], field: GF256 = None):
        self.gf = field or gf
        self.coeffs: List[int] = list(coefficients)

    @property
    def degree(self) -> int:
        return len(self.coeffs) - 1

    def __len__(self) -> int:
        return len(self.coeffs)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Polynomial):
            return NotImplemented
        return self.coeffs == other.coeffs

    def __repr__(self) -> str:
        return f"Polynomial({self.coeffs})"

    def multiply(self, other: "Polynomial") -> "Polynomial":
        """Convolution of coefficients with XOR accumulation."""
        result = [0] * (len(self.coeffs) + len(other.coeffs) - 1)
        for i, a in enumerate(self.coeffs):
            for j, b in enumerate(other.coeffs):
                result[i + j] ^= self.gf.multiply(a, b)
        return Polynomial(result, self.gf)

    def mod(self, divisor: "Polynomial") -> "Polynomial":
        """
        Remainder of self divided by divisor.

        Repeatedly cancels the leading term, then strips the leading zeros
        that cancellation leaves behind.
        """
        result = list(self.coeffs)
        while len(result) - len(divisor.coeffs) >= 0:
            coeff = result[0]
            for i, d in enumerate(divisor.coeffs):
                result[i] ^= self.gf.multiply(d, coeff)

            offset = 0
            while offset < len(result) and result[offset] == 0:
                offset += 1
            result = result[offset:]

        return Polynomial(result, self.gf)

    def evaluate(self, x: int) -> int:
        """Evaluate at x using Horner's method."""
        result = 0
        for coeff in self.coeffs:
            result = self.gf.multiply(result, x) ^ coeff
        return result

    @classmethod
    def generator(cls, degree: int, field: GF256 = None) -> "Polynomial":
        """
        Reed-Solomon generator polynomial of the given degree.

        g(x) = (x + alpha^0)(x + alpha^1)...(x + alpha^(degree-1))
        """
        field = field or gf
        poly = cls([1], field)
        for i in range(degree):
            poly = poly.multiply(cls([1, field.exp(i)], field))
        return poly
