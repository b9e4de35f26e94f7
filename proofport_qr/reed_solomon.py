"""
Reed-Solomon encoder for QR code error correction.

References:
- https://en.wikipedia.org/wiki/Reed-Solomon_error_correction
- https://en.wikiversity.org/wiki/Reed-Solomon_codes_for_coders
"""

from functools import lru_cache
from typing import Optional, Sequence

from .exceptions import EncoderNotInitializedError
from .galois import Polynomial


@lru_cache(maxsize=None)
def _generator_coeffs(degree: int) -> tuple:
    return tuple(Polynomial.generator(degree).coeffs)


class ReedSolomonEncoder:
    """
    Computes error correction codewords for a block of data codewords.

    The encoder must be initialized with its degree (the number of EC
    codewords) before `encode` is called.
    """

    def __init__(self, degree: Optional[int] = None):
        self.degree: Optional[int] = None
        self.generator: Optional[Polynomial] = None
        if degree is not None:
            self.initialize(degree)

    def initialize(self, degree: int):
        """Build the generator polynomial for `degree` EC codewords."""
        self.degree = degree
        self.generator = Polynomial(_generator_coeffs(degree))

    def encode(self, data: Sequence[int]) -> bytes:
        """
        Return exactly `degree` EC bytes for `data`.

        The EC bytes are the remainder of data(x) * x^degree divided by
        the generator.
        """
        if self.generator is None:
            raise EncoderNotInitializedError("Encoder not initialized")

        padded = Polynomial(list(data) + [0] * self.degree)
        remainder = padded.mod(self.generator).coeffs

        # remainder drops leading zeros, put them back
        start = self.degree - len(remainder)
        if start > 0:
            remainder = [0] * start + remainder

        return bytes(remainder)
