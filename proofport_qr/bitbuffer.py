"""
Append-only bit buffer used to serialize segments into codewords.
"""


class BitBuffer:
    """
    Growable sequence of bits packed MSB-first into a bytearray.

    The bit length is tracked separately from the backing bytes, so a
    partially filled last byte is never mistaken for data.
    """

    def __init__(self):
        self._buffer = bytearray()
        self._length = 0

    def __len__(self) -> int:
        return self._length

    def get_length_in_bits(self) -> int:
        return self._length

    def get(self, index: int) -> int:
        """Bit at position `index`, counting from the first bit written."""
        if not 0 <= index < self._length:
            raise IndexError(f"bit index {index} out of range")
        byte = self._buffer[index // 8]
        return (byte >> (7 - index % 8)) & 1

    def put(self, value: int, length: int):
        """Append the low `length` bits of `value`, most significant first."""
        if length < 0 or value >> length:
            raise ValueError(f"{value} does not fit in {length} bits")
        for i in range(length - 1, -1, -1):
            self.put_bit((value >> i) & 1)

    def put_bit(self, bit: int):
        byte_index = self._length // 8
        if len(self._buffer) <= byte_index:
            self._buffer.append(0)
        if bit:
            self._buffer[byte_index] |= 0x80 >> (self._length % 8)
        self._length += 1

    def to_bytes(self) -> bytes:
        return bytes(self._buffer)

    def __repr__(self) -> str:
        bits = "".join(str(self.get(i)) for i in range(self._length))
        return f"BitBuffer({bits!r})"
