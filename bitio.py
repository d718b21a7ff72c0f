class BitInputStream: # Sequential bit source over packed bytes
    """
    Reads the bits of data most significant bit first.

    pad_bits is the number of 0 bits added at the end of the last byte when
    the bits were packed; those are never delivered.
    """

    def __init__(self, data: bytes, pad_bits: int = 0):
        if not 0 <= pad_bits <= 7:
            raise ValueError(f"pad_bits must be in 0..7, got {pad_bits}")
        if pad_bits and not data:
            raise ValueError("pad_bits given for empty data")
        self.data = bytes(data)
        self.total_bits = len(self.data) * 8 - pad_bits
        self.bits_read = 0

    @classmethod
    def from_bitstring(cls, bits: str) -> "BitInputStream":
        """Build a stream from a string of '0' and '1' characters."""
        out = bytearray()
        acc = 0
        acc_bits = 0
        for ch in bits:
            if ch not in "01":
                raise ValueError(f"invalid bit character {ch!r}")
            acc = (acc << 1) | (1 if ch == '1' else 0)
            acc_bits += 1
            if acc_bits == 8:
                out.append(acc)
                acc = 0
                acc_bits = 0

        pad_bits = 0
        if acc_bits != 0:
            pad_bits = 8 - acc_bits
            out.append((acc << pad_bits) & 0xFF)

        return cls(bytes(out), pad_bits)

    def has_next_bit(self) -> bool:
        return self.bits_read < self.total_bits

    def next_bit(self) -> int:
        if not self.has_next_bit():
            raise EOFError("no more bits")
        byte = self.data[self.bits_read >> 3]
        bit = (byte >> (7 - (self.bits_read & 7))) & 1
        self.bits_read += 1
        return bit
