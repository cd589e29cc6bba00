"""Fixed-length bit array backing a Bloom filter."""

from __future__ import annotations


def count_bits(data: bytes | bytearray) -> int:
    """Count the number of set bits in a byte buffer."""
    if not data:
        return 0
    return sum(bin(b).count("1") for b in data)


class BitArray:
    """Fixed-length array of bits stored in a bytearray.

    Bit ``i`` lives in byte ``i // 8`` at offset ``i % 8``. Padding bits past
    ``length`` in the last byte are always zero, so byte-wise OR/AND and
    equality never see stale bits.

    Attributes:
        length: Number of addressable bits

    """

    __slots__ = ("_data", "length")

    def __init__(self, length: int, data: bytes | bytearray | None = None):
        """Initialize bit array.

        Args:
            length: Number of bits, at least 1
            data: Existing bytes to copy (for reconstruction from a snapshot)

        """
        if length < 1:
            msg = "Bit array length must be at least 1"
            raise ValueError(msg)

        self.length = length
        size = (length + 7) // 8

        if data is None:
            self._data = bytearray(size)
            return

        if len(data) != size:
            msg = f"Bit array size mismatch: expected {size} bytes, got {len(data)}"
            raise ValueError(msg)
        spare = size * 8 - length
        if spare and data[-1] >> (8 - spare):
            msg = "Bit array padding bits must be zero"
            raise ValueError(msg)
        self._data = bytearray(data)

    def __len__(self) -> int:
        """Return number of addressable bits."""
        return self.length

    def _check_index(self, index: int) -> None:
        if not 0 <= index < self.length:
            msg = f"Bit index {index} out of range [0, {self.length})"
            raise IndexError(msg)

    def get(self, index: int) -> bool:
        """Return whether bit ``index`` is set."""
        self._check_index(index)
        return bool(self._data[index // 8] & (1 << (index % 8)))

    def set(self, index: int) -> bool:
        """Set bit ``index``.

        Returns:
            True if the bit changed from 0 to 1

        """
        self._check_index(index)
        byte_index = index // 8
        mask = 1 << (index % 8)
        if self._data[byte_index] & mask:
            return False
        self._data[byte_index] |= mask
        return True

    __getitem__ = get

    def _check_compatible(self, other: BitArray) -> None:
        if self.length != other.length:
            msg = f"Bit array length mismatch: {self.length} != {other.length}"
            raise ValueError(msg)

    def or_update(self, other: BitArray) -> None:
        """OR ``other`` into this array in place."""
        self._check_compatible(other)
        merged = int.from_bytes(self._data, "little") | int.from_bytes(other._data, "little")
        self._data[:] = merged.to_bytes(len(self._data), "little")

    def and_update(self, other: BitArray) -> None:
        """AND ``other`` into this array in place."""
        self._check_compatible(other)
        merged = int.from_bytes(self._data, "little") & int.from_bytes(other._data, "little")
        self._data[:] = merged.to_bytes(len(self._data), "little")

    def clear(self) -> None:
        """Reset every bit to zero."""
        self._data[:] = bytes(len(self._data))

    def count(self) -> int:
        """Return the number of set bits (popcount)."""
        return count_bits(self._data)

    def copy(self) -> BitArray:
        """Return an independent copy."""
        return BitArray(self.length, self._data)

    def to_bytes(self) -> bytes:
        """Return the raw little-endian-per-byte storage."""
        return bytes(self._data)

    def __eq__(self, other: object) -> bool:
        """Bitwise equality of two arrays of the same length."""
        if not isinstance(other, BitArray):
            return NotImplemented
        return self.length == other.length and self._data == other._data

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        """Return string representation."""
        return f"BitArray(length={self.length}, set={self.count()})"
