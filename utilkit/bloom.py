"""A Bloom filter held in memory or mapped directly from a file."""

from __future__ import annotations

import math
import mmap
import os
import struct
from collections.abc import Callable, Sequence
from typing import Any

from utilkit.bloomhash import (
    default_hash,
    estimate_elements_by_values,
    optimal_parameters,
)

__all__ = ["BloomFilterError", "BloomFilter"]

HashFunction = Callable[[int, Any], Sequence[int]]

_MASK64 = (1 << 64) - 1
# Trailer after the bit array: estimated elements, elements added, rate.
_TRAILER = struct.Struct("<QQf")
_COUNT = struct.Struct("<Q")


class BloomFilterError(ValueError):
    """Raised for invalid parameters, data or incompatible filters."""


def _as_float32(value: float) -> float:
    return struct.unpack("<f", struct.pack("<f", value))[0]


class BloomFilter:
    """A Bloom filter sized from an expected element count and error rate.

    The bit array lives either in memory or in a memory-mapped file. Files
    hold the bit array followed by the estimated element count, the number
    of elements added (both unsigned 64-bit) and the false positive rate
    (32-bit float), all little-endian.
    """

    def __init__(
        self,
        estimated_elements: int,
        false_positive_rate: float,
        hash_function: HashFunction | None = None,
    ) -> None:
        self._configure(estimated_elements, false_positive_rate, hash_function)
        self._bloom: bytearray | mmap.mmap | None = bytearray(self._bloom_length)
        self._elements_added = 0
        self._file = None
        self._filesize = 0

    # ------------------------------------------------------------------
    # construction
    # ------------------------------------------------------------------
    def _configure(
        self,
        estimated_elements: int,
        false_positive_rate: float,
        hash_function: HashFunction | None,
    ) -> None:
        try:
            hashes, bits, length = optimal_parameters(
                estimated_elements, false_positive_rate
            )
        except ValueError as exc:
            raise BloomFilterError(str(exc)) from exc
        self._estimated_elements = estimated_elements
        self._false_positive_probability = _as_float32(false_positive_rate)
        self._number_hashes = hashes
        self._number_bits = bits
        self._bloom_length = length
        self.set_hash_function(hash_function)

    @classmethod
    def _blank(cls) -> BloomFilter:
        return cls.__new__(cls)

    @classmethod
    def on_disk(
        cls,
        estimated_elements: int,
        false_positive_rate: float,
        filepath: str | os.PathLike[str],
        hash_function: HashFunction | None = None,
    ) -> BloomFilter:
        """Create an empty filter in ``filepath`` and map it into memory."""
        template = cls(estimated_elements, false_positive_rate, hash_function)
        with open(filepath, "w+b") as fp:
            fp.write(bytes(template._bloom_length))
            fp.write(
                _TRAILER.pack(
                    template._estimated_elements,
                    0,
                    template._false_positive_probability,
                )
            )
        return cls.from_file_on_disk(filepath, hash_function)

    @staticmethod
    def _read_trailer(data: bytes) -> tuple[int, int, float]:
        if len(data) < _TRAILER.size:
            raise BloomFilterError("file too short to hold a bloom filter")
        return _TRAILER.unpack(data[-_TRAILER.size:])

    @classmethod
    def from_file(
        cls,
        filepath: str | os.PathLike[str],
        hash_function: HashFunction | None = None,
    ) -> BloomFilter:
        """Load a previously exported filter fully into memory."""
        with open(filepath, "rb") as fp:
            data = fp.read()
        estimated, added, rate = cls._read_trailer(data)
        bf = cls._blank()
        bf._configure(estimated, rate, hash_function)
        if len(data) - _TRAILER.size < bf._bloom_length:
            raise BloomFilterError("file does not hold the full bit array")
        bf._bloom = bytearray(data[: bf._bloom_length])
        bf._elements_added = added
        bf._file = None
        bf._filesize = 0
        return bf

    @classmethod
    def from_file_on_disk(
        cls,
        filepath: str | os.PathLike[str],
        hash_function: HashFunction | None = None,
    ) -> BloomFilter:
        """Map a previously exported filter from ``filepath`` without loading it."""
        fp = open(filepath, "r+b")
        try:
            size = os.fstat(fp.fileno()).st_size
            if size < _TRAILER.size:
                raise BloomFilterError("file too short to hold a bloom filter")
            fp.seek(size - _TRAILER.size)
            estimated, added, rate = cls._read_trailer(fp.read(_TRAILER.size))
            bf = cls._blank()
            bf._configure(estimated, rate, hash_function)
            if size - _TRAILER.size < bf._bloom_length:
                raise BloomFilterError("file does not hold the full bit array")
            bf._bloom = mmap.mmap(fp.fileno(), size)
        except BaseException:
            fp.close()
            raise
        bf._elements_added = added
        bf._file = fp
        bf._filesize = size
        return bf

    @classmethod
    def from_hex(
        cls, hex_string: str, hash_function: HashFunction | None = None
    ) -> BloomFilter:
        """Rebuild a filter from the output of :meth:`export_hex`."""
        length = len(hex_string)
        if length % 2 != 0 or length < 40:
            raise BloomFilterError("unable to parse bloom filter hex string")
        try:
            rate_bits = bytes.fromhex(hex_string[-8:])
            added = int(hex_string[-24:-8], 16)
            estimated = int(hex_string[-40:-24], 16)
        except ValueError as exc:
            raise BloomFilterError("unable to parse bloom filter hex string") from exc
        (rate,) = struct.unpack(">f", rate_bits)
        bf = cls._blank()
        bf._configure(estimated, rate, hash_function)
        body = hex_string[: bf._bloom_length * 2]
        if len(body) != bf._bloom_length * 2 or length - 40 < len(body):
            raise BloomFilterError("hex string does not hold the full bit array")
        try:
            bf._bloom = bytearray(bytes.fromhex(body))
        except ValueError as exc:
            raise BloomFilterError("unable to parse bloom filter hex string") from exc
        bf._elements_added = added
        bf._file = None
        bf._filesize = 0
        return bf

    def set_hash_function(self, hash_function: HashFunction | None) -> None:
        """Use ``hash_function`` (or the default FNV-1a hashes when None)."""
        self._hash_function = default_hash if hash_function is None else hash_function

    # ------------------------------------------------------------------
    # lifetime
    # ------------------------------------------------------------------
    def close(self) -> None:
        """Release the bit array and, for mapped filters, the file."""
        if isinstance(self._bloom, mmap.mmap):
            self._bloom.flush()
            self._bloom.close()
        if self._file is not None:
            self._file.close()
        self._bloom = None
        self._file = None
        self._filesize = 0

    def __enter__(self) -> BloomFilter:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def __repr__(self) -> str:
        return (
            f"BloomFilter(estimated_elements={self._estimated_elements}, "
            f"false_positive_rate={self._false_positive_probability}, "
            f"elements_added={self._elements_added})"
        )

    # ------------------------------------------------------------------
    # properties
    # ------------------------------------------------------------------
    @property
    def estimated_elements(self) -> int:
        return self._estimated_elements

    @property
    def false_positive_probability(self) -> float:
        return self._false_positive_probability

    @property
    def number_hashes(self) -> int:
        return self._number_hashes

    @property
    def number_bits(self) -> int:
        return self._number_bits

    @property
    def bloom_length(self) -> int:
        return self._bloom_length

    @property
    def elements_added(self) -> int:
        return self._elements_added

    @property
    def hash_function(self) -> HashFunction:
        return self._hash_function

    @property
    def is_on_disk(self) -> bool:
        return self._file is not None

    @property
    def bloom(self) -> bytes:
        """A copy of the bit array."""
        return bytes(self._array()[: self._bloom_length])

    def _array(self) -> bytearray | mmap.mmap:
        if self._bloom is None:
            raise BloomFilterError("bloom filter has been closed")
        return self._bloom

    def _store_elements_added(self) -> None:
        if self._file is not None and self._bloom is not None:
            start = self._filesize - _TRAILER.size + 8
            self._bloom[start:start + 8] = _COUNT.pack(self._elements_added)

    # ------------------------------------------------------------------
    # operations
    # ------------------------------------------------------------------
    def clear(self) -> None:
        """Clear every bit and the count of added elements."""
        bloom = self._array()
        bloom[: self._bloom_length] = bytes(self._bloom_length)
        self._elements_added = 0
        self._store_elements_added()

    def stats(self) -> str:
        """A multi-line summary of the filter's parameters and state."""
        return (
            "BloomFilter\n"
            f"    bits: {self._number_bits}\n"
            f"    estimated elements: {self._estimated_elements}\n"
            f"    number hashes: {self._number_hashes}\n"
            f"    max false positive rate: {self._false_positive_probability:f}\n"
            f"    bloom length (8 bits): {self._bloom_length}\n"
            f"    elements added: {self._elements_added}\n"
            f"    estimated elements added: {self.estimate_elements()}\n"
            f"    current false positive rate: {self.current_false_positive_rate():f}\n"
            f"    export size (bytes): {self.export_size()}\n"
            f"    number bits set: {self.count_set_bits()}\n"
            f"    is on disk: {'yes' if self.is_on_disk else 'no'}\n"
        )

    def calculate_hashes(self, value: Any, number_hashes: int | None = None) -> list[int]:
        """Hashes of ``value``; by default as many as the filter uses."""
        count = self._number_hashes if number_hashes is None else number_hashes
        return [h & _MASK64 for h in self._hash_function(count, value)]

    def add(self, value: Any) -> None:
        """Add ``value`` to the filter."""
        self.add_hashes(self.calculate_hashes(value))

    def add_hashes(self, hashes: Sequence[int]) -> None:
        """Add an element given its precomputed hashes."""
        if len(hashes) < self._number_hashes:
            raise BloomFilterError("not enough hashes passed in")
        bloom = self._array()
        for h in hashes[: self._number_hashes]:
            position = (h & _MASK64) % self._number_bits
            bloom[position // 8] |= 1 << (position % 8)
        self._elements_added = (self._elements_added + 1) & _MASK64
        self._store_elements_added()

    def check(self, value: Any) -> bool:
        """True if ``value`` may be present; False if it is definitely absent."""
        return self.check_hashes(self.calculate_hashes(value))

    def check_hashes(self, hashes: Sequence[int]) -> bool:
        """Membership test from precomputed hashes."""
        if len(hashes) < self._number_hashes:
            raise BloomFilterError("not enough hashes passed in")
        bloom = self._array()
        for h in hashes[: self._number_hashes]:
            position = (h & _MASK64) % self._number_bits
            if not bloom[position // 8] & (1 << (position % 8)):
                return False
        return True

    def __contains__(self, value: Any) -> bool:
        return self.check(value)

    def current_false_positive_rate(self) -> float:
        """False positive rate implied by the number of elements added."""
        num = self._number_hashes * self._elements_added
        exponent = -num / self._number_bits
        return _as_float32((1 - math.exp(exponent)) ** self._number_hashes)

    def export(self, filepath: str | os.PathLike[str]) -> None:
        """Write the filter to ``filepath``; mapped filters are only flushed."""
        bloom = self._array()
        if isinstance(bloom, mmap.mmap):
            bloom.flush()
            return
        with open(filepath, "wb") as fp:
            fp.write(bytes(bloom[: self._bloom_length]))
            fp.write(
                _TRAILER.pack(
                    self._estimated_elements,
                    self._elements_added,
                    self._false_positive_probability,
                )
            )

    def export_hex(self) -> str:
        """The filter as a hex string: bits, counts and the rate's float bits."""
        return (
            self.bloom.hex()
            + f"{self._estimated_elements:016x}"
            + f"{self._elements_added:016x}"
            + struct.pack(">f", self._false_positive_probability).hex()
        )

    def export_size(self) -> int:
        """Size in bytes of the exported file."""
        return self._bloom_length + _TRAILER.size

    def count_set_bits(self) -> int:
        """Number of bits set to 1."""
        return sum(byte.bit_count() for byte in self.bloom)

    def estimate_elements(self) -> int:
        """Estimate distinct elements added from the bits that are set."""
        return estimate_elements_by_values(
            self._number_bits, self.count_set_bits(), self._number_hashes
        )

    def set_elements_to_estimated(self) -> None:
        """Replace the added-elements count with the estimate."""
        self._elements_added = self.estimate_elements() & _MASK64
        self._store_elements_added()

    # ------------------------------------------------------------------
    # set operations
    # ------------------------------------------------------------------
    def _check_compatible(self, other: BloomFilter) -> None:
        if (
            self._number_hashes != other._number_hashes
            or self._number_bits != other._number_bits
            or self._hash_function is not other._hash_function
        ):
            raise BloomFilterError("bloom filters are not compatible")

    def _combine(self, other: BloomFilter, op: Callable[[int, int], int]) -> BloomFilter:
        self._check_compatible(other)
        result = type(self)(
            self._estimated_elements,
            self._false_positive_probability,
            self._hash_function,
        )
        result._bloom = bytearray(op(a, b) for a, b in zip(self.bloom, other.bloom))
        result.set_elements_to_estimated()
        return result

    def union(self, other: BloomFilter) -> BloomFilter:
        """A new in-memory filter holding the union of both filters."""
        return self._combine(other, lambda a, b: a | b)

    def intersection(self, other: BloomFilter) -> BloomFilter:
        """A new in-memory filter holding the intersection of both filters."""
        return self._combine(other, lambda a, b: a & b)

    def count_union_bits_set(self, other: BloomFilter) -> int:
        """Bits set in the union of both filters."""
        self._check_compatible(other)
        return sum((a | b).bit_count() for a, b in zip(self.bloom, other.bloom))

    def count_intersection_bits_set(self, other: BloomFilter) -> int:
        """Bits set in the intersection of both filters."""
        self._check_compatible(other)
        return sum((a & b).bit_count() for a, b in zip(self.bloom, other.bloom))

    def jaccard_index(self, other: BloomFilter) -> float:
        """Similarity of two filters: 1.0 identical, 0.0 disjoint."""
        union_bits = self.count_union_bits_set(other)
        if union_bits == 0:
            return 1.0
        return _as_float32(self.count_intersection_bits_set(other) / union_bits)