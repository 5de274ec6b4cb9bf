"""Hashing and sizing helpers for Bloom filters."""

from __future__ import annotations

import math
import struct

__all__ = [
    "fnv_1a",
    "default_hash",
    "estimate_elements_by_values",
    "optimal_parameters",
]

_MASK64 = (1 << 64) - 1
_FNV_OFFSET = 14695981039346656037
_FNV_PRIME = 1099511628211
_LOG_TWO_SQUARED = 0.480453013918201388143813800
_LOG_TWO = 0.693147180559945286226764000


def _key_bytes(key: str | bytes) -> bytes:
    data = key.encode("utf-8") if isinstance(key, str) else bytes(key)
    end = data.find(b"\0")
    return data if end == -1 else data[:end]


def fnv_1a(key: str | bytes, seed: int) -> int:
    """64-bit FNV-1a of ``key`` with the offset basis shifted by ``31 * seed``.

    Hashing stops at the first NUL byte.
    """
    h = (_FNV_OFFSET + 31 * seed) & _MASK64
    for byte in _key_bytes(key):
        h ^= byte
        h = (h * _FNV_PRIME) & _MASK64
    return h


def default_hash(num_hashes: int, value: str | bytes) -> list[int]:
    """Return ``num_hashes`` hashes of ``value``, seeded 0, 1, 2, ..."""
    return [fnv_1a(value, seed) for seed in range(num_hashes)]


def estimate_elements_by_values(m: int, x: int, k: int) -> int:
    """Estimate distinct elements from ``m`` bits, ``x`` set bits, ``k`` hashes."""
    if x >= m:
        raise ValueError("cannot estimate elements when every bit is set")
    log_n = math.log(1 - x / m)
    return int(-((m / k) * log_n))


def _as_float32(value: float) -> float:
    return struct.unpack("<f", struct.pack("<f", value))[0]


def optimal_parameters(
    estimated_elements: int, false_positive_rate: float
) -> tuple[int, int, int]:
    """Return ``(number_hashes, number_bits, bloom_length)`` for the targets.

    ``bloom_length`` is the number of bytes needed to hold the bits.
    """
    if not 0 < estimated_elements <= _MASK64:
        raise ValueError("estimated elements must be in 1..2**64-1")
    if not 0.0 < false_positive_rate < 1.0:
        raise ValueError("false positive rate must be between 0 and 1")
    n = estimated_elements
    p = _as_float32(false_positive_rate)
    number_bits = math.ceil((-n * math.log(p)) / _LOG_TWO_SQUARED)
    number_hashes = math.floor(_LOG_TWO * number_bits / n + 0.5)
    bloom_length = math.ceil(number_bits / 8)
    return number_hashes, number_bits, bloom_length