"""
Hashing functions for tiny-digest.

This module provides the seeded FNV-1a hash used to route and fold values into
bucket digests. It requires no external dependencies and is optimized for speed
and portability across implementations, not cryptographic security.
"""

from typing import Any

# FNV-1a constants (32-bit variant)
FNV_PRIME = 16777619
FNV_OFFSET_BASIS = 2166136261

# The seed perturbs the offset basis: basis + seed * SEED_MULTIPLIER
SEED_MULTIPLIER = 13

UINT32_MASK = 0xFFFFFFFF


def to_bytes(value: Any) -> bytes:
    """
    Convert a value to the canonical byte string that gets hashed.

    Bytes-like values are used as-is and strings are UTF-8 encoded. Any other
    value is converted with str() first, so two values with the same string
    form (for example 123 and "123") hash identically. Pass strings or bytes
    when the digest has to match one computed by another implementation.

    Args:
        value: The value to convert.

    Returns:
        The bytes fed to the hash function.
    """
    if isinstance(value, bytes):
        return value
    if isinstance(value, (bytearray, memoryview)):
        return bytes(value)
    if isinstance(value, str):
        return value.encode("utf-8")
    return str(value).encode("utf-8")


def fnv1a_32(key: Any, seed: int = 0) -> int:
    """
    Pure Python implementation of FNV-1a hash (32-bit variant) with a seeded basis.

    The offset basis is shifted by seed * 13 before any byte is processed, which
    yields a distinct hash family per seed at no extra per-byte cost.

    Args:
        key: The key to hash (converted with to_bytes)
        seed: Signed integer seed

    Returns:
        32-bit hash value
    """
    h = (FNV_OFFSET_BASIS + seed * SEED_MULTIPLIER) & UINT32_MASK

    for byte in to_bytes(key):
        h ^= byte
        h = (h * FNV_PRIME) & UINT32_MASK

    return h
