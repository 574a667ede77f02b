"""
Algorithm implementations for tiny-digest.
"""

from tiny_digest.algorithms.bucketed import BucketedHashSet

__all__ = [
    "BucketedHashSet",
]
