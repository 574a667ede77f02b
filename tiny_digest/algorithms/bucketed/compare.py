"""
Whole-set and per-bucket comparison of bucketed hash sets.

Two sets are only comparable when they share both seed and bucket count;
equality treats mismatched parameters as "not equal", while per-bucket
comparison refuses them outright since bucket indices would not line up.
"""

import logging
from typing import TYPE_CHECKING, Any, List

from tiny_digest.core.base import DigestSummary
from tiny_digest.core.exceptions import IncompatibleSetsError

if TYPE_CHECKING:
    from tiny_digest.algorithms.bucketed.base import BucketedHashSet

logger = logging.getLogger(__name__)


def _same_kind(a: Any, b: Any) -> bool:
    return isinstance(a, DigestSummary) and (
        isinstance(b, a.__class__) or isinstance(a, b.__class__)
    )


def equals(a: Any, b: Any) -> bool:
    """
    Check whether two bucketed hash sets hold identical digests.

    Sets with a different seed or bucket count are never equal, whatever their
    bucket contents. Equal digests mean the sets are equal with high
    probability only: XOR folding can cancel out different contents.

    Args:
        a: The first set.
        b: The second set.

    Returns:
        True if seed, bucket count and every bucket value match.
    """
    if a is b:
        return True
    if not _same_kind(a, b):
        return False
    if a.seed != b.seed or a.bucket_count != b.bucket_count:
        return False
    return a.buckets == b.buckets


def check_comparable(a: "BucketedHashSet", b: "BucketedHashSet") -> None:
    """
    Ensure two sets can be compared or combined bucket by bucket.

    Raises:
        TypeError: If the operands are not sets of the same type.
        IncompatibleSetsError: If the seeds or bucket counts differ.
    """
    if not isinstance(a, DigestSummary):
        raise TypeError(f"Cannot compare {a.__class__.__name__}")
    a._check_same_type(b)

    if a.seed != b.seed:
        raise IncompatibleSetsError(
            f"Cannot compare sets with different seeds: {a.seed} and {b.seed}"
        )
    if a.bucket_count != b.bucket_count:
        raise IncompatibleSetsError(
            f"Cannot compare sets with different bucket counts: "
            f"{a.bucket_count} and {b.bucket_count}"
        )


def divergent_buckets(a: "BucketedHashSet", b: "BucketedHashSet") -> List[int]:
    """
    Find the buckets whose digests differ between two sets.

    Only the returned partitions need reconciling; the others match with high
    probability.

    Args:
        a: The first set.
        b: The second set.

    Returns:
        The sorted indices of the differing buckets.

    Raises:
        TypeError: If the operands are not sets of the same type.
        IncompatibleSetsError: If the seeds or bucket counts differ.
    """
    check_comparable(a, b)

    divergent = [
        index
        for index, (left, right) in enumerate(zip(a.buckets, b.buckets))
        if left != right
    ]

    logger.debug(
        "Found %d divergent buckets out of %d", len(divergent), a.bucket_count
    )
    return divergent
