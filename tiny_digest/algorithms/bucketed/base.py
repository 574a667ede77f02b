"""
Bucketed Hash Set implementation for tiny-digest.

This module provides the Bucketed Hash Set, a partitioned anti-entropy
structure used for divergence detection between replicas as a cheaper
alternative to a Merkle tree. Values are routed to one of a fixed number of
buckets, and each bucket keeps the XOR of the hashes of every value toggled
into it. Comparing two sets bucket by bucket narrows a divergence down to the
partitions that actually differ, without storing or sending the values.

The structure provides the following guarantees:
1. Space Complexity: O(bucket_count), 32 bits per bucket
2. Update Time: O(len(value)) for hashing, O(1) for the fold
3. Comparison Time: O(bucket_count)
4. Toggling the same value twice restores the previous state, and the final
   state does not depend on the order of updates.
"""

import array
import logging
import math
import sys
from typing import Any, Dict, List, Tuple

from tiny_digest.algorithms.bucketed import codec, compare
from tiny_digest.core.base import DigestSummary
from tiny_digest.core.exceptions import FormatError, InvalidArgument
from tiny_digest.core.hash import fnv1a_32

logger = logging.getLogger(__name__)

DEFAULT_SEED = 0
DEFAULT_ITEMS_PER_BUCKET = 32

# Probability that two differing contents fold to the same 32-bit bucket value
BUCKET_FALSE_MATCH_PROBABILITY = 2.0**-32


class BucketedHashSet(DigestSummary[Any]):
    """
    Bucketed Hash Set for divergence detection between copies of a set.

    Each value is hashed with a seeded FNV-1a hash. The high 16 bits of that
    hash pick the bucket and the full hash is XOR-folded into it, so a single
    toggle operation both inserts and removes a value: applying it twice
    cancels out.

    Only digests are kept, never the values, so the set cannot tell which
    values a bucket holds. Bucket equality is also probabilistic: XOR folding
    is not collision free, and two different symmetric differences can cancel
    to the same bucket value, making differing buckets look equal. The chance
    of such a false match shrinks as bucket_count grows relative to the number
    of differing values.

    Two sets are only comparable when they share seed and bucket_count.

    Example:
        # Two replicas agree on parameters up front
        local = BucketedHashSet(bucket_count=64, seed=7)
        remote = BucketedHashSet(bucket_count=64, seed=7)

        local.update("user:1", 3)   # key plus revision
        remote.update("user:1", 4)

        # Only the bucket holding "user:1" needs reconciling
        local.divergent_buckets(remote)  # -> [local.bucket_for("user:1")]
    """

    # Instances are mutable
    __hash__ = None

    def __init__(self, bucket_count: int, seed: int = DEFAULT_SEED):
        """
        Initialize a new Bucketed Hash Set with every bucket set to zero.

        Args:
            bucket_count: Number of buckets. More buckets localize divergence
                more precisely and lower the false match rate.
            seed: Integer seed for the hash function. Replicas must use the
                same seed for their digests to be comparable.

        Raises:
            InvalidArgument: If bucket_count is not a positive integer or seed
                is not an integer.
        """
        super().__init__()

        if not codec.is_int(bucket_count):
            raise InvalidArgument("Bucket count must be an integer")
        if bucket_count < 1:
            raise InvalidArgument("Bucket count must be greater than 0")
        if not codec.is_int(seed):
            raise InvalidArgument("Seed must be an integer")

        self._bucket_count = bucket_count
        self._seed = seed
        self._buckets = array.array("L", [0]) * bucket_count

    @classmethod
    def create_for_capacity(
        cls,
        expected_items: int,
        items_per_bucket: int = DEFAULT_ITEMS_PER_BUCKET,
        seed: int = DEFAULT_SEED,
    ) -> "BucketedHashSet":
        """
        Create a set sized for an expected number of values.

        Args:
            expected_items: Number of values the set is expected to hold.
            items_per_bucket: Target number of values per bucket.
            seed: Integer seed for the hash function.

        Returns:
            A new set with ceil(expected_items / items_per_bucket) buckets.

        Raises:
            InvalidArgument: If either count is not a positive integer.
        """
        if not codec.is_int(expected_items) or expected_items < 1:
            raise InvalidArgument("Expected items must be a positive integer")
        if not codec.is_int(items_per_bucket) or items_per_bucket < 1:
            raise InvalidArgument("Items per bucket must be a positive integer")

        bucket_count = max(1, math.ceil(expected_items / items_per_bucket))
        return cls(bucket_count=bucket_count, seed=seed)

    @property
    def seed(self) -> int:
        """The hash seed, fixed at construction."""
        return self._seed

    @property
    def bucket_count(self) -> int:
        """The number of buckets, fixed at construction."""
        return self._bucket_count

    @property
    def buckets(self) -> Tuple[int, ...]:
        """A snapshot of the bucket values, indexed from 0."""
        return tuple(self._buckets)

    def bucket_for(self, value: Any) -> int:
        """
        Get the index of the bucket a value is routed to.

        Routing depends only on the value and the seed.

        Args:
            value: The primary value.

        Returns:
            The bucket index in [0, bucket_count).
        """
        return (fnv1a_32(value, self._seed) >> 16) % self._bucket_count

    def update(self, item: Any, *extra_values: Any) -> int:
        """
        Toggle a value in the set.

        The primary value alone decides the bucket. Extra values, such as a
        revision counter, are hashed and XORed into the folded digest in call
        order but never change the bucket, so repeated toggles of one key
        always land in the same place. Calling update twice with the same
        arguments restores the bucket to its previous value.

        Args:
            item: The primary value to toggle.
            *extra_values: Optional payload folded into the same bucket.

        Returns:
            The index of the bucket that was toggled.
        """
        super().update(item)

        h = fnv1a_32(item, self._seed)
        index = (h >> 16) % self._bucket_count

        for extra in extra_values:
            h ^= fnv1a_32(extra, self._seed)

        self._buckets[index] ^= h
        return index

    def toggle(self, item: Any, *extra_values: Any) -> int:
        """Alias of update()."""
        return self.update(item, *extra_values)

    def clear(self) -> None:
        """Reset every bucket to zero, keeping seed and bucket count."""
        super().clear()
        self._buckets = array.array("L", [0]) * self._bucket_count

    def equals(self, other: Any) -> bool:
        """Check whether another set holds an identical digest."""
        return compare.equals(self, other)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DigestSummary):
            return NotImplemented
        return compare.equals(self, other)

    def divergent_buckets(self, other: "BucketedHashSet") -> List[int]:
        """
        Get the indices of buckets that differ from another set.

        Raises:
            TypeError: If other is not a BucketedHashSet.
            IncompatibleSetsError: If seeds or bucket counts differ.
        """
        return compare.divergent_buckets(self, other)

    def merge(self, other: "BucketedHashSet") -> "BucketedHashSet":
        """
        Combine this set with another one bucket by bucket.

        The result holds the pairwise XOR of both sets' buckets, which is the
        digest of the values toggled an odd number of times across both sets.
        Merging a set with an equal one therefore yields an all-zero set, and
        the non-zero buckets of the result are exactly the divergent ones.

        Args:
            other: Another Bucketed Hash Set with the same seed and bucket count.

        Returns:
            A new merged set.

        Raises:
            TypeError: If other is not a BucketedHashSet.
            IncompatibleSetsError: If seeds or bucket counts differ.
        """
        compare.check_comparable(self, other)

        result = self.__class__(bucket_count=self._bucket_count, seed=self._seed)
        result._buckets = array.array(
            "L", (a ^ b for a, b in zip(self._buckets, other._buckets))
        )
        result._items_processed = self._combine_items_processed(other)

        return result

    def export(self) -> codec.State:
        """
        Export the set as its (seed, bucket_count, buckets) triple.

        The returned bucket list is independent of this set.
        """
        return codec.export_state(self)

    @classmethod
    def import_state(cls, state: Any) -> "BucketedHashSet":
        """
        Rebuild a set from an exported (seed, bucket_count, buckets) triple.

        Args:
            state: The exported state.

        Returns:
            A new set owning a copy of the bucket values.

        Raises:
            FormatError: If the state is malformed, has a non-integer seed, a
                non-positive bucket count, a bucket list of the wrong length,
                or bucket values outside the unsigned 32-bit range.
        """
        seed, bucket_count, buckets = codec.validate_state(state)

        digest = cls(bucket_count=bucket_count, seed=seed)
        digest._buckets = array.array("L", buckets)

        logger.debug("Imported %s: seed=%d, buckets=%d", cls.__name__, seed, bucket_count)
        return digest

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert the set to a dictionary for serialization.

        Returns:
            A dictionary representation of the set.
        """
        data = self._base_dict()
        data.update(
            {
                "seed": self._seed,
                "bucket_count": self._bucket_count,
                "buckets": list(self._buckets),
            }
        )
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BucketedHashSet":
        """
        Create a set from a dictionary representation.

        Args:
            data: The dictionary containing the set state.

        Returns:
            A new set initialized with the given state.

        Raises:
            FormatError: If required keys are missing or the state is invalid.
        """
        if not isinstance(data, dict):
            raise FormatError(f"Expected a dictionary, got {type(data).__name__}")

        try:
            state = (data["seed"], data["bucket_count"], data["buckets"])
        except KeyError as exc:
            raise FormatError(f"Missing key in serialized set: {exc}") from exc

        items_processed = data.get("items_processed", 0)
        if not codec.is_int(items_processed) or items_processed < 0:
            raise FormatError("Items processed must be a non-negative integer")

        digest = cls.import_state(state)
        digest._items_processed = items_processed

        return digest

    def to_bytes(self) -> bytes:
        """Encode the exported state in the compact binary layout."""
        return codec.encode_state(self.export(), format="binary")

    @classmethod
    def from_bytes(cls, data: bytes) -> "BucketedHashSet":
        """Decode a set produced by to_bytes()."""
        return cls.import_state(codec.decode_state(data, format="binary"))

    def estimate_size(self) -> int:
        """
        Estimate the current memory usage of this set in bytes.

        Returns:
            Estimated memory usage in bytes.
        """
        return super().estimate_size() + sys.getsizeof(self._buckets)

    def error_bounds(self) -> Dict[str, float]:
        """
        Get the accuracy characteristics of the digest.

        Returns:
            A dictionary with:
            - bucket_false_match_probability: chance that a differing bucket
              folds to the same value as its counterpart
            - expected_toggles_per_bucket: average number of updates per bucket
        """
        return {
            "bucket_false_match_probability": BUCKET_FALSE_MATCH_PROBABILITY,
            "expected_toggles_per_bucket": self._items_processed / self._bucket_count,
        }

    def get_stats(self) -> Dict[str, Any]:
        """
        Get detailed statistics about the current state of the set.

        Returns:
            A dictionary containing various statistics about the set.
        """
        stats = super().get_stats()

        zero_buckets = sum(1 for value in self._buckets if value == 0)
        stats.update(
            {
                "seed": self._seed,
                "bucket_count": self._bucket_count,
                "zero_buckets": zero_buckets,
                "non_zero_buckets": self._bucket_count - zero_buckets,
                "occupancy": (self._bucket_count - zero_buckets) / self._bucket_count,
            }
        )

        return stats

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(bucket_count={self._bucket_count}, seed={self._seed})"
