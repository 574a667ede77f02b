"""
Unit tests for Bucketed Hash Set comparison and merging.
"""

import unittest

from tiny_digest.algorithms.bucketed import (
    BucketedHashSet,
    check_comparable,
    divergent_buckets,
    equals,
)
from tiny_digest.core.exceptions import IncompatibleSetsError


class TestBucketedHashSetEquality(unittest.TestCase):
    """Test cases for whole-set equality."""

    def test_identical_after_same_insert(self):
        """Test that sets stay identical after the same insert."""
        a = BucketedHashSet(4)
        b = BucketedHashSet(4)
        a.update("foo")
        b.update("foo")

        self.assertTrue(equals(a, b))
        self.assertTrue(a == b)
        self.assertTrue(a.equals(b))

    def test_divergence_after_different_insert(self):
        """Test that sets diverge after an extra insert."""
        a = BucketedHashSet(4)
        b = BucketedHashSet(4)
        a.update("foo")
        b.update("foo")
        b.update("bar")

        self.assertFalse(equals(a, b))
        self.assertTrue(a != b)

    def test_different_seeds_are_unequal(self):
        """Test that sets with different seeds are never equal."""
        a = BucketedHashSet(4, seed=123)
        b = BucketedHashSet(4, seed=456)

        # Same all-zero buckets, still unequal
        self.assertEqual(a.buckets, b.buckets)
        self.assertNotEqual(a, b)

        a.update("foo")
        b.update("foo")
        self.assertNotEqual(a, b)
        self.assertNotEqual(a.buckets, b.buckets)

    def test_different_bucket_counts_are_unequal(self):
        """Test that sets with different bucket counts are never equal."""
        a = BucketedHashSet(4)
        b = BucketedHashSet(5)
        self.assertNotEqual(a, b)

        a.update("foo")
        b.update("foo")
        self.assertNotEqual(a, b)

    def test_equality_with_other_types(self):
        """Test that a set never equals a non-set value."""
        digest = BucketedHashSet(2)

        self.assertFalse(equals(digest, None))
        self.assertFalse(equals(None, digest))
        self.assertFalse(equals(digest, (0, 2, [0, 0])))
        self.assertFalse(digest == (0, 2, [0, 0]))
        self.assertTrue(digest != "digest")

    def test_identity(self):
        """Test that a set equals itself."""
        digest = BucketedHashSet(3)
        digest.update("x")
        self.assertTrue(equals(digest, digest))

    def test_items_processed_ignored(self):
        """Test that equality depends only on digest state."""
        a = BucketedHashSet(4)
        b = BucketedHashSet(4)
        a.update("foo")
        a.update("foo")

        self.assertEqual(a.items_processed, 2)
        self.assertEqual(a, b)


class TestBucketedHashSetDivergence(unittest.TestCase):
    """Test cases for per-bucket divergence detection."""

    def test_no_divergence(self):
        """Test that equal sets have no divergent buckets."""
        a = BucketedHashSet(16, seed=1)
        b = BucketedHashSet(16, seed=1)
        for i in range(40):
            a.update(f"item-{i}")
            b.update(f"item-{i}")

        self.assertEqual(divergent_buckets(a, b), [])

    def test_divergence_localized(self):
        """Test that divergence is reported only for affected buckets."""
        a = BucketedHashSet(64, seed=7)
        b = BucketedHashSet(64, seed=7)
        for i in range(100):
            a.update(f"item-{i}", 1)
            b.update(f"item-{i}", 1)

        b.update("item-5", 1)
        b.update("item-5", 2)

        self.assertEqual(divergent_buckets(a, b), [a.bucket_for("item-5")])
        self.assertEqual(a.divergent_buckets(b), [a.bucket_for("item-5")])

    def test_divergence_sorted(self):
        """Test that divergent indices come back sorted and unique."""
        a = BucketedHashSet(32)
        b = BucketedHashSet(32)
        keys = [f"extra-{i}" for i in range(10)]
        for key in keys:
            b.update(key)

        result = divergent_buckets(a, b)
        self.assertEqual(result, sorted(set(result)))
        self.assertTrue(set(result).issubset({a.bucket_for(k) for k in keys}))
        self.assertGreater(len(result), 0)

    def test_incompatible_parameters(self):
        """Test that per-bucket comparison rejects mismatched sets."""
        with self.assertRaises(IncompatibleSetsError):
            divergent_buckets(BucketedHashSet(4, seed=1), BucketedHashSet(4, seed=2))

        with self.assertRaises(IncompatibleSetsError):
            divergent_buckets(BucketedHashSet(4), BucketedHashSet(8))

        # IncompatibleSetsError is a ValueError
        with self.assertRaises(ValueError):
            check_comparable(BucketedHashSet(4), BucketedHashSet(8))

    def test_wrong_type(self):
        """Test that comparing against a non-set raises TypeError."""
        with self.assertRaises(TypeError):
            divergent_buckets(BucketedHashSet(4), [0, 0, 0, 0])


class TestBucketedHashSetMerge(unittest.TestCase):
    """Test cases for merging sets."""

    def test_merge_is_xor(self):
        """Test that merging XORs buckets pairwise."""
        a = BucketedHashSet(8, seed=3)
        b = BucketedHashSet(8, seed=3)
        a.update("A")
        a.update("B")
        b.update("B")
        b.update("C")

        merged = a.merge(b)

        expected = BucketedHashSet(8, seed=3)
        expected.update("A")
        expected.update("C")

        self.assertEqual(merged, expected)
        self.assertEqual(merged.items_processed, 4)

        # Inputs are untouched
        self.assertEqual(a.items_processed, 2)
        self.assertNotEqual(a, merged)

    def test_merge_equal_sets_is_empty(self):
        """Test that merging equal sets yields an all-zero set."""
        a = BucketedHashSet(8)
        b = BucketedHashSet(8)
        for i in range(20):
            a.update(i)
            b.update(i)

        self.assertEqual(a.merge(b), BucketedHashSet(8))

    def test_merge_nonzero_buckets_match_divergence(self):
        """Test that the merged set's non-zero buckets are the divergent ones."""
        a = BucketedHashSet(16)
        b = BucketedHashSet(16)
        for i in range(30):
            a.update(f"k{i}")
        for i in range(25, 40):
            b.update(f"k{i}")

        merged = a.merge(b)
        non_zero = [i for i, value in enumerate(merged.buckets) if value != 0]

        self.assertEqual(non_zero, divergent_buckets(a, b))

    def test_merge_incompatible(self):
        """Test that merging mismatched sets fails."""
        with self.assertRaises(IncompatibleSetsError):
            BucketedHashSet(4, seed=1).merge(BucketedHashSet(4, seed=2))

        with self.assertRaises(TypeError):
            BucketedHashSet(4).merge("not a set")


if __name__ == "__main__":
    unittest.main()
