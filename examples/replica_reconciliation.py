"""
Replica reconciliation example for tiny-digest.

Two replicas of a key/revision store each maintain a Bucketed Hash Set.
Instead of exchanging their full contents, they compare digests, find the
divergent buckets, and only resend the keys that route to those buckets.
"""

import logging
import random

from tiny_digest.algorithms.bucketed import BucketedHashSet, divergent_buckets

BUCKET_COUNT = 64
SEED = 1234


class Replica:
    """A toy key/revision store that keeps its digest in sync with its data."""

    def __init__(self, name):
        self.name = name
        self.records = {}
        self.digest = BucketedHashSet(BUCKET_COUNT, SEED)

    def put(self, key, revision):
        # Remove the old (key, revision) contribution before adding the new one
        if key in self.records:
            self.digest.update(key, self.records[key])
        self.records[key] = revision
        self.digest.update(key, revision)

    def keys_in_buckets(self, buckets):
        wanted = set(buckets)
        return [key for key in self.records if self.digest.bucket_for(key) in wanted]


def reconcile(source, target):
    """Push the records of the divergent buckets from source to target."""
    divergent = divergent_buckets(source.digest, target.digest)
    print(f"  Divergent buckets: {divergent}")

    sent = 0
    for key in source.keys_in_buckets(divergent):
        if target.records.get(key) != source.records[key]:
            target.put(key, source.records[key])
            sent += 1

    print(f"  Sent {sent} of {len(source.records)} records")


def main():
    logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")
    rng = random.Random(42)

    primary = Replica("primary")
    secondary = Replica("secondary")

    print("\n=== Replica Reconciliation Demo ===")
    for i in range(500):
        primary.put(f"key-{i}", 1)
        secondary.put(f"key-{i}", 1)
    print(f"Replicas in sync: {primary.digest == secondary.digest}")

    # Primary receives writes the secondary misses
    for _ in range(5):
        primary.put(f"key-{rng.randint(0, 499)}", rng.randint(2, 9))
    print(f"Replicas in sync after missed writes: {primary.digest == secondary.digest}")

    reconcile(primary, secondary)
    print(f"Replicas in sync after reconciliation: {primary.digest == secondary.digest}")


if __name__ == "__main__":
    main()
