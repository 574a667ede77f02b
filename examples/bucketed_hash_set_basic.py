"""
Bucketed Hash Set Demo for tiny-digest.

This example demonstrates the toggle semantics of the Bucketed Hash Set and
how its state is exported, encoded and imported again.
"""

from tiny_digest.algorithms.bucketed import (
    BucketedHashSet,
    decode_state,
    encode_state,
)


def demonstrate_toggle():
    """Demonstrate that toggling a value twice removes it."""
    print("\n=== Toggle Demo ===")

    digest = BucketedHashSet(bucket_count=4, seed=0)
    print(f"Fresh set: {digest.buckets}")

    index = digest.update("foo")
    print(f"  Toggled 'foo' into bucket {index}: {digest.buckets}")

    digest.update("foo")
    print(f"  Toggled 'foo' again: {digest.buckets}")
    print(f"  Equal to a fresh set: {digest == BucketedHashSet(4)}")

    # Extra values change the digest but never the bucket
    print("\nToggling a key with a revision payload:")
    for revision in range(3):
        index = digest.update("user:42", revision)
        print(f"  'user:42' rev {revision} -> bucket {index}")


def demonstrate_state_transfer():
    """Demonstrate exporting and importing the digest state."""
    print("\n=== State Transfer Demo ===")

    digest = BucketedHashSet.create_for_capacity(1000, seed=7)
    for i in range(1000):
        digest.update(f"record-{i}")

    state = digest.export()
    print(f"Exported state: seed={state[0]}, bucket_count={state[1]}")

    json_str = encode_state(state, format="json")
    binary = encode_state(state, format="binary")
    print(f"  JSON size: {len(json_str)} bytes")
    print(f"  Binary size: {len(binary)} bytes")

    restored = BucketedHashSet.import_state(decode_state(binary, format="binary"))
    print(f"  Restored set equals original: {restored == digest}")

    stats = digest.get_stats()
    print(f"  Occupied buckets: {stats['non_zero_buckets']}/{stats['bucket_count']}")
    print(f"  Approximate memory usage: {digest.estimate_size()} bytes")


if __name__ == "__main__":
    demonstrate_toggle()
    demonstrate_state_transfer()
