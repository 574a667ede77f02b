"""
Bucketed Hash Set implementations for tiny-digest.

This module provides the partitioned digest used for divergence detection
between replicas, along with its state codec and comparison helpers.

This includes:
- BucketedHashSet: fixed array of XOR-folded bucket digests
- export_state / import_state: conversion to and from the (seed, bucket_count, buckets) triple
- encode_state / decode_state: JSON and binary encodings of that triple
- equals / divergent_buckets: whole-set and per-bucket comparison
"""

from tiny_digest.algorithms.bucketed.codec import (
    decode_state,
    encode_state,
    export_state,
    import_state,
    validate_state,
)
from tiny_digest.algorithms.bucketed.compare import (
    check_comparable,
    divergent_buckets,
    equals,
)
from tiny_digest.algorithms.bucketed.base import BucketedHashSet

__all__ = [
    "BucketedHashSet",
    "export_state",
    "import_state",
    "validate_state",
    "encode_state",
    "decode_state",
    "equals",
    "divergent_buckets",
    "check_comparable",
]
