"""
tiny-digest - Partitioned Bucket Digests for Anti-Entropy

tiny-digest is a Python library for detecting divergence between copies of a set
by comparing small per-bucket digests instead of the values themselves.
"""

__version__ = "0.1.0"

# Import main classes to make them available at the top level
from tiny_digest.algorithms.bucketed import (
    BucketedHashSet,
    decode_state,
    divergent_buckets,
    encode_state,
    equals,
    export_state,
    import_state,
)
from tiny_digest.core.base import DigestSummary
from tiny_digest.core.exceptions import (
    DigestError,
    FormatError,
    IncompatibleSetsError,
    InvalidArgument,
)

__all__ = [
    # Core base classes
    "DigestSummary",
    # Errors
    "DigestError",
    "InvalidArgument",
    "FormatError",
    "IncompatibleSetsError",
    # Algorithm implementations
    "BucketedHashSet",
    "export_state",
    "import_state",
    "encode_state",
    "decode_state",
    "equals",
    "divergent_buckets",
]
