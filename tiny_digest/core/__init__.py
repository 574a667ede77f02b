"""
Core functionality for tiny-digest.
"""

from tiny_digest.core.base import DigestSummary
from tiny_digest.core.exceptions import (
    DigestError,
    FormatError,
    IncompatibleSetsError,
    InvalidArgument,
)
from tiny_digest.core.hash import fnv1a_32, to_bytes

__all__ = [
    # Base classes
    "DigestSummary",
    # Errors
    "DigestError",
    "InvalidArgument",
    "FormatError",
    "IncompatibleSetsError",
    # Utility functions
    "fnv1a_32",
    "to_bytes",
]
