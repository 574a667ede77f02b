"""
Exception types raised by tiny-digest.

All of them derive from ValueError so callers that already catch ValueError
around summary construction and deserialization keep working.
"""


class DigestError(Exception):
    """Base class for all tiny-digest errors."""


class InvalidArgument(DigestError, ValueError):
    """Raised when a digest is constructed with an invalid bucket count or seed."""


class FormatError(DigestError, ValueError):
    """Raised when an exported state is malformed, incomplete or inconsistent."""


class IncompatibleSetsError(DigestError, ValueError):
    """Raised when two digests with different seeds or bucket counts are combined."""
