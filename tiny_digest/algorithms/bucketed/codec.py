"""
State import/export for bucketed hash sets.

The exported state is the ordered triple (seed, bucket_count, buckets) and is
the only externally visible form of a bucketed hash set. Field order is part of
the format: any encoding has to preserve it so independently written endpoints
can exchange digests.

Two encodings of the triple are provided:
- json: the triple as a JSON array, ``[seed, bucket_count, [b0, b1, ...]]``.
- binary: a big-endian header of a signed 64-bit seed and an unsigned 32-bit
  bucket count, followed by one unsigned 32-bit word per bucket.
"""

import array
import json
import logging
import struct
from typing import TYPE_CHECKING, Any, List, Tuple, Union

from tiny_digest.core.exceptions import FormatError
from tiny_digest.core.hash import UINT32_MASK

if TYPE_CHECKING:
    from tiny_digest.algorithms.bucketed.base import BucketedHashSet

logger = logging.getLogger(__name__)

State = Tuple[int, int, List[int]]

_HEADER = struct.Struct(">qI")
_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1


def is_int(value: Any) -> bool:
    """Check for an int, excluding bool."""
    return isinstance(value, int) and not isinstance(value, bool)


def validate_state(state: Any) -> State:
    """
    Check an exported state and return a normalized copy of it.

    Args:
        state: The candidate (seed, bucket_count, buckets) triple.

    Returns:
        A (seed, bucket_count, buckets) tuple whose bucket list is a new list,
        independent of the input.

    Raises:
        FormatError: If the state is not a well-formed triple, the seed is not
            an integer, the bucket count is not a positive integer, the bucket
            sequence has the wrong length, or a bucket value is not an
            unsigned 32-bit integer.
    """
    if not isinstance(state, (list, tuple)):
        raise FormatError(f"State must be a list or tuple, got {type(state).__name__}")
    if len(state) != 3:
        raise FormatError(f"State must have exactly 3 fields, got {len(state)}")

    seed, bucket_count, buckets = state

    if not is_int(seed):
        raise FormatError("Seed in state must be an integer")
    if not is_int(bucket_count):
        raise FormatError("Bucket count in state must be an integer")
    if bucket_count < 1:
        raise FormatError("Bucket count in state must be greater than 0")
    if not isinstance(buckets, (list, tuple, array.array)):
        raise FormatError("Buckets in state must be a list, tuple or array")
    if len(buckets) != bucket_count:
        raise FormatError(
            f"Buckets length {len(buckets)} does not match bucket count {bucket_count}"
        )

    for index, value in enumerate(buckets):
        if not is_int(value) or not 0 <= value <= UINT32_MASK:
            raise FormatError(
                f"Bucket {index} holds {value!r}, expected an unsigned 32-bit integer"
            )

    return (seed, bucket_count, list(buckets))


def export_state(digest: "BucketedHashSet") -> State:
    """
    Export a bucketed hash set as its (seed, bucket_count, buckets) triple.

    The bucket list is a copy; mutating the set afterwards does not change it.
    """
    return (digest.seed, digest.bucket_count, list(digest.buckets))


def import_state(state: Any) -> "BucketedHashSet":
    """
    Rebuild a bucketed hash set from an exported state.

    Args:
        state: A (seed, bucket_count, buckets) triple as returned by export_state.

    Returns:
        A new set owning a fresh copy of the bucket values.

    Raises:
        FormatError: If the state fails validation.
    """
    from tiny_digest.algorithms.bucketed.base import BucketedHashSet

    return BucketedHashSet.import_state(state)


def encode_state(state: Any, format: str = "json") -> Union[str, bytes]:
    """
    Encode an exported state for storage or transport.

    Args:
        state: The (seed, bucket_count, buckets) triple.
        format: 'json' or 'binary'.

    Returns:
        A JSON string or a bytes object.

    Raises:
        FormatError: If the state is invalid or the seed does not fit the
            binary header.
        ValueError: If the format is not supported.
    """
    seed, bucket_count, buckets = validate_state(state)

    if format == "json":
        return json.dumps([seed, bucket_count, buckets])
    elif format == "binary":
        if not _INT64_MIN <= seed <= _INT64_MAX:
            raise FormatError(f"Seed {seed} does not fit in a signed 64-bit field")
        return _HEADER.pack(seed, bucket_count) + struct.pack(
            f">{bucket_count}I", *buckets
        )
    else:
        raise ValueError(f"Unsupported serialization format: {format}")


def decode_state(data: Union[str, bytes], format: str = "json") -> State:
    """
    Decode a state produced by encode_state().

    Args:
        data: The encoded state.
        format: 'json' or 'binary'.

    Returns:
        The validated (seed, bucket_count, buckets) triple.

    Raises:
        FormatError: If the data is malformed or decodes to an invalid state.
        ValueError: If the format is not supported.
    """
    if format == "json":
        try:
            if isinstance(data, bytes):
                data = data.decode("utf-8")
            decoded = json.loads(data)
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise FormatError(f"State is not valid JSON: {exc}") from exc
        state = validate_state(decoded)
    elif format == "binary":
        if isinstance(data, str):
            data = data.encode("utf-8")
        if len(data) < _HEADER.size:
            raise FormatError(
                f"Binary state needs at least {_HEADER.size} bytes, got {len(data)}"
            )
        seed, bucket_count = _HEADER.unpack_from(data)
        expected = _HEADER.size + 4 * bucket_count
        if len(data) != expected:
            raise FormatError(
                f"Binary state for {bucket_count} buckets must be {expected} bytes, "
                f"got {len(data)}"
            )
        buckets = list(struct.unpack_from(f">{bucket_count}I", data, _HEADER.size))
        state = validate_state((seed, bucket_count, buckets))
    else:
        raise ValueError(f"Unsupported serialization format: {format}")

    logger.debug("Decoded %s state: seed=%d, buckets=%d", format, state[0], state[1])
    return state
