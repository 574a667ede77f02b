"""
Base classes and interfaces for tiny-digest summaries.

This module defines the abstract base class that digest structures implement
to provide a consistent interface across the library: updating with new items,
merging, serialization and introspection for monitoring and benchmarking.
"""

import abc
import json
import sys
from typing import Any, Dict, Generic, TypeVar, Union

from tiny_digest.core.exceptions import FormatError

T = TypeVar("T")  # Type for the items being processed


class DigestSummary(Generic[T], abc.ABC):
    """
    Abstract base class for all digest structures.

    This class defines the common interface that digests must implement,
    including methods for updating with new items, merging with other digests,
    and serialization. It also provides hooks for inspecting memory usage and
    accuracy characteristics.
    """

    def __init__(self) -> None:
        """Initialize a new digest summary."""
        self._items_processed = 0

    @abc.abstractmethod
    def update(self, item: T, *args: Any) -> Any:
        """
        Update the summary with a new item.

        Derived classes call super().update(item) to keep the processed-items
        counter accurate.

        Args:
            item: The new item to process.
        """
        self._items_processed += 1

    @abc.abstractmethod
    def merge(self, other: "DigestSummary[T]") -> "DigestSummary[T]":
        """
        Merge this summary with another of the same type.

        Args:
            other: Another summary of the same type.

        Returns:
            A new merged summary.

        Raises:
            TypeError: If other is not of the same type.
        """
        pass

    def _check_same_type(self, other: Any) -> None:
        """
        Helper method to check if another summary is of the same type.

        Args:
            other: Another summary to check.

        Raises:
            TypeError: If other is not of the same type.
        """
        if not isinstance(other, self.__class__):
            raise TypeError(f"Cannot combine with {other.__class__.__name__}")

    def _combine_items_processed(self, other: "DigestSummary[T]") -> int:
        """
        Helper method to combine items processed counts during merging.

        Args:
            other: Another summary.

        Returns:
            The combined count of processed items.
        """
        return self._items_processed + other._items_processed

    @abc.abstractmethod
    def to_dict(self) -> Dict[str, Any]:
        """
        Convert the summary to a dictionary for serialization.

        Returns:
            A dictionary representation of the summary.
        """
        pass

    def _base_dict(self) -> Dict[str, Any]:
        """
        Create a dictionary with base attributes common to all summaries.

        Returns:
            A dictionary with base attributes.
        """
        return {
            "type": self.__class__.__name__,
            "items_processed": self._items_processed,
        }

    @classmethod
    @abc.abstractmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DigestSummary[T]":
        """
        Create a summary from a dictionary representation.

        Args:
            data: The dictionary containing the summary state.

        Returns:
            A new summary initialized with the given state.
        """
        pass

    @abc.abstractmethod
    def to_bytes(self) -> bytes:
        """Encode the summary in its compact binary form."""
        pass

    @classmethod
    @abc.abstractmethod
    def from_bytes(cls, data: bytes) -> "DigestSummary[T]":
        """Decode a summary produced by to_bytes()."""
        pass

    def serialize(self, format: str = "json") -> Union[str, bytes]:
        """
        Serialize the summary to a string or bytes.

        Args:
            format: The serialization format ('json' or 'binary').

        Returns:
            The serialized representation of the summary.

        Raises:
            ValueError: If the format is not supported.
        """
        if format == "json":
            return json.dumps(self.to_dict())
        elif format == "binary":
            return self.to_bytes()
        else:
            raise ValueError(f"Unsupported serialization format: {format}")

    @classmethod
    def deserialize(
        cls, data: Union[str, bytes], format: str = "json"
    ) -> "DigestSummary[T]":
        """
        Deserialize a summary from a string or bytes.

        Args:
            data: The serialized summary.
            format: The serialization format ('json' or 'binary').

        Returns:
            A new summary.

        Raises:
            FormatError: If the data is not valid UTF-8 or JSON.
            ValueError: If the format is not supported.
        """
        if format == "json":
            try:
                if isinstance(data, bytes):
                    data = data.decode("utf-8")
                decoded = json.loads(data)
            except (UnicodeDecodeError, json.JSONDecodeError) as exc:
                raise FormatError(f"Serialized summary is not valid JSON: {exc}") from exc
            return cls.from_dict(decoded)
        elif format == "binary":
            if isinstance(data, str):
                data = data.encode("utf-8")
            return cls.from_bytes(data)
        else:
            raise ValueError(f"Unsupported serialization format: {format}")

    def estimate_size(self) -> int:
        """
        Estimate the current memory usage of this summary in bytes.

        This accounts for the base object size and its instance dictionary.
        Derived classes should override this method to add their own data
        structures.

        Returns:
            Estimated memory usage in bytes.
        """
        size = sys.getsizeof(self)

        if hasattr(self, "__dict__"):
            size += sys.getsizeof(self.__dict__)

        return size

    def clear(self) -> None:
        """
        Reset the summary to its initial empty state.

        Derived classes must override this method to clear their specific
        data structures while calling super().clear() so the base counters
        are reset too.
        """
        self._items_processed = 0

    def get_stats(self) -> Dict[str, Any]:
        """
        Get detailed statistics about the current state of the summary.

        Derived classes should override this method to include their specific
        statistics while calling super().get_stats() to include base metrics.

        Returns:
            A dictionary containing various statistics about the summary state.
        """
        stats = {
            "type": self.__class__.__name__,
            "items_processed": self._items_processed,
            "memory_bytes": self.estimate_size(),
        }

        error_bounds = self.error_bounds()
        if error_bounds:
            stats.update(error_bounds)

        return stats

    def error_bounds(self) -> Dict[str, float]:
        """
        Get the theoretical error bounds for this summary.

        The base implementation returns an empty dictionary.

        Returns:
            A dictionary containing error bound information specific to the algorithm.
        """
        return {}

    @property
    def items_processed(self) -> int:
        """Get the total number of items processed by this summary."""
        return self._items_processed
