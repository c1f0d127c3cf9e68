"""
Filter Stages - drop items that should not travel further down the pipeline.
A filter is a per-item hook that yields zero times for rejected items.

Unique supports set-based and bloom filter based duplicate detection.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Iterator, Set

from ..stage import Stage
from .keys import KeyType, resolve_key


class Select(Stage):
    """Keep items for which ``predicate(item)`` is truthy."""

    def __init__(self, predicate: Callable[[Any], bool]):
        self.predicate = predicate

    def pipe_one(self, item: Any) -> Iterator[Any]:
        if self.predicate(item):
            yield item


class Reject(Stage):
    """Drop items for which ``predicate(item)`` is truthy."""

    def __init__(self, predicate: Callable[[Any], bool]):
        self.predicate = predicate

    def pipe_one(self, item: Any) -> Iterator[Any]:
        if not self.predicate(item):
            yield item


class FieldEquals(Stage):
    """Keep mapping items whose ``field`` equals ``value``."""

    _missing = object()

    def __init__(self, field: str, value: Any):
        self.field = field
        self.value = value

    def pipe_one(self, item: Any) -> Iterator[Any]:
        if item.get(self.field, self._missing) == self.value:
            yield item


class DetectionMethod(Enum):
    """Methods for duplicate detection."""
    SET = "set"  # In-memory set (exact, items must be hashable)
    BLOOM = "bloom"  # Bloom filter (probabilistic, memory efficient)


@dataclass
class UniqueConfig:
    """Configuration for the Unique stage."""
    method: str = "set"  # 'set' or 'bloom'

    # Bloom filter settings (if method='bloom')
    bloom_capacity: int = 1_000_000
    bloom_error_rate: float = 0.01


class SetBasedTracker:
    """
    Exact seen-item tracking backed by a set.

    Unhashable keys (dicts, lists) are tracked by their ``repr``.
    """

    def __init__(self):
        self.seen: Set[Any] = set()

    def mark_seen(self, key: Any) -> bool:
        """
        Mark key as seen.

        Returns:
            True if key was newly added, False if already seen
        """
        try:
            hash(key)
        except TypeError:
            key = ('__unhashable__', repr(key))
        if key in self.seen:
            return False
        self.seen.add(key)
        return True

    def count(self) -> int:
        return len(self.seen)

    def clear(self):
        self.seen.clear()


class BloomFilterTracker:
    """
    Bloom filter based seen-item tracking.

    Fixed memory regardless of item count, at the price of occasional
    false positives (a new item reported as already seen and dropped).
    Keys are tracked by their ``repr``.

    Note: Requires the 'pybloom-live' package
    """

    def __init__(self, capacity: int = 1_000_000, error_rate: float = 0.01):
        self.logger = logging.getLogger(self.__class__.__name__)

        try:
            from pybloom_live import BloomFilter
        except ImportError:
            self.logger.error("pybloom-live not installed. Install with: "
                              "pip install pybloom-live")
            raise

        self.capacity = capacity
        self.error_rate = error_rate
        self.bloom = BloomFilter(capacity=capacity, error_rate=error_rate)
        self.logger.debug(f"Initialized Bloom filter: capacity={capacity}, "
                          f"error_rate={error_rate}")
        self._count = 0

    def mark_seen(self, key: Any) -> bool:
        token = repr(key)
        if token in self.bloom:
            return False
        self.bloom.add(token)
        self._count += 1
        return True

    def count(self) -> int:
        """Get approximate count of seen keys."""
        return self._count

    def clear(self):
        """Clear bloom filter (requires recreation)."""
        from pybloom_live import BloomFilter
        self.bloom = BloomFilter(capacity=self.capacity, error_rate=self.error_rate)
        self._count = 0


class Unique(Stage):
    """
    Drop items already seen, keeping the first occurrence.

    Seen keys live for the lifetime of the stage instance, so a second
    iteration over a restartable upstream yields nothing new unless
    ``reset()`` is called in between. Keys that cannot be hashed, such as
    whole JSON objects, are compared by their ``repr``.
    """

    def __init__(self, key: KeyType = None, method: str = "set",
                 bloom_capacity: int = 1_000_000, bloom_error_rate: float = 0.01):
        self.key = resolve_key(key)
        self.config = UniqueConfig(method=method, bloom_capacity=bloom_capacity,
                                   bloom_error_rate=bloom_error_rate)
        self.tracker = self._create_tracker()

    def _create_tracker(self):
        method = DetectionMethod(self.config.method)
        if method == DetectionMethod.BLOOM:
            return BloomFilterTracker(capacity=self.config.bloom_capacity,
                                      error_rate=self.config.bloom_error_rate)
        return SetBasedTracker()

    def pipe_one(self, item: Any) -> Iterator[Any]:
        key = self.key(item) if self.key else item
        if self.tracker.mark_seen(key):
            yield item

    def seen_count(self) -> int:
        return self.tracker.count()

    def reset(self):
        """Forget every seen key."""
        self.tracker.clear()
