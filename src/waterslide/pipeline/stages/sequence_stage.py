"""
Sequence Stages - stages that need the whole upstream before emitting.

These override the whole-sequence hook, so the first pull drains everything
upstream of them. Stages after them stay lazy with respect to their output.
Never put them behind an infinite source.
"""

from typing import Any, Iterable, List

from ..stage import Stage
from .keys import KeyType, resolve_key


class Sort(Stage):
    """Emit upstream items in sorted order."""

    def __init__(self, key: KeyType = None, reverse: bool = False):
        self.key = resolve_key(key)
        self.reverse = reverse

    def incoming(self, upstream: Iterable[Any]) -> List[Any]:
        return sorted(upstream, key=self.key, reverse=self.reverse)


class Reverse(Stage):
    """Emit upstream items last to first."""

    def incoming(self, upstream: Iterable[Any]) -> List[Any]:
        items = list(upstream)
        items.reverse()
        return items
