"""
Transform Stages - one-to-one and one-to-many item transformations.
All of them only override the per-item hook, so they stay lazy.
"""

from typing import Any, Callable, Dict, Iterable, Iterator, Optional

from ..stage import Stage


class Map(Stage):
    """Yield ``fn(item)`` for every item."""

    def __init__(self, fn: Callable[[Any], Any]):
        self.fn = fn

    def pipe_one(self, item: Any) -> Iterator[Any]:
        yield self.fn(item)


class FlatMap(Stage):
    """
    Expand every item into the items of ``fn(item)``.

    Order within each expansion is kept:

        wrap([1, 2]) >> FlatMap(lambda n: [n] * n)   # 1, 2, 2
    """

    def __init__(self, fn: Callable[[Any], Iterable[Any]]):
        self.fn = fn

    def pipe_one(self, item: Any) -> Iterator[Any]:
        yield from self.fn(item)


class Tap(Stage):
    """Call ``fn(item)`` for its side effect and pass the item through."""

    def __init__(self, fn: Callable[[Any], Any]):
        self.fn = fn

    def pipe_one(self, item: Any) -> Iterator[Any]:
        self.fn(item)
        yield item


class Pluck(Stage):
    """
    Keep only the given fields of mapping items.

    Missing fields are skipped unless ``fill`` is set, in which case they
    are included with value None.
    """

    def __init__(self, *fields: str, fill: bool = False):
        if not fields:
            raise ValueError("Pluck needs at least one field")
        self.fields = fields
        self.fill = fill

    def pipe_one(self, item: Dict[str, Any]) -> Iterator[Dict[str, Any]]:
        if self.fill:
            yield {field: item.get(field) for field in self.fields}
        else:
            yield {field: item[field] for field in self.fields if field in item}


class MergeFields(Stage):
    """
    Merge constant fields into every mapping item.

    With ``overwrite=False`` (default) the item's own values win; the
    constants only fill gaps. The input item is not modified.
    """

    def __init__(self, fields: Optional[Dict[str, Any]] = None,
                 overwrite: bool = False, **extra: Any):
        self.fields = dict(fields or {}, **extra)
        self.overwrite = overwrite

    def pipe_one(self, item: Dict[str, Any]) -> Iterator[Dict[str, Any]]:
        if self.overwrite:
            yield {**item, **self.fields}
        else:
            yield {**self.fields, **item}
