"""
Stage - Base class for every pipeline stage.

This module defines the Stage base class that all concrete stages inherit
from. A stage wraps an upstream iterable and is itself iterable, so stages
chain with the ``>>`` operator:

    wrap([1, 2, 3]) >> AddOne >> Add(3)

It provides:
- The lazy iteration protocol (nothing runs until items are pulled)
- Two override points: ``pipe_one`` (per item) and ``incoming`` (whole sequence)
- Composition with ``>>`` against instances or zero-argument factories
- Statistics tracking
"""

import itertools
import logging
from dataclasses import dataclass, asdict
from typing import Any, Callable, Iterable, Iterator, List, Optional, Union


logger = logging.getLogger(__name__)

_UNBOUND = object()


class WaterslideError(Exception):
    """Base class for errors raised by the composition core."""
    pass


class StageConstructionError(WaterslideError, TypeError):
    """Raised when a stage factory cannot build a stage with no arguments."""
    pass


class StageAlreadyBoundError(WaterslideError, RuntimeError):
    """Raised when composing a stage whose upstream is already set."""
    pass


class UnboundStageError(WaterslideError, RuntimeError):
    """Raised when a stage is iterated before it has an upstream."""
    pass


def instantiated(target: Union["Stage", Callable[[], "Stage"]]) -> "Stage":
    """
    Resolve a composable into a stage instance.

    A composable is either a ready Stage, used as-is, or a zero-argument
    factory (usually a Stage subclass), which is called once.

    Args:
        target: Stage instance or zero-argument factory

    Returns:
        Stage instance

    Raises:
        StageConstructionError: If the factory needs arguments, fails,
            or returns something that is not a Stage
    """
    if isinstance(target, Stage):
        return target

    factory_name = getattr(target, '__name__', repr(target))
    try:
        stage = target()
    except Exception as e:
        raise StageConstructionError(
            f"Cannot build stage from {factory_name} without arguments; "
            f"instantiate it before composing: {e}"
        ) from e

    if not isinstance(stage, Stage):
        raise StageConstructionError(
            f"Factory {factory_name} returned {type(stage).__name__}, not a Stage"
        )
    return stage


def is_composable(target: Any) -> bool:
    """Check whether ``target`` may appear on the right of ``>>``."""
    return isinstance(target, Stage) or callable(target)


class Pipeable:
    """
    Mixin giving an iterable class the ``>>`` operator.

    Foreign collections can join a chain without adopting the stage contract:

        class Numbers(list, Pipeable):
            pass

        Numbers([1, 2, 3]) >> Add(2)
    """

    def __rshift__(self, other):
        if not is_composable(other):
            return NotImplemented
        return instantiated(other).receive_from(self)


@dataclass
class StageStats:
    """Per-stage counters, accumulated across iterations."""
    processed: int = 0  # upstream items handed to pipe_one
    emitted: int = 0
    dropped: int = 0  # upstream items that produced no output
    runs: int = 0


class Stage(Pipeable):
    """
    Base class for pipeline stages.

    Each stage:
    - Pulls items from its upstream iterable
    - Passes each one through ``pipe_one``, which yields zero or more outputs
    - Exposes the outputs as an iterable for the next stage

    Override points:
    ---------------
    pipe_one(item)
        Generator called once per upstream item. Each ``yield`` pushes one
        output downstream. Keeps the pipeline lazy.
    incoming(upstream)
        Returns the iterable actually traversed. Override it to see the whole
        upstream at once (sorting, aggregates). This drains everything
        upstream of the stage before the first output.

    If both are overridden, ``incoming`` decides what is traversed and
    ``pipe_one`` then applies to each item of its result.

    Subclasses may take configuration in their own ``__init__`` and need not
    call ``super().__init__()``; such stages must be instantiated before
    composing.
    """

    name: Optional[str] = None

    _upstream: Any = _UNBOUND

    @property
    def stage_name(self) -> str:
        return self.name or self.__class__.__name__

    @property
    def logger(self) -> logging.Logger:
        return logging.getLogger(f"{self.__class__.__name__}:{self.stage_name}")

    @property
    def stats(self) -> StageStats:
        stats = self.__dict__.get('_stats')
        if stats is None:
            stats = self.__dict__['_stats'] = StageStats()
        return stats

    @property
    def is_bound(self) -> bool:
        return self._upstream is not _UNBOUND

    @property
    def upstream(self) -> Iterable:
        if self._upstream is _UNBOUND:
            raise UnboundStageError(f"Stage '{self.stage_name}' has no upstream")
        return self._upstream

    def receive_from(self, upstream: Iterable) -> "Stage":
        """
        Bind this stage to its upstream.

        Args:
            upstream: Another stage or any iterable

        Returns:
            This stage, so calls can be chained

        Raises:
            StageAlreadyBoundError: If the stage already has an upstream
        """
        if self._upstream is not _UNBOUND:
            raise StageAlreadyBoundError(
                f"Stage '{self.stage_name}' is already bound; "
                f"create a new instance for each pipeline"
            )
        self._upstream = upstream
        logger.debug(f"Bound stage '{self.stage_name}' to {type(upstream).__name__}")
        return self

    def incoming(self, upstream: Iterable) -> Iterable:
        """Whole-sequence hook. Identity by default."""
        return upstream

    def pipe_one(self, item: Any) -> Iterator[Any]:
        """Per-item hook. Identity by default."""
        yield item

    def __iter__(self) -> Iterator[Any]:
        upstream = self.upstream
        stats = self.stats
        stats.runs += 1
        self.logger.debug(f"Stage '{self.stage_name}' started (run {stats.runs})")

        for item in self.incoming(upstream):
            stats.processed += 1
            pushed = False
            for out in self.pipe_one(item):
                pushed = True
                stats.emitted += 1
                yield out
            if not pushed:
                stats.dropped += 1

        self.logger.debug(
            f"Stage '{self.stage_name}' exhausted: processed={stats.processed} "
            f"emitted={stats.emitted} dropped={stats.dropped}"
        )

    def take(self, default: Any = None) -> Any:
        """
        Pull a single item.

        Args:
            default: Returned when the stage produces nothing

        Returns:
            The first produced item, or ``default``
        """
        return next(iter(self), default)

    def first(self, n: int) -> List[Any]:
        """Pull at most ``n`` items without evaluating further."""
        return list(itertools.islice(self, n))

    def all(self) -> List[Any]:
        """
        Force every item into a list.

        Never returns on an infinite upstream.
        """
        return list(self)

    def count(self, predicate: Optional[Callable[[Any], bool]] = None) -> int:
        """Count produced items, optionally only those matching ``predicate``."""
        if predicate is None:
            return sum(1 for _ in self)
        return sum(1 for item in self if predicate(item))

    def get_stats(self) -> dict:
        """
        Get stage statistics.

        Returns:
            dict with statistics
        """
        stats = asdict(self.stats)
        stats['name'] = self.stage_name
        stats['bound'] = self.is_bound
        return stats

    def reset_stats(self):
        """Reset statistics counters."""
        self.__dict__['_stats'] = StageStats()

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name='{self.stage_name}' bound={self.is_bound}>"


class NoOp(Stage):
    """Identity stage. Used to wrap raw data at the head of a pipeline."""
    pass
