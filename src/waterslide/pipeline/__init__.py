"""
Pipeline Framework Module

This module contains the composition core: the Stage base class, the ``>>``
operator and the source adapters that start a pipeline from raw data.

Components:
-----------
- Stage: Base class for all stages (lazy, iterable)
- NoOp: Identity stage
- Pipeable: Mixin giving foreign iterables the ``>>`` operator
- wrap / pipe: Entry points for raw data

Usage:
------
from waterslide.pipeline import Stage, wrap

class AddOne(Stage):
    def pipe_one(self, item):
        yield item + 1

(wrap([1, 2, 3]) >> AddOne).all()   # [2, 3, 4]
"""

from .stage import (
    Stage,
    NoOp,
    Pipeable,
    StageStats,
    WaterslideError,
    StageConstructionError,
    StageAlreadyBoundError,
    UnboundStageError,
    instantiated,
)
from .source import wrap, pipe

__all__ = [
    'Stage',
    'NoOp',
    'Pipeable',
    'StageStats',
    'WaterslideError',
    'StageConstructionError',
    'StageAlreadyBoundError',
    'UnboundStageError',
    'instantiated',
    'wrap',
    'pipe',
]
