"""
waterslide - Compose linear, lazy data pipelines from small stages.

Features:
- Stages chained with the >> operator
- Lazy, pull-based evaluation (works on infinite inputs)
- Per-item and whole-sequence extension hooks
- Reusable transform, filter, sort and JSON stages
- YAML-configured pipelines with a command line runner
"""

__version__ = "1.0.0"

from .pipeline import (
    Stage,
    NoOp,
    Pipeable,
    WaterslideError,
    StageConstructionError,
    StageAlreadyBoundError,
    UnboundStageError,
    wrap,
    pipe,
)

__all__ = [
    'Stage',
    'NoOp',
    'Pipeable',
    'WaterslideError',
    'StageConstructionError',
    'StageAlreadyBoundError',
    'UnboundStageError',
    'wrap',
    'pipe',
]
