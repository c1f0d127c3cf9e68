"""
Pipeline Stages Module

This module contains the reusable stages shipped with waterslide.

Stage Families:
---------------
- Transform (lazy):  Map, FlatMap, Tap, Pluck, MergeFields
- Filter (lazy):     Select, Reject, FieldEquals, Unique
- Sequence (eager):  Sort, Reverse
- Codec (lazy):      JsonDecode, JsonEncode

Usage:
------
from waterslide import wrap
from waterslide.pipeline.stages import JsonDecode, FieldEquals, JsonEncode

lines = ['{"id": 1, "active": true}', '{"id": 2, "active": false}']
out = (wrap(lines) >> JsonDecode >> FieldEquals('active', True) >> JsonEncode).all()

Stages that can be described with plain data are also available by name
through STAGE_REGISTRY / build_stage, which the YAML configuration uses.
"""

from typing import Any, Dict, Optional, Type

from ..stage import NoOp, Stage

# Transform stages
from .transform_stage import Map, FlatMap, Tap, Pluck, MergeFields

# Filter stages
from .filter_stage import (
    Select,
    Reject,
    FieldEquals,
    Unique,
    UniqueConfig,
    DetectionMethod,
)

# Sequence stages
from .sequence_stage import Sort, Reverse

# Codec stages
from .codec_stage import JsonDecode, JsonEncode


class UnknownStageError(KeyError):
    """Raised when a stage name is not in the registry."""
    pass


# Stages taking callables (Map, Select, ...) are not configurable by name.
STAGE_REGISTRY: Dict[str, Type[Stage]] = {
    'noop': NoOp,
    'pluck': Pluck,
    'merge_fields': MergeFields,
    'field_equals': FieldEquals,
    'unique': Unique,
    'sort': Sort,
    'reverse': Reverse,
    'json_decode': JsonDecode,
    'json_encode': JsonEncode,
}


def build_stage(name: str, params: Optional[Dict[str, Any]] = None) -> Stage:
    """
    Instantiate a registered stage.

    Args:
        name: Registry name (e.g. 'json_decode')
        params: Keyword arguments for the stage constructor; a 'fields'
            list is passed positionally to stages taking ``*fields``

    Returns:
        Fresh, unbound stage

    Raises:
        UnknownStageError: If the name is not registered
    """
    try:
        stage_cls = STAGE_REGISTRY[name]
    except KeyError:
        raise UnknownStageError(
            f"Unknown stage '{name}'. Available: {', '.join(sorted(STAGE_REGISTRY))}"
        ) from None

    params = dict(params or {})
    if stage_cls is Pluck:
        fields = params.pop('fields', [])
        return stage_cls(*fields, **params)
    return stage_cls(**params)


__all__ = [
    # ========================================================================
    # STAGES
    # ========================================================================
    'Map',
    'FlatMap',
    'Tap',
    'Pluck',
    'MergeFields',
    'Select',
    'Reject',
    'FieldEquals',
    'Unique',
    'Sort',
    'Reverse',
    'JsonDecode',
    'JsonEncode',

    # ========================================================================
    # CONFIGURATIONS, ENUMS & REGISTRY
    # ========================================================================
    'UniqueConfig',
    'DetectionMethod',
    'STAGE_REGISTRY',
    'UnknownStageError',
    'build_stage',
]
