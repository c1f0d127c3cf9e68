"""
Source adapters - entry points for raw data.

``wrap`` is the supported way to start a pipeline from ordinary data.
``pipe`` composes a foreign iterable with a stage without touching the
foreign type.
"""

from typing import Any, Callable, Iterable, Union

from .stage import NoOp, Stage, instantiated

# Iterable in Python but treated as a single value here.
SCALAR_TYPES = (str, bytes, bytearray)


def _is_sequence(value: Any) -> bool:
    if isinstance(value, SCALAR_TYPES):
        return False
    try:
        iter(value)
    except TypeError:
        return False
    return True


def wrap(value: Any) -> NoOp:
    """
    Wrap a value into an identity stage ready for composition.

    Args:
        value: Any iterable, or a scalar (wrapped as a one-item list)

    Returns:
        Bound NoOp stage
    """
    if not _is_sequence(value):
        value = [value]
    return NoOp().receive_from(value)


def pipe(iterable: Iterable, stage: Union[Stage, Callable[[], Stage]]) -> Stage:
    """
    Compose a foreign iterable with a stage.

    Args:
        iterable: Upstream items, used by reference
        stage: Stage instance or zero-argument factory

    Returns:
        The bound downstream stage
    """
    return instantiated(stage).receive_from(iterable)
