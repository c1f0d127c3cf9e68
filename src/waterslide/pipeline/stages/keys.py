"""Key helpers shared by stages that accept ``key`` arguments."""

from operator import itemgetter
from typing import Any, Callable, Optional, Union

KeyType = Optional[Union[str, Callable[[Any], Any]]]


def resolve_key(key: KeyType) -> Optional[Callable[[Any], Any]]:
    """
    Turn a key argument into a callable.

    Args:
        key: None, a field name (looked up with ``item[key]``) or a callable

    Returns:
        Callable, or None when no key was given
    """
    if key is None or callable(key):
        return key
    if isinstance(key, str):
        return itemgetter(key)
    raise TypeError(f"key must be a field name or callable, got {type(key).__name__}")
