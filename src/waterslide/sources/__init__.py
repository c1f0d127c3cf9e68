"""
Sources Module - Ready-made upstream iterables.

Any iterable can feed a pipeline; these cover the common cases of a local
JSON Lines file and a JSON HTTP API. Both are restartable.

Usage:
------
from waterslide import wrap
from waterslide.sources import HttpJsonSource, HttpSourceConfig

source = HttpJsonSource('https://api.example.com/users',
                        HttpSourceConfig(items_key='results', next_key='next'))
first_user = wrap(source).take()
"""

from .file_source import JsonLinesSource
from .http_source import HttpJsonSource, HttpSourceConfig, HttpSourceError

__all__ = [
    'JsonLinesSource',
    'HttpJsonSource',
    'HttpSourceConfig',
    'HttpSourceError',
]
