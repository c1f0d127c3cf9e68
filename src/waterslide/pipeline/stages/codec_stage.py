"""
Codec Stages - deserialize and serialize items at the edges of a pipeline.
"""

import json
from typing import Any, Iterator, Optional, Union

from ..stage import Stage


class JsonDecode(Stage):
    """
    Parse each text (or bytes) item as a JSON document.

    Blank lines are dropped so line-oriented input can be fed directly.
    Invalid JSON raises ``json.JSONDecodeError`` to the consumer.
    """

    def pipe_one(self, item: Union[str, bytes]) -> Iterator[Any]:
        if isinstance(item, (bytes, bytearray)):
            item = item.decode('utf-8')
        if not item.strip():
            return
        yield json.loads(item)


class JsonEncode(Stage):
    """Serialize each item into a single-line JSON string."""

    def __init__(self, sort_keys: bool = False, ensure_ascii: bool = False,
                 indent: Optional[int] = None):
        self.sort_keys = sort_keys
        self.ensure_ascii = ensure_ascii
        self.indent = indent

    def pipe_one(self, item: Any) -> Iterator[str]:
        yield json.dumps(item, sort_keys=self.sort_keys,
                         ensure_ascii=self.ensure_ascii, indent=self.indent)
