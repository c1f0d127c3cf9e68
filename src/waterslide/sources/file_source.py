"""
File Source - Line-oriented file input.
"""

from pathlib import Path
from typing import Iterator, Union


class JsonLinesSource:
    """
    Iterable over the lines of a text file, newline stripped.

    The file is opened anew for every iteration, so the source is
    restartable. Pair it with JsonDecode for JSON Lines input.
    """

    def __init__(self, path: Union[str, Path], encoding: str = 'utf-8'):
        self.path = Path(path)
        self.encoding = encoding

    def __iter__(self) -> Iterator[str]:
        with open(self.path, 'r', encoding=self.encoding) as f:
            for line in f:
                yield line.rstrip('\r\n')

    def __repr__(self) -> str:
        return f"JsonLinesSource(path='{self.path}')"
