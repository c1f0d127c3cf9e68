"""Sample stages used across the test suite."""

from waterslide import Stage


class AddOne(Stage):
    def pipe_one(self, thing):
        yield thing + 1


class Duplicate(Stage):
    def pipe_one(self, thing):
        yield thing
        yield thing


class Add(Stage):
    def __init__(self, n):
        self.increment = n

    def pipe_one(self, thing):
        yield thing + self.increment


class OnlyEvens(Stage):
    def pipe_one(self, n):
        if n % 2 == 0:
            yield n


class SortStage(Stage):
    def incoming(self, upstream):
        return sorted(upstream)


class InfiniteJest(Stage):
    """Produces six items, then fails as if the source went on forever."""

    def __iter__(self):
        for _ in range(6):
            yield 'ha'
        raise RuntimeError('oh no you are dead')


class Recorder:
    """Iterable that records which items were pulled from it."""

    def __init__(self, items):
        self.items = list(items)
        self.pulled = []

    def __iter__(self):
        for item in self.items:
            self.pulled.append(item)
            yield item
