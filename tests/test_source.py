"""Tests for the wrap and pipe source adapters."""

import pytest

from waterslide import NoOp, wrap, pipe
from waterslide.pipeline.source import SCALAR_TYPES

from sample_stages import Add, AddOne


class TestWrap:

    def test_wraps_lists(self):
        stage = wrap([1, 2, 3])
        assert isinstance(stage, NoOp)
        assert stage.all() == [1, 2, 3]

    def test_wraps_scalars_as_single_item(self):
        assert wrap(42).all() == [42]

    def test_wraps_none_as_single_item(self):
        assert wrap(None).all() == [None]

    @pytest.mark.parametrize("value", ["text", b"bytes", bytearray(b"ba")])
    def test_strings_are_scalars(self, value):
        assert isinstance(value, SCALAR_TYPES)
        assert wrap(value).all() == [value]

    def test_wraps_ranges_and_generators(self):
        assert wrap(range(3)).all() == [0, 1, 2]
        assert wrap(n * 2 for n in range(3)).all() == [0, 2, 4]

    def test_wraps_dicts_by_key(self):
        assert wrap({"a": 1, "b": 2}).all() == ["a", "b"]

    def test_wrapped_empty_sequence(self):
        assert wrap([]).all() == []

    def test_wrap_is_bound(self):
        assert wrap([1]).is_bound


class TestPipe:

    def test_pipe_composes_foreign_iterable(self):
        assert pipe((1, 2, 3), Add(2)).all() == [3, 4, 5]

    def test_pipe_accepts_templates(self):
        stage = pipe([1, 2], AddOne)
        assert isinstance(stage, AddOne)
        assert stage.all() == [2, 3]

    def test_pipe_result_keeps_composing(self):
        assert (pipe([1, 2], AddOne) >> Add(10)).all() == [12, 13]

    def test_pipe_does_not_patch_foreign_type(self):
        pipe([1], AddOne)
        assert not hasattr(list, '__rshift__')
