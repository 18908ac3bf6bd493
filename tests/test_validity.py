"""Tests for validity aggregation and value-shape helpers."""
import datetime
from collections import OrderedDict

import pytest

from formstate import has_errors, is_traversable, is_validity_valid, map_values, same_value


@pytest.mark.parametrize('validity, expected', [
    (True, True),
    (False, False),
    ({}, True),
    ({'a': True, 'b': {'c': True, 'd': True}}, True),
    ({'a': True, 'b': {'c': True, 'd': False}}, False),
    ({'a': {'b': {}}}, True),
])
def test_is_validity_valid(validity, expected):
    assert is_validity_valid(validity) is expected


def test_has_errors():
    assert has_errors({}) is False
    assert has_errors({'a': False, 'b': {'c': False}}) is False
    assert has_errors({'a': False, 'b': {'c': True}}) is True
    assert has_errors(True) is True


class TestValueShape:
    """Test traversability and value comparison."""

    def test_only_dicts_are_traversable(self):
        assert is_traversable({})
        assert is_traversable(OrderedDict(a=1))
        assert not is_traversable([1])
        assert not is_traversable((1,))
        assert not is_traversable(datetime.date(2020, 1, 1))
        assert not is_traversable('abc')
        assert not is_traversable(None)
        assert not is_traversable(lambda: None)

    def test_primitives_compare_by_value(self):
        assert same_value(1000, int('1000'))
        assert same_value('ab', ''.join(['a', 'b']))
        assert not same_value(1, True)
        assert not same_value(1, 1.0)
        assert not same_value(float('nan'), float('nan'))

    def test_objects_compare_by_identity(self):
        value = {'a': 1}
        assert same_value(value, value)
        assert not same_value({'a': 1}, {'a': 1})
        assert not same_value([1], [1])

    def test_map_values(self):
        assert map_values({'a': 1, 'b': 2}, lambda value, key: f'{key}={value}') == {'a': 'a=1', 'b': 'b=2'}
        assert map_values(None, lambda value, key: value) == {}
