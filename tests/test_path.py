"""Tests for path parsing and resolution."""
import pytest

from formstate import (
    FORM_KEY,
    PathNotFoundError,
    create_form,
    create_getter,
    make_tree,
    parse_path,
    resolve,
)


@pytest.mark.parametrize('path, expected', [
    ('a', ('a',)),
    ('a.b.c', ('a', 'b', 'c')),
    ('a.b[0].c', ('a', 'b', '0', 'c')),
    ('a[-1.5]', ('a', '-1.5')),
    ("a['b c']", ('a', 'b c')),
    ('a["b.c"]', ('a', 'b.c')),
    (r"a['it\'s']", ('a', "it's")),
    ('.a', ('', 'a')),
    ('a..b', ('a', '', 'b')),
    ('a.', ('a', '')),
    ('a[]', ('a', '')),
    ('', ()),
])
def test_parse_path(path, expected):
    assert parse_path(path) == expected


class TestResolve:
    """Test resolve() against built trees."""

    def test_dotted_path_finds_leaf(self):
        form = create_form({'a': {'b': 5}})
        assert resolve(form, 'a.b').get_value() == 5

    def test_bracket_path_finds_same_leaf(self):
        form = create_form({'a': {'b': 5}})
        assert resolve(form, "a['b']") is resolve(form, 'a.b')

    def test_composite_resolves_to_its_field(self):
        form = create_form({'a': {'b': 5}})
        a = resolve(form, 'a')
        assert a is form.fields['a'].field
        assert resolve(form, f'a.{FORM_KEY}') is a

    def test_empty_path_is_root_field(self):
        form = create_form({'a': 1})
        assert resolve(form, '') is form.field

    def test_numeric_keys(self):
        form = create_form({'rows': {0: 'first', '1': 'second'}})
        assert resolve(form, 'rows[0]').get_value() == 'first'
        assert resolve(form, 'rows.1').get_value() == 'second'

    def test_getter_function(self):
        form = create_form({'a': {'b': 5}})
        field = resolve(form, lambda fields: fields['a'])
        assert field is form.fields['a'].field

    def test_leaf_root(self):
        field = make_tree(None, 'name', 'Ada')
        assert resolve(field, '') is field

    def test_missing_key_raises(self):
        form = create_form({'a': {'b': 5}})
        with pytest.raises(PathNotFoundError) as exc_info:
            resolve(form, 'a.c')
        assert exc_info.value.key == 'c'
        assert exc_info.value.path == 'a.c'

    def test_path_through_leaf_raises(self):
        form = create_form({'a': 1})
        with pytest.raises(PathNotFoundError):
            resolve(form, 'a.b')

    def test_not_found_is_a_key_error(self):
        with pytest.raises(KeyError):
            resolve(create_form({}), 'missing')


def test_create_getter_returns_sub_map():
    form = create_form({'a': {'b': 5}})
    sub_map = create_getter('a')(form.field_map())
    assert set(sub_map) == {'b', FORM_KEY}
