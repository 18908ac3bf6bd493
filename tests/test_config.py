"""Tests for the initial field state configuration."""
import pytest

from formstate import (
    create_form,
    get_initial_field_state,
    make_tree,
    reset_initial_field_state,
    set_initial_field_state,
)


def test_builtin_defaults():
    state = get_initial_field_state()
    assert state['pristine'] is True
    assert state['touched'] is False
    assert state['validity'] == {}


def test_defaults_apply_to_new_fields():
    set_initial_field_state(touched=True)

    field = make_tree(None, 'name', 'Ada')

    assert field.get_touched() is True


def test_tree_overrides_win_over_defaults():
    set_initial_field_state(touched=True)

    form = create_form({'a': 1}, {'touched': False})

    assert form.fields['a'].get_touched() is False


def test_reset_restores_builtin_defaults():
    set_initial_field_state(pending=True)
    reset_initial_field_state()
    assert get_initial_field_state()['pending'] is False


def test_unknown_flag_raises():
    with pytest.raises(ValueError):
        set_initial_field_state(dirty=True)


def test_returned_defaults_are_copies():
    get_initial_field_state()['validity']['x'] = False
    assert get_initial_field_state()['validity'] == {}
