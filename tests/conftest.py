"""Pytest configuration and shared fixtures."""
import pytest

from formstate import create_form
import formstate.config as config_module


@pytest.fixture(autouse=True)
def reset_initial_state():
    """Restore the process-wide initial flags after each test."""
    original = dict(config_module._initial_field_state)

    yield

    config_module._initial_field_state.clear()
    config_module._initial_field_state.update(original)


@pytest.fixture
def profile_value():
    """Provide a nested profile value."""
    return {
        'name': 'Ada',
        'age': 36,
        'address': {
            'city': 'London',
            'lines': ['12 Analytical St'],
        },
    }


@pytest.fixture
def profile_form(profile_value):
    """Provide a form built from the profile value."""
    return create_form(profile_value)


@pytest.fixture
def submitted_form():
    """Provide a form whose every field starts out submitted."""
    return create_form({'email': 'ada@example.com', 'password': 'hunter2'}, {'submitted': True})
