"""
Validity aggregation.

A validity structure is either a single boolean or a mapping from key to a
nested validity structure, so a field can report one pass/fail result or a
per-rule breakdown. ``errors`` uses the same shape with inverted meaning.
"""
from typing import Mapping, Union

Validity = Union[bool, Mapping[str, 'Validity']]


def is_validity_valid(validity: Validity) -> bool:
    """Reduce a validity structure to a single boolean.

    Examples:
        >>> is_validity_valid(True)
        True
        >>> is_validity_valid({'required': True, 'length': {'min': True, 'max': False}})
        False
        >>> is_validity_valid({})
        True
    """
    if isinstance(validity, Mapping):
        return all(is_validity_valid(entry) for entry in validity.values())
    return bool(validity)


def has_errors(errors: Validity) -> bool:
    """Return True if any entry of an errors structure is set, at any depth."""
    if isinstance(errors, Mapping):
        return any(has_errors(entry) for entry in errors.values())
    return bool(errors)
