"""
Value-shape helpers for the state tree.

The tree mirrors record-like values node-for-node and stores everything else
as an opaque leaf value. These helpers decide which is which and how two
values are compared when the tree looks for "nothing changed".
"""
from typing import Any, Callable, Dict, Mapping, Optional, TypeVar

T = TypeVar('T')
V = TypeVar('V')

# Immutable scalar types compare by value; everything else compares by identity
_PRIMITIVE_TYPES = (type(None), bool, int, float, complex, str, bytes)


def is_primitive(value: Any) -> bool:
    """Return True for scalar values that compare by value."""
    return isinstance(value, _PRIMITIVE_TYPES)


def same_value(a: Any, b: Any) -> bool:
    """Reference-equality test used by every short-circuit in the tree.

    Containers and other objects are only the same when they are the same
    object. Primitives are the same when they have the same type and compare
    equal, so ``1`` and ``True`` differ and ``nan`` never matches itself.
    """
    if a is b:
        return not (isinstance(a, float) and a != a)
    if is_primitive(a) and is_primitive(b) and type(a) is type(b):
        return a == b
    return False


def is_traversable(value: Any) -> bool:
    """Return True for record-like values whose keys become child nodes.

    Only dicts are traversable. Lists, tuples, sets, dataclass instances,
    dates and callables are all treated as opaque leaf values.
    """
    return isinstance(value, dict)


def map_values(record: Optional[Mapping[Any, V]], fn: Callable[[V, Any], T]) -> Dict[Any, T]:
    """Apply ``fn(value, key)`` to every entry of ``record``.

    Args:
        record: Mapping to transform (None is treated as empty)
        fn: Called with each value and its key

    Returns:
        New dict with the same keys and transformed values
    """
    return {key: fn(value, key) for key, value in (record or {}).items()}
