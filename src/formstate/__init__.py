"""
Hierarchical form state tree.

Mirrors an arbitrary nested value (primitives, and dicts of primitives/dicts
recursively) and tracks per-node UI interaction metadata alongside the value:
focus, touched, pristine, pending, submission outcome and validity.

Key Features:
- FieldState per terminal value, FormState per record, chosen by value shape
- Aggregated flags (pristine, touched, focus, valid) derived from children
- Structural diff on update(), rebuilding only subtrees whose shape changed
- Dotted/bracketed path addressing (``resolve(form, "address.city")``)
- Synchronous per-node subscription to immutable state snapshots

Quick Start:
    >>> from formstate import create_form, resolve
    >>> form = create_form({'name': 'Ada', 'address': {'city': 'London'}})
    >>> city = resolve(form, 'address.city')
    >>> city.set_focus(True)
    >>> city.set_focus(False)
    >>> form.field.get_touched()
    True
    >>> form.update({'name': 'Ada', 'address': {'city': 'Paris'}})
    {'name': <FieldUpdate.UNCHANGED: 'UNCHANGED'>, 'address': {'city': <FieldUpdate.UPDATE: 'UPDATE'>}}

Modules:
    - field_state: FieldState leaf and the diff classification enum
    - form_state: FormState composite, make_tree() and create_form()
    - path: path parsing and resolve()
    - validity: validity aggregation
    - snapshot_model: immutable FieldSnapshot
    - config: process-wide initial flags
    - object_utils: traversability predicate and value comparison
"""

# Field
from formstate.field_state import (
    FORM_KEY,
    FieldState,
    FieldUpdate,
    FormUpdates,
)

# Form
from formstate.form_state import (
    FormState,
    make_tree,
    create_form,
)

# Path addressing
from formstate.path import (
    PathNotFoundError,
    parse_path,
    create_getter,
    resolve,
)

# Validity
from formstate.validity import is_validity_valid, has_errors

# Snapshot
from formstate.snapshot_model import FieldSnapshot, FLAG_NAMES

# Configuration
from formstate.config import (
    get_initial_field_state,
    set_initial_field_state,
    reset_initial_field_state,
)

# Value shape
from formstate.object_utils import is_traversable, map_values, same_value

__all__ = [
    # Field
    'FORM_KEY',
    'FieldState',
    'FieldUpdate',
    'FormUpdates',
    # Form
    'FormState',
    'make_tree',
    'create_form',
    # Path addressing
    'PathNotFoundError',
    'parse_path',
    'create_getter',
    'resolve',
    # Validity
    'is_validity_valid',
    'has_errors',
    # Snapshot
    'FieldSnapshot',
    'FLAG_NAMES',
    # Configuration
    'get_initial_field_state',
    'set_initial_field_state',
    'reset_initial_field_state',
    # Value shape
    'is_traversable',
    'map_values',
    'same_value',
]

__version__ = '1.0.0'
__description__ = 'Hierarchical form state tree with structural diffing'
