"""
Default initial flags for newly constructed fields.

Module-level storage for the flag values every FieldState starts from.
Trees may layer their own overrides on top at construction time (see
``make_tree(..., initial_state=...)``); this module only holds the
process-wide defaults.

Not thread-safe (all operations expected on the thread that owns the tree).
"""

import copy
import logging
from typing import Any, Dict, Mapping, Optional

from formstate.snapshot_model import FLAG_NAMES

logger = logging.getLogger(__name__)


_DEFAULT_FIELD_STATE: Dict[str, Any] = {
    'focus': False,
    'pending': False,
    'pristine': True,
    'submitted': False,
    'submit_failed': False,
    'retouched': False,
    'touched': False,
    'validating': False,
    'validated': False,
    'validity': {},
    'errors': {},
}

_initial_field_state: Dict[str, Any] = copy.deepcopy(_DEFAULT_FIELD_STATE)


def _check_flag_names(overrides: Mapping[str, Any]) -> None:
    unknown = sorted(set(overrides) - set(FLAG_NAMES))
    if unknown:
        raise ValueError(f"Unknown field state flags: {unknown}. Available: {list(FLAG_NAMES)}")


def get_initial_field_state() -> Dict[str, Any]:
    """Get the flags every new field starts from.

    Returns:
        Fresh copy of the current defaults (safe to mutate)
    """
    return copy.deepcopy(_initial_field_state)


def set_initial_field_state(**overrides: Any) -> None:
    """Change the process-wide initial flags.

    Called when:
    - An application wants every field to start e.g. ``touched=True``
    - Tests set up a known baseline

    Args:
        **overrides: Flag name to default value

    Raises:
        ValueError: If a flag name is unknown
    """
    _check_flag_names(overrides)
    _initial_field_state.update(copy.deepcopy(overrides))
    logger.debug(f"Initial field state overrides set: {sorted(overrides)}")


def reset_initial_field_state() -> None:
    """Restore the built-in initial flags."""
    _initial_field_state.clear()
    _initial_field_state.update(copy.deepcopy(_DEFAULT_FIELD_STATE))


def build_initial_field_state(overrides: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
    """Merge per-tree overrides over the current defaults.

    Args:
        overrides: Flags supplied when the tree was constructed

    Returns:
        Complete flag dict for a new FieldSnapshot

    Raises:
        ValueError: If an override names an unknown flag
    """
    state = get_initial_field_state()
    if overrides:
        _check_flag_names(overrides)
        state.update(copy.deepcopy(dict(overrides)))
    return state
