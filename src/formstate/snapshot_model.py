"""
Immutable snapshot of a single field's state.

Every mutation of a FieldState replaces its snapshot with a new one and
publishes it to subscribers, so adapters always receive a consistent view
and can compare old against new without defensive copies.

Design Philosophy: Correct by Construction
- Immutable snapshots (frozen dataclass)
- Derived state (``valid``) is never stored, it depends on children
- Direct attribute access (no getattr fallbacks)
"""

from dataclasses import dataclass, field, fields as dataclass_fields
from typing import Any, Dict, Tuple

from formstate.validity import Validity


@dataclass(frozen=True)
class FieldSnapshot:
    """State of one field at a point in time."""
    model: str  # Dotted path of the field within its tree
    value: Any
    initial_value: Any
    focus: bool = False
    pending: bool = False
    pristine: bool = True
    submitted: bool = False
    submit_failed: bool = False
    retouched: bool = False  # Touched again after a submission attempt
    touched: bool = False
    validating: bool = False
    validated: bool = False
    validity: Validity = field(default_factory=dict)
    errors: Validity = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Export to a plain dict."""
        return {f.name: getattr(self, f.name) for f in dataclass_fields(self)}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'FieldSnapshot':
        """Import from dict (e.g., produced by to_dict)."""
        return cls(**{name: data[name] for name in _FIELD_NAMES if name in data})


_FIELD_NAMES: Tuple[str, ...] = tuple(f.name for f in dataclass_fields(FieldSnapshot))

# Flags that may be overridden when a tree is constructed
FLAG_NAMES: Tuple[str, ...] = tuple(
    name for name in _FIELD_NAMES if name not in ('model', 'value', 'initial_value')
)
