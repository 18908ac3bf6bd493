"""
FieldState: interaction metadata and value for one position in the tree.

A FieldState exists for every node. Plain leaves own one directly; every
FormState embeds one that stands for "the record as a whole". The flags form a
small state machine with cross-flag side effects:

- pending / submitted / submit_failed are a collapsed submission outcome.
  Setting one of them True clears the other two (and retouched).
- retouched marks "interacted with again after a submission attempt" and is
  the only flag written across the parent boundary.
- focus, touched and pristine are aggregated over children on read.

Writes to a composite's FieldState are ignored: its flags are derived from
its children. Nothing here ever raises for an ignored write.

Every mutation replaces the immutable snapshot (``state``) and publishes it
synchronously to subscribers before the mutating call returns.
"""
import dataclasses
import logging
import weakref
from enum import Enum
from typing import Any, Callable, Dict, List, Mapping, Optional, TYPE_CHECKING, Union

from formstate.config import build_initial_field_state
from formstate.object_utils import same_value
from formstate.snapshot_model import FieldSnapshot
from formstate.validity import Validity, is_validity_valid

if TYPE_CHECKING:
    from formstate.form_state import FormState

logger = logging.getLogger(__name__)

# Reserved key under which a composite exposes its own FieldState in a field map
FORM_KEY = '$form'

StateCallback = Callable[[FieldSnapshot], None]


class FieldUpdate(str, Enum):
    """Classification of what happened at one tree position during update()."""
    UNCHANGED = 'UNCHANGED'
    CREATE = 'CREATE'
    UPDATE = 'UPDATE'
    DELETE = 'DELETE'


# A composite reports a nested mapping of the same, mirroring the new value's shape
FormUpdates = Dict[Any, Union[FieldUpdate, 'FormUpdates']]


class FieldState:
    """State of a single field.

    Ownership flows strictly downward through FormState.fields. The two links
    held here are weak references and never keep anything alive:

    - parent: the FormState containing this node (used to push retouched up
      and to read the parent's submission outcome)
    - owner: the FormState this FieldState is embedded in, if any (used to
      reach that composite's current children)
    """

    def __init__(
        self,
        parent: Optional['FormState'],
        model: str,
        value: Any,
        initial_state: Optional[Mapping[str, Any]] = None,
        owner: Optional['FormState'] = None,
    ):
        """
        Initialize FieldState.

        Args:
            parent: FormState containing this node (None for a root)
            model: Dotted path of this node (e.g. "address.city")
            value: Current value, also captured as the initial value
            initial_state: Flag overrides layered over the configured defaults
            owner: FormState embedding this FieldState (None for plain leaves)
        """
        self._parent_ref = weakref.ref(parent) if parent is not None else None
        self._owner_ref = weakref.ref(owner) if owner is not None else None
        self._on_state_changed_callbacks: List[StateCallback] = []

        self.state = FieldSnapshot(
            model=model,
            value=value,
            initial_value=value,
            **build_initial_field_state(initial_state),
        )

    def __repr__(self) -> str:
        return f"FieldState(model={self.state.model!r}, value={self.state.value!r})"

    # === Tree links ===

    @property
    def field(self) -> 'FieldState':
        """The FieldState carrying this node's metadata (itself)."""
        return self

    @property
    def is_composite(self) -> bool:
        """True while the owning FormState has a children mapping (even an empty one)."""
        return self._children() is not None

    def _children(self) -> Optional[Mapping[Any, Any]]:
        owner = self._owner_ref() if self._owner_ref is not None else None
        return owner.fields if owner is not None else None

    def _parent_field(self) -> Optional['FieldState']:
        parent = self._parent_ref() if self._parent_ref is not None else None
        return parent.field if parent is not None else None

    def _parent_submission_attempted(self) -> bool:
        parent_field = self._parent_field()
        if parent_field is None:
            return False
        return parent_field.state.submitted or parent_field.state.submit_failed

    def field_map(self) -> Dict[str, Any]:
        """Key map used by path addressing; a leaf only exposes itself."""
        return {FORM_KEY: self}

    # === Subscription ===

    def subscribe(self, callback: StateCallback) -> None:
        """Subscribe to state changes.

        The callback receives the new FieldSnapshot after every mutation.
        Subscribers that join later do not receive earlier snapshots.
        """
        if callback not in self._on_state_changed_callbacks:
            self._on_state_changed_callbacks.append(callback)

    def unsubscribe(self, callback: StateCallback) -> None:
        """Unsubscribe from state changes."""
        if callback in self._on_state_changed_callbacks:
            self._on_state_changed_callbacks.remove(callback)

    def _notify_state_changed(self) -> None:
        """Push the current snapshot to every subscriber (best-effort)."""
        for callback in list(self._on_state_changed_callbacks):
            try:
                callback(self.state)
            except Exception as e:
                logger.warning(f"Error in state_changed callback for {self.state.model!r}: {e}")

    def _set(self, **props: Any) -> None:
        self.state = dataclasses.replace(self.state, **props)
        self._notify_state_changed()

    def _set_parent(self, **props: Any) -> None:
        parent_field = self._parent_field()
        if parent_field is None:
            return
        parent_field._set(**props)

    # === Value ===

    def get_value(self) -> Any:
        return self.state.value

    def get_initial_value(self) -> Any:
        return self.state.initial_value

    def get_model(self) -> str:
        return self.state.model

    def change(self, new_value: Any) -> None:
        """Store a new value.

        Marks the field dirty (pristine=False) and no longer validated. If the
        containing form has been submitted, the field is also retouched.

        Pristine is one-directional: changing the value back to the initial
        value does not make the field pristine again.
        """
        if same_value(new_value, self.state.value):
            return

        parent_field = self._parent_field()
        retouched = True if parent_field is not None and parent_field.state.submitted else self.state.retouched

        self._set(
            value=new_value,
            validated=False,
            retouched=retouched,
            pristine=False,
        )

    def update(self, new_value: Any) -> FieldUpdate:
        """Reconcile this leaf against a new value.

        A leaf has no children to diff, so a dict handed to it is stored as an
        opaque value. The containing FormState replaces leaves whose value
        becomes traversable.
        """
        if same_value(new_value, self.state.value):
            return FieldUpdate.UNCHANGED

        self.change(new_value)
        return FieldUpdate.UPDATE

    # === Aggregation ===

    def every(self, predicate: Callable[['FieldState'], bool]) -> bool:
        """True if ``predicate`` holds for every leaf in this subtree."""
        children = self._children()
        if children is None:
            return predicate(self)
        return all(
            child.every(predicate)
            for key, child in children.items()
            if key != FORM_KEY
        )

    def some(self, predicate: Callable[['FieldState'], bool]) -> bool:
        """True if ``predicate`` holds for at least one leaf in this subtree."""
        children = self._children()
        if children is None:
            return predicate(self)
        return any(
            child.some(predicate)
            for key, child in children.items()
            if key != FORM_KEY
        )

    # === Interaction flags ===

    def get_focus(self) -> bool:
        return self.some(lambda field: field.state.focus)

    def set_focus(self, value: bool) -> None:
        """Focus or blur the field.

        Blurring marks the field touched and tells the parent whether this
        interaction happened after a submission attempt.
        """
        if self.is_composite or value == self.state.focus:
            return

        if value:
            self._set(focus=True)
            return

        self._set(focus=False, touched=True)
        self._set_parent(retouched=self._parent_submission_attempted())

    def get_touched(self) -> bool:
        return self.some(lambda field: field.state.touched)

    def set_touched(self, value: bool) -> None:
        if self.is_composite or value == self.state.touched:
            return

        if value:
            retouched = self._parent_submission_attempted()
            self._set(touched=True, retouched=retouched)
            self._set_parent(retouched=retouched)
        else:
            self._set(focus=False, touched=False, retouched=False)

    def get_retouched(self) -> bool:
        return self.state.retouched

    def get_pristine(self) -> bool:
        return self.every(lambda field: field.state.pristine)

    def set_pristine(self, value: bool) -> None:
        if self.is_composite or value == self.state.pristine:
            return

        self._set(pristine=value)

    # === Submission outcome (mutually exclusive when True) ===

    def get_pending(self) -> bool:
        return self.state.pending

    def set_pending(self, value: bool) -> None:
        if self.is_composite or value == self.state.pending:
            return

        if value:
            self._set(pending=True, submitted=False, submit_failed=False, retouched=False)
        else:
            self._set(pending=False)

    def get_submitted(self) -> bool:
        return self.state.submitted

    def set_submitted(self, value: bool) -> None:
        if self.is_composite or value == self.state.submitted:
            return

        if value:
            self._set(submitted=True, pending=False, submit_failed=False, retouched=False)
        else:
            self._set(submitted=False)

    def get_submit_failed(self) -> bool:
        return self.state.submit_failed

    def set_submit_failed(self, value: bool) -> None:
        if self.is_composite or value == self.state.submit_failed:
            return

        if value:
            self._set(
                submit_failed=True,
                pending=False,
                submitted=False,
                touched=True,
                retouched=False,
            )
        else:
            self._set(submit_failed=False)

    # === Validation results ===

    def get_validating(self) -> bool:
        return self.state.validating

    def set_validating(self, value: bool) -> None:
        if self.is_composite or value == self.state.validating:
            return

        self._set(validating=value)

    def get_validated(self) -> bool:
        return self.state.validated

    def set_validated(self, value: bool) -> None:
        if self.is_composite or value == self.state.validated:
            return

        self._set(validated=value)

    def get_validity(self) -> Validity:
        return self.state.validity

    def set_validity(self, validity: Validity) -> None:
        """Store a validity result; this also ends any validation in flight."""
        if self.is_composite or same_value(validity, self.state.validity):
            return

        self._set(validity=validity, validating=False)

    def get_errors(self) -> Validity:
        return self.state.errors

    def set_errors(self, errors: Validity) -> None:
        if self.is_composite or same_value(errors, self.state.errors):
            return

        self._set(errors=errors)

    def get_valid(self) -> bool:
        """Own validity, and for a composite the validity of every child."""
        if not is_validity_valid(self.state.validity):
            return False

        children = self._children()
        if children is None:
            return True
        return all(
            child.field.get_valid()
            for key, child in children.items()
            if key != FORM_KEY
        )

    def to_dict(self) -> Dict[str, Any]:
        """Export the current snapshot to a plain dict."""
        return self.state.to_dict()
