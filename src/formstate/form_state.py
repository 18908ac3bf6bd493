"""
FormState: composite node mirroring a record-like value.

A FormState owns a mapping of child key to child subtree (FormState for dict
values, FieldState for everything else) and embeds exactly one FieldState
that carries the record's own metadata. The embedded field reads its focus,
touched, pristine and valid flags by aggregating over the children.

update() reconciles the subtree against a new value:

    form = create_form({'name': 'Ada', 'address': {'city': 'London'}})
    form.update({'name': 'Ada', 'address': {'city': 'Paris'}, 'age': 36})
    # {'name': UNCHANGED, 'address': {'city': UPDATE}, 'age': CREATE}

Children whose values keep their shape are updated in place and keep their
identity; children whose shape flips between leaf and record are rebuilt.
"""
import logging
from types import MappingProxyType
from typing import Any, Callable, Dict, Mapping, Optional, Tuple, Union

from formstate.field_state import FORM_KEY, FieldState, FieldUpdate, FormUpdates, StateCallback
from formstate.object_utils import is_traversable, map_values, same_value

logger = logging.getLogger(__name__)

TreeNode = Union['FormState', FieldState]


def child_model(model: str, key: Any) -> str:
    """Dotted path of ``key`` below ``model`` (the root model is empty)."""
    return f'{model}.{key}' if model else str(key)


def _rebuilt_update(value: Any) -> Union[FieldUpdate, FormUpdates]:
    """Classification for a child rebuilt because its shape flipped.

    A new record reports every key as created; a collapse to a leaf value, or
    a new empty record, is a plain UPDATE.
    """
    if is_traversable(value) and value:
        return {key: FieldUpdate.CREATE for key in value}
    return FieldUpdate.UPDATE


class FormState:
    """Composite node of the state tree.

    Attributes:
        model: Dotted path of this node
        field: Embedded FieldState representing the record as a whole
    """

    def __init__(
        self,
        parent: Optional['FormState'],
        model: str,
        value: Any,
        initial_state: Optional[Mapping[str, Any]] = None,
    ):
        """
        Initialize FormState.

        Args:
            parent: FormState containing this node (None for the root)
            model: Dotted path of this node
            value: Value to mirror; children are built only if it is traversable
            initial_state: Flag overrides applied to every node of the subtree
        """
        self.model = model
        self._initial_state = initial_state

        self._fields: Optional[Dict[Any, TreeNode]] = None
        if is_traversable(value):
            self._fields = map_values(value, lambda sub_value, key: self._make_child(key, sub_value))

        self.field = FieldState(parent, model, value, initial_state, owner=self)

    def __repr__(self) -> str:
        keys = list(self._fields) if self._fields is not None else None
        return f"FormState(model={self.model!r}, fields={keys!r})"

    @property
    def fields(self) -> Optional[Mapping[Any, TreeNode]]:
        """Read-only view of the children, or None if this node has none."""
        if self._fields is None:
            return None
        return MappingProxyType(self._fields)

    def _make_child(self, key: Any, value: Any) -> TreeNode:
        return make_tree(self, child_model(self.model, key), value, self._initial_state)

    # === Reconciliation ===

    def update(self, new_value: Any) -> Union[FieldUpdate, FormUpdates]:
        """Reconcile this subtree against a new value.

        Args:
            new_value: Replacement value for this position

        Returns:
            UNCHANGED or UPDATE for this node as a whole, or a mapping of
            child key to CREATE / UPDATE / DELETE / UNCHANGED (nested for
            composite children) when the new value is traversable and
            something below changed.
        """
        old_value = self.field.get_value()
        if same_value(new_value, old_value):
            return FieldUpdate.UNCHANGED

        updates: Union[FieldUpdate, FormUpdates]
        if not is_traversable(new_value):
            if self._fields is not None:
                # Collapsing to a leaf value: children are dropped, not diffed
                logger.debug(f"FormState {self.model!r} collapsed to leaf value, dropping {len(self._fields)} children")
                self._fields = None
            updates = FieldUpdate.UPDATE
        else:
            updates, fields = self._diff_fields(new_value)
            # Swap the rebuilt mapping in only after the full pass
            self._fields = fields

        self.field.change(new_value)

        logger.debug(f"FormState {self.model!r} updated: {updates!r}")
        return updates

    def _diff_fields(self, new_value: Mapping[Any, Any]) -> Tuple[Union[FieldUpdate, FormUpdates], Dict[Any, TreeNode]]:
        """Two-pass scan: existing keys first, then keys new to this node."""
        current = self._fields if self._fields is not None else {}
        updates: FormUpdates = {}
        fields: Dict[Any, TreeNode] = {}

        for key, child in current.items():
            if key not in new_value:
                updates[key] = FieldUpdate.DELETE
                continue

            sub_value = new_value[key]
            if is_traversable(sub_value) == isinstance(child, FormState):
                updates[key] = child.update(sub_value)
                fields[key] = child
            else:
                logger.debug(f"Shape of {child_model(self.model, key)!r} changed, rebuilding subtree")
                updates[key] = _rebuilt_update(sub_value)
                fields[key] = self._make_child(key, sub_value)

        for key, sub_value in new_value.items():
            if key in updates:
                continue  # already visited
            updates[key] = FieldUpdate.CREATE
            fields[key] = self._make_child(key, sub_value)

        if all(update == FieldUpdate.UNCHANGED for update in updates.values()):
            # A leaf value turning into an empty record is still a shape change
            if self._fields is None:
                return FieldUpdate.UPDATE, fields
            return FieldUpdate.UNCHANGED, fields
        return updates, fields

    # === Delegation to the embedded field ===

    def get_value(self) -> Any:
        return self.field.get_value()

    def every(self, predicate: Callable[[FieldState], bool]) -> bool:
        return self.field.every(predicate)

    def some(self, predicate: Callable[[FieldState], bool]) -> bool:
        return self.field.some(predicate)

    def subscribe(self, callback: StateCallback) -> None:
        self.field.subscribe(callback)

    def unsubscribe(self, callback: StateCallback) -> None:
        self.field.unsubscribe(callback)

    def field_map(self) -> Dict[Any, Any]:
        """Nested key map of the subtree, with each composite's own field under FORM_KEY."""
        result: Dict[Any, Any] = {}
        for key, child in (self._fields or {}).items():
            result[str(key)] = child.field_map() if isinstance(child, FormState) else child
        result[FORM_KEY] = self.field
        return result

    def to_dict(self) -> Dict[str, Any]:
        """Export the subtree's snapshots; children are nested under 'fields'."""
        result = self.field.to_dict()
        if self._fields is not None:
            result['fields'] = {key: child.to_dict() for key, child in self._fields.items()}
        return result


def make_tree(
    parent: Optional[FormState],
    model: str,
    value: Any,
    initial_state: Optional[Mapping[str, Any]] = None,
) -> TreeNode:
    """Build the subtree for ``value``.

    Args:
        parent: FormState that will contain the subtree (None for a root)
        model: Dotted path of the subtree's root
        value: Value to mirror
        initial_state: Flag overrides applied to every node

    Returns:
        FormState for traversable values, FieldState for everything else
    """
    if is_traversable(value):
        return FormState(parent, model, value, initial_state)
    return FieldState(parent, model, value, initial_state)


def create_form(value: Any, initial_state: Optional[Mapping[str, Any]] = None) -> FormState:
    """Create a root form for ``value``.

    The root is always a FormState, even for primitive values, so it can grow
    children when a record is later passed to update().
    """
    form = FormState(None, '', value, initial_state)
    logger.debug(f"Created form for {type(value).__name__} value")
    return form
