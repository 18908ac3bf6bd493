"""
Path addressing into a state tree.

Paths use dot and bracket notation:

    parse_path('address.lines[0].text')   # ('address', 'lines', '0', 'text')
    parse_path("contacts['home phone']")  # ('contacts', 'home phone')
    parse_path('.name')                   # ('', 'name')

A path is resolved against a tree's field map, where every composite also
exposes its own FieldState under the reserved key ``$form``.
"""
import functools
import logging
import re
from typing import Any, Callable, Mapping, Tuple, Union

from formstate.field_state import FORM_KEY, FieldState

logger = logging.getLogger(__name__)

FieldMap = Mapping[str, Any]
Getter = Callable[[FieldMap], Any]

_LEADING_DOT = re.compile(r'^\.')
# Property names: bare runs, [number], ['quoted'] / ["quoted"], or the empty
# segment implied by "a..b", "a[]" and a trailing dot
_PROP_NAME = re.compile(
    r'[^.\[\]]+'
    r'|\[(?:(-?\d+(?:\.\d+)?)|(["\'])((?:(?!\2)[^\\]|\\.)*?)\2)\]'
    r'|(?=(?:\.|\[\])(?:\.|\[\]|$))'
)
_ESCAPE_CHAR = re.compile(r'\\(\\)?')


class PathNotFoundError(KeyError):
    """Raised when a path addresses a key that does not exist in the tree."""

    def __init__(self, path: Any, key: Any):
        super().__init__(f"No field at {key!r} while resolving {path!r}")
        self.path = path
        self.key = key


@functools.lru_cache(maxsize=512)
def parse_path(path: str) -> Tuple[str, ...]:
    """Split a path expression into its ordered keys.

    Numeric bracket contents stay numeric strings ('0', '-1.5'); quoted
    bracket contents have backslash escapes removed.
    """
    keys = []
    if _LEADING_DOT.match(path):
        keys.append('')
    for match in _PROP_NAME.finditer(path):
        number, quote, quoted = match.group(1), match.group(2), match.group(3)
        if quote:
            keys.append(_ESCAPE_CHAR.sub(lambda m: m.group(1) or '', quoted))
        else:
            keys.append(number or match.group(0))
    return tuple(keys)


def create_getter(path: str) -> Getter:
    """Build a function that walks a field map along ``path``.

    Raises:
        PathNotFoundError: From the returned getter, when a key is missing
    """
    keys = parse_path(path)

    def getter(field_map: FieldMap) -> Any:
        marker: Any = field_map
        for key in keys:
            if not isinstance(marker, Mapping) or key not in marker:
                logger.debug(f"Path {path!r} failed at key {key!r}")
                raise PathNotFoundError(path, key)
            marker = marker[key]
        return marker

    return getter


def resolve(root: Any, path: Union[str, Getter]) -> FieldState:
    """Find the FieldState addressed by ``path`` in the tree rooted at ``root``.

    Args:
        root: FormState or FieldState at the top of the tree
        path: Path expression, or a function receiving the root's field map
              and returning a sub-map or FieldState

    Returns:
        The addressed FieldState; a composite resolves to its own field

    Raises:
        PathNotFoundError: If any key along the path is absent
    """
    getter = create_getter(path) if isinstance(path, str) else path
    target = getter(root.field_map())

    if isinstance(target, FieldState):
        return target
    if isinstance(target, Mapping) and FORM_KEY in target:
        return target[FORM_KEY]
    raise PathNotFoundError(path, FORM_KEY)
