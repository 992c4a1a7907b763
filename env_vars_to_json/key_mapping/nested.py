"""Nested tree navigation and path splicing for decoded key paths."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Final, TypeAlias

from env_vars_to_json.errors import MalformedPathError, ShapeConflictError

from .mapper import Field, Index, encode_key


if TYPE_CHECKING:
    from .mapper import KeyPath, Segment


class _Missing:
    """Marker for a path that does not resolve; ``None`` is a valid node."""

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING: Final = _Missing()


@dataclass(frozen=True, slots=True)
class _Leaf:
    value: Any


@dataclass(frozen=True, slots=True)
class _ObjectUnit:
    name: str
    value: Any


@dataclass(frozen=True, slots=True)
class _ArrayUnit:
    index: int
    value: Any


_Fragment: TypeAlias = _Leaf | _ObjectUnit | _ArrayUnit


def _step(node: Any, segment: Segment) -> Any:
    if isinstance(segment, Field):
        if isinstance(node, dict) and segment.name in node:
            return node[segment.name]
        return MISSING
    if isinstance(node, list) and segment.position < len(node):
        return node[segment.position]
    return MISSING


def _slot(segment: Segment) -> str | int:
    return segment.name if isinstance(segment, Field) else segment.position


def _is_container(value: Any) -> bool:
    return isinstance(value, (dict, list))


def _materialize(fragment: _Fragment) -> Any:
    if isinstance(fragment, _ObjectUnit):
        return {fragment.name: fragment.value}
    if isinstance(fragment, _ArrayUnit):
        return [*([None] * fragment.index), fragment.value]
    return fragment.value


def _wrap(segment: Segment, fragment: _Fragment) -> _Fragment:
    child = _materialize(fragment)
    if isinstance(segment, Field):
        return _ObjectUnit(segment.name, child)
    return _ArrayUnit(segment.position, child)


def _describe(value: Any) -> str:
    if isinstance(value, dict):
        return "object"
    if isinstance(value, list):
        return "array"
    return "scalar"


def resolve(tree: Any, path: KeyPath) -> Any:
    """Return the node at ``path`` or ``MISSING`` when any segment does not resolve.

    Field segments need an object holding the key and index segments need an
    array long enough to hold the position. Nothing is created on the way.
    """
    node = tree
    for segment in path:
        node = _step(node, segment)
        if node is MISSING:
            return MISSING
    return node


def locate(tree: Any, path: KeyPath) -> tuple[Any, str | int] | None:
    """Return the ``(container, slot)`` holding the node at ``path``, if it exists."""
    if not path:
        return None
    container = resolve(tree, path[:-1])
    if container is MISSING or _step(container, path[-1]) is MISSING:
        return None
    return container, _slot(path[-1])


def _merge(container: Any, slot: str | int, fragment: _Fragment, path: KeyPath) -> None:
    existing = container[slot]

    if not _is_container(existing):
        container[slot] = _materialize(fragment)
        return

    if isinstance(fragment, _Leaf):
        if _is_container(fragment.value):
            container[slot] = fragment.value
            return
        msg = f"expected {_describe(existing)} at {encode_key(path, '.')}, found scalar"
        raise ShapeConflictError(msg)

    if isinstance(fragment, _ObjectUnit) and isinstance(existing, dict):
        existing[fragment.name] = fragment.value
        return

    if isinstance(fragment, _ArrayUnit) and isinstance(existing, list):
        if fragment.index >= len(existing):
            existing.extend([None] * (fragment.index + 1 - len(existing)))
        existing[fragment.index] = fragment.value
        return

    expected = "object" if isinstance(fragment, _ObjectUnit) else "array"
    msg = f"expected {expected} at {encode_key(path, '.')}, found {_describe(existing)}"
    raise ShapeConflictError(msg)


def splice(tree: dict[str, Any], path: KeyPath, value: Any) -> None:
    """Merge ``value`` into ``tree`` at ``path``.

    The path is walked from the deepest segment towards the root. At every
    level the existing tree is queried for the node the carried fragment is
    meant for; the first node found absorbs the fragment and the walk stops.
    Missing levels are fabricated as single-field objects or single-slot
    arrays, padded with ``None`` below the index.

    Merge rules for the node found:

    * ``None`` or a scalar is replaced wholesale;
    * an object absorbs an object fragment, keeping its other keys;
    * an array absorbs an array fragment, growing with ``None`` as needed and
      overwriting the slot in place;
    * a scalar landing on an object or array, or an object fragment meeting
      an array (or the reverse), raises ``ShapeConflictError``.

    The tree is only mutated at the merge point, so a failed splice leaves it
    unchanged.
    """
    if not path:
        msg = "at least one key part is required"
        raise ValueError(msg)
    if isinstance(path[0], Index):
        msg = f"first key part cannot be a number: {encode_key(path, '.')}"
        raise MalformedPathError(msg)

    fragment: _Fragment = _Leaf(value)
    for depth in range(len(path) - 1, -1, -1):
        prefix = path[: depth + 1]
        location = locate(tree, prefix)
        if location is not None:
            container, slot = location
            _merge(container, slot, fragment, prefix)
            return

        if depth == 0:
            tree[_slot(path[0])] = _materialize(fragment)
            return

        fragment = _wrap(path[depth], fragment)
