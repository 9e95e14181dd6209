"""Point edits on dict records: rename, remove, and dotted-path writes."""

from __future__ import annotations

import dataclasses
import typing as typ

Record: typ.TypeAlias = dict[str, typ.Any]

_PATH_SEPARATOR = "."


@dataclasses.dataclass(frozen=True, slots=True)
class FieldEdit:
    """Outcome of a rename.

    ``record`` is the edited record (the same object that was passed in) and
    ``found`` tells whether the source field existed.
    """

    record: Record
    found: bool


def _split_path(path: str) -> list[str]:
    if not path:
        msg = "field path must be non-empty"
        raise ValueError(msg)
    return path.split(_PATH_SEPARATOR)


def set_field(record: Record, path: str, value: object) -> Record:
    """Write ``value`` at a dotted ``path``, creating intermediate dicts.

    Intermediate values that are not dicts are replaced by empty dicts.

    Examples
    --------
    >>> set_field({}, "meta.source.name", "thelott")
    {'meta': {'source': {'name': 'thelott'}}}

    """
    *parents, leaf = _split_path(path)
    node = record
    for part in parents:
        child = node.get(part)
        if not isinstance(child, dict):
            child = {}
            node[part] = child
        node = child
    node[leaf] = value
    return record


def remove_field(record: Record, path: str) -> bool:
    """Delete the field at a dotted ``path``.

    Returns ``True`` when something was removed. Missing fields, and paths that
    run through non-dict values, are left alone.
    """
    *parents, leaf = _split_path(path)
    node: object = record
    for part in parents:
        if not isinstance(node, dict):
            return False
        node = node.get(part)
    if not isinstance(node, dict) or leaf not in node:
        return False
    del node[leaf]
    return True


def rename_field(record: Record, old_key: str, new_key: str) -> FieldEdit:
    """Move the value at ``old_key`` to the dotted path ``new_key``.

    ``old_key`` is a plain top-level key. A plain ``new_key`` takes over the old
    field's position and replaces any existing ``new_key`` entry. When
    ``old_key`` is absent the record is not touched, so nothing appears at
    ``new_key``; check ``FieldEdit.found`` when the field is required.
    """
    if old_key not in record:
        return FieldEdit(record=record, found=False)
    if old_key == new_key:
        return FieldEdit(record=record, found=True)

    if _PATH_SEPARATOR not in new_key:
        # keep the renamed field in the old field's position
        entries = [
            (new_key if key == old_key else key, item)
            for key, item in record.items()
            if key != new_key
        ]
        record.clear()
        record.update(entries)
        return FieldEdit(record=record, found=True)

    value = record.pop(old_key)
    set_field(record, new_key, value)
    return FieldEdit(record=record, found=True)


__all__ = ["FieldEdit", "Record", "remove_field", "rename_field", "set_field"]
