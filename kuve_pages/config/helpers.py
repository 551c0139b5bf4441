"""Utility helpers shared by the Kuve configuration builders."""

from __future__ import annotations

import collections.abc as cabc
import dataclasses as dc
import enum
import typing as typ

from .models import ValidationError, ValidationKind

E = typ.TypeVar("E", bound=enum.Enum)


@dc.dataclass(slots=True)
class MergeConflict:
    """A field declared by more than one configuration fragment."""

    path: str
    sources: list[str]

    def describe(self) -> str:
        """Return ``path (declared by a, b)`` for error reports."""
        return f"{self.path} (declared by {', '.join(self.sources)})"


@dc.dataclass(slots=True)
class _Owned:
    """Leaf value remembered together with the fragment that set it."""

    value: object
    source: str


def merge_disjoint(
    fragments: cabc.Iterable[tuple[str, cabc.Mapping[str, typ.Any]]],
) -> tuple[dict[str, typ.Any], list[MergeConflict]]:
    """Deep-merge named fragments that must own disjoint fields.

    Mappings declared by several fragments are merged key by key; any other
    value (scalars, lists and empty mappings alike) may be declared by a single
    fragment only. Conflicting fields keep the first declaration and are
    collected into the returned inventory instead of being silently
    overwritten.

    Parameters
    ----------
    fragments : Iterable[tuple[str, Mapping[str, Any]]]
        ``(name, mapping)`` pairs in declaration order.

    Returns
    -------
    tuple[dict[str, Any], list[MergeConflict]]
        The merged mapping and the conflicts found, ordered by first
        occurrence.

    Examples
    --------
    >>> merged, conflicts = merge_disjoint(
    ...     [("core", {"title": "Kuve"}), ("theme", {"themeConfig": {}})]
    ... )
    >>> sorted(merged), conflicts
    (['themeConfig', 'title'], [])
    """
    owned: dict[str, typ.Any] = {}
    conflicts: dict[str, MergeConflict] = {}
    for source, fragment in fragments:
        _merge_into(owned, fragment, source, (), conflicts)
    return _unwrap(owned), list(conflicts.values())


def _merge_into(
    target: dict[str, typ.Any],
    fragment: cabc.Mapping[str, typ.Any],
    source: str,
    path: tuple[str, ...],
    conflicts: dict[str, MergeConflict],
) -> None:
    for raw_key, value in fragment.items():
        key = str(raw_key)
        key_path = (*path, key)
        existing = target.get(key)
        if existing is None:
            target[key] = _own(value, source)
            continue
        if isinstance(existing, dict) and isinstance(value, cabc.Mapping) and value:
            _merge_into(existing, value, source, key_path, conflicts)
            continue
        dotted = ".".join(key_path)
        if isinstance(existing, _Owned):
            first = existing.source
        else:
            first = _first_source(existing)
        conflict = conflicts.setdefault(dotted, MergeConflict(dotted, [first]))
        if source not in conflict.sources:
            conflict.sources.append(source)


def _own(value: object, source: str) -> typ.Any:
    # An empty mapping is a declaration of its own and stays a leaf.
    if isinstance(value, cabc.Mapping) and value:
        owned: dict[str, typ.Any] = {}
        for key, child in value.items():
            owned[str(key)] = _own(child, source)
        return owned
    return _Owned(value, source)


def _first_source(tree: cabc.Mapping[str, typ.Any]) -> str:
    for value in tree.values():
        if isinstance(value, _Owned):
            return value.source
        if isinstance(value, dict):
            return _first_source(value)
    return "<empty>"


def _unwrap(tree: cabc.Mapping[str, typ.Any]) -> dict[str, typ.Any]:
    result: dict[str, typ.Any] = {}
    for key, value in tree.items():
        match value:
            case _Owned(value=leaf):
                result[key] = leaf
            case dict():
                result[key] = _unwrap(value)
    return result


def _optional_str(value: object | None) -> str | None:
    """Return a stripped string value or None when empty."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _require_str(payload: cabc.Mapping[str, object], key: str, where: str) -> str:
    """Return a non-empty string field or raise ``MissingOption``."""
    value = _optional_str(payload.get(key))
    if value is None:
        msg = f"{where} requires '{key}'"
        raise ValidationError(ValidationKind.MISSING_OPTION, msg)
    return value


def _require_mapping(
    value: object, where: str, *, allow_none: bool = True
) -> cabc.Mapping[str, typ.Any]:
    """Return ``value`` as a mapping, treating ``None`` as empty when allowed."""
    if value is None and allow_none:
        return {}
    if not isinstance(value, cabc.Mapping):
        msg = f"{where} must be a mapping, got {type(value).__name__}"
        raise ValidationError(ValidationKind.INVALID_OPTION, msg)
    return value


def _require_list(value: object, where: str) -> list[object]:
    """Return ``value`` as a list, treating ``None`` as empty."""
    if value is None:
        return []
    if isinstance(value, str) or not isinstance(value, cabc.Sequence):
        msg = f"{where} must be a list, got {type(value).__name__}"
        raise ValidationError(ValidationKind.INVALID_OPTION, msg)
    return list(value)


def _require_bool(value: object, where: str, *, default: bool) -> bool:
    """Return a boolean flag, rejecting strings such as ``"false"``."""
    if value is None:
        return default
    if not isinstance(value, bool):
        msg = f"{where} must be true or false, got {value!r}"
        raise ValidationError(ValidationKind.INVALID_OPTION, msg)
    return value


def _str_tuple(value: object, where: str) -> tuple[str, ...]:
    """Normalize a string or list of strings into a tuple of non-empty strings."""
    if isinstance(value, str):
        return (value,) if value.strip() else ()
    normalized: list[str] = []
    for segment in _require_list(value, where):
        text = str(segment).strip()
        if text:
            normalized.append(text)
    return tuple(normalized)


def _parse_enum(enum_type: type[E], value: object, where: str, *, default: E) -> E:
    """Parse ``value`` into ``enum_type`` or raise ``InvalidOption``."""
    if value is None:
        return default
    try:
        return enum_type(value)
    except ValueError as exc:
        allowed = ", ".join(str(member.value) for member in enum_type)
        msg = f"{where} must be one of {allowed}; got {value!r}"
        raise ValidationError(ValidationKind.INVALID_OPTION, msg) from exc


__all__ = [
    "MergeConflict",
    "_optional_str",
    "_parse_enum",
    "_require_bool",
    "_require_list",
    "_require_mapping",
    "_require_str",
    "_str_tuple",
    "merge_disjoint",
]
