"""Dotted-path resolution for nested data bags."""

from __future__ import annotations

from collections.abc import Mapping, MutableMapping
from typing import Any, Final


class _Missing:
    """Sentinel type for absent values."""

    _instance: _Missing | None = None

    def __new__(cls) -> _Missing:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "MISSING"


MISSING: Final = _Missing()


def split_path(name: str | list[str] | tuple[str, ...]) -> list[str]:
    """Split a dotted field name into path segments.

    Args:
        name (str | list[str] | tuple[str, ...]): Dotted name or pre-split segments.

    Raises:
        ValueError: If the path is empty or contains an empty segment.

    Returns:
        list[str]: Path segments.
    """
    segments = name.split(".") if isinstance(name, str) else list(name)
    if not segments or not all(segments):
        raise ValueError(f"Invalid field path: {name!r}")  # noqa: TRY003
    return segments


def resolve_path(bag: Mapping[str, Any], path: list[str]) -> Any:
    """Walk ``path`` through nested mappings.

    Args:
        bag (Mapping[str, Any]): Data bag.
        path (list[str]): Path segments.

    Returns:
        Any: The leaf value, or ``MISSING`` when a segment is absent or not a mapping.
    """
    current: Any = bag
    for segment in path:
        if not isinstance(current, Mapping) or segment not in current:
            return MISSING
        current = current[segment]
    return current


def assign_path(bag: MutableMapping[str, Any], path: list[str], value: Any) -> None:
    """Set the leaf at ``path``, creating intermediate mappings on the way.

    A non-mapping value sitting where an intermediate segment is needed is
    replaced by a fresh mapping.

    Args:
        bag (MutableMapping[str, Any]): Data bag mutated in place.
        path (list[str]): Path segments.
        value (Any): Leaf value.
    """
    current = bag
    for segment in path[:-1]:
        child = current.get(segment)
        if not isinstance(child, MutableMapping):
            child = {}
            current[segment] = child
        current = child
    current[path[-1]] = value


def deep_merge(base: Mapping[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    """Merge two bags recursively, ``override`` winning on conflicts.

    Dotted keys in ``override`` are expanded so that ``{"contact.email": x}``
    lands in ``{"contact": {"email": x}}``.

    Args:
        base (Mapping[str, Any]): Base bag, left untouched.
        override (Mapping[str, Any]): Values taking precedence.

    Returns:
        dict[str, Any]: New merged bag.
    """
    merged = expand_dotted_keys(base)
    for key, value in expand_dotted_keys(override).items():
        existing = merged.get(key)
        if isinstance(existing, Mapping) and isinstance(value, Mapping):
            merged[key] = deep_merge(existing, value)
        else:
            merged[key] = value
    return merged


def expand_dotted_keys(bag: Mapping[str, Any]) -> dict[str, Any]:
    """Return a copy of ``bag`` where dotted keys become nested mappings.

    Args:
        bag (Mapping[str, Any]): Possibly flat bag.

    Returns:
        dict[str, Any]: Nested bag.
    """
    expanded: dict[str, Any] = {}
    for key, value in bag.items():
        nested = expand_dotted_keys(value) if isinstance(value, Mapping) else value
        path = split_path(key)
        existing = resolve_path(expanded, path)
        if isinstance(existing, Mapping) and isinstance(nested, Mapping):
            nested = deep_merge(existing, nested)
        assign_path(expanded, path, nested)
    return expanded
