"""File category definitions and discovery utilities."""

from __future__ import annotations

from importlib import metadata
from typing import Iterable, List, Sequence, Set

from .base import FileCategory
from .builtin import BUILTIN_CATEGORIES
from .detector import CategoryDetector

_ENTRY_POINT_GROUP = "hookrun.categories"


def discover_categories(disabled: Sequence[str] | None = None) -> List[FileCategory]:
    """Return built-in and plug-in categories in dispatch order.

    Plug-ins registered under the ``hookrun.categories`` entry-point group are
    appended after the built-ins; a plug-in reusing a built-in name is ignored.
    """
    disabled_set: Set[str] = {name.lower() for name in disabled or ()}

    categories: List[FileCategory] = []
    seen: Set[str] = set()

    def _add(category: FileCategory) -> None:
        key = category.name.lower()
        if key in seen or key in disabled_set:
            return
        categories.append(category)
        seen.add(key)

    for category in BUILTIN_CATEGORIES:
        _add(category)

    for entry in _iter_entry_points():
        try:
            loaded = entry.load()
        except Exception as exc:  # pragma: no cover - plug-in import failure
            raise RuntimeError(f"Failed to load category entry point '{entry.name}': {exc}") from exc
        _add(_coerce_category(loaded, entry.name))

    return categories


def _coerce_category(obj: object, name: str) -> FileCategory:
    if isinstance(obj, FileCategory):
        return obj
    if callable(obj):
        instance = obj()
        if isinstance(instance, FileCategory):
            return instance
    raise TypeError(f"Category entry point '{name}' must be a FileCategory or a factory returning one")


def _iter_entry_points() -> Iterable[metadata.EntryPoint]:
    return metadata.entry_points().select(group=_ENTRY_POINT_GROUP)


__all__ = [
    "CategoryDetector",
    "FileCategory",
    "discover_categories",
]
