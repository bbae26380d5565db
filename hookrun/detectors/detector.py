"""Detects which file categories are present in a tracked file set."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple

from ..logging import get_logger
from ..models import TrackedFileSet
from .base import FileCategory

_FIRST_LINE_LIMIT = 256


class CategoryDetector:
    """Maps each category to the tracked files that belong to it."""

    def __init__(self) -> None:
        self.logger = get_logger("detector")

    def detect(
        self,
        file_set: TrackedFileSet,
        categories: Iterable[FileCategory],
    ) -> Dict[str, Tuple[str, ...]]:
        """Return matched paths per category, omitting categories with none.

        Paths keep their tracked order and appear at most once per category.
        Tracked files missing from the working tree are skipped.
        """
        present = [path for path in file_set.paths if file_set.absolute(path).is_file()]
        first_lines: Dict[str, Optional[str]] = {}

        detected: Dict[str, Tuple[str, ...]] = {}
        for category in categories:
            matched: List[str] = []
            seen = set()
            for path in present:
                if path in seen:
                    continue
                if category.matches_name(path) or self._matches_content(
                    category, file_set.absolute(path), path, first_lines
                ):
                    matched.append(path)
                    seen.add(path)
            if matched:
                self.logger.debug("Detected %d %s file(s)", len(matched), category.label)
                detected[category.name] = tuple(matched)
        return detected

    def _matches_content(
        self,
        category: FileCategory,
        path: Path,
        rel_path: str,
        cache: Dict[str, Optional[str]],
    ) -> bool:
        if category.first_line is None:
            return False
        if rel_path not in cache:
            cache[rel_path] = read_first_line(path)
        line = cache[rel_path]
        return line is not None and category.matches_first_line(line)


def read_first_line(path: Path) -> Optional[str]:
    """Return the first line of ``path`` or None when it cannot be read."""
    try:
        with path.open("r", encoding="utf-8", errors="replace") as handle:
            return handle.readline(_FIRST_LINE_LIMIT).rstrip("\r\n")
    except OSError:
        return None
