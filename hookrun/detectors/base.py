"""File category definitions used by the detector."""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import PurePosixPath
from typing import Optional, Tuple


@dataclass(frozen=True)
class FileCategory:
    """A recognised file type and the predicate that selects its members.

    A path belongs to the category when its suffix, exact base name, or base
    name prefix matches. Categories with a ``first_line`` pattern also claim
    files whose first line matches it, whatever their name.
    """

    name: str
    label: str
    suffixes: Tuple[str, ...] = ()
    filenames: Tuple[str, ...] = ()
    prefixes: Tuple[str, ...] = ()
    first_line: Optional[re.Pattern[str]] = None

    def matches_name(self, path: str) -> bool:
        pure = PurePosixPath(path.replace("\\", "/"))
        name = pure.name
        if name in self.filenames:
            return True
        if any(name.startswith(prefix) for prefix in self.prefixes):
            return True
        lowered = name.lower()
        return any(lowered.endswith(suffix) for suffix in self.suffixes)

    def matches_first_line(self, line: str) -> bool:
        if self.first_line is None:
            return False
        return self.first_line.search(line) is not None


SHEBANG_SHELL = re.compile(r"^#!\s*\S*(?:/|env\s+)(?:ba|da|k|z)?sh\b")
