"""Built-in file categories, in dispatch order."""

from __future__ import annotations

from typing import Tuple

from .base import SHEBANG_SHELL, FileCategory

YAML = FileCategory(name="yaml", label="YAML", suffixes=(".yml", ".yaml"))

JSON = FileCategory(name="json", label="JSON", suffixes=(".json",))

PYTHON = FileCategory(name="python", label="Python", suffixes=(".py",))

GO = FileCategory(name="go", label="Go", suffixes=(".go",))

SHELL = FileCategory(
    name="shell",
    label="shell",
    suffixes=(".sh", ".bash"),
    first_line=SHEBANG_SHELL,
)

DOCKERFILE = FileCategory(
    name="dockerfile",
    label="Dockerfile",
    suffixes=(".dockerfile",),
    filenames=("Dockerfile",),
    prefixes=("Dockerfile.",),
)

TRAVIS = FileCategory(name="travis", label="Travis CI", filenames=(".travis.yml",))

BUILTIN_CATEGORIES: Tuple[FileCategory, ...] = (
    YAML,
    JSON,
    PYTHON,
    GO,
    SHELL,
    DOCKERFILE,
    TRAVIS,
)
