"""Stage tables for each hook phase."""

from __future__ import annotations

from typing import Dict, List, Sequence, Tuple

from .config import HookConfig
from .detectors.base import FileCategory
from .dispatch import (
    FILE_PLACEHOLDER,
    FILES_PLACEHOLDER,
    DegradedNotice,
    GenericTool,
    OverrideScript,
    RequiredScript,
    Stage,
    Strategy,
)
from .models import PRE_COMMIT, PREPARE_COMMIT_MSG

Command = Tuple[str, ...]

# Generic commands used by prepare-commit-msg when no override is present.
MESSAGE_COMMANDS: Dict[str, Tuple[Command, ...]] = {
    "yaml": (("yamllint", "-f", "parsable", FILES_PLACEHOLDER),),
    "json": (("jsonlint", "-q", FILE_PLACEHOLDER),),
    "python": (("flake8", FILES_PLACEHOLDER),),
    "go": (("gofmt", "-l", FILES_PLACEHOLDER), ("go", "vet", "./...")),
    "shell": (("shellcheck", FILES_PLACEHOLDER),),
    "dockerfile": (("hadolint", FILES_PLACEHOLDER),),
    "travis": (("travis", "lint", "--no-interactive", FILE_PLACEHOLDER),),
}

GO_BUILD_AND_TEST: Tuple[Command, ...] = (
    ("go", "build", "./..."),
    ("go", "test", "./..."),
)


def script_name(category: str, phase: str) -> str:
    """Name of the override executable for ``category`` in ``phase``."""
    return f"{category}-{phase}"


def build_stages(
    phase: str, categories: Sequence[FileCategory], config: HookConfig
) -> List[Stage]:
    """Return the ordered stages ``phase`` runs for the enabled ``categories``."""
    if phase == PRE_COMMIT:
        return _pre_commit_stages(categories)
    if phase == PREPARE_COMMIT_MSG:
        return _prepare_commit_msg_stages(categories, config)
    raise ValueError(f"Unknown hook phase: {phase}")


def _overrides(name: str) -> List[Strategy]:
    return [OverrideScript(name), OverrideScript(name, shared=True)]


def _pre_commit_stages(categories: Sequence[FileCategory]) -> List[Stage]:
    by_name = {category.name: category for category in categories}
    stages: List[Stage] = []

    # A failing Go build halts before the Python hook runs.
    go = by_name.get("go")
    if go is not None:
        build = GenericTool(GO_BUILD_AND_TEST, fatal=True)
        stages.append(Stage(go, (build, DegradedNotice(build.executables))))

    python = by_name.get("python")
    if python is not None:
        name = script_name("python", PRE_COMMIT)
        stages.append(Stage(python, tuple(_overrides(name) + [RequiredScript(name)])))

    return stages


def _prepare_commit_msg_stages(
    categories: Sequence[FileCategory], config: HookConfig
) -> List[Stage]:
    stages: List[Stage] = []
    for category in categories:
        strategies = _overrides(script_name(category.name, PREPARE_COMMIT_MSG))
        commands = config.commands_for(category.name) or MESSAGE_COMMANDS.get(category.name)
        if commands:
            generic = GenericTool(commands)
            strategies.append(generic)
            strategies.append(DegradedNotice(generic.executables))
        else:
            strategies.append(DegradedNotice())
        stages.append(Stage(category, tuple(strategies)))
    return stages
