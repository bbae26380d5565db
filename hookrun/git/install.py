"""Installs hookrun shims into a repository's hooks directory."""

from __future__ import annotations

import stat
import subprocess
from pathlib import Path
from typing import Callable, List

from ..models import PHASES

SHIM_MARKER = "# installed by hookrun"

_SHIM_TEMPLATE = """#!/bin/sh
{marker}
exec hookrun {phase} "$@"
"""


def install_hooks(
    repo_path: Path | str,
    *,
    force: bool = False,
    runner: Callable[..., subprocess.CompletedProcess] | None = None,
) -> List[Path]:
    """Write a shim for every supported phase and return the written paths.

    A hook that was not written by hookrun is only replaced when ``force`` is
    set; otherwise ``FileExistsError`` is raised before anything is written.
    """
    repo = Path(repo_path)
    hooks_dir = resolve_hooks_dir(repo, runner=runner)
    targets = [hooks_dir / phase for phase in PHASES]

    if not force:
        foreign = [path for path in targets if path.exists() and not _is_shim(path)]
        if foreign:
            names = ", ".join(path.name for path in foreign)
            raise FileExistsError(
                f"Existing hooks found ({names}); re-run with --force to replace them"
            )

    hooks_dir.mkdir(parents=True, exist_ok=True)
    written: List[Path] = []
    for phase, path in zip(PHASES, targets):
        path.write_text(_SHIM_TEMPLATE.format(marker=SHIM_MARKER, phase=phase), encoding="utf-8")
        mode = path.stat().st_mode
        path.chmod(mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        written.append(path)
    return written


def resolve_hooks_dir(
    repo: Path,
    runner: Callable[..., subprocess.CompletedProcess] | None = None,
) -> Path:
    """Ask git where hooks live, honouring worktrees and ``core.hooksPath``."""
    run = runner or subprocess.run
    try:
        result = run(
            ["git", "rev-parse", "--git-path", "hooks"],
            cwd=str(repo),
            capture_output=True,
            text=True,
            check=False,
        )
    except OSError as exc:
        raise RuntimeError(f"Unable to run git in {repo}: {exc}") from exc
    location = result.stdout.strip()
    if result.returncode != 0 or not location:
        raise RuntimeError(f"{repo} is not a Git repository")
    hooks_dir = Path(location).expanduser()
    return hooks_dir if hooks_dir.is_absolute() else repo / hooks_dir


def _is_shim(path: Path) -> bool:
    try:
        return SHIM_MARKER in path.read_text(encoding="utf-8", errors="replace")
    except OSError:
        return False
