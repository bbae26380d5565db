"""Tracked file queries against the git index."""

from __future__ import annotations

import os
import subprocess
from pathlib import Path
from typing import Callable, Iterable

from ..models import TrackedFileSet


class TrackedFiles:
    """Lists the files git tracks in a repository."""

    def __init__(self, runner: Callable[..., str] | None = None) -> None:
        self._runner = runner or self._default_runner

    def list(self, repo_path: Path | str) -> TrackedFileSet:
        repo = Path(repo_path)
        if not (repo / ".git").exists():
            raise RuntimeError(f"{repo} is not a Git repository")

        output = self._run(["git", "ls-files", "-z"], cwd=repo)
        paths = tuple(entry for entry in output.split("\0") if entry)
        return TrackedFileSet(root=repo, paths=paths)

    def _run(self, args: Iterable[str], *, cwd: Path) -> str:
        return self._runner(args, cwd=cwd)

    @staticmethod
    def _default_runner(args: Iterable[str], *, cwd: Path) -> str:
        # Paths are raw bytes under -z; keep undecodable names round-trippable.
        completed = subprocess.run(
            list(args),
            cwd=str(cwd),
            check=True,
            capture_output=True,
        )
        return os.fsdecode(completed.stdout)


def find_repo_root(
    start: Path | str,
    runner: Callable[..., subprocess.CompletedProcess] | None = None,
) -> Path:
    """Return the top-level directory of the repository containing ``start``.

    Falls back to ``start`` itself when git cannot answer (not a repository,
    git missing), leaving the caller to report the problem.
    """
    start_path = Path(start).expanduser().resolve()
    run = runner or subprocess.run
    try:
        result = run(
            ["git", "rev-parse", "--show-toplevel"],
            cwd=str(start_path),
            capture_output=True,
            text=True,
            check=False,
        )
    except OSError:
        return start_path
    if result.returncode == 0 and result.stdout.strip():
        return Path(result.stdout.strip())
    return start_path
