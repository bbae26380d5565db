"""Tests for installing hook shims."""

from __future__ import annotations

import os
import shutil
import subprocess
from pathlib import Path

import pytest

from hookrun.git.install import SHIM_MARKER, install_hooks, resolve_hooks_dir

requires_git = pytest.mark.skipif(shutil.which("git") is None, reason="git is not installed")


def _make_repo(tmp_path: Path) -> Path:
    repo = tmp_path / "repo"
    (repo / ".git").mkdir(parents=True)
    return repo


def _git_path(location: str):  # type: ignore[no-untyped-def]
    calls: list[list[str]] = []

    def run(args, **kwargs):  # type: ignore[no-untyped-def]
        calls.append(list(args))
        return subprocess.CompletedProcess(args, 0, stdout=f"{location}\n", stderr="")

    run.calls = calls  # type: ignore[attr-defined]
    return run


def _git(repo: Path, *args: str) -> None:
    subprocess.run(["git", *args], cwd=repo, check=True, capture_output=True)


def test_install_writes_executable_shims(tmp_path: Path) -> None:
    repo = _make_repo(tmp_path)
    runner = _git_path(".git/hooks")

    written = install_hooks(repo, runner=runner)

    hooks = repo / ".git" / "hooks"
    assert written == [hooks / "pre-commit", hooks / "prepare-commit-msg"]
    for path in written:
        assert os.access(path, os.X_OK)
        assert SHIM_MARKER in path.read_text(encoding="utf-8")
    assert 'exec hookrun prepare-commit-msg "$@"' in written[1].read_text(encoding="utf-8")
    assert runner.calls == [["git", "rev-parse", "--git-path", "hooks"]]


def test_install_is_idempotent(tmp_path: Path) -> None:
    repo = _make_repo(tmp_path)
    runner = _git_path(".git/hooks")
    install_hooks(repo, runner=runner)

    assert len(install_hooks(repo, runner=runner)) == 2


def test_install_refuses_to_replace_foreign_hook(tmp_path: Path) -> None:
    repo = _make_repo(tmp_path)
    runner = _git_path(".git/hooks")
    hooks = repo / ".git" / "hooks"
    hooks.mkdir()
    custom = hooks / "pre-commit"
    custom.write_text("#!/bin/sh\nmake lint\n", encoding="utf-8")

    with pytest.raises(FileExistsError):
        install_hooks(repo, runner=runner)

    assert custom.read_text(encoding="utf-8") == "#!/bin/sh\nmake lint\n"
    assert not (hooks / "prepare-commit-msg").exists()

    install_hooks(repo, force=True, runner=runner)
    assert SHIM_MARKER in custom.read_text(encoding="utf-8")


def test_install_uses_absolute_hooks_location(tmp_path: Path) -> None:
    repo = _make_repo(tmp_path)
    worktree_hooks = tmp_path / "main" / ".git" / "hooks"

    written = install_hooks(repo, runner=_git_path(str(worktree_hooks)))

    assert written[0] == worktree_hooks / "pre-commit"
    assert not (repo / ".git" / "hooks").exists()


def test_install_requires_repository(tmp_path: Path) -> None:
    def not_a_repo(args, **kwargs):  # type: ignore[no-untyped-def]
        return subprocess.CompletedProcess(args, 128, stdout="", stderr="fatal: not a git repository")

    def missing_git(args, **kwargs):  # type: ignore[no-untyped-def]
        raise FileNotFoundError("git")

    with pytest.raises(RuntimeError):
        install_hooks(tmp_path, runner=not_a_repo)
    with pytest.raises(RuntimeError):
        install_hooks(tmp_path, runner=missing_git)


@requires_git
def test_hooks_dir_honours_core_hooks_path(tmp_path: Path) -> None:
    repo = tmp_path / "repo"
    repo.mkdir()
    _git(repo, "init", "-q")
    _git(repo, "config", "core.hooksPath", ".githooks")

    written = install_hooks(repo)

    assert written[0] == repo / ".githooks" / "pre-commit"
    assert not (repo / ".git" / "hooks" / "pre-commit").exists()


@requires_git
def test_hooks_dir_for_linked_worktree(tmp_path: Path) -> None:
    main = tmp_path / "main"
    main.mkdir()
    _git(main, "init", "-q")
    (main / "README").write_text("hi\n", encoding="utf-8")
    _git(main, "add", "README")
    _git(
        main,
        "-c", "user.name=Dev", "-c", "user.email=dev@example.com", "-c", "commit.gpgsign=false",
        "commit", "-q", "-m", "init",
    )
    linked = tmp_path / "linked"
    _git(main, "worktree", "add", "-q", str(linked))

    assert (linked / ".git").is_file()
    assert resolve_hooks_dir(linked).resolve() == (main / ".git" / "hooks").resolve()
