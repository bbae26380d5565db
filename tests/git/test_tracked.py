"""Tests for tracked file listing and repository discovery."""

from __future__ import annotations

import os
import shutil
import subprocess
from pathlib import Path

import pytest

from hookrun.git.tracked import TrackedFiles, find_repo_root


def _make_repo(tmp_path: Path) -> Path:
    repo = tmp_path / "repo"
    repo.mkdir()
    (repo / ".git").mkdir()
    return repo


def test_list_parses_nul_separated_output(tmp_path: Path) -> None:
    repo = _make_repo(tmp_path)
    calls: list[tuple[list[str], Path]] = []

    def runner(args, cwd):  # type: ignore[no-untyped-def]
        calls.append((list(args), Path(cwd)))
        return "a.py\0dir/with space.sh\0"

    file_set = TrackedFiles(runner=runner).list(repo)

    assert file_set.root == repo
    assert file_set.paths == ("a.py", "dir/with space.sh")
    assert calls == [(["git", "ls-files", "-z"], repo)]


def test_list_rejects_non_repository(tmp_path: Path) -> None:
    with pytest.raises(RuntimeError):
        TrackedFiles(runner=lambda args, cwd: "").list(tmp_path)


def test_find_repo_root_uses_git_toplevel(tmp_path: Path) -> None:
    def run(args, **kwargs):  # type: ignore[no-untyped-def]
        assert args == ["git", "rev-parse", "--show-toplevel"]
        return subprocess.CompletedProcess(args, 0, stdout="/srv/project\n", stderr="")

    assert find_repo_root(tmp_path, runner=run) == Path("/srv/project")


def test_find_repo_root_falls_back_to_start(tmp_path: Path) -> None:
    def fails(args, **kwargs):  # type: ignore[no-untyped-def]
        return subprocess.CompletedProcess(args, 128, stdout="", stderr="not a git repository")

    def missing_git(args, **kwargs):  # type: ignore[no-untyped-def]
        raise FileNotFoundError("git")

    assert find_repo_root(tmp_path, runner=fails) == tmp_path.resolve()
    assert find_repo_root(tmp_path, runner=missing_git) == tmp_path.resolve()


@pytest.mark.skipif(shutil.which("git") is None, reason="git is not installed")
def test_list_keeps_undecodable_file_names(tmp_path: Path) -> None:
    repo = tmp_path / "repo"
    repo.mkdir()
    subprocess.run(["git", "init", "-q"], cwd=repo, check=True)
    (repo / "ok.sh").write_text("#!/bin/sh\n", encoding="utf-8")
    latin1_name = os.fsdecode(b"caf\xe9.txt")
    (repo / latin1_name).write_text("menu\n", encoding="utf-8")
    subprocess.run(["git", "add", "ok.sh", latin1_name], cwd=repo, check=True)

    file_set = TrackedFiles().list(repo)

    assert sorted(file_set.paths) == sorted(["ok.sh", latin1_name])
    assert (repo / latin1_name).is_file()
